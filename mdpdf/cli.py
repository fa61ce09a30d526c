"""
Console entry point: ``mdpdf INPUT [-o OUTPUT] [-m MARGIN] ...``

Boots Django with the standalone settings (unless DJANGO_SETTINGS_MODULE
points elsewhere) and runs the md2pdf management command.
"""

import os
import sys

import django
from django.core.management import execute_from_command_line


def main(argv=None):
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'mdpdf.settings')
    django.setup()

    argv = sys.argv[1:] if argv is None else list(argv)
    execute_from_command_line(['mdpdf', 'md2pdf', *argv])


if __name__ == '__main__':
    main()
