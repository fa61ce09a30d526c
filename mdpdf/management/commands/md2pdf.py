"""
Django management command converting a Markdown file to PDF.
"""

import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from mdpdf.conf import build_render_config, get_setting
from mdpdf.exceptions import MdPdfError
from mdpdf.printing import MarkdownPdfService, get_renderer

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Convert a Markdown file into a styled PDF'

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            'input',
            help='Input Markdown file',
        )
        parser.add_argument(
            '-o', '--output',
            help='Output PDF file (default: input file name with .pdf extension)',
        )
        parser.add_argument(
            '-m', '--margin',
            type=int,
            default=None,
            help=f"Page margin in pixels (default: {get_setting('MARGIN_PX')})",
        )
        parser.add_argument(
            '--renderer',
            default=None,
            help=f"Rendering engine (default: {get_setting('RENDERER')})",
        )
        parser.add_argument(
            '--timeout',
            type=float,
            default=None,
            help='Render deadline in seconds',
        )
        parser.add_argument(
            '--title',
            default=None,
            help='Document title (default: first level-one heading)',
        )

    def handle(self, *args, **options):
        """Execute the conversion."""
        if options['verbosity'] >= 2:
            logging.getLogger('mdpdf').setLevel(logging.DEBUG)

        input_path = Path(options['input'])
        if not input_path.is_file():
            raise CommandError(f"Input file not found: {input_path}")

        margin = options['margin']
        if margin is not None and margin < 0:
            raise CommandError(f"Margin must be zero or positive, got {margin}")

        try:
            markdown_text = input_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise CommandError(f"Error reading file {input_path}: {e}")

        config = build_render_config(
            margin_px=margin,
            output_path=options['output'],
            input_path=input_path,
            title=options['title'],
        )

        try:
            renderer = get_renderer(options['renderer']) if options['renderer'] else None
        except KeyError as e:
            raise CommandError(str(e.args[0]))

        try:
            service = MarkdownPdfService(renderer=renderer, timeout=options['timeout'])
            result = service.render(markdown_text, config)
        except MdPdfError as e:
            raise CommandError(f"{type(e).__name__}: {e}")

        try:
            config.output_path.parent.mkdir(parents=True, exist_ok=True)
            config.output_path.write_bytes(result.pdf_bytes)
        except OSError as e:
            raise CommandError(f"Error writing file {config.output_path}: {e}")

        self.stdout.write(self.style.SUCCESS(f"✓ PDF generated successfully: {config.output_path}"))
