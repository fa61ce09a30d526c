from django.apps import AppConfig


class MdPdfConfig(AppConfig):
    name = 'mdpdf'
    verbose_name = 'Markdown to PDF'
