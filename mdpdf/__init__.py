"""
mdpdf - Markdown to styled PDF

Markdown is tokenized into structural events, rendered to HTML with
highlighted code blocks, wrapped in a margin-parameterized stylesheet and
printed to PDF by a headless browser.
"""

__version__ = '0.1.0'
