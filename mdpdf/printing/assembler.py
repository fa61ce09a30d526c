"""
Document Assembler

Wraps an HTML fragment in a complete HTML document with the stylesheet
inlined. Everything the renderer needs is inside the document: no web fonts,
no external stylesheets, so rendering needs no network access.
"""

import html
import logging
import re

from django.template.loader import render_to_string
from django.utils.html import strip_tags

from ..highlighting import THEME_BACKGROUND, THEME_FOREGROUND
from .dto import AssembledDocument, RenderConfig


logger = logging.getLogger(__name__)


DOCUMENT_TEMPLATE = 'mdpdf/document.html'
STYLESHEET_TEMPLATE = 'mdpdf/document.css'
DEFAULT_TITLE = 'Document'

_H1_RE = re.compile(r'<h1>(.*?)</h1>', re.DOTALL)


def first_heading(html_body: str) -> str:
    """Plain text of the first level-one heading, or an empty string."""
    match = _H1_RE.search(html_body or '')
    if not match:
        return ''
    return html.unescape(strip_tags(match.group(1))).strip()


def render_stylesheet(margin_px: int) -> str:
    """Render the document stylesheet for a page margin."""
    return render_to_string(STYLESHEET_TEMPLATE, {
        'margin_px': str(margin_px),
        'code_background': THEME_BACKGROUND,
        'code_foreground': THEME_FOREGROUND,
    })


def assemble(html_body: str, config: RenderConfig) -> AssembledDocument:
    """
    Assemble a printable document.

    Args:
        html_body: HTML fragment from the transformer
        config: Render configuration (margin, title)

    Returns:
        AssembledDocument; identical arguments give an identical document
    """
    css = render_stylesheet(config.margin_px)
    title = config.title or first_heading(html_body) or DEFAULT_TITLE

    logger.debug(f"Assembling document '{title}' with {config.margin_px}px margins")
    document = render_to_string(DOCUMENT_TEMPLATE, {
        'title': title,
        'css': css,
        'body': html_body,
    })

    return AssembledDocument(
        html_body=html_body,
        css=css,
        html=document,
        margin_px=config.margin_px,
    )
