"""
HTML Sanitizer for raw HTML in Markdown sources

Raw HTML is only passed to the renderer when MDPDF_ALLOW_RAW_HTML is on, and
then only after bleach has stripped everything outside the allowlist. Script
and style elements, event handlers and javascript: URLs never reach Chromium.
"""

import logging

import bleach
from bleach.css_sanitizer import CSSSanitizer


logger = logging.getLogger(__name__)


ALLOWED_TAGS = [
    'p', 'br', 'strong', 'b', 'em', 'i', 'u', 's', 'del', 'ins', 'mark',
    'sub', 'sup', 'small', 'kbd', 'abbr',
    'a', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
    'blockquote', 'ol', 'ul', 'li', 'dl', 'dt', 'dd', 'pre', 'code',
    'span', 'div', 'details', 'summary', 'figure', 'figcaption',
    'table', 'thead', 'tbody', 'tr', 'th', 'td',
    'img', 'hr',
]

ALLOWED_ATTRIBUTES = {
    '*': ['class', 'id', 'style', 'title'],
    'a': ['href', 'title'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
    'td': ['colspan', 'rowspan', 'align'],
    'th': ['colspan', 'rowspan', 'align'],
    'ol': ['start'],
}

ALLOWED_PROTOCOLS = ['http', 'https', 'mailto', 'file', 'data']

ALLOWED_CSS_PROPERTIES = [
    'color', 'background-color', 'font-size', 'font-weight', 'font-style',
    'text-align', 'text-decoration', 'margin', 'padding', 'width', 'height',
    'border', 'vertical-align',
]

css_sanitizer = CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)


def sanitize_html(html: str) -> str:
    """
    Sanitize a raw HTML fragment taken from a Markdown source.

    Args:
        html: Raw HTML fragment

    Returns:
        Sanitized HTML string
    """
    if not html:
        return ''

    clean_html = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        css_sanitizer=css_sanitizer,
        strip=True,
    )
    if clean_html != html:
        logger.debug("Raw HTML fragment was altered by sanitization")
    return clean_html
