"""
Syntax highlighting for fenced code blocks

Decomposes a code block into HighlightSpans using Pygments lexers and maps
each lexical category onto a fixed dark theme (base16 ocean). Highlighting
never fails: unknown languages and lexer problems degrade to plain text.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from django.utils.html import escape
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.token import Token
from pygments.util import ClassNotFound


logger = logging.getLogger(__name__)


PLAIN = 'plain'

# Foreground colours for every style class. Background is THEME_BACKGROUND.
THEME_BACKGROUND = '#2b303b'
THEME_FOREGROUND = '#c0c5ce'

THEME = {
    'keyword': 'color: #b48ead',
    'string': 'color: #a3be8c',
    'comment': 'color: #65737e; font-style: italic',
    'number': 'color: #d08770',
    'function': 'color: #8fa1b3',
    'type': 'color: #ebcb8b',
    'punctuation': 'color: #c0c5ce',
    'operator': 'color: #96b5b4',
    'identifier': 'color: #bf616a',
    PLAIN: 'color: #c0c5ce',
}

STYLE_CLASSES = tuple(THEME)

# Pygments token type -> style class. Lookup walks up the token hierarchy,
# so only the most specific types that differ from their parent are listed.
TOKEN_STYLE_CLASSES = {
    Token: PLAIN,
    Token.Text: PLAIN,
    Token.Error: PLAIN,
    Token.Generic: PLAIN,
    Token.Other: PLAIN,
    Token.Keyword: 'keyword',
    Token.Keyword.Type: 'type',
    Token.Operator: 'operator',
    Token.Operator.Word: 'keyword',
    Token.Punctuation: 'punctuation',
    Token.Comment: 'comment',
    Token.Literal: 'number',
    Token.Literal.String: 'string',
    Token.Literal.Number: 'number',
    Token.Name: 'identifier',
    Token.Name.Builtin: 'function',
    Token.Name.Builtin.Pseudo: 'keyword',
    Token.Name.Function: 'function',
    Token.Name.Function.Magic: 'function',
    Token.Name.Decorator: 'function',
    Token.Name.Class: 'type',
    Token.Name.Namespace: 'type',
    Token.Name.Exception: 'type',
    Token.Name.Constant: 'number',
    Token.Name.Tag: 'keyword',
    Token.Name.Attribute: 'type',
}


@dataclass(frozen=True)
class HighlightSpan:
    text: str
    style_class: str


def style_class_for(token_type) -> str:
    """Resolve a Pygments token type to one of STYLE_CLASSES."""
    while token_type is not None:
        style_class = TOKEN_STYLE_CLASSES.get(token_type)
        if style_class is not None:
            return style_class
        token_type = token_type.parent
    return PLAIN


def _find_lexer(language: Optional[str]):
    if not language or not language.strip():
        return None
    language = language.strip()
    options = {'stripnl': False, 'ensurenl': False, 'stripall': False}
    try:
        return get_lexer_by_name(language, **options)
    except ClassNotFound:
        pass
    try:
        # Fence languages are often file extensions ("rs", "yml")
        return get_lexer_for_filename(f'code.{language}', **options)
    except ClassNotFound:
        return None


def highlight(language: Optional[str], content: str) -> List[HighlightSpan]:
    """
    Split a code block into styled spans.

    Args:
        language: Declared fence language, or None
        content: Raw code block text

    Returns:
        Ordered list of HighlightSpan whose texts concatenate to content
    """
    if not content:
        return []

    lexer = _find_lexer(language)
    if lexer is None:
        if language:
            logger.info(f"No lexer for language '{language}', rendering as plain text")
        return [HighlightSpan(content, PLAIN)]

    spans: List[HighlightSpan] = []
    try:
        # get_tokens() would normalise line endings; the unprocessed stream
        # works on the raw text.
        for _, token_type, value in lexer.get_tokens_unprocessed(content):
            if not value:
                continue
            style_class = style_class_for(token_type)
            if spans and spans[-1].style_class == style_class:
                spans[-1] = HighlightSpan(spans[-1].text + value, style_class)
            else:
                spans.append(HighlightSpan(value, style_class))
    except Exception as e:
        logger.info(f"Highlighting '{language}' failed ({e}), rendering as plain text")
        return [HighlightSpan(content, PLAIN)]

    if ''.join(span.text for span in spans) != content:
        logger.info(f"Lexer for '{language}' did not preserve the source, rendering as plain text")
        return [HighlightSpan(content, PLAIN)]

    return spans


def render_spans(spans: List[HighlightSpan]) -> str:
    """Render spans as HTML with inline theme styles."""
    return ''.join(
        f'<span class="hl-{span.style_class}" style="{THEME[span.style_class]}">'
        f'{escape(span.text)}</span>'
        for span in spans
    )
