"""
Markdown tokenizer adapter

Wraps markdown-it-py and re-expresses its token list as a lazy stream of
MarkdownEvents. The Markdown grammar itself is entirely markdown-it-py's:
unterminated fences run to the end of the document and unmatched emphasis
delimiters stay literal text, per CommonMark.
"""

from typing import Dict, Iterable, Iterator, List, Optional
import logging
import re

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin

from .events import (
    BlockKind,
    CodeBlock,
    CodeSpan,
    EndBlock,
    FootnoteReference,
    HardBreak,
    HtmlFragment,
    ImageStart,
    LinkStart,
    MarkdownEvent,
    SoftBreak,
    StartBlock,
    TableRow,
    TaskMarker,
    Text,
    ThematicBreak,
)


logger = logging.getLogger(__name__)


_TASK_RE = re.compile(r'^\[([ xX])\][ \t]+')
_ALIGN_RE = re.compile(r'text-align:\s*(left|center|right)')

# markdown-it block token type (without _open/_close) -> block kind
_BLOCK_KINDS = {
    'paragraph': BlockKind.PARAGRAPH,
    'blockquote': BlockKind.BLOCKQUOTE,
    'bullet_list': BlockKind.BULLET_LIST,
    'ordered_list': BlockKind.ORDERED_LIST,
    'list_item': BlockKind.LIST_ITEM,
    'footnote_block': BlockKind.FOOTNOTES,
}

_INLINE_KINDS = {
    'em': BlockKind.EMPHASIS,
    'strong': BlockKind.STRONG,
    's': BlockKind.STRIKETHROUGH,
}

# Structural tokens with no event of their own
_IGNORED = {
    'thead_open', 'thead_close', 'tbody_open', 'tbody_close',
    'footnote_anchor',
}

_PARSERS: Dict[bool, MarkdownIt] = {}


def _build_markdown_parser(allow_raw_html: bool) -> MarkdownIt:
    md = MarkdownIt('commonmark', {'html': allow_raw_html})
    md.enable(['table', 'strikethrough'])
    md.use(footnote_plugin)
    return md


def get_markdown_parser(allow_raw_html: bool = False) -> MarkdownIt:
    if allow_raw_html not in _PARSERS:
        _PARSERS[allow_raw_html] = _build_markdown_parser(allow_raw_html)
    return _PARSERS[allow_raw_html]


def _footnote_label(token: Token) -> str:
    meta = token.meta or {}
    label = meta.get('label')
    if label:
        return str(label)
    return str(meta.get('id', 0) + 1)


def _image_alt(token: Token) -> str:
    if token.children:
        return ''.join(child.content for child in token.children)
    return token.content or ''


def _inline_events(children: Optional[List[Token]]) -> Iterator[MarkdownEvent]:
    for child in children or []:
        kind = child.type
        if kind == 'text':
            if child.content:
                yield Text(child.content)
        elif kind == 'code_inline':
            yield CodeSpan(child.content)
        elif kind == 'softbreak':
            yield SoftBreak()
        elif kind == 'hardbreak':
            yield HardBreak()
        elif kind == 'link_open':
            yield LinkStart(str(child.attrGet('href') or ''), str(child.attrGet('title') or ''))
        elif kind == 'link_close':
            yield EndBlock(BlockKind.LINK)
        elif kind == 'image':
            yield ImageStart(
                str(child.attrGet('src') or ''),
                _image_alt(child),
                str(child.attrGet('title') or ''),
            )
        elif kind == 'html_inline':
            yield HtmlFragment(child.content, inline=True)
        elif kind == 'footnote_ref':
            yield FootnoteReference(_footnote_label(child))
        elif kind.endswith('_open') and kind[:-5] in _INLINE_KINDS:
            yield StartBlock(_INLINE_KINDS[kind[:-5]])
        elif kind.endswith('_close') and kind[:-6] in _INLINE_KINDS:
            yield EndBlock(_INLINE_KINDS[kind[:-6]])
        elif child.content:
            logger.debug(f"Unhandled inline token '{kind}', keeping its text")
            yield Text(child.content)


def _task_events(inline: Token) -> Iterator[MarkdownEvent]:
    """Inline events of a list item's first line, with a leading [ ]/[x] marker lifted out."""
    children = list(inline.children or [])
    if children and children[0].type == 'text':
        match = _TASK_RE.match(children[0].content)
        if match:
            yield TaskMarker(checked=match.group(1) in 'xX')
            rest = children[0].content[match.end():]
            if rest:
                yield Text(rest)
            children = children[1:]
    yield from _inline_events(children)


def _alignment(token: Token) -> Optional[str]:
    match = _ALIGN_RE.search(str(token.attrGet('style') or ''))
    return match.group(1) if match else None


def events_from_tokens(tokens: Iterable[Token]) -> Iterator[MarkdownEvent]:
    """
    Convert markdown-it block tokens into MarkdownEvents.

    Args:
        tokens: Token list as returned by MarkdownIt.parse()

    Yields:
        MarkdownEvents in document order
    """
    task_candidate = False
    row: Optional[List[tuple]] = None
    alignments: List[Optional[str]] = []
    cell_alignment: Optional[str] = None

    for token in tokens:
        kind = token.type

        if kind in _IGNORED:
            continue

        if row is not None:
            # Inside a table row: gather cells until tr_close
            if kind in ('th_open', 'td_open'):
                cell_alignment = _alignment(token)
            elif kind == 'inline':
                row.append(tuple(_inline_events(token.children)))
                alignments.append(cell_alignment)
            elif kind == 'tr_close':
                yield TableRow(tuple(row), tuple(alignments))
                row = None
            continue

        if kind == 'inline':
            if task_candidate:
                task_candidate = False
                yield from _task_events(token)
            else:
                yield from _inline_events(token.children)
        elif kind == 'heading_open':
            yield StartBlock(BlockKind.HEADING, level=int(token.tag[1]))
        elif kind == 'heading_close':
            yield EndBlock(BlockKind.HEADING, level=int(token.tag[1]))
        elif kind in ('paragraph_open', 'paragraph_close') and token.hidden:
            # Tight list paragraphs carry no markup
            continue
        elif kind == 'ordered_list_open':
            start = token.attrGet('start')
            yield StartBlock(BlockKind.ORDERED_LIST, start=int(start) if start is not None else 1)
        elif kind == 'list_item_open':
            task_candidate = True
            yield StartBlock(BlockKind.LIST_ITEM)
        elif kind == 'footnote_open':
            yield StartBlock(BlockKind.FOOTNOTE_DEFINITION, label=_footnote_label(token))
        elif kind == 'footnote_close':
            yield EndBlock(BlockKind.FOOTNOTE_DEFINITION)
        elif kind == 'table_open':
            yield StartBlock(BlockKind.TABLE)
        elif kind == 'table_close':
            yield EndBlock(BlockKind.TABLE)
        elif kind == 'tr_open':
            row = []
            alignments = []
        elif kind.endswith('_open') and kind[:-5] in _BLOCK_KINDS:
            yield StartBlock(_BLOCK_KINDS[kind[:-5]])
        elif kind.endswith('_close') and kind[:-6] in _BLOCK_KINDS:
            yield EndBlock(_BLOCK_KINDS[kind[:-6]])
        elif kind == 'fence':
            info = (token.info or '').strip()
            yield CodeBlock(info.split()[0] if info else None, token.content)
        elif kind == 'code_block':
            yield CodeBlock(None, token.content)
        elif kind == 'hr':
            yield ThematicBreak()
        elif kind == 'html_block':
            yield HtmlFragment(token.content)
        elif token.nesting == 0 and token.content:
            logger.debug(f"Unhandled block token '{kind}', keeping its text")
            yield Text(token.content)
        else:
            logger.debug(f"Skipping block token '{kind}'")

        if kind not in ('list_item_open', 'paragraph_open'):
            task_candidate = False


def tokenize(markdown_text: str, *, allow_raw_html: bool = False) -> Iterator[MarkdownEvent]:
    """
    Tokenize Markdown source into a lazy event stream.

    Args:
        markdown_text: Markdown source
        allow_raw_html: Parse inline/block HTML into HtmlFragment events

    Returns:
        Iterator over MarkdownEvents
    """
    tokens = get_markdown_parser(allow_raw_html).parse(markdown_text or '')
    return events_from_tokens(tokens)
