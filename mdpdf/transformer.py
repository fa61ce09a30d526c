"""
Markdown event stream to HTML transformer

Consumes MarkdownEvents in a single pass and produces an HTML fragment.
Open blocks are tracked on a stack so that every EndBlock closes the block
it belongs to; broken nesting raises StructuralError, anything else that
cannot be rendered degrades to its plain text.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from django.utils.html import escape

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
from .exceptions import StructuralError
from .highlighting import PLAIN, highlight, render_spans
from .sanitizer import sanitize_html


logger = logging.getLogger(__name__)


_TAGS = {
    BlockKind.PARAGRAPH: 'p',
    BlockKind.BLOCKQUOTE: 'blockquote',
    BlockKind.BULLET_LIST: 'ul',
    BlockKind.ORDERED_LIST: 'ol',
    BlockKind.LIST_ITEM: 'li',
    BlockKind.EMPHASIS: 'em',
    BlockKind.STRONG: 'strong',
    BlockKind.STRIKETHROUGH: 'del',
    BlockKind.LINK: 'a',
    BlockKind.FOOTNOTES: 'section',
    BlockKind.FOOTNOTE_DEFINITION: 'div',
}

# Closing tags of these kinds are followed by a newline
_BLOCK_LEVEL = {
    BlockKind.PARAGRAPH,
    BlockKind.HEADING,
    BlockKind.BLOCKQUOTE,
    BlockKind.BULLET_LIST,
    BlockKind.ORDERED_LIST,
    BlockKind.LIST_ITEM,
    BlockKind.FOOTNOTES,
    BlockKind.FOOTNOTE_DEFINITION,
}


def quote_url(url: str) -> str:
    """URLs are passed through; only a double quote would break the attribute."""
    return (url or '').replace('"', '%22')


def _heading_level(level: Optional[int]) -> int:
    return min(max(level or 1, 1), 6)


class _TableBuilder:
    """Accumulates TableRows; the first row to arrive is the header."""

    def __init__(self):
        self.rows: List[TableRow] = []

    def add(self, row: TableRow) -> None:
        self.rows.append(row)

    def render(self, render_cell) -> str:
        if not self.rows:
            return '<table></table>\n'
        header, body = self.rows[0], self.rows[1:]
        parts = ['<table>\n<thead>\n', self._row(header, 'th', render_cell), '</thead>\n']
        if body:
            parts.append('<tbody>\n')
            parts.extend(self._row(row, 'td', render_cell) for row in body)
            parts.append('</tbody>\n')
        parts.append('</table>\n')
        return ''.join(parts)

    @staticmethod
    def _row(row: TableRow, tag: str, render_cell) -> str:
        cells = []
        for index, cell in enumerate(row.cells):
            align = row.alignments[index] if index < len(row.alignments) else None
            style = f' style="text-align: {align}"' if align else ''
            cells.append(f'<{tag}{style}>{render_cell(cell)}</{tag}>')
        return '<tr>' + ''.join(cells) + '</tr>\n'


class HtmlTransformer:
    """
    Single-use transformer from MarkdownEvents to an HTML fragment.

    Usage:
        transformer = HtmlTransformer()
        for event in events:
            transformer.feed(event)
        html = transformer.finish()
    """

    def __init__(self, *, allow_raw_html: bool = False, footnotes: Optional[Dict[str, int]] = None):
        """
        Initialize the transformer.

        Args:
            allow_raw_html: Emit sanitized HtmlFragments instead of escaping them
            footnotes: Shared footnote label -> number map (used for table cells)
        """
        self.allow_raw_html = allow_raw_html
        self._parts: List[str] = []
        self._stack: List[StartBlock] = []
        self._tables: List[_TableBuilder] = []
        self._footnotes = footnotes if footnotes is not None else {}
        # (index into _parts, stack depth) where unsanitized inline HTML began
        self._raw_run: Optional[Tuple[int, int]] = None
        self._handlers = {
            StartBlock: self._start_block,
            EndBlock: self._end_block,
            Text: self._text,
            CodeSpan: self._code_span,
            CodeBlock: self._code_block,
            LinkStart: self._link_start,
            ImageStart: self._image,
            ThematicBreak: self._thematic_break,
            TableRow: self._table_row,
            TaskMarker: self._task_marker,
            SoftBreak: self._soft_break,
            HardBreak: self._hard_break,
            FootnoteReference: self._footnote_reference,
            HtmlFragment: self._html_fragment,
        }

    @property
    def emitted_html(self) -> str:
        if self._raw_run is None:
            return ''.join(self._parts)
        start = self._raw_run[0]
        return ''.join(self._parts[:start]) + sanitize_html(''.join(self._parts[start:]))

    def feed(self, event: MarkdownEvent) -> None:
        handler = self._handlers.get(type(event), self._unknown)
        handler(event)

    def finish(self) -> str:
        if self._stack:
            open_kinds = ', '.join(block.kind.value for block in self._stack)
            raise StructuralError(
                f"Event stream ended with unclosed blocks: {open_kinds}",
                self.emitted_html,
            )
        self._flush_raw_run()
        return self.emitted_html

    # Blocks

    def _open(self, block: StartBlock, tag: str) -> None:
        self._stack.append(block)
        self._parts.append(tag)

    def _start_block(self, event: StartBlock) -> None:
        kind = event.kind
        if kind == BlockKind.HEADING:
            self._open(event, f'<h{_heading_level(event.level)}>')
        elif kind == BlockKind.ORDERED_LIST and event.start not in (None, 1):
            self._open(event, f'<ol start="{int(event.start)}">')
        elif kind == BlockKind.TABLE:
            self._tables.append(_TableBuilder())
            self._open(event, '')
        elif kind == BlockKind.FOOTNOTES:
            self._open(event, '<section class="footnotes">\n')
        elif kind == BlockKind.FOOTNOTE_DEFINITION:
            label = event.label or str(len(self._footnotes) + 1)
            number = self._footnote_number(label)
            self._open(
                event,
                f'<div class="footnote-definition" id="fn-{escape(label)}">'
                f'<sup class="footnote-label">{number}</sup> ',
            )
        else:
            self._open(event, f'<{_TAGS[kind]}>')

    def _end_block(self, event: EndBlock) -> None:
        if not self._stack:
            raise StructuralError(
                f"EndBlock({event.kind.value}) without a matching StartBlock",
                self.emitted_html,
            )
        top = self._stack[-1]
        if top.kind != event.kind or (
            event.kind == BlockKind.HEADING
            and event.level is not None
            and _heading_level(event.level) != _heading_level(top.level)
        ):
            raise StructuralError(
                f"EndBlock({event.kind.value}) does not close the open "
                f"{top.kind.value} block",
                self.emitted_html,
            )
        self._stack.pop()
        if self._raw_run is not None and len(self._stack) < self._raw_run[1]:
            self._flush_raw_run()

        if event.kind == BlockKind.TABLE:
            table = self._tables.pop()
            self._parts.append(table.render(self._render_cell))
            return
        if event.kind == BlockKind.HEADING:
            closing = f'</h{_heading_level(top.level)}>'
        else:
            closing = f'</{_TAGS[event.kind]}>'
        if event.kind in _BLOCK_LEVEL:
            closing += '\n'
        self._parts.append(closing)

    def _link_start(self, event: LinkStart) -> None:
        title = f' title="{escape(event.title)}"' if event.title else ''
        self._open(
            StartBlock(BlockKind.LINK),
            f'<a href="{quote_url(event.url)}"{title}>',
        )

    # Tables

    def _in_table(self) -> bool:
        return bool(self._stack) and self._stack[-1].kind == BlockKind.TABLE

    def _table_row(self, event: TableRow) -> None:
        if self._in_table():
            self._tables[-1].add(event)
        else:
            logger.debug("TableRow outside of a table, rendering as text")
            self._unknown(event)

    def _render_cell(self, cell) -> str:
        cell_transformer = HtmlTransformer(
            allow_raw_html=self.allow_raw_html,
            footnotes=self._footnotes,
        )
        try:
            for event in cell:
                cell_transformer.feed(event)
            return cell_transformer.finish()
        except StructuralError as e:
            raise StructuralError(f"In table cell: {e}", self.emitted_html) from e

    # Leaves

    def _text(self, event: Text) -> None:
        self._parts.append(escape(event.text))

    def _code_span(self, event: CodeSpan) -> None:
        self._parts.append(f'<code class="inline-code">{escape(event.code)}</code>')

    def _code_block(self, event: CodeBlock) -> None:
        self._flush_raw_run()
        language = (event.language or '').strip() or PLAIN
        spans = highlight(event.language, event.content)
        self._parts.append(
            f'<div class="code-block" data-lang="{escape(language)}">'
            f'<pre><code class="language-{escape(language)}">{render_spans(spans)}</code></pre>'
            f'</div>\n'
        )

    def _image(self, event: ImageStart) -> None:
        title = f' title="{escape(event.title)}"' if event.title else ''
        self._parts.append(
            f'<img src="{quote_url(event.url)}" alt="{escape(event.alt)}"{title} />'
        )

    def _thematic_break(self, event: ThematicBreak) -> None:
        self._parts.append('<hr />\n')

    def _task_marker(self, event: TaskMarker) -> None:
        checked = ' checked="checked"' if event.checked else ''
        self._parts.append(
            f'<input type="checkbox" class="task-list-item-checkbox" disabled="disabled"{checked} /> '
        )

    def _soft_break(self, event: SoftBreak) -> None:
        self._parts.append('\n')

    def _hard_break(self, event: HardBreak) -> None:
        self._parts.append('<br />\n')

    def _footnote_number(self, label: str) -> int:
        if label not in self._footnotes:
            self._footnotes[label] = len(self._footnotes) + 1
        return self._footnotes[label]

    def _footnote_reference(self, event: FootnoteReference) -> None:
        number = self._footnote_number(event.label)
        self._parts.append(
            f'<sup class="footnote-reference"><a href="#fn-{escape(event.label)}">{number}</a></sup>'
        )

    def _html_fragment(self, event: HtmlFragment) -> None:
        if not self.allow_raw_html:
            self._parts.append(escape(event.html))
        elif event.inline:
            # Sanitized together with the rest of the enclosing block, so
            # that an opening tag and its closing tag stay one element.
            if self._raw_run is None:
                self._raw_run = (len(self._parts), len(self._stack))
            self._parts.append(event.html)
        else:
            self._flush_raw_run()
            self._parts.append(sanitize_html(event.html))

    def _flush_raw_run(self) -> None:
        if self._raw_run is None:
            return
        start = self._raw_run[0]
        self._raw_run = None
        self._parts[start:] = [sanitize_html(''.join(self._parts[start:]))]

    def _unknown(self, event) -> None:
        self._parts.append(escape(getattr(event, 'text_content', '')))


def transform(events: Iterable[MarkdownEvent], *, allow_raw_html: bool = False) -> str:
    """
    Transform a Markdown event stream into an HTML fragment.

    Args:
        events: MarkdownEvents in document order (consumed once)
        allow_raw_html: Emit sanitized raw HTML fragments

    Returns:
        HTML fragment

    Raises:
        StructuralError: If Start/End events are not properly nested
    """
    transformer = HtmlTransformer(allow_raw_html=allow_raw_html)
    for event in events:
        transformer.feed(event)
    return transformer.finish()
