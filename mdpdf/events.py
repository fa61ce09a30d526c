"""
Markdown structural events

The tokenizer turns Markdown source into a forward-only stream of these
events; the HTML transformer consumes them in order, exactly once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class BlockKind(str, Enum):
    """Kinds of blocks opened by StartBlock and closed by EndBlock"""

    PARAGRAPH = 'paragraph'
    HEADING = 'heading'
    BLOCKQUOTE = 'blockquote'
    BULLET_LIST = 'bullet_list'
    ORDERED_LIST = 'ordered_list'
    LIST_ITEM = 'list_item'
    EMPHASIS = 'emphasis'
    STRONG = 'strong'
    STRIKETHROUGH = 'strikethrough'
    LINK = 'link'
    TABLE = 'table'
    FOOTNOTES = 'footnotes'
    FOOTNOTE_DEFINITION = 'footnote_definition'


class MarkdownEvent:
    """Base class of all events"""

    @property
    def text_content(self) -> str:
        """Plain-text rendition, used when an event cannot be rendered."""
        return ''


@dataclass(frozen=True)
class StartBlock(MarkdownEvent):
    kind: BlockKind
    level: Optional[int] = None
    start: Optional[int] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class EndBlock(MarkdownEvent):
    kind: BlockKind
    level: Optional[int] = None


@dataclass(frozen=True)
class Text(MarkdownEvent):
    text: str

    @property
    def text_content(self) -> str:
        return self.text


@dataclass(frozen=True)
class CodeSpan(MarkdownEvent):
    code: str

    @property
    def text_content(self) -> str:
        return self.code


@dataclass(frozen=True)
class CodeBlock(MarkdownEvent):
    language: Optional[str]
    content: str

    @property
    def text_content(self) -> str:
        return self.content


@dataclass(frozen=True)
class LinkStart(MarkdownEvent):
    """Opens a LINK block; closed by EndBlock(BlockKind.LINK)."""

    url: str
    title: str = ''


@dataclass(frozen=True)
class ImageStart(MarkdownEvent):
    """Self-contained image; the alt text travels with the event."""

    url: str
    alt: str = ''
    title: str = ''

    @property
    def text_content(self) -> str:
        return self.alt


@dataclass(frozen=True)
class ThematicBreak(MarkdownEvent):
    pass


@dataclass(frozen=True)
class TableRow(MarkdownEvent):
    """
    One table row.

    cells holds one tuple of inline events per cell; alignments holds
    'left', 'center', 'right' or None per column.
    """

    cells: Tuple[Tuple[MarkdownEvent, ...], ...]
    alignments: Tuple[Optional[str], ...] = ()

    @property
    def text_content(self) -> str:
        return ' | '.join(
            ''.join(event.text_content for event in cell) for cell in self.cells
        )


@dataclass(frozen=True)
class TaskMarker(MarkdownEvent):
    checked: bool


@dataclass(frozen=True)
class SoftBreak(MarkdownEvent):

    @property
    def text_content(self) -> str:
        return '\n'


@dataclass(frozen=True)
class HardBreak(MarkdownEvent):

    @property
    def text_content(self) -> str:
        return '\n'


@dataclass(frozen=True)
class FootnoteReference(MarkdownEvent):
    label: str

    @property
    def text_content(self) -> str:
        return f'[{self.label}]'


@dataclass(frozen=True)
class HtmlFragment(MarkdownEvent):
    """
    Raw HTML from the source, only produced when raw HTML is enabled.

    inline is set for tags inside a paragraph (e.g. <b> in "a <b>x</b>"),
    which are only meaningful together with the text around them.
    """

    html: str
    inline: bool = False

    @property
    def text_content(self) -> str:
        return self.html
