"""
Data Transfer Objects for the rendering pipeline
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RenderConfig:
    """
    Options for assembling and printing one document.

    margin_px is applied to all four page edges and is the only option that
    affects layout.
    """

    margin_px: int = 50
    output_path: Optional[Path] = None
    title: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.margin_px, bool) or not isinstance(self.margin_px, int):
            raise ValueError(f"margin_px must be an integer, got {self.margin_px!r}")
        if self.margin_px < 0:
            raise ValueError(f"margin_px must be >= 0, got {self.margin_px}")


@dataclass(frozen=True)
class AssembledDocument:
    """
    A complete, self-contained HTML document ready for printing.

    Attributes:
        html_body: HTML fragment produced by the transformer
        css: Stylesheet rendered for margin_px
        html: Full HTML document embedding css and html_body
        margin_px: Page margin the document was assembled for
    """

    html_body: str
    css: str
    html: str
    margin_px: int


@dataclass
class PdfResult:
    """
    Result of PDF rendering operation.

    Contains the PDF bytes and the file name they are meant for.
    """

    pdf_bytes: bytes
    filename: str
    content_type: str = "application/pdf"

    def __len__(self) -> int:
        """Return the size of PDF in bytes"""
        return len(self.pdf_bytes)
