"""
WeasyPrint Renderer Implementation

Adapter for rendering HTML to PDF using WeasyPrint engine. WeasyPrint works
in-process and synchronously, so its work runs in a worker thread.
"""

from dataclasses import dataclass
from typing import Any, Optional
import asyncio
import logging

try:
    from weasyprint import CSS, HTML
    WEASYPRINT_AVAILABLE = True
except (ImportError, OSError):
    # OSError: Pango/Cairo system libraries missing
    WEASYPRINT_AVAILABLE = False

from ..exceptions import CapabilityUnavailable, RenderError
from .interfaces import IPdfRenderer


logger = logging.getLogger(__name__)


@dataclass
class WeasyPrintHandle:
    base_url: Optional[str]
    document: Any = None


class WeasyPrintRenderer(IPdfRenderer):
    """
    PDF renderer using WeasyPrint engine.

    Supports:
    - Static assets via base_url
    - Print CSS with paged media
    """

    name = 'weasyprint'

    def __init__(self, base_url: Optional[str] = None):
        """
        Initialize the renderer.

        Args:
            base_url: Base URL for resolving relative URLs (images)
        """
        self.base_url = base_url

    async def launch(self) -> WeasyPrintHandle:
        if not WEASYPRINT_AVAILABLE:
            raise CapabilityUnavailable(
                "WeasyPrint is not installed or its system libraries (Pango) are missing. "
                "Install it with: pip install weasyprint"
            )
        return WeasyPrintHandle(base_url=self.base_url)

    async def load_html(self, handle: WeasyPrintHandle, html: str) -> None:
        try:
            # Parsing is complete when HTML() returns
            handle.document = await asyncio.to_thread(HTML, string=html, base_url=handle.base_url)
        except Exception as e:
            raise RenderError(f"WeasyPrint failed to load the document: {e}", renderer_message=str(e)) from e

    async def print_to_pdf(self, handle: WeasyPrintHandle, margin_px: int) -> bytes:
        if handle.document is None:
            raise RenderError("WeasyPrint has no document loaded")
        page_css = CSS(string=f'@page {{ margin: {margin_px}px; }}')
        try:
            pdf_bytes = await asyncio.to_thread(handle.document.write_pdf, stylesheets=[page_css])
        except Exception as e:
            logger.error(f"Failed to render PDF: {e}", exc_info=True)
            raise RenderError(f"WeasyPrint failed to print the document: {e}", renderer_message=str(e)) from e

        logger.info(f"Successfully rendered PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes

    async def close(self, handle: WeasyPrintHandle) -> None:
        handle.document = None
