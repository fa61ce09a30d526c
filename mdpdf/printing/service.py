"""
Markdown PDF Render Service

Central service for the Markdown to PDF pipeline.
"""

from typing import Optional
import asyncio
import logging

from ..conf import build_render_config, get_setting
from ..exceptions import CapabilityUnavailable
from ..tokenizer import tokenize
from ..transformer import transform
from .assembler import assemble
from .dto import AssembledDocument, PdfResult, RenderConfig
from .interfaces import IPdfRenderer
from .orchestrator import RenderOrchestrator
from .registry import get_renderer, list_renderers


logger = logging.getLogger(__name__)


class MarkdownPdfService:
    """
    Core service for the Markdown to PDF pipeline.

    Responsibilities:
    1. Tokenize Markdown into an event stream
    2. Transform events to HTML (with highlighted code blocks)
    3. Assemble the styled, self-contained document
    4. Delegate printing to an IPdfRenderer through the RenderOrchestrator
    5. Return structured PdfResult

    Usage:
        service = MarkdownPdfService()
        result = service.render(
            markdown_text,
            RenderConfig(margin_px=50, output_path=Path('notes.pdf')),
        )
    """

    def __init__(
        self,
        renderer: Optional[IPdfRenderer] = None,
        *,
        timeout: Optional[float] = None,
        allow_raw_html: Optional[bool] = None,
    ):
        """
        Initialize the service.

        Args:
            renderer: PDF renderer implementation. If None, uses MDPDF_RENDERER.
            timeout: Render deadline in seconds. If None, uses MDPDF_RENDER_TIMEOUT.
            allow_raw_html: Keep sanitized raw HTML. If None, uses MDPDF_ALLOW_RAW_HTML.
        """
        self.renderer = renderer or self._get_default_renderer()
        self.timeout = timeout if timeout is not None else float(get_setting('RENDER_TIMEOUT'))
        self.allow_raw_html = (
            allow_raw_html if allow_raw_html is not None else bool(get_setting('ALLOW_RAW_HTML'))
        )

    def build_document(self, markdown_text: str, config: Optional[RenderConfig] = None) -> AssembledDocument:
        """
        Run the HTML half of the pipeline.

        Args:
            markdown_text: Markdown source
            config: Render configuration (defaults from settings)

        Returns:
            AssembledDocument

        Raises:
            StructuralError: If the event stream is malformed
        """
        config = config or build_render_config()

        logger.debug("Transforming Markdown to HTML")
        events = tokenize(markdown_text, allow_raw_html=self.allow_raw_html)
        html_body = transform(events, allow_raw_html=self.allow_raw_html)

        return assemble(html_body, config)

    async def arender(self, markdown_text: str, config: Optional[RenderConfig] = None) -> PdfResult:
        """
        Render Markdown to PDF.

        Args:
            markdown_text: Markdown source
            config: Render configuration (defaults from settings)

        Returns:
            PdfResult with PDF bytes and metadata

        Raises:
            StructuralError, CapabilityUnavailable, RenderError, RenderTimeout
        """
        config = config or build_render_config()
        filename = config.output_path.name if config.output_path else 'document.pdf'

        try:
            document = self.build_document(markdown_text, config)

            logger.debug(f"Printing document with {self.renderer.name}, margin {config.margin_px}px")
            orchestrator = RenderOrchestrator(self.renderer, timeout=self.timeout)
            result = await orchestrator.render_to_pdf(document, filename=filename)

            logger.info(
                f"Successfully generated PDF: {result.filename} "
                f"({len(result.pdf_bytes)} bytes)"
            )

            return result

        except Exception as e:
            logger.error(f"Failed to render PDF {filename}: {e}", exc_info=True)
            raise

    def render(self, markdown_text: str, config: Optional[RenderConfig] = None) -> PdfResult:
        """Synchronous wrapper around arender() for code without an event loop."""
        return asyncio.run(self.arender(markdown_text, config))

    def _get_default_renderer(self) -> IPdfRenderer:
        """
        Get the renderer named by MDPDF_RENDERER.

        Raises:
            CapabilityUnavailable: If no renderer has that name
        """
        name = get_setting('RENDERER')
        try:
            return get_renderer(name)
        except KeyError:
            raise CapabilityUnavailable(
                f"Unknown renderer '{name}'. Available renderers: {', '.join(list_renderers())}"
            ) from None
