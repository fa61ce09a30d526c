"""
Render Orchestrator

Drives one IPdfRenderer through a render:

    IDLE -> LAUNCHING -> LOADED -> PRINTED -> CLOSED
                  \\          \\          \\
                   +----------+----------+--> FAILED

The renderer handle is a scoped resource: whatever happens after launch()
(renderer failure, deadline, caller cancellation) close() runs exactly once
before the render returns or raises.
"""

from enum import Enum
from typing import Any, List, Optional
import asyncio
import logging

from ..exceptions import MdPdfError, RenderError, RenderTimeout
from .dto import AssembledDocument, PdfResult
from .interfaces import IPdfRenderer


logger = logging.getLogger(__name__)


class RenderState(str, Enum):
    IDLE = 'idle'
    LAUNCHING = 'launching'
    LOADED = 'loaded'
    PRINTED = 'printed'
    CLOSED = 'closed'
    FAILED = 'failed'


class RenderOrchestrator:
    """
    Runs the launch/load/print/close protocol against a renderer.

    Renders through one orchestrator are serialized; each render launches
    and closes its own renderer handle.

    Usage:
        orchestrator = RenderOrchestrator(PlaywrightRenderer(), timeout=30)
        result = await orchestrator.render_to_pdf(document, filename='notes.pdf')
    """

    def __init__(self, renderer: IPdfRenderer, *, timeout: Optional[float] = 60.0):
        """
        Initialize the orchestrator.

        Args:
            renderer: Renderer capability to drive
            timeout: Deadline in seconds for launch through print (None: no deadline)
        """
        self.renderer = renderer
        self.timeout = timeout
        self.state = RenderState.IDLE
        self.history: List[RenderState] = [RenderState.IDLE]
        self._lock = asyncio.Lock()

    def _transition(self, state: RenderState) -> None:
        logger.debug(f"Render state {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    async def render_to_pdf(self, document: AssembledDocument, *, filename: str = 'document.pdf') -> PdfResult:
        """
        Render an assembled document to PDF.

        Args:
            document: Assembled HTML document
            filename: File name recorded in the result

        Returns:
            PdfResult with the PDF bytes

        Raises:
            CapabilityUnavailable: If the renderer cannot be launched
            RenderError: If loading or printing fails
            RenderTimeout: If the deadline elapses
        """
        async with self._lock:
            self.state = RenderState.IDLE
            self.history = [RenderState.IDLE]
            slot: List[Any] = []
            error: Optional[BaseException] = None
            try:
                pdf_bytes = await asyncio.wait_for(self._drive(document, slot), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                error = RenderTimeout(
                    f"Rendering with {self.renderer.name} did not finish within {self.timeout} seconds",
                    timeout=self.timeout,
                )
                raise error from e
            except MdPdfError as e:
                error = e
                raise
            except asyncio.CancelledError as e:
                error = e
                raise
            except Exception as e:
                error = RenderError(f"{self.renderer.name} failed: {e}", renderer_message=str(e))
                raise error from e
            finally:
                if error is not None:
                    self._transition(RenderState.FAILED)
                await self._release(slot, error)
            return PdfResult(pdf_bytes=pdf_bytes, filename=filename)

    async def _drive(self, document: AssembledDocument, slot: List[Any]) -> bytes:
        self._transition(RenderState.LAUNCHING)
        handle = await self.renderer.launch()
        slot.append(handle)

        await self.renderer.load_html(handle, document.html)
        self._transition(RenderState.LOADED)

        pdf_bytes = await self.renderer.print_to_pdf(handle, document.margin_px)
        if not pdf_bytes:
            raise RenderError(f"{self.renderer.name} returned an empty PDF")
        self._transition(RenderState.PRINTED)
        return pdf_bytes

    async def _release(self, slot: List[Any], error: Optional[BaseException]) -> None:
        if not slot:
            if error is None:
                self._transition(RenderState.CLOSED)
            return
        handle = slot.pop()
        try:
            await self.renderer.close(handle)
        except Exception as e:
            if error is None:
                self._transition(RenderState.FAILED)
                raise RenderError(
                    f"{self.renderer.name} could not be closed: {e}",
                    renderer_message=str(e),
                ) from e
            logger.error(f"Failed to close {self.renderer.name} after an error: {e}", exc_info=True)
            return
        if error is None:
            self._transition(RenderState.CLOSED)
        logger.debug(f"Released {self.renderer.name}")

