"""
Playwright Renderer Implementation

Adapter for printing HTML to PDF with headless Chromium driven by Playwright.
"""

from dataclasses import dataclass
from typing import Any, List, Optional
import asyncio
import logging

try:
    from playwright.async_api import Error as PlaywrightError, async_playwright
    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False

from ..exceptions import CapabilityUnavailable, RenderError
from .interfaces import IPdfRenderer


logger = logging.getLogger(__name__)


# Resolves once web fonts used by the document have finished loading
FONTS_READY_SCRIPT = "() => document.fonts.ready.then(() => true)"


@dataclass
class PlaywrightHandle:
    playwright: Any
    browser: Any
    page: Any


class PlaywrightRenderer(IPdfRenderer):
    """
    PDF renderer using headless Chromium.

    Supports:
    - Print CSS (@page, @media print) with background colours
    - Uniform pixel margins on all four page edges
    - Load-complete detection via the page load event and document.fonts
    """

    name = 'chromium'

    def __init__(self, *, page_format: str = 'A4', launch_args: Optional[List[str]] = None):
        """
        Initialize the renderer.

        Args:
            page_format: Paper format understood by Chromium (A4, Letter, ...)
            launch_args: Extra Chromium command line arguments
        """
        self.page_format = page_format
        self.launch_args = list(launch_args or [])

    async def launch(self) -> PlaywrightHandle:
        if not PLAYWRIGHT_AVAILABLE:
            raise CapabilityUnavailable(
                "Playwright is not installed. "
                "Install it with: pip install playwright && playwright install chromium"
            )

        playwright = await async_playwright().start()
        # No handle exists until launch() returns, so any failure below,
        # cancellation included, stops the driver here
        try:
            browser = await playwright.chromium.launch(headless=True, args=self.launch_args)
        except BaseException as e:
            await asyncio.shield(playwright.stop())
            if isinstance(e, PlaywrightError):
                raise CapabilityUnavailable(
                    "Chromium could not be started. "
                    "Install it with: playwright install chromium "
                    f"({e.message})"
                ) from e
            raise

        try:
            page = await browser.new_page()
        except BaseException as e:
            await asyncio.shield(self._shutdown(playwright, browser))
            if isinstance(e, PlaywrightError):
                raise RenderError(
                    f"Chromium could not open a page: {e.message}",
                    renderer_message=e.message,
                ) from e
            raise

        logger.debug(f"Launched Chromium {browser.version}")
        return PlaywrightHandle(playwright=playwright, browser=browser, page=page)

    async def load_html(self, handle: PlaywrightHandle, html: str) -> None:
        try:
            await handle.page.set_content(html, wait_until='load')
            await handle.page.evaluate(FONTS_READY_SCRIPT)
        except PlaywrightError as e:
            raise RenderError(f"Chromium failed to load the document: {e.message}", renderer_message=e.message) from e

    async def print_to_pdf(self, handle: PlaywrightHandle, margin_px: int) -> bytes:
        margin = f'{margin_px}px'
        try:
            await handle.page.emulate_media(media='print')
            pdf_bytes = await handle.page.pdf(
                format=self.page_format,
                print_background=True,
                margin={
                    'top': margin,
                    'right': margin,
                    'bottom': margin,
                    'left': margin,
                },
            )
        except PlaywrightError as e:
            raise RenderError(f"Chromium failed to print the document: {e.message}", renderer_message=e.message) from e

        logger.info(f"Chromium printed PDF: {len(pdf_bytes)} bytes")
        return pdf_bytes

    async def close(self, handle: PlaywrightHandle) -> None:
        await self._shutdown(handle.playwright, handle.browser)

    @staticmethod
    async def _shutdown(playwright, browser) -> None:
        try:
            await browser.close()
        finally:
            await playwright.stop()
