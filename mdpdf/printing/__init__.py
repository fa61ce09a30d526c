"""
Printing Framework

Assembles HTML documents and prints them to PDF through a pluggable
renderer (headless Chromium via Playwright, or WeasyPrint).
"""

from .assembler import assemble
from .dto import AssembledDocument, PdfResult, RenderConfig
from .interfaces import IPdfRenderer
from .orchestrator import RenderOrchestrator, RenderState
from .registry import get_renderer, register_renderer
from .service import MarkdownPdfService

__all__ = [
    'assemble',
    'AssembledDocument',
    'PdfResult',
    'RenderConfig',
    'IPdfRenderer',
    'RenderOrchestrator',
    'RenderState',
    'get_renderer',
    'register_renderer',
    'MarkdownPdfService',
]
