"""
Tests for the Render Orchestrator

Uses an in-memory renderer that records every call so the lifecycle
(launch, load, print, close) can be checked on success and failure paths.
"""

import asyncio

from django.test import SimpleTestCase

from mdpdf.exceptions import CapabilityUnavailable, RenderError, RenderTimeout
from mdpdf.printing.dto import AssembledDocument, PdfResult
from mdpdf.printing.interfaces import IPdfRenderer
from mdpdf.printing.orchestrator import RenderOrchestrator, RenderState


def make_document(margin_px=50):
    return AssembledDocument(
        html_body='<p>x</p>',
        css='',
        html='<html><body><p>x</p></body></html>',
        margin_px=margin_px,
    )


class RecordingRenderer(IPdfRenderer):
    """Renderer double; fail_at names the step that raises."""

    name = 'recording'

    def __init__(self, fail_at=None, pdf=b'%PDF-1.7 fake', close_error=None):
        self.fail_at = fail_at
        self.pdf = pdf
        self.close_error = close_error
        self.calls = []
        self.open_handles = set()
        self.loading = asyncio.Event()
        self.block_loading = False

    async def launch(self):
        self.calls.append('launch')
        if self.fail_at == 'launch':
            raise CapabilityUnavailable("Chromium is not installed")
        handle = object()
        self.open_handles.add(handle)
        return handle

    async def load_html(self, handle, html):
        self.calls.append('load_html')
        self.loading.set()
        if self.block_loading:
            await asyncio.Event().wait()
        if self.fail_at == 'load_html':
            raise RuntimeError("net::ERR_ABORTED")

    async def print_to_pdf(self, handle, margin_px):
        self.calls.append(('print_to_pdf', margin_px))
        if self.fail_at == 'print_to_pdf':
            raise RuntimeError("Printing failed")
        return self.pdf

    async def close(self, handle):
        self.calls.append('close')
        self.open_handles.discard(handle)
        if self.close_error:
            raise self.close_error


class RenderOrchestratorTestCase(SimpleTestCase):
    """Test cases for RenderOrchestrator"""

    async def test_successful_render(self):
        """Test the full state sequence of a successful render"""
        renderer = RecordingRenderer()
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        result = await orchestrator.render_to_pdf(make_document(margin_px=75), filename='out.pdf')

        self.assertIsInstance(result, PdfResult)
        self.assertEqual(result.pdf_bytes, b'%PDF-1.7 fake')
        self.assertEqual(result.filename, 'out.pdf')
        self.assertEqual(renderer.calls, ['launch', 'load_html', ('print_to_pdf', 75), 'close'])
        self.assertEqual(orchestrator.history, [
            RenderState.IDLE,
            RenderState.LAUNCHING,
            RenderState.LOADED,
            RenderState.PRINTED,
            RenderState.CLOSED,
        ])
        self.assertEqual(renderer.open_handles, set())

    async def test_print_failure_still_closes(self):
        """Test that a failed print releases the renderer exactly once"""
        renderer = RecordingRenderer(fail_at='print_to_pdf')
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertRaises(RenderError) as ctx:
            await orchestrator.render_to_pdf(make_document())

        self.assertEqual(ctx.exception.renderer_message, 'Printing failed')
        self.assertEqual(renderer.calls.count('close'), 1)
        self.assertEqual(renderer.open_handles, set())
        self.assertEqual(orchestrator.state, RenderState.FAILED)
        self.assertNotIn(RenderState.PRINTED, orchestrator.history)

    async def test_load_failure_still_closes(self):
        """Test that a failed load releases the renderer"""
        renderer = RecordingRenderer(fail_at='load_html')
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertRaises(RenderError):
            await orchestrator.render_to_pdf(make_document())

        self.assertEqual(renderer.calls, ['launch', 'load_html', 'close'])

    async def test_capability_unavailable_is_not_wrapped(self):
        """Test that a launch failure surfaces as CapabilityUnavailable"""
        renderer = RecordingRenderer(fail_at='launch')
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertRaises(CapabilityUnavailable):
            await orchestrator.render_to_pdf(make_document())

        self.assertEqual(renderer.calls, ['launch'])
        self.assertEqual(orchestrator.state, RenderState.FAILED)

    async def test_timeout_still_closes(self):
        """Test that the deadline raises RenderTimeout and releases the renderer"""
        renderer = RecordingRenderer()
        renderer.block_loading = True
        orchestrator = RenderOrchestrator(renderer, timeout=0.05)

        with self.assertRaises(RenderTimeout) as ctx:
            await orchestrator.render_to_pdf(make_document())

        self.assertIsInstance(ctx.exception, TimeoutError)
        self.assertNotIsInstance(ctx.exception, RenderError)
        self.assertEqual(renderer.calls.count('close'), 1)
        self.assertEqual(renderer.open_handles, set())
        self.assertEqual(orchestrator.state, RenderState.FAILED)

    async def test_cancellation_still_closes(self):
        """Test that cancelling the caller releases the renderer"""
        renderer = RecordingRenderer()
        renderer.block_loading = True
        orchestrator = RenderOrchestrator(renderer, timeout=None)

        task = asyncio.ensure_future(orchestrator.render_to_pdf(make_document()))
        await renderer.loading.wait()
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertEqual(renderer.calls.count('close'), 1)
        self.assertEqual(renderer.open_handles, set())

    async def test_empty_pdf_is_an_error(self):
        """Test that a renderer returning no bytes fails the render"""
        renderer = RecordingRenderer(pdf=b'')
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertRaises(RenderError):
            await orchestrator.render_to_pdf(make_document())

        self.assertEqual(renderer.calls.count('close'), 1)

    async def test_close_failure_after_success(self):
        """Test that a failing release turns a render into a RenderError"""
        renderer = RecordingRenderer(close_error=RuntimeError("browser hung"))
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertRaises(RenderError) as ctx:
            await orchestrator.render_to_pdf(make_document())

        self.assertIn('could not be closed', str(ctx.exception))
        self.assertEqual(orchestrator.state, RenderState.FAILED)

    async def test_close_failure_does_not_mask_original_error(self):
        """Test that the first error wins over a failing release"""
        renderer = RecordingRenderer(fail_at='print_to_pdf', close_error=RuntimeError("browser hung"))
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        with self.assertLogs('mdpdf.printing.orchestrator', level='ERROR'):
            with self.assertRaises(RenderError) as ctx:
                await orchestrator.render_to_pdf(make_document())

        self.assertEqual(ctx.exception.renderer_message, 'Printing failed')

    async def test_orchestrator_is_reusable(self):
        """Test that each render acquires and releases its own handle"""
        renderer = RecordingRenderer()
        orchestrator = RenderOrchestrator(renderer, timeout=5)

        await orchestrator.render_to_pdf(make_document())
        await orchestrator.render_to_pdf(make_document())

        self.assertEqual(renderer.calls.count('launch'), 2)
        self.assertEqual(renderer.calls.count('close'), 2)
        self.assertEqual(orchestrator.history[-1], RenderState.CLOSED)
