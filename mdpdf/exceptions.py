"""
Exceptions for the Markdown to PDF pipeline.

All pipeline errors inherit from MdPdfError so callers (the md2pdf command,
services embedding the pipeline) can catch them with a single except clause.
None of these errors are retried automatically: the inputs are deterministic
and a missing rendering engine will not appear on its own.
"""


class MdPdfError(Exception):
    """Base exception for all pipeline errors."""
    pass


class StructuralError(MdPdfError):
    """
    Raised when the Markdown event stream is not well nested.

    Examples: an EndBlock with no open block, an EndBlock whose kind differs
    from the innermost open block, or a stream ending with open blocks.

    Attributes:
        emitted_html: HTML produced before the violation was detected
    """

    def __init__(self, message, emitted_html=""):
        super().__init__(message)
        self.emitted_html = emitted_html


class CapabilityUnavailable(MdPdfError):
    """
    Raised when the rendering engine cannot be acquired.

    The message names the missing dependency (e.g. the Chromium build used by
    Playwright) so the user can install it.
    """
    pass


class RenderError(MdPdfError):
    """
    Raised when the renderer reports a failure while loading or printing.

    Attributes:
        renderer_message: Message reported by the underlying engine
    """

    def __init__(self, message, renderer_message=None):
        super().__init__(message)
        self.renderer_message = renderer_message


class RenderTimeout(MdPdfError, TimeoutError):
    """
    Raised when the overall render deadline elapses.

    Kept apart from RenderError so callers can tell a hang from an explicit
    failure. The renderer is still released before this propagates.
    """

    def __init__(self, message, timeout=None):
        super().__init__(message)
        self.timeout = timeout
