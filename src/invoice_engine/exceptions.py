"""
Invoice Engine exceptions.

Data problems (malformed items, missing fields) never raise; only caller
mistakes and renderer failures do.
"""


class InvoiceEngineError(Exception):
    """Base class for all invoice engine errors."""


class PreconditionError(InvoiceEngineError, ValueError):
    """Raised when a caller passes a value the engine cannot accept
    (negative amount into the words converter, negative tax rate)."""


class RendererUnavailableError(InvoiceEngineError):
    """The rendering backend is not installed or cannot be loaded."""


class RenderError(InvoiceEngineError):
    """The rendering backend failed while producing the document."""
