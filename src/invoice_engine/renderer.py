"""
Renderer contract
Anything that can turn an InvoiceDocument into a file on disk.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import InvoiceDocument


class InvoiceRenderer(ABC):
    """Base class for invoice renderers used by the DocumentExporter."""

    #: File extension without the dot ("pdf", "csv")
    extension = ""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def render(self, document: InvoiceDocument, output_path: str) -> None:
        """
        Write the document to ``output_path``

        Raises:
            RendererUnavailableError: backend library missing
            RenderError: backend failed while producing the file
        """
