"""PyMuPDF (fitz) native extractor backend.

Uses the PyMuPDF library (import fitz) to read the text layer page by page.
It is fast, reliable, and lightweight, and is the default tier 1 backend.
"""

from pathlib import Path
from typing import Any

import structlog

from tieredpdf.services.pdf_extractors.base import DocumentSource, NativeExtractor

logger = structlog.get_logger()


class PyMuPDFExtractor(NativeExtractor):
    """Native extractor using PyMuPDF (fitz) library."""

    @property
    def name(self) -> str:
        """Return the backend identifier."""
        return "pymupdf"

    def validate_setup(self) -> bool:
        """Check if PyMuPDF is installed."""
        try:
            import fitz  # noqa: F401

            return True
        except ImportError:
            logger.warning("pymupdf_not_installed")
            return False

    def open_document(self, source: DocumentSource) -> Any:
        import fitz

        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(Path(source))

    def page_count(self, doc: Any) -> int:
        return len(doc)

    def extract_page(self, doc: Any, page_number: int) -> str:
        """
        Extract text in reading order.

        Blocks are sorted top-to-bottom, left-to-right so multi-column
        layouts read the way a person would.
        """
        page = doc.load_page(page_number - 1)
        return page.get_text("text", sort=True)
