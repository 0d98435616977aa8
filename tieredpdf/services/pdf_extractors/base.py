"""Abstract base class for native (text layer) PDF extraction backends.

All native extractors must inherit from NativeExtractor and implement
document opening, page counting and per-page text extraction.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import structlog

logger = structlog.get_logger()

DocumentSource = Union[Path, str, bytes]


class NativeExtractor(ABC):
    """
    Abstract base class for tier 1 extraction backends.

    All concrete extractors must implement:
    - open_document(): Parse a PDF (raise on failure)
    - page_count(): Number of pages in an opened document
    - extract_page(): Text of one page (may raise)
    - close_document(): Release the document
    - validate_setup(): Check if backend is available
    - name property: Return backend identifier
    """

    @abstractmethod
    def open_document(self, source: DocumentSource) -> Any:
        """
        Open a PDF from a path or raw bytes.

        Raises:
            Exception: If the document cannot be opened or parsed
        """
        raise NotImplementedError("Subclasses must implement open_document()")

    @abstractmethod
    def page_count(self, doc: Any) -> int:
        """Return the number of pages of an opened document."""
        raise NotImplementedError("Subclasses must implement page_count()")

    @abstractmethod
    def extract_page(self, doc: Any, page_number: int) -> str:
        """
        Extract the text layer of one page.

        Args:
            doc: Document returned by open_document()
            page_number: 1-indexed page number

        Raises:
            Exception: If this page cannot be extracted
        """
        raise NotImplementedError("Subclasses must implement extract_page()")

    def close_document(self, doc: Any) -> None:
        """Release resources held by an opened document."""
        close = getattr(doc, "close", None)
        if callable(close):
            try:
                close()
            except Exception as e:
                logger.debug("document_close_failed", backend=self.name, error=str(e))

    @abstractmethod
    def validate_setup(self) -> bool:
        """
        Check if this backend is properly configured and available.

        Returns:
            True if backend can be used, False otherwise
        """
        raise NotImplementedError("Subclasses must implement validate_setup()")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the backend identifier."""
        raise NotImplementedError("Subclasses must implement name property")


def read_document_bytes(source: DocumentSource) -> bytes:
    """Raw bytes of a document given as path or bytes."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    return Path(source).read_bytes()


def describe_source(source: DocumentSource) -> Tuple[str, Optional[int]]:
    """File name and size of a document source, for logs and errors."""
    if isinstance(source, (bytes, bytearray)):
        return "buffer", len(source)
    path = Path(source)
    try:
        size = path.stat().st_size
    except OSError:
        size = None
    return path.name, size
