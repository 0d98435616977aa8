"""Abstract base class for vision (tier 2) text extraction services.

A vision service renders document pages to images and asks a multimodal
model to read them. It is used only for pages whose native text layer
scored too low to trust.
"""

from abc import ABC, abstractmethod
from typing import Dict, Sequence


class VisionService(ABC):
    """
    Abstract base class for vision extraction providers.

    All concrete services must implement:
    - extract_pages(): Text for the requested pages (may raise)
    - is_configured(): Whether credentials and client are available
    - name property: Return provider identifier
    """

    @abstractmethod
    async def extract_pages(
        self, document_bytes: bytes, page_numbers: Sequence[int]
    ) -> Dict[int, str]:
        """
        Extract text for the given pages.

        Args:
            document_bytes: Raw PDF bytes
            page_numbers: 1-indexed pages to read

        Returns:
            Mapping of page number to extracted text. Pages the model
            could not read may be missing or map to "".

        Raises:
            VisionNotConfiguredError: If the service has no credentials
            RateLimitError: If the provider throttles the request
            VisionServiceError: For any other provider failure
        """
        raise NotImplementedError("Subclasses must implement extract_pages()")

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when the service can make calls."""
        raise NotImplementedError("Subclasses must implement is_configured()")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider identifier."""
        raise NotImplementedError("Subclasses must implement name property")
