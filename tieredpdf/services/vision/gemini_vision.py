"""Google Gemini vision service.

Renders PDF pages to PNG with PyMuPDF and sends each image to a Gemini
multimodal model with a layout-preserving transcription prompt.

Pricing (Gemini 2.5 Flash): ~$0.075 per million input tokens, with a page
image costing roughly 10,000 tokens.
"""

import asyncio
import time
from typing import Any, Dict, Optional, Sequence

import structlog

from tieredpdf.services.vision.base import VisionService
from tieredpdf.utils.exceptions import (
    RateLimitError,
    RetryableError,
    VisionNotConfiguredError,
    VisionServiceError,
)

logger = structlog.get_logger()

VISION_PROMPT = (
    "Extract all text from this PDF page image. Preserve the layout, paragraphs, "
    "and reading order (top-to-bottom, left-to-right). \n"
    'For multi-column layouts, process left column first, then right column, separated by "---".\n'
    "Return ONLY the extracted text without any commentary or explanations."
)

TOKENS_PER_PAGE = 10_000
COST_PER_MTOK = 0.075


def estimate_vision_cost(page_count: int) -> float:
    """Estimated USD cost of reading `page_count` pages with vision."""
    total_tokens = page_count * TOKENS_PER_PAGE
    return (total_tokens / 1_000_000) * COST_PER_MTOK


class GeminiVisionService(VisionService):
    """Gemini implementation of the vision tier."""

    RATE_LIMIT_PATTERNS = [
        "429",
        "rate limit",
        "rate_limit",
        "ratelimit",
        "quota exceeded",
        "resource_exhausted",
    ]

    RETRYABLE_PATTERNS = [
        "timeout",
        "timed out",
        "connection",
        "temporary",
        "internal server",
        "502",
        "503",
        "504",
        "unavailable",
    ]

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        temperature: float = 0.1,
        max_image_width: int = 1024,
        client: Any = None,
    ):
        """Initialize Gemini vision service.

        Args:
            api_key: Google API key; None leaves the service unconfigured
            model: Model identifier (default: gemini-2.5-flash)
            temperature: Sampling temperature, kept low for transcription
            max_image_width: Rendered page width in pixels
            client: Pre-built genai client (tests)

        Raises:
            VisionServiceError: If google-genai package is not installed
        """
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_image_width = max_image_width
        self._client: Any = client

        if self._client is None and api_key:
            try:
                from google import genai

                self._client = genai.Client(api_key=api_key)
            except ImportError:
                raise VisionServiceError(
                    "google-genai package not installed. Run: pip install google-genai"
                )

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        return self._model

    def is_configured(self) -> bool:
        return bool(self._api_key) and self._client is not None

    async def extract_pages(
        self, document_bytes: bytes, page_numbers: Sequence[int]
    ) -> Dict[int, str]:
        if not self.is_configured():
            raise VisionNotConfiguredError("Gemini API key is not configured")

        # PyMuPDF rendering is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        images = await loop.run_in_executor(
            None, lambda: self.render_pages(document_bytes, page_numbers)
        )
        texts: Dict[int, str] = {}
        for page_number, image in images.items():
            texts[page_number] = await self._extract_image(image, page_number)
        return texts

    def render_pages(
        self, document_bytes: bytes, page_numbers: Sequence[int]
    ) -> Dict[int, bytes]:
        """Render pages to PNG, scaled so the width is max_image_width."""
        import fitz

        images: Dict[int, bytes] = {}
        try:
            doc = fitz.open(stream=document_bytes, filetype="pdf")
        except Exception as e:
            raise VisionServiceError(f"Cannot render document: {e}")

        try:
            for page_number in page_numbers:
                page = doc.load_page(page_number - 1)
                zoom = self._max_image_width / page.rect.width
                pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
                images[page_number] = pixmap.tobytes("png")
        except Exception as e:
            raise VisionServiceError(f"Page rendering failed: {e}")
        finally:
            doc.close()

        return images

    async def _extract_image(self, image: bytes, page_number: int) -> str:
        start_time = time.time()

        try:
            from google.genai import types

            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=[
                    VISION_PROMPT,
                    types.Part.from_bytes(data=image, mime_type="image/png"),
                ],
                config=types.GenerateContentConfig(temperature=self._temperature),
            )
        except Exception as e:
            raise self._classify_error(e)

        text = (getattr(response, "text", None) or "").strip()

        usage = getattr(response, "usage_metadata", None)
        tokens_used = getattr(usage, "total_token_count", 0) if usage else 0

        logger.debug(
            "gemini_vision_page_extracted",
            model=self._model,
            page_number=page_number,
            image_size=len(image),
            tokens_used=tokens_used,
            latency_ms=(time.time() - start_time) * 1000,
        )
        return text

    def _classify_error(self, error: Exception) -> Exception:
        """Map a provider exception onto the pipeline hierarchy."""
        error_str = str(error).lower()

        if any(pattern in error_str for pattern in self.RATE_LIMIT_PATTERNS):
            retry_after = getattr(error, "retry_after", None)
            return RateLimitError(
                str(error),
                retry_after=float(retry_after) if retry_after is not None else None,
            )

        if any(pattern in error_str for pattern in self.RETRYABLE_PATTERNS):
            return RetryableError(str(error))

        return VisionServiceError(str(error))
