"""Extraction context for shared state across phases.

One context is created per document. Phases read their inputs from it and
write their outputs back, so each phase stays independently testable.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

import structlog

from tieredpdf.models.config import OCRDetectionSettings, QualityThresholds
from tieredpdf.models.quality import DocumentQualityReport, ExtractionMethod
from tieredpdf.services.pdf_extractors.base import DocumentSource

if TYPE_CHECKING:
    from tieredpdf.services.vision.invoker import ResilientVisionInvoker

logger = structlog.get_logger()


@dataclass
class VisionFallbackOptions:
    """Caller-supplied switch and collaborator for the vision tier."""

    enabled: bool = False
    invoker: Optional["ResilientVisionInvoker"] = None
    document_id: Optional[str] = None


@dataclass
class ExtractionContext:
    """Shared context for extraction phases.

    Holds the document, configuration, and state accumulated by each phase.
    """

    source: DocumentSource
    thresholds: QualityThresholds = field(default_factory=QualityThresholds)
    ocr_settings: OCRDetectionSettings = field(default_factory=OCRDetectionSettings)
    vision: VisionFallbackOptions = field(default_factory=VisionFallbackOptions)
    document_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.monotonic)

    # Source description (for errors and logs)
    file_name: str = "buffer"
    file_size: Optional[int] = None

    # Native phase output
    total_pages: int = 0
    native_texts: List[str] = field(default_factory=list)
    native_failed_pages: List[int] = field(default_factory=list)

    # Quality phase output
    quality_report: Optional[DocumentQualityReport] = None
    extraction_method: Optional[ExtractionMethod] = None

    # Vision phase output; starts as a copy of native_texts
    page_texts: List[str] = field(default_factory=list)
    vision_pages_used: List[int] = field(default_factory=list)

    # OCR detection output
    needs_ocr: bool = False

    # Error tracking
    errors: List[Dict[str, str]] = field(default_factory=list)

    def set_native_texts(self, texts: List[str]) -> None:
        """Store native texts and seed the final page texts from them."""
        self.native_texts = list(texts)
        self.page_texts = list(texts)
        self.total_pages = len(texts)

    def replace_page_text(self, page_number: int, text: str) -> None:
        """Overwrite one page (1-indexed) with an improved text."""
        self.page_texts[page_number - 1] = text
        if page_number not in self.vision_pages_used:
            self.vision_pages_used.append(page_number)

    def add_error(self, phase: str, error: str) -> None:
        """Record an error.

        Args:
            phase: Phase where error occurred
            error: Error message
        """
        self.errors.append({"phase": phase, "error": error})

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.started_at
