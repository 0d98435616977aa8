"""Extraction result models handed back to callers of the pipeline."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, model_validator

from tieredpdf.models.quality import DocumentQualityReport, ExtractionMethod


class OCRStatus(str, Enum):
    """Lifecycle of the user-approved OCR step the pipeline can request."""

    NOT_NEEDED = "not_needed"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    USER_DECLINED = "user_declined"


class ExtractionMetadata(BaseModel):
    """Per-tier page counts and timing for one extraction."""

    native_pages: int = Field(default=0, ge=0)
    native_failed_pages: int = Field(default=0, ge=0)
    vision_pages: int = Field(default=0, ge=0)
    ocr_pages: int = Field(default=0, ge=0)
    processing_time_seconds: float = Field(default=0.0, ge=0.0)
    quality_summary: str = ""


class ExtractionResult(BaseModel):
    """Best-effort text of a document plus the quality evidence behind it."""

    success: bool
    content: str = ""
    page_texts: List[str] = Field(default_factory=list)
    total_pages: int = Field(default=0, ge=0)
    quality_report: DocumentQualityReport
    extraction_method: ExtractionMethod
    needs_ocr: bool = False
    ocr_status: OCRStatus = OCRStatus.NOT_NEEDED
    vision_pages_used: List[int] = Field(default_factory=list)
    metadata: ExtractionMetadata = Field(default_factory=ExtractionMetadata)

    @model_validator(mode="after")
    def check_page_alignment(self) -> "ExtractionResult":
        """One text entry per page, always."""
        if len(self.page_texts) != self.total_pages:
            raise ValueError(
                f"page_texts has {len(self.page_texts)} entries "
                f"for {self.total_pages} pages"
            )
        return self
