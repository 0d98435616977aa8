"""Page and document quality data models.

Scores run from 0 (nothing usable) to 100 (clean text):
- 0-30: failed
- 31-60: poor, vision fallback recommended
- 61-100: acceptable
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ExtractionMethod(str, Enum):
    """Extraction tier that produced (or should produce) the document text."""

    NATIVE = "native"
    HYBRID = "hybrid"
    VISION = "vision"
    OCR = "ocr"


class PageQualityMetrics(BaseModel):
    """Heuristic quality measurements for one page of extracted text."""

    page_number: int = Field(..., ge=1)
    char_count: int = Field(default=0, ge=0)
    word_count: int = Field(default=0, ge=0)
    line_count: int = Field(default=0, ge=0)
    special_char_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    quality_score: int = Field(default=0, ge=0, le=100)
    needs_vision_fallback: bool = False
    issues: List[str] = Field(default_factory=list)


class QualitySummary(BaseModel):
    """Page counts per score band."""

    successful_pages: int = Field(default=0, ge=0)
    poor_quality_pages: int = Field(default=0, ge=0)
    failed_pages: int = Field(default=0, ge=0)


class DocumentQualityReport(BaseModel):
    """Aggregated quality for a whole document."""

    total_pages: int = Field(default=0, ge=0)
    page_metrics: List[PageQualityMetrics] = Field(default_factory=list)
    overall_score: int = Field(default=0, ge=0, le=100)
    problematic_pages: List[int] = Field(default_factory=list)
    extraction_method: ExtractionMethod = ExtractionMethod.NATIVE
    summary: QualitySummary = Field(default_factory=QualitySummary)
