"""Document-level quality aggregation.

Runs the page analyzer over every page, summarizes the score bands and
recommends an extraction method:
- ocr: more than half the pages failed outright
- hybrid: some pages need vision, or overall quality is mediocre
- native: the text layer is trustworthy as is
"""

from typing import Callable, List, Optional, Sequence

import structlog

from tieredpdf.models.config import QualityThresholds
from tieredpdf.models.quality import (
    DocumentQualityReport,
    ExtractionMethod,
    PageQualityMetrics,
    QualitySummary,
)
from tieredpdf.services.pdf_extractors.validators.page_quality import (
    PageQualityAnalyzer,
)

logger = structlog.get_logger()

PageAnalyzer = Callable[[str, int], PageQualityMetrics]


def recommend_extraction_method(
    summary: QualitySummary,
    total_pages: int,
    problematic_pages: Sequence[int],
    overall_score: int,
    thresholds: Optional[QualityThresholds] = None,
) -> ExtractionMethod:
    """Pick the extraction method; the first matching rule wins."""
    t = thresholds or QualityThresholds()

    if summary.failed_pages > total_pages * t.ocr_failed_ratio:
        return ExtractionMethod.OCR
    if problematic_pages:
        return ExtractionMethod.HYBRID
    if total_pages > 0 and overall_score < t.hybrid_overall_threshold:
        return ExtractionMethod.HYBRID
    return ExtractionMethod.NATIVE


class DocumentQualityAggregator:
    """Aggregates per-page quality into a DocumentQualityReport."""

    def __init__(
        self,
        thresholds: Optional[QualityThresholds] = None,
        page_analyzer: Optional[PageAnalyzer] = None,
    ):
        self.thresholds = thresholds or QualityThresholds()
        self.page_analyzer = page_analyzer or PageQualityAnalyzer(self.thresholds).analyze

    def analyze(self, page_texts: Sequence[str]) -> DocumentQualityReport:
        """
        Score every page and build the document report.

        Args:
            page_texts: Page texts in document order (page 1 first)

        Returns:
            DocumentQualityReport with method recommendation
        """
        t = self.thresholds
        page_metrics = [
            self.page_analyzer(text, index + 1) for index, text in enumerate(page_texts)
        ]
        total_pages = len(page_metrics)

        problematic_pages = [m.page_number for m in page_metrics if m.needs_vision_fallback]
        summary = QualitySummary(
            successful_pages=sum(
                1 for m in page_metrics if m.quality_score >= t.vision_fallback_threshold
            ),
            poor_quality_pages=sum(
                1
                for m in page_metrics
                if t.failed_page_threshold <= m.quality_score < t.vision_fallback_threshold
            ),
            failed_pages=sum(
                1 for m in page_metrics if m.quality_score < t.failed_page_threshold
            ),
        )

        total_score = sum(m.quality_score for m in page_metrics)
        overall_score = round(total_score / total_pages) if total_pages else 0

        method = recommend_extraction_method(
            summary, total_pages, problematic_pages, overall_score, t
        )

        logger.debug(
            "document_quality_scored",
            total_pages=total_pages,
            overall_score=overall_score,
            problematic_pages=len(problematic_pages),
            method=method.value,
        )

        return DocumentQualityReport(
            total_pages=total_pages,
            page_metrics=page_metrics,
            overall_score=overall_score,
            problematic_pages=problematic_pages,
            extraction_method=method,
            summary=summary,
        )


def analyze_document_quality(
    page_texts: Sequence[str],
    thresholds: Optional[QualityThresholds] = None,
) -> DocumentQualityReport:
    """Build a quality report for a list of page texts."""
    return DocumentQualityAggregator(thresholds).analyze(page_texts)


def identify_problematic_pages(report: DocumentQualityReport) -> List[int]:
    """Pages that should be re-extracted with vision."""
    return list(report.problematic_pages)


def needs_full_ocr(report: DocumentQualityReport) -> bool:
    return report.extraction_method == ExtractionMethod.OCR


def needs_vision_fallback(report: DocumentQualityReport) -> bool:
    return report.extraction_method in (ExtractionMethod.HYBRID, ExtractionMethod.VISION)


def generate_quality_summary(report: DocumentQualityReport) -> str:
    """Human-readable multi-line summary of a report."""
    summary = report.summary
    parts: List[str] = []

    if summary.successful_pages == report.total_pages:
        parts.append(f"✓ All {report.total_pages} pages extracted successfully")
    else:
        if summary.successful_pages > 0:
            parts.append(f"✓ {summary.successful_pages} pages extracted successfully")
        if summary.poor_quality_pages > 0:
            parts.append(f"⚠ {summary.poor_quality_pages} pages with reduced quality")
        if summary.failed_pages > 0:
            parts.append(f"✗ {summary.failed_pages} pages failed extraction")

    parts.append(f"Overall quality: {report.overall_score}/100")

    if report.problematic_pages:
        pages = ", ".join(str(p) for p in report.problematic_pages)
        parts.append(f"Problematic pages: {pages}")

    return "\n".join(parts)
