"""OCR detection phase (tier 3).

Only flags the document; OCR itself runs elsewhere, after the user agrees
to spend credits on it.
"""

from tieredpdf.models.quality import ExtractionMethod
from tieredpdf.observability.metrics import OCR_FLAGGED
from tieredpdf.orchestration.phases.base import PipelinePhase

# Measured text is every page followed by a blank-line separator
PAGE_SEPARATOR = "\n\n"


class OCRDetectionPhase(PipelinePhase[bool]):
    """Decides whether the document needs full OCR."""

    @property
    def name(self) -> str:
        return "ocr_detection"

    async def execute(self) -> bool:
        ctx = self.context
        settings = ctx.ocr_settings

        # Measured on the native texts, before any vision replacement
        total_chars = sum(len(text) + len(PAGE_SEPARATOR) for text in ctx.native_texts)
        report_says_ocr = (
            ctx.quality_report is not None
            and ctx.quality_report.extraction_method == ExtractionMethod.OCR
        )

        if ctx.total_pages == 0:
            text_density = 0.0
        else:
            avg_chars_per_page = total_chars / ctx.total_pages
            text_density = avg_chars_per_page / settings.chars_per_page_budget

        needs_ocr = (
            report_says_ocr
            or total_chars < settings.min_total_chars
            or text_density < settings.min_text_density
        )
        ctx.needs_ocr = needs_ocr

        if needs_ocr:
            OCR_FLAGGED.inc()
            self.logger.info(
                "full_ocr_recommended",
                text_length=total_chars,
                text_density=round(text_density, 3),
            )
        return needs_ocr
