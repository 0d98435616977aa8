"""Vision fallback phase (tier 2).

Re-reads problematic pages with the vision invoker. Any failure here is
absorbed: the document keeps its native texts and the phase reports no
improved pages.
"""

from typing import List

from tieredpdf.models.quality import ExtractionMethod
from tieredpdf.orchestration.phases.base import PipelinePhase
from tieredpdf.services.pdf_extractors.base import read_document_bytes

VISION_METHODS = (ExtractionMethod.HYBRID, ExtractionMethod.VISION)


class VisionFallbackPhase(PipelinePhase[List[int]]):
    """Replaces low-quality page texts with vision output where available."""

    @property
    def name(self) -> str:
        return "vision"

    def _problematic_pages(self) -> List[int]:
        report = self.context.quality_report
        return list(report.problematic_pages) if report else []

    def is_enabled(self) -> bool:
        ctx = self.context
        return (
            ctx.vision.enabled
            and ctx.vision.invoker is not None
            and ctx.vision.invoker.is_configured()
            and ctx.extraction_method in VISION_METHODS
            and bool(self._problematic_pages())
        )

    def skip_reason(self) -> str:
        ctx = self.context
        if not self._problematic_pages():
            return "no problematic pages"
        if ctx.extraction_method not in VISION_METHODS:
            return f"method is {ctx.extraction_method.value if ctx.extraction_method else None}"
        if not ctx.vision.enabled:
            return "vision fallback not enabled"
        return "vision service not configured"

    def _get_default_result(self) -> List[int]:
        return []

    async def execute(self) -> List[int]:
        ctx = self.context
        pages = self._problematic_pages()
        invoker = ctx.vision.invoker
        if invoker is None:
            return []

        self.logger.info("vision_fallback_triggered", problematic_pages=pages)

        try:
            document_bytes = read_document_bytes(ctx.source)
            vision_texts = await invoker.extract_pages(document_bytes, pages)
        except Exception as e:
            self.logger.error(
                "vision_fallback_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            ctx.add_error(self.name, str(e))
            return []

        for page_number in pages:
            text = vision_texts.get(page_number)
            if text and text.strip():
                self.logger.debug(
                    "vision_page_improved",
                    page_number=page_number,
                    original_length=len(ctx.native_texts[page_number - 1]),
                    vision_length=len(text),
                )
                ctx.replace_page_text(page_number, text)

        if ctx.vision_pages_used:
            ctx.extraction_method = ExtractionMethod.HYBRID

        self.logger.info(
            "vision_fallback_completed",
            pages_improved=len(ctx.vision_pages_used),
            page_numbers=ctx.vision_pages_used,
        )
        return list(ctx.vision_pages_used)
