"""Native extraction phase (tier 1).

Reads the text layer of every page once. A page that raises yields ""
and is counted as failed; only a document that cannot be opened at all is
fatal.
"""

from typing import List

from tieredpdf.observability.metrics import PAGES_EXTRACTED
from tieredpdf.orchestration.context import ExtractionContext
from tieredpdf.orchestration.phases.base import PipelinePhase
from tieredpdf.services.pdf_extractors.base import NativeExtractor
from tieredpdf.utils.exceptions import PDFProcessingError


class NativeExtractionPhase(PipelinePhase[List[str]]):
    """Tier 1: sequential per-page extraction with the native backend."""

    def __init__(self, context: ExtractionContext, extractor: NativeExtractor) -> None:
        self.extractor = extractor
        super().__init__(context)

    @property
    def name(self) -> str:
        return "native"

    async def execute(self) -> List[str]:
        ctx = self.context

        try:
            doc = self.extractor.open_document(ctx.source)
        except Exception as e:
            raise PDFProcessingError(
                "Failed to process PDF",
                file_name=ctx.file_name,
                file_size=ctx.file_size,
                details=f"{type(e).__name__}: {e}",
            ) from e

        texts: List[str] = []
        try:
            try:
                total_pages = self.extractor.page_count(doc)
            except Exception as e:
                raise PDFProcessingError(
                    "Failed to read page count",
                    file_name=ctx.file_name,
                    file_size=ctx.file_size,
                    details=f"{type(e).__name__}: {e}",
                ) from e

            for page_number in range(1, total_pages + 1):
                try:
                    text = self.extractor.extract_page(doc, page_number) or ""
                    PAGES_EXTRACTED.labels(tier="native", status="success").inc()
                except Exception as e:
                    self.logger.warning(
                        "native_page_failed",
                        page_number=page_number,
                        backend=self.extractor.name,
                        error=str(e),
                    )
                    PAGES_EXTRACTED.labels(tier="native", status="failed").inc()
                    ctx.native_failed_pages.append(page_number)
                    text = ""
                texts.append(text)
        finally:
            self.extractor.close_document(doc)

        ctx.set_native_texts(texts)

        self.logger.info(
            "native_extraction_completed",
            backend=self.extractor.name,
            total_pages=total_pages,
            successful_pages=total_pages - len(ctx.native_failed_pages),
            failed_pages=len(ctx.native_failed_pages),
            extracted_chars=sum(len(t) for t in texts),
        )
        return texts
