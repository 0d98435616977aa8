"""Tiered extraction orchestrator.

Thin orchestrator that runs the extraction phases in order for one document:

1. Native: text layer of every page (fatal only if the document won't open)
2. Quality: per-page scores and a recommended method
3. Vision: re-read problematic pages (optional, failures absorbed)
4. OCR detection: flag documents with too little usable text
5. Finalize: assemble the ExtractionResult

Usage:
    orchestrator = ExtractionOrchestrator(PyMuPDFExtractor())
    result = await orchestrator.extract_with_fallback(Path("paper.pdf"))
"""

from pathlib import Path
from typing import Optional

import structlog

from tieredpdf.models.config import OCRDetectionSettings, QualityThresholds
from tieredpdf.models.extraction import (
    ExtractionMetadata,
    ExtractionResult,
    OCRStatus,
)
from tieredpdf.models.quality import DocumentQualityReport, ExtractionMethod
from tieredpdf.observability.context import document_scope
from tieredpdf.observability.metrics import (
    DOCUMENTS_EXTRACTED,
    DOCUMENTS_FAILED,
    PHASE_DURATION,
)
from tieredpdf.orchestration.context import ExtractionContext, VisionFallbackOptions
from tieredpdf.orchestration.phases import (
    NativeExtractionPhase,
    OCRDetectionPhase,
    QualityAnalysisPhase,
    VisionFallbackPhase,
)
from tieredpdf.services.pdf_extractors.base import (
    DocumentSource,
    NativeExtractor,
    describe_source,
)
from tieredpdf.services.pdf_extractors.validators.document_quality import (
    generate_quality_summary,
)
from tieredpdf.utils.exceptions import PDFProcessingError

logger = structlog.get_logger()


class ExtractionOrchestrator:
    """Orchestrates native, vision and OCR tiers for a document.

    Attributes:
        native_extractor: Tier 1 backend
        thresholds: Quality scoring thresholds
        ocr_settings: OCR detection heuristics
    """

    def __init__(
        self,
        native_extractor: NativeExtractor,
        thresholds: Optional[QualityThresholds] = None,
        ocr_settings: Optional[OCRDetectionSettings] = None,
    ) -> None:
        self.native_extractor = native_extractor
        self.thresholds = thresholds or QualityThresholds()
        self.ocr_settings = ocr_settings or OCRDetectionSettings()

    async def extract_with_fallback(
        self,
        document: DocumentSource,
        options: Optional[VisionFallbackOptions] = None,
    ) -> ExtractionResult:
        """Extract the best available text of a document.

        Args:
            document: PDF path or raw PDF bytes
            options: Vision fallback switch and invoker (default: disabled)

        Returns:
            ExtractionResult with one text per page and the quality evidence

        Raises:
            PDFProcessingError: If the document cannot be opened or parsed
        """
        options = options or VisionFallbackOptions()
        if isinstance(document, str):
            document = Path(document)

        file_name, file_size = describe_source(document)
        with document_scope(options.document_id, file_name=file_name) as document_id:
            context = ExtractionContext(
                source=document,
                thresholds=self.thresholds,
                ocr_settings=self.ocr_settings,
                vision=options,
                document_id=document_id,
                file_name=file_name,
                file_size=file_size,
            )

            logger.info(
                "extraction_starting",
                document_id=document_id,
                file_name=file_name,
                file_size=file_size,
                backend=self.native_extractor.name,
                vision_enabled=options.enabled,
            )

            with PHASE_DURATION.labels(phase="total").time():
                try:
                    await NativeExtractionPhase(context, self.native_extractor).run()
                except PDFProcessingError as e:
                    DOCUMENTS_FAILED.inc()
                    logger.error("extraction_failed", **e.to_dict())
                    raise

                await QualityAnalysisPhase(context).run()
                await VisionFallbackPhase(context).run()
                await OCRDetectionPhase(context).run()

                result = self._finalize(context)

            DOCUMENTS_EXTRACTED.labels(method=result.extraction_method.value).inc()
            logger.info(
                "extraction_completed",
                document_id=document_id,
                total_pages=result.total_pages,
                method=result.extraction_method.value,
                vision_pages=len(result.vision_pages_used),
                needs_ocr=result.needs_ocr,
                processing_time_seconds=result.metadata.processing_time_seconds,
            )
            return result

    def _finalize(self, context: ExtractionContext) -> ExtractionResult:
        report = context.quality_report or DocumentQualityReport()
        method = context.extraction_method or ExtractionMethod.NATIVE

        content = "\n\n".join(context.page_texts).strip()
        native_failed = len(context.native_failed_pages)

        return ExtractionResult(
            success=True,
            content=content,
            page_texts=context.page_texts,
            total_pages=context.total_pages,
            quality_report=report,
            extraction_method=method,
            needs_ocr=context.needs_ocr,
            ocr_status=OCRStatus.PENDING if context.needs_ocr else OCRStatus.NOT_NEEDED,
            vision_pages_used=sorted(context.vision_pages_used),
            metadata=ExtractionMetadata(
                native_pages=context.total_pages - native_failed,
                native_failed_pages=native_failed,
                vision_pages=len(context.vision_pages_used),
                ocr_pages=0,
                processing_time_seconds=context.elapsed_seconds,
                quality_summary=generate_quality_summary(report),
            ),
        )
