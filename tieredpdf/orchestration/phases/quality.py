"""Quality analysis phase: scores the native texts and picks a method."""

from tieredpdf.models.quality import DocumentQualityReport
from tieredpdf.observability.metrics import PAGE_QUALITY_SCORE
from tieredpdf.orchestration.phases.base import PipelinePhase
from tieredpdf.services.pdf_extractors.validators.document_quality import (
    DocumentQualityAggregator,
)


class QualityAnalysisPhase(PipelinePhase[DocumentQualityReport]):
    """Builds the document quality report from the raw native texts."""

    @property
    def name(self) -> str:
        return "quality"

    async def execute(self) -> DocumentQualityReport:
        ctx = self.context
        report = DocumentQualityAggregator(ctx.thresholds).analyze(ctx.native_texts)

        for metrics in report.page_metrics:
            PAGE_QUALITY_SCORE.observe(metrics.quality_score)

        ctx.quality_report = report
        ctx.extraction_method = report.extraction_method

        self.logger.info(
            "quality_analysis_completed",
            overall_score=report.overall_score,
            problematic_pages=len(report.problematic_pages),
            recommended_method=report.extraction_method.value,
        )
        return report
