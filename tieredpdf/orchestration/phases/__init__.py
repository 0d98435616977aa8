"""Extraction phase modules.

Each phase is an independent, testable module that handles one tier of the
extraction workflow.
"""

from tieredpdf.orchestration.phases.base import PipelinePhase
from tieredpdf.orchestration.phases.native import NativeExtractionPhase
from tieredpdf.orchestration.phases.ocr import OCRDetectionPhase
from tieredpdf.orchestration.phases.quality import QualityAnalysisPhase
from tieredpdf.orchestration.phases.vision import VisionFallbackPhase

__all__ = [
    "PipelinePhase",
    "NativeExtractionPhase",
    "QualityAnalysisPhase",
    "VisionFallbackPhase",
    "OCRDetectionPhase",
]
