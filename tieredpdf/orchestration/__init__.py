"""Orchestration module for tiered document extraction."""

from tieredpdf.orchestration.context import ExtractionContext, VisionFallbackOptions
from tieredpdf.orchestration.factory import (
    build_native_extractor,
    build_orchestrator,
    build_vision_invoker,
)
from tieredpdf.orchestration.phases import (
    NativeExtractionPhase,
    OCRDetectionPhase,
    PipelinePhase,
    QualityAnalysisPhase,
    VisionFallbackPhase,
)
from tieredpdf.orchestration.pipeline import ExtractionOrchestrator

__all__ = [
    "ExtractionOrchestrator",
    "ExtractionContext",
    "VisionFallbackOptions",
    "PipelinePhase",
    "NativeExtractionPhase",
    "QualityAnalysisPhase",
    "VisionFallbackPhase",
    "OCRDetectionPhase",
    "build_native_extractor",
    "build_orchestrator",
    "build_vision_invoker",
]
