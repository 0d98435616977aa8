"""Tests for the orchestration composition root."""

import pytest

from tieredpdf.models.config import ExtractionConfig, QualityThresholds
from tieredpdf.orchestration.factory import (
    build_native_extractor,
    build_orchestrator,
    build_vision_invoker,
)
from tieredpdf.services.pdf_extractors.pdfplumber_extractor import PDFPlumberExtractor
from tieredpdf.services.pdf_extractors.pymupdf_extractor import PyMuPDFExtractor
from tieredpdf.services.vision.gemini_vision import GeminiVisionService
from tieredpdf.utils.circuit_breaker import CircuitBreakerRegistry


@pytest.fixture(autouse=True)
def cleanup_registry():
    CircuitBreakerRegistry.clear_instance()
    yield
    CircuitBreakerRegistry.clear_instance()


def test_native_backend_selection():
    assert isinstance(build_native_extractor(ExtractionConfig()), PyMuPDFExtractor)
    assert isinstance(
        build_native_extractor(ExtractionConfig(native_backend="pdfplumber")),
        PDFPlumberExtractor,
    )


def test_orchestrator_uses_config_thresholds():
    config = ExtractionConfig(quality=QualityThresholds(vision_fallback_threshold=80))
    orchestrator = build_orchestrator(config)

    assert orchestrator.thresholds.vision_fallback_threshold == 80
    assert orchestrator.ocr_settings == config.ocr


def test_vision_invokers_share_one_breaker():
    config = ExtractionConfig()
    first = build_vision_invoker(config)
    second = build_vision_invoker(config)

    assert first.circuit_breaker is second.circuit_breaker
    assert first.circuit_breaker.name == "vision"
    assert isinstance(first.service, GeminiVisionService)
    assert first.is_configured() is False
