"""Composition root: builds orchestrators and their collaborators from config."""

import random
from typing import Optional

import structlog

from tieredpdf.models.config import ExtractionConfig
from tieredpdf.orchestration.pipeline import ExtractionOrchestrator
from tieredpdf.services.pdf_extractors.base import NativeExtractor
from tieredpdf.services.pdf_extractors.pdfplumber_extractor import PDFPlumberExtractor
from tieredpdf.services.pdf_extractors.pymupdf_extractor import PyMuPDFExtractor
from tieredpdf.services.vision.base import VisionService
from tieredpdf.services.vision.gemini_vision import GeminiVisionService
from tieredpdf.services.vision.invoker import ResilientVisionInvoker
from tieredpdf.utils.circuit_breaker import CircuitBreakerRegistry

logger = structlog.get_logger()

VISION_BREAKER_NAME = "vision"

NATIVE_BACKENDS = {
    "pymupdf": PyMuPDFExtractor,
    "pdfplumber": PDFPlumberExtractor,
}


def build_native_extractor(config: ExtractionConfig) -> NativeExtractor:
    """Instantiate the configured native backend."""
    extractor = NATIVE_BACKENDS[config.native_backend]()
    if not extractor.validate_setup():
        logger.warning("native_backend_unavailable", backend=extractor.name)
    return extractor


def build_vision_service(config: ExtractionConfig) -> VisionService:
    settings = config.vision
    return GeminiVisionService(
        api_key=settings.api_key,
        model=settings.model,
        temperature=settings.temperature,
        max_image_width=settings.max_image_width,
    )


def build_vision_invoker(
    config: ExtractionConfig,
    service: Optional[VisionService] = None,
    rng: Optional[random.Random] = None,
) -> ResilientVisionInvoker:
    """Wrap a vision service with the process-wide "vision" circuit breaker."""
    breaker = CircuitBreakerRegistry().get_or_create(
        VISION_BREAKER_NAME, config.circuit_breaker
    )
    return ResilientVisionInvoker(
        service=service or build_vision_service(config),
        circuit_breaker=breaker,
        retry_config=config.retry,
        batch_config=config.batch,
        rng=rng,
    )


def build_orchestrator(
    config: ExtractionConfig,
    native_extractor: Optional[NativeExtractor] = None,
) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(
        native_extractor=native_extractor or build_native_extractor(config),
        thresholds=config.quality,
        ocr_settings=config.ocr,
    )
