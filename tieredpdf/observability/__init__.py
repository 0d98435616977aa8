"""Logging scope, structlog setup and Prometheus metrics."""

from tieredpdf.observability.context import current_document_id, document_scope
from tieredpdf.observability.logging import configure_logging, get_logger
from tieredpdf.observability.metrics import (
    CIRCUIT_BREAKER_STATE,
    DOCUMENTS_EXTRACTED,
    DOCUMENTS_FAILED,
    OCR_FLAGGED,
    PAGE_QUALITY_SCORE,
    PAGES_EXTRACTED,
    PHASE_DURATION,
    RETRY_ATTEMPTS,
    get_metrics_text,
)

__all__ = [
    "current_document_id",
    "document_scope",
    "configure_logging",
    "get_logger",
    "CIRCUIT_BREAKER_STATE",
    "DOCUMENTS_EXTRACTED",
    "DOCUMENTS_FAILED",
    "OCR_FLAGGED",
    "PAGE_QUALITY_SCORE",
    "PAGES_EXTRACTED",
    "PHASE_DURATION",
    "RETRY_ATTEMPTS",
    "get_metrics_text",
]
