"""Prometheus metrics definitions for the tiered extraction pipeline.

Defines counters, gauges, and histograms for monitoring:
- Documents by final extraction method
- Pages by tier and outcome
- Retries and circuit breaker state
- Phase latency and page quality distribution

Usage:
    from tieredpdf.observability.metrics import (
        DOCUMENTS_EXTRACTED,
        PHASE_DURATION,
    )

    DOCUMENTS_EXTRACTED.labels(method="hybrid").inc()

    with PHASE_DURATION.labels(phase="native").time():
        extract_pages()
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Custom registry to avoid conflicts with default registry
REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS - Monotonically increasing values
# =============================================================================

DOCUMENTS_EXTRACTED = Counter(
    name="tieredpdf_documents_extracted_total",
    documentation="Documents extracted, by final extraction method",
    labelnames=["method"],  # native, hybrid, vision, ocr
    registry=REGISTRY,
)

DOCUMENTS_FAILED = Counter(
    name="tieredpdf_documents_failed_total",
    documentation="Documents that could not be opened at all",
    registry=REGISTRY,
)

PAGES_EXTRACTED = Counter(
    name="tieredpdf_pages_extracted_total",
    documentation="Pages processed per tier",
    labelnames=["tier", "status"],  # native/vision, success/failed
    registry=REGISTRY,
)

OCR_FLAGGED = Counter(
    name="tieredpdf_ocr_flagged_total",
    documentation="Documents flagged as needing OCR",
    registry=REGISTRY,
)

RETRY_ATTEMPTS = Counter(
    name="tieredpdf_retry_attempts_total",
    documentation="Attempts made by the retry handler",
    labelnames=["outcome"],  # success, failed
    registry=REGISTRY,
)

# =============================================================================
# GAUGES - Values that can go up and down
# =============================================================================

CIRCUIT_STATE_VALUES = {"closed": 0, "half_open": 1, "open": 2}

CIRCUIT_BREAKER_STATE = Gauge(
    name="tieredpdf_circuit_breaker_state",
    documentation="Circuit breaker state (0=closed, 1=half_open, 2=open)",
    labelnames=["breaker"],
    registry=REGISTRY,
)

# =============================================================================
# HISTOGRAMS - Distribution of values
# =============================================================================

PHASE_DURATION = Histogram(
    name="tieredpdf_phase_duration_seconds",
    documentation="Duration of each extraction phase in seconds",
    labelnames=["phase"],  # native, quality, vision, ocr_detection, total
    buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30, 60, 120, float("inf")),
    registry=REGISTRY,
)

PAGE_QUALITY_SCORE = Histogram(
    name="tieredpdf_page_quality_score",
    documentation="Distribution of native page quality scores",
    buckets=(10, 20, 30, 40, 50, 60, 70, 80, 90, 100),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Generate Prometheus metrics in text format.

    Returns:
        UTF-8 encoded metrics in Prometheus exposition format.
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for Prometheus metrics response."""
    return CONTENT_TYPE_LATEST
