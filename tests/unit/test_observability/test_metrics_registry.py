"""Tests for Prometheus metrics definitions."""

from tieredpdf.observability.metrics import (
    DOCUMENTS_EXTRACTED,
    REGISTRY,
    get_metrics_content_type,
    get_metrics_text,
)


def test_metrics_exposed_in_text_format():
    DOCUMENTS_EXTRACTED.labels(method="native").inc()
    text = get_metrics_text().decode("utf-8")

    assert "tieredpdf_documents_extracted_total" in text
    assert get_metrics_content_type().startswith("text/plain")


def test_counter_increments():
    before = REGISTRY.get_sample_value(
        "tieredpdf_documents_extracted_total", {"method": "hybrid"}
    ) or 0.0
    DOCUMENTS_EXTRACTED.labels(method="hybrid").inc()
    after = REGISTRY.get_sample_value(
        "tieredpdf_documents_extracted_total", {"method": "hybrid"}
    )
    assert after == before + 1
