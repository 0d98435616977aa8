"""Tests for document-level quality aggregation."""

import random

import pytest

from tieredpdf.models.quality import ExtractionMethod, PageQualityMetrics
from tieredpdf.services.pdf_extractors.validators.document_quality import (
    DocumentQualityAggregator,
    analyze_document_quality,
    generate_quality_summary,
    identify_problematic_pages,
    needs_full_ocr,
    needs_vision_fallback,
)

CLEAN_TEXT = (
    "The quick brown fox jumps over the lazy dog near the river bank. "
    "Researchers studied how the animals behaved during the long summer months.\n\n"
    "The results show that the fox and the dog share the same habitat, and the "
    "study suggests further work on the river ecosystem is needed."
)


def fixed_score_analyzer(scores):
    """Page analyzer that returns predetermined scores."""

    def analyze(text, page_number):
        score = scores[page_number - 1]
        return PageQualityMetrics(
            page_number=page_number,
            quality_score=score,
            needs_vision_fallback=score < 61,
        )

    return analyze


class TestAnalyzeDocumentQuality:
    """Tests for analyze_document_quality."""

    def test_empty_document(self):
        report = analyze_document_quality([])

        assert report.total_pages == 0
        assert report.overall_score == 0
        assert report.problematic_pages == []
        assert report.extraction_method == ExtractionMethod.NATIVE

    def test_all_clean_pages_native(self):
        report = analyze_document_quality([CLEAN_TEXT, CLEAN_TEXT])

        assert report.overall_score == 100
        assert report.summary.successful_pages == 2
        assert report.extraction_method == ExtractionMethod.NATIVE
        assert needs_vision_fallback(report) is False
        assert needs_full_ocr(report) is False

    def test_one_failed_page_of_two_is_hybrid(self):
        """Exactly half the pages failing is not enough for OCR."""
        report = analyze_document_quality([CLEAN_TEXT, ""])

        assert report.summary.failed_pages == 1
        assert report.problematic_pages == [2]
        assert report.overall_score == 50
        assert report.extraction_method == ExtractionMethod.HYBRID
        assert identify_problematic_pages(report) == [2]
        assert needs_vision_fallback(report) is True

    def test_majority_failed_is_ocr(self):
        report = analyze_document_quality(["", "", CLEAN_TEXT])

        assert report.extraction_method == ExtractionMethod.OCR
        assert needs_full_ocr(report) is True

    def test_mediocre_overall_score_is_hybrid(self):
        """No problematic pages, but overall below 70."""
        aggregator = DocumentQualityAggregator(
            page_analyzer=fixed_score_analyzer([65, 65, 65])
        )
        report = aggregator.analyze(["a", "b", "c"])

        assert report.problematic_pages == []
        assert report.overall_score == 65
        assert report.extraction_method == ExtractionMethod.HYBRID

    def test_page_metrics_in_order(self):
        report = analyze_document_quality([CLEAN_TEXT, "", "Hello world"])

        assert [m.page_number for m in report.page_metrics] == [1, 2, 3]


class TestMethodProperties:
    """Property tests with random page scores."""

    @pytest.mark.parametrize("seed", range(20))
    def test_ocr_iff_more_than_half_failed(self, seed):
        rng = random.Random(seed)
        n = rng.randint(1, 30)
        scores = [rng.randint(0, 100) for _ in range(n)]

        aggregator = DocumentQualityAggregator(page_analyzer=fixed_score_analyzer(scores))
        report = aggregator.analyze([""] * n)

        failed = sum(1 for s in scores if s < 31)
        assert (report.extraction_method == ExtractionMethod.OCR) == (failed > n * 0.5)
        summary = report.summary
        assert summary.successful_pages + summary.poor_quality_pages + summary.failed_pages == n
        assert report.problematic_pages == [i + 1 for i, s in enumerate(scores) if s < 61]
        assert report.overall_score == round(sum(scores) / n)


class TestGenerateQualitySummary:
    """Tests for the human-readable summary."""

    def test_all_pages_successful(self):
        report = analyze_document_quality([CLEAN_TEXT, CLEAN_TEXT])

        assert generate_quality_summary(report) == (
            "✓ All 2 pages extracted successfully\nOverall quality: 100/100"
        )

    def test_mixed_document(self):
        report = analyze_document_quality([CLEAN_TEXT, "Hello world", ""])

        assert generate_quality_summary(report).split("\n") == [
            "✓ 1 pages extracted successfully",
            "⚠ 1 pages with reduced quality",
            "✗ 1 pages failed extraction",
            "Overall quality: 53/100",
            "Problematic pages: 2, 3",
        ]
