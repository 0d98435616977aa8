"""Unit tests for OCR credit and cost helpers"""

import pytest

from tieredpdf.utils.ocr import (
    OCR_LIMITS,
    calculate_ocr_credits,
    can_perform_ocr,
    estimate_ocr_cost,
)


class TestCalculateOCRCredits:
    """Tests for credit calculation."""

    @pytest.mark.parametrize(
        "pages,credits",
        [(1, 1), (20, 1), (21, 2), (50, 2), (51, 2), (100, 2), (101, 3), (250, 5)],
    )
    def test_free_tier(self, pages, credits):
        assert calculate_ocr_credits(pages, "free") == credits

    def test_custom_tier_is_free(self):
        assert calculate_ocr_credits(500, "custom") == 0


class TestCanPerformOCR:
    """Tests for usage limits."""

    def test_allowed_within_limits(self):
        permission = can_perform_ocr(current_count=3, page_count=10, tier="free")

        assert permission.allowed is True
        assert permission.reason is None

    def test_monthly_limit_reached(self):
        limit = OCR_LIMITS["free"]["monthly_ocr"]
        permission = can_perform_ocr(current_count=limit, page_count=10, tier="free")

        assert permission.allowed is False
        assert "Monthly OCR limit reached" in permission.reason

    def test_page_limit_exceeded(self):
        permission = can_perform_ocr(current_count=0, page_count=51, tier="free")

        assert permission.allowed is False
        assert "page limit" in permission.reason

    def test_custom_tier_unlimited(self):
        assert can_perform_ocr(10_000, 10_000, "custom").allowed is True

    def test_unknown_tier_uses_free_limits(self):
        assert can_perform_ocr(0, 51, "mystery").allowed is False


class TestEstimateOCRCost:
    """Tests for cost estimation."""

    def test_estimate(self):
        estimate = estimate_ocr_cost(10)

        assert estimate.credits == 1
        assert estimate.estimated_tokens == 20_000
        assert estimate.estimated_cost_usd == pytest.approx(0.02 * 0.05 + 0.02 * 0.40)
