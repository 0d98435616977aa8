"""OCR planning helpers.

The pipeline only flags documents for OCR; the OCR run itself is a separate,
user-approved step. These helpers describe what that step would cost so a
caller can ask for consent.
"""

import math
from dataclasses import dataclass
from typing import Optional

# Monthly OCR runs, credits per run and page cap by tier (None = unlimited)
OCR_LIMITS = {
    "free": {"monthly_ocr": 50, "credits_per_ocr": 1, "max_pages": 50},
    "custom": {"monthly_ocr": None, "credits_per_ocr": 0, "max_pages": None},
}

TOKENS_PER_PAGE = 2000
INPUT_COST_PER_MTOK = 0.05
OUTPUT_COST_PER_MTOK = 0.40


@dataclass
class OCRPermission:
    allowed: bool
    reason: Optional[str] = None


@dataclass
class OCRCostEstimate:
    credits: int
    estimated_tokens: int
    estimated_cost_usd: float


def calculate_ocr_credits(page_count: int, tier: str = "free") -> int:
    """Credits charged for OCR of a document with `page_count` pages."""
    if tier == "custom":
        return 0
    if page_count <= 20:
        return 1
    if page_count <= 50:
        return 2
    return math.ceil(page_count / 50)


def can_perform_ocr(current_count: int, page_count: int, tier: str = "free") -> OCRPermission:
    """Check monthly usage and page limits for a tier."""
    limits = OCR_LIMITS.get(tier, OCR_LIMITS["free"])

    monthly = limits["monthly_ocr"]
    if monthly is not None and current_count >= monthly:
        return OCRPermission(
            allowed=False,
            reason=(
                f"Monthly OCR limit reached ({monthly}). "
                "Contact us for a custom plan or wait until next month."
            ),
        )

    max_pages = limits["max_pages"]
    if max_pages is not None and page_count > max_pages:
        return OCRPermission(
            allowed=False,
            reason=(
                f"Document exceeds page limit ({max_pages} pages for {tier} tier). "
                "Contact us for a custom plan."
            ),
        )

    return OCRPermission(allowed=True)


def estimate_ocr_cost(page_count: int, tier: str = "free") -> OCRCostEstimate:
    """Rough token and dollar cost of running OCR over a document."""
    estimated_tokens = page_count * TOKENS_PER_PAGE
    input_cost = (estimated_tokens / 1_000_000) * INPUT_COST_PER_MTOK
    output_cost = (estimated_tokens / 1_000_000) * OUTPUT_COST_PER_MTOK
    return OCRCostEstimate(
        credits=calculate_ocr_credits(page_count, tier),
        estimated_tokens=estimated_tokens,
        estimated_cost_usd=input_cost + output_cost,
    )
