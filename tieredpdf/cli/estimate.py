"""Estimate command: OCR credits and vision/OCR cost for a page count."""

import typer

from tieredpdf.cli.utils import (
    display_error,
    display_info,
    display_success,
    handle_errors,
)
from tieredpdf.services.vision.gemini_vision import estimate_vision_cost
from tieredpdf.utils.ocr import OCR_LIMITS, can_perform_ocr, estimate_ocr_cost


@handle_errors
def estimate_command(
    pages: int = typer.Argument(..., min=1, help="Number of pages"),
    tier: str = typer.Option("free", "--tier", "-t", help="Account tier"),
    used: int = typer.Option(
        0, "--used", min=0, help="OCR runs already used this month"
    ),
):
    """Estimate OCR credits and vision/OCR cost for a document."""
    if tier not in OCR_LIMITS:
        display_error(f"Unknown tier '{tier}'. Choose from: {', '.join(OCR_LIMITS)}")
        raise typer.Exit(code=1)

    ocr = estimate_ocr_cost(pages, tier)
    vision_cost = estimate_vision_cost(pages)

    display_info(f"Pages: {pages} (tier: {tier})")
    typer.echo(f"OCR credits: {ocr.credits}")
    typer.echo(f"OCR estimated tokens: {ocr.estimated_tokens}")
    typer.echo(f"OCR estimated cost: ${ocr.estimated_cost_usd:.4f}")
    typer.echo(f"Vision estimated cost: ${vision_cost:.4f}")

    permission = can_perform_ocr(used, pages, tier)
    if permission.allowed:
        display_success("OCR allowed ✅")
    else:
        display_error(f"OCR not allowed: {permission.reason}")
