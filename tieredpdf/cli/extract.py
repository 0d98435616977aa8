"""Extract command: runs the tiered pipeline over one PDF."""

from pathlib import Path
from typing import Optional

import typer

from tieredpdf.cli.utils import (
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
    run_extraction,
    write_output,
)
from tieredpdf.models.extraction import ExtractionResult
from tieredpdf.orchestration import VisionFallbackOptions, build_vision_invoker


@handle_errors
def extract_command(
    pdf_path: Path = typer.Argument(..., help="PDF file to extract"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to extraction config YAML"
    ),
    vision: Optional[bool] = typer.Option(
        None,
        "--vision/--no-vision",
        help="Override vision fallback setting from config",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Print the full result as JSON"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the result to this file"
    ),
):
    """Extract text from a PDF with native, vision and OCR tiers."""
    config = load_config(config_path)

    vision_enabled = config.vision.enabled if vision is None else vision
    options = VisionFallbackOptions(enabled=vision_enabled)
    if vision_enabled:
        options.invoker = build_vision_invoker(config)
        if not options.invoker.is_configured():
            display_warning("Vision fallback enabled but no API key configured")

    result = run_extraction(config, pdf_path, options)

    if json_output or _is_json(output):
        rendered = result.model_dump_json(indent=2)
    else:
        rendered = result.content

    write_output(rendered, output)

    if not json_output:
        _display_summary(result)


def _is_json(output: Optional[Path]) -> bool:
    return output is not None and output.suffix.lower() == ".json"


def _display_summary(result: ExtractionResult) -> None:
    display_info(
        f"\n{result.total_pages} pages, method: {result.extraction_method.value}, "
        f"{result.metadata.processing_time_seconds:.2f}s"
    )
    display_info(result.metadata.quality_summary)
    if result.vision_pages_used:
        pages = ", ".join(str(p) for p in result.vision_pages_used)
        display_success(f"Vision improved pages: {pages}")
    if result.needs_ocr:
        display_warning("Full OCR recommended for this document")

