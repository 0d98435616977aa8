"""Analyze command: per-page quality report of the native text layer."""

from pathlib import Path
from typing import Optional

import typer

from tieredpdf.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
    run_extraction,
)


@handle_errors
def analyze_command(
    pdf_path: Path = typer.Argument(..., help="PDF file to analyze"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to extraction config YAML"
    ),
    show_issues: bool = typer.Option(
        True, "--issues/--no-issues", help="List detected issues per page"
    ),
):
    """Score each page's native text and recommend an extraction method."""
    config = load_config(config_path)

    # Vision stays off: this command only reports on the native text layer
    result = run_extraction(config, pdf_path)
    report = result.quality_report

    display_info(f"Document: {pdf_path.name} ({report.total_pages} pages)")
    for metrics in report.page_metrics:
        line = (
            f"  Page {metrics.page_number:>3}: {metrics.quality_score:>3}/100 "
            f"({metrics.char_count} chars, {metrics.word_count} words)"
        )
        if metrics.quality_score < config.quality.failed_page_threshold:
            display_error(line)
        elif metrics.needs_vision_fallback:
            display_warning(line)
        else:
            display_success(line)

        if show_issues:
            for issue in metrics.issues:
                typer.echo(f"      - {issue}")

    typer.echo("")
    typer.echo(result.metadata.quality_summary)
    display_info(f"Recommended method: {report.extraction_method.value}")
    if result.needs_ocr:
        display_warning("Full OCR recommended for this document")
