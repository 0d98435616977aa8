"""Helpers shared by the CLI commands: config loading, error exit codes,
pipeline invocation and colored output."""

import asyncio
import functools
from pathlib import Path
from typing import Callable, Optional, TypeVar

import structlog
import typer

from tieredpdf.models.config import ExtractionConfig
from tieredpdf.models.extraction import ExtractionResult
from tieredpdf.observability.logging import configure_logging
from tieredpdf.orchestration import VisionFallbackOptions, build_orchestrator
from tieredpdf.services.config_manager import load_config_or_default
from tieredpdf.utils.exceptions import ConfigValidationError, PDFProcessingError

configure_logging()
logger = structlog.get_logger()

F = TypeVar("F", bound=Callable)

# Exit codes
EXIT_ERROR = 1
EXIT_PDF_ERROR = 2


def load_config(config_path: Optional[Path]) -> ExtractionConfig:
    """Load the config (or defaults) and apply its logging settings.

    Exits with code 1 when the file is missing or invalid.
    """
    try:
        config = load_config_or_default(str(config_path) if config_path else None)
    except (FileNotFoundError, ConfigValidationError) as e:
        display_error(f"Configuration Error: {e}")
        raise typer.Exit(code=EXIT_ERROR)

    configure_logging(level=config.logging.level, json_output=config.logging.json_output)
    return config


def run_extraction(
    config: ExtractionConfig,
    pdf_path: Path,
    options: Optional[VisionFallbackOptions] = None,
) -> ExtractionResult:
    """Run the orchestrator for one file on a fresh event loop."""
    orchestrator = build_orchestrator(config)
    return asyncio.run(orchestrator.extract_with_fallback(pdf_path, options))


def handle_errors(func: F) -> F:
    """Map failures to exit codes: 2 for unreadable PDFs, 1 for anything else."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except PDFProcessingError as e:
            display_error(f"PDF Error: {e}")
            if e.details:
                display_error(f"  {e.details}")
            raise typer.Exit(code=EXIT_PDF_ERROR)
        except Exception as e:
            logger.exception("command_failed", command=func.__name__)
            display_error(f"Error: {e}")
            raise typer.Exit(code=EXIT_ERROR)

    return wrapper  # type: ignore[return-value]


def write_output(rendered: str, output: Optional[Path]) -> None:
    """Write to ``output`` when given, stdout otherwise."""
    if output is None:
        typer.echo(rendered)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    display_success(f"Wrote {output}")


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
