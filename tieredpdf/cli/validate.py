"""Validate command: load a config file and report what it will do."""

from pathlib import Path

import typer

from tieredpdf.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    handle_errors,
)
from tieredpdf.services.config_manager import ConfigManager
from tieredpdf.utils.exceptions import ConfigValidationError


@handle_errors
def validate_command(
    config_path: Path = typer.Argument(..., help="Config file to validate"),
):
    """Check a config file and print the effective extraction settings."""
    try:
        config = ConfigManager(config_path=str(config_path)).load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)

    display_success("Configuration is valid! ✅")
    display_info(f"Native backend: {config.native_backend}")
    display_info(
        f"Vision fallback below score {config.quality.vision_fallback_threshold}: "
        f"{'on' if config.vision.enabled else 'off'} ({config.vision.model})"
    )
    display_info(
        f"Vision calls: {config.retry.max_attempts} attempts, "
        f"breaker opens after {config.circuit_breaker.failure_threshold} failures, "
        f"{config.batch.concurrency} pages at a time"
    )
    if config.vision.enabled and config.vision.api_key is None:
        display_warning("Vision is enabled but no API key is set (GEMINI_API_KEY)")
