"""Custom exceptions for the tiered extraction pipeline

This module defines the exception hierarchy:
- Base exception for all pipeline errors
- Fatal document errors (the only errors that abort an extraction)
- Retryable transient errors (timeouts, rate limits)
- Vision tier and circuit breaker errors

All exceptions inherit from PipelineError to allow catching all pipeline-related
errors in a single except block when needed.
"""

from typing import Any, Dict, Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors

    Use this to catch any error raised by the pipeline:
    ```python
    try:
        result = await orchestrator.extract_with_fallback(path)
    except PipelineError as e:
        logger.error("extraction_failed", error=str(e))
    ```
    """

    pass


class PDFProcessingError(PipelineError):
    """Document could not be opened or parsed at all

    Raised when:
    - File is missing or unreadable
    - Bytes are not a parseable PDF
    - Page count cannot be determined

    This is the only fatal error of an extraction; no result is produced.
    """

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        file_size: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.file_name = file_name
        self.file_size = file_size
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for callers and logs."""
        return {
            "error_type": "pdf_processing",
            "message": str(self),
            "file_name": self.file_name,
            "file_size": self.file_size,
            "details": self.details,
        }


class RetryableError(PipelineError):
    """Base for retryable errors (timeouts, 5xx, connection errors).

    Errors that inherit from this class indicate transient failures
    that may succeed on retry.
    """

    pass


class RateLimitError(RetryableError):
    """Rate limit exceeded with optional retry-after metadata.

    Raised when:
    - API returns 429 status
    - Provider reports quota or resource exhaustion
    """

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class OperationTimeoutError(RetryableError):
    """A single attempt did not finish within its timeout."""

    pass


class VisionServiceError(PipelineError):
    """Vision extraction call failed

    Raised when:
    - Vision API returns an error
    - Page rendering fails
    - Response carries no usable text
    """

    pass


class VisionNotConfiguredError(VisionServiceError):
    """Vision tier requested but credentials or client are missing.

    The orchestrator treats this as "skip tier 2", never as a failure.
    """

    pass


class CircuitOpenError(PipelineError):
    """Circuit breaker OPEN - downstream marked unavailable.

    Raised when:
    - Circuit breaker is OPEN and its cooldown has not elapsed
    - A half-open probe is already in flight
    """

    def __init__(self, name: str, cooldown_remaining: float = 0.0) -> None:
        super().__init__(
            f"Circuit breaker '{name}' is OPEN - service temporarily unavailable"
        )
        self.name = name
        self.cooldown_remaining = cooldown_remaining


class ConfigValidationError(PipelineError):
    """Configuration file could not be read or validated"""

    pass
