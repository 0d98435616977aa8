"""Resilience data models: retry, circuit breaker and batch execution.

This module defines the data structures for:
- Retry configuration (exponential backoff with jitter and per-attempt timeout)
- Circuit breaker configuration and state snapshots
- Bounded batch execution settings
- RetryResult, the outcome of a retried operation
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RetryConfig(BaseModel):
    """Configuration for retry logic with exponential backoff

    Controls retry behavior for transient failures:
    - Number of attempts before giving up
    - Delay calculation parameters
    - Jitter for request spreading
    - Timeout raced against every attempt
    """

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts (1 initial + N-1 retries)",
    )
    initial_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Delay before the first retry",
    )
    max_delay_seconds: float = Field(
        default=10.0,
        ge=0.0,
        le=300.0,
        description="Maximum delay cap (before jitter)",
    )
    backoff_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Growth factor between consecutive delays",
    )
    jitter_factor: float = Field(
        default=0.2,
        ge=0.0,
        le=0.5,
        description="Uniform jitter as a fraction of the delay",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Per-attempt timeout",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "max_attempts": 3,
                "initial_delay_seconds": 1.0,
                "max_delay_seconds": 10.0,
                "backoff_multiplier": 2.0,
                "jitter_factor": 0.2,
                "timeout_seconds": 30.0,
            }
        }
    )


class CircuitBreakerConfig(BaseModel):
    """Configuration for circuit breaker pattern

    - CLOSED: Normal operation, requests allowed
    - OPEN: After failure threshold, requests blocked
    - HALF_OPEN: After cooldown, testing with limited requests
    """

    enabled: bool = Field(
        default=True, description="Whether circuit breaker is enabled"
    )
    failure_threshold: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Consecutive failures to open circuit",
    )
    success_threshold: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Consecutive successes to close from half-open",
    )
    cooldown_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=3600.0,
        description="Seconds before transitioning from OPEN to HALF_OPEN",
    )


class BatchConfig(BaseModel):
    """Bounded concurrency settings for batched vision calls"""

    concurrency: int = Field(default=3, ge=1, le=20)
    continue_on_error: bool = True


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerState(BaseModel):
    """Point-in-time snapshot of a circuit breaker."""

    state: CircuitState
    failure_count: int = Field(default=0, ge=0)
    success_count: int = Field(default=0, ge=0)
    last_failure_time: Optional[float] = None


@dataclass
class RetryResult(Generic[T]):
    """Outcome of an operation run through the retry handler.

    The last error of an exhausted retry is kept in `error`, never dropped.
    """

    success: bool
    attempts: int
    total_time: float
    data: Optional[T] = None
    error: Optional[BaseException] = None

    def unwrap(self) -> T:
        """Return the data or re-raise the final error."""
        if self.success:
            return self.data  # type: ignore[return-value]
        if self.error is not None:
            raise self.error
        raise RuntimeError("Retry failed without recording an error")
