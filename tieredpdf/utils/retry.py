"""Retry Handler Utility

Implements exponential backoff with jitter for retrying transient failures.

Features:
- Per-attempt timeout (each attempt is raced against a timer)
- Exponential backoff: delay = initial * multiplier^(attempt-1), capped
- Uniform jitter for request spreading, driven by an injectable RNG
- Respects retry-after hints from rate limit errors
- Callback support for retry notifications
- Fails fast on non-retryable errors (an open circuit breaker)
- Never raises: the outcome, including the last error, is a RetryResult
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

import structlog

from tieredpdf.models.resilience import RetryConfig, RetryResult
from tieredpdf.observability.metrics import RETRY_ATTEMPTS
from tieredpdf.utils.exceptions import (
    CircuitOpenError,
    OperationTimeoutError,
    RateLimitError,
)

logger = structlog.get_logger(__name__)


T = TypeVar("T")

OnRetry = Callable[[int, BaseException], None]
Sleep = Callable[[float], Awaitable[None]]

# Errors that end the retry loop at once
NON_RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (CircuitOpenError,)


class RetryHandler:
    """Async retry handler with exponential backoff, jitter and timeouts.

    Provides automatic retry logic for transient failures with:
    - Exponential backoff: delay = initial * multiplier^(attempt-1)
    - Max delay cap: prevents excessive wait times
    - Jitter: +/- jitter_factor randomization of the capped delay
    - Timeout: each attempt is bounded by config.timeout_seconds
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
        non_retryable: Tuple[Type[BaseException], ...] = NON_RETRYABLE_ERRORS,
    ) -> None:
        """Initialize retry handler.

        Args:
            config: Retry configuration (defaults: 3 attempts, 1s..10s, 30s timeout)
            rng: Random source for jitter; seed it for deterministic delays
            sleep: Awaitable sleep, replaceable in tests
            non_retryable: Exception types returned as failures without retrying
        """
        self.config = config or RetryConfig()
        self.non_retryable = non_retryable
        self._rng = rng or random.Random()
        self._sleep = sleep

    def calculate_delay(
        self, attempt: int, retry_after: Optional[float] = None
    ) -> float:
        """Calculate delay after a failed attempt.

        Args:
            attempt: Number of the attempt that just failed (1-indexed)
            retry_after: Optional retry-after value from error

        Returns:
            Delay in seconds to wait before the next attempt
        """
        if retry_after is not None and retry_after > 0:
            base_delay = retry_after
        else:
            base_delay = min(
                self.config.initial_delay_seconds
                * (self.config.backoff_multiplier ** (attempt - 1)),
                self.config.max_delay_seconds,
            )

        jitter = base_delay * self.config.jitter_factor
        delay = base_delay + self._rng.uniform(-jitter, jitter)

        return max(0.0, delay)

    async def _attempt(self, func: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.config.timeout_seconds)
        except asyncio.TimeoutError:
            raise OperationTimeoutError("Operation timeout")

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        on_retry: Optional[OnRetry] = None,
    ) -> RetryResult[T]:
        """Execute function with retry logic.

        Args:
            func: Async function to execute (called once per attempt)
            on_retry: Optional callback called before each retry with
                     (failed_attempt_number, exception)

        Returns:
            RetryResult with data on success, or the last error once all
            attempts are exhausted or a non-retryable error is raised
        """
        start_time = time.monotonic()
        last_error: Optional[BaseException] = None
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                data = await self._attempt(func)
            except Exception as e:
                last_error = e
                RETRY_ATTEMPTS.labels(outcome="failed").inc()

                if isinstance(e, self.non_retryable):
                    logger.info(
                        "retry_not_attempted",
                        attempt=attempt,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    return RetryResult(
                        success=False,
                        error=e,
                        attempts=attempt,
                        total_time=time.monotonic() - start_time,
                    )

                logger.warning(
                    "retry_attempt_failed",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )

                if attempt == max_attempts:
                    break

                if on_retry is not None:
                    on_retry(attempt, e)

                retry_after = e.retry_after if isinstance(e, RateLimitError) else None
                delay = self.calculate_delay(attempt, retry_after)
                logger.debug("retry_backoff", attempt=attempt, delay_seconds=delay)
                await self._sleep(delay)
            else:
                RETRY_ATTEMPTS.labels(outcome="success").inc()
                return RetryResult(
                    success=True,
                    data=data,
                    attempts=attempt,
                    total_time=time.monotonic() - start_time,
                )

        return RetryResult(
            success=False,
            error=last_error,
            attempts=max_attempts,
            total_time=time.monotonic() - start_time,
        )


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    on_retry: Optional[OnRetry] = None,
    rng: Optional[random.Random] = None,
    sleep: Sleep = asyncio.sleep,
    non_retryable: Tuple[Type[BaseException], ...] = NON_RETRYABLE_ERRORS,
) -> RetryResult[T]:
    """Run `func` with the retry policy in `config`.

    Convenience wrapper around RetryHandler for one-off calls.
    """
    handler = RetryHandler(config, rng=rng, sleep=sleep, non_retryable=non_retryable)
    return await handler.execute(func, on_retry=on_retry)
