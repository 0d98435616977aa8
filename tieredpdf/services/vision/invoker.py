"""Resilient wrapper around a vision service.

Each problematic page becomes one batch task. A task runs the service call
through the shared circuit breaker, and the breaker call through the retry
handler, so a tripped breaker is retried like any other failure and a page
that never succeeds ends up as None in the batch output.
"""

import asyncio
import random
from typing import Dict, Optional, Sequence

import structlog

from tieredpdf.models.resilience import BatchConfig, RetryConfig
from tieredpdf.observability.metrics import PAGES_EXTRACTED
from tieredpdf.services.vision.base import VisionService
from tieredpdf.utils.batch import BatchTask, run_batch
from tieredpdf.utils.circuit_breaker import CircuitBreaker
from tieredpdf.utils.exceptions import VisionNotConfiguredError
from tieredpdf.utils.retry import RetryHandler, Sleep

logger = structlog.get_logger()


class ResilientVisionInvoker:
    """Runs per-page vision calls with retry, circuit breaking and bounded fan-out."""

    def __init__(
        self,
        service: VisionService,
        circuit_breaker: CircuitBreaker,
        retry_config: Optional[RetryConfig] = None,
        batch_config: Optional[BatchConfig] = None,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.service = service
        self.circuit_breaker = circuit_breaker
        self.batch_config = batch_config or BatchConfig()
        self.retry_handler = RetryHandler(retry_config, rng=rng, sleep=sleep)

    def is_configured(self) -> bool:
        return self.service.is_configured()

    async def _extract_one(self, document_bytes: bytes, page_number: int) -> str:
        def log_retry(attempt: int, error: BaseException) -> None:
            logger.info(
                "vision_page_retry",
                page_number=page_number,
                attempt=attempt,
                error=str(error),
                circuit_state=self.circuit_breaker.state.value,
            )

        result = await self.retry_handler.execute(
            lambda: self.circuit_breaker.execute(
                lambda: self.service.extract_pages(document_bytes, [page_number])
            ),
            on_retry=log_retry,
        )
        texts = result.unwrap()
        return texts.get(page_number, "")

    async def extract_pages(
        self, document_bytes: bytes, page_numbers: Sequence[int]
    ) -> Dict[int, str]:
        """Read the given pages with vision.

        Args:
            document_bytes: Raw PDF bytes
            page_numbers: 1-indexed pages to read

        Returns:
            Mapping of page number to non-empty text. Pages that failed
            after all retries, or came back empty, are absent.

        Raises:
            VisionNotConfiguredError: If the service cannot make calls
        """
        if not self.is_configured():
            raise VisionNotConfiguredError(
                f"Vision service '{self.service.name}' is not configured"
            )

        tasks = [
            BatchTask(
                key=page_number,
                fn=lambda p=page_number: self._extract_one(document_bytes, p),
            )
            for page_number in page_numbers
        ]

        raw = await run_batch(
            tasks,
            concurrency=self.batch_config.concurrency,
            continue_on_error=self.batch_config.continue_on_error,
        )

        texts: Dict[int, str] = {}
        for page_number in page_numbers:
            text = raw.get(page_number)
            if text and text.strip():
                texts[page_number] = text
                PAGES_EXTRACTED.labels(tier="vision", status="success").inc()
            else:
                PAGES_EXTRACTED.labels(tier="vision", status="failed").inc()

        logger.info(
            "vision_pages_extracted",
            requested=len(page_numbers),
            extracted=len(texts),
            circuit_state=self.circuit_breaker.state.value,
        )
        return texts
