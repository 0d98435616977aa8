"""Common behavior of the extraction phases.

A phase reads what earlier phases left in the ExtractionContext, does one
step of work and writes its output back. ``run()`` is the only entry point
the orchestrator uses; it handles skipping, timing and error bookkeeping so
subclasses only implement ``execute()``.
"""

import time
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import structlog

from tieredpdf.observability.metrics import PHASE_DURATION
from tieredpdf.orchestration.context import ExtractionContext

T = TypeVar("T")


class PipelinePhase(ABC, Generic[T]):
    """One step of the tiered extraction of a document.

    Type parameter T is the type returned by execute().
    """

    def __init__(self, context: ExtractionContext) -> None:
        self.context = context
        self.logger = structlog.get_logger().bind(
            phase=self.name, document_id=context.document_id
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Phase name used in logs, metric labels and context errors."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def execute(self) -> T:
        """Do the work of the phase.

        Raises:
            Exception: Propagated by run() after it is recorded
        """
        pass  # pragma: no cover - abstract method

    def is_enabled(self) -> bool:
        """Whether the phase applies to this document."""
        return True

    def skip_reason(self) -> str:
        return "disabled by configuration"

    async def run(self) -> T:
        """Execute unless disabled; record failures on the context and re-raise."""
        if not self.is_enabled():
            self.logger.info("phase_skipped", reason=self.skip_reason())
            return self._get_default_result()

        started = time.perf_counter()
        try:
            with PHASE_DURATION.labels(phase=self.name).time():
                result = await self.execute()
        except Exception as e:
            self.logger.exception("phase_failed", error=str(e))
            self.context.add_error(self.name, str(e))
            raise

        self.logger.debug(
            "phase_completed", duration_seconds=round(time.perf_counter() - started, 3)
        )
        return result

    def _get_default_result(self) -> T:
        """Result returned when the phase is skipped."""
        return None  # type: ignore
