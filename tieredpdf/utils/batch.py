"""Bounded-concurrency batch runner.

A fixed pool of workers drains a shared queue of keyed tasks. Results are
stored by key, so completion order never affects where a result lands.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")

OnProgress = Callable[[int, int], None]


@dataclass
class BatchTask(Generic[T]):
    """A unit of work identified by `key` (a page number for vision calls)."""

    key: int
    fn: Callable[[], Awaitable[T]]


async def run_batch(
    tasks: Sequence[BatchTask[T]],
    concurrency: int = 3,
    continue_on_error: bool = True,
    on_progress: Optional[OnProgress] = None,
) -> Dict[int, Optional[T]]:
    """Run tasks with at most `concurrency` in flight.

    Args:
        tasks: Tasks to run; keys should be unique
        concurrency: Maximum number of concurrently running tasks
        continue_on_error: Store None for a failed task instead of aborting
        on_progress: Called with (completed, total) after every finished task

    Returns:
        Mapping of task key to result (None where a task failed)

    Raises:
        Exception: The first task error when continue_on_error is False
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    results: Dict[int, Optional[T]] = {}
    total = len(tasks)
    if total == 0:
        return results

    queue: asyncio.Queue[BatchTask[T]] = asyncio.Queue()
    for task in tasks:
        queue.put_nowait(task)

    completed = 0

    async def worker(worker_id: int) -> None:
        nonlocal completed
        while True:
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            try:
                results[task.key] = await task.fn()
            except Exception as e:
                logger.error(
                    "batch_task_failed",
                    worker_id=worker_id,
                    key=task.key,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                if not continue_on_error:
                    raise
                results[task.key] = None

            completed += 1
            if on_progress is not None:
                on_progress(completed, total)

    num_workers = min(concurrency, total)
    logger.info("batch_started", total_tasks=total, workers=num_workers)

    workers: List[asyncio.Task] = [
        asyncio.create_task(worker(i)) for i in range(num_workers)
    ]
    try:
        await asyncio.gather(*workers)
    except BaseException:
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        raise

    failed = sum(1 for v in results.values() if v is None)
    logger.info(
        "batch_completed",
        total=total,
        successful=len(results) - failed,
        failed=failed,
    )
    return results
