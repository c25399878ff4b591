"""Item Processor — fans out one worker per item and joins on all of them.

Invariants:
    - One fresh ResultStore per invocation; nothing leaks between batches
    - Every worker reaches a terminal state before the result is read (full join,
      no timeout, no early partial results)
    - One failed or cancelled worker never aborts or cancels the batch
    - Cancelling process_all() itself propagates to the caller

Design Decisions:
    - asyncio.gather(return_exceptions=True) as the completion barrier: a task
      cancelled while still queued for a pool slot surfaces as a value, not a raise
    - Pool injected, not constructed here: capacity is a process-wide resource
    - Per-outcome counters logged after every batch; the response alone cannot
      tell "all succeeded" from "some silently skipped"
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from app.core.domain_types import ItemId, ProcessingOutcome
from app.core.processing_stats import ProcessingStats
from app.core.repository_protocols import ItemLike, ItemRepository
from app.core.result_store import ResultStore
from app.infrastructure.worker_pool import WorkerPool
from app.services.process_worker import ProcessWorker

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Items processed in one invocation plus the outcome tally."""
    items: list[ItemLike]
    stats: ProcessingStats


class ItemProcessor:
    """Orchestrates a process-all batch over a bounded worker pool."""

    def __init__(
        self,
        repository: ItemRepository,
        pool: WorkerPool,
        delay_seconds: float = 0.1,
    ):
        self.repository = repository
        self.pool = pool
        self.worker = ProcessWorker(repository, delay_seconds)

    async def process_all(self) -> list[ItemLike]:
        """Process every eligible item; return those that reached PROCESSED."""
        batch = await self.run_batch()
        return batch.items

    async def run_batch(self) -> BatchResult:
        started = time.perf_counter()
        item_ids = await self.repository.list_processable_ids()
        results: ResultStore = ResultStore()

        tasks = [
            asyncio.create_task(self.pool.run(self.worker.run, item_id, results))
            for item_id in item_ids
        ]
        finished = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = [
            self._to_outcome(item_id, r) for item_id, r in zip(item_ids, finished)
        ]
        stats = ProcessingStats.from_outcomes(outcomes)
        logger.info(
            f"Batch finished: {stats.count(ProcessingOutcome.PROCESSED)}/{stats.total} processed",
            extra={
                **stats.as_log_fields(),
                "duration_ms": round((time.perf_counter() - started) * 1000),
                "pool_capacity": self.pool.capacity,
            },
        )
        return BatchResult(items=results.snapshot(), stats=stats)

    @staticmethod
    def _to_outcome(item_id: ItemId, result: object) -> ProcessingOutcome:
        """Map a gathered task result to an outcome.

        Workers return outcomes themselves; anything else means the task died
        outside the worker (e.g. cancelled while waiting for a slot).
        """
        if isinstance(result, ProcessingOutcome):
            return result
        if isinstance(result, asyncio.CancelledError):
            logger.warning(
                f"Item {item_id} cancelled before processing started",
                extra={"item_id": item_id, "outcome": ProcessingOutcome.CANCELLED.value},
            )
            return ProcessingOutcome.CANCELLED
        logger.error(
            f"Worker for item {item_id} ended unexpectedly: {result!r}",
            extra={"item_id": item_id, "outcome": ProcessingOutcome.FAILED.value},
        )
        return ProcessingOutcome.FAILED
