"""Process Worker — transitions one item to PROCESSED and records the outcome.

Invariants:
    - Simulated latency happens before any side effect
    - Result store written only after a successful save
    - Never raises to the caller: every failure degrades to "item missing from result"
    - Exactly one ProcessingOutcome returned per run

Design Decisions:
    - asyncio.sleep as the latency: a real suspension point that keeps the worker
      holding its pool slot, so pool capacity is observable
    - CancelledError handled locally: a cancelled worker ends as CANCELLED and
      its siblings keep running
    - No retry on persistence failures (ADR: best-effort batch, one attempt per item)
"""

import asyncio
import logging

from app.core.domain_types import ItemId, ItemStatus, ProcessingOutcome
from app.core.errors import DatabaseError, EmailAlreadyInUseError
from app.core.repository_protocols import ItemRepository
from app.core.result_store import ResultStore

logger = logging.getLogger(__name__)


class ProcessWorker:
    """Per-item task: delay → fetch → mark processed → save → record."""

    def __init__(self, repository: ItemRepository, delay_seconds: float = 0.1):
        self.repository = repository
        self.delay_seconds = delay_seconds

    async def run(
        self, item_id: ItemId, results: ResultStore,
    ) -> ProcessingOutcome:
        try:
            await asyncio.sleep(self.delay_seconds)

            item = await self.repository.find_by_id(item_id)
            if item is None:
                logger.warning(
                    f"Item {item_id} not found, skipping",
                    extra={"item_id": item_id, "outcome": ProcessingOutcome.NOT_FOUND.value},
                )
                return ProcessingOutcome.NOT_FOUND

            item.status = ItemStatus.PROCESSED.value
            saved = await self.repository.save(item)
        except asyncio.CancelledError:
            logger.warning(
                f"Processing cancelled for item {item_id}",
                extra={"item_id": item_id, "outcome": ProcessingOutcome.CANCELLED.value},
            )
            return ProcessingOutcome.CANCELLED
        except (EmailAlreadyInUseError, DatabaseError) as e:
            logger.error(
                f"Persistence rejected item {item_id}: {e.message}",
                extra={
                    "item_id": item_id, "error_code": e.code,
                    "outcome": ProcessingOutcome.CONFLICT.value,
                },
            )
            return ProcessingOutcome.CONFLICT
        except Exception as e:
            logger.error(
                f"Error processing item {item_id}: {e}",
                extra={"item_id": item_id, "outcome": ProcessingOutcome.FAILED.value},
                exc_info=True,
            )
            return ProcessingOutcome.FAILED

        results.put(item_id, saved)
        logger.info(
            f"Successfully processed item {item_id}",
            extra={"item_id": item_id, "outcome": ProcessingOutcome.PROCESSED.value},
        )
        return ProcessingOutcome.PROCESSED
