"""Result Store — concurrency-safe accumulator of processed items for one batch.

Invariants:
    - put() is atomic per key; re-inserting an id overwrites the previous entry
    - snapshot() returns a point-in-time copy; later writes never mutate it
    - The backing dict is never touched outside the lock
    - No deletion — a store lives for exactly one batch and is then dropped

Design Decisions:
    - threading.Lock over asyncio.Lock: put() never awaits, and the store stays safe
      if workers are ever moved onto a thread pool
    - Fresh instance per ItemProcessor invocation; a process-wide store leaks
      results from earlier batches into later responses
"""

import threading
from typing import Generic, TypeVar

from app.core.domain_types import ItemId

T = TypeVar("T")


class ResultStore(Generic[T]):
    """Keyed container of successfully processed records."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[ItemId, T] = {}

    def put(self, item_id: ItemId, item: T) -> None:
        with self._lock:
            self._items[item_id] = item

    def snapshot(self) -> list[T]:
        """All current entries. Order is not meaningful."""
        with self._lock:
            return list(self._items.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return item_id in self._items
