"""Worker Pool — bounded concurrency slots for batch workers.

Invariants:
    - At most `capacity` coroutines run inside run() at any moment
    - Submissions beyond capacity wait for a free slot (backpressure, never rejected)
    - A slot is always released, whether the coroutine returns, raises, or is cancelled

Design Decisions:
    - asyncio.Semaphore over a thread pool: workers spend their time awaiting
      IO and the simulated delay, never blocking the event loop
    - Built once in the app lifespan and injected (get_worker_pool), so the
      capacity is visible to tests and not hidden module state
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from fastapi import Request

T = TypeVar("T")


class WorkerPool:
    """Fixed-capacity slot pool shared by every batch in the process."""

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._slots = asyncio.Semaphore(capacity)
        self.in_flight = 0
        self.peak_in_flight = 0

    async def run(self, func: Callable[..., Awaitable[T]], *args) -> T:
        """Call func(*args) and await it while holding one slot.

        The coroutine is only created once a slot is acquired, so a task
        cancelled while queued leaves nothing un-awaited behind.
        """
        async with self._slots:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            try:
                return await func(*args)
            finally:
                self.in_flight -= 1


def get_worker_pool(request: Request) -> WorkerPool:
    """FastAPI dependency — the pool created in the lifespan."""
    return request.app.state.worker_pool
