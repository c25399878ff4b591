"""Process Worker — per-item fetch → mark → save → record, with failure isolation.

Invariants:
    - Success writes exactly one entry, status PROCESSED, persisted via save()
    - Not-found, conflict, cancellation, unexpected errors: no entry, no raise
    - The simulated delay precedes any repository call
"""

import asyncio

from app.core.domain_types import ProcessingOutcome
from app.core.errors import DatabaseError, EmailAlreadyInUseError
from app.core.result_store import ResultStore
from app.services.process_worker import ProcessWorker


async def test_success_marks_processed_and_records(fake_repo):
    fake_repo.add(1)
    results = ResultStore()

    outcome = await ProcessWorker(fake_repo, 0).run(1, results)

    assert outcome == ProcessingOutcome.PROCESSED
    assert [i.status for i in results.snapshot()] == ["PROCESSED"]
    assert fake_repo.items[1].status == "PROCESSED"
    assert fake_repo.save_calls == [1]


async def test_missing_item_is_skipped(fake_repo):
    results = ResultStore()

    outcome = await ProcessWorker(fake_repo, 0).run(42, results)

    assert outcome == ProcessingOutcome.NOT_FOUND
    assert len(results) == 0
    assert fake_repo.save_calls == []


async def test_email_conflict_is_skipped(fake_repo):
    fake_repo.add(1)
    fake_repo.save_errors[1] = EmailAlreadyInUseError("item1@example.com")
    results = ResultStore()

    outcome = await ProcessWorker(fake_repo, 0).run(1, results)

    assert outcome == ProcessingOutcome.CONFLICT
    assert len(results) == 0
    assert fake_repo.items[1].status == "PENDING"


async def test_database_error_is_skipped(fake_repo):
    fake_repo.add(1)
    fake_repo.save_errors[1] = DatabaseError("locked", "commit")
    results = ResultStore()

    outcome = await ProcessWorker(fake_repo, 0).run(1, results)

    assert outcome == ProcessingOutcome.CONFLICT
    assert len(results) == 0


async def test_storage_failure_during_fetch_is_a_conflict(unreachable_repo):
    results = ResultStore()

    outcome = await ProcessWorker(unreachable_repo, 0).run(1, results)

    assert outcome == ProcessingOutcome.CONFLICT
    assert len(results) == 0


async def test_unexpected_error_is_skipped(fake_repo):
    fake_repo.add(1)
    fake_repo.find_errors[1] = RuntimeError("driver exploded")
    results = ResultStore()

    outcome = await ProcessWorker(fake_repo, 0).run(1, results)

    assert outcome == ProcessingOutcome.FAILED
    assert len(results) == 0


async def test_cancelled_during_delay_ends_cleanly(fake_repo):
    fake_repo.add(1)
    results = ResultStore()
    task = asyncio.create_task(ProcessWorker(fake_repo, 5).run(1, results))
    await asyncio.sleep(0.01)

    task.cancel()
    outcome = await task

    assert outcome == ProcessingOutcome.CANCELLED
    assert fake_repo.find_calls == []
    assert len(results) == 0


async def test_delay_precedes_fetch(fake_repo):
    fake_repo.add(1)
    results = ResultStore()
    task = asyncio.create_task(ProcessWorker(fake_repo, 0.05).run(1, results))

    await asyncio.sleep(0.01)
    assert fake_repo.find_calls == []

    assert await task == ProcessingOutcome.PROCESSED
    assert fake_repo.find_calls == [1]
