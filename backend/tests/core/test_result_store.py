"""Result Store — concurrency-safe per-batch accumulator.

Invariants:
    - No lost writes under concurrent insertion (threads and asyncio tasks)
    - Re-insert overwrites, never duplicates
    - snapshot() is a copy, unaffected by later writes
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from app.core.result_store import ResultStore


def test_empty_store():
    store = ResultStore()
    assert len(store) == 0
    assert store.snapshot() == []


def test_put_and_snapshot():
    store = ResultStore()
    store.put(1, "a")
    store.put(2, "b")
    assert sorted(store.snapshot()) == ["a", "b"]
    assert 1 in store
    assert 3 not in store


def test_reinsert_overwrites():
    store = ResultStore()
    store.put(1, "old")
    store.put(1, "new")
    assert len(store) == 1
    assert store.snapshot() == ["new"]


def test_snapshot_is_point_in_time_copy():
    store = ResultStore()
    store.put(1, "a")
    snap = store.snapshot()
    store.put(2, "b")
    assert snap == ["a"]
    assert len(store) == 2


def test_concurrent_thread_inserts_lose_nothing():
    store = ResultStore()
    k = 500

    with ThreadPoolExecutor(max_workers=16) as executor:
        list(executor.map(lambda i: store.put(i, f"item-{i}"), range(k)))

    assert len(store) == k
    assert sorted(store.snapshot()) == sorted(f"item-{i}" for i in range(k))


async def test_concurrent_task_inserts_lose_nothing():
    store = ResultStore()
    k = 200

    async def writer(i: int):
        await asyncio.sleep(0)
        store.put(i, i)

    await asyncio.gather(*(writer(i) for i in range(k)))

    assert len(store) == k
    assert sorted(store.snapshot()) == list(range(k))
