"""Service test fixtures — fake repository, async SQLite DB and FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - get_item_repository and get_worker_pool overridden on the app
    - db_manager patched so readiness probes hit the test DB
    - fake_repo is an in-memory ItemRepository with injectable failures
    - unreachable_repo raises real OperationalErrors from the driver

Design Decisions:
    - File-backed SQLite over :memory:: concurrent workers need separate
      connections, and an in-memory DB is private to one connection
    - Plain fake for worker/processor tests: failure modes are set per id
      without touching a database
"""

import asyncio
import dataclasses
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

import app.infrastructure.database as db_module
from app.db.base import Base
from app.db.session import create_session_factory
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.item_repository import SqlItemRepository, get_item_repository
from app.infrastructure.worker_pool import WorkerPool, get_worker_pool
from app.main import app
from app.models.item import Item


# -- In-memory repository -----------------------------------------------------

@dataclass
class FakeItem:
    id: int
    name: str
    description: str | None
    status: str
    email: str


class FakeItemRepository:
    """ItemRepository double.

    - vanished_ids: listed as processable but never found (deleted mid-batch)
    - save_errors / find_errors: exception raised for that id
    - find_delay: extra await inside find_by_id, to widen race windows
    """

    def __init__(self):
        self.items: dict[int, FakeItem] = {}
        self.vanished_ids: set[int] = set()
        self.save_errors: dict[int, BaseException] = {}
        self.find_errors: dict[int, BaseException] = {}
        self.find_delay = 0.0
        self.find_calls: list[int] = []
        self.save_calls: list[int] = []

    def add(self, item_id: int, status: str = "PENDING") -> FakeItem:
        item = FakeItem(
            id=item_id, name=f"Item {item_id}", description=None,
            status=status, email=f"item{item_id}@example.com",
        )
        self.items[item_id] = item
        return item

    async def list_processable_ids(self) -> list[int]:
        return sorted(set(self.items) | self.vanished_ids)

    async def find_by_id(self, item_id):
        self.find_calls.append(item_id)
        if self.find_delay:
            await asyncio.sleep(self.find_delay)
        if item_id in self.find_errors:
            raise self.find_errors[item_id]
        item = self.items.get(item_id)
        return dataclasses.replace(item) if item else None

    async def save(self, item):
        self.save_calls.append(item.id)
        if item.id in self.save_errors:
            raise self.save_errors[item.id]
        self.items[item.id] = dataclasses.replace(item)
        return dataclasses.replace(item)

    async def list_all(self):
        return [dataclasses.replace(i) for i in self.items.values()]

    async def delete(self, item_id) -> None:
        self.items.pop(item_id, None)


@pytest.fixture
def fake_repo():
    return FakeItemRepository()


# -- SQLite-backed fixtures ---------------------------------------------------

@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'items.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def sql_repo(test_session_factory):
    return SqlItemRepository(test_session_factory)


@pytest.fixture
async def unreachable_repo(tmp_path):
    """Repository whose engine points at a path SQLite cannot open."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'items.db'}",
    )
    yield SqlItemRepository(create_session_factory(engine))
    await engine.dispose()


@pytest.fixture
async def seed_items(test_session_factory):
    """Insert three PENDING items directly into the test DB."""
    async with test_session_factory() as session:
        items = [
            Item(
                name=f"Item {i}", description=f"Description {i}",
                status="PENDING", email=f"item{i}@example.com",
            )
            for i in range(1, 4)
        ]
        session.add_all(items)
        await session.commit()
    return items


@pytest.fixture
async def worker_pool():
    return WorkerPool(capacity=10)


@pytest.fixture
async def client(test_engine, test_session_factory, worker_pool):
    """FastAPI test client with repository and pool dependencies overridden."""
    app.dependency_overrides[get_item_repository] = (
        lambda: SqlItemRepository(test_session_factory)
    )
    app.dependency_overrides[get_worker_pool] = lambda: worker_pool

    # Patch db_manager for the readiness probe
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager.session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
