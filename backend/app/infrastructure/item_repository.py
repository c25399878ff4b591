"""Item Repository — SQLAlchemy implementation of the ItemRepository protocol.

Invariants:
    - Every call opens and closes its own AsyncSession; no session is shared
      between concurrent callers (AsyncSession is not safe for concurrent use)
    - Returned items are detached but fully loaded (expire_on_commit=False)
    - Unique-email violations raise EmailAlreadyInUseError; every other
      SQLAlchemy failure raises DatabaseError via managed_session()

Design Decisions:
    - Session-per-call over request-scoped session: batch workers run in parallel
      and each needs an isolated unit of work
    - merge() for save: one code path for insert (id is None) and full replace
    - Duplicate detection keys on the unique constraint, never on the column
      name alone (a NOT NULL failure on email is not a duplicate)
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.domain_types import ItemId
from app.core.errors import EmailAlreadyInUseError, ErrorContext
from app.infrastructure.database import get_db_manager, managed_session
from app.models.item import Item

logger = logging.getLogger(__name__)

# PostgreSQL reports the constraint name; SQLite reports the constrained column
_DUPLICATE_EMAIL_MARKERS = (
    "uq_items_email",
    "UNIQUE constraint failed: items.email",
)


def is_duplicate_email(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in _DUPLICATE_EMAIL_MARKERS)


class SqlItemRepository:
    """Item persistence over an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _session(self, operation: str, item_id: ItemId | None = None):
        return managed_session(
            self._session_factory,
            ErrorContext(item_id=item_id, operation=operation),
        )

    async def list_processable_ids(self) -> list[ItemId]:
        """Every stored item id is eligible for batch processing."""
        async with self._session("list_processable_ids") as session:
            result = await session.execute(select(Item.id).order_by(Item.id))
            return [ItemId(i) for i in result.scalars().all()]

    async def find_by_id(self, item_id: ItemId) -> Item | None:
        async with self._session("find_by_id", item_id) as session:
            return await session.get(Item, item_id)

    async def list_all(self) -> list[Item]:
        async with self._session("list_all") as session:
            result = await session.execute(select(Item).order_by(Item.id))
            return list(result.scalars().all())

    async def save(self, item: Item) -> Item:
        """Insert or fully replace an item."""
        async with self._session("save", item.id) as session:
            try:
                merged = await session.merge(item)
                await session.commit()
            except IntegrityError as e:
                if not is_duplicate_email(e):
                    raise
                await session.rollback()
                logger.warning(
                    f"Failed to save item: email {item.email} is already in use",
                    extra={"item_id": item.id},
                )
                raise EmailAlreadyInUseError(
                    item.email,
                    context=ErrorContext(item_id=item.id, operation="save"),
                )
            return merged

    async def delete(self, item_id: ItemId) -> None:
        async with self._session("delete", item_id) as session:
            await session.execute(delete(Item).where(Item.id == item_id))
            await session.commit()


def get_item_repository() -> SqlItemRepository:
    """FastAPI dependency — repository bound to the process-wide engine."""
    return SqlItemRepository(get_db_manager().session_factory)
