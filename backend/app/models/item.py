"""Item ORM — persists the single record type managed by the API.

Invariants:
    - id is an autoincrement integer primary key
    - email is unique across all items (DB-level constraint)
    - status is one of PENDING | PROCESSING | PROCESSED | FAILED (check constraint)

Design Decisions:
    - status stored as String, not a native Enum type: migrations stay portable
      between PostgreSQL and SQLite test databases
"""

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import ItemStatus
from app.db.base import Base

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in ItemStatus)


class Item(Base):
    """Item record — name, description, status and a unique contact email."""
    __tablename__ = "items"
    __table_args__ = (
        UniqueConstraint("email", name="uq_items_email"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_items_status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(
        String(500), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ItemStatus.PENDING.value,
    )
    email: Mapped[str] = mapped_column(
        String(320), nullable=False,
    )

    def __repr__(self) -> str:
        return f"Item(id={self.id!r}, status={self.status!r})"
