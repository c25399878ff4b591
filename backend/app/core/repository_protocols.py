"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the worker awaits them directly
"""

from typing import Protocol

from app.core.domain_types import ItemId


class ItemLike(Protocol):
    """Structural contract for Item objects passed through the processing pipeline.

    Avoids coupling the worker to the ORM model while giving mypy
    real type information (unlike Any).
    """
    id: int
    name: str
    description: str | None
    status: str
    email: str


class ItemRepository(Protocol):
    """Contract for item persistence — implemented by shell.

    save() raises EmailAlreadyInUseError on a duplicate email and
    DatabaseError on any other storage failure.
    """
    async def list_processable_ids(self) -> list[ItemId]: ...
    async def find_by_id(self, item_id: ItemId) -> ItemLike | None: ...
    async def save(self, item: ItemLike) -> ItemLike: ...
    async def list_all(self) -> list[ItemLike]: ...
    async def delete(self, item_id: ItemId) -> None: ...
