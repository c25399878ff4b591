"""Async Session Factory — the one place session settings are defined.

Invariants:
    - expire_on_commit=False: items stay readable after their session closes
    - Used by DatabaseSessionManager and by test fixtures that own their engine

Design Decisions:
    - Accepts an engine rather than a URL: test fixtures create and dispose
      the engine themselves (create_all / drop_all around each test)
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
