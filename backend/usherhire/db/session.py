"""
Async engine and per-request session dependency.

The request's session is one transaction: it commits when the route returns
and rolls back on any exception, so multi-step workflow operations either
land together or not at all.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from usherhire.core.config import get_settings

settings = get_settings()

_engine_kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
if not settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

AFTER_COMMIT_KEY = "after_commit"


def run_after_commit(session: AsyncSession, hook: Callable[[], Awaitable[None]]) -> None:
    """Queue ``hook`` to run once the request's transaction has committed. Dropped on rollback."""
    session.info.setdefault(AFTER_COMMIT_KEY, []).append(hook)


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back on any exception, then run the queued after-commit hooks."""
    try:
        yield session
        await session.commit()
    except Exception:
        session.info.pop(AFTER_COMMIT_KEY, None)
        await session.rollback()
        raise

    for hook in session.info.pop(AFTER_COMMIT_KEY, []):
        await hook()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        async with transaction(session):
            yield session
