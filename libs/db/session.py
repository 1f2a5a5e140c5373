from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from libs.db.config import AsyncSessionLocal


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an async database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    All-or-nothing boundary around a sequence of writes.

    Commits when the block exits normally. Any exception rolls back every
    write made through ``session`` inside the block and is re-raised as is.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise
