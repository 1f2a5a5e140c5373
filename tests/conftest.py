from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import get_settings
from libs.db.base import Base

# Import all models so metadata includes every table
from services.order_service import models as _order_models  # noqa: F401

settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Create a fresh database per test.
    In-memory SQLite needs a single shared connection (StaticPool).
    """
    engine_options = {"future": True}
    if settings.DATABASE_URL.startswith("sqlite"):
        engine_options.update(
            poolclass=StaticPool, connect_args={"check_same_thread": False}
        )
    engine = create_async_engine(settings.DATABASE_URL, **engine_options)

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables after test
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session bound to the per-test database.
    Services commit and roll back on it exactly as they do in production.
    """
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()

    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB dependency.
    """
    from libs.db.session import get_async_db
    from services.order_service.app.main import app

    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
