"""Integration-test fixtures.

Every test gets its own SQLite database file, created from the ORM
metadata, and real repositories on top of it. Sessions come from a
per-test sessionmaker so concurrent coroutines use separate connections,
which is what makes the isolation tests meaningful.
"""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.main import app
from src.pt_account.infrastructure import db_models as _account_tables  # noqa: F401
from src.pt_common.database import Base, create_engine_for, get_db_session
from src.pt_ledger.infrastructure import db_models as _ledger_tables  # noqa: F401


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    eng = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'points.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the per-test database."""

    async def _db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
