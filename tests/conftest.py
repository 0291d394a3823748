"""Shared pytest fixtures for the assessment test suite.

Provides:
- db_engine: in-memory SQLite async engine with all tables
- db_session: SAVEPOINT-isolated async session (app commits don't leak)
- client: AsyncClient with dependency overrides for DB-backed testing
- admin_headers: header carrying the configured admin password
- submission_payload: a valid questionnaire body (mainland, designated sector)
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from src.config.settings import get_settings
from src.db.session import Base, create_all_tables, get_async_session


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    await create_all_tables(eng)
    yield eng
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide a SAVEPOINT-isolated session.

    The outer transaction is never committed — it rolls back at teardown.
    Application code calling session.commit() triggers a SAVEPOINT release,
    which is then restarted so subsequent operations stay in the same
    outer transaction.
    """
    async with db_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)

        nested = await conn.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def restart_savepoint(sync_session, transaction):  # noqa: ARG001
            nonlocal nested
            if transaction.nested and not transaction._parent.nested:
                nested = conn.sync_connection.begin_nested()

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture
async def client(db_session):
    """AsyncClient with get_async_session overridden to use the test session."""
    from src.api.main import app

    async def _override_session():
        yield db_session

    app.dependency_overrides[get_async_session] = _override_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Password": get_settings().ADMIN_PASSWORD}


@pytest.fixture
def submission_payload() -> dict:
    """Mainland, designated sector, 35 staff, no Emiratis, payroll not compliant."""
    return {
        "company_location": "mainland",
        "industry_sector": "Construction",
        "total_employees": 35,
        "skilled_employees": 10,
        "emirati_employees": 0,
        "wps_gpssa_compliant": "no",
        "emirati_left_recently": "no",
        "contact": {
            "company_name": "Gulf Build LLC",
            "first_name": "Sara",
            "last_name": "Haddad",
            "email": "sara@gulfbuild.ae",
            "phone": "+971 4 000 0000",
        },
    }
