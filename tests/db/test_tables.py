"""Tests for SQLAlchemy ORM models — src/db/tables.py.

Tests verify:
- All 3 tables are created by create_all_tables
- FlexJSON columns round-trip nested dicts on SQLite
- Constraints (PK, UNIQUE, NOT NULL)
"""

from uuid import UUID

import pytest
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.db.session import create_all_tables
from src.db.tables import AssessmentRow, ConfigurationRow, SectorRow
from src.models.common import new_uuid7, utc_now


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    await create_all_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(engine):
    async with async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)() as s:
        yield s


def _assessment_row(**overrides) -> AssessmentRow:
    values = {
        "assessment_id": new_uuid7(),
        "company_location": "mainland",
        "industry_sector": "Construction",
        "total_employees": 35,
        "skilled_employees": 10,
        "emirati_employees": 0,
        "nafis_registered": "not_sure",
        "wps_gpssa_compliant": "no",
        "emirati_left_recently": "no",
        "departure_days_ago": None,
        "company_name": "Gulf Build LLC",
        "first_name": "Sara",
        "last_name": "Haddad",
        "email": "sara@gulfbuild.ae",
        "phone": "+971 4 000 0000",
        "required_count": 2,
        "valid_count": 0,
        "gap": 2,
        "fine_estimate": 192000.0,
        "risk_score": 50,
        "risk_level": "medium",
        "profile": {"sector": "Construction", "total_employees": 35},
        "config_snapshot": {"grace_period_days": 90, "designated_sectors": ["Construction"]},
        "engine_version": "1.0.0",
        "created_at": utc_now(),
    }
    values.update(overrides)
    return AssessmentRow(**values)


# ---------------------------------------------------------------------------
# Table existence
# ---------------------------------------------------------------------------


class TestTableCreation:
    EXPECTED_TABLES = {"assessments", "configuration", "sectors"}

    async def test_all_tables_created(self, engine):
        async with engine.connect() as conn:
            names = await conn.run_sync(lambda c: set(inspect(c).get_table_names()))
        assert self.EXPECTED_TABLES <= names

    async def test_create_all_tables_idempotent(self, engine):
        await create_all_tables(engine)
        async with engine.connect() as conn:
            names = await conn.run_sync(lambda c: set(inspect(c).get_table_names()))
        assert self.EXPECTED_TABLES <= names


# ---------------------------------------------------------------------------
# AssessmentRow
# ---------------------------------------------------------------------------


class TestAssessmentRow:
    async def test_insert_and_read(self, session):
        row = _assessment_row()
        session.add(row)
        await session.commit()

        result = await session.execute(
            select(AssessmentRow).where(AssessmentRow.assessment_id == row.assessment_id)
        )
        fetched = result.scalar_one()
        assert isinstance(fetched.assessment_id, UUID)
        assert fetched.departure_days_ago is None
        assert fetched.fine_estimate == 192000.0

    async def test_flexjson_round_trip(self, session):
        row = _assessment_row()
        session.add(row)
        await session.commit()
        session.expunge_all()

        fetched = await session.get(AssessmentRow, row.assessment_id)
        assert fetched.config_snapshot == {
            "grace_period_days": 90,
            "designated_sectors": ["Construction"],
        }
        assert fetched.profile["total_employees"] == 35

    async def test_required_column_not_null(self, session):
        session.add(_assessment_row(company_name=None))
        with pytest.raises(IntegrityError):
            await session.commit()


# ---------------------------------------------------------------------------
# Reference tables
# ---------------------------------------------------------------------------


class TestConfigurationRow:
    async def test_key_is_primary_key(self, session):
        now = utc_now()
        session.add(ConfigurationRow(key="grace_period_days", value="60", updated_at=now))
        await session.commit()
        session.add(ConfigurationRow(key="grace_period_days", value="30", updated_at=now))
        with pytest.raises(IntegrityError):
            await session.commit()

    async def test_description_nullable(self, session):
        session.add(ConfigurationRow(key="target_percent", value="8", updated_at=utc_now()))
        await session.commit()
        fetched = await session.get(ConfigurationRow, "target_percent")
        assert fetched.description is None


class TestSectorRow:
    async def test_name_unique(self, session):
        now = utc_now()
        for _ in range(2):
            session.add(SectorRow(
                sector_id=new_uuid7(),
                name="Construction",
                is_designated=True,
                is_active=True,
                created_at=now,
                updated_at=now,
            ))
        with pytest.raises(IntegrityError):
            await session.commit()

    async def test_flag_defaults(self, session):
        now = utc_now()
        row = SectorRow(sector_id=new_uuid7(), name="Other", created_at=now, updated_at=now)
        session.add(row)
        await session.commit()
        fetched = await session.get(SectorRow, row.sector_id)
        assert fetched.is_designated is False
        assert fetched.is_active is True
