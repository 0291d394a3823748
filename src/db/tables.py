"""SQLAlchemy ORM table models for the assessment store.

Uses FlexJSON (JSONB on Postgres, JSON on SQLite) for nested snapshots.

Categories:
- IMMUTABLE: Assessment (written once, never updated)
- OPERATIONAL: Configuration, Sector (admin-editable reference data)
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from src.db.session import Base

# JSONB on PostgreSQL, plain JSON on SQLite (for tests)
FlexJSON = JSONB().with_variant(JSON(), "sqlite")


# ---------------------------------------------------------------------------
# Assessments — IMMUTABLE
# ---------------------------------------------------------------------------


class AssessmentRow(Base):
    """One questionnaire submission with its computed result."""

    __tablename__ = "assessments"

    assessment_id: Mapped[UUID] = mapped_column(primary_key=True)

    # Company profile
    company_location: Mapped[str] = mapped_column(String(20), nullable=False)
    industry_sector: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    total_employees: Mapped[int] = mapped_column(Integer, nullable=False)
    skilled_employees: Mapped[int] = mapped_column(Integer, nullable=False)

    # Emirati workforce answers (tri-state strings as submitted)
    emirati_employees: Mapped[int] = mapped_column(Integer, nullable=False)
    nafis_registered: Mapped[str] = mapped_column(String(20), nullable=False)
    wps_gpssa_compliant: Mapped[str] = mapped_column(String(20), nullable=False)
    emirati_left_recently: Mapped[str] = mapped_column(String(20), nullable=False)
    departure_days_ago: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Contact
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Calculated results
    required_count: Mapped[int] = mapped_column(Integer, nullable=False)
    valid_count: Mapped[int] = mapped_column(Integer, nullable=False)
    gap: Mapped[int] = mapped_column(Integer, nullable=False)
    fine_estimate: Mapped[float] = mapped_column(Float, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_level: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Reproducibility: normalized profile and the config it was scored with
    profile: Mapped[dict] = mapped_column(FlexJSON, nullable=False)
    config_snapshot: Mapped[dict] = mapped_column(FlexJSON, nullable=False)
    engine_version: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Reference data — OPERATIONAL
# ---------------------------------------------------------------------------


class ConfigurationRow(Base):
    """Admin override for one RiskConfig tunable, stored as text."""

    __tablename__ = "configuration"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SectorRow(Base):
    """Recognized economic activity. Deleting sets is_active=False."""

    __tablename__ = "sectors"

    sector_id: Mapped[UUID] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    is_designated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
