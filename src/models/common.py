"""Shared types, enums, and base models used across the assessment domain."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class Jurisdiction(StrEnum):
    """Where the establishment is licensed."""

    MAINLAND = "mainland"
    FREEZONE = "freezone"


class RiskLevel(StrEnum):
    """Risk tier derived from the 0-100 risk score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TriState(StrEnum):
    """Questionnaire answer that allows an explicit 'not sure'."""

    YES = "yes"
    NO = "no"
    NOT_SURE = "not_sure"

    def as_conservative_bool(self) -> bool:
        """Only an explicit YES counts as true."""
        return self is TriState.YES


# --- Base model ---


class EmiratisationBase(BaseModel):
    """Base model with common configuration for all domain Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }
