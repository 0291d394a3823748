"""Pydantic schemas for Emiratisation risk assessments.

CompanyProfile is the engine input, RiskAssessmentResult the engine output.
AssessmentSubmission is the questionnaire as answered (tri-state answers,
contact details) and normalizes itself into a CompanyProfile.
Assessment is the persisted aggregate of all three plus the config snapshot.
"""

from decimal import Decimal
from typing import Any

from pydantic import Field, field_validator, model_validator

from src.models.common import (
    EmiratisationBase,
    Jurisdiction,
    RiskLevel,
    TriState,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)

MAX_DEPARTURE_DAYS = 365
MAX_EMPLOYEES = 1_000_000

# Intentionally loose; deliverability is not our concern.
_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# ---------------------------------------------------------------------------
# Engine input / output
# ---------------------------------------------------------------------------


class CompanyProfile(EmiratisationBase, frozen=True):
    """Workforce profile of one establishment, as seen by the risk engine."""

    jurisdiction: Jurisdiction
    sector: str = Field(..., min_length=1)
    total_employees: int = Field(..., ge=1)
    skilled_employees: int = Field(..., ge=0)
    current_qualifying_workers: int = Field(
        ..., ge=0,
        description="Emiratis currently employed.",
    )
    payroll_compliance_confirmed: bool = Field(
        ...,
        description="WPS salary transfers and GPSSA pension registration in order.",
    )
    recent_departure: bool = False
    days_since_departure: int | None = Field(
        default=None, ge=0, le=MAX_DEPARTURE_DAYS,
    )

    @model_validator(mode="after")
    def _validate_headcount(self) -> "CompanyProfile":
        if self.skilled_employees > self.total_employees:
            raise ValueError(
                f"skilled_employees ({self.skilled_employees}) cannot exceed "
                f"total_employees ({self.total_employees})."
            )
        return self


class RiskAssessmentResult(EmiratisationBase, frozen=True):
    """Immutable outcome of one engine evaluation."""

    required_count: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    gap: int = Field(..., ge=0)
    fine_estimate: Decimal = Field(..., ge=0)
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel

    @model_validator(mode="after")
    def _validate_gap(self) -> "RiskAssessmentResult":
        expected = max(0, self.required_count - self.valid_count)
        if self.gap != expected:
            raise ValueError(
                f"gap ({self.gap}) must equal max(0, required_count - valid_count) "
                f"= {expected}."
            )
        return self


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------


class ContactDetails(EmiratisationBase, frozen=True):
    """Who submitted the questionnaire."""

    company_name: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=_EMAIL_PATTERN)
    phone: str = Field(..., min_length=1, max_length=50)

    @field_validator("company_name", "first_name", "last_name", "phone")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class AssessmentSubmission(EmiratisationBase, frozen=True):
    """Questionnaire answers exactly as submitted.

    Tri-state answers are normalized conservatively by to_profile(): only an
    explicit "yes" confirms payroll compliance or a recent departure, so
    "not sure" never earns the compliance credit or the grace-period bonus.
    """

    company_location: Jurisdiction
    industry_sector: str = Field(..., min_length=1)
    total_employees: int = Field(..., ge=1, le=MAX_EMPLOYEES)
    skilled_employees: int = Field(..., ge=0, le=MAX_EMPLOYEES)
    emirati_employees: int = Field(..., ge=0, le=MAX_EMPLOYEES)
    wps_gpssa_compliant: TriState
    emirati_left_recently: TriState
    departure_days_ago: int | None = Field(default=None, ge=0, le=MAX_DEPARTURE_DAYS)
    nafis_registered: TriState = TriState.NOT_SURE
    contact: ContactDetails

    @model_validator(mode="after")
    def _validate_answers(self) -> "AssessmentSubmission":
        if self.skilled_employees > self.total_employees:
            raise ValueError("Skilled employees cannot exceed total employees.")
        if (
            self.emirati_left_recently is TriState.YES
            and self.departure_days_ago is None
        ):
            raise ValueError("Please specify how many days ago the Emirati left.")
        if (
            self.emirati_left_recently is TriState.NO
            and self.departure_days_ago is not None
        ):
            raise ValueError(
                "departure_days_ago must be omitted when no Emirati left recently."
            )
        return self

    def to_profile(self) -> CompanyProfile:
        """Normalize the answers into the engine's CompanyProfile."""
        recent_departure = self.emirati_left_recently.as_conservative_bool()
        return CompanyProfile(
            jurisdiction=self.company_location,
            sector=self.industry_sector,
            total_employees=self.total_employees,
            skilled_employees=self.skilled_employees,
            current_qualifying_workers=self.emirati_employees,
            payroll_compliance_confirmed=self.wps_gpssa_compliant.as_conservative_bool(),
            recent_departure=recent_departure,
            days_since_departure=self.departure_days_ago if recent_departure else None,
        )


# ---------------------------------------------------------------------------
# Persisted aggregate
# ---------------------------------------------------------------------------


class Assessment(EmiratisationBase, frozen=True):
    """A stored submission with its computed result."""

    assessment_id: UUIDv7 = Field(default_factory=new_uuid7)
    submission: AssessmentSubmission
    profile: CompanyProfile
    result: RiskAssessmentResult
    config_snapshot: dict[str, Any] = Field(default_factory=dict)
    created_at: UTCTimestamp = Field(default_factory=utc_now)

    @property
    def emiratisation_pct(self) -> float:
        """Emiratis as a share of total headcount, in percent."""
        return self.profile.current_qualifying_workers / self.profile.total_employees * 100

    @property
    def skilled_emiratisation_pct(self) -> float:
        """Emiratis as a share of skilled headcount; 0.0 without skilled staff."""
        if self.profile.skilled_employees == 0:
            return 0.0
        return self.profile.current_qualifying_workers / self.profile.skilled_employees * 100
