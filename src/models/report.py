"""Report and dashboard schemas derived from stored assessments."""

from decimal import Decimal
from enum import StrEnum

from pydantic import Field

from src.models.common import EmiratisationBase, RiskLevel


class CallToActionKind(StrEnum):
    """What a call to action asks the reader to do."""

    BOOK_CONSULTATION = "book_consultation"
    CALL_SPECIALIST = "call_specialist"
    DOWNLOAD_REPORT = "download_report"


class CallToAction(EmiratisationBase, frozen=True):
    """A single follow-up action rendered under the results."""

    kind: CallToActionKind
    title: str
    description: str
    target: str = Field(..., min_length=1, description="URL or tel: link.")


class AssessmentReport(EmiratisationBase, frozen=True):
    """Human-readable rendering of one RiskAssessmentResult."""

    headline: str
    summary: str
    risk_level: RiskLevel
    risk_score: int = Field(..., ge=0, le=100)
    recommendations: list[str] = Field(default_factory=list)
    calls_to_action: list[CallToAction] = Field(default_factory=list)


class AssessmentStatistics(EmiratisationBase, frozen=True):
    """Aggregate figures across stored assessments."""

    total_assessments: int = Field(..., ge=0)
    high_risk_assessments: int = Field(..., ge=0)
    medium_risk_assessments: int = Field(..., ge=0)
    low_risk_assessments: int = Field(..., ge=0)
    total_fines: Decimal = Field(..., ge=0)
    average_risk_score: int = Field(..., ge=0, le=100)
    sector_breakdown: dict[str, int] = Field(default_factory=dict)
