"""Tests for dashboard statistics over stored assessments."""

from decimal import Decimal

import pytest

from src.engine.config import RiskConfig
from src.engine.risk import evaluate
from src.engine.statistics import StatisticsService
from src.models.assessment import Assessment, AssessmentSubmission, ContactDetails
from src.models.common import Jurisdiction, TriState

_CONTACT = ContactDetails(
    company_name="Acme Trading",
    first_name="Omar",
    last_name="Khalifa",
    email="omar@acme.ae",
    phone="+971 50 000 0000",
)


def _assessment(
    *,
    sector: str = "Construction",
    total: int = 35,
    skilled: int = 10,
    emiratis: int = 0,
    compliant: TriState = TriState.NO,
) -> Assessment:
    submission = AssessmentSubmission(
        company_location=Jurisdiction.MAINLAND,
        industry_sector=sector,
        total_employees=total,
        skilled_employees=skilled,
        emirati_employees=emiratis,
        wps_gpssa_compliant=compliant,
        emirati_left_recently=TriState.NO,
        contact=_CONTACT,
    )
    config = RiskConfig()
    profile = submission.to_profile()
    return Assessment(
        submission=submission,
        profile=profile,
        result=evaluate(profile, config),
        config_snapshot=config.to_snapshot(),
    )


@pytest.fixture
def service() -> StatisticsService:
    return StatisticsService()


class TestStatistics:
    def test_empty(self, service):
        stats = service.compute([])
        assert stats.total_assessments == 0
        assert stats.total_fines == Decimal("0")
        assert stats.average_risk_score == 0
        assert stats.sector_breakdown == {}

    def test_mixed_tiers(self, service):
        medium = _assessment()  # gap 2, score 50
        high = _assessment(
            sector="Banking", total=80, skilled=60, emiratis=2,
            compliant=TriState.YES,
        )  # gap 3, score 35
        low = _assessment(emiratis=2, compliant=TriState.YES)  # gap 0, score 100

        stats = service.compute([medium, high, low])

        assert stats.total_assessments == 3
        assert stats.high_risk_assessments == 1
        assert stats.medium_risk_assessments == 1
        assert stats.low_risk_assessments == 1
        assert stats.total_fines == Decimal("480000")
        # (50 + 35 + 100) / 3 = 61.67
        assert stats.average_risk_score == 62
        assert stats.sector_breakdown == {"Construction": 2, "Banking": 1}

    def test_average_rounds_half_up(self, service):
        # (50 + 35) / 2 = 42.5
        a = _assessment()
        b = _assessment(
            sector="Banking", total=80, skilled=60, emiratis=2,
            compliant=TriState.YES,
        )
        assert service.compute([a, b]).average_risk_score == 43

    def test_counts_sum_to_total(self, service):
        assessments = [_assessment(emiratis=n, compliant=TriState.YES) for n in range(4)]
        stats = service.compute(assessments)
        assert (
            stats.high_risk_assessments
            + stats.medium_risk_assessments
            + stats.low_risk_assessments
        ) == stats.total_assessments
