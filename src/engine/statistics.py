"""Admin dashboard statistics over stored assessments.

Deterministic, no I/O.
"""

from collections import Counter
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from src.models.assessment import Assessment
from src.models.common import RiskLevel
from src.models.report import AssessmentStatistics


class StatisticsService:
    """Compute dashboard statistics across assessments."""

    def compute(self, assessments: Sequence[Assessment]) -> AssessmentStatistics:
        """Aggregate risk tiers, fines, average score and sector counts."""
        total = len(assessments)
        if total == 0:
            return AssessmentStatistics(
                total_assessments=0,
                high_risk_assessments=0,
                medium_risk_assessments=0,
                low_risk_assessments=0,
                total_fines=Decimal("0"),
                average_risk_score=0,
            )

        levels = Counter(a.result.risk_level for a in assessments)
        total_fines = sum((a.result.fine_estimate for a in assessments), Decimal("0"))
        score_sum = sum(a.result.risk_score for a in assessments)
        average = (Decimal(score_sum) / total).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP,
        )
        sectors = Counter(a.profile.sector for a in assessments)

        return AssessmentStatistics(
            total_assessments=total,
            high_risk_assessments=levels.get(RiskLevel.HIGH, 0),
            medium_risk_assessments=levels.get(RiskLevel.MEDIUM, 0),
            low_risk_assessments=levels.get(RiskLevel.LOW, 0),
            total_fines=total_fines,
            average_risk_score=int(average),
            sector_breakdown=dict(sectors),
        )
