"""Emiratisation Risk Engine.

Deterministic engine code: pure functions over (CompanyProfile, RiskConfig),
no I/O and no module state, safe to call concurrently.

4 steps, each a pure function:
1. Required quota (first matching rule wins)
   a. Free zone            -> 0
   b. 20-49 employees in a designated sector -> fixed quota
   c. Skilled headcount >= threshold -> ceil(skilled * target% / 100)
   d. Otherwise            -> 0
2. Valid count (all-or-nothing payroll gate + grace-period bonus)
3. Gap and fine
4. Score and tier

evaluate() runs all four and returns a frozen RiskAssessmentResult.
"""

import logging
import math
from decimal import Decimal

from src.engine.config import RiskConfig
from src.engine.sectors import is_designated
from src.models.assessment import (
    MAX_DEPARTURE_DAYS,
    CompanyProfile,
    RiskAssessmentResult,
)
from src.models.common import Jurisdiction, RiskLevel

logger = logging.getLogger(__name__)

RISK_ENGINE_VERSION = "1.0.0"

MAX_SCORE = 100
MIN_SCORE = 0
POINTS_PER_MISSING_WORKER = 20
MULTIPLE_GAP_PENALTY = 10
PAYROLL_COMPLIANCE_BONUS = 5


class PreconditionViolation(ValueError):
    """A profile reached the engine outside its declared domain.

    Signals a bug in the calling code, not a business outcome: request
    validation is expected to reject such profiles first.
    """


# ---------------------------------------------------------------------------
# 0. Preconditions
# ---------------------------------------------------------------------------


def check_preconditions(profile: CompanyProfile) -> None:
    """Raise PreconditionViolation if the profile is out of domain.

    Profiles built through normal validation always pass; this guards
    against model_construct() or hand-built objects.
    """
    problems: list[str] = []
    if profile.total_employees < 1:
        problems.append(f"total_employees={profile.total_employees} < 1")
    if profile.skilled_employees < 0:
        problems.append(f"skilled_employees={profile.skilled_employees} < 0")
    if profile.skilled_employees > profile.total_employees:
        problems.append(
            f"skilled_employees={profile.skilled_employees} > "
            f"total_employees={profile.total_employees}"
        )
    if profile.current_qualifying_workers < 0:
        problems.append(
            f"current_qualifying_workers={profile.current_qualifying_workers} < 0"
        )
    days = profile.days_since_departure
    if days is not None and not 0 <= days <= MAX_DEPARTURE_DAYS:
        problems.append(f"days_since_departure={days} outside 0..{MAX_DEPARTURE_DAYS}")
    if problems:
        raise PreconditionViolation("; ".join(problems))


# ---------------------------------------------------------------------------
# 1. compute_required_count
# ---------------------------------------------------------------------------


def compute_required_count(profile: CompanyProfile, config: RiskConfig) -> int:
    """Number of qualifying workers the establishment must employ.

    Rules are evaluated in order and the first match wins. The small-band
    rule is checked before the percentage rule even if the configured bands
    overlap.
    """
    if profile.jurisdiction == Jurisdiction.FREEZONE:
        return 0

    in_small_band = (
        config.small_establishment_min
        <= profile.total_employees
        <= config.small_establishment_max
    )
    if in_small_band and is_designated(profile.sector, config):
        return config.small_establishment_quota

    if profile.skilled_employees >= config.large_establishment_threshold:
        quota = Decimal(profile.skilled_employees) * config.target_percent / 100
        return math.ceil(quota)

    return 0


# ---------------------------------------------------------------------------
# 2. compute_valid_count
# ---------------------------------------------------------------------------


def is_within_grace_period(profile: CompanyProfile, config: RiskConfig) -> bool:
    """A recent departure still counts while inside the replacement window.

    A departure without a day count never qualifies.
    """
    if not profile.recent_departure or profile.days_since_departure is None:
        return False
    return profile.days_since_departure <= config.grace_period_days


def compute_valid_count(profile: CompanyProfile, config: RiskConfig) -> int:
    """Qualifying workers that count toward the quota.

    Payroll non-compliance disqualifies the whole current headcount. The
    grace-period bonus is added independently of that gate.
    """
    valid = (
        profile.current_qualifying_workers
        if profile.payroll_compliance_confirmed
        else 0
    )
    if is_within_grace_period(profile, config):
        valid += 1
    return valid


# ---------------------------------------------------------------------------
# 3. compute_gap / compute_fine
# ---------------------------------------------------------------------------


def compute_gap(required_count: int, valid_count: int) -> int:
    """Missing qualifying workers; never negative."""
    return max(0, required_count - valid_count)


def compute_fine(gap: int, config: RiskConfig) -> Decimal:
    """Linear fine estimate: gap x fine per missing worker."""
    return gap * config.fine_per_missing_worker


# ---------------------------------------------------------------------------
# 4. compute_risk_score / classify_risk_level
# ---------------------------------------------------------------------------


def compute_risk_score(gap: int, payroll_compliance_confirmed: bool) -> int:
    """0-100 score, higher is safer."""
    score = MAX_SCORE - gap * POINTS_PER_MISSING_WORKER
    if gap >= 2:
        score -= MULTIPLE_GAP_PENALTY
    if payroll_compliance_confirmed:
        score += PAYROLL_COMPLIANCE_BONUS
    return max(MIN_SCORE, min(MAX_SCORE, score))


def classify_risk_level(risk_score: int, config: RiskConfig) -> RiskLevel:
    """Map a score onto the configured tier cutoffs."""
    if risk_score >= config.risk_low_min:
        return RiskLevel.LOW
    if risk_score >= config.risk_medium_min:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


# ---------------------------------------------------------------------------
# evaluate
# ---------------------------------------------------------------------------


def evaluate(profile: CompanyProfile, config: RiskConfig) -> RiskAssessmentResult:
    """Run the full rule set for one profile.

    Args:
        profile: Validated company profile.
        config: Frozen configuration snapshot.

    Returns:
        RiskAssessmentResult.

    Raises:
        PreconditionViolation: The profile is outside the declared domain.
    """
    check_preconditions(profile)

    required = compute_required_count(profile, config)
    valid = compute_valid_count(profile, config)
    gap = compute_gap(required, valid)
    fine = compute_fine(gap, config)
    score = compute_risk_score(gap, profile.payroll_compliance_confirmed)
    level = classify_risk_level(score, config)

    logger.debug(
        "Evaluated profile: required=%d valid=%d gap=%d score=%d level=%s",
        required, valid, gap, score, level.value,
    )

    return RiskAssessmentResult(
        required_count=required,
        valid_count=valid,
        gap=gap,
        fine_estimate=fine,
        risk_score=score,
        risk_level=level,
    )


class RiskEngine:
    """Stateless evaluator; see evaluate()."""

    version = RISK_ENGINE_VERSION

    def evaluate(
        self, profile: CompanyProfile, config: RiskConfig,
    ) -> RiskAssessmentResult:
        return evaluate(profile, config)
