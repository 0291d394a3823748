"""Assessment report builder.

Turns a profile and its RiskAssessmentResult into the headline, summary,
ordered recommendations and calls to action shown under the results.
CTA targets are passed in by the caller; the builder itself reads no
settings.

Deterministic, no I/O.
"""

from src.engine.config import RiskConfig
from src.engine.risk import is_within_grace_period
from src.models.assessment import CompanyProfile, RiskAssessmentResult
from src.models.common import Jurisdiction, RiskLevel
from src.models.report import AssessmentReport, CallToAction, CallToActionKind

_HEADLINES: dict[RiskLevel, str] = {
    RiskLevel.LOW: "Low Risk",
    RiskLevel.MEDIUM: "Medium Risk",
    RiskLevel.HIGH: "High Risk",
}

_SUMMARIES: dict[RiskLevel, str] = {
    RiskLevel.LOW: (
        "Your company meets Emiratisation requirements with good compliance."
    ),
    RiskLevel.MEDIUM: (
        "Your company is approaching the Emiratisation threshold and should "
        "take action."
    ),
    RiskLevel.HIGH: (
        "Your company is below the Emiratisation requirement and needs "
        "immediate attention."
    ),
}

_FREEZONE_SUMMARY = (
    "Free-zone establishments are exempt from MoHRE Emiratisation quotas. "
    "Review the position again if the group also operates on the mainland."
)

# Headcount at which ongoing workforce planning is worth formalizing
_COMMITTEE_HEADCOUNT = 50


def build_recommendations(
    profile: CompanyProfile,
    result: RiskAssessmentResult,
    config: RiskConfig,
) -> list[str]:
    """Ordered list of recommended actions, most urgent first."""
    recs: list[str] = []

    if result.gap > 0:
        noun = "Emirati" if result.gap == 1 else "Emiratis"
        recs.append(
            f"Hire {result.gap} additional {noun} to close the quota gap of "
            f"{result.gap} (required {result.required_count}, counted "
            f"{result.valid_count})."
        )

    if result.risk_level == RiskLevel.HIGH:
        recs.append("Implement an emergency recruitment plan for Emirati candidates.")
        recs.append("Contact MoHRE to discuss your compliance timeline and avoid penalties.")
    elif result.risk_level == RiskLevel.MEDIUM:
        recs.append(
            "Develop a six-month plan to raise Emirati headcount to the required level."
        )

    if not profile.payroll_compliance_confirmed:
        recs.append(
            "Ensure full WPS (Wage Protection System) compliance and GPSSA pension "
            "registration; without both, current Emirati employees do not count "
            "toward the quota."
        )

    if profile.recent_departure and profile.days_since_departure is not None:
        if is_within_grace_period(profile, config):
            remaining = config.grace_period_days - profile.days_since_departure
            recs.append(
                f"Replace the departed Emirati within {remaining} days to stay "
                f"inside the {config.grace_period_days}-day grace period."
            )
        else:
            recs.append(
                f"The {config.grace_period_days}-day grace period for the recent "
                "departure has passed; the vacancy now counts against the quota."
            )

    if profile.total_employees >= _COMMITTEE_HEADCOUNT:
        recs.append(
            "Establish an Emiratisation committee with regular monitoring and "
            "reporting."
        )

    recs.append("Run regular compliance audits to stay in good standing with MoHRE.")
    return recs


def build_calls_to_action(
    *,
    consultation_url: str = "",
    contact_phone: str = "",
    report_url: str = "",
) -> list[CallToAction]:
    """CTAs for every non-empty target, in display order."""
    ctas: list[CallToAction] = []
    if consultation_url:
        ctas.append(CallToAction(
            kind=CallToActionKind.BOOK_CONSULTATION,
            title="Book a Call",
            description="Get expert guidance on your compliance strategy.",
            target=consultation_url,
        ))
    if contact_phone:
        ctas.append(CallToAction(
            kind=CallToActionKind.CALL_SPECIALIST,
            title="Call Now",
            description="Speak with an Emiratisation specialist.",
            target=f"tel:{contact_phone.replace(' ', '')}",
        ))
    if report_url:
        ctas.append(CallToAction(
            kind=CallToActionKind.DOWNLOAD_REPORT,
            title="Download Report",
            description="Get your detailed assessment report.",
            target=report_url,
        ))
    return ctas


def build_report(
    profile: CompanyProfile,
    result: RiskAssessmentResult,
    config: RiskConfig,
    *,
    consultation_url: str = "",
    contact_phone: str = "",
    report_url: str = "",
) -> AssessmentReport:
    """Render the full report for one assessment."""
    if profile.jurisdiction == Jurisdiction.FREEZONE:
        summary = _FREEZONE_SUMMARY
    else:
        summary = _SUMMARIES[result.risk_level]

    return AssessmentReport(
        headline=_HEADLINES[result.risk_level],
        summary=summary,
        risk_level=result.risk_level,
        risk_score=result.risk_score,
        recommendations=build_recommendations(profile, result, config),
        calls_to_action=build_calls_to_action(
            consultation_url=consultation_url,
            contact_phone=contact_phone,
            report_url=report_url,
        ),
    )
