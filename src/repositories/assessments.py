"""Assessment repository.

Assessments are immutable: create + read only.

Repos take AsyncSession, call add()/flush() only — never commit().
The session dependency handles commit/rollback (Unit-of-Work).
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import AssessmentRow
from src.models.assessment import (
    Assessment,
    AssessmentSubmission,
    CompanyProfile,
    ContactDetails,
    RiskAssessmentResult,
)


class AssessmentRepository:
    """Repository for stored assessments (append-only)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, assessment: Assessment, *, engine_version: str,
    ) -> AssessmentRow:
        sub = assessment.submission
        result = assessment.result
        row = AssessmentRow(
            assessment_id=assessment.assessment_id,
            company_location=sub.company_location.value,
            industry_sector=sub.industry_sector,
            total_employees=sub.total_employees,
            skilled_employees=sub.skilled_employees,
            emirati_employees=sub.emirati_employees,
            nafis_registered=sub.nafis_registered.value,
            wps_gpssa_compliant=sub.wps_gpssa_compliant.value,
            emirati_left_recently=sub.emirati_left_recently.value,
            departure_days_ago=sub.departure_days_ago,
            company_name=sub.contact.company_name,
            first_name=sub.contact.first_name,
            last_name=sub.contact.last_name,
            email=sub.contact.email,
            phone=sub.contact.phone,
            required_count=result.required_count,
            valid_count=result.valid_count,
            gap=result.gap,
            fine_estimate=float(result.fine_estimate),
            risk_score=result.risk_score,
            risk_level=result.risk_level.value,
            profile=assessment.profile.model_dump(mode="json"),
            config_snapshot=assessment.config_snapshot,
            engine_version=engine_version,
            created_at=assessment.created_at,
        )
        self._session.add(row)
        await self._session.flush()
        await self._session.refresh(row)
        return row

    async def get(self, assessment_id: UUID) -> AssessmentRow | None:
        return await self._session.get(AssessmentRow, assessment_id)

    async def list_all(self) -> list[AssessmentRow]:
        result = await self._session.execute(
            select(AssessmentRow).order_by(AssessmentRow.created_at.desc())
        )
        return list(result.scalars().all())


def row_to_assessment(row: AssessmentRow) -> Assessment:
    """Rebuild the domain aggregate from a stored row."""
    submission = AssessmentSubmission(
        company_location=row.company_location,
        industry_sector=row.industry_sector,
        total_employees=row.total_employees,
        skilled_employees=row.skilled_employees,
        emirati_employees=row.emirati_employees,
        wps_gpssa_compliant=row.wps_gpssa_compliant,
        emirati_left_recently=row.emirati_left_recently,
        departure_days_ago=row.departure_days_ago,
        nafis_registered=row.nafis_registered,
        contact=ContactDetails(
            company_name=row.company_name,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            phone=row.phone,
        ),
    )
    result = RiskAssessmentResult(
        required_count=row.required_count,
        valid_count=row.valid_count,
        gap=row.gap,
        fine_estimate=Decimal(str(row.fine_estimate)),
        risk_score=row.risk_score,
        risk_level=row.risk_level,
    )
    return Assessment(
        assessment_id=row.assessment_id,
        submission=submission,
        profile=CompanyProfile.model_validate(row.profile),
        result=result,
        config_snapshot=row.config_snapshot,
        created_at=row.created_at,
    )
