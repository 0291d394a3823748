"""FastAPI assessment endpoints.

POST /v1/assessments                         — score and store a questionnaire
GET  /v1/assessments/{assessment_id}         — stored assessment with result
GET  /v1/assessments/{assessment_id}/report  — headline, recommendations, CTAs
GET  /v1/assessments/{assessment_id}/export.xlsx — Excel report download
GET  /v1/assessments/{assessment_id}/export.pdf  — PDF report download

Scoring is deterministic engine code. The RiskConfig snapshot used for
scoring is stored with the assessment and reused for its report, so later
admin changes never alter an existing assessment.
"""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from src.api.dependencies import (
    get_assessment_repo,
    get_recognized_sectors,
    get_risk_config,
)
from src.config.settings import Settings, get_settings
from src.engine.config import RiskConfig
from src.engine.report import build_report
from src.engine.risk import RISK_ENGINE_VERSION, RiskEngine
from src.export.assessment_export import (
    XLSX_MEDIA_TYPE,
    AssessmentExcelExporter,
    report_filename,
)
from src.export.assessment_pdf import PDF_MEDIA_TYPE, AssessmentPdfExporter
from src.models.assessment import Assessment, AssessmentSubmission
from src.models.report import AssessmentReport
from src.repositories.assessments import AssessmentRepository, row_to_assessment

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/v1/assessments", tags=["assessments"])

_engine = RiskEngine()


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RiskResultResponse(BaseModel):
    required_count: int
    valid_count: int
    gap: int
    fine_estimate: float
    risk_score: int
    risk_level: str


class AssessmentResponse(BaseModel):
    assessment_id: str
    company_name: str
    industry_sector: str
    company_location: str
    total_employees: int
    skilled_employees: int
    emirati_employees: int
    result: RiskResultResponse
    report: dict
    created_at: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def config_from_snapshot(assessment: Assessment) -> RiskConfig:
    """RiskConfig the assessment was scored with (defaults if none stored)."""
    if not assessment.config_snapshot:
        return RiskConfig()
    return RiskConfig.model_validate(assessment.config_snapshot)


def render_report(assessment: Assessment, settings: Settings) -> AssessmentReport:
    return build_report(
        assessment.profile,
        assessment.result,
        config_from_snapshot(assessment),
        consultation_url=settings.CONSULTATION_URL,
        contact_phone=settings.CONTACT_PHONE,
        report_url=f"{router.prefix}/{assessment.assessment_id}/export.xlsx",
    )


def to_response(assessment: Assessment, report: AssessmentReport) -> AssessmentResponse:
    sub = assessment.submission
    result = assessment.result
    return AssessmentResponse(
        assessment_id=str(assessment.assessment_id),
        company_name=sub.contact.company_name,
        industry_sector=sub.industry_sector,
        company_location=sub.company_location.value,
        total_employees=sub.total_employees,
        skilled_employees=sub.skilled_employees,
        emirati_employees=sub.emirati_employees,
        result=RiskResultResponse(
            required_count=result.required_count,
            valid_count=result.valid_count,
            gap=result.gap,
            fine_estimate=float(result.fine_estimate),
            risk_score=result.risk_score,
            risk_level=result.risk_level.value,
        ),
        report=report.model_dump(mode="json"),
        created_at=assessment.created_at.isoformat(),
    )


async def _load_or_404(repo: AssessmentRepository, assessment_id: UUID) -> Assessment:
    row = await repo.get(assessment_id)
    if row is None:
        raise HTTPException(
            status_code=404,
            detail=f"Assessment {assessment_id} not found.",
        )
    return row_to_assessment(row)


def _download_filename(assessment: Assessment, extension: str) -> str:
    return report_filename(
        assessment.submission.contact.company_name,
        assessment.created_at,
        extension,
        fallback=str(assessment.assessment_id),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("", status_code=201, response_model=AssessmentResponse)
async def create_assessment(
    body: AssessmentSubmission,
    repo: AssessmentRepository = Depends(get_assessment_repo),
    sectors: dict[str, bool] = Depends(get_recognized_sectors),
    config: RiskConfig = Depends(get_risk_config),
    settings: Settings = Depends(get_settings),
) -> AssessmentResponse:
    """Score a questionnaire against the current configuration and store it."""
    if body.industry_sector not in sectors:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown industry sector '{body.industry_sector}'.",
        )

    profile = body.to_profile()
    result = _engine.evaluate(profile, config)
    assessment = Assessment(
        submission=body,
        profile=profile,
        result=result,
        config_snapshot=config.to_snapshot(),
    )
    await repo.create(assessment, engine_version=RISK_ENGINE_VERSION)

    logger.info(
        "assessment_created",
        assessment_id=str(assessment.assessment_id),
        sector=profile.sector,
        jurisdiction=profile.jurisdiction.value,
        gap=result.gap,
        risk_level=result.risk_level.value,
    )

    return to_response(assessment, render_report(assessment, settings))


@router.get("/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: UUID,
    repo: AssessmentRepository = Depends(get_assessment_repo),
    settings: Settings = Depends(get_settings),
) -> AssessmentResponse:
    """Get one stored assessment."""
    assessment = await _load_or_404(repo, assessment_id)
    return to_response(assessment, render_report(assessment, settings))


@router.get("/{assessment_id}/report", response_model=AssessmentReport)
async def get_assessment_report(
    assessment_id: UUID,
    repo: AssessmentRepository = Depends(get_assessment_repo),
    settings: Settings = Depends(get_settings),
) -> AssessmentReport:
    """Get the rendered report for one assessment."""
    assessment = await _load_or_404(repo, assessment_id)
    return render_report(assessment, settings)


@router.get("/{assessment_id}/export.xlsx")
async def export_assessment_xlsx(
    assessment_id: UUID,
    repo: AssessmentRepository = Depends(get_assessment_repo),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Download the Excel report for one assessment."""
    assessment = await _load_or_404(repo, assessment_id)
    report = render_report(assessment, settings)
    content = AssessmentExcelExporter().export(assessment, report)
    filename = _download_filename(assessment, "xlsx")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{assessment_id}/export.pdf")
async def export_assessment_pdf(
    assessment_id: UUID,
    repo: AssessmentRepository = Depends(get_assessment_repo),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Download the PDF report for one assessment."""
    assessment = await _load_or_404(repo, assessment_id)
    report = render_report(assessment, settings)
    content = AssessmentPdfExporter().export(assessment, report)
    filename = _download_filename(assessment, "pdf")
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
