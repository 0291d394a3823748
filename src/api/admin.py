"""FastAPI admin and reference-data endpoints.

Public:
GET    /v1/sectors                          — recognized sectors

Admin (X-Admin-Password header):
POST   /v1/admin/auth                       — check the admin password
GET    /v1/admin/assessments                — list stored assessments
GET    /v1/admin/assessments/export.csv     — CSV download of all assessments
GET    /v1/admin/statistics                 — dashboard aggregates
GET    /v1/admin/configuration              — overrides + effective config
PUT    /v1/admin/configuration              — upsert one override
POST   /v1/admin/sectors                    — add a sector
POST   /v1/admin/sectors/seed               — copy the built-in catalog
PATCH  /v1/admin/sectors/{sector_id}        — rename / (un)designate / reactivate
DELETE /v1/admin/sectors/{sector_id}        — soft delete
"""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from src.api.assessments import AssessmentResponse, render_report, to_response
from src.api.dependencies import (
    get_assessment_repo,
    get_configuration_repo,
    get_recognized_sectors,
    get_risk_config,
    get_sector_repo,
    require_admin,
)
from src.config.settings import Settings, get_settings
from src.data.sectors import SECTOR_CATALOG
from src.engine.config import (
    RiskConfig,
    canonical_config_key,
    risk_config_from_entries,
)
from src.engine.statistics import StatisticsService
from src.export.assessment_export import export_assessments_csv
from src.models.common import utc_now
from src.repositories.assessments import AssessmentRepository, row_to_assessment
from src.repositories.reference import ConfigurationRepository, SectorRepository

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)
sectors_router = APIRouter(prefix="/v1/sectors", tags=["sectors"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class SectorResponse(BaseModel):
    name: str
    is_designated: bool
    sector_id: str | None = None  # None for built-in catalog entries


class CreateSectorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    is_designated: bool = False


class UpdateSectorRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_designated: bool | None = None
    is_active: bool | None = None


class StoredSectorResponse(BaseModel):
    sector_id: str
    name: str
    is_designated: bool
    is_active: bool


class ConfigurationEntryResponse(BaseModel):
    key: str
    value: str
    description: str | None = None
    updated_at: str


class ConfigurationResponse(BaseModel):
    entries: list[ConfigurationEntryResponse]
    effective: dict


class UpdateConfigurationRequest(BaseModel):
    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    description: str | None = None


class StatisticsResponse(BaseModel):
    total_assessments: int
    high_risk_assessments: int
    medium_risk_assessments: int
    low_risk_assessments: int
    total_fines: float
    average_risk_score: int
    sector_breakdown: dict[str, int]


def _stored_sector(row) -> StoredSectorResponse:
    return StoredSectorResponse(
        sector_id=str(row.sector_id),
        name=row.name,
        is_designated=row.is_designated,
        is_active=row.is_active,
    )


# ---------------------------------------------------------------------------
# Public sectors
# ---------------------------------------------------------------------------


@sectors_router.get("", response_model=list[SectorResponse])
async def list_sectors(
    repo: SectorRepository = Depends(get_sector_repo),
    sectors: dict[str, bool] = Depends(get_recognized_sectors),
) -> list[SectorResponse]:
    """List sectors accepted by the questionnaire."""
    ids = {r.name: str(r.sector_id) for r in await repo.list_active()}
    return [
        SectorResponse(name=name, is_designated=flag, sector_id=ids.get(name))
        for name, flag in sectors.items()
    ]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@router.post("/auth")
async def admin_auth() -> dict[str, bool]:
    """Succeeds only when require_admin accepted the password."""
    return {"success": True}


# ---------------------------------------------------------------------------
# Assessments
# ---------------------------------------------------------------------------


@router.get("/assessments", response_model=list[AssessmentResponse])
async def list_assessments(
    repo: AssessmentRepository = Depends(get_assessment_repo),
    settings: Settings = Depends(get_settings),
) -> list[AssessmentResponse]:
    """List all stored assessments, newest first."""
    assessments = [row_to_assessment(r) for r in await repo.list_all()]
    return [to_response(a, render_report(a, settings)) for a in assessments]


@router.get("/assessments/export.csv")
async def export_assessments(
    repo: AssessmentRepository = Depends(get_assessment_repo),
) -> Response:
    """Download every stored assessment as CSV."""
    assessments = [row_to_assessment(r) for r in await repo.list_all()]
    filename = f"emiratisation-assessments-{utc_now().strftime('%Y%m%d%H%M%S')}.csv"
    return Response(
        content=export_assessments_csv(assessments),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    repo: AssessmentRepository = Depends(get_assessment_repo),
) -> StatisticsResponse:
    """Risk-tier counts, fine total, average score and sector breakdown."""
    assessments = [row_to_assessment(r) for r in await repo.list_all()]
    stats = StatisticsService().compute(assessments)
    return StatisticsResponse(
        total_assessments=stats.total_assessments,
        high_risk_assessments=stats.high_risk_assessments,
        medium_risk_assessments=stats.medium_risk_assessments,
        low_risk_assessments=stats.low_risk_assessments,
        total_fines=float(stats.total_fines),
        average_risk_score=stats.average_risk_score,
        sector_breakdown=stats.sector_breakdown,
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@router.get("/configuration", response_model=ConfigurationResponse)
async def get_configuration(
    repo: ConfigurationRepository = Depends(get_configuration_repo),
    config: RiskConfig = Depends(get_risk_config),
) -> ConfigurationResponse:
    """Stored overrides plus the configuration new assessments will use."""
    rows = await repo.list_all()
    return ConfigurationResponse(
        entries=[
            ConfigurationEntryResponse(
                key=r.key,
                value=r.value,
                description=r.description,
                updated_at=str(r.updated_at),
            )
            for r in rows
        ],
        effective=config.to_snapshot(),
    )


@router.put("/configuration", response_model=ConfigurationEntryResponse)
async def update_configuration(
    body: UpdateConfigurationRequest,
    repo: ConfigurationRepository = Depends(get_configuration_repo),
    sectors: dict[str, bool] = Depends(get_recognized_sectors),
) -> ConfigurationEntryResponse:
    """Set one override. The whole resulting config must stay valid."""
    key = canonical_config_key(body.key)
    if key is None:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown configuration key '{body.key}'.",
        )

    entries = await repo.as_mapping()
    entries[key] = body.value
    designated = [name for name, flag in sectors.items() if flag]
    try:
        risk_config_from_entries(entries, designated)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    row = await repo.upsert(key=key, value=body.value.strip(), description=body.description)
    logger.info("configuration_updated", key=key, value=row.value)
    return ConfigurationEntryResponse(
        key=row.key,
        value=row.value,
        description=row.description,
        updated_at=str(row.updated_at),
    )


# ---------------------------------------------------------------------------
# Sectors
# ---------------------------------------------------------------------------


@router.post("/sectors", status_code=201, response_model=StoredSectorResponse)
async def create_sector(
    body: CreateSectorRequest,
    repo: SectorRepository = Depends(get_sector_repo),
) -> StoredSectorResponse:
    """Add a sector, or reactivate a previously deleted one with the same name."""
    name = body.name.strip()
    existing = await repo.get_by_name(name)
    if existing is not None:
        if existing.is_active:
            raise HTTPException(status_code=409, detail=f"Sector '{name}' already exists.")
        row = await repo.update(
            existing.sector_id, is_designated=body.is_designated, is_active=True,
        )
    else:
        row = await repo.create(name=name, is_designated=body.is_designated)
    return _stored_sector(row)


@router.post("/sectors/seed", status_code=201, response_model=list[StoredSectorResponse])
async def seed_sectors(
    repo: SectorRepository = Depends(get_sector_repo),
) -> list[StoredSectorResponse]:
    """Copy the built-in catalog into the sector table (missing names only).

    Once any sector is stored, the stored list replaces the built-in catalog,
    so seed before adding custom sectors.
    """
    rows = await repo.seed(SECTOR_CATALOG.sectors)
    logger.info("sectors_seeded", created=len(rows))
    return [_stored_sector(r) for r in rows]


@router.patch("/sectors/{sector_id}", response_model=StoredSectorResponse)
async def update_sector(
    sector_id: UUID,
    body: UpdateSectorRequest,
    repo: SectorRepository = Depends(get_sector_repo),
) -> StoredSectorResponse:
    """Update a stored sector."""
    name = body.name.strip() if body.name is not None else None
    if name is not None:
        clash = await repo.get_by_name(name)
        if clash is not None and clash.sector_id != sector_id:
            raise HTTPException(status_code=409, detail=f"Sector '{name}' already exists.")
    row = await repo.update(
        sector_id,
        name=name,
        is_designated=body.is_designated,
        is_active=body.is_active,
    )
    if row is None:
        raise HTTPException(status_code=404, detail=f"Sector {sector_id} not found.")
    return _stored_sector(row)


@router.delete("/sectors/{sector_id}", status_code=204)
async def delete_sector(
    sector_id: UUID,
    repo: SectorRepository = Depends(get_sector_repo),
) -> Response:
    """Soft-delete a sector; stored assessments keep their sector name."""
    if not await repo.deactivate(sector_id):
        raise HTTPException(status_code=404, detail=f"Sector {sector_id} not found.")
    return Response(status_code=204)
