"""FastAPI dependency injection factories.

Repository factories take AsyncSession via Depends(get_async_session).
get_risk_config builds one frozen RiskConfig snapshot per request from the
stored overrides. require_admin guards admin routes.
"""

import hmac

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import Settings, get_settings
from src.data.sectors import SECTOR_CATALOG
from src.db.session import get_async_session
from src.engine.config import RiskConfig, risk_config_from_entries
from src.repositories.assessments import AssessmentRepository
from src.repositories.reference import ConfigurationRepository, SectorRepository

# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


async def get_assessment_repo(
    session: AsyncSession = Depends(get_async_session),
) -> AssessmentRepository:
    return AssessmentRepository(session)


async def get_configuration_repo(
    session: AsyncSession = Depends(get_async_session),
) -> ConfigurationRepository:
    return ConfigurationRepository(session)


async def get_sector_repo(
    session: AsyncSession = Depends(get_async_session),
) -> SectorRepository:
    return SectorRepository(session)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


async def get_recognized_sectors(
    sector_repo: SectorRepository = Depends(get_sector_repo),
) -> dict[str, bool]:
    """Sector name -> designated flag.

    Active stored sectors when any exist, otherwise the built-in catalog.
    """
    rows = await sector_repo.list_active()
    if rows:
        return {r.name: r.is_designated for r in rows}
    return {s.name: s.designated for s in SECTOR_CATALOG.sectors}


async def get_risk_config(
    config_repo: ConfigurationRepository = Depends(get_configuration_repo),
    sectors: dict[str, bool] = Depends(get_recognized_sectors),
) -> RiskConfig:
    """Frozen configuration snapshot for the current request."""
    entries = await config_repo.as_mapping()
    designated = [name for name, flag in sectors.items() if flag]
    return risk_config_from_entries(entries, designated)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


async def require_admin(
    x_admin_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request unless X-Admin-Password matches ADMIN_PASSWORD."""
    if x_admin_password is None or not hmac.compare_digest(
        x_admin_password.encode(), settings.ADMIN_PASSWORD.encode(),
    ):
        raise HTTPException(status_code=401, detail="Invalid admin password.")
