"""Seed script — load reference data into the Emiratisation Risk database.

Creates:
1. Missing tables
2. The built-in MoHRE sector catalog (18 sectors, 14 designated)
3. One configuration entry per RiskConfig tunable, at its default value

Idempotent: safe to run multiple times — existing sectors and configuration
entries are never overwritten.

Usage:
    python -m scripts.seed          # against DATABASE_URL from .env
"""

import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from src.data.sectors import SECTOR_CATALOG
from src.engine.config import CONFIG_KEYS, RiskConfig
from src.repositories.reference import ConfigurationRepository, SectorRepository

CONFIG_DESCRIPTIONS: dict[str, str] = {
    "small_establishment_min": "Smallest headcount covered by the fixed quota.",
    "small_establishment_max": "Largest headcount covered by the fixed quota.",
    "small_establishment_quota": "Emiratis required in a small designated establishment.",
    "large_establishment_threshold": "Skilled headcount at which the percentage quota applies.",
    "target_percent": "Emiratisation target as a percentage of skilled employees.",
    "fine_per_missing_worker": "Annual fine (AED) per missing Emirati.",
    "grace_period_days": "Days allowed to replace an Emirati who left.",
    "risk_low_min": "Lowest score classified as low risk.",
    "risk_medium_min": "Lowest score classified as medium risk.",
}


async def seed_sectors(session: AsyncSession) -> int:
    """Copy the sector catalog; returns the number of sectors created."""
    created = await SectorRepository(session).seed(SECTOR_CATALOG.sectors)
    return len(created)


async def seed_configuration(session: AsyncSession) -> int:
    """Store default tunables not configured yet; returns the number created."""
    repo = ConfigurationRepository(session)
    existing = await repo.as_mapping()
    defaults = RiskConfig().to_snapshot()
    created = 0
    for key in sorted(CONFIG_KEYS):
        if key in existing:
            continue
        await repo.upsert(
            key=key,
            value=str(defaults[key]),
            description=CONFIG_DESCRIPTIONS.get(key),
        )
        created += 1
    return created


async def seed_reference_data(session: AsyncSession) -> dict[str, int]:
    """Seed sectors and configuration. Caller commits."""
    return {
        "sectors_created": await seed_sectors(session),
        "configuration_created": await seed_configuration(session),
    }


# ---------------------------------------------------------------------------
# CLI entry point: python -m scripts.seed
# ---------------------------------------------------------------------------


async def _run_seed() -> None:
    """Run the seed against the real database (idempotent)."""
    from src.db.session import async_session_factory, create_all_tables

    await create_all_tables()

    async with async_session_factory() as session:
        result = await seed_reference_data(session)
        await session.commit()

    if not any(result.values()):
        print("Reference data already seeded. Nothing to do.")
        return

    print("Seed complete.")
    print(f"  Sectors created:        {result['sectors_created']}")
    print(f"  Configuration created:  {result['configuration_created']}")


if __name__ == "__main__":
    asyncio.run(_run_seed())
    sys.exit(0)
