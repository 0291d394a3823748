"""Reference-data repositories: configuration overrides and sectors.

Both tables are operational (admin-editable). Repos call add()/flush()
only — never commit(). The session dependency handles commit/rollback.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.data.sectors import SectorDefinition
from src.db.tables import ConfigurationRow, SectorRow
from src.models.common import new_uuid7, utc_now


class ConfigurationRepository:
    """Key/value overrides for RiskConfig tunables."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> ConfigurationRow | None:
        return await self._session.get(ConfigurationRow, key)

    async def list_all(self) -> list[ConfigurationRow]:
        result = await self._session.execute(
            select(ConfigurationRow).order_by(ConfigurationRow.key)
        )
        return list(result.scalars().all())

    async def as_mapping(self) -> dict[str, str]:
        """All overrides as key -> raw string value."""
        return {row.key: row.value for row in await self.list_all()}

    async def upsert(
        self, *, key: str, value: str, description: str | None = None,
    ) -> ConfigurationRow:
        row = await self.get(key)
        if row is None:
            row = ConfigurationRow(
                key=key,
                value=value,
                description=description,
                updated_at=utc_now(),
            )
            self._session.add(row)
        else:
            row.value = value
            if description is not None:
                row.description = description
            row.updated_at = utc_now()
        await self._session.flush()
        await self._session.refresh(row)
        return row


class SectorRepository:
    """Recognized sectors with their designation flag."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str, is_designated: bool) -> SectorRow:
        now = utc_now()
        row = SectorRow(
            sector_id=new_uuid7(),
            name=name,
            is_designated=is_designated,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self._session.add(row)
        await self._session.flush()
        await self._session.refresh(row)
        return row

    async def get(self, sector_id: UUID) -> SectorRow | None:
        return await self._session.get(SectorRow, sector_id)

    async def get_by_name(self, name: str) -> SectorRow | None:
        result = await self._session.execute(
            select(SectorRow).where(SectorRow.name == name)
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> list[SectorRow]:
        result = await self._session.execute(
            select(SectorRow)
            .where(SectorRow.is_active.is_(True))
            .order_by(SectorRow.name)
        )
        return list(result.scalars().all())

    async def update(
        self,
        sector_id: UUID,
        *,
        name: str | None = None,
        is_designated: bool | None = None,
        is_active: bool | None = None,
    ) -> SectorRow | None:
        row = await self.get(sector_id)
        if row is None:
            return None
        if name is not None:
            row.name = name
        if is_designated is not None:
            row.is_designated = is_designated
        if is_active is not None:
            row.is_active = is_active
        row.updated_at = utc_now()
        await self._session.flush()
        await self._session.refresh(row)
        return row

    async def seed(self, definitions: Iterable[SectorDefinition]) -> list[SectorRow]:
        """Insert catalog sectors whose name is not stored yet."""
        created: list[SectorRow] = []
        for definition in definitions:
            if await self.get_by_name(definition.name) is None:
                created.append(await self.create(
                    name=definition.name, is_designated=definition.designated,
                ))
        return created

    async def deactivate(self, sector_id: UUID) -> bool:
        """Soft delete. Returns False if the sector does not exist."""
        row = await self.update(sector_id, is_active=False)
        return row is not None
