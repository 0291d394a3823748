"""MoHRE economic-activity catalog used by the assessment questionnaire.

The first fourteen activities are the ones covered by the small-establishment
rule (20-49 employees must employ a fixed number of Emiratis). Banking,
insurance and government bodies follow their own sector regulators and are
listed so the questionnaire can accept them, but they are not designated.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SectorDefinition:
    """One entry of the economic-activity catalog."""

    name: str
    designated: bool


@dataclass(frozen=True)
class SectorCatalog:
    """Ordered, immutable list of recognized sectors."""

    sectors: tuple[SectorDefinition, ...]

    @property
    def names(self) -> list[str]:
        """All sector names in catalog order."""
        return [s.name for s in self.sectors]

    @property
    def designated_names(self) -> frozenset[str]:
        """Names of sectors subject to the small-establishment quota."""
        return frozenset(s.name for s in self.sectors if s.designated)


SECTOR_CATALOG = SectorCatalog(
    sectors=(
        SectorDefinition("Information and Communications", True),
        SectorDefinition("Financial and Insurance Activities", True),
        SectorDefinition("Real Estate Activities", True),
        SectorDefinition("Professional, Scientific and Technical Activities", True),
        SectorDefinition("Administrative and Support Services", True),
        SectorDefinition("Education", True),
        SectorDefinition("Healthcare and Social Work Activities", True),
        SectorDefinition("Arts and Entertainment", True),
        SectorDefinition("Mining and Quarrying", True),
        SectorDefinition("Manufacturing", True),
        SectorDefinition("Construction", True),
        SectorDefinition("Wholesale and Retail Trade", True),
        SectorDefinition("Transportation and Warehousing", True),
        SectorDefinition("Hospitality (Accommodation and Food Services)", True),
        # Own sector regulators
        SectorDefinition("Banking", False),
        SectorDefinition("Insurance", False),
        SectorDefinition("Government", False),
        SectorDefinition("Other", False),
    ),
)

DEFAULT_DESIGNATED_SECTORS: frozenset[str] = SECTOR_CATALOG.designated_names
