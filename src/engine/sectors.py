"""Designated-sector lookup for the small-establishment quota rule."""

from src.engine.config import RiskConfig


def is_designated(sector: str, config: RiskConfig) -> bool:
    """True iff the sector is in the configured designated set.

    Unrecognized sectors are simply not designated; the headcount-based
    rules still apply to them.
    """
    return sector in config.designated_sectors


class SectorClassifier:
    """Object form of is_designated() for callers that inject collaborators."""

    def is_designated(self, sector: str, config: RiskConfig) -> bool:
        return is_designated(sector, config)
