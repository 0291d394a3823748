"""Risk engine configuration.

RiskConfig is an immutable snapshot of every tunable the engine reads.
Defaults reflect the published MoHRE rules; admins override individual
values through key/value configuration entries, which
risk_config_from_entries() folds onto the defaults.

Deterministic, no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation

from pydantic import Field, model_validator

from src.data.sectors import DEFAULT_DESIGNATED_SECTORS
from src.models.common import EmiratisationBase

logger = logging.getLogger(__name__)

MAX_FINE_PER_MISSING_WORKER = Decimal("10000000")


class RiskConfig(EmiratisationBase, frozen=True):
    """Tunables for quota, fine and tier calculation."""

    designated_sectors: frozenset[str] = Field(
        default=DEFAULT_DESIGNATED_SECTORS,
        description="Sectors subject to the small-establishment fixed quota.",
    )
    small_establishment_min: int = Field(default=20, ge=0)
    small_establishment_max: int = Field(default=49, ge=0)
    small_establishment_quota: int = Field(default=2, ge=0)
    large_establishment_threshold: int = Field(
        default=50, ge=0,
        description="Skilled headcount at which the percentage quota applies.",
    )
    target_percent: Decimal = Field(
        default=Decimal("8"), ge=0, le=100,
        description="Quota as a percentage of skilled employees.",
    )
    fine_per_missing_worker: Decimal = Field(
        default=Decimal("96000"), ge=0, le=MAX_FINE_PER_MISSING_WORKER,
        description="Annual fine (AED) per missing qualifying worker.",
    )
    grace_period_days: int = Field(default=90, ge=0)
    risk_low_min: int = Field(default=71, ge=0, le=100)
    risk_medium_min: int = Field(default=41, ge=0, le=100)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "RiskConfig":
        if self.small_establishment_min > self.small_establishment_max:
            raise ValueError(
                f"small_establishment_min ({self.small_establishment_min}) must be "
                f"<= small_establishment_max ({self.small_establishment_max})."
            )
        if self.risk_medium_min > self.risk_low_min:
            raise ValueError(
                f"risk_medium_min ({self.risk_medium_min}) must be "
                f"<= risk_low_min ({self.risk_low_min})."
            )
        return self

    def to_snapshot(self) -> dict:
        """JSON-safe dict stored next to each assessment."""
        data = self.model_dump(mode="json")
        data["designated_sectors"] = sorted(self.designated_sectors)
        return data


# Scalar fields settable through configuration entries, with their parser.
_INT_KEYS = frozenset({
    "small_establishment_min",
    "small_establishment_max",
    "small_establishment_quota",
    "large_establishment_threshold",
    "grace_period_days",
    "risk_low_min",
    "risk_medium_min",
})
_DECIMAL_KEYS = frozenset({
    "target_percent",
    "fine_per_missing_worker",
})
CONFIG_KEYS: frozenset[str] = _INT_KEYS | _DECIMAL_KEYS

# Keys used by earlier admin panels
LEGACY_KEY_ALIASES: dict[str, str] = {
    "emiratisation_target_percent": "target_percent",
    "fine_per_emirati": "fine_per_missing_worker",
}


def canonical_config_key(key: str) -> str | None:
    """Resolve a configuration key (or legacy alias) to a RiskConfig field."""
    normalized = key.strip().lower()
    normalized = LEGACY_KEY_ALIASES.get(normalized, normalized)
    return normalized if normalized in CONFIG_KEYS else None


def parse_config_value(field: str, raw: str) -> int | Decimal:
    """Parse a stored string value for a RiskConfig scalar field.

    Integer fields accept integral decimals such as "90.0" (admin forms
    submit numbers as text).
    """
    text = raw.strip()
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Value {raw!r} for '{field}' is not a number.") from None
    if not number.is_finite():
        raise ValueError(f"Value {raw!r} for '{field}' is not finite.")
    if field in _INT_KEYS:
        if number != number.to_integral_value():
            raise ValueError(f"Value {raw!r} for '{field}' must be a whole number.")
        return int(number)
    return number


def risk_config_from_entries(
    entries: Mapping[str, str],
    designated_sectors: Iterable[str] | None = None,
) -> RiskConfig:
    """Build a RiskConfig from key/value overrides on top of the defaults.

    Args:
        entries: Stored configuration key -> string value.
        designated_sectors: Replaces the default designated set when given.

    Returns:
        Frozen RiskConfig snapshot.

    Raises:
        ValueError: A value does not parse or the result is inconsistent.
    """
    overrides: dict[str, object] = {}
    for key, raw in entries.items():
        field = canonical_config_key(key)
        if field is None:
            logger.warning("Ignoring unknown configuration key %r", key)
            continue
        overrides[field] = parse_config_value(field, raw)

    if designated_sectors is not None:
        overrides["designated_sectors"] = frozenset(designated_sectors)

    return RiskConfig(**overrides)
