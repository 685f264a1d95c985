# tax.py
# Purpose: Withholding tax regimes for fixed income (regressive table, flat, exempt)

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from core.settings_loader import get_regressive_table

from .models import AssetCategory, AssetConfig, TaxRegime

__all__ = [
    "REGRESSIVE_TABLE",
    "REGRESSIVE_FLOOR_RATE",
    "regressive_rate",
    "withholding_rate",
    "coupon_withholding_rate",
    "tax_on_gain",
]

# (max days held, rate) breakpoints, ascending; past the last one the floor applies
REGRESSIVE_TABLE: Tuple[Tuple[int, float], ...] = ((180, 0.225), (360, 0.20), (720, 0.175))
REGRESSIVE_FLOOR_RATE = 0.15


def regressive_rate(
    days: int,
    table: Optional[Sequence[Tuple[int, float]]] = None,
    floor_rate: Optional[float] = None,
) -> float:
    """Regressive withholding rate for a holding period of *days*."""
    table = REGRESSIVE_TABLE if table is None else table
    floor_rate = REGRESSIVE_FLOOR_RATE if floor_rate is None else floor_rate
    for max_days, rate in table:
        if days <= max_days:
            return rate
    return floor_rate


def configured_regressive_rate(days: int) -> float:
    """Regressive rate using the table from settings.yaml."""
    table, floor_rate = get_regressive_table()
    return regressive_rate(days, table or None, floor_rate)


def withholding_rate(regime: TaxRegime, days: int, flat_rate: float = REGRESSIVE_FLOOR_RATE) -> float:
    if regime is TaxRegime.EXEMPT:
        return 0.0
    if regime is TaxRegime.FLAT:
        return flat_rate
    return configured_regressive_rate(days)


def coupon_withholding_rate(asset: AssetConfig, days: int, flat_rate: float) -> float:
    """Rate withheld on a coupon; fund distributions are exempt."""
    if asset.category is AssetCategory.FUNDO_CETIPADO:
        return 0.0
    return withholding_rate(asset.tax_regime, days, flat_rate)


def tax_on_gain(gain: float, rate: float) -> float:
    """Tax on a capital gain; losses are never taxed."""
    return max(0.0, gain) * rate
