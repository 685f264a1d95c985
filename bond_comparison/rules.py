# rules.py
# Purpose: Resolve per-asset calculation rules (day-count convention, capitalisation,
#          anchor day, accrual start) once, from the explicit category x rate kind table.

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from core.settings_loader import get_anchor_days, get_calculation_rules, get_flat_tax_rate

from .models import (
    AssetCategory,
    AssetConfig,
    CalculationRules,
    Capitalization,
    DayCount,
    PreparedAsset,
    RateKind,
    parse_enum,
)

logger = logging.getLogger(__name__)

CALENDAR_RULES = CalculationRules(convention=DayCount.ACT_365, granularity=Capitalization.DAILY)

DEFAULT_ANCHOR_DAY = 15


def resolve_rules(
    category: AssetCategory,
    rate_kind: RateKind,
    table: Optional[Mapping[str, Mapping]] = None,
) -> CalculationRules:
    """Look up the day-count rules for (*category*, *rate_kind*).

    Fixed and inflation-linked kinds always accrue on calendar days. Indexed
    kinds use the ``indexed`` entry of the category in *table* (settings.yaml
    by default), falling back to calendar days when the category has none.
    """
    if not rate_kind.is_indexed:
        return CALENDAR_RULES
    table = get_calculation_rules() if table is None else table
    entry = (table.get(category.value) or {}).get("indexed")
    if not entry:
        return CALENDAR_RULES
    return CalculationRules(
        convention=parse_enum(DayCount, entry.get("convention", DayCount.ACT_365.value)),
        granularity=parse_enum(Capitalization, entry.get("granularity", Capitalization.DAILY.value)),
    )


def resolve_anchor_day(asset: AssetConfig, anchor_days: Optional[Mapping[str, int]] = None) -> int:
    """Coupon anchor day: the asset's own override, else the category's configured day."""
    if asset.anchor_day is not None:
        return int(asset.anchor_day)
    anchor_days = get_anchor_days() if anchor_days is None else anchor_days
    return int(anchor_days.get(asset.category.value, anchor_days.get("default", DEFAULT_ANCHOR_DAY)))


def asset_key(asset: AssetConfig, fallback_index: int = 0) -> str:
    """Stable display key: ticker, else name, upper-cased; ``ASSET_<n>`` when both are blank."""
    for candidate in (asset.ticker, asset.name):
        key = (candidate or "").strip().upper()
        if key:
            return key
    return f"ASSET_{fallback_index}"


def prepare_asset(asset: AssetConfig, valuation_date: date, index: int = 0) -> PreparedAsset:
    """Resolve everything the projection needs from an asset's configuration."""
    rules = resolve_rules(asset.category, asset.rate_kind)
    anchor_day = resolve_anchor_day(asset)
    # Earnings before the valuation date are already in the position
    accrual_start = max(asset.earnings_start_date or valuation_date, valuation_date)
    investment_date = asset.investment_date or valuation_date
    flat_rate = asset.flat_tax_rate if asset.flat_tax_rate is not None else get_flat_tax_rate()
    key = asset_key(asset, index)
    logger.debug(
        f"{key}: {asset.category.value} + {asset.rate_kind.value} -> "
        f"{rules.convention.value}/{rules.granularity.value}, anchor day {anchor_day}"
    )
    return PreparedAsset(
        asset=asset,
        key=key,
        rules=rules,
        anchor_day=anchor_day,
        accrual_start=accrual_start,
        investment_date=investment_date,
        flat_tax_rate=flat_rate,
    )