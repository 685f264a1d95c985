# validation.py
# Purpose: Pre-run checks on asset and macro inputs; a comparison never starts on invalid input

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from .macro import required_years
from .models import AssetConfig, MacroProjection, RateKind


class ConfigurationError(ValueError):
    """Raised when inputs fail validation; ``messages`` lists every problem found."""

    def __init__(self, messages: Iterable[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


def validate_asset(asset: AssetConfig, valuation_date: date, label: str = "Asset") -> List[str]:
    """Human-readable problems with one asset; empty when it can be projected."""
    messages: List[str] = []
    if not (asset.name or "").strip() and not (asset.ticker or "").strip():
        messages.append(f"{label}: name is required")
    if asset.principal is None or asset.principal <= 0:
        messages.append(f"{label}: principal must be positive (got {asset.principal})")
    if asset.rate is None or asset.rate <= 0:
        messages.append(f"{label}: rate must be positive (got {asset.rate})")
    if asset.maturity <= valuation_date:
        messages.append(
            f"{label}: maturity {asset.maturity.isoformat()} must be after the valuation date "
            f"{valuation_date.isoformat()}"
        )
    if asset.earnings_start_date is not None and asset.earnings_start_date >= asset.maturity:
        messages.append(
            f"{label}: earnings start {asset.earnings_start_date.isoformat()} must be before maturity"
        )
    if asset.coupon_months:
        bad = [m for m in asset.coupon_months if not 1 <= int(m) <= 12]
        if bad:
            messages.append(f"{label}: coupon months must be between 1 and 12 (got {bad})")
    if asset.anchor_day is not None and not 1 <= int(asset.anchor_day) <= 31:
        messages.append(f"{label}: anchor day must be between 1 and 31 (got {asset.anchor_day})")
    if asset.flat_tax_rate is not None and not 0.0 <= asset.flat_tax_rate <= 1.0:
        messages.append(f"{label}: flat tax rate must be a decimal between 0 and 1 (got {asset.flat_tax_rate})")
    return messages


def _missing_years(series, years: Iterable[int]) -> List[int]:
    return [y for y in years if y not in series]


def validate_projection(
    projection: Optional[MacroProjection],
    valuation_date: date,
    until: date,
    needs_inflation: bool = False,
) -> List[str]:
    """Problems with the macro projection for a run from *valuation_date* to *until*."""
    if projection is None or not projection.reference:
        return ["Macro projection: at least one reference-rate year is required"]
    messages: List[str] = []
    years = required_years(valuation_date, until)
    missing = _missing_years(projection.reference, years)
    if missing:
        messages.append(f"Macro projection: reference rate missing for years {missing}")
    if needs_inflation:
        missing = _missing_years(projection.inflation, years)
        if missing:
            messages.append(f"Macro projection: inflation missing for years {missing}")
    return messages


def validate_inputs(
    asset_a: AssetConfig,
    asset_b: AssetConfig,
    projection: Optional[MacroProjection],
    valuation_date: date,
) -> List[str]:
    """Every validation message for a comparison; an empty list means it may run.

    The projection must list each year from the valuation year to the year of
    the earlier maturity; later years fall under the terminal regime.
    """
    messages = validate_asset(asset_a, valuation_date, "Asset A")
    messages += validate_asset(asset_b, valuation_date, "Asset B")
    earlier_maturity = min(asset_a.maturity, asset_b.maturity)
    needs_inflation = RateKind.IPCA_PLUS in (asset_a.rate_kind, asset_b.rate_kind)
    messages += validate_projection(projection, valuation_date, earlier_maturity, needs_inflation)
    return messages
