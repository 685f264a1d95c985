# macro.py
# Purpose: Expand annual macro projections (reference rate, inflation) into contiguous
#          monthly curves, holding the last projected year constant (terminal regime).

from __future__ import annotations

import logging
from datetime import date
from typing import List, Mapping

import pandas as pd

from core.settings_loader import get_macro_projection_settings

from .daycount import annual_to_monthly
from .models import CurvePoint, MacroCurves, MacroProjection, MonthlyCurve, rate_for_year

logger = logging.getLogger(__name__)


def build_curve(rates: Mapping[int, float], start_year: int, total_months: int) -> MonthlyCurve:
    """Build one monthly curve from a year -> annual percent mapping.

    Months whose year is past the last supplied year reuse that year's rate.
    """
    if not rates:
        raise ValueError("Macro projection must contain at least one year")
    if total_months <= 0:
        raise ValueError(f"total_months must be positive, got {total_months}")

    points: List[CurvePoint] = []
    for month_index in range(total_months):
        year = start_year + month_index // 12
        month = month_index % 12 + 1
        annual = rate_for_year(rates, year)
        points.append(CurvePoint(month=date(year, month, 1), annual_pct=annual,
                                 monthly_rate=annual_to_monthly(annual)))
    return MonthlyCurve(points=tuple(points))


def build_monthly_curves(projection: MacroProjection, start_year: int, total_months: int) -> MacroCurves:
    """Build the reference and inflation curves for one comparison run."""
    last_year = start_year + (total_months - 1) // 12
    if projection.reference and last_year > max(projection.reference):
        logger.warning(
            f"Terminal regime activated: rates from {max(projection.reference)} "
            f"used through {last_year}"
        )
    reference = build_curve(projection.reference, start_year, total_months)
    # A projection without inflation yields a flat zero inflation curve
    inflation = build_curve(projection.inflation or {start_year: 0.0}, start_year, total_months)
    logger.debug(f"Curves generated: {total_months} months from {start_year}")
    return MacroCurves(reference=reference, inflation=inflation)


def months_to_cover(start_year: int, horizon: date) -> int:
    """Whole calendar years of months from January of *start_year* through *horizon*'s year."""
    return 12 * (horizon.year - start_year + 1)


def required_years(valuation_date: date, horizon: date) -> List[int]:
    """Years a projection must supply explicitly to cover a comparison."""
    return list(range(valuation_date.year, horizon.year + 1))


def projection_from_frame(df: pd.DataFrame, source: str = "custom", description: str = "") -> MacroProjection:
    """Build a MacroProjection from a frame with Year, Reference and optional Inflation columns."""
    columns = {c.strip().lower(): c for c in df.columns}
    if "year" not in columns or "reference" not in columns:
        raise ValueError("Macro projection frame needs 'Year' and 'Reference' columns")
    frame = df.dropna(subset=[columns["year"], columns["reference"]])
    years = frame[columns["year"]].astype(int)
    reference = dict(zip(years, frame[columns["reference"]].astype(float)))
    inflation = {}
    if "inflation" in columns:
        infl = frame[columns["inflation"]]
        inflation = {int(y): float(v) for y, v in zip(years, infl) if pd.notna(v)}
    return MacroProjection(reference=reference, inflation=inflation, source=source, description=description)


def default_projection() -> MacroProjection:
    """The macro scenario configured in settings.yaml."""
    cfg = get_macro_projection_settings()
    return MacroProjection(
        reference={int(y): float(v) for y, v in (cfg.get("reference") or {}).items()},
        inflation={int(y): float(v) for y, v in (cfg.get("inflation") or {}).items()},
        source=str(cfg.get("source", "focus")),
        description=str(cfg.get("description", "")),
    )


def curves_for_run(projection: MacroProjection, valuation_date: date, horizon: date) -> MacroCurves:
    """Monthly curves from January of the valuation year through December of the horizon year."""
    return build_monthly_curves(projection, valuation_date.year, months_to_cover(valuation_date.year, horizon))
