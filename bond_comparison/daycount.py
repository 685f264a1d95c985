# daycount.py
# Purpose: Convert annual rates into period rates under the calendar (ACT/365) and
#          business-day (BUS/252) conventions, including curve-driven floating rates.

from __future__ import annotations

from datetime import date
from typing import Iterator, Tuple

import numpy as np

from .models import (
    CalculationRules,
    Capitalization,
    DayCount,
    MacroCurves,
    MonthlyCurve,
    RateKind,
)

__all__ = [
    "annual_to_daily",
    "annual_to_monthly",
    "calendar_days",
    "business_days",
    "period_rate",
    "curve_period_rate",
    "asset_period_rate",
    "month_segments",
]

DAYS_PER_YEAR = {DayCount.ACT_365: 365, DayCount.BUS_252: 252}
BUSINESS_DAYS_PER_MONTH = 21


# ---------------------------------------------------------------------------
# Rate conversions
# ---------------------------------------------------------------------------


def annual_to_daily(annual_pct: float, convention: DayCount = DayCount.ACT_365) -> float:
    """Daily compounding rate equivalent to *annual_pct* (percent) under *convention*."""
    return (1.0 + annual_pct / 100.0) ** (1.0 / DAYS_PER_YEAR[convention]) - 1.0


def annual_to_monthly(annual_pct: float) -> float:
    """Monthly compounding rate equivalent to *annual_pct* (percent)."""
    return (1.0 + annual_pct / 100.0) ** (1.0 / 12.0) - 1.0


# ---------------------------------------------------------------------------
# Day counting
# ---------------------------------------------------------------------------


def calendar_days(start: date, end: date) -> int:
    """Calendar days from *start* to *end*, never negative."""
    return max(0, (end - start).days)


def business_days(start: date, end: date) -> int:
    """Monday-Friday dates in ``[start, end)``; no holiday calendar."""
    if end <= start:
        return 0
    return int(np.busday_count(start, end))


def _elapsed_days(start: date, end: date, convention: DayCount, granularity: Capitalization) -> float:
    if convention is DayCount.ACT_365:
        return float(calendar_days(start, end))
    if granularity is Capitalization.MONTHLY:
        # Monthly capitalisation: 21 business days for each elapsed month
        months = calendar_days(start, end) * 12.0 / 365.0
        return months * BUSINESS_DAYS_PER_MONTH
    return float(business_days(start, end))


def period_rate(
    annual_pct: float,
    start: date,
    end: date,
    convention: DayCount = DayCount.ACT_365,
    granularity: Capitalization = Capitalization.DAILY,
) -> float:
    """Compounded rate for ``[start, end)`` from an annual rate in percent.

    Returns 0 for degenerate windows (``start >= end``).
    """
    if start >= end:
        return 0.0
    days = _elapsed_days(start, end, convention, granularity)
    daily = annual_to_daily(annual_pct, convention)
    return (1.0 + daily) ** days - 1.0


# ---------------------------------------------------------------------------
# Curve-driven rates
# ---------------------------------------------------------------------------


def month_segments(start: date, end: date) -> Iterator[Tuple[date, date]]:
    """Split ``[start, end)`` at calendar month boundaries."""
    cursor = start
    while cursor < end:
        if cursor.month == 12:
            next_month = date(cursor.year + 1, 1, 1)
        else:
            next_month = date(cursor.year, cursor.month + 1, 1)
        segment_end = min(next_month, end)
        yield cursor, segment_end
        cursor = segment_end


def curve_period_rate(
    curve: MonthlyCurve,
    start: date,
    end: date,
    convention: DayCount = DayCount.ACT_365,
    granularity: Capitalization = Capitalization.DAILY,
) -> float:
    """Rate for ``[start, end)`` compounding month by month at each month's curve rate."""
    if start >= end:
        return 0.0
    factors = [
        1.0 + period_rate(curve.annual_pct_for(seg_start), seg_start, seg_end, convention, granularity)
        for seg_start, seg_end in month_segments(start, end)
    ]
    return float(np.prod(factors)) - 1.0


def asset_period_rate(
    rate_kind: RateKind,
    rate: float,
    start: date,
    end: date,
    rules: CalculationRules,
    curves: MacroCurves,
) -> float:
    """Period rate of an asset for ``[start, end)`` given its rate kind and rules.

    *rate* is the asset's rate parameter in percent: the fixed annual rate, the
    percentage of the reference rate, the spread over it, or the real rate over
    inflation.
    """
    if start >= end:
        return 0.0
    if rate_kind is RateKind.PRE:
        return period_rate(rate, start, end, DayCount.ACT_365)
    if rate_kind is RateKind.IPCA_PLUS:
        inflation = curve_period_rate(curves.inflation, start, end, DayCount.ACT_365)
        real = period_rate(rate, start, end, DayCount.ACT_365)
        return (1.0 + inflation) * (1.0 + real) - 1.0

    reference = curve_period_rate(curves.reference, start, end, rules.convention, rules.granularity)
    if rate_kind is RateKind.PERCENT_CDI:
        return reference * (rate / 100.0)
    if rate_kind is RateKind.CDI_PLUS:
        return reference + period_rate(rate, start, end, rules.convention, rules.granularity)
    raise ValueError(f"Unsupported rate kind: {rate_kind}")
