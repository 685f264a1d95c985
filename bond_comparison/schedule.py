# schedule.py
# Purpose: Coupon calendar generation (rolling anchor-day and fixed-month schedules)
#          and closed-month accrual windows.

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from .models import CouponFrequency

logger = logging.getLogger(__name__)

__all__ = [
    "anchor_date",
    "first_anchor_after",
    "add_months_keeping_anchor",
    "generate_coupon_dates",
    "accrual_window",
]


def anchor_date(year: int, month: int, anchor_day: int) -> date:
    """The anchor day in (*year*, *month*), clamped to the month's last day."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(anchor_day, last_day))


def add_months_keeping_anchor(d: date, months: int, anchor_day: int) -> date:
    """Step *months* calendar months from *d*, landing on the anchor day."""
    month_index = d.year * 12 + (d.month - 1) + months
    return anchor_date(month_index // 12, month_index % 12 + 1, anchor_day)


def first_anchor_after(d: date, anchor_day: int) -> date:
    """Earliest anchor-day occurrence strictly after *d*."""
    candidate = anchor_date(d.year, d.month, anchor_day)
    if candidate > d:
        return candidate
    return add_months_keeping_anchor(d, 1, anchor_day)


def _fixed_month_dates(
    coupon_months: Sequence[int], anchor_day: int, accrual_start: date, horizon: date
) -> List[date]:
    months = sorted(set(int(m) for m in coupon_months))
    out: List[date] = []
    for year in range(accrual_start.year, horizon.year + 1):
        for month in months:
            candidate = anchor_date(year, month, anchor_day)
            if accrual_start < candidate <= horizon:
                out.append(candidate)
    return out


def generate_coupon_dates(
    frequency: CouponFrequency,
    anchor_day: int,
    accrual_start: date,
    horizon: date,
    coupon_months: Optional[Sequence[int]] = None,
) -> List[date]:
    """Ordered coupon payment dates in ``(accrual_start, horizon]``.

    Rolling schedules start at the first anchor day after *accrual_start* and
    step by the frequency in months. When *coupon_months* is given the schedule
    pays on those calendar months every year instead.
    """
    if frequency is CouponFrequency.NONE or horizon <= accrual_start:
        return []
    if not 1 <= anchor_day <= 31:
        raise ValueError(f"Anchor day must be between 1 and 31, got {anchor_day}")

    if coupon_months:
        dates = _fixed_month_dates(coupon_months, anchor_day, accrual_start, horizon)
    else:
        dates = []
        current = first_anchor_after(accrual_start, anchor_day)
        while current <= horizon:
            dates.append(current)
            current = add_months_keeping_anchor(current, frequency.months, anchor_day)

    logger.debug(
        f"Coupon schedule {frequency.name} anchor={anchor_day} "
        f"{accrual_start.isoformat()}..{horizon.isoformat()}: {len(dates)} dates"
    )
    return dates


def accrual_window(coupon_date: date, previous_coupon: Optional[date], accrual_start: date) -> Tuple[date, date]:
    """Closed-month accrual window ``[start, end)`` for a coupon.

    The window ends at the first day of the coupon's month, so it covers
    through the last day of the previous month. The first coupon accrues
    from *accrual_start*. Later coupons accrue from the first day of the
    previous coupon's month, never earlier than *accrual_start*. Degenerate
    windows collapse to ``(start, start)``.
    """
    end = date(coupon_date.year, coupon_date.month, 1)
    if previous_coupon is None:
        start = accrual_start
    else:
        start = max(accrual_start, date(previous_coupon.year, previous_coupon.month, 1))
    if end < start:
        end = start
    return start, end
