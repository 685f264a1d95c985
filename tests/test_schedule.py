# test_schedule.py
# Purpose: Coupon calendars (rolling anchor and fixed months) and closed-month accrual windows

from __future__ import annotations

from datetime import date

import pytest

from bond_comparison.models import CouponFrequency
from bond_comparison.schedule import (
    accrual_window,
    add_months_keeping_anchor,
    anchor_date,
    first_anchor_after,
    generate_coupon_dates,
)


def test_monthly_schedule_on_anchor_day():
    dates = generate_coupon_dates(CouponFrequency.MONTHLY, 15, date(2025, 1, 2), date(2025, 6, 30))
    assert dates == [date(2025, m, 15) for m in range(1, 7)]


def test_first_coupon_is_strictly_after_accrual_start():
    dates = generate_coupon_dates(CouponFrequency.MONTHLY, 15, date(2025, 1, 15), date(2025, 3, 31))
    assert dates[0] == date(2025, 2, 15)
    assert first_anchor_after(date(2025, 12, 20), 10) == date(2026, 1, 10)


def test_semiannual_rolling_schedule():
    dates = generate_coupon_dates(CouponFrequency.SEMIANNUAL, 15, date(2025, 1, 2), date(2026, 12, 31))
    assert dates == [date(2025, 1, 15), date(2025, 7, 15), date(2026, 1, 15), date(2026, 7, 15)]


def test_fixed_coupon_months():
    dates = generate_coupon_dates(
        CouponFrequency.SEMIANNUAL, 15, date(2025, 3, 1), date(2027, 2, 15), coupon_months=(8, 2)
    )
    assert dates == [date(2025, 8, 15), date(2026, 2, 15), date(2026, 8, 15), date(2027, 2, 15)]


def test_no_coupons_or_degenerate_window():
    assert generate_coupon_dates(CouponFrequency.NONE, 15, date(2025, 1, 1), date(2030, 1, 1)) == []
    assert generate_coupon_dates(CouponFrequency.MONTHLY, 15, date(2025, 1, 1), date(2025, 1, 1)) == []


@pytest.mark.parametrize("frequency", [f for f in CouponFrequency if f is not CouponFrequency.NONE])
@pytest.mark.parametrize("anchor", [1, 10, 15, 28])
def test_schedules_are_increasing_and_on_anchor(frequency, anchor):
    dates = generate_coupon_dates(frequency, anchor, date(2025, 1, 20), date(2031, 6, 30))
    assert dates
    assert all(a < b for a, b in zip(dates, dates[1:]))
    assert all(d.day == anchor for d in dates)
    assert dates[-1] <= date(2031, 6, 30)


def test_anchor_day_clamps_to_month_end():
    assert anchor_date(2025, 2, 31) == date(2025, 2, 28)
    assert add_months_keeping_anchor(date(2025, 2, 28), 1, 31) == date(2025, 3, 31)


def test_invalid_anchor_day_raises():
    with pytest.raises(ValueError):
        generate_coupon_dates(CouponFrequency.MONTHLY, 0, date(2025, 1, 1), date(2026, 1, 1))


class TestAccrualWindow:
    def test_first_coupon_starts_at_accrual_start(self):
        assert accrual_window(date(2025, 2, 15), None, date(2025, 1, 2)) == (date(2025, 1, 2), date(2025, 2, 1))

    def test_later_coupons_cover_closed_months(self):
        assert accrual_window(date(2025, 3, 15), date(2025, 2, 15), date(2025, 1, 2)) == (
            date(2025, 2, 1),
            date(2025, 3, 1),
        )
        # Semiannual: six closed months
        assert accrual_window(date(2026, 1, 15), date(2025, 7, 15), date(2025, 1, 2)) == (
            date(2025, 7, 1),
            date(2026, 1, 1),
        )

    def test_start_never_precedes_accrual_start(self):
        assert accrual_window(date(2025, 3, 15), date(2025, 2, 15), date(2025, 2, 10)) == (
            date(2025, 2, 10),
            date(2025, 3, 1),
        )

    def test_degenerate_window_collapses(self):
        assert accrual_window(date(2025, 1, 15), None, date(2025, 1, 10)) == (date(2025, 1, 10), date(2025, 1, 10))
