# test_reporting.py
# Purpose: pandas views, yearly yields and text summary of a comparison

from __future__ import annotations

from datetime import date

import pytest

from bond_comparison.comparison import compare
from bond_comparison.models import AssetCategory, CouponFrequency, RateKind
from bond_comparison.reporting import (
    LEDGER_COLUMNS,
    annual_yields,
    curve_frame,
    ledger_frame,
    summary_lines,
    values_frame,
)


@pytest.fixture
def comparison(make_asset, flat_projection, valuation_date):
    asset_a = make_asset(name="Bond A", maturity=date(2027, 1, 15))
    asset_b = make_asset(
        name="Bond B",
        category=AssetCategory.CDB,
        rate_kind=RateKind.PERCENT_CDI,
        rate=105.0,
        frequency=CouponFrequency.MONTHLY,
    )
    return compare(asset_a, asset_b, flat_projection, "natural", valuation_date)


def test_annual_yields():
    assert annual_yields([100.0, 110.0, 121.0]) == pytest.approx([10.0, 11.0])
    assert annual_yields([100.0]) == []


def test_ledger_frame(comparison):
    df = ledger_frame(comparison.asset_b)
    assert list(df.columns) == LEDGER_COLUMNS
    assert len(df) == len(comparison.asset_b.coupons)
    assert df["Net"].sum() == pytest.approx(comparison.asset_b.net_coupons)


def test_values_frame(comparison):
    df = values_frame(comparison)
    assert len(df) == len(comparison.checkpoints)
    assert df["Date"].iloc[-1] == comparison.horizon
    assert df["Difference"].iloc[-1] == pytest.approx(comparison.difference)
    assert df["Yield A"].isna().iloc[0]
    assert df["Yield B"].iloc[1] == pytest.approx(comparison.values_b[1] - comparison.values_b[0])


def test_curve_frame(flat_curves):
    df = curve_frame(flat_curves.reference)
    assert len(df) == 60
    assert (df["Annual %"] == 10.0).all()


def test_summary_lines(comparison):
    text = "\n".join(summary_lines(comparison))
    assert "Mode: natural" in text
    assert "Reinvestment of BOND A" in text
    assert "Winner:" in text
