# test_tax.py
# Purpose: Regressive table breakpoints, flat and exempt regimes, fund distributions

from __future__ import annotations

import pytest

from bond_comparison.models import AssetCategory, TaxRegime
from bond_comparison.tax import (
    coupon_withholding_rate,
    regressive_rate,
    tax_on_gain,
    withholding_rate,
)


@pytest.mark.parametrize(
    "days, expected",
    [(0, 0.225), (180, 0.225), (181, 0.20), (360, 0.20), (361, 0.175), (720, 0.175), (721, 0.15), (5000, 0.15)],
)
def test_regressive_breakpoints(days, expected):
    assert regressive_rate(days) == expected


def test_regressive_rate_is_non_increasing():
    rates = [regressive_rate(d) for d in range(0, 1000)]
    assert all(a >= b for a, b in zip(rates, rates[1:]))


def test_regressive_rate_with_custom_table():
    assert regressive_rate(100, [(90, 0.3)], 0.1) == 0.1
    assert regressive_rate(90, [(90, 0.3)], 0.1) == 0.3


def test_withholding_rate_by_regime():
    assert withholding_rate(TaxRegime.EXEMPT, 10) == 0.0
    assert withholding_rate(TaxRegime.FLAT, 10, 0.15) == 0.15
    assert withholding_rate(TaxRegime.FLAT, 900, 0.2) == 0.2
    assert withholding_rate(TaxRegime.REGRESSIVE, 10) == 0.225
    assert withholding_rate(TaxRegime.REGRESSIVE, 721) == 0.15


def test_regressive_table_comes_from_settings(monkeypatch):
    monkeypatch.setattr("bond_comparison.tax.get_regressive_table", lambda: ([(30, 0.5)], 0.01))
    assert withholding_rate(TaxRegime.REGRESSIVE, 30) == 0.5
    assert withholding_rate(TaxRegime.REGRESSIVE, 31) == 0.01


def test_fund_distributions_are_exempt(make_asset):
    fund = make_asset(category=AssetCategory.FUNDO_CETIPADO, tax_regime=TaxRegime.REGRESSIVE)
    cdb = make_asset(category=AssetCategory.CDB, tax_regime=TaxRegime.REGRESSIVE)
    assert coupon_withholding_rate(fund, 30, 0.15) == 0.0
    assert coupon_withholding_rate(cdb, 30, 0.15) == 0.225


def test_losses_are_not_taxed():
    assert tax_on_gain(-500.0, 0.2) == 0.0
    assert tax_on_gain(1000.0, 0.15) == pytest.approx(150.0)
