# test_rules.py
# Purpose: Category x rate kind rule table, anchor days, asset keys and asset preparation

from __future__ import annotations

from datetime import date

import pytest

from bond_comparison.models import (
    AssetCategory,
    CalculationRules,
    Capitalization,
    DayCount,
    RateKind,
)
from bond_comparison.rules import (
    CALENDAR_RULES,
    asset_key,
    prepare_asset,
    resolve_anchor_day,
    resolve_rules,
)


@pytest.mark.parametrize(
    "category, rate_kind, convention, granularity",
    [
        (AssetCategory.CDB, RateKind.PERCENT_CDI, DayCount.BUS_252, Capitalization.DAILY),
        (AssetCategory.LCI_LCA, RateKind.CDI_PLUS, DayCount.BUS_252, Capitalization.DAILY),
        (AssetCategory.CRI_CRA, RateKind.PERCENT_CDI, DayCount.BUS_252, Capitalization.MONTHLY),
        (AssetCategory.DEBENTURE_INCENTIVADA, RateKind.CDI_PLUS, DayCount.BUS_252, Capitalization.MONTHLY),
        (AssetCategory.FUNDO_CETIPADO, RateKind.PERCENT_CDI, DayCount.BUS_252, Capitalization.MONTHLY),
        (AssetCategory.TESOURO_DIRETO, RateKind.PERCENT_CDI, DayCount.ACT_365, Capitalization.DAILY),
        (AssetCategory.CDB, RateKind.PRE, DayCount.ACT_365, Capitalization.DAILY),
        (AssetCategory.CRI_CRA, RateKind.IPCA_PLUS, DayCount.ACT_365, Capitalization.DAILY),
    ],
)
def test_rules_table(category, rate_kind, convention, granularity):
    assert resolve_rules(category, rate_kind) == CalculationRules(convention, granularity)


def test_category_missing_from_table_uses_calendar_days():
    assert resolve_rules(AssetCategory.CDB, RateKind.PERCENT_CDI, table={}) == CALENDAR_RULES


def test_custom_table_overrides_policy():
    table = {"fundo-cetipado": {"indexed": {"convention": "BUS/252", "granularity": "daily"}}}
    rules = resolve_rules(AssetCategory.FUNDO_CETIPADO, RateKind.PERCENT_CDI, table)
    assert rules == CalculationRules(DayCount.BUS_252, Capitalization.DAILY)


def test_anchor_days(make_asset):
    assert resolve_anchor_day(make_asset(category=AssetCategory.FUNDO_CETIPADO)) == 10
    assert resolve_anchor_day(make_asset(category=AssetCategory.CDB)) == 15
    assert resolve_anchor_day(make_asset(anchor_day=5)) == 5
    assert resolve_anchor_day(make_asset(category=AssetCategory.CDB), {"default": 20}) == 20


def test_asset_key(make_asset):
    assert asset_key(make_asset(ticker=" xpto28 ")) == "XPTO28"
    assert asset_key(make_asset(name="Cdb Banco")) == "CDB BANCO"
    assert asset_key(make_asset(name="  ", ticker=""), 3) == "ASSET_3"


def test_prepare_asset_defaults(make_asset, valuation_date):
    prepared = prepare_asset(make_asset(), valuation_date, 1)
    assert prepared.accrual_start == valuation_date
    assert prepared.investment_date == valuation_date
    assert prepared.flat_tax_rate == 0.15
    assert prepared.anchor_day == 15
    assert prepared.key == "TEST ASSET"


def test_prepare_asset_overrides(make_asset, valuation_date):
    asset = make_asset(
        earnings_start_date=date(2025, 3, 1),
        investment_date=date(2024, 6, 1),
        flat_tax_rate=0.2,
    )
    prepared = prepare_asset(asset, valuation_date)
    assert prepared.accrual_start == date(2025, 3, 1)
    assert prepared.investment_date == date(2024, 6, 1)
    assert prepared.flat_tax_rate == 0.2


def test_prepare_asset_never_accrues_before_valuation(make_asset, valuation_date):
    prepared = prepare_asset(make_asset(earnings_start_date=date(2023, 1, 1)), valuation_date)
    assert prepared.accrual_start == valuation_date
