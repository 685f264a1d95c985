# test_excel_workbook.py
# Purpose: Workbook export of a comparison (sheets, rows, number formats)

from __future__ import annotations

from datetime import date

import openpyxl
import pytest

from bond_comparison.comparison import compare
from bond_comparison.excel.workbook import build_workbook, save_workbook
from bond_comparison.macro import curves_for_run
from bond_comparison.models import AssetCategory, CouponFrequency, RateKind


@pytest.fixture
def comparison(make_asset, flat_projection, valuation_date):
    asset_a = make_asset(name="Bond A", ticker="DEB/27", maturity=date(2027, 1, 15),
                         acquisition_cost=99_000.0, sale_value=100_500.0)
    asset_b = make_asset(name="Bond B", category=AssetCategory.CDB, rate_kind=RateKind.PERCENT_CDI,
                         rate=100.0, frequency=CouponFrequency.MONTHLY)
    return compare(asset_a, asset_b, flat_projection, "natural", valuation_date)


@pytest.fixture
def curves(comparison, flat_projection):
    return curves_for_run(flat_projection, comparison.valuation_date, comparison.horizon)


def test_workbook_sheets(comparison, curves):
    wb = build_workbook(comparison, curves)
    assert wb.sheetnames == ["Summary", "Values", "Ledger A DEB27", "Ledger B BOND B", "Curves", "Reinvestment"]


def test_values_and_ledger_rows(comparison, curves):
    wb = build_workbook(comparison, curves)
    values = wb["Values"]
    assert values.max_row == len(comparison.checkpoints) + 1
    assert values.cell(row=1, column=3).value == "DEB/27 (A)"
    assert values.cell(row=values.max_row, column=3).value == pytest.approx(comparison.final_a)
    ledger = wb["Ledger B BOND B"]
    assert ledger.cell(row=1, column=1).value == "#"
    assert ledger.cell(row=2, column=2).number_format == "DD/MM/YYYY"


def test_reinvestment_and_summary(comparison, curves):
    wb = build_workbook(comparison, curves)
    rows = {r[0]: r[1] for r in wb["Reinvestment"].iter_rows(min_row=2, values_only=True)}
    assert rows["Source"] == comparison.reinvestment.source_key
    assert rows["Window (days)"] == comparison.reinvestment.window_days
    summary = {r[0]: r[1] for r in wb["Summary"].iter_rows(values_only=True) if r and r[0]}
    assert summary["Winner"] == (comparison.winner or "tie")
    assert summary["Advance Sale Result"] == pytest.approx(1_500.0)


def test_save_and_reload(tmp_path, comparison, curves):
    path = save_workbook(comparison, curves, tmp_path / "out" / "comparison.xlsx")
    assert path.exists()
    wb = openpyxl.load_workbook(path)
    assert wb["Curves"].max_row == len(curves.reference) + 1
