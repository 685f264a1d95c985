# sheets/summary.py
# Purpose: Build the Summary sheet (inputs, final values, taxes, winner)

from __future__ import annotations

from openpyxl import Workbook

from ...models import ComparisonResult, ProjectionResult
from ..styles import MONEY_FORMAT, highlight_fill, title_font, write_header


def _asset_rows(projection: ProjectionResult, final: float, tax: float):
    asset = projection.asset
    return [
        ("Key", projection.key),
        ("Name", asset.name),
        ("Category", asset.category.value),
        ("Rate Kind", asset.rate_kind.value),
        ("Rate (%)", asset.rate),
        ("Frequency", asset.frequency.name.lower()),
        ("Tax Regime", asset.tax_regime.value),
        ("Maturity", asset.maturity),
        ("Principal", asset.principal),
        ("Truncated", "yes" if projection.truncated else "no"),
        ("Coupons", len(projection.coupons)),
        ("Net Coupons", projection.net_coupons),
        ("Principal (net)", projection.principal.net),
        ("Total Tax", tax),
        ("Final Value", final),
    ]


def add_summary_sheet(wb: Workbook, comparison: ComparisonResult) -> None:
    ws = wb.create_sheet("Summary")
    ws.append(["FIXED INCOME COMPARISON"])
    ws['A1'].font = title_font
    ws.append(["Mode", comparison.mode.value])
    ws.append(["Valuation Date", comparison.valuation_date])
    ws.append(["Horizon", comparison.horizon])
    ws.append(["Fingerprint", comparison.fingerprint])
    ws.append([])

    header_row = ws.max_row + 1
    write_header(ws, header_row, ["Field", "Asset A", "Asset B"])
    rows_a = _asset_rows(comparison.asset_a, comparison.final_a, comparison.tax_a)
    rows_b = _asset_rows(comparison.asset_b, comparison.final_b, comparison.tax_b)
    for (label, value_a), (_, value_b) in zip(rows_a, rows_b):
        ws.append([label, value_a, value_b])
        if isinstance(value_a, float):
            ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
            ws.cell(row=ws.max_row, column=3).number_format = MONEY_FORMAT

    ws.append([])
    ws.append(["Difference (A - B)", comparison.difference])
    ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
    ws.append(["Winner", comparison.winner or "tie"])
    ws.cell(row=ws.max_row, column=2).fill = highlight_fill

    if comparison.sale is not None:
        ws.append([])
        ws.append(["Advance Sale Result", comparison.sale.result])
        ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
        ws.append(["Advance Sale Result (%)", comparison.sale.result_pct / 100.0])
        ws.cell(row=ws.max_row, column=2).style = 'percent_style'
