# sheets/reinvestment.py
# Purpose: Build the Reinvestment sheet describing the bridging reinvestment, if any

from __future__ import annotations

from openpyxl import Workbook

from ...models import ComparisonResult
from ..styles import MONEY_FORMAT, write_header


def add_reinvestment_sheet(wb: Workbook, comparison: ComparisonResult) -> None:
    ws = wb.create_sheet("Reinvestment")
    write_header(ws, 1, ["Field", "Value"])
    r = comparison.reinvestment
    if r is None:
        ws.append(["No bridging reinvestment", "maturities are aligned with the horizon"])
        return

    rows = [
        ("Source", r.source_key),
        ("Source Name", r.source_name),
        ("Start", r.start_date),
        ("End", r.end_date),
        ("Window (days)", r.window_days),
        ("Business Days", r.business_days),
        ("Reference Rate (% a.a.)", r.rate_pct),
        ("Redeemed Value", r.redeemed_value),
        ("Gross Value", r.gross_value),
        ("Gain", r.gain),
        ("Tax Rate", r.tax_rate),
        ("Tax", r.tax),
        ("Net Value", r.net_value),
    ]
    for label, value in rows:
        ws.append([label, value])
        if label in ("Redeemed Value", "Gross Value", "Gain", "Tax", "Net Value"):
            ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
        elif label == "Tax Rate":
            ws.cell(row=ws.max_row, column=2).style = 'percent_style'
