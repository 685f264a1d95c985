# sheets/curves.py
# Purpose: Build the Curves sheet (monthly reference and inflation curves)

from __future__ import annotations

from openpyxl import Workbook

from ...models import MacroCurves
from ..styles import DATE_FORMAT, RATE_FORMAT, format_column, write_header


def add_curves_sheet(wb: Workbook, curves: MacroCurves) -> None:
    ws = wb.create_sheet("Curves")
    write_header(ws, 1, ["Month", "Reference %", "Reference Monthly", "Inflation %", "Inflation Monthly"])
    for ref, infl in zip(curves.reference, curves.inflation):
        ws.append([ref.month, ref.annual_pct, ref.monthly_rate, infl.annual_pct, infl.monthly_rate])
    format_column(ws, 1, DATE_FORMAT)
    format_column(ws, 3, RATE_FORMAT)
    format_column(ws, 5, RATE_FORMAT)
