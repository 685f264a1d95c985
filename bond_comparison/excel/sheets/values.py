# sheets/values.py
# Purpose: Build the Values sheet (aligned year series of both assets)

from __future__ import annotations

from openpyxl import Workbook

from ...models import ComparisonResult
from ...reporting import values_frame
from ..styles import DATE_FORMAT, MONEY_FORMAT, asset_fills, format_column, write_header


def add_values_sheet(wb: Workbook, comparison: ComparisonResult) -> None:
    ws = wb.create_sheet("Values")
    df = values_frame(comparison)
    headers = list(df.columns)
    headers[2] = f"{comparison.asset_a.key} (A)"
    headers[3] = f"{comparison.asset_b.key} (B)"
    write_header(ws, 1, headers)
    ws.cell(row=1, column=3).fill = asset_fills[0]
    ws.cell(row=1, column=4).fill = asset_fills[1]

    for row in df.itertuples(index=False):
        ws.append([None if isinstance(v, float) and v != v else v for v in row])

    format_column(ws, 2, DATE_FORMAT)
    for column in range(3, len(headers) + 1):
        format_column(ws, column, MONEY_FORMAT)
