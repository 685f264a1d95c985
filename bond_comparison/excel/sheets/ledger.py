# sheets/ledger.py
# Purpose: Build one coupon ledger sheet per asset

from __future__ import annotations

from openpyxl import Workbook

from ...models import ProjectionResult
from ...reporting import LEDGER_COLUMNS, ledger_frame
from ..styles import DATE_FORMAT, MONEY_FORMAT, PERCENT_FORMAT, RATE_FORMAT, format_column, write_header

_FORMATS = {
    "Payment Date": DATE_FORMAT,
    "Accrual Start": DATE_FORMAT,
    "Accrual End": DATE_FORMAT,
    "Period Rate": RATE_FORMAT,
    "Gross": MONEY_FORMAT,
    "Tax Rate": PERCENT_FORMAT,
    "Tax": MONEY_FORMAT,
    "Net": MONEY_FORMAT,
    "Reinvest Factor": '0.000000',
    "Reinvested": MONEY_FORMAT,
}


def add_ledger_sheet(wb: Workbook, projection: ProjectionResult, title: str) -> None:
    ws = wb.create_sheet(title)
    headers = ["#"] + LEDGER_COLUMNS
    write_header(ws, 1, headers)
    for i, row in enumerate(ledger_frame(projection).itertuples(index=False), 1):
        ws.append([i] + list(row))
    last_coupon_row = ws.max_row
    for column, header in enumerate(headers, 1):
        if header in _FORMATS:
            format_column(ws, column, _FORMATS[header], last_row=last_coupon_row)

    # Terminal principal below the coupons
    p = projection.principal
    ws.append([])
    ws.append(["Principal", "Capitalised" if p.capitalized else "Par", p.capitalized_from, p.capitalized_to])
    for label, value in (("Gross", p.gross), ("Gain", p.gain), ("Tax", p.tax), ("Net", p.net)):
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=2).number_format = MONEY_FORMAT
