# styles.py
# Purpose: Shared OpenPyXL styles and helpers for the comparison workbook

from __future__ import annotations

from typing import Optional, Sequence

from openpyxl.styles import Border, Font, NamedStyle, PatternFill, Side

from core.config import COLOR_PALETTE

# Common styles
title_font = Font(bold=True, size=14)
header_font = Font(bold=True, color="FFFFFF")
header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
highlight_fill = PatternFill(start_color="FFE6CC", end_color="FFE6CC", fill_type="solid")
asset_fills = [PatternFill(start_color=c, end_color=c, fill_type="solid") for c in COLOR_PALETTE]

border = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin'),
)

MONEY_FORMAT = '#,##0.00'
RATE_FORMAT = '0.000000%'
PERCENT_FORMAT = '0.00%'
DATE_FORMAT = 'DD/MM/YYYY'


def ensure_named_styles(wb) -> None:
    """Install named styles once per workbook.

    wb.named_styles can hold NamedStyle objects or plain names, so both are
    normalised to names before the membership check.
    """
    existing = {getattr(item, "name", item) for item in wb.named_styles}
    if 'money_style' not in existing:
        money_style = NamedStyle(name='money_style')
        money_style.number_format = MONEY_FORMAT
        wb.add_named_style(money_style)
    if 'percent_style' not in existing:
        percent_style = NamedStyle(name='percent_style')
        percent_style.number_format = PERCENT_FORMAT
        wb.add_named_style(percent_style)


def write_header(ws, row: int, headers: Sequence[str]) -> None:
    """Write a styled header row."""
    for i, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=i, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border


def format_column(
    ws, column: int, number_format: str, first_row: int = 2, last_row: Optional[int] = None
) -> None:
    for row in range(first_row, (last_row or ws.max_row) + 1):
        ws.cell(row=row, column=column).number_format = number_format
