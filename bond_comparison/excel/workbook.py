# workbook.py
# Purpose: Orchestrate Excel workbook creation from a comparison result

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from openpyxl import Workbook

from ..models import ComparisonResult, MacroCurves
from .sheets.curves import add_curves_sheet
from .sheets.ledger import add_ledger_sheet
from .sheets.reinvestment import add_reinvestment_sheet
from .sheets.summary import add_summary_sheet
from .sheets.values import add_values_sheet
from .styles import ensure_named_styles

logger = logging.getLogger(__name__)


def _ledger_title(prefix: str, key: str) -> str:
    # Excel sheet names are limited to 31 characters and may not contain []:*?/\
    cleaned = "".join(ch for ch in key if ch not in '[]:*?/\\')
    return f"{prefix} {cleaned}"[:31]


def build_workbook(comparison: ComparisonResult, curves: MacroCurves) -> Workbook:
    wb = Workbook()
    wb.remove(wb.active)
    ensure_named_styles(wb)

    add_summary_sheet(wb, comparison)
    add_values_sheet(wb, comparison)
    add_ledger_sheet(wb, comparison.asset_a, _ledger_title("Ledger A", comparison.asset_a.key))
    add_ledger_sheet(wb, comparison.asset_b, _ledger_title("Ledger B", comparison.asset_b.key))
    add_curves_sheet(wb, curves)
    add_reinvestment_sheet(wb, comparison)

    # Basic formatting
    for ws in wb.worksheets:
        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 20
        ws.column_dimensions['C'].width = 20
        ws.column_dimensions['D'].width = 20

    return wb


def save_workbook(comparison: ComparisonResult, curves: MacroCurves, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_workbook(comparison, curves).save(path)
    logger.info(f"Workbook written to {path}")
    return path
