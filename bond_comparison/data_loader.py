# data_loader.py
# Purpose: Load scenario YAML files and macro CSVs into typed models

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pandas as pd
import yaml

from .macro import projection_from_frame
from .models import (
    FREQUENCY_ALIASES,
    RATE_KIND_ALIASES,
    TAX_REGIME_ALIASES,
    AssetCategory,
    AssetConfig,
    ComparisonMode,
    CouponFrequency,
    MacroProjection,
    RateKind,
    TaxRegime,
    parse_enum,
)

logger = logging.getLogger(__name__)

DATE_FORMATS = (
    "%d/%m/%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y%m%d",
)

# Serial number of 31/12/9999, the last date Excel can hold
EXCEL_MAX_SERIAL = 2_958_465


def parse_date(value: Any) -> date:
    """Parse a date from ISO, dd/mm/YYYY and a few other separators, or an Excel serial number.

    Numbers past the Excel date range are read as compact YYYYMMDD dates.
    Raises ValueError when no format matches.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()

    # Excel serial dates (1 = 1900-01-01, counting Excel's phantom 29/02/1900)
    if re.match(r"^\d+(\.\d*)?$", s) and 1 <= float(s) <= EXCEL_MAX_SERIAL:
        serial_number = float(s)
        if serial_number >= 60:
            serial_number -= 1
        return (datetime(1900, 1, 1) + timedelta(days=serial_number - 1)).date()

    last_err: Optional[Exception] = None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s.split("T")[0], fmt).date()
        except ValueError as e:
            last_err = e
    raise ValueError(f"Unrecognized date format: {value!r}") from last_err


def _optional_date(raw: Mapping[str, Any], key: str) -> Optional[date]:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date(value)


def _optional_float(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return float(value)


def _frequency(value: Any) -> CouponFrequency:
    if value is None:
        return CouponFrequency.NONE
    if isinstance(value, int) and not isinstance(value, bool):
        return CouponFrequency(value)
    return parse_enum(CouponFrequency, value, FREQUENCY_ALIASES)


def asset_from_dict(raw: Mapping[str, Any]) -> AssetConfig:
    """Build an AssetConfig from a scenario mapping.

    Required keys: name, category, rate_kind, rate, maturity, principal.
    """
    missing = [k for k in ("name", "category", "rate_kind", "rate", "maturity", "principal") if k not in raw]
    if missing:
        raise ValueError(f"Asset is missing required fields: {missing}")

    coupon_months = raw.get("coupon_months")
    anchor_day = raw.get("anchor_day")
    return AssetConfig(
        name=str(raw["name"]),
        ticker=str(raw.get("ticker") or ""),
        category=parse_enum(AssetCategory, raw["category"]),
        rate_kind=parse_enum(RateKind, raw["rate_kind"], RATE_KIND_ALIASES),
        rate=float(raw["rate"]),
        maturity=parse_date(raw["maturity"]),
        principal=float(raw["principal"]),
        frequency=_frequency(raw.get("frequency")),
        tax_regime=parse_enum(TaxRegime, raw.get("tax_regime", TaxRegime.REGRESSIVE), TAX_REGIME_ALIASES),
        flat_tax_rate=_optional_float(raw, "flat_tax_rate"),
        earnings_start_date=_optional_date(raw, "earnings_start_date"),
        coupon_months=tuple(int(m) for m in coupon_months) if coupon_months else None,
        anchor_day=int(anchor_day) if anchor_day is not None else None,
        investment_date=_optional_date(raw, "investment_date"),
        acquisition_cost=_optional_float(raw, "acquisition_cost"),
        sale_value=_optional_float(raw, "sale_value"),
        coupons_received=_optional_float(raw, "coupons_received") or 0.0,
    )


def projection_from_dict(raw: Mapping[str, Any]) -> MacroProjection:
    """Build a MacroProjection from ``{reference: {year: pct}, inflation: {year: pct}}``."""
    reference = {int(y): float(v) for y, v in (raw.get("reference") or {}).items()}
    inflation = {int(y): float(v) for y, v in (raw.get("inflation") or {}).items()}
    return MacroProjection(
        reference=reference,
        inflation=inflation,
        source=str(raw.get("source", "custom")),
        description=str(raw.get("description", "")),
    )


def load_scenario(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a scenario YAML file.

    Returns a dict with ``asset_a``, ``asset_b`` (AssetConfig), ``projection``
    (MacroProjection or None when the file has no macro block), ``mode``
    (ComparisonMode or None) and ``valuation_date`` (date or None).
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Scenario file {path} must contain a mapping")
    for key in ("asset_a", "asset_b"):
        if not isinstance(raw.get(key), dict):
            raise ValueError(f"Scenario file {path} needs an '{key}' mapping")

    scenario = {
        "asset_a": asset_from_dict(raw["asset_a"]),
        "asset_b": asset_from_dict(raw["asset_b"]),
        "projection": projection_from_dict(raw["macro"]) if raw.get("macro") else None,
        "mode": parse_enum(ComparisonMode, raw["mode"]) if raw.get("mode") else None,
        "valuation_date": parse_date(raw["valuation_date"]) if raw.get("valuation_date") else None,
    }
    logger.info(f"Loaded scenario {path.name}: {scenario['asset_a'].name} vs {scenario['asset_b'].name}")
    return scenario


def load_macro_csv(path: Union[str, Path], source: str = "csv") -> MacroProjection:
    """Read a macro projection CSV with Year, Reference and optional Inflation columns."""
    df = pd.read_csv(path)
    projection = projection_from_frame(df, source=source, description=f"Loaded from {Path(path).name}")
    logger.info(f"Loaded macro projection for years {list(projection.years)} from {Path(path).name}")
    return projection
