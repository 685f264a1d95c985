# comparison.py
# Purpose: Align two assets on one horizon (natural, bridge or truncate), bridge early
#          maturities on the reference curve and assemble the ComparisonResult.

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from core.settings_loader import get_app_config

from .cashflows import project_asset, value_at, year_checkpoints
from .daycount import business_days, curve_period_rate
from .macro import curves_for_run, default_projection
from .models import (
    AssetConfig,
    Capitalization,
    ComparisonMode,
    ComparisonResult,
    DayCount,
    MacroCurves,
    MacroProjection,
    PreparedAsset,
    ProjectionResult,
    ReinvestmentRecord,
    parse_enum,
)
from .rules import prepare_asset
from .sale import advance_sale_result
from .tax import configured_regressive_rate, tax_on_gain
from .validation import ConfigurationError, validate_inputs

logger = logging.getLogger(__name__)


def _canonical(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def input_fingerprint(
    asset_a: AssetConfig,
    asset_b: AssetConfig,
    projection: MacroProjection,
    mode: ComparisonMode,
    valuation_date: date,
) -> str:
    """SHA-256 of the canonical inputs; equal inputs always give equal fingerprints."""
    payload = {
        "asset_a": asdict(asset_a),
        "asset_b": asdict(asset_b),
        "reference": {str(y): float(v) for y, v in sorted(projection.reference.items())},
        "inflation": {str(y): float(v) for y, v in sorted(projection.inflation.items())},
        "mode": mode,
        "valuation_date": valuation_date,
    }
    text = json.dumps(payload, sort_keys=True, default=_canonical)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def resolve_horizon(asset_a: AssetConfig, asset_b: AssetConfig, mode: ComparisonMode) -> date:
    """Common comparison date for *mode*."""
    if mode is ComparisonMode.BRIDGE:
        return max(asset_a.maturity, asset_b.maturity)
    if mode is ComparisonMode.TRUNCATE:
        return min(asset_a.maturity, asset_b.maturity)
    return asset_b.maturity


def bridge_growth(curves: MacroCurves, start: date, end: date) -> float:
    """Reference-curve growth over ``[start, end)`` compounded daily on business days."""
    return curve_period_rate(curves.reference, start, end, DayCount.BUS_252, Capitalization.DAILY)


def bridged_value(curves: MacroCurves, amount: float, start: date, end: date) -> float:
    """Net value on *end* of *amount* reinvested on the reference curve from *start*."""
    gross = amount * (1.0 + bridge_growth(curves, start, end))
    gain = gross - amount
    return gross - tax_on_gain(gain, configured_regressive_rate((end - start).days))


def bridge_reinvestment(projection: ProjectionResult, curves: MacroCurves, horizon: date) -> ReinvestmentRecord:
    """Reinvest an early maturity's net proceeds on the reference curve until *horizon*.

    The redeemed value was already taxed inside the projection; only the gain
    earned during the bridge is taxed, at the regressive rate for the bridge's
    own length in days.
    """
    start = projection.horizon
    redeemed = projection.final_value
    window_days = (horizon - start).days
    bdays = business_days(start, horizon)
    growth = bridge_growth(curves, start, horizon)
    gross = redeemed * (1.0 + growth)
    gain = gross - redeemed
    tax_rate = configured_regressive_rate(window_days)
    tax = tax_on_gain(gain, tax_rate)
    # Annual rate equivalent to the window's growth on the 252-day basis
    rate_pct = ((1.0 + growth) ** (252.0 / bdays) - 1.0) * 100.0 if bdays else 0.0
    record = ReinvestmentRecord(
        source_key=projection.key,
        source_name=projection.asset.name,
        start_date=start,
        end_date=horizon,
        window_days=window_days,
        business_days=bdays,
        rate_pct=rate_pct,
        redeemed_value=redeemed,
        gross_value=gross,
        gain=gain,
        tax_rate=tax_rate,
        tax=tax,
        net_value=gross - tax,
    )
    logger.info(
        f"Bridging {projection.key}: {redeemed:.2f} from {start.isoformat()} to {horizon.isoformat()} "
        f"({window_days} days, {bdays} business days, {rate_pct:.2f}% a.a.) -> {record.net_value:.2f}"
    )
    return record


def aligned_values(
    prepared: PreparedAsset,
    curves: MacroCurves,
    projection: ProjectionResult,
    checkpoints: Tuple[date, ...],
) -> Tuple[float, ...]:
    """Value series of one asset on the common checkpoints.

    Checkpoints past the asset's own horizon carry its net proceeds bridged on
    the reference curve.
    """
    values = []
    for when in checkpoints:
        if when <= projection.horizon:
            values.append(value_at(prepared, curves, projection, when))
        else:
            values.append(bridged_value(curves, projection.final_value, projection.horizon, when))
    return tuple(values)


def compare(
    asset_a: AssetConfig,
    asset_b: AssetConfig,
    projection: Optional[MacroProjection] = None,
    mode=None,
    valuation_date: Optional[date] = None,
) -> ComparisonResult:
    """Project both assets and align them on one horizon.

    Raises ConfigurationError, carrying every validation message, before any
    computation when the inputs are invalid.
    """
    valuation_date = valuation_date or date.today()
    projection = projection if projection is not None else default_projection()
    mode = parse_enum(ComparisonMode, mode or get_app_config().get("default_mode", ComparisonMode.NATURAL.value))

    messages = validate_inputs(asset_a, asset_b, projection, valuation_date)
    if messages:
        for message in messages:
            logger.error(f"Validation: {message}")
        raise ConfigurationError(messages)

    horizon = resolve_horizon(asset_a, asset_b, mode)
    curves = curves_for_run(projection, valuation_date, horizon)
    logger.info(
        f"Comparing {asset_a.name} vs {asset_b.name} ({mode.value}) "
        f"from {valuation_date.isoformat()} to {horizon.isoformat()}"
    )

    checkpoints = year_checkpoints(valuation_date, horizon)
    results = []
    reinvestment: Optional[ReinvestmentRecord] = None
    for index, asset in enumerate((asset_a, asset_b), start=1):
        prepared = prepare_asset(asset, valuation_date, index)
        own_horizon = min(asset.maturity, horizon)
        result = project_asset(prepared, curves, valuation_date, own_horizon, truncated=asset.maturity > horizon)
        tax = result.total_tax
        if own_horizon < horizon:
            reinvestment = bridge_reinvestment(result, curves, horizon)
            tax += reinvestment.tax
        results.append((result, aligned_values(prepared, curves, result, checkpoints), tax))

    (result_a, values_a, tax_a), (result_b, values_b, tax_b) = results
    comparison = ComparisonResult(
        mode=mode,
        valuation_date=valuation_date,
        horizon=horizon,
        asset_a=result_a,
        asset_b=result_b,
        checkpoints=checkpoints,
        values_a=values_a,
        values_b=values_b,
        tax_a=tax_a,
        tax_b=tax_b,
        fingerprint=input_fingerprint(asset_a, asset_b, projection, mode, valuation_date),
        reinvestment=reinvestment,
        sale=advance_sale_result(asset_a),
    )
    logger.info(
        f"Result at {horizon.isoformat()}: {result_a.key}={comparison.final_a:.2f} "
        f"{result_b.key}={comparison.final_b:.2f} winner={comparison.winner or 'tie'}"
    )
    return comparison
