# cashflows.py
# Purpose: Project one asset to a horizon: coupon ledger (gross, withholding, net,
#          reinvestment), terminal principal and the year-indexed value series.

from __future__ import annotations

import calendar
import logging
from dataclasses import replace
from datetime import date
from typing import List, Optional, Sequence, Tuple

from .daycount import asset_period_rate, curve_period_rate
from .models import (
    CouponEvent,
    CouponFrequency,
    MacroCurves,
    PreparedAsset,
    PrincipalOutcome,
    ProjectionResult,
)
from .schedule import accrual_window, generate_coupon_dates
from .tax import coupon_withholding_rate, tax_on_gain, withholding_rate

logger = logging.getLogger(__name__)


def add_years(d: date, years: int) -> date:
    """Same month and day *years* later; 29 February falls back to the 28th."""
    year = d.year + years
    day = min(d.day, calendar.monthrange(year, d.month)[1])
    return date(year, d.month, day)


def year_checkpoints(start: date, horizon: date) -> Tuple[date, ...]:
    """Anniversaries of *start* strictly before *horizon*, then *horizon* itself.

    A horizon of 4 years and 3 months yields 6 checkpoints (years 0..5, the
    last one being the horizon date).
    """
    if horizon <= start:
        return (start,)
    points: List[date] = [start]
    k = 1
    while add_years(start, k) < horizon:
        points.append(add_years(start, k))
        k += 1
    points.append(horizon)
    return tuple(points)


def holding_days(prepared: PreparedAsset, when: date) -> int:
    """Days held since the original investment date."""
    return max(0, (when - prepared.investment_date).days)


def reinvestment_factor(prepared: PreparedAsset, curves: MacroCurves, paid: date, until: date) -> float:
    """Growth of one unit paid on *paid* and reinvested on the reference curve until *until*."""
    rules = prepared.rules
    return 1.0 + curve_period_rate(curves.reference, paid, until, rules.convention, rules.granularity)


def _coupon_event(
    prepared: PreparedAsset,
    curves: MacroCurves,
    payment: date,
    window: Tuple[date, date],
    horizon: date,
) -> CouponEvent:
    asset = prepared.asset
    start, end = window
    rate = asset_period_rate(asset.rate_kind, asset.rate, start, end, prepared.rules, curves)
    gross = max(0.0, asset.principal * rate)
    days = holding_days(prepared, payment)
    tax_rate = coupon_withholding_rate(asset, days, prepared.flat_tax_rate)
    tax = gross * tax_rate
    net = gross - tax
    factor = reinvestment_factor(prepared, curves, payment, horizon)
    return CouponEvent(
        payment_date=payment,
        accrual_start=start,
        accrual_end=end,
        period_rate=rate,
        gross=gross,
        holding_days=days,
        tax_rate=tax_rate,
        tax=tax,
        net=net,
        reinvest_factor=factor,
        reinvested=net * factor,
    )


def close_at_maturity(
    prepared: PreparedAsset,
    curves: MacroCurves,
    coupons: List[CouponEvent],
    maturity: date,
) -> List[CouponEvent]:
    """Pay the interest between the last closed month and *maturity* with the redemption.

    A coupon falling on the maturity date has its window stretched to that
    date; otherwise a final coupon is paid on it for the remaining stub.
    """
    if coupons and coupons[-1].payment_date == maturity:
        window = (coupons[-1].accrual_start, maturity)
        return coupons[:-1] + [_coupon_event(prepared, curves, maturity, window, maturity)]
    start = coupons[-1].accrual_end if coupons else prepared.accrual_start
    if start >= maturity:
        return coupons
    return coupons + [_coupon_event(prepared, curves, maturity, (start, maturity), maturity)]


def capitalize_principal(
    prepared: PreparedAsset, curves: MacroCurves, since: date, until: date
) -> PrincipalOutcome:
    """Accrue the principal from *since* to *until* at the asset's own rate and tax the gain."""
    asset = prepared.asset
    rate = asset_period_rate(asset.rate_kind, asset.rate, since, until, prepared.rules, curves)
    gross = asset.principal * (1.0 + rate)
    gain = gross - asset.principal
    tax_rate = withholding_rate(asset.tax_regime, holding_days(prepared, until), prepared.flat_tax_rate)
    tax = tax_on_gain(gain, tax_rate)
    return PrincipalOutcome(
        gross=gross,
        gain=gain,
        tax_rate=tax_rate,
        tax=tax,
        net=gross - tax,
        capitalized=True,
        capitalized_from=since,
        capitalized_to=until,
        period_rate=rate,
    )


def par_redemption(prepared: PreparedAsset) -> PrincipalOutcome:
    principal = prepared.asset.principal
    return PrincipalOutcome(gross=principal, gain=0.0, tax_rate=0.0, tax=0.0, net=principal, capitalized=False)


def _last_paid(coupon_dates: Sequence[date], when: date) -> Optional[date]:
    paid = [d for d in coupon_dates if d <= when]
    return paid[-1] if paid else None


def terminal_principal(
    prepared: PreparedAsset,
    curves: MacroCurves,
    coupon_dates: Sequence[date],
    horizon: date,
    truncated: bool,
) -> PrincipalOutcome:
    """How the principal leaves the projection at *horizon*.

    Coupon-paying assets redeem at par on their natural maturity, the last
    stub of interest being paid as the final coupon. Truncated coupon assets
    capitalise from the last coupon paid (or the accrual start) to the horizon.
    Assets without coupons always capitalise from the accrual start, since
    all of their income is paid with the principal.
    """
    if prepared.asset.frequency is CouponFrequency.NONE:
        return capitalize_principal(prepared, curves, prepared.accrual_start, horizon)
    if not truncated:
        return par_redemption(prepared)
    since = _last_paid(coupon_dates, horizon) or prepared.accrual_start
    return capitalize_principal(prepared, curves, since, horizon)


def value_at(
    prepared: PreparedAsset,
    curves: MacroCurves,
    result: ProjectionResult,
    when: date,
) -> float:
    """Net value of the position on *when*, for *when* up to the projection horizon.

    The principal is marked as if liquidated that day (capitalised since the
    last coupon paid, gain taxed) and every coupon paid so far is reinvested
    on the reference curve up to *when*. On the horizon itself this is the
    final value.
    """
    if when >= result.horizon:
        return result.final_value
    paid = [c for c in result.coupons if c.payment_date <= when]
    if prepared.asset.frequency is CouponFrequency.NONE:
        since = prepared.accrual_start
    else:
        since = paid[-1].payment_date if paid else prepared.accrual_start
    if when > since:
        principal = capitalize_principal(prepared, curves, since, when).net
    else:
        principal = prepared.asset.principal
    coupons = sum(c.net * reinvestment_factor(prepared, curves, c.payment_date, when) for c in paid)
    return principal + coupons


def project_asset(
    prepared: PreparedAsset,
    curves: MacroCurves,
    start: date,
    horizon: date,
    truncated: Optional[bool] = None,
) -> ProjectionResult:
    """Project one asset from *start* to *horizon*.

    *horizon* may not pass the asset's maturity; proceeds past maturity are
    handled by the comparison's bridging reinvestment.
    """
    asset = prepared.asset
    if horizon > asset.maturity:
        raise ValueError(
            f"{prepared.key}: horizon {horizon.isoformat()} is after maturity {asset.maturity.isoformat()}"
        )
    if truncated is None:
        truncated = horizon < asset.maturity

    coupon_dates = generate_coupon_dates(
        asset.frequency,
        prepared.anchor_day,
        prepared.accrual_start,
        horizon,
        asset.coupon_months,
    )
    coupons: List[CouponEvent] = []
    previous: Optional[date] = None
    for payment in coupon_dates:
        window = accrual_window(payment, previous, prepared.accrual_start)
        event = _coupon_event(prepared, curves, payment, window, horizon)
        logger.debug(
            f"{prepared.key} coupon {payment.isoformat()} "
            f"[{event.accrual_start.isoformat()}, {event.accrual_end.isoformat()}) "
            f"rate={event.period_rate:.6f} gross={event.gross:.2f} tax={event.tax:.2f} "
            f"net={event.net:.2f} factor={event.reinvest_factor:.6f}"
        )
        coupons.append(event)
        previous = payment

    if not truncated and asset.frequency is not CouponFrequency.NONE:
        coupons = close_at_maturity(prepared, curves, coupons, horizon)

    principal = terminal_principal(prepared, curves, coupon_dates, horizon, truncated)
    final_value = principal.net + sum(c.reinvested for c in coupons)
    total_tax = sum(c.tax for c in coupons) + principal.tax

    result = ProjectionResult(
        key=prepared.key,
        asset=asset,
        start_date=start,
        horizon=horizon,
        truncated=truncated,
        checkpoints=year_checkpoints(start, horizon),
        values=(),
        coupons=tuple(coupons),
        principal=principal,
        total_tax=total_tax,
        final_value=final_value,
    )
    values = tuple(value_at(prepared, curves, result, when) for when in result.checkpoints)

    logger.info(
        f"{prepared.key}: {len(coupons)} coupons to {horizon.isoformat()}"
        f"{' (truncated)' if truncated else ''}, final={final_value:.2f}, tax={total_tax:.2f}"
    )
    return replace(result, values=values)
