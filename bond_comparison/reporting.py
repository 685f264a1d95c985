# reporting.py
# Purpose: Tabular views of comparison results (pandas frames, yearly yields, text summary)

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import pandas as pd

from .models import ComparisonResult, MonthlyCurve, ProjectionResult

LEDGER_COLUMNS = [
    "Payment Date",
    "Accrual Start",
    "Accrual End",
    "Period Rate",
    "Gross",
    "Holding Days",
    "Tax Rate",
    "Tax",
    "Net",
    "Reinvest Factor",
    "Reinvested",
]


def ledger_frame(projection: ProjectionResult) -> pd.DataFrame:
    """Coupon ledger of one projection, one row per coupon."""
    rows = [
        [
            c.payment_date,
            c.accrual_start,
            c.accrual_end,
            c.period_rate,
            c.gross,
            c.holding_days,
            c.tax_rate,
            c.tax,
            c.net,
            c.reinvest_factor,
            c.reinvested,
        ]
        for c in projection.coupons
    ]
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def annual_yields(values: Sequence[float]) -> List[float]:
    """Income earned in each year of a value series (value[k] - value[k-1])."""
    if len(values) < 2:
        return []
    return [float(x) for x in np.diff(np.asarray(values, dtype=float))]


def values_frame(comparison: ComparisonResult) -> pd.DataFrame:
    """Aligned year-indexed values of both assets with the difference and yearly income."""
    df = pd.DataFrame(
        {
            "Year": range(len(comparison.checkpoints)),
            "Date": list(comparison.checkpoints),
            "Asset A": list(comparison.values_a),
            "Asset B": list(comparison.values_b),
        }
    )
    df["Difference"] = df["Asset A"] - df["Asset B"]
    df["Yield A"] = [np.nan] + annual_yields(comparison.values_a)
    df["Yield B"] = [np.nan] + annual_yields(comparison.values_b)
    return df


def curve_frame(curve: MonthlyCurve) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Month": [p.month for p in curve],
            "Annual %": [p.annual_pct for p in curve],
            "Monthly Rate": [p.monthly_rate for p in curve],
        }
    )


def summary_lines(comparison: ComparisonResult) -> List[str]:
    """Plain-text summary used by the CLI."""
    a, b = comparison.asset_a, comparison.asset_b
    lines = [
        f"Mode: {comparison.mode.value}  "
        f"{comparison.valuation_date.isoformat()} -> {comparison.horizon.isoformat()}",
    ]
    for projection, final, tax in ((a, comparison.final_a, comparison.tax_a), (b, comparison.final_b, comparison.tax_b)):
        note = " (truncated)" if projection.truncated else ""
        lines.append(
            f"{projection.key:<20} coupons={len(projection.coupons):>3}  "
            f"net coupons={projection.net_coupons:>14,.2f}  tax={tax:>12,.2f}  final={final:>14,.2f}{note}"
        )
    r = comparison.reinvestment
    if r is not None:
        lines.append(
            f"Reinvestment of {r.source_key}: {r.start_date.isoformat()} -> {r.end_date.isoformat()} "
            f"({r.window_days} days at {r.rate_pct:.2f}% a.a.), tax={r.tax:,.2f}, net={r.net_value:,.2f}"
        )
    if comparison.sale is not None:
        lines.append(
            f"Advance sale result: {comparison.sale.result:,.2f} ({comparison.sale.result_pct:.2f}% over cost)"
        )
    winner = comparison.winner or "tie"
    lines.append(f"Winner: {winner}  difference={comparison.difference:,.2f}")
    return lines
