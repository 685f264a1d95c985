# sale.py
# Purpose: Result of selling the held asset before maturity (sale value plus coupons received over cost)

from __future__ import annotations

from typing import Optional

from .models import AssetConfig, SaleResult


def advance_sale_result(asset: AssetConfig) -> Optional[SaleResult]:
    """Profit of an early sale, or None when the asset carries no sale data."""
    if asset.acquisition_cost is None or asset.sale_value is None:
        return None
    cost = float(asset.acquisition_cost)
    coupons = float(asset.coupons_received or 0.0)
    result = float(asset.sale_value) + coupons - cost
    result_pct = (result / cost * 100.0) if cost > 0 else 0.0
    return SaleResult(
        acquisition_cost=cost,
        sale_value=float(asset.sale_value),
        coupons_received=coupons,
        result=result,
        result_pct=result_pct,
    )
