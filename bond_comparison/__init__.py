"""bond_comparison – fixed-income trade comparison engine.

Sub-modules, leaves first:

* `daycount`    – annual to period rates under ACT/365 and BUS/252
* `macro`       – annual macro projections to monthly curves
* `schedule`    – coupon calendars and accrual windows
* `tax`         – regressive, flat and exempt withholding
* `rules`       – category x rate kind calculation rules, asset preparation
* `cashflows`   – coupon ledger, terminal principal, year series
* `comparison`  – natural / bridge / truncate alignment of two assets
* `validation`, `sale`, `data_loader`, `reporting`, `excel`

Typical use::

    from bond_comparison import compare, load_scenario

    scenario = load_scenario("scenario.yaml")
    result = compare(scenario["asset_a"], scenario["asset_b"], scenario["projection"])
"""

# Re-export frequently used entry points for convenience
from .comparison import compare
from .data_loader import load_scenario
from .models import (
    AssetCategory,
    AssetConfig,
    ComparisonMode,
    ComparisonResult,
    CouponFrequency,
    MacroProjection,
    RateKind,
    TaxRegime,
)
from .validation import ConfigurationError

__all__ = [
    "compare",
    "load_scenario",
    "AssetCategory",
    "AssetConfig",
    "ComparisonMode",
    "ComparisonResult",
    "CouponFrequency",
    "MacroProjection",
    "RateKind",
    "TaxRegime",
    "ConfigurationError",
]
