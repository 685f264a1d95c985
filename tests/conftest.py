# Add project root to sys.path for module imports
import os, sys
import pytest
from datetime import date
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from bond_comparison.macro import build_monthly_curves
from bond_comparison.models import (
    AssetCategory,
    AssetConfig,
    CouponFrequency,
    MacroProjection,
    RateKind,
    TaxRegime,
)
from core.settings_loader import reload_settings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the settings cache around every test so monkeypatched files are honoured."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def valuation_date() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def flat_projection() -> MacroProjection:
    """Reference rate flat at 10% a.a. and zero inflation, 2025-2030 listed explicitly."""
    years = range(2025, 2031)
    return MacroProjection(
        reference={y: 10.0 for y in years},
        inflation={y: 0.0 for y in years},
        source="test",
    )


@pytest.fixture
def flat_curves(flat_projection):
    """Five years of monthly curves from January 2025."""
    return build_monthly_curves(flat_projection, 2025, 60)


@pytest.fixture
def make_asset():
    """Factory for AssetConfig with sensible defaults; override any field by keyword."""

    def _make(**overrides) -> AssetConfig:
        fields = dict(
            name="Test Asset",
            category=AssetCategory.DEBENTURE_INCENTIVADA,
            rate_kind=RateKind.PRE,
            rate=12.0,
            maturity=date(2029, 1, 15),
            principal=100_000.0,
            frequency=CouponFrequency.SEMIANNUAL,
            tax_regime=TaxRegime.EXEMPT,
        )
        fields.update(overrides)
        return AssetConfig(**fields)

    return _make


@pytest.fixture
def sample_scenario_path() -> Path:
    return PROJECT_ROOT / "scenarios" / "debenture_vs_cdb.yaml"
