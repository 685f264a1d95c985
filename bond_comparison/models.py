# models.py
# Purpose: Typed domain models for assets, macro projections, curves, coupon ledgers and comparison results

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value, aliases: Optional[Mapping[str, E]] = None) -> E:
    """Resolve *value* to a member of *enum_cls* by value, name or alias (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if text == str(member.value).lower() or text == member.name.lower():
            return member
    if aliases and text in aliases:
        return aliases[text]
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r} (expected one of: {allowed})")


class AssetCategory(str, Enum):
    DEBENTURE_INCENTIVADA = "debenture-incentivada"
    CRI_CRA = "cri-cra"
    LCI_LCA = "lci-lca"
    CDB = "cdb"
    FUNDO_CETIPADO = "fundo-cetipado"
    TESOURO_DIRETO = "tesouro-direto"


class RateKind(str, Enum):
    PRE = "pre-fixada"              # fixed annual rate
    PERCENT_CDI = "percentual-cdi"  # percentage of the reference rate
    CDI_PLUS = "cdi-mais"           # reference rate plus spread
    IPCA_PLUS = "ipca-mais"         # inflation plus real rate

    @property
    def is_indexed(self) -> bool:
        """True for kinds that float on the reference rate."""
        return self in (RateKind.PERCENT_CDI, RateKind.CDI_PLUS)


RATE_KIND_ALIASES = {
    "pre": RateKind.PRE,
    "fixed": RateKind.PRE,
    "%cdi": RateKind.PERCENT_CDI,
    "cdi+pre": RateKind.CDI_PLUS,
    "cdi+": RateKind.CDI_PLUS,
    "ipca+pre": RateKind.IPCA_PLUS,
    "ipca+": RateKind.IPCA_PLUS,
}


class CouponFrequency(Enum):
    """Coupon frequency; the value is the number of months between payments."""
    NONE = 0
    MONTHLY = 1
    BIMONTHLY = 2
    QUARTERLY = 3
    SEMIANNUAL = 6
    ANNUAL = 12

    @property
    def months(self) -> int:
        return self.value


FREQUENCY_ALIASES = {
    "nenhum": CouponFrequency.NONE,
    "mensal": CouponFrequency.MONTHLY,
    "bimestral": CouponFrequency.BIMONTHLY,
    "trimestral": CouponFrequency.QUARTERLY,
    "semestral": CouponFrequency.SEMIANNUAL,
    "anual": CouponFrequency.ANNUAL,
}


class TaxRegime(str, Enum):
    EXEMPT = "isento"
    FLAT = "fixo"
    REGRESSIVE = "renda-fixa"


TAX_REGIME_ALIASES = {
    "fixo-15": TaxRegime.FLAT,
    "flat": TaxRegime.FLAT,
    "regressive": TaxRegime.REGRESSIVE,
    "exempt": TaxRegime.EXEMPT,
}


class ComparisonMode(str, Enum):
    NATURAL = "natural"
    BRIDGE = "bridge"
    TRUNCATE = "truncate"


class DayCount(str, Enum):
    ACT_365 = "ACT/365"
    BUS_252 = "BUS/252"


class Capitalization(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class AssetConfig:
    name: str
    category: AssetCategory
    rate_kind: RateKind
    rate: float
    maturity: date
    principal: float
    frequency: CouponFrequency = CouponFrequency.NONE
    tax_regime: TaxRegime = TaxRegime.REGRESSIVE
    flat_tax_rate: Optional[float] = None
    earnings_start_date: Optional[date] = None
    coupon_months: Optional[Tuple[int, ...]] = None
    anchor_day: Optional[int] = None
    investment_date: Optional[date] = None
    ticker: str = ""
    acquisition_cost: Optional[float] = None
    sale_value: Optional[float] = None
    coupons_received: float = 0.0


def rate_for_year(series: Mapping[int, float], year: int) -> float:
    """Annual rate for *year* from a year -> percent mapping.

    Years after the last listed one reuse its rate (terminal regime); years
    before the first listed one use the first. An empty mapping gives 0.
    """
    if year in series:
        return float(series[year])
    if not series:
        return 0.0
    earlier = [y for y in series if y < year]
    return float(series[max(earlier) if earlier else min(series)])


@dataclass(frozen=True)
class MacroProjection:
    """Annual projections (percent) for the reference rate and the inflation index."""
    reference: Mapping[int, float]
    inflation: Mapping[int, float] = field(default_factory=dict)
    source: str = "custom"
    description: str = ""

    @property
    def years(self) -> Tuple[int, ...]:
        return tuple(sorted(set(self.reference) | set(self.inflation)))

    def reference_for(self, year: int) -> float:
        return rate_for_year(self.reference, year)

    def inflation_for(self, year: int) -> float:
        return rate_for_year(self.inflation, year)


@dataclass(frozen=True)
class CurvePoint:
    month: date          # first day of the calendar month
    annual_pct: float    # annual rate in percent
    monthly_rate: float  # (1 + annual)^(1/12) - 1, decimal


@dataclass(frozen=True)
class MonthlyCurve:
    points: Tuple[CurvePoint, ...]

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[CurvePoint]:
        return iter(self.points)

    @property
    def start(self) -> date:
        return self.points[0].month

    @property
    def end(self) -> date:
        return self.points[-1].month

    def index_for(self, d: date) -> int:
        """Curve index of the month containing *d*, clamped to the curve range."""
        if not self.points:
            raise ValueError("MonthlyCurve is empty")
        offset = (d.year - self.start.year) * 12 + (d.month - self.start.month)
        return min(max(offset, 0), len(self.points) - 1)

    def point_for(self, d: date) -> CurvePoint:
        return self.points[self.index_for(d)]

    def annual_pct_for(self, d: date) -> float:
        return self.point_for(d).annual_pct


@dataclass(frozen=True)
class MacroCurves:
    reference: MonthlyCurve
    inflation: MonthlyCurve


@dataclass(frozen=True)
class CalculationRules:
    convention: DayCount
    granularity: Capitalization


@dataclass(frozen=True)
class PreparedAsset:
    """An asset with its calendar and day-count rules resolved once."""
    asset: AssetConfig
    key: str
    rules: CalculationRules
    anchor_day: int
    accrual_start: date
    investment_date: date
    flat_tax_rate: float


@dataclass(frozen=True)
class CouponEvent:
    payment_date: date
    accrual_start: date
    accrual_end: date
    period_rate: float
    gross: float
    holding_days: int
    tax_rate: float
    tax: float
    net: float
    reinvest_factor: float
    reinvested: float


@dataclass(frozen=True)
class PrincipalOutcome:
    gross: float
    gain: float
    tax_rate: float
    tax: float
    net: float
    capitalized: bool
    capitalized_from: Optional[date] = None
    capitalized_to: Optional[date] = None
    period_rate: float = 0.0


@dataclass(frozen=True)
class ProjectionResult:
    key: str
    asset: AssetConfig
    start_date: date
    horizon: date
    truncated: bool
    checkpoints: Tuple[date, ...]
    values: Tuple[float, ...]
    coupons: Tuple[CouponEvent, ...]
    principal: PrincipalOutcome
    total_tax: float
    final_value: float

    @property
    def coupon_tax(self) -> float:
        return sum(c.tax for c in self.coupons)

    @property
    def gross_coupons(self) -> float:
        return sum(c.gross for c in self.coupons)

    @property
    def net_coupons(self) -> float:
        return sum(c.net for c in self.coupons)

    @property
    def reinvested_coupons(self) -> float:
        return sum(c.reinvested for c in self.coupons)


@dataclass(frozen=True)
class ReinvestmentRecord:
    source_key: str
    source_name: str
    start_date: date
    end_date: date
    window_days: int
    business_days: int
    rate_pct: float
    redeemed_value: float
    gross_value: float
    gain: float
    tax_rate: float
    tax: float
    net_value: float


@dataclass(frozen=True)
class SaleResult:
    acquisition_cost: float
    sale_value: float
    coupons_received: float
    result: float
    result_pct: float


@dataclass(frozen=True)
class ComparisonResult:
    mode: ComparisonMode
    valuation_date: date
    horizon: date
    asset_a: ProjectionResult
    asset_b: ProjectionResult
    checkpoints: Tuple[date, ...]
    values_a: Tuple[float, ...]
    values_b: Tuple[float, ...]
    tax_a: float
    tax_b: float
    fingerprint: str
    reinvestment: Optional[ReinvestmentRecord] = None
    sale: Optional[SaleResult] = None

    @property
    def final_a(self) -> float:
        return self.values_a[-1]

    @property
    def final_b(self) -> float:
        return self.values_b[-1]

    @property
    def difference(self) -> float:
        """Final value of A minus final value of B at the common horizon."""
        return self.final_a - self.final_b

    @property
    def winner(self) -> Optional[str]:
        if self.final_a > self.final_b:
            return self.asset_a.key
        if self.final_b > self.final_a:
            return self.asset_b.key
        return None

    def to_record(self) -> Dict[str, object]:
        """Flatten the comparison into a single mapping of scalars."""
        record: Dict[str, object] = {
            "mode": self.mode.value,
            "valuation_date": self.valuation_date.isoformat(),
            "horizon": self.horizon.isoformat(),
            "years": len(self.checkpoints) - 1,
            "winner": self.winner,
            "difference": self.difference,
            "fingerprint": self.fingerprint,
        }
        for prefix, projection, values, tax in (
            ("asset_a", self.asset_a, self.values_a, self.tax_a),
            ("asset_b", self.asset_b, self.values_b, self.tax_b),
        ):
            record[f"{prefix}_key"] = projection.key
            record[f"{prefix}_name"] = projection.asset.name
            record[f"{prefix}_category"] = projection.asset.category.value
            record[f"{prefix}_maturity"] = projection.asset.maturity.isoformat()
            record[f"{prefix}_truncated"] = projection.truncated
            record[f"{prefix}_coupon_count"] = len(projection.coupons)
            record[f"{prefix}_gross_coupons"] = projection.gross_coupons
            record[f"{prefix}_net_coupons"] = projection.net_coupons
            record[f"{prefix}_principal_net"] = projection.principal.net
            record[f"{prefix}_total_tax"] = tax
            record[f"{prefix}_final_value"] = values[-1]
            for year, value in enumerate(values):
                record[f"{prefix}_value_y{year}"] = value

        reinvestment = self.reinvestment
        record["reinvestment_source"] = reinvestment.source_key if reinvestment else None
        record["reinvestment_start"] = reinvestment.start_date.isoformat() if reinvestment else None
        record["reinvestment_end"] = reinvestment.end_date.isoformat() if reinvestment else None
        record["reinvestment_days"] = reinvestment.window_days if reinvestment else None
        record["reinvestment_rate_pct"] = reinvestment.rate_pct if reinvestment else None
        record["reinvestment_redeemed"] = reinvestment.redeemed_value if reinvestment else None
        record["reinvestment_gross"] = reinvestment.gross_value if reinvestment else None
        record["reinvestment_tax"] = reinvestment.tax if reinvestment else None
        record["reinvestment_net"] = reinvestment.net_value if reinvestment else None

        if self.sale is not None:
            record["sale_result"] = self.sale.result
            record["sale_result_pct"] = self.sale.result_pct
        return record
