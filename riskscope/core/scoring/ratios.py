"""
Financial ratio engine.

Pure and deterministic: statements + market snapshot + company type in,
ratio bundle + distress score + data quality out. No I/O and no blocking,
so it is safe to call from any worker thread.

Every ratio is a finite float. A zero (or non-positive, where noted)
denominator resolves to 0.0, or to UNBOUNDED_RATIO where the ratio is
meaningfully "very high" rather than undefined.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from riskscope.core.data.models import CompanyType, FinancialStatementSet, MarketSnapshot
from riskscope.core.scoring.altman import AltmanScorer, DistressScore
from riskscope.core.scoring.constants import UNBOUNDED_RATIO
from riskscope.core.scoring.quality import DataQualityAssessment, assess_data_quality

logger = logging.getLogger(__name__)


def finite(value: float) -> float:
    """Map NaN and infinities to 0.0."""
    if value is None or math.isnan(value) or math.isinf(value):
        return 0.0
    return float(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero denominator or a non-finite result."""
    numerator = finite(numerator)
    denominator = finite(denominator)
    if denominator == 0:
        return 0.0
    return finite(numerator / denominator)


def coverage_ratio(numerator: float, denominator: float) -> float:
    """
    Coverage-style ratio that is unbounded when nothing needs covering.

    A zero denominator with a positive numerator is UNBOUNDED_RATIO;
    with a non-positive numerator it is 0.0.
    """
    denominator = abs(finite(denominator))
    if denominator == 0:
        return UNBOUNDED_RATIO if finite(numerator) > 0 else 0.0
    return safe_divide(numerator, denominator)


@dataclass(frozen=True)
class LiquidityRatios:
    current_ratio: float = 0.0
    quick_ratio: float = 0.0
    cash_ratio: float = 0.0
    working_capital_ratio: float = 0.0


@dataclass(frozen=True)
class LeverageRatios:
    debt_to_equity: float = 0.0
    debt_to_assets: float = 0.0
    equity_ratio: float = 0.0
    debt_ratio: float = 0.0
    interest_coverage: float = 0.0


@dataclass(frozen=True)
class ProfitabilityRatios:
    """Margins and returns, in percent."""

    gross_margin: float = 0.0
    operating_margin: float = 0.0
    net_margin: float = 0.0
    return_on_assets: float = 0.0
    return_on_equity: float = 0.0


@dataclass(frozen=True)
class EfficiencyRatios:
    asset_turnover: float = 0.0
    inventory_turnover: float = 0.0
    working_capital_turnover: float = 0.0


@dataclass(frozen=True)
class CashFlowRatios:
    operating_cash_flow_to_sales: float = 0.0
    free_cash_flow_to_sales: float = 0.0
    cash_flow_coverage: float = 0.0
    debt_coverage: float = 0.0


@dataclass(frozen=True)
class MarketRatios:
    shares_outstanding: float = 0.0
    earnings_per_share: float = 0.0
    book_value_per_share: float = 0.0
    price_to_earnings: float = 0.0
    price_to_book: float = 0.0
    price_to_sales: float = 0.0
    market_to_book: float = 0.0


@dataclass(frozen=True)
class RatioBundle:
    """All ratio groups for one company."""

    liquidity: LiquidityRatios = field(default_factory=LiquidityRatios)
    leverage: LeverageRatios = field(default_factory=LeverageRatios)
    profitability: ProfitabilityRatios = field(default_factory=ProfitabilityRatios)
    efficiency: EfficiencyRatios = field(default_factory=EfficiencyRatios)
    cash_flow: CashFlowRatios = field(default_factory=CashFlowRatios)
    market: MarketRatios = field(default_factory=MarketRatios)

    def to_dict(self) -> dict[str, dict[str, float]]:
        """Convert to nested dictionary, values rounded to 2 decimals."""
        return {
            group: {name: round(value, 2) for name, value in ratios.items()}
            for group, ratios in asdict(self).items()
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete analysis for one company.

    Self-sufficient for report and narrative consumers: no raw provider
    payloads are needed alongside it.
    """

    ratios: RatioBundle
    distress_score: DistressScore
    data_quality: DataQualityAssessment
    calculated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "ratios": self.ratios.to_dict(),
            "distress_score": self.distress_score.to_dict(),
            "data_quality": self.data_quality.to_dict(),
            "calculated_at": self.calculated_at,
        }


class RatioEngine:
    """
    Computes ratios, Altman Z-Score, and data quality.

    Usage:
        engine = RatioEngine()
        result = engine.calculate_all(statements, snapshot, CompanyType.MANUFACTURING)
        print(result.ratios.liquidity.current_ratio, result.distress_score.risk_zone)
    """

    def __init__(self, scorer: Optional[AltmanScorer] = None, strict: bool = False):
        self.scorer = scorer or AltmanScorer()
        self.strict = strict

    def calculate_all(
        self,
        statements: FinancialStatementSet,
        market: MarketSnapshot,
        company_type: CompanyType,
    ) -> AnalysisResult:
        """
        Compute the full analysis for one company.

        Raises:
            ComputationError: In strict mode, when the Z-Score cannot be computed
        """
        ratios = RatioBundle(
            liquidity=self.liquidity(statements),
            leverage=self.leverage(statements),
            profitability=self.profitability(statements),
            efficiency=self.efficiency(statements),
            cash_flow=self.cash_flow(statements),
            market=self.market(statements, market),
        )
        distress = self.scorer.calculate(statements, finite(market.market_cap), company_type, strict=self.strict)
        quality = assess_data_quality(statements, market)

        return AnalysisResult(ratios=ratios, distress_score=distress, data_quality=quality)

    def liquidity(self, s: FinancialStatementSet) -> LiquidityRatios:
        return LiquidityRatios(
            current_ratio=safe_divide(s.current_assets, s.current_liabilities),
            quick_ratio=safe_divide(s.current_assets - s.inventory, s.current_liabilities),
            cash_ratio=safe_divide(s.cash, s.current_liabilities),
            working_capital_ratio=safe_divide(s.current_assets - s.current_liabilities, s.revenue),
        )

    def leverage(self, s: FinancialStatementSet) -> LeverageRatios:
        """Interest expense is taken by absolute value; providers report it signed."""
        equity = s.shareholder_equity
        return LeverageRatios(
            debt_to_equity=safe_divide(s.total_debt, equity) if equity > 0 else 0.0,
            debt_to_assets=safe_divide(s.total_debt, s.total_assets),
            equity_ratio=safe_divide(equity, s.total_assets),
            debt_ratio=safe_divide(s.total_liabilities, s.total_assets),
            interest_coverage=coverage_ratio(s.ebit, s.interest_expense),
        )

    def profitability(self, s: FinancialStatementSet) -> ProfitabilityRatios:
        equity = s.shareholder_equity
        return ProfitabilityRatios(
            gross_margin=safe_divide(s.gross_profit, s.revenue) * 100,
            operating_margin=safe_divide(s.operating_income, s.revenue) * 100,
            net_margin=safe_divide(s.net_income, s.revenue) * 100,
            return_on_assets=safe_divide(s.net_income, s.total_assets) * 100,
            return_on_equity=safe_divide(s.net_income, equity) * 100 if equity > 0 else 0.0,
        )

    def efficiency(self, s: FinancialStatementSet) -> EfficiencyRatios:
        return EfficiencyRatios(
            asset_turnover=safe_divide(s.revenue, s.total_assets),
            inventory_turnover=safe_divide(s.cost_of_goods_sold, s.inventory),
            working_capital_turnover=safe_divide(s.revenue, s.current_assets - s.current_liabilities),
        )

    def cash_flow(self, s: FinancialStatementSet) -> CashFlowRatios:
        return CashFlowRatios(
            operating_cash_flow_to_sales=safe_divide(s.operating_cash_flow, s.revenue),
            free_cash_flow_to_sales=safe_divide(s.free_cash_flow, s.revenue),
            cash_flow_coverage=safe_divide(s.operating_cash_flow, s.current_liabilities),
            debt_coverage=coverage_ratio(s.operating_cash_flow, s.total_debt),
        )

    def market(self, s: FinancialStatementSet, m: MarketSnapshot) -> MarketRatios:
        """Per-share figures derive shares outstanding from market cap / price."""
        price = finite(m.price)
        market_cap = finite(m.market_cap)
        shares = safe_divide(market_cap, price) if price > 0 else 0.0
        eps = safe_divide(s.net_income, shares)
        bvps = safe_divide(s.shareholder_equity, shares)

        return MarketRatios(
            shares_outstanding=shares,
            earnings_per_share=eps,
            book_value_per_share=bvps,
            price_to_earnings=safe_divide(price, eps) if eps > 0 else 0.0,
            price_to_book=safe_divide(price, bvps) if bvps > 0 else 0.0,
            price_to_sales=safe_divide(market_cap, s.revenue) if s.revenue > 0 else 0.0,
            market_to_book=safe_divide(market_cap, s.shareholder_equity) if s.shareholder_equity > 0 else 0.0,
        )
