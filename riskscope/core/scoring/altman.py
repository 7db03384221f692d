"""
Altman Z-Score Calculator.

The Altman Z-Score is a formula for predicting bankruptcy risk, developed by
Edward Altman in 1968. It combines financial ratios using a weighted formula
to produce a single score indicating the probability of bankruptcy within
two years.

    A = Working Capital / Total Assets (liquidity)
    B = Retained Earnings / Total Assets (cumulative profitability)
    C = EBIT / Total Assets (operating efficiency)
    D = Market Value of Equity / Total Liabilities (solvency/leverage)
    E = Sales / Total Assets (asset turnover)

Formula (Manufacturing - 1968):
    Z = 1.2A + 1.4B + 3.3C + 0.6D + 1.0E

    > 2.99: Safe Zone - Low bankruptcy risk
    1.8 - 2.99: Grey Zone - Uncertain, requires monitoring
    < 1.8: Distress Zone - High bankruptcy risk

Formula (Non-Manufacturing):
    Z = 6.56A + 3.26B + 6.72C + 1.05D

    E is omitted (asset turnover varies too much across service industries).

    > 2.6: Safe Zone
    1.1 - 2.6: Grey Zone
    < 1.1: Distress Zone

Zones are always derived from the unrounded score and the thresholds of the
formula variant that produced it.

Reference: Altman, E. I. (1968). "Financial Ratios, Discriminant Analysis and
the Prediction of Corporate Bankruptcy." Journal of Finance, 23(4), 589-609.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Optional

from riskscope.core.data.exceptions import ComputationError
from riskscope.core.data.models import CompanyType, FinancialStatementSet
from riskscope.core.scoring.constants import (
    ALTMAN_MFG_COEFFICIENTS,
    ALTMAN_NON_MFG_COEFFICIENTS,
    ZERO_LIABILITIES_EQUITY_CAP,
    ZONE_DISTRESS,
    ZONE_GREY,
    ZONE_SAFE,
    ZONE_UNKNOWN,
    ZSCORE_MFG_GREY_LOW,
    ZSCORE_MFG_SAFE,
    ZSCORE_NON_MFG_GREY_LOW,
    ZSCORE_NON_MFG_SAFE,
)

logger = logging.getLogger(__name__)

INTERPRETATIONS = {
    ZONE_SAFE: "Safe Zone - Low bankruptcy risk",
    ZONE_GREY: "Grey Zone - Moderate bankruptcy risk, requires monitoring",
    ZONE_DISTRESS: "Distress Zone - High bankruptcy risk",
}


@dataclass(frozen=True)
class AltmanComponents:
    """Raw ratios A-E and their weighted contributions to Z."""

    a_working_capital_to_assets: float = 0.0
    b_retained_earnings_to_assets: float = 0.0
    c_ebit_to_assets: float = 0.0
    d_market_value_to_liabilities: float = 0.0
    e_sales_to_assets: float = 0.0

    a_contribution: float = 0.0
    b_contribution: float = 0.0
    c_contribution: float = 0.0
    d_contribution: float = 0.0
    e_contribution: Optional[float] = None  # None for non-manufacturing

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DistressScore:
    """
    Altman Z-Score result.

    When the score cannot be computed (zero total assets) z_score is None,
    risk_zone is "Unknown", and error explains why.
    """

    z_score: Optional[float]
    risk_zone: str
    formula_variant: str
    interpretation: str
    confidence: str
    components: Optional[AltmanComponents] = None
    error: Optional[str] = None

    @property
    def is_safe(self) -> bool:
        return self.risk_zone == ZONE_SAFE

    @property
    def is_distressed(self) -> bool:
        return self.risk_zone == ZONE_DISTRESS

    @property
    def is_unknown(self) -> bool:
        return self.risk_zone == ZONE_UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "z_score": round(self.z_score, 2) if self.z_score is not None else None,
            "risk_zone": self.risk_zone,
            "formula_variant": self.formula_variant,
            "interpretation": self.interpretation,
            "confidence": self.confidence,
            "components": self.components.to_dict() if self.components else {},
            "error": self.error,
        }


def determine_zone(z_score: float, company_type: CompanyType) -> str:
    """
    Determine the bankruptcy risk zone for a Z-Score.

    Args:
        z_score: Unrounded Z-Score
        company_type: Formula variant whose thresholds apply

    Returns:
        "Safe", "Grey", or "Distress"
    """
    if company_type == CompanyType.MANUFACTURING:
        safe, grey_low = ZSCORE_MFG_SAFE, ZSCORE_MFG_GREY_LOW
    else:
        safe, grey_low = ZSCORE_NON_MFG_SAFE, ZSCORE_NON_MFG_GREY_LOW

    if z_score > safe:
        return ZONE_SAFE
    elif z_score >= grey_low:
        return ZONE_GREY
    else:
        return ZONE_DISTRESS


def confidence_level(statements: FinancialStatementSet, market_cap: float) -> str:
    """
    Confidence tier for a Z-Score.

    High needs complete financials plus key metrics, Medium complete
    financials only, Low anything less.
    """
    has_complete_financials = (
        statements.total_assets > 0
        and statements.total_liabilities > 0
        and statements.revenue > 0
        and market_cap > 0
    )
    has_key_metrics = (
        statements.retained_earnings != 0
        and statements.ebit > 0
        and statements.working_capital != 0
    )

    if has_complete_financials and has_key_metrics:
        return "High"
    elif has_complete_financials:
        return "Medium"
    return "Low"


class AltmanScorer:
    """
    Calculator for the Altman Z-Score bankruptcy prediction.

    Usage:
        scorer = AltmanScorer()
        score = scorer.calculate(statements, market_cap, CompanyType.MANUFACTURING)
        print(f"Z-Score: {score.z_score:.2f} - {score.risk_zone}")
    """

    def calculate(
        self,
        statements: FinancialStatementSet,
        market_cap: float,
        company_type: CompanyType,
        strict: bool = False,
    ) -> DistressScore:
        """
        Calculate the Altman Z-Score.

        Zero total assets produces an "Unknown" result carrying the reason.

        Raises:
            ComputationError: If strict is set and the score cannot be computed
        """
        is_manufacturing = company_type == CompanyType.MANUFACTURING
        variant = company_type.value
        total_assets = statements.total_assets

        if not total_assets or total_assets <= 0 or not math.isfinite(total_assets):
            reason = "Total assets is zero or missing; Z-Score ratios cannot be computed"
            if strict:
                raise ComputationError(reason)
            logger.warning(f"Z-Score not computed: {reason}")
            return DistressScore(
                z_score=None,
                risk_zone=ZONE_UNKNOWN,
                formula_variant=variant,
                interpretation=f"Unable to calculate Z-Score: {reason}",
                confidence="Low",
                error=reason,
            )

        coefficients = ALTMAN_MFG_COEFFICIENTS if is_manufacturing else ALTMAN_NON_MFG_COEFFICIENTS

        a = statements.working_capital / total_assets
        b = statements.retained_earnings / total_assets
        c = statements.ebit / total_assets
        d = self._calc_market_value_to_liabilities(market_cap, statements.total_liabilities)
        e = statements.revenue / total_assets

        a_contrib = coefficients["a"] * a
        b_contrib = coefficients["b"] * b
        c_contrib = coefficients["c"] * c
        d_contrib = coefficients["d"] * d
        e_contrib = coefficients["e"] * e if is_manufacturing else None

        z_score = a_contrib + b_contrib + c_contrib + d_contrib + (e_contrib or 0.0)
        zone = determine_zone(z_score, company_type)

        logger.info(f"Z-Score calculated: {z_score:.2f} ({zone}) using {variant} formula")

        return DistressScore(
            z_score=z_score,
            risk_zone=zone,
            formula_variant=variant,
            interpretation=INTERPRETATIONS[zone],
            confidence=confidence_level(statements, market_cap),
            components=AltmanComponents(
                a_working_capital_to_assets=a,
                b_retained_earnings_to_assets=b,
                c_ebit_to_assets=c,
                d_market_value_to_liabilities=d,
                e_sales_to_assets=e,
                a_contribution=a_contrib,
                b_contribution=b_contrib,
                c_contribution=c_contrib,
                d_contribution=d_contrib,
                e_contribution=e_contrib,
            ),
        )

    def _calc_market_value_to_liabilities(self, market_cap: float, total_liabilities: float) -> float:
        """
        Calculate D: Market Value of Equity / Total Liabilities.

        Zero liabilities with a positive market value is capped at
        ZERO_LIABILITIES_EQUITY_CAP instead of dividing by zero.
        """
        if total_liabilities <= 0:
            if market_cap > 0:
                logger.info(f"Total liabilities is zero, using maximum equity ratio of {ZERO_LIABILITIES_EQUITY_CAP}")
                return ZERO_LIABILITIES_EQUITY_CAP
            return 0.0
        return market_cap / total_liabilities
