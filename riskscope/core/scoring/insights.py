"""
Rule-based observations on a ratio bundle and distress score.

Consumed by report and narrative callers that need short, typed findings
rather than raw numbers.
"""

from dataclasses import asdict, dataclass
from typing import Any

from riskscope.core.scoring.altman import DistressScore
from riskscope.core.scoring.constants import (
    INSIGHT_CURRENT_RATIO_HIGH,
    INSIGHT_CURRENT_RATIO_LOW,
    INSIGHT_DEBT_TO_EQUITY_HIGH,
    INSIGHT_INTEREST_COVERAGE_LOW,
    INSIGHT_ROE_STRONG,
)
from riskscope.core.scoring.ratios import RatioBundle


@dataclass(frozen=True)
class Insight:
    type: str  # "warning", "info", "danger", "positive"
    category: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def generate_ratio_insights(ratios: RatioBundle, distress: DistressScore) -> list[Insight]:
    """Generate insights in a stable order: liquidity, leverage, profitability, distress."""
    insights: list[Insight] = []

    current = ratios.liquidity.current_ratio
    if current < INSIGHT_CURRENT_RATIO_LOW:
        insights.append(Insight(
            "warning", "liquidity",
            f"Low current ratio ({current:.2f}) indicates potential liquidity issues",
        ))
    elif current > INSIGHT_CURRENT_RATIO_HIGH:
        insights.append(Insight(
            "info", "liquidity",
            f"High current ratio ({current:.2f}) suggests excess cash or inefficient asset use",
        ))

    debt_to_equity = ratios.leverage.debt_to_equity
    if debt_to_equity > INSIGHT_DEBT_TO_EQUITY_HIGH:
        insights.append(Insight(
            "warning", "leverage",
            f"High debt-to-equity ratio ({debt_to_equity:.2f}) indicates high financial leverage",
        ))

    coverage = ratios.leverage.interest_coverage
    if coverage < INSIGHT_INTEREST_COVERAGE_LOW:
        insights.append(Insight(
            "warning", "leverage",
            f"Low interest coverage ({coverage:.1f}x) may indicate difficulty servicing debt",
        ))

    net_margin = ratios.profitability.net_margin
    if net_margin < 0:
        insights.append(Insight(
            "danger", "profitability",
            f"Negative net margin ({net_margin:.1f}%) indicates unprofitability",
        ))

    roe = ratios.profitability.return_on_equity
    if roe > INSIGHT_ROE_STRONG:
        insights.append(Insight(
            "positive", "profitability",
            f"Strong ROE ({roe:.1f}%) demonstrates efficient use of shareholder equity",
        ))

    if distress.is_distressed:
        insights.append(Insight(
            "danger", "distress",
            f"Altman Z-Score of {distress.z_score:.2f} indicates high bankruptcy risk",
        ))
    elif distress.is_safe:
        insights.append(Insight(
            "positive", "distress",
            f"Altman Z-Score of {distress.z_score:.2f} indicates low bankruptcy risk",
        ))

    return insights
