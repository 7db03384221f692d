"""
Data quality assessment.

Scores how complete and internally consistent the inputs to an analysis
are, independent of the risk zone itself. Ten checks, one point each:

    revenue > 0, net income != 0, EBIT > 0, total assets > 0, equity > 0,
    current assets > 0, price > 0, market cap > 0,
    current assets <= total assets,
    total assets ~= total liabilities + equity (within 1% of total assets)
"""

from dataclasses import dataclass, field
from typing import Any

from riskscope.core.data.models import FinancialStatementSet, MarketSnapshot
from riskscope.core.scoring.constants import (
    BALANCE_SHEET_TOLERANCE,
    DATA_QUALITY_CHECKS,
    DATA_QUALITY_HIGH_MIN,
    DATA_QUALITY_MEDIUM_MIN,
)

UNRELIABLE_ISSUE = "Insufficient financial data for reliable analysis"
UNBALANCED_ISSUE = "Balance sheet does not balance"


@dataclass(frozen=True)
class DataQualityAssessment:
    score: int
    tier: str  # "High", "Medium", "Low"
    issues: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    recommendation: str = ""

    @property
    def unreliable(self) -> bool:
        """Results may be unreliable at the Low tier."""
        return self.tier == "Low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "tier": self.tier,
            "unreliable": self.unreliable,
            "issues": list(self.issues),
            "missing_fields": list(self.missing_fields),
            "recommendation": self.recommendation,
        }


def balance_sheet_balances(statements: FinancialStatementSet) -> bool:
    """Check total assets against liabilities + equity, 1% relative tolerance."""
    total_assets = statements.total_assets
    if total_assets <= 0:
        return False
    difference = abs(total_assets - (statements.total_liabilities + statements.shareholder_equity))
    return difference <= abs(total_assets) * BALANCE_SHEET_TOLERANCE


def assess_data_quality(statements: FinancialStatementSet, market: MarketSnapshot) -> DataQualityAssessment:
    """Score the completeness and consistency of one company's inputs."""
    presence = {
        "revenue": statements.revenue > 0,
        "net_income": statements.net_income != 0,
        "ebit": statements.ebit > 0,
        "total_assets": statements.total_assets > 0,
        "shareholder_equity": statements.shareholder_equity > 0,
        "current_assets": statements.current_assets > 0,
        "price": market.price > 0,
        "market_cap": market.market_cap > 0,
    }
    missing = [name for name, ok in presence.items() if not ok]
    points = len(presence) - len(missing)
    issues: list[str] = []

    if statements.current_assets <= statements.total_assets:
        points += 1
    else:
        issues.append("Current assets exceed total assets")

    if balance_sheet_balances(statements):
        points += 1
    else:
        issues.append(UNBALANCED_ISSUE)

    score = round(points / DATA_QUALITY_CHECKS * 100)
    if score >= DATA_QUALITY_HIGH_MIN:
        tier = "High"
    elif score >= DATA_QUALITY_MEDIUM_MIN:
        tier = "Medium"
    else:
        tier = "Low"
        issues.append(UNRELIABLE_ISSUE)

    if missing:
        issues.append(f"Missing or non-positive: {', '.join(missing)}")

    return DataQualityAssessment(
        score=score,
        tier=tier,
        issues=issues,
        missing_fields=missing,
        recommendation=(
            "Results may be unreliable due to insufficient data"
            if tier == "Low"
            else "Data quality is sufficient for analysis"
        ),
    )
