"""
Portfolio-level aggregation of per-company results.

The summary is computed over successful items only. Failed items never
count toward totals, averages, or the risk distribution.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from riskscope.core.data.models import CompanyIdentity
from riskscope.core.scoring.constants import (
    PORTFOLIO_HIGH_DISTRESS_PCT,
    PORTFOLIO_MEDIUM_DISTRESS_PCT,
    PORTFOLIO_MEDIUM_GREY_PCT,
    RECOMMEND_DISTRESS_PCT,
    RECOMMEND_GREY_PCT,
    RECOMMEND_SAFE_PCT,
    RISK_ZONES,
    ZONE_DISTRESS,
    ZONE_GREY,
    ZONE_SAFE,
)
from riskscope.core.scoring.ratios import AnalysisResult


@dataclass
class CompanyResult:
    """Outcome of analyzing one batch input: success with analysis, or failure with reason."""

    input: str
    success: bool
    company: Optional[CompanyIdentity] = None
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def risk_zone(self) -> Optional[str]:
        if self.analysis is None:
            return None
        return self.analysis.distress_score.risk_zone

    @property
    def z_score(self) -> Optional[float]:
        if self.analysis is None:
            return None
        return self.analysis.distress_score.z_score

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary; absent parts are omitted."""
        data: dict[str, Any] = {"input": self.input, "success": self.success}
        if self.company is not None:
            data["company"] = self.company.to_dict()
        if self.analysis is not None:
            data["ratios"] = self.analysis.ratios.to_dict()
            data["distress_score"] = self.analysis.distress_score.to_dict()
            data["data_quality"] = self.analysis.data_quality.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class PortfolioSummary:
    total_count: int
    average_z_score: Optional[float]
    risk_distribution: dict[str, dict[str, float]]
    portfolio_risk: str
    recommendations: list[str] = field(default_factory=list)

    def zone_count(self, zone: str) -> int:
        return int(self.risk_distribution.get(zone, {}).get("count", 0))

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_count": self.total_count,
            "average_z_score": self.average_z_score,
            "risk_distribution": self.risk_distribution,
            "portfolio_risk": self.portfolio_risk,
            "recommendations": list(self.recommendations),
        }


def assess_portfolio_risk(distress_pct: float, grey_pct: float) -> str:
    """
    Overall portfolio risk tier.

    High if more than 25% is in Distress; Medium if more than 10% is in
    Distress or more than 50% in Grey; Low otherwise.
    """
    if distress_pct > PORTFOLIO_HIGH_DISTRESS_PCT:
        return "High"
    elif distress_pct > PORTFOLIO_MEDIUM_DISTRESS_PCT or grey_pct > PORTFOLIO_MEDIUM_GREY_PCT:
        return "Medium"
    return "Low"


def portfolio_recommendations(distress_pct: float, safe_pct: float, grey_pct: float) -> list[str]:
    recommendations = []
    if distress_pct > RECOMMEND_DISTRESS_PCT:
        recommendations.append("Consider reducing exposure to high-risk companies in the Distress Zone")
    if safe_pct > RECOMMEND_SAFE_PCT:
        recommendations.append("Portfolio shows strong financial stability across holdings")
    if grey_pct > RECOMMEND_GREY_PCT:
        recommendations.append("Monitor companies in Grey Zone for potential risk escalation")
    return recommendations


def summarize_portfolio(results: list[CompanyResult]) -> PortfolioSummary:
    """
    Aggregate successful results into a portfolio summary.

    average_z_score covers successes with a numeric Z-Score (rounded to
    2 decimals) and is None when there are none. Percentages are whole
    numbers; the risk tier uses unrounded shares.
    """
    successes = [r for r in results if r.success]
    total = len(successes)

    counts = {zone: 0 for zone in RISK_ZONES}
    for result in successes:
        counts[result.risk_zone or "Unknown"] += 1

    z_scores = [r.z_score for r in successes if r.z_score is not None]
    average_z = round(sum(z_scores) / len(z_scores), 2) if z_scores else None

    def share(zone: str) -> float:
        return counts[zone] / total * 100 if total else 0.0

    distribution = {
        zone: {"count": counts[zone], "percentage": round(share(zone))}
        for zone in RISK_ZONES
    }

    distress_pct, grey_pct, safe_pct = share(ZONE_DISTRESS), share(ZONE_GREY), share(ZONE_SAFE)

    return PortfolioSummary(
        total_count=total,
        average_z_score=average_z,
        risk_distribution=distribution,
        portfolio_risk=assess_portfolio_risk(distress_pct, grey_pct),
        recommendations=portfolio_recommendations(distress_pct, safe_pct, grey_pct),
    )
