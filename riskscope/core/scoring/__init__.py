"""Scoring engines for financial analysis."""

from riskscope.core.scoring.altman import (
    AltmanComponents,
    AltmanScorer,
    DistressScore,
    determine_zone,
)
from riskscope.core.scoring.insights import Insight, generate_ratio_insights
from riskscope.core.scoring.quality import DataQualityAssessment, assess_data_quality
from riskscope.core.scoring.ratios import (
    AnalysisResult,
    RatioBundle,
    RatioEngine,
)

__all__ = [
    # Altman Z-Score
    "AltmanComponents",
    "AltmanScorer",
    "DistressScore",
    "determine_zone",
    # Ratios
    "AnalysisResult",
    "RatioBundle",
    "RatioEngine",
    # Data quality
    "DataQualityAssessment",
    "assess_data_quality",
    # Insights
    "Insight",
    "generate_ratio_insights",
]
