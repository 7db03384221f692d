"""Batch analysis across many companies."""

from riskscope.core.batch.orchestrator import (
    BatchOrchestrator,
    BatchResult,
    CompanyAnalyzer,
    build_default_orchestrator,
)
from riskscope.core.batch.portfolio import (
    CompanyResult,
    PortfolioSummary,
    summarize_portfolio,
)

__all__ = [
    "BatchOrchestrator",
    "BatchResult",
    "CompanyAnalyzer",
    "CompanyResult",
    "PortfolioSummary",
    "build_default_orchestrator",
    "summarize_portfolio",
]
