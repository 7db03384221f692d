"""
Batch orchestration.

Runs the full pipeline (resolve -> parallel statements/price fetch ->
ratio engine) for up to MAX_BATCH inputs. Inputs are processed in groups
with a bounded worker pool; groups run one after another with a pause in
between to stay within provider rate limits. A failing item is recorded
with its reason and never aborts its group or the batch. Results are
reported in input order regardless of completion order.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Sequence

from riskscope.config import Config, config
from riskscope.core.data.cache import TTLCache, get_cache
from riskscope.core.data.exceptions import (
    AllProvidersFailedError,
    BatchTotalFailure,
    ResolutionError,
    RiskscopeError,
)
from riskscope.core.data.market_data import FinancialDataService
from riskscope.core.data.models import CompanyIdentity, MarketSnapshot
from riskscope.core.data.providers import build_default_providers
from riskscope.core.data.providers.base import build_identity
from riskscope.core.data.resolver import Resolver
from riskscope.core.batch.portfolio import CompanyResult, PortfolioSummary, summarize_portfolio
from riskscope.core.scoring.ratios import AnalysisResult, RatioEngine

logger = logging.getLogger(__name__)


def with_market_cap(price: MarketSnapshot, identity: CompanyIdentity) -> MarketSnapshot:
    """
    Fill a missing quote market cap from the resolved company profile.

    Quote endpoints such as Alpha Vantage GLOBAL_QUOTE and Finnhub quote
    carry no market cap, which would otherwise zero the market-value term.
    """
    if price.market_cap > 0 or identity.market_cap <= 0:
        return price
    logger.info(
        f"{identity.ticker}: quote from {price.source or 'unknown'} has no market cap, "
        f"using profile value {identity.market_cap:,.0f}"
    )
    return replace(price, market_cap=identity.market_cap)


class CompanyAnalyzer:
    """
    Single-company pipeline.

    Usage:
        analyzer = CompanyAnalyzer(resolver, data_service)
        result = analyzer.analyze_company("apple")
        analysis = analyzer.get_single_company_ratios("MSFT")
    """

    def __init__(
        self,
        resolver: Resolver,
        data_service: FinancialDataService,
        engine: Optional[RatioEngine] = None,
    ):
        self.resolver = resolver
        self.data_service = data_service
        self.engine = engine or RatioEngine()

    def close(self) -> None:
        """Release provider sessions and worker pools."""
        for provider in self.data_service.providers:
            provider.close()

    def analyze_company(self, text: str) -> CompanyResult:
        """
        Analyze one free-text input.

        Never raises: every failure is returned as an unsuccessful
        CompanyResult carrying a human-readable reason.
        """
        try:
            identity = self.resolver.resolve(text)
            statements, price = self.data_service.get_statements_and_price(identity.ticker)
            price = with_market_cap(price, identity)
            analysis = self.engine.calculate_all(statements, price, identity.company_type)
        except RiskscopeError as e:
            logger.warning(f"Analysis failed for {text!r}: {e}")
            return CompanyResult(input=text, success=False, error=str(e))
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {text!r}")
            return CompanyResult(input=text, success=False, error=f"Unexpected error: {e}")

        return CompanyResult(input=text, success=True, company=identity, analysis=analysis)

    def get_single_company_ratios(self, ticker: str) -> AnalysisResult:
        """
        Full analysis for a known ticker, bypassing free-text resolution.

        Raises:
            ResolutionError: If no provider knows the ticker
            AllProvidersFailedError: If statements or price are unavailable
        """
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ResolutionError(ticker, "ticker is empty")

        try:
            overview = self.data_service.get_overview(ticker)
        except AllProvidersFailedError as e:
            raise ResolutionError(ticker, "; ".join(e.reasons) or None) from e

        identity = build_identity(ticker, overview)
        statements, price = self.data_service.get_statements_and_price(identity.ticker)
        price = with_market_cap(price, identity)
        return self.engine.calculate_all(statements, price, identity.company_type)


@dataclass
class BatchResult:
    """Per-company results in input order, portfolio summary, and failures."""

    per_company: list[CompanyResult]
    portfolio_summary: PortfolioSummary
    failures: list[dict[str, str]] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """True when some items failed while others succeeded."""
        return bool(self.failures) and len(self.failures) < len(self.per_company)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.per_company if r.success)

    def to_dict(self) -> dict[str, Any]:
        return {
            "per_company": [r.to_dict() for r in self.per_company],
            "portfolio_summary": self.portfolio_summary.to_dict(),
            "failures": list(self.failures),
            "partial": self.partial,
        }


class BatchOrchestrator:
    """
    Analyze many companies with bounded concurrency.

    Args:
        analyzer: Single-company pipeline
        group_size: Items processed concurrently per group
        pause_seconds: Sleep between groups (not after the last)
        max_batch_size: Largest accepted input list
        sleep: Injected for tests
    """

    def __init__(
        self,
        analyzer: CompanyAnalyzer,
        group_size: Optional[int] = None,
        pause_seconds: Optional[float] = None,
        max_batch_size: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.analyzer = analyzer
        self.group_size = group_size or config.batch_group_size
        self.pause_seconds = config.batch_pause_seconds if pause_seconds is None else pause_seconds
        self.max_batch_size = max_batch_size or config.max_batch_size
        self._sleep = sleep

    def close(self) -> None:
        self.analyzer.close()

    def analyze_batch(self, inputs: Sequence[str]) -> BatchResult:
        """
        Analyze every input.

        Raises:
            ValueError: If inputs is empty or longer than max_batch_size
            BatchTotalFailure: If no item succeeded
        """
        inputs = list(inputs)
        if not inputs:
            raise ValueError("At least one company is required")
        if len(inputs) > self.max_batch_size:
            raise ValueError(f"Maximum {self.max_batch_size} companies per batch, got {len(inputs)}")

        groups = [inputs[i:i + self.group_size] for i in range(0, len(inputs), self.group_size)]
        results: list[CompanyResult] = []

        for index, group in enumerate(groups, start=1):
            logger.info(f"Processing group {index}/{len(groups)}: {', '.join(group)}")
            results.extend(self._run_group(group))
            if index < len(groups) and self.pause_seconds > 0:
                self._sleep(self.pause_seconds)

        failures = [{"input": r.input, "reason": r.error or "Unknown error"} for r in results if not r.success]
        if len(failures) == len(results):
            logger.error(f"Batch failed: none of {len(results)} companies could be analyzed")
            raise BatchTotalFailure(failures)

        summary = summarize_portfolio(results)
        logger.info(
            f"Batch complete: {summary.total_count}/{len(results)} succeeded, "
            f"portfolio risk {summary.portfolio_risk}"
        )
        return BatchResult(per_company=results, portfolio_summary=summary, failures=failures)

    def _run_group(self, group: list[str]) -> list[CompanyResult]:
        """Run one group concurrently; results keep the group's order."""
        with ThreadPoolExecutor(max_workers=len(group), thread_name_prefix="batch") as executor:
            futures = [executor.submit(self._analyze_item, text) for text in group]
            return [future.result() for future in futures]

    def _analyze_item(self, text: str) -> CompanyResult:
        if not isinstance(text, str) or not text.strip():
            return CompanyResult(input=str(text or ""), success=False, error="Company name or ticker is empty")
        return self.analyzer.analyze_company(text)


def build_default_orchestrator(
    cfg: Optional[Config] = None,
    cache: Optional[TTLCache] = None,
    strict: bool = False,
) -> BatchOrchestrator:
    """
    Wire providers, cache, resolver, fetch layer, and engine from configuration.

    With strict set, a company whose Z-Score cannot be computed fails with
    ComputationError instead of scoring "Unknown".
    """
    cfg = cfg if cfg is not None else config
    cache = cache if cache is not None else get_cache()
    providers = build_default_providers(cfg)
    analyzer = CompanyAnalyzer(
        resolver=Resolver(providers, cache),
        data_service=FinancialDataService(providers, cache),
        engine=RatioEngine(strict=strict),
    )
    return BatchOrchestrator(
        analyzer,
        group_size=cfg.batch_group_size,
        pause_seconds=cfg.batch_pause_seconds,
        max_batch_size=cfg.max_batch_size,
    )
