"""In-memory provider adapters for testing without the network."""

from collections import Counter
from typing import Optional

from riskscope.core.data.exceptions import ProviderDataError, ProviderError
from riskscope.core.data.models import (
    FinancialStatementSet,
    MarketSnapshot,
    Overview,
    SearchCandidate,
)
from riskscope.core.data.providers.base import ProviderAdapter


def make_overview(
    ticker: str = "AAPL",
    name: str = "Apple Inc.",
    sector: str = "Technology",
    industry: str = "Consumer Electronics",
    market_cap: float = 3_000_000_000_000,
    exchange: str = "NASDAQ",
    source: str = "fake",
) -> Overview:
    """Create an Overview with Apple-like defaults."""
    return Overview(
        ticker=ticker,
        name=name,
        sector=sector,
        industry=industry,
        market_cap=market_cap,
        exchange=exchange,
        source=source,
    )


def make_statements(**overrides) -> FinancialStatementSet:
    """
    Create a balanced, healthy statement set.

    Defaults:
        Z (non-manufacturing) = 6.56*0.2 + 3.26*0.5 + 6.72*0.15 + 1.05*(500/45)
    """
    values = dict(
        period_end="2023-12-31",
        revenue=100_000_000,
        gross_profit=45_000_000,
        operating_income=24_000_000,
        net_income=15_000_000,
        ebit=25_000_000,
        ebitda=30_000_000,
        interest_expense=2_500_000,
        total_assets=180_000_000,
        current_assets=60_000_000,
        current_liabilities=24_000_000,
        total_liabilities=45_000_000,
        shareholder_equity=135_000_000,
        retained_earnings=90_000_000,
        working_capital=36_000_000,
        long_term_debt=15_000_000,
        short_term_debt=5_000_000,
        cash=20_000_000,
        inventory=10_000_000,
        operating_cash_flow=20_000_000,
        capital_expenditures=5_000_000,
        free_cash_flow=15_000_000,
        source="fake",
    )
    values.update(overrides)
    return FinancialStatementSet(**values)


def make_snapshot(**overrides) -> MarketSnapshot:
    """Create a MarketSnapshot with a $50 price and $500M market cap."""
    values = dict(
        price=50.0,
        previous_close=49.0,
        change=1.0,
        change_percent=2.0408,
        market_cap=500_000_000,
        volume=1_000_000,
        fifty_two_week_high=60.0,
        fifty_two_week_low=40.0,
        source="fake",
    )
    values.update(overrides)
    return MarketSnapshot(**values)


class FakeProvider(ProviderAdapter):
    """
    Provider backed by dictionaries.

    Every call consumes one quota unit, so quota exhaustion and fallback
    behave as they do for real adapters. Calls are counted per operation.

    Args:
        name: Provider name
        overviews: Ticker -> Overview
        statements: Ticker -> FinancialStatementSet
        prices: Ticker -> MarketSnapshot
        searches: Lower-cased text -> candidates
        errors: Operation name -> exception raised on every call
    """

    requires_api_key = False

    def __init__(
        self,
        name: str = "fake",
        overviews: Optional[dict[str, Overview]] = None,
        statements: Optional[dict[str, FinancialStatementSet]] = None,
        prices: Optional[dict[str, MarketSnapshot]] = None,
        searches: Optional[dict[str, list[SearchCandidate]]] = None,
        errors: Optional[dict[str, Exception]] = None,
        daily_limit: int = 1000,
    ):
        super().__init__(daily_limit=daily_limit, light_timeout=1, heavy_timeout=1)
        self.name = name
        self.overviews = overviews or {}
        self.statements = statements or {}
        self.prices = prices or {}
        self.searches = searches or {}
        self.errors = errors or {}
        self.calls: Counter = Counter()

    def _call(self, operation: str) -> None:
        self.calls[operation] += 1
        self._reserve()
        if operation in self.errors:
            raise self.errors[operation]

    def search_candidates(self, text: str) -> list[SearchCandidate]:
        self._call("search")
        return list(self.searches.get(text.strip().lower(), []))

    def get_overview(self, ticker: str) -> Overview:
        self._call("overview")
        if ticker not in self.overviews:
            raise ProviderDataError(self.name, f"no profile for {ticker}")
        return self.overviews[ticker]

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        self._call("statements")
        if ticker not in self.statements:
            raise ProviderDataError(self.name, f"no statements for {ticker}")
        return self.statements[ticker]

    def get_price(self, ticker: str) -> MarketSnapshot:
        self._call("price")
        if ticker not in self.prices:
            raise ProviderError(self.name, f"no quote for {ticker}")
        return self.prices[ticker]
