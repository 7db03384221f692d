"""
Yahoo Finance adapter via yfinance.

No API key is needed. yfinance performs its own HTTP, so each call runs on a
small worker pool and is abandoned when it exceeds the adapter's timeout.
The timeout starts when a worker picks the call up; time spent queued behind
other calls is bounded separately by the heavy timeout.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional, TypeVar

import pandas as pd
import yfinance as yf

from riskscope.core.data.exceptions import (
    ProviderDataError,
    ProviderError,
    ProviderTimeoutError,
)
from riskscope.core.data.models import (
    FinancialStatementSet,
    MarketSnapshot,
    Overview,
    SearchCandidate,
    normalize_change_percent,
)
from riskscope.core.data.providers.base import ProviderAdapter, to_float

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YahooFinanceAdapter(ProviderAdapter):
    """Adapter for Yahoo Finance (no key, 1000 requests/day self-imposed)."""

    name = "yahoo"
    requires_api_key = False

    def __init__(self, daily_limit: int = 1000, max_workers: int = 4, **kwargs: Any):
        super().__init__(api_key=None, daily_limit=daily_limit, **kwargs)
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="yahoo")

    def close(self) -> None:
        """Stop the worker pool without waiting on abandoned calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        super().close()

    def _run(self, fn: Callable[[], T], timeout: float, units: int = 1) -> T:
        """
        Run a yfinance call with quota and timeout enforcement.

        Raises:
            ProviderTimeoutError: If the call does not finish in time
            ProviderError: If yfinance raises
        """
        self._reserve(units)
        started = threading.Event()

        def call() -> T:
            started.set()
            return fn()

        try:
            future = self._executor.submit(call)
        except RuntimeError as e:
            raise ProviderError(self.name, f"adapter is closed: {e}")
        if not started.wait(timeout=self.heavy_timeout):
            future.cancel()
            logger.warning(f"{self.name} worker pool busy for {self.heavy_timeout}s, giving up")
            raise ProviderTimeoutError(self.name, self.heavy_timeout)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            raise ProviderTimeoutError(self.name, timeout)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.name, f"yfinance error: {e}")

    def _info(self, ticker: str) -> dict[str, Any]:
        info = self._run(lambda: yf.Ticker(ticker).info, self.light_timeout)
        if not info or not isinstance(info, dict):
            raise ProviderDataError(self.name, f"no data found for ticker: {ticker}")
        return info

    def search_candidates(self, text: str) -> list[SearchCandidate]:
        quotes = self._run(lambda: yf.Search(text, max_results=10).quotes, self.light_timeout)
        return [
            SearchCandidate(
                symbol=q["symbol"],
                name=q.get("longname") or q.get("shortname") or q["symbol"],
                exchange=q.get("exchange"),
            )
            for q in quotes or []
            if q.get("symbol") and q.get("quoteType", "EQUITY") == "EQUITY"
        ]

    def get_overview(self, ticker: str) -> Overview:
        info = self._info(ticker)
        if not (info.get("longName") or info.get("shortName")):
            raise ProviderDataError(self.name, f"no profile data found for {ticker}")
        return map_overview(ticker, info)

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        def fetch() -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
            t = yf.Ticker(ticker)
            return t.income_stmt, t.balance_sheet, t.cashflow

        income, balance, cash_flow = self._run(fetch, self.heavy_timeout, units=3)
        if all(df is None or df.empty for df in (income, balance, cash_flow)):
            raise ProviderDataError(self.name, f"no financial statements found for {ticker}")
        return map_statements(income, balance, cash_flow)

    def get_price(self, ticker: str) -> MarketSnapshot:
        info = self._info(ticker)
        if info.get("regularMarketPrice") is None and info.get("currentPrice") is None:
            raise ProviderDataError(self.name, f"no quote found for {ticker}")
        return map_price(info)


def _latest(df: Optional[pd.DataFrame], *labels: str) -> Optional[float]:
    """
    Value of the first matching row label in the most recent column.

    yfinance statements are indexed by line item with one column per
    fiscal period, newest first. Returns None when no label is present.
    """
    if df is None or df.empty:
        return None
    column = df.columns[0]
    for label in labels:
        if label in df.index:
            value = df.at[label, column]
            if pd.notna(value):
                return float(value)
    return None


def _period_end(*frames: Optional[pd.DataFrame]) -> Optional[str]:
    for df in frames:
        if df is not None and not df.empty:
            return str(df.columns[0])[:10]
    return None


def map_overview(ticker: str, info: dict[str, Any]) -> Overview:
    """Normalize a yfinance Ticker.info dict."""
    return Overview(
        ticker=info.get("symbol") or ticker,
        name=info.get("longName") or info.get("shortName") or ticker,
        sector=info.get("sector") or "Unknown",
        industry=info.get("industry") or "Unknown",
        market_cap=to_float(info.get("marketCap")),
        exchange=info.get("exchange"),
        description=info.get("longBusinessSummary") or "",
        source=YahooFinanceAdapter.name,
    )


def map_statements(
    income: Optional[pd.DataFrame],
    balance: Optional[pd.DataFrame],
    cash_flow: Optional[pd.DataFrame],
) -> FinancialStatementSet:
    """Normalize yfinance statement DataFrames."""

    def value(df: Optional[pd.DataFrame], *labels: str) -> float:
        return to_float(_latest(df, *labels))

    operating_income = value(income, "Operating Income")
    ebit = _latest(income, "EBIT")
    current_assets = value(balance, "Current Assets")
    current_liabilities = value(balance, "Current Liabilities")
    operating_cash_flow = value(cash_flow, "Operating Cash Flow")
    capex = abs(value(cash_flow, "Capital Expenditure"))
    free_cash_flow = _latest(cash_flow, "Free Cash Flow")

    return FinancialStatementSet(
        period_end=_period_end(income, balance, cash_flow),
        revenue=value(income, "Total Revenue", "Operating Revenue"),
        gross_profit=value(income, "Gross Profit"),
        operating_income=operating_income,
        net_income=value(income, "Net Income", "Net Income Common Stockholders"),
        ebit=to_float(ebit) if ebit is not None else operating_income,
        ebitda=value(income, "EBITDA", "Normalized EBITDA"),
        interest_expense=abs(value(income, "Interest Expense")),
        total_assets=value(balance, "Total Assets"),
        current_assets=current_assets,
        current_liabilities=current_liabilities,
        total_liabilities=value(balance, "Total Liabilities Net Minority Interest", "Total Liabilities"),
        shareholder_equity=value(balance, "Stockholders Equity", "Common Stock Equity"),
        retained_earnings=value(balance, "Retained Earnings"),
        working_capital=current_assets - current_liabilities,
        long_term_debt=value(balance, "Long Term Debt"),
        short_term_debt=value(balance, "Current Debt"),
        cash=value(balance, "Cash And Cash Equivalents"),
        inventory=value(balance, "Inventory"),
        operating_cash_flow=operating_cash_flow,
        capital_expenditures=capex,
        free_cash_flow=(
            to_float(free_cash_flow) if free_cash_flow is not None else operating_cash_flow - capex
        ),
        source=YahooFinanceAdapter.name,
    )


def map_price(info: dict[str, Any]) -> MarketSnapshot:
    """Normalize a yfinance Ticker.info dict into a quote."""
    price = to_float(info.get("currentPrice") or info.get("regularMarketPrice"))
    previous_close = to_float(info.get("regularMarketPreviousClose") or info.get("previousClose"))
    change = (
        to_float(info["regularMarketChange"])
        if info.get("regularMarketChange") is not None
        else price - previous_close
    )
    raw_pct = info.get("regularMarketChangePercent")
    return MarketSnapshot(
        price=price,
        previous_close=previous_close,
        change=change,
        # Ticker.info reports percentage points
        change_percent=normalize_change_percent(
            to_float(raw_pct) if raw_pct is not None else None, change, previous_close
        ),
        market_cap=to_float(info.get("marketCap")),
        volume=to_float(info.get("regularMarketVolume") or info.get("volume")),
        fifty_two_week_high=to_float(info.get("fiftyTwoWeekHigh")),
        fifty_two_week_low=to_float(info.get("fiftyTwoWeekLow")),
        source=YahooFinanceAdapter.name,
    )
