"""Alpha Vantage adapter."""

import logging
from typing import Any, Optional

from riskscope.core.data.exceptions import ProviderDataError, ProviderResponseError
from riskscope.core.data.models import (
    FinancialStatementSet,
    MarketSnapshot,
    Overview,
    SearchCandidate,
    normalize_change_percent,
)
from riskscope.core.data.providers.base import ProviderAdapter, to_float

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"


class AlphaVantageAdapter(ProviderAdapter):
    """
    Adapter for alphavantage.co (API key, 25 requests/day free tier).

    Alpha Vantage answers throttled requests with HTTP 200 and a "Note" or
    "Information" body; those are reported as a 429 response error.
    """

    name = "alpha_vantage"

    def __init__(self, api_key: Optional[str] = None, daily_limit: int = 25, **kwargs: Any):
        super().__init__(api_key=api_key, daily_limit=daily_limit, **kwargs)

    def _call(self, function: str, timeout: Optional[float] = None, **params: Any) -> dict[str, Any]:
        params.update({"function": function, "apikey": self.api_key})
        data = self._get_json(ALPHA_VANTAGE_URL, params=params, timeout=timeout)
        if not isinstance(data, dict):
            raise ProviderDataError(self.name, f"unexpected {function} payload")
        throttle = data.get("Note") or data.get("Information")
        if throttle:
            raise ProviderResponseError(self.name, 429, f"throttled: {throttle}")
        if data.get("Error Message"):
            raise ProviderDataError(self.name, data["Error Message"])
        return data

    def _latest_annual(self, function: str, ticker: str) -> dict[str, Any]:
        data = self._call(function, timeout=self.heavy_timeout, symbol=ticker)
        reports = data.get("annualReports") or []
        if not reports:
            raise ProviderDataError(self.name, f"no {function.lower()} data found for {ticker}")
        return reports[0]

    def search_candidates(self, text: str) -> list[SearchCandidate]:
        data = self._call("SYMBOL_SEARCH", keywords=text)
        return [
            SearchCandidate(symbol=m["1. symbol"], name=m.get("2. name") or m["1. symbol"])
            for m in data.get("bestMatches") or []
            if m.get("1. symbol")
        ]

    def get_overview(self, ticker: str) -> Overview:
        data = self._call("OVERVIEW", symbol=ticker)
        if not data.get("Symbol"):
            raise ProviderDataError(self.name, f"no data found for ticker: {ticker}")
        return map_overview(data)

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        income = self._latest_annual("INCOME_STATEMENT", ticker)
        balance = self._latest_annual("BALANCE_SHEET", ticker)
        cash_flow = self._latest_annual("CASH_FLOW", ticker)
        return map_statements(income, balance, cash_flow)

    def get_price(self, ticker: str) -> MarketSnapshot:
        data = self._call("GLOBAL_QUOTE", symbol=ticker)
        quote = data.get("Global Quote") or {}
        if not quote.get("05. price"):
            raise ProviderDataError(self.name, f"no quote found for {ticker}")
        return map_price(quote)


def map_overview(data: dict[str, Any]) -> Overview:
    """Normalize an Alpha Vantage OVERVIEW payload."""
    return Overview(
        ticker=data["Symbol"],
        name=data.get("Name") or data["Symbol"],
        sector=data.get("Sector") or "Unknown",
        industry=data.get("Industry") or "Unknown",
        market_cap=to_float(data.get("MarketCapitalization")),
        exchange=data.get("Exchange"),
        description=data.get("Description") or "",
        source=AlphaVantageAdapter.name,
    )


def map_statements(
    income: dict[str, Any],
    balance: dict[str, Any],
    cash_flow: dict[str, Any],
) -> FinancialStatementSet:
    """Normalize Alpha Vantage annual reports."""
    operating_income = to_float(income.get("operatingIncome"))
    ebit = to_float(income.get("ebit")) or operating_income
    current_assets = to_float(balance.get("totalCurrentAssets"))
    current_liabilities = to_float(balance.get("totalCurrentLiabilities"))
    operating_cash_flow = to_float(cash_flow.get("operatingCashflow"))
    capex = abs(to_float(cash_flow.get("capitalExpenditures")))

    return FinancialStatementSet(
        period_end=income.get("fiscalDateEnding") or balance.get("fiscalDateEnding"),
        revenue=to_float(income.get("totalRevenue")),
        gross_profit=to_float(income.get("grossProfit")),
        operating_income=operating_income,
        net_income=to_float(income.get("netIncome")),
        ebit=ebit,
        ebitda=to_float(income.get("ebitda")),
        interest_expense=abs(to_float(income.get("interestExpense"))),
        total_assets=to_float(balance.get("totalAssets")),
        current_assets=current_assets,
        current_liabilities=current_liabilities,
        total_liabilities=to_float(balance.get("totalLiabilities")),
        shareholder_equity=to_float(balance.get("totalShareholderEquity")),
        retained_earnings=to_float(balance.get("retainedEarnings")),
        working_capital=current_assets - current_liabilities,
        long_term_debt=to_float(balance.get("longTermDebt")),
        short_term_debt=to_float(balance.get("shortTermDebt")),
        cash=to_float(
            balance.get("cashAndCashEquivalentsAtCarryingValue") or balance.get("cash")
        ),
        inventory=to_float(balance.get("inventory")),
        operating_cash_flow=operating_cash_flow,
        capital_expenditures=capex,
        free_cash_flow=operating_cash_flow - capex,
        source=AlphaVantageAdapter.name,
    )


def map_price(quote: dict[str, Any]) -> MarketSnapshot:
    """Normalize an Alpha Vantage GLOBAL_QUOTE record."""
    change = to_float(quote.get("09. change"))
    previous_close = to_float(quote.get("08. previous close"))
    raw_pct = quote.get("10. change percent")  # e.g. "1.2345%"
    return MarketSnapshot(
        price=to_float(quote.get("05. price")),
        previous_close=previous_close,
        change=change,
        change_percent=normalize_change_percent(
            to_float(raw_pct) if raw_pct else None, change, previous_close
        ),
        volume=to_float(quote.get("06. volume")),
        source=AlphaVantageAdapter.name,
    )
