"""Financial Modeling Prep adapter."""

import logging
from typing import Any, Optional

from riskscope.core.data.exceptions import ProviderDataError
from riskscope.core.data.models import (
    FinancialStatementSet,
    MarketSnapshot,
    Overview,
    SearchCandidate,
    normalize_change_percent,
)
from riskscope.core.data.providers.base import ProviderAdapter, to_float

logger = logging.getLogger(__name__)

FMP_BASE_URL = "https://financialmodelingprep.com/api/v3"


def _first(payload: Any) -> dict[str, Any]:
    """FMP returns single records wrapped in a list."""
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return payload[0]
    return {}


def _parse_range(value: Optional[str]) -> tuple[float, float]:
    """Parse FMP's "low-high" 52-week range string."""
    if not value or "-" not in value:
        return 0.0, 0.0
    low, _, high = value.partition("-")
    return to_float(low), to_float(high)


class FMPAdapter(ProviderAdapter):
    """Adapter for financialmodelingprep.com (API key, 250 requests/day free tier)."""

    name = "fmp"

    def __init__(self, api_key: Optional[str] = None, daily_limit: int = 250, **kwargs: Any):
        super().__init__(api_key=api_key, daily_limit=daily_limit, **kwargs)

    def _call(self, path: str, timeout: Optional[float] = None, **params: Any) -> Any:
        params["apikey"] = self.api_key
        return self._get_json(f"{FMP_BASE_URL}/{path}", params=params, timeout=timeout)

    def search_candidates(self, text: str) -> list[SearchCandidate]:
        results = self._call("search", query=text, limit=10)
        if not isinstance(results, list):
            return []
        return [
            SearchCandidate(
                symbol=r["symbol"],
                name=r.get("name") or r["symbol"],
                exchange=r.get("exchangeShortName"),
            )
            for r in results
            if isinstance(r, dict) and r.get("symbol")
        ]

    def get_overview(self, ticker: str) -> Overview:
        profile = _first(self._call(f"profile/{ticker}"))
        if not profile.get("symbol"):
            raise ProviderDataError(self.name, f"no profile data found for {ticker}")
        return map_overview(profile)

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        params = {"limit": 1, "period": "annual"}
        income = _first(self._call(f"income-statement/{ticker}", timeout=self.heavy_timeout, **params))
        balance = _first(self._call(f"balance-sheet-statement/{ticker}", timeout=self.heavy_timeout, **params))
        cash_flow = _first(self._call(f"cash-flow-statement/{ticker}", timeout=self.heavy_timeout, **params))

        if not (income or balance or cash_flow):
            raise ProviderDataError(self.name, f"no financial statements found for {ticker}")
        return map_statements(income, balance, cash_flow)

    def get_price(self, ticker: str) -> MarketSnapshot:
        profile = _first(self._call(f"profile/{ticker}"))
        if not profile or profile.get("price") is None:
            raise ProviderDataError(self.name, f"no quote found for {ticker}")
        return map_price(profile)


def map_overview(profile: dict[str, Any]) -> Overview:
    """Normalize an FMP /profile record."""
    return Overview(
        ticker=profile["symbol"],
        name=profile.get("companyName") or profile["symbol"],
        sector=profile.get("sector") or "Unknown",
        industry=profile.get("industry") or "Unknown",
        market_cap=to_float(profile.get("mktCap")),
        exchange=profile.get("exchangeShortName"),
        description=profile.get("description") or "",
        source=FMPAdapter.name,
    )


def map_statements(
    income: dict[str, Any],
    balance: dict[str, Any],
    cash_flow: dict[str, Any],
) -> FinancialStatementSet:
    """Normalize FMP income, balance sheet, and cash flow records."""
    operating_income = to_float(income.get("operatingIncome"))
    ebitda = to_float(income.get("ebitda"))
    if income.get("ebit") is not None:
        ebit = to_float(income.get("ebit"))
    elif ebitda:
        ebit = ebitda - to_float(income.get("depreciationAndAmortization"))
    else:
        ebit = operating_income

    current_assets = to_float(balance.get("totalCurrentAssets"))
    current_liabilities = to_float(balance.get("totalCurrentLiabilities"))
    operating_cash_flow = to_float(cash_flow.get("operatingCashFlow"))
    capex = abs(to_float(cash_flow.get("capitalExpenditure")))
    free_cash_flow = (
        to_float(cash_flow["freeCashFlow"])
        if cash_flow.get("freeCashFlow") is not None
        else operating_cash_flow - capex
    )

    return FinancialStatementSet(
        period_end=income.get("date") or balance.get("date") or income.get("calendarYear"),
        revenue=to_float(income.get("revenue")),
        gross_profit=to_float(income.get("grossProfit")),
        operating_income=operating_income,
        net_income=to_float(income.get("netIncome")),
        ebit=ebit,
        ebitda=ebitda,
        interest_expense=abs(to_float(income.get("interestExpense"))),
        total_assets=to_float(balance.get("totalAssets")),
        current_assets=current_assets,
        current_liabilities=current_liabilities,
        total_liabilities=to_float(balance.get("totalLiabilities")),
        shareholder_equity=to_float(balance.get("totalStockholdersEquity")),
        retained_earnings=to_float(balance.get("retainedEarnings")),
        working_capital=current_assets - current_liabilities,
        long_term_debt=to_float(balance.get("longTermDebt")),
        short_term_debt=to_float(balance.get("shortTermDebt")),
        cash=to_float(balance.get("cashAndCashEquivalents")),
        inventory=to_float(balance.get("inventory")),
        operating_cash_flow=operating_cash_flow,
        capital_expenditures=capex,
        free_cash_flow=free_cash_flow,
        source=FMPAdapter.name,
    )


def map_price(profile: dict[str, Any]) -> MarketSnapshot:
    """Normalize an FMP /profile record into a quote."""
    price = to_float(profile.get("price"))
    change = to_float(profile.get("changes"))
    previous_close = price - change
    low, high = _parse_range(profile.get("range"))
    raw_pct = profile.get("changesPercentage")
    return MarketSnapshot(
        price=price,
        previous_close=previous_close,
        change=change,
        # FMP already reports percentage points
        change_percent=normalize_change_percent(
            to_float(raw_pct) if raw_pct is not None else None, change, previous_close
        ),
        market_cap=to_float(profile.get("mktCap")),
        volume=to_float(profile.get("volAvg")),
        fifty_two_week_high=high,
        fifty_two_week_low=low,
        source=FMPAdapter.name,
    )
