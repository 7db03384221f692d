"""Finnhub adapter (search, profile, and quote only)."""

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

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


class FinnhubAdapter(ProviderAdapter):
    """
    Adapter for finnhub.io (API key, 60 requests/day budget).

    The free tier has no normalized annual statements, so get_statements
    always raises ProviderDataError and callers fall through to the next
    provider.
    """

    name = "finnhub"

    def __init__(self, api_key: Optional[str] = None, daily_limit: int = 60, **kwargs: Any):
        super().__init__(api_key=api_key, daily_limit=daily_limit, **kwargs)

    def _call(self, path: str, **params: Any) -> dict[str, Any]:
        params["token"] = self.api_key
        data = self._get_json(f"{FINNHUB_BASE_URL}/{path}", params=params)
        if not isinstance(data, dict):
            raise ProviderDataError(self.name, f"unexpected {path} payload")
        return data

    def search_candidates(self, text: str) -> list[SearchCandidate]:
        data = self._call("search", q=text)
        results = [
            r for r in data.get("result") or []
            if r.get("symbol") and r.get("type", "Common Stock") == "Common Stock"
        ]
        # Symbols without an exchange suffix are US listings
        results.sort(key=lambda r: "." in r["symbol"])
        return [
            SearchCandidate(symbol=r["symbol"], name=r.get("description") or r["symbol"])
            for r in results
        ]

    def get_overview(self, ticker: str) -> Overview:
        profile = self._call("stock/profile2", symbol=ticker)
        if not profile.get("ticker"):
            raise ProviderDataError(self.name, f"no profile data found for {ticker}")
        return map_overview(profile)

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        raise ProviderDataError(self.name, "financial statements not offered by this provider")

    def get_price(self, ticker: str) -> MarketSnapshot:
        quote = self._call("quote", symbol=ticker)
        if not to_float(quote.get("c")):
            raise ProviderDataError(self.name, f"no quote found for {ticker}")
        return map_price(quote)


def map_overview(profile: dict[str, Any]) -> Overview:
    """Normalize a Finnhub profile2 record (market cap is in millions)."""
    industry = profile.get("finnhubIndustry") or "Unknown"
    return Overview(
        ticker=profile["ticker"],
        name=profile.get("name") or profile["ticker"],
        sector=industry,
        industry=industry,
        market_cap=to_float(profile.get("marketCapitalization")) * 1_000_000,
        exchange=profile.get("exchange"),
        source=FinnhubAdapter.name,
    )


def map_price(quote: dict[str, Any]) -> MarketSnapshot:
    """Normalize a Finnhub quote record."""
    change = to_float(quote.get("d"))
    previous_close = to_float(quote.get("pc"))
    raw_pct = quote.get("dp")
    return MarketSnapshot(
        price=to_float(quote.get("c")),
        previous_close=previous_close,
        change=change,
        change_percent=normalize_change_percent(
            to_float(raw_pct) if raw_pct is not None else None, change, previous_close
        ),
        source=FinnhubAdapter.name,
    )
