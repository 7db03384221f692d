"""
Financial data fetch layer with multi-provider fallback.

Overviews, statements, and quotes are each cached under their own namespace
and fetched from the first available provider that answers. A provider error
moves on to the next provider; only when all of them fail does the caller
see AllProvidersFailedError, carrying every provider's reason.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, TypeVar

from riskscope.core.data.cache import TTLCache, cache_key
from riskscope.core.data.exceptions import AllProvidersFailedError, ProviderError
from riskscope.core.data.models import FinancialStatementSet, MarketSnapshot, Overview
from riskscope.core.data.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FinancialDataService:
    """
    Cached, fallback-ordered access to provider data.

    Usage:
        service = FinancialDataService(providers, cache)
        statements, price = service.get_statements_and_price("AAPL")
    """

    def __init__(self, providers: Sequence[ProviderAdapter], cache: TTLCache):
        self.providers = list(providers)
        self.cache = cache

    def _fetch(
        self,
        kind: str,
        operation: str,
        ticker: str,
        call: Callable[[ProviderAdapter, str], T],
    ) -> T:
        ticker = ticker.strip().upper()
        key = cache_key(kind, ticker)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        reasons: list[str] = []
        for provider in self.providers:
            if not provider.is_configured:
                reasons.append(f"[{provider.name}] not configured")
                continue
            if not provider.is_available:
                reasons.append(f"[{provider.name}] daily quota exhausted")
                continue
            try:
                value = call(provider, ticker)
            except ProviderError as e:
                logger.warning(f"{operation} failed for {ticker} on {provider.name}, trying next provider: {e}")
                reasons.append(str(e))
                continue

            self.cache.set(key, value)
            logger.info(f"Fetched {operation} for {ticker} from {provider.name}")
            return value

        logger.error(f"{operation} unavailable for {ticker} - all data sources failed")
        raise AllProvidersFailedError(operation, ticker, reasons)

    def get_overview(self, ticker: str) -> Overview:
        """Company profile for a ticker."""
        return self._fetch("overview", "Company overview", ticker, lambda p, t: p.get_overview(t))

    def get_statements(self, ticker: str) -> FinancialStatementSet:
        """Latest annual financial statements for a ticker."""
        return self._fetch("financials", "Financial statements", ticker, lambda p, t: p.get_statements(t))

    def get_price(self, ticker: str) -> MarketSnapshot:
        """Current quote for a ticker."""
        return self._fetch("price", "Price data", ticker, lambda p, t: p.get_price(t))

    def get_statements_and_price(self, ticker: str) -> tuple[FinancialStatementSet, MarketSnapshot]:
        """
        Fetch statements and quote in parallel.

        Raises:
            AllProvidersFailedError: If either lookup failed on every provider
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch") as executor:
            statements = executor.submit(self.get_statements, ticker)
            price = executor.submit(self.get_price, ticker)
            return statements.result(), price.result()

    def usage(self) -> list[dict]:
        """Quota usage for every provider."""
        return [p.usage() for p in self.providers]
