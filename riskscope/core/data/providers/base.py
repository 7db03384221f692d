"""
Uniform provider adapter contract.

Every external data source implements the same four operations and owns
its own daily quota. Quota is reserved before each HTTP request; once it
is exhausted the adapter raises ProviderQuotaError without touching the
network. Timeouts and non-2xx responses become ProviderError subclasses,
which callers treat as recoverable and answer by falling back to the next
adapter.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from riskscope.config import config
from riskscope.core.data.classification import classify_company_type
from riskscope.core.data.exceptions import (
    ProviderError,
    ProviderDataError,
    ProviderNotConfiguredError,
    ProviderQuotaError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from riskscope.core.data.models import (
    CompanyIdentity,
    FinancialStatementSet,
    MarketSnapshot,
    Overview,
    SearchCandidate,
)
from riskscope.core.data.quota import DailyQuota

logger = logging.getLogger(__name__)


def to_float(value: Any) -> float:
    """
    Coerce a provider value to a finite float.

    Providers send numbers as numbers, numeric strings, "None", "-", or
    omit them entirely. Anything that is not a finite number becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "").rstrip("%")
        if not value or value in {"None", "-", "N/A", "null"}:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def pick_best_candidate(candidates: list[SearchCandidate]) -> Optional[SearchCandidate]:
    """Prefer the first major-exchange listing, else the first result."""
    if not candidates:
        return None
    for candidate in candidates:
        if candidate.is_major_exchange:
            return candidate
    return candidates[0]


def build_identity(input_text: str, overview: Overview) -> CompanyIdentity:
    """Create a CompanyIdentity from an overview, classifying its type."""
    return CompanyIdentity(
        input_text=input_text,
        ticker=overview.ticker.upper(),
        name=overview.name,
        sector=overview.sector,
        industry=overview.industry,
        market_cap=overview.market_cap,
        company_type=classify_company_type(overview.industry, overview.sector),
        exchange=overview.exchange,
        source=overview.source,
    )


class ProviderAdapter(ABC):
    """
    Base class for one external financial data source.

    Subclasses implement the provider-specific requests and the mapping of
    each payload into the canonical records in riskscope.core.data.models.
    """

    name: str = "provider"
    requires_api_key: bool = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        daily_limit: int = 100,
        light_timeout: Optional[float] = None,
        heavy_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.quota = DailyQuota(daily_limit)
        self.light_timeout = light_timeout if light_timeout is not None else config.light_timeout_seconds
        self.heavy_timeout = heavy_timeout if heavy_timeout is not None else config.heavy_timeout_seconds
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Availability and quota
    # ------------------------------------------------------------------

    @property
    def is_configured(self) -> bool:
        """Check if the adapter has the credentials it needs."""
        return bool(self.api_key) or not self.requires_api_key

    @property
    def is_available(self) -> bool:
        """Check if the adapter is configured and has quota remaining."""
        return self.is_configured and not self.quota.exhausted

    def _reserve(self, units: int = 1) -> None:
        """
        Reserve quota before a request.

        Raises:
            ProviderNotConfiguredError: If the API key is missing
            ProviderQuotaError: If the daily quota would be exceeded
        """
        if not self.is_configured:
            raise ProviderNotConfiguredError(self.name)
        if not self.quota.try_consume(units):
            logger.warning(f"{self.name} daily quota exhausted ({self.quota.limit} requests)")
            raise ProviderQuotaError(self.name, self.quota.limit)

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def usage(self) -> dict[str, Any]:
        """Get quota usage for status reporting."""
        return {
            "name": self.name,
            "configured": self.is_configured,
            "used": self.quota.used,
            "limit": self.quota.limit,
            "remaining": self.quota.remaining,
            "available": self.is_available,
        }

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        GET a JSON document, consuming one quota unit.

        Raises:
            ProviderTimeoutError: On timeout
            ProviderResponseError: On non-2xx status
            ProviderDataError: On an unparseable body
            ProviderError: On any other transport failure
        """
        timeout = timeout if timeout is not None else self.light_timeout
        self._reserve()

        try:
            response = self.session.get(url, params=params, timeout=timeout)
        except requests.Timeout:
            raise ProviderTimeoutError(self.name, timeout)
        except requests.RequestException as e:
            raise ProviderError(self.name, f"request failed: {e}")

        if not 200 <= response.status_code < 300:
            raise ProviderResponseError(self.name, response.status_code)

        try:
            return response.json()
        except ValueError:
            raise ProviderDataError(self.name, f"invalid JSON from {url}")

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def search_candidates(self, text: str) -> list[SearchCandidate]:
        """Return listings matching free text, best provider ranking first."""

    @abstractmethod
    def get_overview(self, ticker: str) -> Overview:
        """Return the company profile for a ticker."""

    @abstractmethod
    def get_statements(self, ticker: str) -> FinancialStatementSet:
        """Return the latest annual financial statements for a ticker."""

    @abstractmethod
    def get_price(self, ticker: str) -> MarketSnapshot:
        """Return the current quote for a ticker."""

    def search_by_name(self, text: str) -> Optional[CompanyIdentity]:
        """
        Resolve free text to a CompanyIdentity via this provider's search.

        When several candidates match, the first major-exchange listing wins.
        The chosen symbol is enriched with this provider's overview; if that
        call fails the identity is built from the search result alone.

        Returns:
            CompanyIdentity, or None when the search found nothing

        Raises:
            ProviderError: If the search request itself failed
        """
        best = pick_best_candidate(self.search_candidates(text))
        if best is None:
            return None

        logger.info(f"{self.name} search found: {text} -> {best.symbol} ({best.name})")

        try:
            overview = self.get_overview(best.symbol)
        except ProviderError as e:
            logger.warning(f"{self.name} overview failed for {best.symbol}, using search result: {e}")
            overview = Overview(
                ticker=best.symbol,
                name=best.name or best.symbol,
                exchange=best.exchange,
                source=self.name,
            )
        return build_identity(text, overview)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(quota={self.quota.used}/{self.quota.limit})"
