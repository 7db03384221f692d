"""
Free-text company resolution.

Turns a name or ticker into a canonical CompanyIdentity by evaluating an
ordered list of strategies, stopping at the first that returns a result:

    1. CachedResolution      - normalized input already resolved
    2. NameSearchStrategy    - search on the highest-priority available adapter
    3. DirectTickerStrategy  - input looks like a ticker (1-4 letters)
    4. NameSearchStrategy    - search on the remaining available adapters

Each strategy is tested in isolation from network code through the same
attempt() contract. When every strategy comes up empty the resolver raises
ResolutionError; it never synthesizes placeholder data.
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from riskscope.core.data.cache import TTLCache, cache_key
from riskscope.core.data.exceptions import ProviderError, ResolutionError
from riskscope.core.data.models import CompanyIdentity
from riskscope.core.data.providers.base import ProviderAdapter, build_identity

logger = logging.getLogger(__name__)

TICKER_PATTERN = re.compile(r"^[A-Z]{1,4}$")


def normalize_input(text: str) -> str:
    """Normalize free text for cache keys: trimmed and lower-cased."""
    return (text or "").strip().lower()


def looks_like_ticker(text: str) -> bool:
    """Check if input is a bare ticker symbol (1-4 letters)."""
    return bool(TICKER_PATTERN.match((text or "").strip().upper()))


class ResolutionStrategy(ABC):
    """One step of the resolution chain."""

    name: str = "strategy"

    @abstractmethod
    def attempt(self, text: str) -> Optional[CompanyIdentity]:
        """
        Try to resolve text.

        Returns:
            CompanyIdentity on success, None when this step found nothing

        Raises:
            ProviderError: If the underlying provider call failed
        """


class CachedResolution(ResolutionStrategy):
    """Return a previously resolved identity for the same normalized input."""

    name = "cache"

    def __init__(self, cache: TTLCache):
        self.cache = cache

    def attempt(self, text: str) -> Optional[CompanyIdentity]:
        return self.cache.get(cache_key("ticker", normalize_input(text)))


class NameSearchStrategy(ResolutionStrategy):
    """
    Name search against a slice of the currently available adapters.

    Args:
        providers: All adapters in priority order
        skip: How many available adapters to pass over
        limit: How many available adapters to try (None for all remaining)
        after: Earlier search step whose adapters are excluded here; the
            adapters it tried in the current thread are skipped by identity
    """

    name = "name_search"

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        skip: int = 0,
        limit: Optional[int] = 1,
        after: Optional["NameSearchStrategy"] = None,
    ):
        self.providers = providers
        self.skip = skip
        self.limit = limit
        self.after = after
        self._local = threading.local()

    @property
    def tried(self) -> list[ProviderAdapter]:
        """Adapters selected by the most recent attempt in this thread."""
        return getattr(self._local, "tried", [])

    def _selected(self) -> list[ProviderAdapter]:
        excluded = self.after.tried if self.after is not None else []
        available = [
            p for p in self.providers
            if p.is_available and not any(p is e for e in excluded)
        ]
        end = None if self.limit is None else self.skip + self.limit
        return available[self.skip:end]

    def attempt(self, text: str) -> Optional[CompanyIdentity]:
        selected = self._selected()
        self._local.tried = selected
        last_error: Optional[ProviderError] = None
        for provider in selected:
            try:
                identity = provider.search_by_name(text.strip())
            except ProviderError as e:
                logger.warning(f"Name search failed on {provider.name}: {e}")
                last_error = e
                continue
            if identity is not None:
                return identity
        if last_error is not None:
            raise last_error
        return None


class DirectTickerStrategy(ResolutionStrategy):
    """Overview lookup on the literal input when it looks like a ticker."""

    name = "direct_ticker"

    def __init__(self, providers: Sequence[ProviderAdapter]):
        self.providers = providers

    def attempt(self, text: str) -> Optional[CompanyIdentity]:
        if not looks_like_ticker(text):
            return None

        ticker = text.strip().upper()
        last_error: Optional[ProviderError] = None
        for provider in self.providers:
            if not provider.is_available:
                continue
            try:
                overview = provider.get_overview(ticker)
            except ProviderError as e:
                logger.warning(f"Direct ticker lookup failed on {provider.name}: {e}")
                last_error = e
                continue
            logger.info(f"Direct ticker lookup: {ticker} -> {overview.name} ({provider.name})")
            return build_identity(text.strip(), overview)
        if last_error is not None:
            raise last_error
        return None


class Resolver:
    """
    Resolves free-text input to a CompanyIdentity.

    Usage:
        resolver = Resolver(providers, cache)
        identity = resolver.resolve("apple")
        print(identity.ticker, identity.company_type.value)
    """

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        cache: TTLCache,
        strategies: Optional[Sequence[ResolutionStrategy]] = None,
    ):
        self.providers = list(providers)
        self.cache = cache
        self.strategies = list(strategies) if strategies is not None else self.default_strategies()
        self._lock = threading.Lock()
        self._inflight: dict[str, list] = {}

    def default_strategies(self) -> list[ResolutionStrategy]:
        """Build the standard four-step chain."""
        primary = NameSearchStrategy(self.providers, limit=1)
        return [
            CachedResolution(self.cache),
            primary,
            DirectTickerStrategy(self.providers),
            NameSearchStrategy(self.providers, limit=None, after=primary),
        ]

    @contextmanager
    def _claim(self, key: str) -> Iterator[None]:
        """Hold the per-key lock; the entry is dropped when no caller holds or awaits it."""
        with self._lock:
            entry = self._inflight.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._inflight[key]

    def resolve(self, text: str) -> CompanyIdentity:
        """
        Resolve text to a canonical security.

        Concurrent resolutions of the same normalized input are serialized,
        so the second caller is answered from the cache.

        Raises:
            ResolutionError: If no strategy produced a match
        """
        normalized = normalize_input(text)
        if not normalized:
            raise ResolutionError(text or "", "input is empty")

        key = cache_key("ticker", normalized)
        with self._claim(key):
            reasons: list[str] = []
            for strategy in self.strategies:
                try:
                    identity = strategy.attempt(text)
                except ProviderError as e:
                    reasons.append(str(e))
                    continue
                if identity is None:
                    continue

                if not isinstance(strategy, CachedResolution):
                    self.cache.set(key, identity)
                    logger.info(
                        f"Resolved {text!r} to {identity.ticker} - {identity.name} "
                        f"via {strategy.name} ({identity.company_type.value})"
                    )
                return identity

        reason = "; ".join(reasons) if reasons else "no provider returned a match"
        logger.warning(f"Could not resolve {text!r}: {reason}")
        raise ResolutionError(text, reason)
