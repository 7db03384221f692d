"""
Tests for free-text company resolution.
"""

import threading

import pytest

from riskscope.core.data.cache import cache_key
from riskscope.core.data.exceptions import ProviderError, ResolutionError
from riskscope.core.data.models import SearchCandidate
from riskscope.core.data.resolver import (
    CachedResolution,
    DirectTickerStrategy,
    NameSearchStrategy,
    Resolver,
    looks_like_ticker,
    normalize_input,
)

from tests.mocks import FakeProvider, make_overview


class TestHelpers:
    """Tests for input normalization."""

    def test_normalize_input(self):
        assert normalize_input("  Apple Inc ") == "apple inc"
        assert normalize_input("") == ""

    @pytest.mark.parametrize("text", ["F", "aapl", " MSFT ", "GOOG"])
    def test_looks_like_ticker(self, text):
        assert looks_like_ticker(text)

    @pytest.mark.parametrize("text", ["GOOGL", "BRK.B", "apple inc", "3M", ""])
    def test_not_ticker(self, text):
        assert not looks_like_ticker(text)


class TestStrategies:
    """Tests for each strategy in isolation."""

    def test_cached_resolution(self, cache):
        identity = object()
        cache.set(cache_key("ticker", "apple"), identity)

        assert CachedResolution(cache).attempt(" Apple ") is identity
        assert CachedResolution(cache).attempt("microsoft") is None

    def test_name_search_uses_first_available_only(self, apple_provider):
        exhausted = FakeProvider(name="exhausted", daily_limit=0)
        later = FakeProvider(name="later")

        strategy = NameSearchStrategy([exhausted, apple_provider, later], skip=0, limit=1)
        identity = strategy.attempt("apple")

        assert identity.ticker == "AAPL"
        assert later.calls["search"] == 0

    def test_name_search_skip_selects_next_providers(self, apple_provider):
        first = FakeProvider(name="first")
        strategy = NameSearchStrategy([first, apple_provider], skip=1, limit=None)

        assert strategy.attempt("apple").ticker == "AAPL"
        assert first.calls["search"] == 0

    def test_name_search_reraises_last_provider_error(self):
        failing = FakeProvider(name="down", errors={"search": ProviderError("down", "HTTP 500 response")})

        with pytest.raises(ProviderError):
            NameSearchStrategy([failing]).attempt("apple")

    def test_direct_ticker_only_for_ticker_like_input(self, apple_provider):
        strategy = DirectTickerStrategy([apple_provider])

        assert strategy.attempt("apple inc") is None
        assert apple_provider.calls["overview"] == 0

        identity = strategy.attempt("aapl")
        assert identity.ticker == "AAPL"

    def test_direct_ticker_falls_through_providers(self, apple_provider):
        empty = FakeProvider(name="empty")
        identity = DirectTickerStrategy([empty, apple_provider]).attempt("AAPL")

        assert identity.source == "fake"
        assert empty.calls["overview"] == 1


class TestResolver:
    """Tests for the full resolution chain."""

    def test_resolves_by_name_preferring_major_exchange(self, apple_provider, cache):
        resolver = Resolver([apple_provider], cache)

        identity = resolver.resolve("Apple")

        assert identity.ticker == "AAPL"
        assert identity.name == "Apple Inc."

    def test_repeat_resolution_hits_cache(self, apple_provider, cache):
        """Test two resolutions in the TTL window make one provider call."""
        resolver = Resolver([apple_provider], cache)

        first = resolver.resolve("apple")
        second = resolver.resolve("  APPLE ")

        assert first == second
        assert first is second
        assert apple_provider.calls["search"] == 1
        assert apple_provider.calls["overview"] == 1

    def test_direct_ticker_after_empty_search(self, cache):
        provider = FakeProvider(overviews={"F": make_overview("F", "Ford Motor Company", industry="Auto Manufacturers")})
        resolver = Resolver([provider], cache)

        identity = resolver.resolve("f")

        assert identity.ticker == "F"
        assert provider.calls["search"] == 1
        assert provider.calls["overview"] == 1

    def test_falls_back_to_next_provider_search(self, cache):
        """Test a failing primary is answered by the next provider's search."""
        primary = FakeProvider(name="primary", errors={"search": ProviderError("primary", "HTTP 503 response")})
        secondary = FakeProvider(
            name="secondary",
            overviews={"IBM": make_overview("IBM", "International Business Machines")},
            searches={"big blue company": [SearchCandidate("IBM", "International Business Machines", "NYSE")]},
        )
        resolver = Resolver([primary, secondary], cache)

        identity = resolver.resolve("big blue company")

        assert identity.ticker == "IBM"
        assert primary.calls["search"] == 1

    def test_exhausted_provider_skipped(self, apple_provider, cache):
        exhausted = FakeProvider(name="exhausted", daily_limit=0)
        resolver = Resolver([exhausted, apple_provider], cache)

        assert resolver.resolve("apple").ticker == "AAPL"
        assert exhausted.calls["search"] == 0

    def test_unresolvable_raises(self, cache):
        resolver = Resolver([FakeProvider()], cache)

        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve("not a real company")
        assert exc_info.value.input_text == "not a real company"
        assert "ticker symbol" in str(exc_info.value)

    def test_provider_errors_reported_in_reason(self, cache):
        failing = FakeProvider(name="down", errors={"search": ProviderError("down", "HTTP 500 response")})

        with pytest.raises(ResolutionError, match="HTTP 500"):
            Resolver([failing], cache).resolve("apple")

    def test_empty_input_raises(self, apple_provider, cache):
        with pytest.raises(ResolutionError):
            Resolver([apple_provider], cache).resolve("   ")
        assert apple_provider.calls["search"] == 0

    def test_failures_not_cached(self, cache):
        provider = FakeProvider()
        resolver = Resolver([provider], cache)

        for _ in range(2):
            with pytest.raises(ResolutionError):
                resolver.resolve("unknown co")
        assert provider.calls["search"] == 2

    def test_concurrent_same_input_single_lookup(self, apple_provider, cache):
        """Test parallel resolutions of one input share a single lookup."""
        resolver = Resolver([apple_provider], cache)
        results = []

        def worker() -> None:
            results.append(resolver.resolve("apple"))

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(r) for r in results}) == 1
        assert apple_provider.calls["search"] == 1

    def test_custom_strategies(self, cache, apple_provider):
        """Test the chain can be replaced wholesale."""
        resolver = Resolver([apple_provider], cache, strategies=[DirectTickerStrategy([apple_provider])])

        with pytest.raises(ResolutionError):
            resolver.resolve("apple")
        assert resolver.resolve("AAPL").ticker == "AAPL"

    def test_fallback_search_excludes_primary_by_identity(self, cache):
        """Test a primary exhausted by its own search does not hide the next provider."""
        primary = FakeProvider(name="primary", daily_limit=1)
        secondary = FakeProvider(
            name="secondary",
            overviews={"MSFT": make_overview("MSFT", "Microsoft Corporation")},
            searches={"microsoft corporation": [SearchCandidate("MSFT", "Microsoft Corporation", "NASDAQ")]},
        )
        resolver = Resolver([primary, secondary], cache)

        identity = resolver.resolve("microsoft corporation")

        assert identity.ticker == "MSFT"
        assert primary.calls["search"] == 1
        assert secondary.calls["search"] == 1

    def test_fallback_search_does_not_repeat_primary(self, cache):
        primary = FakeProvider(name="primary")
        secondary = FakeProvider(name="secondary")
        resolver = Resolver([primary, secondary], cache)

        with pytest.raises(ResolutionError):
            resolver.resolve("unknown co")
        assert primary.calls["search"] == 1
        assert secondary.calls["search"] == 1


class TestInflightLocks:
    """Tests for per-input lock bookkeeping."""

    def test_entry_released_after_success(self, apple_provider, cache):
        resolver = Resolver([apple_provider], cache)

        resolver.resolve("apple")

        assert resolver._inflight == {}

    def test_entry_released_after_failure(self, cache):
        resolver = Resolver([FakeProvider()], cache)

        for text in ["unknown one", "unknown two", "unknown three"]:
            with pytest.raises(ResolutionError):
                resolver.resolve(text)

        assert resolver._inflight == {}

    def test_entries_released_after_concurrent_resolutions(self, apple_provider, cache):
        resolver = Resolver([apple_provider], cache)
        inputs = ["apple", "APPLE", " apple ", "missing a", "missing b"] * 4

        def worker(text: str) -> None:
            try:
                resolver.resolve(text)
            except ResolutionError:
                pass

        threads = [threading.Thread(target=worker, args=(t,)) for t in inputs]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert resolver._inflight == {}
        assert apple_provider.calls["search"] <= 1 + 2 * 4
