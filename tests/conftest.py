"""
Pytest configuration and shared fixtures for Riskscope tests.

This module provides common fixtures used across all test modules,
including statement/quote fixtures, fake providers, and a fresh cache.
"""

from typing import Generator

import pytest

from riskscope.core.data.cache import TTLCache, reset_cache
from riskscope.core.data.models import CompanyType, SearchCandidate

from tests.mocks import FakeProvider, make_overview, make_snapshot, make_statements


# ==============================================================================
# Autouse Fixtures - Run automatically for all tests
# ==============================================================================


@pytest.fixture(autouse=True)
def reset_global_cache() -> Generator[None, None, None]:
    """Reset the process-wide cache singleton before each test."""
    reset_cache()
    yield
    reset_cache()


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep provider keys out of the environment for testing."""
    for key in ("FMP_API_KEY", "ALPHA_VANTAGE_API_KEY", "FINNHUB_API_KEY"):
        monkeypatch.delenv(key, raising=False)


# ==============================================================================
# Core Fixtures
# ==============================================================================


@pytest.fixture
def cache() -> TTLCache:
    """A fresh cache with a 5 minute TTL."""
    return TTLCache(default_ttl=300)


@pytest.fixture
def healthy_statements():
    """
    Balanced statements for a healthy company.

    Non-manufacturing Z with a $500M market cap:
    A = 36/180 = 0.2, B = 90/180 = 0.5, C = 25/180 = 0.1389, D = 500/45 = 11.11
    Z = 1.312 + 1.63 + 0.933 + 11.667 = 15.54 -> Safe
    """
    return make_statements()


@pytest.fixture
def healthy_snapshot():
    return make_snapshot()


@pytest.fixture
def distressed_statements():
    """
    Statements for a struggling manufacturer.

    Manufacturing Z with a $20M market cap:
    A = -10/100 = -0.1, B = -20/100 = -0.2, C = -5/100 = -0.05,
    D = 20/90 = 0.222, E = 50/100 = 0.5
    Z = -0.12 - 0.28 - 0.165 + 0.133 + 0.5 = 0.068 -> Distress
    """
    return make_statements(
        revenue=50_000_000,
        gross_profit=5_000_000,
        operating_income=-5_000_000,
        net_income=-12_000_000,
        ebit=-5_000_000,
        interest_expense=-6_000_000,
        total_assets=100_000_000,
        current_assets=30_000_000,
        current_liabilities=40_000_000,
        total_liabilities=90_000_000,
        shareholder_equity=10_000_000,
        retained_earnings=-20_000_000,
        working_capital=-10_000_000,
        long_term_debt=50_000_000,
        short_term_debt=10_000_000,
        cash=2_000_000,
        inventory=8_000_000,
        operating_cash_flow=-3_000_000,
        free_cash_flow=-6_000_000,
    )


@pytest.fixture
def apple_provider(healthy_statements, healthy_snapshot) -> FakeProvider:
    """Fake provider that knows Apple by name and ticker."""
    return FakeProvider(
        name="primary",
        overviews={"AAPL": make_overview()},
        statements={"AAPL": healthy_statements},
        prices={"AAPL": healthy_snapshot},
        searches={
            "apple": [
                SearchCandidate("APC.F", "Apple Inc.", "FRA"),
                SearchCandidate("AAPL", "Apple Inc.", "NASDAQ"),
            ],
        },
    )


@pytest.fixture
def manufacturing_type() -> CompanyType:
    return CompanyType.MANUFACTURING
