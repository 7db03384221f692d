"""
Canonical records shared by every provider adapter.

Each adapter maps its provider-specific payload into these types, so the
resolver, ratio engine, and batch layer never see raw provider responses.
All records are frozen: once produced (and cached) they are read-only.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class CompanyType(str, Enum):
    """Classification that selects the Altman formula variant."""

    MANUFACTURING = "manufacturing"
    NON_MANUFACTURING = "non-manufacturing"


# Exchanges preferred when a name search returns several listings
MAJOR_EXCHANGES = frozenset({
    "NYSE", "NASDAQ", "NYSE ARCA", "NYSE AMERICAN", "AMEX",
    "NMS", "NYQ", "NGM", "NCM",
})


@dataclass(frozen=True)
class SearchCandidate:
    """One listing returned by a provider's name search."""

    symbol: str
    name: str
    exchange: Optional[str] = None

    @property
    def is_major_exchange(self) -> bool:
        """Check if the listing trades on a major US exchange."""
        return bool(self.exchange) and self.exchange.upper() in MAJOR_EXCHANGES


@dataclass(frozen=True)
class Overview:
    """Company profile returned by a provider's overview endpoint."""

    ticker: str
    name: str
    sector: str = "Unknown"
    industry: str = "Unknown"
    market_cap: float = 0.0
    exchange: Optional[str] = None
    description: str = ""
    source: str = ""


@dataclass(frozen=True)
class CompanyIdentity:
    """
    Canonical security resolved from free-text input.

    Created by the Resolver on the first successful lookup and cached under
    the normalized input until the cache TTL expires.
    """

    input_text: str
    ticker: str
    name: str
    sector: str
    industry: str
    market_cap: float
    company_type: CompanyType
    exchange: Optional[str] = None
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["company_type"] = self.company_type.value
        return data


@dataclass(frozen=True)
class FinancialStatementSet:
    """
    Most recent annual income statement, balance sheet, and cash flow.

    Missing provider values are stored as 0.0. Capital expenditures are an
    absolute value.
    """

    period_end: Optional[str] = None

    # Income statement
    revenue: float = 0.0
    gross_profit: float = 0.0
    operating_income: float = 0.0
    net_income: float = 0.0
    ebit: float = 0.0
    ebitda: float = 0.0
    interest_expense: float = 0.0

    # Balance sheet
    total_assets: float = 0.0
    current_assets: float = 0.0
    current_liabilities: float = 0.0
    total_liabilities: float = 0.0
    shareholder_equity: float = 0.0
    retained_earnings: float = 0.0
    working_capital: float = 0.0
    long_term_debt: float = 0.0
    short_term_debt: float = 0.0
    cash: float = 0.0
    inventory: float = 0.0

    # Cash flow
    operating_cash_flow: float = 0.0
    capital_expenditures: float = 0.0
    free_cash_flow: float = 0.0

    source: str = ""
    fetched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def total_debt(self) -> float:
        """Long-term plus short-term debt."""
        return self.long_term_debt + self.short_term_debt

    @property
    def cost_of_goods_sold(self) -> float:
        """Revenue minus gross profit."""
        return self.revenue - self.gross_profit

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Current quote for a ticker.

    change_percent is in percentage points: 1.5 means +1.5%.
    """

    price: float = 0.0
    previous_close: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    market_cap: float = 0.0
    volume: float = 0.0
    fifty_two_week_high: float = 0.0
    fifty_two_week_low: float = 0.0
    source: str = ""
    fetched_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def normalize_change_percent(
    change_percent: Optional[float],
    change: Optional[float] = None,
    previous_close: Optional[float] = None,
) -> float:
    """
    Return a change percentage in percentage points.

    Uses the provider's value when present, otherwise derives it from the
    absolute change and previous close.
    """
    if change_percent is not None:
        return float(change_percent)
    if change is not None and previous_close:
        return float(change) / float(previous_close) * 100
    return 0.0
