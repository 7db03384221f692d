"""
Configuration management for Riskscope.

Centralizes all configuration from environment variables with sensible defaults.
This is the SINGLE SOURCE OF TRUTH for all application configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """
    Application configuration loaded from environment variables.

    Optional (each enables one data provider):
        FMP_API_KEY: Financial Modeling Prep API key
        ALPHA_VANTAGE_API_KEY: Alpha Vantage API key
        FINNHUB_API_KEY: Finnhub API key

    Yahoo Finance needs no key and is always configured.
    """

    # Provider credentials
    fmp_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("FMP_API_KEY")
    )
    alpha_vantage_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("ALPHA_VANTAGE_API_KEY")
    )
    finnhub_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("FINNHUB_API_KEY")
    )

    # ========================================================================
    # Cache Configuration
    # Staleness up to the TTL is acceptable for all lookups
    # ========================================================================
    cache_ttl_seconds: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_CACHE_TTL", "300"))
    )

    # ========================================================================
    # Provider Daily Quotas
    # Free-tier limits; the counters reset at UTC midnight
    # ========================================================================
    fmp_daily_limit: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_FMP_DAILY_LIMIT", "250"))
    )
    alpha_vantage_daily_limit: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_AV_DAILY_LIMIT", "25"))
    )
    yahoo_daily_limit: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_YAHOO_DAILY_LIMIT", "1000"))
    )
    finnhub_daily_limit: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_FINNHUB_DAILY_LIMIT", "60"))
    )

    # ========================================================================
    # HTTP Timeouts (seconds)
    # Light: search/profile/quote. Heavy: financial statements.
    # ========================================================================
    light_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("RISKSCOPE_LIGHT_TIMEOUT", "5"))
    )
    heavy_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("RISKSCOPE_HEAVY_TIMEOUT", "15"))
    )

    # ========================================================================
    # Batch Configuration
    # CRITICAL: group size is bounded by the most restrictive provider
    # ========================================================================
    batch_group_size: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_BATCH_GROUP_SIZE", "5"))
    )
    batch_pause_seconds: float = field(
        default_factory=lambda: float(os.getenv("RISKSCOPE_BATCH_PAUSE", "1.0"))
    )
    max_batch_size: int = field(
        default_factory=lambda: int(os.getenv("RISKSCOPE_MAX_BATCH", "50"))
    )

    log_level: str = field(
        default_factory=lambda: os.getenv("RISKSCOPE_LOG_LEVEL", "WARNING")
    )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is out of range.
        """
        from riskscope.core.data.exceptions import ConfigurationError

        if self.cache_ttl_seconds <= 0:
            raise ConfigurationError(
                f"RISKSCOPE_CACHE_TTL must be positive, got {self.cache_ttl_seconds}"
            )
        if self.batch_group_size < 1:
            raise ConfigurationError(
                f"RISKSCOPE_BATCH_GROUP_SIZE must be at least 1, got {self.batch_group_size}"
            )
        if self.batch_pause_seconds < 0:
            raise ConfigurationError(
                f"RISKSCOPE_BATCH_PAUSE cannot be negative, got {self.batch_pause_seconds}"
            )
        if self.max_batch_size < 1:
            raise ConfigurationError(
                f"RISKSCOPE_MAX_BATCH must be at least 1, got {self.max_batch_size}"
            )
        for name in ("light_timeout_seconds", "heavy_timeout_seconds"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")

    def warnings(self) -> list[str]:
        """List non-fatal configuration gaps (missing provider keys)."""
        messages = []
        if not self.fmp_api_key:
            messages.append("FMP_API_KEY not set - Financial Modeling Prep disabled")
        if not self.alpha_vantage_api_key:
            messages.append("ALPHA_VANTAGE_API_KEY not set - Alpha Vantage disabled")
        if not self.finnhub_api_key:
            messages.append("FINNHUB_API_KEY not set - Finnhub disabled")
        return messages

    @property
    def has_fmp(self) -> bool:
        """Check if Financial Modeling Prep is configured."""
        return bool(self.fmp_api_key)

    @property
    def has_alpha_vantage(self) -> bool:
        """Check if Alpha Vantage is configured."""
        return bool(self.alpha_vantage_api_key)

    @property
    def has_finnhub(self) -> bool:
        """Check if Finnhub is configured."""
        return bool(self.finnhub_api_key)


# Global configuration instance
config = Config()
