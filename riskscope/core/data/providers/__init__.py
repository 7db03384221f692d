"""Provider adapters, listed in default priority order."""

from typing import Optional

from riskscope.config import Config, config as default_config
from riskscope.core.data.providers.alpha_vantage import AlphaVantageAdapter
from riskscope.core.data.providers.base import ProviderAdapter
from riskscope.core.data.providers.finnhub import FinnhubAdapter
from riskscope.core.data.providers.fmp import FMPAdapter
from riskscope.core.data.providers.yahoo import YahooFinanceAdapter


def build_default_providers(cfg: Optional[Config] = None) -> list[ProviderAdapter]:
    """
    Construct one adapter per data source in priority order.

    Unconfigured adapters are included; they report themselves unavailable
    and are skipped by the resolver and fetch service.
    """
    cfg = cfg if cfg is not None else default_config
    timeouts = {
        "light_timeout": cfg.light_timeout_seconds,
        "heavy_timeout": cfg.heavy_timeout_seconds,
    }
    return [
        FMPAdapter(api_key=cfg.fmp_api_key, daily_limit=cfg.fmp_daily_limit, **timeouts),
        AlphaVantageAdapter(
            api_key=cfg.alpha_vantage_api_key,
            daily_limit=cfg.alpha_vantage_daily_limit,
            **timeouts,
        ),
        YahooFinanceAdapter(
            daily_limit=cfg.yahoo_daily_limit,
            max_workers=cfg.batch_group_size * 2,
            **timeouts,
        ),
        FinnhubAdapter(api_key=cfg.finnhub_api_key, daily_limit=cfg.finnhub_daily_limit, **timeouts),
    ]


__all__ = [
    "AlphaVantageAdapter",
    "FMPAdapter",
    "FinnhubAdapter",
    "ProviderAdapter",
    "YahooFinanceAdapter",
    "build_default_providers",
]
