"""Tests for configuration management."""

import os
from unittest.mock import patch

import pytest

from riskscope.config import Config
from riskscope.core.data.exceptions import ConfigurationError


class TestConfigDefaults:
    """Tests for default configuration values."""

    def test_default_cache_ttl(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config()
            assert cfg.cache_ttl_seconds == 300

    def test_default_batch_settings(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config()
            assert cfg.batch_group_size == 5
            assert cfg.batch_pause_seconds == 1.0
            assert cfg.max_batch_size == 50

    def test_default_quotas(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config()
            assert cfg.fmp_daily_limit == 250
            assert cfg.alpha_vantage_daily_limit == 25
            assert cfg.finnhub_daily_limit == 60

    def test_default_timeouts(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config()
            assert cfg.light_timeout_seconds == 5.0
            assert cfg.heavy_timeout_seconds == 15.0

    def test_no_provider_keys(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = Config()
            assert not cfg.has_fmp
            assert not cfg.has_alpha_vantage
            assert not cfg.has_finnhub


class TestConfigFromEnv:
    """Tests for configuration from environment variables."""

    def test_provider_keys(self):
        with patch.dict(os.environ, {"FMP_API_KEY": "abc", "FINNHUB_API_KEY": "xyz"}):
            cfg = Config()
            assert cfg.has_fmp
            assert cfg.fmp_api_key == "abc"
            assert cfg.has_finnhub

    def test_custom_batch_settings(self):
        with patch.dict(os.environ, {"RISKSCOPE_BATCH_GROUP_SIZE": "3", "RISKSCOPE_BATCH_PAUSE": "0.25"}):
            cfg = Config()
            assert cfg.batch_group_size == 3
            assert cfg.batch_pause_seconds == 0.25

    def test_custom_cache_ttl(self):
        with patch.dict(os.environ, {"RISKSCOPE_CACHE_TTL": "60"}):
            assert Config().cache_ttl_seconds == 60


class TestConfigValidation:
    """Tests for Config.validate."""

    def test_defaults_are_valid(self):
        with patch.dict(os.environ, {}, clear=True):
            Config().validate()

    @pytest.mark.parametrize(
        "overrides,match",
        [
            ({"cache_ttl_seconds": 0}, "RISKSCOPE_CACHE_TTL"),
            ({"batch_group_size": 0}, "RISKSCOPE_BATCH_GROUP_SIZE"),
            ({"batch_pause_seconds": -1}, "RISKSCOPE_BATCH_PAUSE"),
            ({"max_batch_size": 0}, "RISKSCOPE_MAX_BATCH"),
            ({"heavy_timeout_seconds": 0}, "heavy_timeout_seconds"),
        ],
    )
    def test_invalid_values(self, overrides, match):
        with pytest.raises(ConfigurationError, match=match):
            Config(**overrides).validate()


class TestConfigWarnings:
    """Tests for Config.warnings."""

    def test_all_keys_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            warnings = Config().warnings()
            assert len(warnings) == 3
            assert any("FMP_API_KEY" in w for w in warnings)

    def test_configured_key_not_reported(self):
        with patch.dict(os.environ, {}, clear=True):
            warnings = Config(alpha_vantage_api_key="key").warnings()
            assert not any("ALPHA_VANTAGE_API_KEY" in w for w in warnings)
            assert len(warnings) == 2
