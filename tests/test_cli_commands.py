"""
Tests for CLI commands.

Tests cover:
- Main CLI group and help
- analyze command (table, JSON, partial and total failure)
- ratios command
- lookup command
- status command
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from riskscope.cli.main import cli
from riskscope.config import Config
from riskscope.core.batch import BatchOrchestrator, CompanyAnalyzer
from riskscope.core.data.market_data import FinancialDataService
from riskscope.core.data.resolver import Resolver
from riskscope.core.scoring import RatioEngine

from tests.mocks import make_overview, make_snapshot, make_statements


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def orchestrator(apple_provider, cache):
    """Orchestrator over the fake Apple provider plus Ford."""
    apple_provider.overviews["F"] = make_overview("F", "Ford Motor Company", industry="Auto Manufacturers")
    apple_provider.statements["F"] = make_statements()
    apple_provider.prices["F"] = make_snapshot()
    analyzer = CompanyAnalyzer(
        Resolver([apple_provider], cache),
        FinancialDataService([apple_provider], cache),
    )
    return BatchOrchestrator(analyzer, group_size=5, pause_seconds=0, max_batch_size=3)


class TestCLIMain:
    """Tests for main CLI group."""

    def test_help(self, runner):
        """Test --help displays help text and command sections."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Riskscope" in result.output
        assert "bankruptcy risk analysis" in result.output
        for section in ("Analysis", "Research", "Setup"):
            assert section in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "riskscope" in result.output.lower()
        assert "0.1.0" in result.output

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli)

        # Exit code 2 is expected for missing command in Click
        assert result.exit_code in [0, 2]
        assert "Usage" in result.output


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_analyze_json(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "apple", "F", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["company"]["ticker"] for item in data["per_company"]] == ["AAPL", "F"]
        assert data["portfolio_summary"]["total_count"] == 2
        assert data["partial"] is False

    def test_analyze_table(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "AAPL"])

        assert result.exit_code == 0
        assert "Bankruptcy Risk Analysis" in result.output
        assert "Portfolio Summary" in result.output
        assert "AAPL" in result.output

    def test_analyze_partial_failure(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "AAPL", "ZZZZ"])

        assert result.exit_code == 0
        assert "1 failed" in result.output

    def test_analyze_partial_failure_json(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "AAPL", "ZZZZ", "--json"])

        data = json.loads(result.stdout)
        assert data["partial"] is True
        assert data["failures"][0]["input"] == "ZZZZ"

    def test_analyze_total_failure(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "ZZZZ", "YYYY"])

        assert result.exit_code == 1
        assert "Batch failed" in result.output

    def test_analyze_too_many(self, runner, orchestrator):
        with patch("riskscope.cli.commands.analyze.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["analyze", "A", "B", "C", "D"])

        assert result.exit_code == 1
        assert "Invalid input" in result.output

    def test_analyze_requires_input(self, runner):
        result = runner.invoke(cli, ["analyze"])
        assert result.exit_code == 2


class TestRatiosCommand:
    """Tests for the ratios command."""

    def test_ratios_json(self, runner, orchestrator):
        with patch("riskscope.cli.commands.ratios.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["ratios", "aapl", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ticker"] == "AAPL"
        assert data["ratios"]["liquidity"]["current_ratio"] == 2.5
        assert data["distress_score"]["risk_zone"] in ("Safe", "Grey", "Distress")
        assert isinstance(data["insights"], list)

    def test_ratios_detail(self, runner, orchestrator):
        with patch("riskscope.cli.commands.ratios.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["ratios", "AAPL", "--detail"])

        assert result.exit_code == 0
        assert "Z-Score Components" in result.output
        assert "Financial Ratios" in result.output

    def test_ratios_unknown_ticker(self, runner, orchestrator):
        with patch("riskscope.cli.commands.ratios.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["ratios", "ZZZZ"])

        assert result.exit_code == 1
        assert "Company not found" in result.output

    def test_ratios_strict_fails_on_unscorable_company(self, runner, orchestrator, apple_provider):
        apple_provider.statements["AAPL"] = make_statements(total_assets=0)
        orchestrator.analyzer.engine = RatioEngine(strict=True)
        with patch("riskscope.cli.commands.ratios.build_default_orchestrator", return_value=orchestrator) as build:
            result = runner.invoke(cli, ["ratios", "AAPL", "--strict"])

        build.assert_called_once_with(strict=True)
        assert result.exit_code == 1
        assert "Cannot score" in result.output

    def test_ratios_without_strict_reports_unknown(self, runner, orchestrator, apple_provider):
        apple_provider.statements["AAPL"] = make_statements(total_assets=0)
        with patch("riskscope.cli.commands.ratios.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["ratios", "AAPL", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["distress_score"]["risk_zone"] == "Unknown"


class TestLookupCommand:
    """Tests for the lookup command."""

    def test_lookup_by_name_json(self, runner, orchestrator):
        with patch("riskscope.cli.commands.lookup.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["lookup", "apple", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ticker"] == "AAPL"
        assert data["exchange"] == "NASDAQ"
        assert data["company_type"] in ("manufacturing", "non-manufacturing")

    def test_lookup_table(self, runner, orchestrator):
        with patch("riskscope.cli.commands.lookup.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["lookup", "F"])

        assert result.exit_code == 0
        assert "Ford Motor Company" in result.output
        assert "Next steps" in result.output

    def test_lookup_not_found(self, runner, orchestrator):
        with patch("riskscope.cli.commands.lookup.build_default_orchestrator", return_value=orchestrator):
            result = runner.invoke(cli, ["lookup", "no such company"])

        assert result.exit_code == 1
        assert "Company not found" in result.output


class TestStatusCommand:
    """Tests for the status command."""

    def test_status_json(self, runner):
        with patch("riskscope.cli.commands.status.config", Config()):
            result = runner.invoke(cli, ["status", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [p["name"] for p in data["providers"]] == ["fmp", "alpha_vantage", "yahoo", "finnhub"]
        assert [p["configured"] for p in data["providers"]] == [False, False, True, False]
        assert len(data["warnings"]) == 3
        assert data["settings"]["max_batch_size"] == 50

    def test_status_table(self, runner):
        with patch("riskscope.cli.commands.status.config", Config(fmp_api_key="test-key")):
            result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0
        assert "Data Providers" in result.output
        assert "fmp" in result.output

    def test_status_shows_limits_not_counters(self, runner):
        """Test status reports configured limits without per-process usage counters."""
        cfg = Config(fmp_daily_limit=250, alpha_vantage_daily_limit=25, yahoo_daily_limit=1000, finnhub_daily_limit=60)
        with patch("riskscope.cli.commands.status.config", cfg):
            result = runner.invoke(cli, ["status", "--json"])

        data = json.loads(result.stdout)
        assert [p["daily_limit"] for p in data["providers"]] == [250, 25, 1000, 60]
        for provider in data["providers"]:
            assert set(provider) == {"name", "configured", "daily_limit"}

    def test_status_table_limit_column(self, runner):
        with patch("riskscope.cli.commands.status.config", Config(yahoo_daily_limit=1000)):
            result = runner.invoke(cli, ["status"])

        assert result.exit_code == 0
        assert "Daily Limit" in result.output
        assert "1,000" in result.output
        assert "Daily Quota" not in result.output
