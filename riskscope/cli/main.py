"""
Riskscope CLI - bankruptcy risk analysis for public companies.

Entry point for the command-line interface. Provides commands for:
- Batch analysis (Altman Z-Score, ratios, data quality, portfolio summary)
- Single-ticker ratio analysis
- Company lookup from free text
- Provider configuration and quota status

Usage:
    riskscope --help
    riskscope analyze apple MSFT "ford motor"
    riskscope analyze AAPL --json
    riskscope ratios AAPL
    riskscope lookup "international business machines"
    riskscope status
"""

import logging
from collections import OrderedDict

import click
from rich.console import Console
from rich.logging import RichHandler

from riskscope import __version__
from riskscope.cli.commands import analyze, lookup, ratios, status
from riskscope.cli.error_handler import handle_cli_errors
from riskscope.config import config


class OrderedGroup(click.Group):
    """Custom group that displays commands in organized categories."""

    COMMAND_GROUPS: OrderedDict[str, list[str]] = OrderedDict([
        ("Analysis", ["analyze", "ratios"]),
        ("Research", ["lookup"]),
        ("Setup", ["status"]),
    ])

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Write commands in organized groups."""
        for group_name, cmd_names in self.COMMAND_GROUPS.items():
            commands = []
            for cmd_name in cmd_names:
                cmd = self.get_command(ctx, cmd_name)
                if cmd:
                    help_text = cmd.get_short_help_str(limit=formatter.width)
                    commands.append((cmd_name, help_text))

            if commands:
                with formatter.section(group_name):
                    formatter.write_dl(commands)


# Global console for rich output
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich; --verbose lowers the level to INFO."""
    level = logging.INFO if verbose else getattr(logging, config.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(cls=OrderedGroup)
@click.version_option(version=__version__, prog_name="riskscope")
@click.option("--verbose", "-v", is_flag=True, help="Show provider fallbacks and progress logs")
@click.pass_context
@handle_cli_errors
def cli(ctx: click.Context, verbose: bool) -> None:
    """
    Riskscope - bankruptcy risk analysis for public companies.

    Resolves company names or tickers, fetches financial statements and
    quotes with multi-provider fallback, and scores each company with the
    Altman Z-Score, financial ratios, and a data quality assessment.

    \b
    Examples:
        riskscope analyze apple MSFT "ford motor"   # Portfolio analysis
        riskscope analyze AAPL --json               # Output as JSON
        riskscope ratios AAPL --detail              # Full ratio breakdown
        riskscope lookup "coca cola"                # Resolve to a ticker
        riskscope status                            # Provider keys and quotas
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console
    configure_logging(verbose)
    config.validate()


cli.add_command(analyze.analyze)
cli.add_command(ratios.ratios)
cli.add_command(lookup.lookup)
cli.add_command(status.status)


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
