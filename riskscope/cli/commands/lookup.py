"""Company lookup command."""

import json

import click
from rich.console import Console
from rich.table import Table

from riskscope.cli.error_handler import handle_cli_errors
from riskscope.cli.formatting import MISSING, format_large_number, print_next_steps
from riskscope.core.batch import build_default_orchestrator


@click.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_cli_errors
def lookup(ctx: click.Context, text: str, as_json: bool) -> None:
    """
    Resolve a company name or ticker to a canonical security.

    Shows the ticker, sector, industry, and the manufacturing /
    non-manufacturing classification that selects the Z-Score formula.

    \b
    Examples:
        riskscope lookup AAPL
        riskscope lookup "general motors"
    """
    console: Console = ctx.obj["console"]

    orchestrator = build_default_orchestrator()
    try:
        with console.status(f"[bold blue]Looking up {text}...[/bold blue]"):
            identity = orchestrator.analyzer.resolver.resolve(text)
    finally:
        orchestrator.close()

    if as_json:
        click.echo(json.dumps(identity.to_dict(), indent=2))
        return

    table = Table(
        title=f"[bold]{identity.name}[/bold]",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Field", style="cyan", width=20)
    table.add_column("Value", style="green")

    table.add_row("Ticker", identity.ticker)
    table.add_row("Name", identity.name)
    table.add_row("Exchange", identity.exchange or MISSING)
    table.add_row("Sector", identity.sector)
    table.add_row("Industry", identity.industry)
    table.add_row("Market Cap", format_large_number(identity.market_cap))
    table.add_row("Company Type", identity.company_type.value)
    table.add_row("Source", identity.source or MISSING)
    console.print(table)

    print_next_steps(
        console,
        [
            ("Risk analysis", f"riskscope analyze {identity.ticker}"),
            ("Ratio breakdown", f"riskscope ratios {identity.ticker} --detail"),
        ],
    )
