"""Batch bankruptcy-risk analysis command."""

import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from riskscope.cli.commands.ratios import company_title, display_analysis
from riskscope.cli.error_handler import handle_cli_errors
from riskscope.cli.formatting import (
    BORDER_PRIMARY,
    BORDER_WARNING,
    MISSING,
    PANEL_PADDING,
    format_z_score,
    get_quality_color,
    get_risk_color,
    get_zone_color,
)
from riskscope.core.batch import BatchResult, build_default_orchestrator


@click.command()
@click.argument("inputs", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--detail", is_flag=True, help="Show full ratio breakdown per company")
@click.pass_context
@handle_cli_errors
def analyze(ctx: click.Context, inputs: tuple[str, ...], as_json: bool, detail: bool) -> None:
    """
    Analyze bankruptcy risk for one or more companies.

    INPUTS are company names or ticker symbols (up to 50). Companies are
    processed in small concurrent groups; a company that cannot be found
    or fetched is reported without stopping the rest.

    \b
    Examples:
        riskscope analyze AAPL MSFT GOOG
        riskscope analyze "ford motor" tesla --detail
        riskscope analyze AAPL F GE --json
    """
    console: Console = ctx.obj["console"]
    orchestrator = build_default_orchestrator()

    try:
        with console.status(f"[bold blue]Analyzing {len(inputs)} companies...[/bold blue]"):
            result = orchestrator.analyze_batch(list(inputs))
    except ValueError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        raise SystemExit(1)
    finally:
        orchestrator.close()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _display_batch(console, result, detail=detail)


def _display_batch(console: Console, result: BatchResult, detail: bool) -> None:
    table = Table(title="[bold]Bankruptcy Risk Analysis[/bold]", header_style="bold cyan")
    table.add_column("Input", style="dim")
    table.add_column("Ticker", style="cyan")
    table.add_column("Company")
    table.add_column("Z-Score", justify="right")
    table.add_column("Zone")
    table.add_column("Data Quality")

    for item in result.per_company:
        if not item.success:
            table.add_row(item.input, MISSING, f"[red]{item.error}[/red]", MISSING, MISSING, MISSING)
            continue
        distress = item.analysis.distress_score
        quality = item.analysis.data_quality
        zone_color = get_zone_color(distress.risk_zone)
        table.add_row(
            item.input,
            item.company.ticker,
            item.company.name,
            format_z_score(distress.z_score),
            f"[{zone_color}]{distress.risk_zone}[/{zone_color}]",
            f"[{get_quality_color(quality.tier)}]{quality.tier}[/] ({quality.score})",
        )
    console.print(table)

    if detail:
        for item in result.per_company:
            if item.success:
                display_analysis(console, company_title(item.company.ticker, item.company.name), item.analysis, detail=True)

    summary = result.portfolio_summary
    lines = [
        f"Companies analyzed: {summary.total_count}",
        f"Average Z-Score: {format_z_score(summary.average_z_score)}",
        f"Portfolio risk: [bold {get_risk_color(summary.portfolio_risk)}]{summary.portfolio_risk}[/]",
        "",
    ]
    for zone, stats in summary.risk_distribution.items():
        if zone == "Unknown" and not stats["count"]:
            continue
        color = get_zone_color(zone)
        lines.append(f"  [{color}]{zone:<9}[/{color}] {stats['count']} ({stats['percentage']}%)")
    for recommendation in summary.recommendations:
        lines.append(f"[yellow]> {recommendation}[/yellow]")

    console.print(Panel("\n".join(lines), title="[bold]Portfolio Summary[/bold]", border_style=BORDER_PRIMARY, padding=PANEL_PADDING))

    if result.partial:
        failed = "\n".join(f"{f['input']}: {f['reason']}" for f in result.failures)
        console.print(Panel(failed, title=f"[bold]{len(result.failures)} failed[/bold]", border_style=BORDER_WARNING))
