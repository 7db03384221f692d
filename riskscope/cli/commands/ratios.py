"""Single-company ratio analysis command."""

import json
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from riskscope.cli.error_handler import handle_cli_errors
from riskscope.cli.formatting import (
    BORDER_PRIMARY,
    PANEL_PADDING,
    format_ratio,
    format_z_score,
    get_insight_color,
    get_quality_color,
    get_zone_color,
    get_zscore_verdict,
    print_next_steps,
)
from riskscope.core.batch import build_default_orchestrator
from riskscope.core.scoring import AnalysisResult, generate_ratio_insights

# (group, field, label, is_percent)
RATIO_ROWS = [
    ("liquidity", "current_ratio", "Current Ratio", False),
    ("liquidity", "quick_ratio", "Quick Ratio", False),
    ("liquidity", "cash_ratio", "Cash Ratio", False),
    ("leverage", "debt_to_equity", "Debt / Equity", False),
    ("leverage", "debt_to_assets", "Debt / Assets", False),
    ("leverage", "interest_coverage", "Interest Coverage", False),
    ("profitability", "gross_margin", "Gross Margin", True),
    ("profitability", "operating_margin", "Operating Margin", True),
    ("profitability", "net_margin", "Net Margin", True),
    ("profitability", "return_on_assets", "ROA", True),
    ("profitability", "return_on_equity", "ROE", True),
    ("efficiency", "asset_turnover", "Asset Turnover", False),
    ("efficiency", "inventory_turnover", "Inventory Turnover", False),
    ("cash_flow", "operating_cash_flow_to_sales", "OCF / Sales", False),
    ("cash_flow", "free_cash_flow_to_sales", "FCF / Sales", False),
    ("cash_flow", "cash_flow_coverage", "OCF / Current Liabilities", False),
    ("market", "price_to_earnings", "P/E", False),
    ("market", "price_to_book", "P/B", False),
    ("market", "price_to_sales", "P/S", False),
]


def display_analysis(console: Console, title: str, analysis: AnalysisResult, detail: bool = False) -> None:
    """Render the distress score, data quality, and (with detail) every ratio."""
    distress = analysis.distress_score
    quality = analysis.data_quality
    verdict, verdict_color = get_zscore_verdict(distress.risk_zone)
    zone_color = get_zone_color(distress.risk_zone)

    lines = [
        f"Z-Score: [bold {zone_color}]{format_z_score(distress.z_score)}[/bold {zone_color}] "
        f"([{zone_color}]{distress.risk_zone}[/{zone_color}], {distress.formula_variant} formula)",
        f"Verdict: [{verdict_color}]{verdict}[/{verdict_color}]",
        f"[dim]{distress.interpretation}[/dim]",
        f"Confidence: [{get_quality_color(distress.confidence)}]{distress.confidence}[/]",
        f"Data quality: [{get_quality_color(quality.tier)}]{quality.tier}[/] ({quality.score}/100)",
    ]
    for issue in quality.issues:
        lines.append(f"  [yellow]! {issue}[/yellow]")

    console.print(Panel("\n".join(lines), title=f"[bold]{title}[/bold]", border_style=BORDER_PRIMARY, padding=PANEL_PADDING))

    if not detail:
        return

    if distress.components is not None:
        components = Table(title="Z-Score Components", header_style="bold cyan")
        components.add_column("Component", style="cyan")
        components.add_column("Ratio", justify="right")
        components.add_column("Contribution", justify="right")
        c = distress.components
        rows = [
            ("A  Working Capital / Assets", c.a_working_capital_to_assets, c.a_contribution),
            ("B  Retained Earnings / Assets", c.b_retained_earnings_to_assets, c.b_contribution),
            ("C  EBIT / Assets", c.c_ebit_to_assets, c.c_contribution),
            ("D  Market Value / Liabilities", c.d_market_value_to_liabilities, c.d_contribution),
            ("E  Sales / Assets", c.e_sales_to_assets, c.e_contribution),
        ]
        for label, ratio, contribution in rows:
            components.add_row(label, f"{ratio:.3f}", "-" if contribution is None else f"{contribution:.3f}")
        console.print(components)

    table = Table(title="Financial Ratios", header_style="bold cyan")
    table.add_column("Group", style="dim")
    table.add_column("Ratio", style="cyan")
    table.add_column("Value", justify="right")
    for group, name, label, is_percent in RATIO_ROWS:
        value = getattr(getattr(analysis.ratios, group), name)
        table.add_row(group.replace("_", " "), label, format_ratio(value, percent=is_percent))
    console.print(table)

    insights = generate_ratio_insights(analysis.ratios, distress)
    if insights:
        console.print("[bold]Insights[/bold]")
        for insight in insights:
            color = get_insight_color(insight.type)
            console.print(f"  [{color}]{insight.category}:[/{color}] {insight.message}")


@click.command()
@click.argument("ticker")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--detail", is_flag=True, help="Show Z-Score components and every ratio")
@click.option("--strict", is_flag=True, help="Fail instead of reporting an Unknown Z-Score")
@click.pass_context
@handle_cli_errors
def ratios(ctx: click.Context, ticker: str, as_json: bool, detail: bool, strict: bool) -> None:
    """
    Calculate ratios and the Altman Z-Score for one ticker.

    Skips free-text resolution: the ticker is looked up directly.

    \b
    Examples:
        riskscope ratios AAPL
        riskscope ratios F --detail
        riskscope ratios MSFT --json
        riskscope ratios XYZ --strict
    """
    console: Console = ctx.obj["console"]
    ticker = ticker.strip().upper()

    orchestrator = build_default_orchestrator(strict=strict)
    try:
        with console.status(f"[bold blue]Fetching financial data for {ticker}...[/bold blue]"):
            analysis = orchestrator.analyzer.get_single_company_ratios(ticker)
    finally:
        orchestrator.close()

    if as_json:
        payload: dict = {"ticker": ticker, **analysis.to_dict()}
        payload["insights"] = [i.to_dict() for i in generate_ratio_insights(analysis.ratios, analysis.distress_score)]
        click.echo(json.dumps(payload, indent=2))
        return

    display_analysis(console, ticker, analysis, detail=detail)
    if not detail:
        print_next_steps(console, [("Full breakdown", f"riskscope ratios {ticker} --detail")])


def company_title(ticker: str, name: Optional[str]) -> str:
    return f"{ticker} - {name}" if name and name != ticker else ticker
