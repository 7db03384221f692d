"""Status command showing provider configuration and request limits."""

import json

import click
from rich.console import Console
from rich.table import Table

from riskscope.cli.error_handler import handle_cli_errors
from riskscope.config import config
from riskscope.core.data.cache import get_cache
from riskscope.core.data.providers import build_default_providers


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_cli_errors
def status(ctx: click.Context, as_json: bool) -> None:
    """
    Show data provider configuration and daily request limits.

    Providers are tried in the order listed. A provider without an API key
    is skipped; Yahoo Finance needs no key.

    \b
    Examples:
        riskscope status
    """
    console: Console = ctx.obj["console"]
    providers = build_default_providers(config)
    # Request counters live in each process, so only the configured limits are shown.
    rows = [
        {"name": p.name, "configured": p.is_configured, "daily_limit": p.quota.limit}
        for p in providers
    ]
    for provider in providers:
        provider.close()

    settings = {
        "cache_ttl_seconds": config.cache_ttl_seconds,
        "batch_group_size": config.batch_group_size,
        "batch_pause_seconds": config.batch_pause_seconds,
        "max_batch_size": config.max_batch_size,
    }

    if as_json:
        click.echo(json.dumps({
            "providers": rows,
            "settings": settings,
            "cache": get_cache().stats,
            "warnings": config.warnings(),
        }, indent=2))
        return

    console.print()
    table = Table(title="[bold]Data Providers[/bold] (fallback order)", header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Provider", style="cyan")
    table.add_column("Status")
    table.add_column("Daily Limit", justify="right")

    for position, item in enumerate(rows, start=1):
        state = "[green]Ready[/green]" if item["configured"] else "[dim]No API key[/dim]"
        table.add_row(str(position), item["name"], state, f"{item['daily_limit']:,}")
    console.print(table)

    console.print(
        f"[dim]Cache TTL {settings['cache_ttl_seconds']}s, groups of {settings['batch_group_size']} "
        f"with {settings['batch_pause_seconds']:g}s pause, max {settings['max_batch_size']} per batch[/dim]"
    )
    for warning in config.warnings():
        console.print(f"[yellow]! {warning}[/yellow]")
