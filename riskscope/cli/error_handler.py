"""Shared CLI error handling decorator.

Maps the Riskscope error taxonomy to red, human-readable messages and exit
code 1 in one place, so commands only handle what is specific to them.

Usage:
    @click.command()
    @click.pass_context
    @handle_cli_errors
    def my_command(ctx, ...):
        ...
"""

import functools
import logging

import click
from rich.console import Console

from riskscope.core.data.exceptions import (
    AllProvidersFailedError,
    BatchTotalFailure,
    ComputationError,
    ConfigurationError,
    ProviderError,
    ResolutionError,
)

logger = logging.getLogger(__name__)


def handle_cli_errors(f):
    """Decorator that catches Riskscope exceptions with Rich-formatted output.

    Must be applied AFTER @click.pass_context so the console is available
    via ctx.obj["console"].
    """

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context(silent=True)
        console = ctx.obj["console"] if ctx and ctx.obj and "console" in ctx.obj else Console()

        try:
            return f(*args, **kwargs)
        except SystemExit:
            raise  # Don't intercept explicit exits
        except ResolutionError as e:
            console.print(f"[red]Company not found:[/red] {e}")
            raise SystemExit(1)
        except AllProvidersFailedError as e:
            console.print(f"[red]Data unavailable:[/red] {e}")
            console.print("[yellow]Check provider API keys with: riskscope status[/yellow]")
            raise SystemExit(1)
        except ProviderError as e:
            console.print(f"[red]Provider error:[/red] {e}")
            raise SystemExit(1)
        except BatchTotalFailure as e:
            console.print(f"[red]Batch failed:[/red] {e}")
            for failure in e.failures:
                console.print(f"  [dim]{failure['input']}:[/dim] {failure['reason']}")
            raise SystemExit(1)
        except ComputationError as e:
            console.print(f"[red]Cannot score:[/red] {e}")
            raise SystemExit(1)
        except ConfigurationError as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            raise SystemExit(1)
        except click.exceptions.Exit:
            raise  # Don't intercept Click exits
        except click.ClickException:
            raise
        except Exception as e:
            logger.exception("Unexpected error in %s command", f.__name__)
            console.print(f"[red]Unexpected error:[/red] {e}")
            raise SystemExit(1)

    return wrapper
