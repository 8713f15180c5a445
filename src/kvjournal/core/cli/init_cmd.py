"""kvjournal init — reset the counter and clear the journal index."""

from __future__ import annotations

import click

from .common import run_or_exit


@click.command()
@click.argument("counter")
@click.pass_context
def init(ctx: click.Context, counter: str) -> None:
    """Reset the ledger with an initial COUNTER value."""
    run_or_exit(ctx, lambda d: d.init([counter]))
    click.echo(f"Ledger reset (counter={counter}, journal index cleared).")
