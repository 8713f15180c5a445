"""kvjournal invoke / query — call a dispatcher function by name."""

from __future__ import annotations

import click

from .common import echo_payload, run_or_exit


@click.command()
@click.argument("function")
@click.argument("args", nargs=-1)
@click.pass_context
def invoke(ctx: click.Context, function: str, args: tuple[str, ...]) -> None:
    """Run a state-changing FUNCTION (init, write, init_journal) with ARGS."""
    echo_payload(run_or_exit(ctx, lambda d: d.invoke(function, list(args))))


@click.command()
@click.argument("function")
@click.argument("args", nargs=-1)
@click.pass_context
def query(ctx: click.Context, function: str, args: tuple[str, ...]) -> None:
    """Run a read-only FUNCTION (read, journals, check) with ARGS."""
    echo_payload(run_or_exit(ctx, lambda d: d.query(function, list(args))))
