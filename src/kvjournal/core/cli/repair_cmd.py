"""kvjournal check / reindex — inspect and repair the journal index.

Creating a journal writes the record before the index. If the index write
fails the record is stored but unlisted; ``check`` finds those records and
``reindex`` rewrites the index from a key scan.
"""

from __future__ import annotations

import sys

import click

from .common import run_or_exit


@click.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Compare the journal index with the stored journal records."""
    report = run_or_exit(ctx, lambda d: d.registry.check())

    click.echo(f"Indexed journals: {len(report.indexed)}")
    for label, items in (
        ("Unindexed", report.unindexed),
        ("Dangling", report.dangling),
        ("Duplicated", report.duplicates),
    ):
        if items:
            click.echo(f"{label}: {', '.join(items)}")

    if not report.consistent:
        click.echo("Index is inconsistent. Run 'kvjournal reindex' to repair it.")
        sys.exit(2)
    click.echo("Index is consistent.")


@click.command()
@click.pass_context
def reindex(ctx: click.Context) -> None:
    """Rebuild the journal index from the stored journal records."""
    rebuilt = run_or_exit(ctx, lambda d: d.registry.rebuild_index())
    click.echo(f"Journal index rebuilt with {len(rebuilt)} entries.")
