"""kvjournal CLI — entry point for init, invoke, query, check and reindex."""

import click

from kvjournal import __version__


@click.group()
@click.version_option(version=__version__, package_name="kvjournal")
@click.option(
    "--config",
    "config_file",
    envvar="KVJOURNAL_CONFIG",
    default="kvjournal.yaml",
    show_default=True,
    help="YAML or JSON config file (ignored if missing).",
)
@click.pass_context
def main(ctx: click.Context, config_file: str) -> None:
    """kvjournal — a ledger-backed journal record store."""
    ctx.obj = {"config_file": config_file}


# Register subcommands
from .call_cmd import invoke, query
from .init_cmd import init
from .repair_cmd import check, reindex

main.add_command(init)
main.add_command(invoke)
main.add_command(query)
main.add_command(check)
main.add_command(reindex)
