"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click

from kvjournal.core.exceptions import KvJournalError


def load_config(ctx: click.Context):
    """Load config from the file given to the command group."""
    from kvjournal.core.config import Config

    return Config(config_file=ctx.obj["config_file"])


def create_dispatcher(config):
    """Configure logging and build a Dispatcher over the configured ledger.

    Each command runs in its own process, so a ledger that does not persist
    is refused.
    """
    from kvjournal.core.exceptions import ConfigurationError
    from kvjournal.core.storage import create_ledger
    from kvjournal.core.utils.logging import setup_logging
    from kvjournal.journal import Dispatcher, RecordStore

    settings = config.validated()
    if settings.ledger.backend == "memory":
        raise ConfigurationError(
            "The memory ledger does not persist between commands; set ledger.backend to 'local'"
        )
    setup_logging(settings)
    return Dispatcher(RecordStore(create_ledger(config)))


def run_or_exit(ctx: click.Context, action: Callable[[Any], Awaitable[Any]]) -> Any:
    """Run *action* against a fresh dispatcher; report kvjournal errors and exit 1."""
    try:
        dispatcher = create_dispatcher(load_config(ctx))
        return asyncio.run(action(dispatcher))
    except KvJournalError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def echo_payload(payload: bytes | None) -> None:
    if payload:
        click.echo(payload.decode("utf-8", errors="replace"))
