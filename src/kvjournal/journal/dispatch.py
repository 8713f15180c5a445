"""Init / invoke / query entry points over the record store.

Maps a function name and a list of string arguments onto the bootstrap,
raw read/write, and journal registry operations. Every entry point returns
a payload (``bytes``) or ``None``; errors propagate unchanged as
KvJournalError subclasses.

Usage::

    dispatcher = Dispatcher(RecordStore(MemoryLedger()))
    await dispatcher.init(["100"])
    await dispatcher.invoke("init_journal", ["Alice", "1234567890", "open", "active", "2024-01-01"])
    raw = await dispatcher.query("read", ["1234567890"])
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Sequence

from loguru import logger

from kvjournal.core.events import EventBus
from kvjournal.core.exceptions import InvalidArgumentError, UnknownOperationError

from . import bootstrap
from .registry import JournalRegistry
from .store import RecordStore

Handler = Callable[[Sequence[str]], Awaitable[bytes | None]]


class Dispatcher:
    """Routes invocations and queries to their handlers."""

    def __init__(self, store: RecordStore, bus: EventBus | None = None) -> None:
        self.store = store
        self.bus = bus
        self.registry = JournalRegistry(store, bus=bus)

        self._invoke_handlers: dict[str, Handler] = {
            "init": self.init,
            "write": self._write,
            "init_journal": self._init_journal,
        }
        self._query_handlers: dict[str, Handler] = {
            "read": self._read,
            "journals": self._journals,
            "check": self._check,
        }

    @property
    def invoke_functions(self) -> list[str]:
        return sorted(self._invoke_handlers)

    @property
    def query_functions(self) -> list[str]:
        return sorted(self._query_handlers)

    # -- entry points -----------------------------------------------------------

    async def init(self, args: Sequence[str]) -> None:
        """Reset the ledger: seed the counter and clear the journal index."""
        await bootstrap.reset(self.store, list(args), bus=self.bus)
        return None

    async def invoke(self, function: str, args: Sequence[str]) -> bytes | None:
        """Run a state-changing function."""
        logger.debug(f"invoke is running {function}")
        handler = self._invoke_handlers.get(function)
        if handler is None:
            logger.warning(f"invoke did not find func: {function}")
            raise UnknownOperationError(f"Received unknown function invocation: {function}")
        return await handler(args)

    async def query(self, function: str, args: Sequence[str]) -> bytes | None:
        """Run a read-only function."""
        logger.debug(f"query is running {function}")
        handler = self._query_handlers.get(function)
        if handler is None:
            logger.warning(f"query did not find func: {function}")
            raise UnknownOperationError(f"Received unknown function query: {function}")
        return await handler(args)

    # -- handlers ---------------------------------------------------------------

    async def _write(self, args: Sequence[str]) -> None:
        await self.registry.write_raw(*args)

    async def _init_journal(self, args: Sequence[str]) -> None:
        await self.registry.create_journal(*args)

    async def _read(self, args: Sequence[str]) -> bytes:
        if len(args) != 1:
            raise InvalidArgumentError("Incorrect number of arguments. Expecting name of the var to query")
        return await self.registry.read_raw(args[0])

    async def _journals(self, args: Sequence[str]) -> bytes:
        _no_args(args)
        return json.dumps(await self.registry.list_journals()).encode("utf-8")

    async def _check(self, args: Sequence[str]) -> bytes:
        _no_args(args)
        report = await self.registry.check()
        return json.dumps(report.to_dict()).encode("utf-8")


def _no_args(args: Sequence[str]) -> None:
    if args:
        raise InvalidArgumentError("Incorrect number of arguments. Expecting 0")
