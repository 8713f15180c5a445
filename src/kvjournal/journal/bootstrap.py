"""(Re-)initialize the ledger's process-wide state.

Seeds the counter and clears the journal index. Existing journal records are
left in place; they stay readable by key but drop out of the index until
``JournalRegistry.rebuild_index`` is run.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from loguru import logger

from kvjournal.core.events import LEDGER_RESET, Event, EventBus
from kvjournal.core.exceptions import InvalidArgumentError

from .store import RecordStore

_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_counter(value: str | int) -> int:
    """Parse a decimal integer argument; no whitespace, underscores or floats."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value)
    raise InvalidArgumentError("Expecting integer value for asset holding")


async def reset(store: RecordStore, args: Sequence[str | int], bus: EventBus | None = None) -> int:
    """Write the counter, then an empty index.

    Args:
        store: Record store to reset.
        args: Exactly one decimal integer.
        bus: Optional event bus; receives ``ledger.reset`` on success.

    Returns:
        The counter value written.

    Raises:
        InvalidArgumentError: wrong argument count or a non-integer value.
        StorageFailureError: a write failed. If the counter write fails the
            index is not touched.
    """
    if len(args) != 1:
        raise InvalidArgumentError("Incorrect number of arguments. Expecting 1")
    counter = parse_counter(args[0])

    await store.put_counter(counter)
    await store.put_index([])
    logger.info(f"Ledger reset: counter={counter}, journal index cleared")

    if bus is not None:
        await bus.emit(Event(name=LEDGER_RESET, payload={"counter": counter}, source="bootstrap"))
    return counter
