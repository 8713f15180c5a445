"""RecordStore — typed access to the ledger's flat key namespace.

The ledger is a single flat namespace shared by two reserved keys (the
bootstrap counter and the journal index), journal records keyed by cpr-nr,
and arbitrary raw keys. RecordStore keeps them apart: reserved keys can only
be written through their own accessors, so no caller-chosen key can clobber
the counter or the index.

Ledger failures are translated into the domain errors here; nothing above
this layer sees a StorageError.
"""

from __future__ import annotations

from loguru import logger

from kvjournal.core.exceptions import (
    DeserializationError,
    InvalidArgumentError,
    LookupFailureError,
    StorageFailureError,
)
from kvjournal.core.storage import LedgerBackend, StorageError, StorageKeyError

from .models import Journal, decode_index, encode_index

COUNTER_KEY = "abc"
INDEX_KEY = "_journalindex"
RESERVED_KEYS = frozenset({COUNTER_KEY, INDEX_KEY})


class RecordStore:
    """Raw and typed get/put over a LedgerBackend."""

    def __init__(self, ledger: LedgerBackend) -> None:
        self.ledger = ledger

    # -- primitives -----------------------------------------------------------

    async def get(self, key: str) -> bytes:
        """Read the value under *key*.

        Raises:
            LookupFailureError: the key is absent or the ledger read failed.
        """
        try:
            return await self.ledger.get(key)
        except StorageKeyError as e:
            raise LookupFailureError(f"Failed to get state for {key}") from e
        except StorageError as e:
            raise LookupFailureError(f"Failed to get state for {key}: {e}") from e

    async def put(self, key: str, value: bytes) -> None:
        """Write *value* under *key*, overwriting unconditionally.

        Raises:
            StorageFailureError: the ledger write failed.
        """
        try:
            await self.ledger.put(key, value)
        except StorageError as e:
            raise StorageFailureError(f"Failed to put state for {key}: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return await self.ledger.exists(key)
        except StorageError as e:
            raise LookupFailureError(f"Failed to probe state for {key}: {e}") from e

    async def keys(self) -> list[str]:
        """All keys in the ledger, reserved keys included."""
        try:
            return [key async for key in self.ledger.list_keys()]
        except StorageError as e:
            raise LookupFailureError(f"Failed to list ledger keys: {e}") from e

    # -- raw values -----------------------------------------------------------

    async def get_raw(self, key: str) -> bytes:
        return await self.get(key)

    async def put_raw(self, key: str, value: bytes) -> None:
        _check_unreserved(key)
        await self.put(key, value)

    # -- journals -------------------------------------------------------------

    async def get_journal(self, cpr: str) -> Journal | None:
        """Return the journal stored under *cpr*, or None if the key is absent.

        Raises:
            DeserializationError: the key holds something that is not a journal
                for *cpr*.
        """
        if not await self.exists(cpr):
            return None
        journal = Journal.from_bytes(await self.get(cpr))
        if journal.cpr != cpr:
            raise DeserializationError(f"record under {cpr!r} belongs to cpr-nr {journal.cpr!r}")
        return journal

    async def put_journal(self, journal: Journal) -> None:
        _check_unreserved(journal.cpr)
        await self.put(journal.cpr, journal.to_bytes())

    # -- reserved keys --------------------------------------------------------

    async def get_index(self) -> list[str]:
        """Return the journal index.

        A ledger that was never bootstrapped has no index key; that reads as
        an empty index.
        """
        if not await self.exists(INDEX_KEY):
            logger.warning(f"Journal index {INDEX_KEY!r} not found, treating it as empty")
            return []
        return decode_index(await self.get(INDEX_KEY))

    async def put_index(self, cprs: list[str]) -> None:
        await self.put(INDEX_KEY, encode_index(cprs))

    async def get_counter(self) -> int:
        raw = await self.get(COUNTER_KEY)
        try:
            return int(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise DeserializationError(f"counter value {raw!r} is not an integer") from e

    async def put_counter(self, value: int) -> None:
        await self.put(COUNTER_KEY, str(value).encode("utf-8"))


def _check_unreserved(key: str) -> None:
    if key in RESERVED_KEYS:
        raise InvalidArgumentError(f"{key!r} is a reserved key and cannot be written directly")
