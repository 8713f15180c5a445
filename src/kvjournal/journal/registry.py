"""JournalRegistry — uniquely keyed journal records plus their index.

Every journal is stored under its cpr-nr, and the journal index lists the
cpr-nr of every journal in creation order. Creating a journal is three
independent ledger writes' worth of work:

1. write the record under its cpr-nr,
2. read the index,
3. write the index back with the cpr-nr appended.

The ledger has no multi-key transaction, so a failure after step 1 leaves a
durable record that the index does not list. Nothing is rolled back.
``check()`` reports such records and ``rebuild_index()`` repairs the index
from a key scan.
"""

from __future__ import annotations

import json

from loguru import logger

from kvjournal.core.events import JOURNAL_CREATED, JOURNAL_REINDEXED, Event, EventBus
from kvjournal.core.exceptions import (
    DeserializationError,
    DuplicateKeyError,
    InvalidArgumentError,
    LookupFailureError,
    StorageFailureError,
)

from .models import IndexReport, Journal
from .store import RESERVED_KEYS, RecordStore

_ORDINALS = ("1st", "2nd", "3rd", "4th", "5th")


def _require_strings(args: tuple, expected: int) -> None:
    """Check argument count and that each argument is a non-empty string."""
    if len(args) != expected:
        raise InvalidArgumentError(f"Incorrect number of arguments. Expecting {expected}")
    for ordinal, arg in zip(_ORDINALS, args):
        if not isinstance(arg, str) or not arg:
            raise InvalidArgumentError(f"{ordinal} argument must be a non-empty string")


class JournalRegistry:
    """Create journals with a uniqueness check and keep the index current."""

    def __init__(self, store: RecordStore, bus: EventBus | None = None) -> None:
        self.store = store
        self.bus = bus

    async def _emit(self, name: str, payload: dict) -> None:
        if self.bus is not None:
            await self.bus.emit(Event(name=name, payload=payload, source="journal"))

    # -- create -----------------------------------------------------------------

    async def create_journal(self, *args: str) -> Journal:
        """Create a journal from ``name, cpr, status, state, timestamp``.

        Returns:
            The stored Journal.

        Raises:
            InvalidArgumentError: not exactly 5 arguments, an empty argument,
                or a reserved cpr-nr. No ledger write happens.
            LookupFailureError: the cpr-nr probe or the index read failed.
            DuplicateKeyError: the cpr-nr key is already in use.
            StorageFailureError: the record or the index write failed.
            DeserializationError: the stored index is not a list of strings.
        """
        _require_strings(args, 5)
        name, cpr, status, state, timestamp = args
        if cpr in RESERVED_KEYS:
            raise InvalidArgumentError(f"2nd argument {cpr!r} is a reserved key")

        logger.debug(f"start init journal {cpr}")

        try:
            taken = await self.store.exists(cpr)
        except LookupFailureError as e:
            raise LookupFailureError("Failed to get cpr-nr") from e
        if taken:
            logger.warning(f"This cpr-nr already exists: {cpr}")
            raise DuplicateKeyError(f"This cpr-nr already exists: {cpr}")

        journal = Journal(name=name, cpr=cpr, status=status, state=state, timestamp=timestamp)
        await self.store.put_journal(journal)

        # The record is durable from here on; a failure below leaves it unindexed.
        try:
            index = await self.store.get_index()
        except LookupFailureError as e:
            logger.warning(f"Journal {cpr} written but not indexed: {e}")
            raise LookupFailureError("Failed to get journal index") from e
        except DeserializationError:
            logger.warning(f"Journal {cpr} written but not indexed: index is unreadable")
            raise

        index.append(cpr)
        logger.debug(f"journal index: {index}")
        try:
            await self.store.put_index(index)
        except StorageFailureError:
            logger.warning(f"Journal {cpr} written but not indexed: index write failed")
            raise

        logger.info(f"Created journal {cpr}")
        await self._emit(JOURNAL_CREATED, {"cpr": cpr, "position": len(index) - 1})
        return journal

    # -- raw access -------------------------------------------------------------

    async def read_raw(self, key: str) -> bytes:
        """Return the bytes stored under *key*, reserved keys included.

        Raises:
            LookupFailureError: the key is absent or the read failed. The
                message is a JSON error payload naming the key.
        """
        try:
            return await self.store.get_raw(key)
        except LookupFailureError as e:
            raise LookupFailureError(json.dumps({"Error": f"Failed to get state for {key}"})) from e

    async def write_raw(self, *args: str) -> None:
        """Write ``value`` under ``key`` verbatim. Expects ``key, value``.

        No schema check: this can overwrite a journal record, though not the
        counter or the index.
        """
        if len(args) != 2:
            raise InvalidArgumentError(
                "Incorrect number of arguments. Expecting 2. name of the variable and value to set"
            )
        key, value = args
        if not isinstance(key, str) or not isinstance(value, str | bytes):
            raise InvalidArgumentError("key must be a string and value a string or bytes")
        data = value.encode("utf-8") if isinstance(value, str) else value
        await self.store.put_raw(key, data)
        logger.debug(f"wrote {len(data)} bytes to {key!r}")

    # -- queries ----------------------------------------------------------------

    async def get_journal(self, cpr: str) -> Journal:
        """Return the journal stored under *cpr*.

        Raises:
            LookupFailureError: no record under *cpr*.
            DeserializationError: the value under *cpr* is not a journal.
        """
        journal = await self.store.get_journal(cpr)
        if journal is None:
            raise LookupFailureError(f"No journal for cpr-nr {cpr}")
        return journal

    async def list_journals(self) -> list[str]:
        """Return the journal index in creation order."""
        return await self.store.get_index()

    async def _scan_journals(self) -> list[str]:
        """Keys holding a decodable journal whose cpr-nr matches the key."""
        found = []
        for key in await self.store.keys():
            if key in RESERVED_KEYS:
                continue
            try:
                await self.store.get_journal(key)
            except DeserializationError:
                continue  # a raw value, not a journal
            found.append(key)
        return found

    # -- consistency ------------------------------------------------------------

    async def check(self) -> IndexReport:
        """Compare the index with the journal records actually stored."""
        index = await self.store.get_index()
        journals = await self._scan_journals()

        seen: set[str] = set()
        duplicates: list[str] = []
        for cpr in index:
            if cpr in seen and cpr not in duplicates:
                duplicates.append(cpr)
            seen.add(cpr)

        stored = set(journals)
        report = IndexReport(
            indexed=index,
            unindexed=sorted(stored - seen),
            dangling=[cpr for cpr in dict.fromkeys(index) if cpr not in stored],
            duplicates=duplicates,
        )
        if not report.consistent:
            logger.warning(
                f"Journal index inconsistent: {len(report.unindexed)} unindexed, "
                f"{len(report.dangling)} dangling, {len(report.duplicates)} duplicated"
            )
        return report

    async def rebuild_index(self) -> list[str]:
        """Rewrite the index from a key scan.

        Entries that still resolve to a journal keep their order; dangling
        and repeated entries are dropped; unindexed journals are appended in
        key order.

        Returns:
            The index as written.
        """
        report = await self.check()
        dangling = set(report.dangling)
        rebuilt = [cpr for cpr in dict.fromkeys(report.indexed) if cpr not in dangling]
        rebuilt.extend(report.unindexed)

        await self.store.put_index(rebuilt)
        logger.info(
            f"Rebuilt journal index: {len(rebuilt)} entries "
            f"({len(report.unindexed)} added, {len(report.dangling)} dropped)"
        )
        await self._emit(
            JOURNAL_REINDEXED,
            {"count": len(rebuilt), "added": report.unindexed, "dropped": report.dangling},
        )
        return rebuilt
