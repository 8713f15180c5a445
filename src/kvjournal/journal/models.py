"""Data models for the journal registry.

A Journal is persisted as a JSON object with the fields ``name``,
``cpr_nr``, ``status``, ``state`` and ``timestamp`` in that order, all
strings. The journal index is a JSON array of cpr-nr strings in insertion
order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from kvjournal.core.exceptions import DeserializationError

# Persisted field names, in encoding order
JOURNAL_FIELDS = ("name", "cpr_nr", "status", "state", "timestamp")


@dataclass(frozen=True)
class Journal:
    """A journal record, keyed in the ledger by its cpr-nr.

    Attributes:
        name: Informational display name.
        cpr: Business identifier; doubles as the ledger key.
        status: Opaque status string.
        state: Opaque state string.
        timestamp: Opaque timestamp string (not parsed).
    """

    name: str
    cpr: str
    status: str
    state: str
    timestamp: str

    def __post_init__(self):
        for attr in ("name", "cpr", "status", "state", "timestamp"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Journal.{attr} must be a non-empty string")

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "cpr_nr": self.cpr,
            "status": self.status,
            "state": self.state,
            "timestamp": self.timestamp,
        }

    def to_bytes(self) -> bytes:
        """Encode to the persisted JSON form."""
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Journal:
        """Decode the persisted JSON form.

        Raises:
            DeserializationError: if *data* is not a well-formed journal record.
        """
        try:
            obj = json.loads(data)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise DeserializationError(f"journal record is not valid JSON: {e}") from e
        if not isinstance(obj, dict):
            raise DeserializationError(f"journal record must be a JSON object, got {type(obj).__name__}")

        missing = [f for f in JOURNAL_FIELDS if f not in obj]
        if missing:
            raise DeserializationError(f"journal record is missing fields: {', '.join(missing)}")
        try:
            return cls(
                name=obj["name"],
                cpr=obj["cpr_nr"],
                status=obj["status"],
                state=obj["state"],
                timestamp=obj["timestamp"],
            )
        except ValueError as e:
            raise DeserializationError(str(e)) from e

    def __repr__(self) -> str:
        return f"Journal(cpr='{self.cpr}', name='{self.name}', status='{self.status}')"


def encode_index(cprs: list[str]) -> bytes:
    """Encode the journal index as a JSON array."""
    return json.dumps(list(cprs), ensure_ascii=False).encode("utf-8")


def decode_index(data: bytes) -> list[str]:
    """Decode the journal index.

    ``null`` decodes to an empty index; ledgers seeded by older deployments
    stored the cleared index that way.

    Raises:
        DeserializationError: if *data* is not a JSON array of strings.
    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DeserializationError(f"journal index is not valid JSON: {e}") from e
    if obj is None:
        return []
    if not isinstance(obj, list) or not all(isinstance(item, str) for item in obj):
        raise DeserializationError("journal index must be a JSON array of strings")
    return obj


@dataclass
class IndexReport:
    """Result of comparing the journal index with the stored records.

    Attributes:
        indexed: The index as stored, duplicates included.
        unindexed: Journal records with no index entry, sorted by key.
        dangling: Index entries with no journal record behind them.
        duplicates: Index entries that appear more than once.
    """

    indexed: list[str] = field(default_factory=list)
    unindexed: list[str] = field(default_factory=list)
    dangling: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return not (self.unindexed or self.dangling or self.duplicates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "consistent": self.consistent,
            "indexed": self.indexed,
            "unindexed": self.unindexed,
            "dangling": self.dangling,
            "duplicates": self.duplicates,
        }
