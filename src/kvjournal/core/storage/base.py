"""
Abstract base class for ledger backends.

A ledger is the durable key-value substrate the record store is built on.
Every operation touches exactly one key and is atomic for that key; there is
no cross-key transaction.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class LedgerBackend(ABC):
    """Abstract base class for ledger backends."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Read the value stored under *key*. Raises StorageKeyError if not found."""

    @abstractmethod
    async def put(self, key: str, value: bytes) -> None:
        """Write *value* under *key*, overwriting unconditionally."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists in the ledger."""

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        """List keys with optional prefix filter."""


class StorageError(Exception):
    """Base exception for ledger I/O errors."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a ledger key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when a ledger operation is not permitted."""
