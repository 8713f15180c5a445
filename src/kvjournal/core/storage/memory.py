"""In-memory ledger backend. State lives for the lifetime of the instance."""

from collections.abc import AsyncIterator

from .base import LedgerBackend, StorageKeyError


class MemoryLedger(LedgerBackend):
    """Dict-backed ledger, used for tests and embedding."""

    def __init__(self, initial: dict[str, bytes] | None = None, **config):
        super().__init__(**config)
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes:
        try:
            return self._data[key]
        except KeyError:
            raise StorageKeyError(f"Key not found: {key}") from None

    async def put(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def exists(self, key: str) -> bool:
        return key in self._data

    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        for key in sorted(self._data):
            if prefix and not key.startswith(prefix):
                continue
            yield key

    def snapshot(self) -> dict[str, bytes]:
        """Return a copy of the current contents."""
        return dict(self._data)
