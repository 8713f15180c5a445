"""
Local filesystem ledger backend.

Each key is stored as one file under ``base_path``. Keys are arbitrary
strings, so file names are the percent-encoded key; a key can never
address a path outside ``base_path``. Writes go to a temp file that is
renamed into place, which keeps each single-key put atomic.

Percent-encoding turns every non-ASCII UTF-8 byte into three characters,
so an encoded name longer than ``_MAX_NAME`` is replaced by the SHA-256 of
the key with a ``.hval`` suffix, and the key itself is kept in a ``.key``
sidecar next to it.
"""

import hashlib
import os
from collections.abc import AsyncIterator
from pathlib import Path
from urllib.parse import quote, unquote

import aiofiles
import aiofiles.os
from loguru import logger

from .base import LedgerBackend, StorageError, StorageKeyError, StoragePermissionError

_SUFFIX = ".val"
_HASHED_SUFFIX = ".hval"
_KEY_SUFFIX = ".key"
# Leaves room for the suffix and ".tmp" under the common 255-byte name limit
_MAX_NAME = 200


class LocalLedger(LedgerBackend):
    """Local filesystem ledger backend."""

    def __init__(self, base_path: str = "~/.kvjournal-data/ledger", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Map a ledger key to its file under ``base_path``."""
        if not isinstance(key, str):
            raise StoragePermissionError(f"Ledger key must be a string, got {type(key).__name__}")
        if "\x00" in key:
            raise StoragePermissionError("Ledger key cannot contain null bytes.")
        # With no safe characters "/" is escaped, so the name is always a single
        # path component; the suffix keeps "" and ".." from being special.
        name = quote(key, safe="")
        if len(name) > _MAX_NAME:
            digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
            return self.base_path / f"{digest}{_HASHED_SUFFIX}"
        return self.base_path / f"{name}{_SUFFIX}"

    def _is_file(self, key: str, path: Path) -> bool:
        try:
            return path.is_file()
        except OSError as e:
            raise StorageError(f"Failed to stat {key!r}: {e}") from e

    async def get(self, key: str) -> bytes:
        path = self._get_full_path(key)
        if not self._is_file(key, path):
            raise StorageKeyError(f"Key not found: {key}")
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

    async def put(self, key: str, value: bytes) -> None:
        path = self._get_full_path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            if path.suffix == _HASHED_SUFFIX:
                # Sidecar first, so a listed value always has its key
                async with aiofiles.open(path.with_suffix(_KEY_SUFFIX), "w", encoding="utf-8", newline="") as f:
                    await f.write(key)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(value)
            await aiofiles.os.replace(tmp_path, path)
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        logger.debug(f"ledger put {key!r} ({len(value)} bytes)")

    async def exists(self, key: str) -> bool:
        return self._is_file(key, self._get_full_path(key))

    async def _read_sidecar(self, name: str) -> str | None:
        sidecar = self.base_path / (name[: -len(_HASHED_SUFFIX)] + _KEY_SUFFIX)
        try:
            async with aiofiles.open(sidecar, encoding="utf-8", newline="") as f:
                return await f.read()
        except FileNotFoundError:
            logger.warning(f"Ledger file {name} has no key sidecar, skipping it")
            return None

    async def list_keys(self, prefix: str = "") -> AsyncIterator[str]:
        keys = []
        try:
            for name in os.listdir(self.base_path):
                if name.endswith(_SUFFIX):
                    keys.append(unquote(name[: -len(_SUFFIX)]))
                elif name.endswith(_HASHED_SUFFIX):
                    key = await self._read_sidecar(name)
                    if key is not None:
                        keys.append(key)
        except OSError as e:
            raise StorageError(f"Failed to list {self.base_path}: {e}") from e

        for key in sorted(keys):
            if prefix and not key.startswith(prefix):
                continue
            yield key
