"""
Ledger backends for kvjournal.

Provides the async ledger contract (single-key get/put, no cross-key
transactions) plus an in-memory backend and a local filesystem backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    LedgerBackend,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
)
from .local import LocalLedger
from .memory import MemoryLedger

if TYPE_CHECKING:
    from kvjournal.core.config import Config

__all__ = [
    "LedgerBackend",
    "LocalLedger",
    "MemoryLedger",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
    "create_ledger",
]


def create_ledger(config: Config) -> LedgerBackend:
    """Build the ledger backend selected by ``ledger.backend``."""
    from kvjournal.core.exceptions import ConfigurationError

    backend = config.get("ledger.backend", "local")
    if backend == "memory":
        return MemoryLedger()
    if backend == "local":
        return LocalLedger(base_path=config.get("ledger.path"))
    raise ConfigurationError(f"Unknown ledger backend: {backend!r}")
