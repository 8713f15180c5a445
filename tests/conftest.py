"""Shared test fixtures for kvjournal."""

import os
import tempfile

import pytest

from kvjournal.core.storage import MemoryLedger, StorageError
from kvjournal.journal import Dispatcher, JournalRegistry, RecordStore


class FlakyLedger(MemoryLedger):
    """MemoryLedger that fails chosen operations on chosen keys and records every put."""

    def __init__(self, **config):
        super().__init__(**config)
        self.fail_get: set[str] = set()
        self.fail_put: set[str] = set()
        self.fail_exists: set[str] = set()
        self.puts: list[str] = []

    async def get(self, key: str) -> bytes:
        if key in self.fail_get:
            raise StorageError(f"injected read failure for {key}")
        return await super().get(key)

    async def put(self, key: str, value: bytes) -> None:
        if key in self.fail_put:
            raise StorageError(f"injected write failure for {key}")
        self.puts.append(key)
        await super().put(key, value)

    async def exists(self, key: str) -> bool:
        if key in self.fail_exists:
            raise StorageError(f"injected probe failure for {key}")
        return await super().exists(key)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file pointing at a local ledger in tmp_dir."""
    import yaml

    config_data = {
        "ledger": {
            "backend": "local",
            "path": os.path.join(tmp_dir, "ledger"),
        },
        "logging": {"level": "ERROR"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def ledger():
    return FlakyLedger()


@pytest.fixture
def store(ledger):
    return RecordStore(ledger)


@pytest.fixture
def registry(store):
    return JournalRegistry(store)


@pytest.fixture
def dispatcher(store):
    return Dispatcher(store)
