"""Tests for core.storage — MemoryLedger, LocalLedger and create_ledger."""

from pathlib import Path

import pytest

from kvjournal.core.config import Config
from kvjournal.core.exceptions import ConfigurationError, DuplicateKeyError, LookupFailureError
from kvjournal.core.storage import (
    LocalLedger,
    MemoryLedger,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
    create_ledger,
)
from kvjournal.journal import JournalRegistry, RecordStore


@pytest.fixture(params=["memory", "local"])
def backend(request, tmp_path):
    if request.param == "memory":
        return MemoryLedger()
    return LocalLedger(base_path=str(tmp_path / "ledger"))


class TestLedgerContract:
    @pytest.mark.asyncio
    async def test_put_and_get(self, backend):
        await backend.put("greeting", b"hello")
        assert await backend.get("greeting") == b"hello"

    @pytest.mark.asyncio
    async def test_put_overwrites(self, backend):
        await backend.put("k", b"one")
        await backend.put("k", b"two")
        assert await backend.get("k") == b"two"

    @pytest.mark.asyncio
    async def test_get_missing(self, backend):
        with pytest.raises(StorageKeyError):
            await backend.get("missing")

    @pytest.mark.asyncio
    async def test_storage_key_error_is_key_error(self, backend):
        with pytest.raises(KeyError):
            await backend.get("missing")

    @pytest.mark.asyncio
    async def test_exists(self, backend):
        assert await backend.exists("k") is False
        await backend.put("k", b"")
        assert await backend.exists("k") is True

    @pytest.mark.asyncio
    async def test_empty_value(self, backend):
        await backend.put("empty", b"")
        assert await backend.get("empty") == b""

    @pytest.mark.asyncio
    async def test_list_keys_sorted_with_prefix(self, backend):
        for key in ("b", "a", "_journalindex", "ab"):
            await backend.put(key, b"x")
        assert [k async for k in backend.list_keys()] == ["_journalindex", "a", "ab", "b"]
        assert [k async for k in backend.list_keys(prefix="a")] == ["a", "ab"]


class TestLocalLedger:
    @pytest.mark.asyncio
    async def test_awkward_keys_stay_inside_base_path(self, tmp_path):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))
        keys = ["../escape", "a/b/c", "", "..", "~home", "spaced key", "ünïcode"]
        for i, key in enumerate(keys):
            await ledger.put(key, str(i).encode())

        for i, key in enumerate(keys):
            assert await ledger.get(key) == str(i).encode()
        assert sorted([k async for k in ledger.list_keys()]) == sorted(keys)
        assert not (tmp_path / "escape.val").exists()
        assert all(p.parent == ledger.base_path for p in ledger.base_path.iterdir())

    @pytest.mark.asyncio
    async def test_null_byte_rejected(self, tmp_path):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))
        with pytest.raises(StoragePermissionError):
            await ledger.put("bad\x00key", b"x")

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "ledger")
        await LocalLedger(base_path=path).put("k", b"v")
        assert await LocalLedger(base_path=path).get("k") == b"v"

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, tmp_path):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))
        await ledger.put("k", b"v")
        assert [p.name for p in ledger.base_path.iterdir()] == ["k.val"]

    @pytest.mark.asyncio
    async def test_long_keys_use_hashed_names(self, tmp_path):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))
        keys = ["Ü" * 50, "x" * 300, "short"]
        for key in keys:
            assert await ledger.exists(key) is False
            with pytest.raises(StorageKeyError):
                await ledger.get(key)
            await ledger.put(key, key.encode())

        for key in keys:
            assert await ledger.exists(key) is True
            assert await ledger.get(key) == key.encode()
        assert [k async for k in ledger.list_keys()] == sorted(keys)
        assert [k async for k in ledger.list_keys(prefix="Ü")] == ["Ü" * 50]

        names = [p.name for p in ledger.base_path.iterdir()]
        assert len([n for n in names if n.endswith(".hval")]) == 2
        assert len([n for n in names if n.endswith(".key")]) == 2
        assert all(len(n) <= 255 for n in names)

    @pytest.mark.asyncio
    async def test_long_key_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "ledger")
        key = "journal-" + "ø" * 120
        await LocalLedger(base_path=path).put(key, b"v")
        ledger = LocalLedger(base_path=path)
        assert await ledger.get(key) == b"v"
        assert [k async for k in ledger.list_keys()] == [key]

    @pytest.mark.asyncio
    async def test_hashed_value_without_sidecar_is_skipped(self, tmp_path):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))
        await ledger.put("y" * 300, b"v")
        await ledger.put("k", b"v")
        for sidecar in ledger.base_path.glob("*.key"):
            sidecar.unlink()
        assert [k async for k in ledger.list_keys()] == ["k"]

    @pytest.mark.asyncio
    async def test_stat_failure_is_storage_error(self, tmp_path, monkeypatch):
        ledger = LocalLedger(base_path=str(tmp_path / "ledger"))

        def broken_is_file(self):
            raise OSError(36, "File name too long")

        monkeypatch.setattr(Path, "is_file", broken_is_file)
        with pytest.raises(StorageError, match="Failed to stat"):
            await ledger.exists("k")
        with pytest.raises(StorageError, match="Failed to stat"):
            await ledger.get("k")

    @pytest.mark.asyncio
    async def test_long_keys_through_registry(self, tmp_path):
        registry = JournalRegistry(RecordStore(LocalLedger(base_path=str(tmp_path / "ledger"))))
        key = "Ü" * 50
        with pytest.raises(LookupFailureError):
            await registry.read_raw(key)

        await registry.write_raw(key, "value")
        assert await registry.read_raw(key) == b"value"

        await registry.create_journal("Alice", key, "open", "active", "2024-01-01")
        with pytest.raises(DuplicateKeyError):
            await registry.create_journal("Alice", key, "open", "active", "2024-01-01")


class TestMemoryLedger:
    @pytest.mark.asyncio
    async def test_initial_contents(self):
        ledger = MemoryLedger(initial={"k": b"v"})
        assert await ledger.get("k") == b"v"
        assert ledger.snapshot() == {"k": b"v"}


class TestCreateLedger:
    def test_memory(self, tmp_dir):
        config = Config(data_dir=tmp_dir, defaults={"ledger": {"backend": "memory"}})
        assert isinstance(create_ledger(config), MemoryLedger)

    def test_local(self, tmp_dir):
        ledger = create_ledger(Config(data_dir=tmp_dir))
        assert isinstance(ledger, LocalLedger)
        assert str(ledger.base_path).endswith("ledger")

    def test_unknown(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("ledger.backend", "etcd")
        with pytest.raises(ConfigurationError, match="etcd"):
            create_ledger(config)
