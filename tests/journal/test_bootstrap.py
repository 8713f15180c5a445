"""Tests for kvjournal.journal.bootstrap."""

import json

import pytest

from kvjournal.core.events import LEDGER_RESET, EventBus
from kvjournal.core.exceptions import InvalidArgumentError, StorageFailureError
from kvjournal.journal.bootstrap import parse_counter, reset
from kvjournal.journal.store import COUNTER_KEY, INDEX_KEY


class TestParseCounter:
    @pytest.mark.parametrize("value,expected", [("100", 100), ("-7", -7), ("+3", 3), ("0", 0), (12, 12)])
    def test_valid(self, value, expected):
        assert parse_counter(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "1.5", " 1", "1_000", "0x10", True, None, 2.0])
    def test_invalid(self, value):
        with pytest.raises(InvalidArgumentError, match="Expecting integer"):
            parse_counter(value)


class TestReset:
    async def test_writes_counter_then_empty_index(self, store, ledger):
        assert await reset(store, ["100"]) == 100
        assert await ledger.get(COUNTER_KEY) == b"100"
        assert json.loads(await ledger.get(INDEX_KEY)) == []
        assert ledger.puts == [COUNTER_KEY, INDEX_KEY]

    async def test_clears_existing_index(self, store, ledger):
        await store.put_index(["a", "b"])
        await reset(store, ["1"])
        assert await store.get_index() == []

    @pytest.mark.parametrize("args", [[], ["1", "2"]])
    async def test_wrong_arg_count(self, store, ledger, args):
        with pytest.raises(InvalidArgumentError, match="Expecting 1"):
            await reset(store, args)
        assert ledger.puts == []

    async def test_non_integer(self, store, ledger):
        with pytest.raises(InvalidArgumentError):
            await reset(store, ["ten"])
        assert ledger.puts == []

    async def test_counter_write_failure_skips_index(self, store, ledger):
        await store.put_index(["keep"])
        ledger.fail_put.add(COUNTER_KEY)
        with pytest.raises(StorageFailureError):
            await reset(store, ["5"])
        assert await store.get_index() == ["keep"]

    async def test_index_write_failure_propagates(self, store, ledger):
        ledger.fail_put.add(INDEX_KEY)
        with pytest.raises(StorageFailureError):
            await reset(store, ["5"])
        assert await store.get_counter() == 5

    async def test_emits_event(self, store):
        bus = EventBus()
        seen = []
        bus.on(LEDGER_RESET, lambda event: seen.append(event.payload))
        await reset(store, ["9"], bus=bus)
        assert seen == [{"counter": 9}]
