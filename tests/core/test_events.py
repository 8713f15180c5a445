"""Tests for kvjournal.core.events — EventBus and Event."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from kvjournal.core.events import JOURNAL_CREATED, LEDGER_RESET, Event, EventBus

pytestmark = pytest.mark.smoke


async def test_on_off_emit_lifecycle():
    bus = EventBus()
    received: list[Event] = []

    def hook(event: Event) -> None:
        received.append(event)

    bus.on(JOURNAL_CREATED, hook)
    evt = Event(name=JOURNAL_CREATED, payload={"cpr": "1"}, source="test")
    await bus.emit(evt)

    assert received == [evt]

    bus.off(JOURNAL_CREATED, hook)
    await bus.emit(evt)

    assert len(received) == 1  # hook was removed


async def test_wildcard_hooks_receive_all_events():
    bus = EventBus()
    received: list[str] = []

    bus.on_all(lambda event: received.append(event.name))
    await bus.emit(Event(name=LEDGER_RESET))
    await bus.emit(Event(name=JOURNAL_CREATED))

    assert received == [LEDGER_RESET, JOURNAL_CREATED]


async def test_async_hooks_are_awaited():
    bus = EventBus()
    received: list[dict] = []

    async def hook(event: Event) -> None:
        received.append(event.payload)

    bus.on(LEDGER_RESET, hook)
    await bus.emit(Event(name=LEDGER_RESET, payload={"counter": 100}))

    assert received == [{"counter": 100}]


async def test_failing_hook_does_not_stop_others():
    bus = EventBus()
    received: list[str] = []

    def broken(event: Event) -> None:
        raise RuntimeError("boom")

    bus.on(JOURNAL_CREATED, broken)
    bus.on(JOURNAL_CREATED, lambda event: received.append("ok"))
    await bus.emit(Event(name=JOURNAL_CREATED))

    assert received == ["ok"]


def test_off_unknown_hook_is_noop():
    EventBus().off("never.registered", lambda event: None)


def test_event_is_frozen():
    evt = Event(name="x")
    with pytest.raises(FrozenInstanceError):
        evt.name = "y"
