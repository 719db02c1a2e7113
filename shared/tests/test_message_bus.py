"""Tests for the message bus and the unit of work."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import Aggregate, DomainEvent


@dataclass(kw_only=True)
class Pinged(DomainEvent):
    note: str = ""


@dataclass(kw_only=True, eq=False)
class Counter(Aggregate):
    value: int = 0

    def ping(self, note: str):
        self.value += 1
        self.add_event(Pinged(aggregate_id=self.id, note=note))


def test_every_subscriber_receives_the_event():
    bus = MessageBus()
    seen = []

    def first(event):
        seen.append(("first", event.note))

    def second(event):
        seen.append(("second", event.note))

    bus.subscribe(Pinged, first)
    bus.subscribe(Pinged, second)
    bus.subscribe(Pinged, first)
    bus.publish_events([Pinged(note="a")])

    assert seen == [("first", "a"), ("second", "a")]


def test_failing_handler_does_not_stop_the_others():
    bus = MessageBus()
    seen = []

    def broken(event):
        raise RuntimeError("smtp down")

    bus.subscribe(Pinged, broken)
    bus.subscribe(Pinged, lambda event: seen.append(event.note))
    bus.publish_events([Pinged(note="b")])

    assert seen == ["b"]


def test_event_payload_is_json_ready():
    payload = Pinged(aggregate_id=3, note="c").to_dict()

    assert payload["event_type"] == "Pinged"
    assert payload["aggregate_id"] == 3
    assert payload["note"] == "c"
    assert isinstance(payload["event_id"], str)


@pytest.mark.django_db
def test_events_are_published_after_commit(django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.subscribe(Pinged, lambda event: seen.append(event.note))
    counter = Counter(id=1)

    with django_capture_on_commit_callbacks(execute=True):
        with DjangoUnitOfWork(bus) as uow:
            counter.ping("committed")
            uow.collect_events(counter)
            assert seen == []

    assert seen == ["committed"]
    assert counter.events == []


@pytest.mark.django_db
def test_events_are_dropped_on_rollback(django_capture_on_commit_callbacks):
    bus = MessageBus()
    seen = []
    bus.subscribe(Pinged, lambda event: seen.append(event.note))
    counter = Counter(id=1)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(ValueError):
            with DjangoUnitOfWork(bus) as uow:
                counter.ping("lost")
                uow.collect_events(counter)
                raise ValueError("boom")

    assert callbacks == []
    assert seen == []
