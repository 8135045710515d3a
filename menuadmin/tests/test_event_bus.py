import pytest

from menuadmin.core.events.event_bus import EventBus
from menuadmin.core.events.event_models import EventRecord

pytestmark = pytest.mark.unit


def test_publish_reaches_only_matching_subscribers():
    bus = EventBus()
    received = []
    bus.subscribe("admin.features.updated", lambda event: received.append(event.payload))
    bus.subscribe("other.event", lambda event: received.append("wrong"))

    bus.publish(EventRecord(event_type="admin.features.updated", payload={"hello": "world"}))

    assert received == [{"hello": "world"}]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []
    handler = received.append
    bus.subscribe("custom.test", handler)
    bus.unsubscribe("custom.test", handler)
    bus.unsubscribe("custom.test", handler)
    bus.emit("custom.test", {"x": 1})
    assert received == []
    assert bus.subscriber_count("custom.test") == 0


def test_handler_may_unsubscribe_during_dispatch():
    bus = EventBus()
    calls = []

    def once(event):
        calls.append(event.event_type)
        bus.unsubscribe("custom.test", once)

    bus.subscribe("custom.test", once)
    bus.emit("custom.test")
    bus.emit("custom.test")
    assert calls == ["custom.test"]


def test_buses_are_isolated():
    first, second = EventBus(), EventBus()
    received = []
    first.subscribe("custom.test", received.append)
    second.emit("custom.test")
    assert received == []
