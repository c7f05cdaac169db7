from palette.app.bootstrap import init
from palette.services.event_bus import CommandEvent, EventBus


def test_event_bus_service_registration():
    ctx = init(attach_logging=False)
    bus = ctx.services.get("event_bus")
    assert isinstance(bus, EventBus)
    assert bus is ctx.registry.bus


def test_subscribe_publish_basic():
    bus = EventBus()
    received = []

    def handler(evt):
        received.append((evt.name, evt.payload))

    bus.subscribe(CommandEvent.EXECUTE, handler)
    bus.publish(CommandEvent.EXECUTE, {"result": 1})
    bus.publish("execute", {"result": 2})
    assert received == [("execute", {"result": 1}), ("execute", {"result": 2})]


def test_once_subscription():
    bus = EventBus()
    count = 0

    def incr(_):
        nonlocal count
        count += 1

    bus.subscribe(CommandEvent.ERROR, incr, once=True)
    bus.publish(CommandEvent.ERROR)
    bus.publish(CommandEvent.ERROR)
    assert count == 1  # second publish ignored
    assert bus.subscriber_count(CommandEvent.ERROR) == 0


def test_error_isolation():
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    def good(_):
        order.append("good")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", good)
    bus.publish("custom", 123)
    # Both handlers executed despite error
    assert order == ["bad", "good"]
    assert len(bus.errors) == 1


def test_unsubscribe_identical_handlers_independently():
    bus = EventBus()
    seen = []

    def handler(evt):
        seen.append(evt.payload)

    first = bus.subscribe("x", handler)
    bus.subscribe("x", handler)
    bus.unsubscribe(first)
    bus.publish("x", "p")
    assert seen == ["p"]
    assert first.active is False


def test_list_events_and_clear():
    bus = EventBus()
    bus.subscribe("a", lambda e: None)
    bus.subscribe(CommandEvent.EXECUTE, lambda e: None)
    assert set(bus.list_events()) == {"a", "execute"}
    bus.clear()
    assert bus.list_events() == []


def test_tracing_disabled_by_default():
    bus = EventBus()
    bus.publish("a")
    assert bus.recent_trace_entries() == []


def test_tracing_capacity_ring_buffer():
    bus = EventBus()
    bus.enable_tracing(True, capacity=5)
    for i in range(12):
        bus.publish(f"evt{i}", {"i": i})
    names = [t.name for t in bus.recent_trace_entries()]
    # Should retain only last 5 events
    assert names == [f"evt{i}" for i in range(7, 12)]
    bus.clear_traces()
    assert bus.recent_trace_entries() == []


def test_disable_tracing_stops_new_entries():
    bus = EventBus()
    bus.enable_tracing(True)
    bus.publish("one")
    bus.enable_tracing(False)
    bus.publish("two")
    entries = bus.recent_trace_entries()
    assert [t.name for t in entries] == ["one"]
    assert entries[0].summary == "-"
    assert bus.tracing_enabled is False
