from fintrack.core.events import TRANSACTION_CREATED, TRANSACTION_DELETED, EventBus


def test_publish_without_subscribers():
    assert EventBus().publish(TRANSACTION_CREATED, {}) == []


def test_publish_collects_handler_results_in_order():
    bus = EventBus()
    bus.subscribe(TRANSACTION_CREATED, lambda event: ("first", event.payload["n"]))
    bus.subscribe(TRANSACTION_CREATED, lambda event: ("second", event.name))
    assert bus.publish(TRANSACTION_CREATED, {"n": 1}) == [("first", 1), ("second", TRANSACTION_CREATED)]
    assert bus.publish(TRANSACTION_DELETED, {"n": 1}) == []


def test_unsubscribe():
    bus = EventBus()
    seen = []

    def handler(event):
        seen.append(event.payload)

    bus.subscribe(TRANSACTION_DELETED, handler)
    bus.unsubscribe(TRANSACTION_DELETED, handler)
    bus.unsubscribe(TRANSACTION_DELETED, handler)
    bus.publish(TRANSACTION_DELETED, {"id": 1})
    assert seen == []


def test_event_timestamp_is_utc():
    bus = EventBus()
    bus.subscribe(TRANSACTION_CREATED, lambda event: event.ts)
    [ts] = bus.publish(TRANSACTION_CREATED, {})
    assert ts.endswith("+00:00")
