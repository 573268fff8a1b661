"""Tests for the in-memory event bus."""

import pytest

from core.domain.events import OrderStatusChangedEvent
from core.infrastructure.event_bus import InMemoryEventBus


@pytest.mark.asyncio
async def test_publish_notifies_sync_and_async_subscribers():
    bus = InMemoryEventBus()
    received = []

    def sync_handler(event):
        received.append(("sync", event.event_type))

    async def async_handler(event):
        received.append(("async", event.event_type))

    bus.subscribe(sync_handler)
    bus.subscribe(async_handler)

    await bus.publish(OrderStatusChangedEvent(order_id="o-1", previous_status="pending", new_status="approved"))

    assert received == [("sync", "OrderStatusChangedEvent"), ("async", "OrderStatusChangedEvent")]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_fail_publisher():
    bus = InMemoryEventBus()
    received = []

    def broken(event):
        raise RuntimeError("subscriber down")

    bus.subscribe(broken)
    bus.subscribe(lambda event: received.append(event.aggregate_id))

    await bus.publish_all([
        OrderStatusChangedEvent(order_id="o-1"),
        OrderStatusChangedEvent(order_id="o-2"),
    ])

    assert received == ["o-1", "o-2"]


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = InMemoryEventBus()
    received = []

    def handler(event):
        received.append(event)

    bus.subscribe(handler)
    bus.unsubscribe(handler)
    await bus.publish(OrderStatusChangedEvent(order_id="o-1"))

    assert received == []
