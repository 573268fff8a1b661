"""Domain events for the Event Bus."""
from .base import DomainEvent
from .order_events import (
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    TrackingEventAddedEvent,
)

__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "TrackingEventAddedEvent",
]
