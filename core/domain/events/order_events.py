"""
Order Domain Events.

Events recorded by the Order aggregate during placement, status
transitions and shipment tracking.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    order_id: str = ""

    def __post_init__(self):
        """Set aggregate_id to order_id."""
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, 'aggregate_id', self.order_id)
        super().__post_init__()


@dataclass
class OrderPlacedEvent(_OrderEvent):
    """
    Order was admitted against product stock.

    Trigger: successful reservation + insert
    """

    tracking_id: str = ""
    product_id: str = ""
    buyer_email: str = ""
    manager_email: str = ""
    quantity: int = 0
    order_price: Optional[Decimal] = None
    currency: str = ""


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """
    Status history gained a new element.

    Tracks transitions out of pending (approved, rejected, cancelled).
    """

    previous_status: str = ""
    new_status: str = ""
    changed_by: Optional[str] = None


@dataclass
class TrackingEventAddedEvent(_OrderEvent):
    """A shipment/location event was appended to the tracking timeline."""

    status: str = ""
    location: str = ""
    note: str = ""
