"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import uuid

from ..errors import InvalidStateTransition
from ..events.base import DomainEvent
from ..events.order_events import (
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    TrackingEventAddedEvent,
)
from ..value_objects import ExecutionID, Money, OrderStatus, ShippingInfo, TrackingId
from .product import Product


@dataclass(frozen=True)
class StatusEntry:
    """One element of the append-only status history."""
    status: OrderStatus
    timestamp: datetime


@dataclass(frozen=True)
class TrackingEvent:
    """One shipment/location event on the tracking timeline."""
    status: str
    location: str
    note: str
    timestamp: datetime


@dataclass
class Order:
    """
    Order aggregate root.

    Catalog fields (product name, unit price) are a snapshot taken at
    placement and never re-read. The current status is the status of the
    last history element; it is not stored anywhere else.
    """
    id: str
    tracking_id: TrackingId
    buyer_email: str
    manager_email: str
    product_id: str
    product_name: str
    price_per_unit: Money
    quantity: int
    order_price: Money
    shipping: ShippingInfo
    status_history: List[StatusEntry]
    tracking: List[TrackingEvent] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    approved_at: Optional[datetime] = None
    execution_id: Optional[ExecutionID] = None

    _domain_events: List[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity <= 0:
            raise ValueError(f"Quantity must be a positive integer, got: {self.quantity!r}")

        expected = self.price_per_unit * self.quantity
        if expected != self.order_price:
            raise ValueError(f"Order price mismatch: {self.order_price} vs {expected}")

        if not self.status_history:
            raise ValueError("Status history cannot be empty")
        if self.status_history[0].status is not OrderStatus.PENDING:
            raise ValueError(
                f"First status must be pending, got: {self.status_history[0].status.value}"
            )

    @classmethod
    def place(
        cls,
        product: Product,
        buyer_email: str,
        quantity: int,
        shipping: ShippingInfo,
        tracking_id: TrackingId,
        execution_id: Optional[ExecutionID] = None,
        now: Optional[datetime] = None,
    ) -> 'Order':
        """
        Factory for a freshly reserved order.

        Snapshots the product's name and price, computes the order price
        once and starts the history at pending. Records OrderPlacedEvent.

        Args:
            product: Product record read for this placement
            buyer_email: Identity of the placing buyer
            quantity: Units reserved
            shipping: Buyer-supplied shipping metadata
            tracking_id: Freshly generated tracking code
            execution_id: Optional execution ID for tracing
            now: Placement timestamp (defaults to utcnow)

        Returns:
            New Order with OrderPlacedEvent collected
        """
        now = now or datetime.utcnow()
        order = cls(
            id=str(uuid.uuid4()),
            tracking_id=tracking_id,
            buyer_email=buyer_email,
            manager_email=product.manager_email,
            product_id=product.id,
            product_name=product.name,
            price_per_unit=product.price,
            quantity=quantity,
            order_price=product.price * quantity,
            shipping=shipping,
            status_history=[StatusEntry(status=OrderStatus.PENDING, timestamp=now)],
            created_at=now,
            execution_id=execution_id,
        )
        order._record_event(
            OrderPlacedEvent(
                order_id=order.id,
                tracking_id=str(order.tracking_id),
                product_id=order.product_id,
                buyer_email=order.buyer_email,
                manager_email=order.manager_email,
                quantity=order.quantity,
                order_price=order.order_price.amount,
                currency=order.order_price.currency,
                execution_id=order._execution_id_str(),
                user_id=buyer_email,
            )
        )
        return order

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    @property
    def current_status(self) -> OrderStatus:
        return self.status_history[-1].status

    def approve(self, by: Optional[str] = None, at: Optional[datetime] = None) -> StatusEntry:
        """Business rule: pending -> approved. Stamps approved_at."""
        entry = self._transition(OrderStatus.APPROVED, by, at)
        self.approved_at = entry.timestamp
        return entry

    def reject(self, by: Optional[str] = None, at: Optional[datetime] = None) -> StatusEntry:
        """Business rule: pending -> rejected."""
        return self._transition(OrderStatus.REJECTED, by, at)

    def cancel(self, by: Optional[str] = None, at: Optional[datetime] = None) -> StatusEntry:
        """Business rule: pending -> cancelled."""
        return self._transition(OrderStatus.CANCELLED, by, at)

    def _transition(
        self,
        target: OrderStatus,
        by: Optional[str],
        at: Optional[datetime],
    ) -> StatusEntry:
        previous = self.current_status
        if previous.is_terminal:
            raise InvalidStateTransition(current=previous.value, target=target.value)

        entry = StatusEntry(status=target, timestamp=at or datetime.utcnow())
        self.status_history.append(entry)
        self._record_event(
            OrderStatusChangedEvent(
                order_id=self.id,
                previous_status=previous.value,
                new_status=target.value,
                changed_by=by,
                execution_id=self._execution_id_str(),
                user_id=by,
            )
        )
        return entry

    # =========================================================================
    # TRACKING TIMELINE
    # =========================================================================

    def add_tracking_event(
        self,
        status: str,
        location: str,
        note: str = "",
        by: Optional[str] = None,
        at: Optional[datetime] = None,
    ) -> TrackingEvent:
        """
        Append a shipment event.

        Not guarded by the lifecycle status: any order can receive
        tracking events regardless of its current status.
        """
        event = TrackingEvent(
            status=status,
            location=location,
            note=note,
            timestamp=at or datetime.utcnow(),
        )
        self.tracking.append(event)
        self._record_event(
            TrackingEventAddedEvent(
                order_id=self.id,
                status=status,
                location=location,
                note=note,
                execution_id=self._execution_id_str(),
                user_id=by,
            )
        )
        return event

    def is_owned_by(self, email: str) -> bool:
        return self.buyer_email == email

    # =========================================================================
    # EVENT COLLECTION
    # =========================================================================

    def get_domain_events(self) -> List[DomainEvent]:
        """
        Get all domain events collected by this aggregate.

        Returns:
            Copy of the events list (published to the Event Bus after commit)
        """
        return list(self._domain_events)

    def clear_domain_events(self) -> None:
        """Clear all collected domain events (after publishing)."""
        self._domain_events.clear()

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def _execution_id_str(self) -> Optional[str]:
        return str(self.execution_id.value) if self.execution_id else None
