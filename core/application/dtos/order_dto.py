"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.entities import Order, StatusEntry, TrackingEvent
from core.domain.value_objects import OrderStatus


class PlaceOrderRequest(BaseModel):
    """Request DTO for placing an order."""

    product_id: str = Field(..., min_length=1, description="Product to order")
    quantity: int = Field(..., gt=0, description="Units to reserve")
    first_name: str = Field(..., min_length=1, description="Recipient first name")
    last_name: str = Field(..., min_length=1, description="Recipient last name")
    contact: str = Field(..., min_length=1, description="Contact phone or email")
    delivery_address: str = Field(..., min_length=1, description="Delivery address")
    additional_notes: str = Field(default="", description="Free-form notes for the seller")

    model_config = {"frozen": True}


class StatusEntryDTO(BaseModel):
    """DTO for one status history element."""

    status: OrderStatus
    timestamp: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, entry: StatusEntry) -> "StatusEntryDTO":
        return cls(status=entry.status, timestamp=entry.timestamp)


class AddTrackingEventRequest(BaseModel):
    """Request DTO for appending a shipment event."""

    status: str = Field(..., min_length=1, description="Shipment status, e.g. 'Picked up'")
    location: str = Field(..., min_length=1, description="Where the shipment is")
    note: str = Field(default="", description="Optional note")

    model_config = {"frozen": True}


class TrackingEventDTO(BaseModel):
    """DTO for one tracking timeline event."""

    status: str
    location: str
    note: str
    timestamp: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, event: TrackingEvent) -> "TrackingEventDTO":
        return cls(
            status=event.status,
            location=event.location,
            note=event.note,
            timestamp=event.timestamp,
        )


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: str = Field(..., description="Order ID")
    tracking_id: str = Field(..., description="Public tracking code")
    buyer_email: str
    manager_email: str
    product_id: str
    product_name: str = Field(..., description="Product name at order time")
    price_per_unit: Decimal = Field(..., ge=0, description="Unit price at order time")
    currency: str = Field(default="USD", description="Currency code")
    quantity: int = Field(..., gt=0)
    order_price: Decimal = Field(..., ge=0, description="price_per_unit * quantity")
    first_name: str
    last_name: str
    contact: str
    delivery_address: str
    additional_notes: str = ""
    status: OrderStatus = Field(..., description="Current status (last history element)")
    status_history: List[StatusEntryDTO]
    tracking: List[TrackingEventDTO] = Field(default_factory=list)
    created_at: datetime
    approved_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        """Transform Order domain entity to OrderDTO."""
        return cls(
            id=order.id,
            tracking_id=order.tracking_id.value,
            buyer_email=order.buyer_email,
            manager_email=order.manager_email,
            product_id=order.product_id,
            product_name=order.product_name,
            price_per_unit=order.price_per_unit.amount,
            currency=order.price_per_unit.currency,
            quantity=order.quantity,
            order_price=order.order_price.amount,
            first_name=order.shipping.first_name,
            last_name=order.shipping.last_name,
            contact=order.shipping.contact,
            delivery_address=order.shipping.delivery_address,
            additional_notes=order.shipping.additional_notes,
            status=order.current_status,
            status_history=[StatusEntryDTO.from_entity(e) for e in order.status_history],
            tracking=[TrackingEventDTO.from_entity(e) for e in order.tracking],
            created_at=order.created_at,
            approved_at=order.approved_at,
        )


class PublicOrderDTO(BaseModel):
    """Tracking-code lookup view: no buyer contact or address details."""

    tracking_id: str
    product_name: str
    quantity: int
    status: OrderStatus
    status_history: List[StatusEntryDTO]
    tracking: List[TrackingEventDTO] = Field(default_factory=list)
    created_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_order(cls, order: OrderDTO) -> "PublicOrderDTO":
        return cls(
            tracking_id=order.tracking_id,
            product_name=order.product_name,
            quantity=order.quantity,
            status=order.status,
            status_history=order.status_history,
            tracking=order.tracking,
            created_at=order.created_at,
        )


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    count: int = Field(..., ge=0, description="Number of orders in this page")
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)

    model_config = {"frozen": True}
