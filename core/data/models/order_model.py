"""SQLAlchemy ORM models for Order aggregate."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base


class OrderModel(Base):
    """
    SQLAlchemy ORM model for orders table.

    No status column: the current status is the
    latest row of order_status_history.
    """

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True)
    tracking_id = Column(String(32), unique=True, nullable=False, index=True)

    buyer_email = Column(String(255), nullable=False, index=True)
    manager_email = Column(String(255), nullable=False, index=True)

    # Catalog snapshot at order time
    product_id = Column(String(36), nullable=False, index=True)
    product_name = Column(String(500), nullable=False)
    price_per_unit = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    quantity = Column(Integer, nullable=False)
    order_price = Column(Numeric(14, 2), nullable=False)

    # Shipping
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    contact = Column(String(100), nullable=False)
    delivery_address = Column(Text, nullable=False)
    additional_notes = Column(Text, nullable=False, default="")

    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    execution_id = Column(String(36), nullable=True, index=True)

    status_history = relationship(
        "OrderStatusModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusModel.sequence",
    )
    tracking = relationship(
        "OrderTrackingModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderTrackingModel.id",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_orders_quantity_positive"),
        Index("ix_orders_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, tracking_id={self.tracking_id}, quantity={self.quantity})>"


class OrderStatusModel(Base):
    """
    Append-only status history.

    (order_id, sequence) is unique, so two writers appending at the same
    position cannot both succeed.
    """

    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False)
    timestamp = Column(DateTime, nullable=False)

    order = relationship("OrderModel", back_populates="status_history")

    __table_args__ = (
        UniqueConstraint("order_id", "sequence", name="uq_order_status_history_sequence"),
        Index("ix_order_status_history_status", "status"),
    )

    def __repr__(self):
        return f"<OrderStatusModel(order_id={self.order_id}, sequence={self.sequence}, status={self.status})>"


class OrderTrackingModel(Base):
    """Append-only shipment timeline; autoincrement id gives append order."""

    __tablename__ = "order_tracking_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    status = Column(String(100), nullable=False)
    location = Column(String(500), nullable=False)
    note = Column(Text, nullable=False, default="")
    timestamp = Column(DateTime, nullable=False)

    order = relationship("OrderModel", back_populates="tracking")
