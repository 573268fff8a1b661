"""Domain layer - pure domain models and interfaces."""

from .entities import Order, Product, StatusEntry, TrackingEvent, User, UserStatus
from .repositories import OrderRepository, ProductRepository, UserRepository
from .value_objects import (
    CallerContext,
    ExecutionID,
    Money,
    OrderStatus,
    Role,
    ShippingInfo,
    TrackingId,
)

__all__ = [
    "CallerContext",
    "ExecutionID",
    "Money",
    "Order",
    "OrderRepository",
    "OrderStatus",
    "Product",
    "ProductRepository",
    "Role",
    "ShippingInfo",
    "StatusEntry",
    "TrackingEvent",
    "TrackingId",
    "User",
    "UserRepository",
    "UserStatus",
]
