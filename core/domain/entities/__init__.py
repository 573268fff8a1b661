"""Domain entities."""

from .order import Order, StatusEntry, TrackingEvent
from .product import Product
from .user import User, UserStatus

__all__ = [
    "Order",
    "Product",
    "StatusEntry",
    "TrackingEvent",
    "User",
    "UserStatus",
]
