"""Repository interfaces."""

from .order_repository import (
    ConcurrentModificationError,
    DuplicateTrackingIdError,
    OrderRepository,
)
from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "ConcurrentModificationError",
    "DuplicateTrackingIdError",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
