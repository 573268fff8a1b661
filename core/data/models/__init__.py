"""Database models."""

from .base import Base
from .order_model import OrderModel, OrderStatusModel, OrderTrackingModel
from .product_model import ProductModel
from .user_model import UserModel

__all__ = [
    "Base",
    "OrderModel",
    "OrderStatusModel",
    "OrderTrackingModel",
    "ProductModel",
    "UserModel",
]
