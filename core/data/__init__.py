"""Data layer - infrastructure persistence and mapping."""

from .mappers import OrderMapper, ProductMapper, UserMapper
from .models import (
    Base,
    OrderModel,
    OrderStatusModel,
    OrderTrackingModel,
    ProductModel,
    UserModel,
)
from .repositories import (
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUserRepository,
)
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_uow",
    "OrderMapper",
    "OrderModel",
    "OrderStatusModel",
    "OrderTrackingModel",
    "ProductMapper",
    "ProductModel",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUserRepository",
    "UnitOfWork",
    "UserMapper",
    "UserModel",
]
