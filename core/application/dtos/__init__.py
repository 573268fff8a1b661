"""Application DTOs."""

from .order_dto import (
    AddTrackingEventRequest,
    OrderDTO,
    OrderListDTO,
    PlaceOrderRequest,
    PublicOrderDTO,
    StatusEntryDTO,
    TrackingEventDTO,
)
from .product_dto import CreateProductRequest, ProductDTO
from .user_dto import (
    RegisterUserRequest,
    RegisterUserResponse,
    SuspendUserRequest,
    UpdateUserRequest,
    UserDTO,
    UserRoleDTO,
)

__all__ = [
    "AddTrackingEventRequest",
    "CreateProductRequest",
    "OrderDTO",
    "OrderListDTO",
    "PlaceOrderRequest",
    "ProductDTO",
    "PublicOrderDTO",
    "RegisterUserRequest",
    "RegisterUserResponse",
    "StatusEntryDTO",
    "SuspendUserRequest",
    "TrackingEventDTO",
    "UpdateUserRequest",
    "UserDTO",
    "UserRoleDTO",
]
