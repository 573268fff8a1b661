"""Application layer - services, interfaces, and DTOs."""

from .dtos import (
    AddTrackingEventRequest,
    CreateProductRequest,
    OrderDTO,
    OrderListDTO,
    PlaceOrderRequest,
    ProductDTO,
)
from .interfaces import IIdentityResolver, IRoleDirectory
from .retry import RetryExhausted, RetryPolicy, run_with_retry
from .services import (
    CatalogService,
    OrderApplicationService,
    OrderLifecycleService,
    TrackingService,
    UserService,
)

__all__ = [
    # DTOs
    "AddTrackingEventRequest",
    "CreateProductRequest",
    "OrderDTO",
    "OrderListDTO",
    "PlaceOrderRequest",
    "ProductDTO",
    # Services
    "CatalogService",
    "OrderApplicationService",
    "OrderLifecycleService",
    "TrackingService",
    "UserService",
    # Retry
    "RetryExhausted",
    "RetryPolicy",
    "run_with_retry",
    # Interfaces
    "IIdentityResolver",
    "IRoleDirectory",
]
