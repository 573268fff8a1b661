"""Application services."""

from .catalog_service import CatalogService
from .order_lifecycle_service import OrderLifecycleService
from .order_service import OrderApplicationService
from .tracking_service import TrackingService
from .user_service import UserService

__all__ = [
    "CatalogService",
    "OrderApplicationService",
    "OrderLifecycleService",
    "TrackingService",
    "UserService",
]
