"""Domain value objects."""

from .value_objects import ExecutionID, Money
from .tracking_id import TrackingId
from .order_status import (
    CallerContext,
    OrderStatus,
    Role,
    STAFF_ROLES,
    TRANSITION_ROLES,
)
from .shipping import ShippingInfo

__all__ = [
    "CallerContext",
    "ExecutionID",
    "Money",
    "OrderStatus",
    "Role",
    "ShippingInfo",
    "STAFF_ROLES",
    "TRANSITION_ROLES",
    "TrackingId",
]
