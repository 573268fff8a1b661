"""
Orders endpoints.

Placement, listings, lifecycle transitions and the tracking timeline.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import (
    get_caller,
    get_lifecycle_service,
    get_order_service,
    get_tracking_service,
)
from core.application.dtos import (
    AddTrackingEventRequest,
    OrderDTO,
    OrderListDTO,
    PlaceOrderRequest,
    PublicOrderDTO,
    TrackingEventDTO,
)
from core.application.services import (
    OrderApplicationService,
    OrderLifecycleService,
    TrackingService,
)
from core.domain.value_objects import CallerContext, OrderStatus


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# PLACEMENT
# =============================================================================

@router.post(
    "",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
    description="Reserve stock for a product and record a pending order",
)
async def place_order(
    request: PlaceOrderRequest,
    caller: CallerContext = Depends(get_caller),
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    Place an order (buyers only).

    **Errors:**
    - 404 `ProductNotFound`
    - 422 `BelowMinimumOrderQuantity` (includes `minimum`)
    - 409 `InsufficientStock` (includes `available`)
    - 503 `StorageUnavailable` / `ReservationRollbackFailed`
    """
    return await service.place_order(caller, request)


# =============================================================================
# LISTINGS
# =============================================================================

@router.get(
    "",
    response_model=OrderListDTO,
    summary="List all orders",
    description="All orders, newest first, optionally filtered by current status",
)
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of orders to return"),
    offset: int = Query(default=0, ge=0, description="Number of orders to skip"),
    caller: CallerContext = Depends(get_caller),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.list_all_orders(caller, status=status_filter, limit=limit, offset=offset)


@router.get(
    "/buyer/{email}",
    response_model=OrderListDTO,
    summary="List a buyer's orders",
)
async def list_buyer_orders(
    email: str,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    caller: CallerContext = Depends(get_caller),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.list_orders_for_buyer(caller, email, limit=limit, offset=offset)


@router.get(
    "/manager/{email}",
    response_model=OrderListDTO,
    summary="List orders for a manager's products",
)
async def list_manager_orders(
    email: str,
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    caller: CallerContext = Depends(get_caller),
    service: OrderApplicationService = Depends(get_order_service),
):
    return await service.list_orders_for_manager(
        caller, email, status=status_filter, limit=limit, offset=offset
    )


@router.get(
    "/track/{tracking_id}",
    response_model=PublicOrderDTO,
    summary="Look up an order by tracking code",
    description="Unauthenticated lookup; buyer contact details are not included",
)
async def track_order(
    tracking_id: str,
    service: OrderApplicationService = Depends(get_order_service),
):
    order = await service.get_order_by_tracking_id(tracking_id)
    return PublicOrderDTO.from_order(order)


# =============================================================================
# LIFECYCLE
# =============================================================================

@router.patch("/{order_id}/approve", response_model=OrderDTO, summary="Approve a pending order")
async def approve_order(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.approve_order(caller, order_id)


@router.patch("/{order_id}/reject", response_model=OrderDTO, summary="Reject a pending order")
async def reject_order(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.reject_order(caller, order_id)


@router.patch("/{order_id}/cancel", response_model=OrderDTO, summary="Cancel your pending order")
async def cancel_order(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    service: OrderLifecycleService = Depends(get_lifecycle_service),
):
    return await service.cancel_order(caller, order_id)


# =============================================================================
# TRACKING
# =============================================================================

@router.post(
    "/{order_id}/tracking",
    response_model=TrackingEventDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Append a tracking event",
)
async def add_tracking_event(
    order_id: str,
    request: AddTrackingEventRequest,
    caller: CallerContext = Depends(get_caller),
    service: TrackingService = Depends(get_tracking_service),
):
    return await service.add_tracking_event(caller, order_id, request)


@router.get(
    "/{order_id}/tracking",
    response_model=List[TrackingEventDTO],
    summary="Get the tracking timeline",
)
async def get_tracking_timeline(
    order_id: str,
    caller: CallerContext = Depends(get_caller),
    service: TrackingService = Depends(get_tracking_service),
):
    return await service.get_tracking_timeline(caller, order_id)
