"""Application service for order placement and order listings."""

import asyncio
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.order_dto import OrderDTO, OrderListDTO, PlaceOrderRequest
from core.application.retry import RetryExhausted, RetryPolicy, run_with_retry
from core.data.uow import create_uow
from core.domain.entities.order import Order
from core.domain.entities.product import Product
from core.domain.errors import (
    CommerceError,
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
    ReservationRollbackFailed,
    StorageUnavailable,
)
from core.domain.event_bus import EventBus
from core.domain.repositories.order_repository import DuplicateTrackingIdError
from core.domain.value_objects import (
    CallerContext,
    ExecutionID,
    OrderStatus,
    Role,
    ShippingInfo,
    TrackingId,
)
from core.infrastructure.logging import get_logger
from core.settings.sections import OrderSettings


logger = get_logger(__name__)

# Draws of a fresh tracking code before a collision is treated as a storage failure.
TRACKING_ID_ATTEMPTS = 3


class OrderApplicationService:
    """
    Application service for placing and listing orders.

    Placement runs as three short units of work (read product, reserve
    stock, record order) sharing one ExecutionID. Stock is reserved with
    a single conditional decrement so concurrent placements can never
    oversell; if the order cannot be recorded afterwards the reservation
    is released again under the rollback retry policy.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        event_bus: EventBus,
        settings: Optional[OrderSettings] = None,
    ) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            event_bus: Bus that receives domain events after commit
            settings: Order settings (tracking prefix, rollback policy)
        """
        self._session_factory = session_factory
        self._event_bus = event_bus
        self._settings = settings or OrderSettings()
        self._rollback_policy = RetryPolicy(
            max_attempts=self._settings.rollback_max_attempts,
            backoff_seconds=self._settings.rollback_backoff_seconds,
        )

    async def place_order(self, caller: CallerContext, request: PlaceOrderRequest) -> OrderDTO:
        """Reserve stock and record a new pending order.

        Args:
            caller: Resolved caller (must be a buyer)
            request: PlaceOrderRequest DTO

        Returns:
            OrderDTO of the recorded order

        Raises:
            RoleNotPermitted: Caller is not a buyer
            ProductNotFound: Unknown product
            BelowMinimumOrderQuantity: Quantity under the product's MOQ
            InsufficientStock: Not enough stock at reservation time
            StorageUnavailable: Order could not be recorded (stock released)
            ReservationRollbackFailed: Order not recorded and stock not released
        """
        caller.require(Role.BUYER)
        shipping = ShippingInfo(
            first_name=request.first_name,
            last_name=request.last_name,
            contact=request.contact,
            delivery_address=request.delivery_address,
            additional_notes=request.additional_notes,
        )

        execution_id = ExecutionID.generate()
        logger.info(
            f"[{execution_id}] Placing order: product={request.product_id} "
            f"quantity={request.quantity} buyer={caller.email}"
        )

        # 1. Read product
        async with create_uow(self._session_factory, execution_id) as uow:
            product = await uow.products.find_by_id(request.product_id)
        if product is None:
            raise ProductNotFound(request.product_id)

        # 2. Minimum order quantity
        product.ensure_meets_minimum(request.quantity)

        # 3. Reserve stock
        async with create_uow(self._session_factory, execution_id) as uow:
            reserved = await uow.products.decrement_stock(product.id, request.quantity)
            if not reserved:
                available = await uow.products.get_available_quantity(product.id)
                if available is None:
                    raise ProductNotFound(product.id)
                logger.info(
                    f"[{execution_id}] Insufficient stock for {product.id}: "
                    f"requested={request.quantity} available={available}"
                )
                raise InsufficientStock(requested=request.quantity, available=available)
            await uow.commit()

        # 4. Record order; release the reservation if that fails or the caller goes away
        try:
            order = await self._record_order(product, caller.email, request, shipping, execution_id)
        except asyncio.CancelledError:
            logger.warning(f"[{execution_id}] Placement cancelled before order for {product.id} was recorded")
            await asyncio.shield(self._release_reservation(product.id, request.quantity, execution_id))
            raise
        except Exception as exc:
            logger.error(f"[{execution_id}] Failed to record order for {product.id}: {exc}")
            await asyncio.shield(self._release_reservation(product.id, request.quantity, execution_id))
            if isinstance(exc, CommerceError):
                raise
            raise StorageUnavailable(
                "Order could not be recorded; reserved stock was released",
                product_id=product.id,
            ) from exc

        logger.info(f"[{execution_id}] ✅ Order {order.tracking_id} placed ({order.id})")

        await self._event_bus.publish_all(order.get_domain_events())
        order.clear_domain_events()

        return OrderDTO.from_entity(order)

    async def _record_order(
        self,
        product: Product,
        buyer_email: str,
        request: PlaceOrderRequest,
        shipping: ShippingInfo,
        execution_id: ExecutionID,
    ) -> Order:
        """Insert the order, drawing a fresh tracking code if the first one is taken."""
        for attempt in range(1, TRACKING_ID_ATTEMPTS + 1):
            order = Order.place(
                product=product,
                buyer_email=buyer_email,
                quantity=request.quantity,
                shipping=shipping,
                tracking_id=TrackingId.generate(prefix=self._settings.tracking_prefix),
                execution_id=execution_id,
            )
            try:
                async with create_uow(self._session_factory, execution_id) as uow:
                    await uow.orders.add(order)
                    await uow.commit()
                return order
            except DuplicateTrackingIdError:
                if attempt == TRACKING_ID_ATTEMPTS:
                    raise
                logger.warning(
                    f"[{execution_id}] Tracking ID {order.tracking_id} already taken, "
                    f"drawing a new one ({attempt}/{TRACKING_ID_ATTEMPTS})"
                )

    async def _release_reservation(
        self, product_id: str, quantity: int, execution_id: ExecutionID
    ) -> None:
        """Restore reserved stock, retrying storage failures per the rollback policy."""

        async def restore() -> None:
            async with create_uow(self._session_factory, execution_id) as uow:
                await uow.products.restore_stock(product_id, quantity)
                await uow.commit()

        try:
            await run_with_retry(
                restore,
                self._rollback_policy,
                name=f"Restore {quantity} unit(s) of {product_id}",
                retry_on=(StorageUnavailable,),
                log_prefix=f"[{execution_id}]",
            )
        except RetryExhausted as exc:
            logger.critical(
                f"[{execution_id}] Stock for {product_id} is short by {quantity} unit(s): "
                f"order was not recorded and the restore failed {exc.attempts} time(s)"
            )
            raise ReservationRollbackFailed(
                product_id=product_id, quantity=quantity, attempts=exc.attempts
            ) from exc.last_error

        logger.info(f"[{execution_id}] Released {quantity} unit(s) of {product_id}")

    async def get_order_by_tracking_id(self, tracking_id: str) -> OrderDTO:
        """Look up an order by its public tracking code (no caller required).

        Raises:
            OrderNotFound: No order carries this code (or the code is malformed)
        """
        try:
            code = TrackingId(value=tracking_id)
        except ValueError:
            raise OrderNotFound(tracking_id)

        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_tracking_id(code)

        if order is None:
            raise OrderNotFound(tracking_id)
        return OrderDTO.from_entity(order)

    async def list_orders_for_buyer(
        self,
        caller: CallerContext,
        buyer_email: str,
        limit: int = 100,
        offset: int = 0,
    ) -> OrderListDTO:
        """Orders placed by ``buyer_email``, newest first (that buyer or an admin)."""
        caller.require_self_or_admin(buyer_email)
        return await self._list(limit, offset, buyer_email=buyer_email)

    async def list_orders_for_manager(
        self,
        caller: CallerContext,
        manager_email: str,
        status: Optional[OrderStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> OrderListDTO:
        """Orders for products managed by ``manager_email`` (that manager or an admin)."""
        caller.require(Role.MANAGER, Role.ADMIN)
        caller.require_self_or_admin(manager_email)
        return await self._list(limit, offset, status=status, manager_email=manager_email)

    async def list_all_orders(
        self,
        caller: CallerContext,
        status: Optional[OrderStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> OrderListDTO:
        """All orders, optionally filtered by current status (admins only)."""
        caller.require(Role.ADMIN)
        return await self._list(limit, offset, status=status)

    async def _list(
        self,
        limit: int,
        offset: int,
        status: Optional[OrderStatus] = None,
        buyer_email: Optional[str] = None,
        manager_email: Optional[str] = None,
    ) -> OrderListDTO:
        async with create_uow(self._session_factory) as uow:
            orders = await uow.orders.find_all(
                limit=limit,
                offset=offset,
                status=status,
                buyer_email=buyer_email,
                manager_email=manager_email,
            )

        order_dtos: List[OrderDTO] = [OrderDTO.from_entity(order) for order in orders]
        return OrderListDTO(orders=order_dtos, count=len(order_dtos), limit=limit, offset=offset)
