"""Application service for the order state machine."""

from typing import Callable, Dict

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.order_dto import OrderDTO
from core.data.uow import create_uow
from core.domain.entities.order import Order, StatusEntry
from core.domain.errors import InvalidStateTransition, OrderNotFound, RoleNotPermitted
from core.domain.event_bus import EventBus
from core.domain.repositories.order_repository import ConcurrentModificationError
from core.domain.value_objects import CallerContext, OrderStatus, Role, TRANSITION_ROLES
from core.infrastructure.logging import get_logger


logger = get_logger(__name__)

_TRANSITIONS: Dict[OrderStatus, Callable[[Order, str], StatusEntry]] = {
    OrderStatus.APPROVED: lambda order, by: order.approve(by=by),
    OrderStatus.REJECTED: lambda order, by: order.reject(by=by),
    OrderStatus.CANCELLED: lambda order, by: order.cancel(by=by),
}


class OrderLifecycleService:
    """
    Moves orders out of pending.

    Approve and reject are staff actions; cancel belongs to the buyer who
    placed the order. Every transition appends one history row. When two
    callers race on the same order only the first append lands and the
    other caller gets InvalidStateTransition.

    Cancelling or rejecting does not return reserved stock to the product.
    """

    def __init__(self, session_factory: async_sessionmaker, event_bus: EventBus) -> None:
        self._session_factory = session_factory
        self._event_bus = event_bus

    async def approve_order(self, caller: CallerContext, order_id: str) -> OrderDTO:
        return await self._transition(caller, order_id, OrderStatus.APPROVED)

    async def reject_order(self, caller: CallerContext, order_id: str) -> OrderDTO:
        return await self._transition(caller, order_id, OrderStatus.REJECTED)

    async def cancel_order(self, caller: CallerContext, order_id: str) -> OrderDTO:
        return await self._transition(caller, order_id, OrderStatus.CANCELLED)

    async def _transition(
        self, caller: CallerContext, order_id: str, target: OrderStatus
    ) -> OrderDTO:
        """Apply one pending -> ``target`` transition.

        Raises:
            RoleNotPermitted: Caller's role may not trigger ``target``,
                or a buyer cancels someone else's order
            OrderNotFound: Unknown order id
            InvalidStateTransition: Order is no longer pending
        """
        caller.require(*sorted(TRANSITION_ROLES[target], key=lambda r: r.value))

        lost_race = False
        async with create_uow(self._session_factory) as uow:
            execution_id = uow.execution_id
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            if target is OrderStatus.CANCELLED and not order.is_owned_by(caller.email):
                raise RoleNotPermitted(
                    role=caller.role.value,
                    required=[Role.BUYER.value],
                    reason=f"Only the buyer who placed order {order_id} may cancel it",
                )

            entry = _TRANSITIONS[target](order, caller.email)
            try:
                await uow.orders.append_status(order, entry)
                await uow.commit()
            except ConcurrentModificationError as exc:
                logger.warning(f"[{execution_id}] Concurrent transition on {order_id}: {exc}")
                await uow.rollback()
                lost_race = True

        if lost_race:
            current = await self._current_status(order_id)
            raise InvalidStateTransition(current=current.value, target=target.value)

        logger.info(
            f"[{execution_id}] ✅ Order {order_id} moved to {target.value} by {caller.email}"
        )

        await self._event_bus.publish_all(order.get_domain_events())
        order.clear_domain_events()

        return OrderDTO.from_entity(order)

    async def _current_status(self, order_id: str) -> OrderStatus:
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order.current_status
