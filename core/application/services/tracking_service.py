"""Application service for the shipment tracking timeline."""

from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.order_dto import AddTrackingEventRequest, TrackingEventDTO
from core.data.uow import create_uow
from core.domain.errors import OrderNotFound, RoleNotPermitted
from core.domain.event_bus import EventBus
from core.domain.value_objects import CallerContext, Role
from core.infrastructure.logging import get_logger


logger = get_logger(__name__)


class TrackingService:
    """Appends and reads tracking events.

    Tracking is independent of the lifecycle status: events can be added
    to an order in any status.
    """

    def __init__(self, session_factory: async_sessionmaker, event_bus: EventBus) -> None:
        self._session_factory = session_factory
        self._event_bus = event_bus

    async def add_tracking_event(
        self,
        caller: CallerContext,
        order_id: str,
        request: AddTrackingEventRequest,
    ) -> TrackingEventDTO:
        """Append a shipment event to an order (staff only).

        Args:
            caller: Resolved caller (admin or manager)
            order_id: Order to append to
            request: AddTrackingEventRequest DTO

        Returns:
            The appended TrackingEventDTO
        """
        caller.require(Role.ADMIN, Role.MANAGER)

        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise OrderNotFound(order_id)

            event = order.add_tracking_event(
                status=request.status,
                location=request.location,
                note=request.note,
                by=caller.email,
            )
            await uow.orders.append_tracking(order.id, event)
            await uow.commit()

            logger.info(
                f"[{uow.execution_id}] ✅ Tracking event '{event.status}' added to {order_id} "
                f"(order status: {order.current_status.value})"
            )

        await self._event_bus.publish_all(order.get_domain_events())
        order.clear_domain_events()

        return TrackingEventDTO.from_entity(event)

    async def get_tracking_timeline(
        self, caller: CallerContext, order_id: str
    ) -> List[TrackingEventDTO]:
        """Tracking events of an order in insertion order (staff or the owning buyer)."""
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.find_by_id(order_id)

        if order is None:
            raise OrderNotFound(order_id)
        if not caller.is_staff and not order.is_owned_by(caller.email):
            raise RoleNotPermitted(
                role=caller.role.value,
                required=[Role.ADMIN.value, Role.MANAGER.value],
                reason=f"{caller.email} may not read tracking of order {order_id}",
            )

        return [TrackingEventDTO.from_entity(event) for event in order.tracking]
