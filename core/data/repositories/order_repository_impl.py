"""SQLAlchemy implementation of OrderRepository."""

from typing import List, Optional

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from core.domain.entities.order import Order, StatusEntry, TrackingEvent
from core.domain.repositories.order_repository import (
    ConcurrentModificationError,
    DuplicateTrackingIdError,
    OrderRepository,
)
from core.domain.value_objects import OrderStatus, TrackingId

from ..mappers import OrderMapper, StatusMapper, TrackingMapper
from ..models.order_model import OrderModel, OrderStatusModel


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    def _select_orders(self):
        return select(OrderModel).options(
            selectinload(OrderModel.status_history),
            selectinload(OrderModel.tracking),
        )

    async def add(self, order: Order) -> None:
        """Insert order with its initial history.

        Args:
            order: Order domain aggregate
        """
        self._session.add(OrderMapper.to_persistence(order))
        try:
            await self._session.flush()  # Propagate to DB without committing
        except IntegrityError as exc:
            if "tracking_id" in str(exc.orig):
                raise DuplicateTrackingIdError(
                    f"Tracking ID {order.tracking_id} is already assigned"
                ) from exc
            raise

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        """Retrieve order by unique identifier.

        Args:
            order_id: Order id

        Returns:
            Order if found, None otherwise
        """
        result = await self._session.execute(
            self._select_orders().where(OrderModel.id == order_id)
        )
        model = result.scalar_one_or_none()

        if not model:
            return None

        return OrderMapper.to_domain(model)

    async def find_by_tracking_id(self, tracking_id: TrackingId) -> Optional[Order]:
        result = await self._session.execute(
            self._select_orders().where(OrderModel.tracking_id == tracking_id.value)
        )
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def append_status(self, order: Order, entry: StatusEntry) -> None:
        """Insert the newest history row at its sequence position.

        The unique (order_id, sequence) constraint rejects a second writer
        that computed its transition from the same history.
        """
        sequence = len(order.status_history) - 1
        self._session.add(StatusMapper.to_persistence(order.id, sequence, entry))

        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ConcurrentModificationError(
                f"Status history of order {order.id} already has an entry at position {sequence}"
            ) from exc

        if entry.status is OrderStatus.APPROVED:
            await self._session.execute(
                update(OrderModel)
                .where(OrderModel.id == order.id)
                .values(approved_at=order.approved_at)
            )

    async def append_tracking(self, order_id: str, event: TrackingEvent) -> None:
        self._session.add(TrackingMapper.to_persistence(order_id, event))
        await self._session.flush()

    async def find_all(
        self,
        limit: int = 100,
        offset: int = 0,
        status: Optional[OrderStatus] = None,
        buyer_email: Optional[str] = None,
        manager_email: Optional[str] = None,
    ) -> List[Order]:
        """List orders with filters and pagination, newest first.

        Args:
            limit: Maximum number of orders to return
            offset: Number of orders to skip
            status: Current status (latest history row) to match
            buyer_email: Placing buyer to match
            manager_email: Responsible manager to match

        Returns:
            List of Order aggregates
        """
        stmt = self._select_orders()

        if buyer_email is not None:
            stmt = stmt.where(OrderModel.buyer_email == buyer_email)
        if manager_email is not None:
            stmt = stmt.where(OrderModel.manager_email == manager_email)

        if status is not None:
            latest = aliased(OrderStatusModel)
            later = aliased(OrderStatusModel)
            stmt = stmt.join(latest, latest.order_id == OrderModel.id).where(
                latest.status == status.value,
                ~exists().where(
                    later.order_id == latest.order_id,
                    later.sequence > latest.sequence,
                ),
            )

        stmt = (
            stmt.order_by(OrderModel.created_at.desc(), OrderModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [OrderMapper.to_domain(model) for model in models]
