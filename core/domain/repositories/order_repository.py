"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.order import Order, StatusEntry, TrackingEvent
from ..value_objects import OrderStatus, TrackingId


class ConcurrentModificationError(Exception):
    """Another writer appended to the same status history first."""


class DuplicateTrackingIdError(Exception):
    """The generated tracking code is already taken by another order."""


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order with its initial status history.

        Args:
            order: Freshly placed Order aggregate

        Raises:
            DuplicateTrackingIdError: If another order already uses its tracking code
        """
        pass

    @abstractmethod
    async def find_by_id(self, order_id: str) -> Optional[Order]:
        """Retrieve order by unique identifier.

        Args:
            order_id: Order id

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_tracking_id(self, tracking_id: TrackingId) -> Optional[Order]:
        """Retrieve order by its public tracking code."""
        pass

    @abstractmethod
    async def append_status(self, order: Order, entry: StatusEntry) -> None:
        """Persist the last status history element of ``order``.

        The element is stored at position ``len(order.status_history) - 1``.

        Raises:
            ConcurrentModificationError: If that position is already taken
        """
        pass

    @abstractmethod
    async def append_tracking(self, order_id: str, event: TrackingEvent) -> None:
        """Append one event to the order's tracking timeline."""
        pass

    @abstractmethod
    async def find_all(
        self,
        limit: int = 100,
        offset: int = 0,
        status: Optional[OrderStatus] = None,
        buyer_email: Optional[str] = None,
        manager_email: Optional[str] = None,
    ) -> List[Order]:
        """List orders, newest first.

        Args:
            limit: Maximum number of orders to return
            offset: Number of orders to skip
            status: Only orders whose current (derived) status matches
            buyer_email: Only orders placed by this buyer
            manager_email: Only orders for products managed by this manager

        Returns:
            List of Order aggregates
        """
        pass
