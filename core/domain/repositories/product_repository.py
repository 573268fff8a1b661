"""Repository interface for the product catalog."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.product import Product


class ProductRepository(ABC):
    """
    Product persistence.

    Stock is never written through ``add``-then-save; the only mutations
    of ``available_quantity`` are the atomic conditional decrement and
    the compensating restore.
    """

    @abstractmethod
    async def add(self, product: Product) -> None:
        pass

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically subtract ``quantity`` if at least that much is available.

        Returns:
            True if the stock was decremented, False if the condition failed
        """
        pass

    @abstractmethod
    async def restore_stock(self, product_id: str, quantity: int) -> None:
        """Atomically add ``quantity`` back (compensating action)."""
        pass

    @abstractmethod
    async def get_available_quantity(self, product_id: str) -> Optional[int]:
        pass
