"""Product catalog entity (the part of it the order ledger reads)."""
from dataclasses import dataclass, field
from datetime import datetime
import uuid

from ..errors import BelowMinimumOrderQuantity
from ..value_objects import Money


@dataclass
class Product:
    """
    Product record.

    ``available_quantity`` is only ever changed by the storage layer's
    conditional decrement/restore; the value held here is whatever was
    read and may already be stale.
    """
    id: str
    name: str
    price: Money
    moq: int
    available_quantity: int
    manager_email: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        if self.price.is_negative():
            raise ValueError(f"Price cannot be negative: {self.price}")
        if self.moq < 1:
            raise ValueError(f"Minimum order quantity must be at least 1, got: {self.moq}")
        if self.available_quantity < 0:
            raise ValueError(
                f"Available quantity cannot be negative, got: {self.available_quantity}"
            )

    @classmethod
    def create(
        cls,
        name: str,
        price: Money,
        moq: int,
        available_quantity: int,
        manager_email: str,
    ) -> 'Product':
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            price=price,
            moq=moq,
            available_quantity=available_quantity,
            manager_email=manager_email,
        )

    def ensure_meets_minimum(self, quantity: int) -> None:
        """Raise BelowMinimumOrderQuantity if ``quantity`` is under the MOQ."""
        if quantity < self.moq:
            raise BelowMinimumOrderQuantity(requested=quantity, minimum=self.moq)
