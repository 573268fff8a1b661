"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    Prices are snapshotted onto orders at placement time, so a Money
    value never changes after it has been stored.

    CRITICAL: Always use Decimal, never float!
    """
    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        # Convert to Decimal if needed
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        # Validate currency code (3 letters)
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __add__(self, other: 'Money') -> 'Money':
        """Add two Money objects (must have same currency)."""
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add different currencies: {self.currency} vs {other.currency}"
            )
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, quantity: int) -> 'Money':
        """Multiply by an integer quantity (unit price -> line price)."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Money can only be multiplied by int, got: {type(quantity).__name__}")
        return Money(amount=self.amount * quantity, currency=self.currency)

    def is_negative(self) -> bool:
        """Check if amount is negative."""
        return self.amount < 0


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for request/unit-of-work tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)
