"""Buyer-supplied shipping metadata."""
from dataclasses import dataclass


@dataclass(frozen=True)
class ShippingInfo:
    """Delivery details captured with the order. Immutable after placement."""
    first_name: str
    last_name: str
    contact: str
    delivery_address: str
    additional_notes: str = ""

    def __post_init__(self):
        for name in ("first_name", "last_name", "contact", "delivery_address"):
            if not getattr(self, name).strip():
                raise ValueError(f"Shipping field '{name}' cannot be empty")
