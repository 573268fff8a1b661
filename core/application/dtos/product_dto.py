"""Application DTOs for the product catalog surface."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from core.domain.entities import Product


class CreateProductRequest(BaseModel):
    """Request DTO for listing a product."""

    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, description="Unit price")
    moq: int = Field(default=1, ge=1, description="Minimum order quantity")
    available_quantity: int = Field(..., ge=0, description="Units in stock")
    manager_email: Optional[str] = Field(
        default=None,
        description="Responsible manager (admins only; managers always list as themselves)",
    )

    model_config = {"frozen": True}


class ProductDTO(BaseModel):
    """Response DTO for product details."""

    id: str
    name: str
    price: Decimal
    currency: str
    moq: int
    available_quantity: int
    manager_email: str
    created_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, product: Product) -> "ProductDTO":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price.amount,
            currency=product.price.currency,
            moq=product.moq,
            available_quantity=product.available_quantity,
            manager_email=product.manager_email,
            created_at=product.created_at,
        )
