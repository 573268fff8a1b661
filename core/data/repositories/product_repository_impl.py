"""SQLAlchemy implementation of ProductRepository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.product import Product
from core.domain.repositories.product_repository import ProductRepository

from ..mappers import ProductMapper
from ..models.product_model import ProductModel


class SqlAlchemyProductRepository(ProductRepository):
    """Concrete implementation of ProductRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, product: Product) -> None:
        self._session.add(ProductMapper.to_persistence(product))
        await self._session.flush()

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        model = await self._session.get(ProductModel, product_id)
        return ProductMapper.to_domain(model) if model else None

    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Compare-and-decrement in a single UPDATE statement.

        Args:
            product_id: Product to reserve from
            quantity: Units to reserve

        Returns:
            True if exactly one row matched the stock condition
        """
        result = await self._session.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.available_quantity >= quantity,
            )
            .values(available_quantity=ProductModel.available_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def restore_stock(self, product_id: str, quantity: int) -> None:
        await self._session.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(available_quantity=ProductModel.available_quantity + quantity)
            .execution_options(synchronize_session=False)
        )

    async def get_available_quantity(self, product_id: str) -> Optional[int]:
        result = await self._session.execute(
            select(ProductModel.available_quantity).where(ProductModel.id == product_id)
        )
        return result.scalar_one_or_none()
