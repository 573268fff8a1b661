"""Application service for the product catalog."""

from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.product_dto import CreateProductRequest, ProductDTO
from core.data.uow import create_uow
from core.domain.entities.product import Product
from core.domain.errors import ProductNotFound
from core.domain.value_objects import CallerContext, Money, Role
from core.settings.sections import OrderSettings
from core.infrastructure.logging import get_logger


logger = get_logger(__name__)


class CatalogService:
    """Creates and reads the products orders are placed against."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: Optional[OrderSettings] = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or OrderSettings()

    async def create_product(
        self, caller: CallerContext, request: CreateProductRequest
    ) -> ProductDTO:
        """List a new product.

        Managers always list products under their own email; admins may
        name another manager.
        """
        caller.require(Role.MANAGER, Role.ADMIN)
        manager_email = caller.email
        if caller.is_admin and request.manager_email:
            manager_email = request.manager_email

        product = Product.create(
            name=request.name,
            price=Money(amount=request.price, currency=self._settings.currency),
            moq=request.moq,
            available_quantity=request.available_quantity,
            manager_email=manager_email,
        )

        async with create_uow(self._session_factory) as uow:
            await uow.products.add(product)
            await uow.commit()
            logger.info(
                f"[{uow.execution_id}] ✅ Product {product.id} listed by {caller.email} "
                f"(stock={product.available_quantity}, moq={product.moq})"
            )

        return ProductDTO.from_entity(product)

    async def get_product(self, product_id: str) -> ProductDTO:
        async with create_uow(self._session_factory) as uow:
            product = await uow.products.find_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return ProductDTO.from_entity(product)
