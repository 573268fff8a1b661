"""Shared fixtures: a file-backed SQLite database per test, callers and seed helpers."""

from decimal import Decimal
from typing import List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from core.application.dtos import PlaceOrderRequest
from core.data.uow import create_uow
from core.domain.entities import Product
from core.domain.event_bus import EventBus
from core.domain.events.base import DomainEvent
from core.domain.value_objects import CallerContext, Money, Role
from core.infrastructure.database.config import create_session_factory, init_database
from core.settings.sections import OrderSettings


BUYER_EMAIL = "buyer@example.com"
OTHER_BUYER_EMAIL = "other.buyer@example.com"
MANAGER_EMAIL = "manager@example.com"
ADMIN_EMAIL = "admin@example.com"


class RecordingEventBus(EventBus):
    """EventBus that keeps every published event."""

    def __init__(self) -> None:
        self.events: List[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    async def publish_all(self, events: List[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    @property
    def event_types(self) -> List[str]:
        return [event.event_type for event in self.events]


# =============================================================================
# DATABASE
# =============================================================================

@pytest_asyncio.fixture
async def engine(tmp_path):
    """File database so each session gets its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'garmentflow-test.db'}")
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def order_settings() -> OrderSettings:
    return OrderSettings(
        currency="USD",
        tracking_prefix="GF",
        rollback_max_attempts=3,
        rollback_backoff_seconds=0.0,
    )


# =============================================================================
# CALLERS
# =============================================================================

@pytest.fixture
def buyer() -> CallerContext:
    return CallerContext(email=BUYER_EMAIL, role=Role.BUYER)


@pytest.fixture
def other_buyer() -> CallerContext:
    return CallerContext(email=OTHER_BUYER_EMAIL, role=Role.BUYER)


@pytest.fixture
def manager() -> CallerContext:
    return CallerContext(email=MANAGER_EMAIL, role=Role.MANAGER)


@pytest.fixture
def admin() -> CallerContext:
    return CallerContext(email=ADMIN_EMAIL, role=Role.ADMIN)


# =============================================================================
# SEED HELPERS
# =============================================================================

@pytest.fixture
def seed_product(session_factory):
    """Insert a product directly and return it."""

    async def _seed(
        available_quantity: int = 20,
        moq: int = 1,
        price: str = "10.00",
        manager_email: str = MANAGER_EMAIL,
        name: str = "Cotton Crew T-Shirt",
    ) -> Product:
        product = Product.create(
            name=name,
            price=Money(amount=Decimal(price), currency="USD"),
            moq=moq,
            available_quantity=available_quantity,
            manager_email=manager_email,
        )
        async with create_uow(session_factory) as uow:
            await uow.products.add(product)
            await uow.commit()
        return product

    return _seed


@pytest.fixture
def stock_of(session_factory):
    """Read a product's current available quantity."""

    async def _stock(product_id: str) -> int:
        async with create_uow(session_factory) as uow:
            return await uow.products.get_available_quantity(product_id)

    return _stock


def place_request(product_id: str, quantity: int, **overrides) -> PlaceOrderRequest:
    fields = dict(
        product_id=product_id,
        quantity=quantity,
        first_name="Amina",
        last_name="Rahman",
        contact="+8801700000000",
        delivery_address="House 12, Road 4, Dhanmondi, Dhaka",
        additional_notes="",
    )
    fields.update(overrides)
    return PlaceOrderRequest(**fields)


@pytest.fixture
def make_request():
    return place_request


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def order_service(session_factory, event_bus, order_settings):
    from core.application.services import OrderApplicationService
    return OrderApplicationService(session_factory, event_bus, order_settings)


@pytest.fixture
def lifecycle_service(session_factory, event_bus):
    from core.application.services import OrderLifecycleService
    return OrderLifecycleService(session_factory, event_bus)


@pytest.fixture
def tracking_service(session_factory, event_bus):
    from core.application.services import TrackingService
    return TrackingService(session_factory, event_bus)
