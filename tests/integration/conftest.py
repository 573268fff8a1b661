"""Fixtures for API integration tests.

The app runs in TestClient's own event loop, so the database used here is
created synchronously with NullPool: no connection outlives the loop that
opened it.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from api.dependencies import (
    get_event_bus,
    get_identity_resolver,
    get_role_directory,
    get_session_factory,
)
from api.main import app
from core.application.interfaces import IIdentityResolver, IRoleDirectory
from core.domain.errors import Unauthenticated
from core.domain.value_objects import Role
from core.data.models import Base
from core.infrastructure.database.config import create_session_factory
from core.infrastructure.event_bus import InMemoryEventBus


class StaticIdentityResolver(IIdentityResolver):
    """Accepts any bearer token that is an email address."""

    async def resolve(self, credential: str) -> str:
        if "@" not in credential:
            raise Unauthenticated()
        return credential


class StaticRoleDirectory(IRoleDirectory):
    """Role by local part: ``admin@...`` and ``manager...@...`` are staff."""

    async def lookup_role(self, email: str) -> Role:
        local_part = email.split("@", 1)[0]
        if local_part == "admin":
            return Role.ADMIN
        if local_part.startswith("manager"):
            return Role.MANAGER
        return Role.BUYER


@pytest.fixture
def api_session_factory(tmp_path):
    db_path = tmp_path / "garmentflow-api.db"

    # Schema via a plain sync engine; the app's async engine opens its own connections.
    schema_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(schema_engine)
    schema_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return create_session_factory(engine)


@pytest.fixture
def test_client(api_session_factory) -> TestClient:
    """Create FastAPI test client with test database and static identity."""
    event_bus = InMemoryEventBus()
    app.dependency_overrides[get_session_factory] = lambda: api_session_factory
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    app.dependency_overrides[get_identity_resolver] = lambda: StaticIdentityResolver()
    app.dependency_overrides[get_role_directory] = lambda: StaticRoleDirectory()

    client = TestClient(app)
    yield client

    # Cleanup
    app.dependency_overrides.clear()


def auth(email: str) -> dict:
    return {"Authorization": f"Bearer {email}"}


@pytest.fixture
def as_user():
    return auth


@pytest.fixture
def create_product(test_client, as_user):
    def _create(available_quantity: int = 20, moq: int = 5, price: str = "10.00",
                manager_email: str = "manager@example.com") -> dict:
        response = test_client.post(
            "/api/v1/products",
            json={"name": "Oxford Shirt", "price": price, "moq": moq, "available_quantity": available_quantity},
            headers=as_user(manager_email),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def order_payload():
    def _payload(product_id: str, quantity: int) -> dict:
        return {
            "product_id": product_id,
            "quantity": quantity,
            "first_name": "Amina",
            "last_name": "Rahman",
            "contact": "+8801700000000",
            "delivery_address": "House 12, Road 4, Dhanmondi, Dhaka",
        }

    return _payload
