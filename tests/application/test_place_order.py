"""Application tests for order placement and stock reservation."""

import asyncio
import itertools
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from core.application.dtos import OrderDTO
from core.data.repositories.order_repository_impl import SqlAlchemyOrderRepository
from core.data.repositories.product_repository_impl import SqlAlchemyProductRepository
from core.data.uow import create_uow
from core.domain.errors import (
    BelowMinimumOrderQuantity,
    InsufficientStock,
    ProductNotFound,
    ReservationRollbackFailed,
    RoleNotPermitted,
    StorageUnavailable,
)
from core.domain.value_objects import OrderStatus, TrackingId


async def _order_count(session_factory) -> int:
    async with create_uow(session_factory) as uow:
        return len(await uow.orders.find_all(limit=1000))


# =============================================================================
# SCENARIOS
# =============================================================================

@pytest.mark.asyncio
async def test_scenario_a_successful_placement(make_request, order_service, buyer, seed_product, stock_of, event_bus):
    """Placing moq units succeeds, prices the order and reduces stock."""
    product = await seed_product(price="10.00", moq=5, available_quantity=20)

    order = await order_service.place_order(buyer, make_request(product.id, 5))

    assert isinstance(order, OrderDTO)
    assert order.order_price == Decimal("50.00")
    assert order.price_per_unit * order.quantity == order.order_price
    assert order.status is OrderStatus.PENDING
    assert [e.status for e in order.status_history] == [OrderStatus.PENDING]
    assert order.tracking_id.startswith("GF-")
    assert order.buyer_email == buyer.email
    assert order.manager_email == product.manager_email
    assert await stock_of(product.id) == 15
    assert event_bus.event_types == ["OrderPlacedEvent"]


@pytest.mark.asyncio
async def test_scenario_b_below_minimum(make_request, order_service, buyer, seed_product, stock_of):
    product = await seed_product(price="10.00", moq=5, available_quantity=20)
    await order_service.place_order(buyer, make_request(product.id, 5))

    with pytest.raises(BelowMinimumOrderQuantity) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 3))

    assert exc_info.value.context["minimum"] == 5
    assert await stock_of(product.id) == 15


@pytest.mark.asyncio
async def test_scenario_c_concurrent_placements(make_request, order_service, buyer, seed_product, stock_of):
    """Two concurrent orders of 10 against stock 15: exactly one wins."""
    product = await seed_product(moq=5, available_quantity=15)

    results = await asyncio.gather(
        order_service.place_order(buyer, make_request(product.id, 10)),
        order_service.place_order(buyer, make_request(product.id, 10)),
        return_exceptions=True,
    )

    placed = [r for r in results if isinstance(r, OrderDTO)]
    rejected = [r for r in results if isinstance(r, InsufficientStock)]
    assert len(placed) == 1
    assert len(rejected) == 1
    assert rejected[0].context["available"] == 5
    assert await stock_of(product.id) == 5


# =============================================================================
# INVARIANTS
# =============================================================================

@pytest.mark.asyncio
async def test_no_overselling_under_concurrency(make_request, order_service, buyer, seed_product, stock_of, session_factory):
    product = await seed_product(available_quantity=10)

    results = await asyncio.gather(
        *[order_service.place_order(buyer, make_request(product.id, 3)) for _ in range(8)],
        return_exceptions=True,
    )

    placed = [r for r in results if isinstance(r, OrderDTO)]
    unexpected = [r for r in results if not isinstance(r, (OrderDTO, InsufficientStock))]
    assert unexpected == []
    assert sum(order.quantity for order in placed) <= 10
    assert len(placed) == 3
    assert await stock_of(product.id) == 1
    assert await _order_count(session_factory) == 3


@pytest.mark.asyncio
async def test_insufficient_stock_leaves_stock_unchanged(make_request, order_service, buyer, seed_product, stock_of):
    product = await seed_product(available_quantity=4)

    with pytest.raises(InsufficientStock) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 5))

    assert exc_info.value.context == {"requested": 5, "available": 4}
    assert await stock_of(product.id) == 4


@pytest.mark.asyncio
async def test_exact_stock_can_be_ordered(make_request, order_service, buyer, seed_product, stock_of):
    product = await seed_product(available_quantity=7)
    await order_service.place_order(buyer, make_request(product.id, 7))
    assert await stock_of(product.id) == 0


@pytest.mark.asyncio
async def test_unknown_product(make_request, order_service, buyer):
    with pytest.raises(ProductNotFound):
        await order_service.place_order(buyer, make_request("no-such-product", 1))


@pytest.mark.asyncio
@pytest.mark.parametrize("caller_fixture", ["manager", "admin"])
async def test_staff_cannot_place_orders(make_request, request, order_service, seed_product, stock_of, caller_fixture):
    caller = request.getfixturevalue(caller_fixture)
    product = await seed_product(available_quantity=10)

    with pytest.raises(RoleNotPermitted):
        await order_service.place_order(caller, make_request(product.id, 1))

    assert await stock_of(product.id) == 10


@pytest.mark.asyncio
async def test_tracking_ids_are_unique(make_request, order_service, buyer, seed_product):
    product = await seed_product(available_quantity=100)
    orders = [await order_service.place_order(buyer, make_request(product.id, 1)) for _ in range(10)]
    assert len({order.tracking_id for order in orders}) == 10


# =============================================================================
# COMPENSATING ROLLBACK
# =============================================================================

@pytest.mark.asyncio
async def test_failed_insert_releases_reservation(
    make_request, monkeypatch, order_service, buyer, seed_product, stock_of, session_factory, event_bus
):
    product = await seed_product(available_quantity=10)

    async def failing_add(self, order):
        raise OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))

    monkeypatch.setattr(SqlAlchemyOrderRepository, "add", failing_add)

    with pytest.raises(StorageUnavailable) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 3))

    assert not isinstance(exc_info.value, ReservationRollbackFailed)
    assert await stock_of(product.id) == 10
    assert await _order_count(session_factory) == 0
    assert event_bus.events == []


@pytest.mark.asyncio
async def test_restore_is_retried(make_request, monkeypatch, order_service, buyer, seed_product, stock_of):
    product = await seed_product(available_quantity=10)
    restore_calls = []
    original_restore = SqlAlchemyProductRepository.restore_stock

    async def failing_add(self, order):
        raise StorageUnavailable("insert failed")

    async def flaky_restore(self, product_id, quantity):
        restore_calls.append(quantity)
        if len(restore_calls) < 3:
            raise StorageUnavailable("restore failed")
        await original_restore(self, product_id, quantity)

    monkeypatch.setattr(SqlAlchemyOrderRepository, "add", failing_add)
    monkeypatch.setattr(SqlAlchemyProductRepository, "restore_stock", flaky_restore)

    with pytest.raises(StorageUnavailable) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 3))

    assert exc_info.value.message == "insert failed"
    assert restore_calls == [3, 3, 3]
    assert await stock_of(product.id) == 10


@pytest.mark.asyncio
async def test_exhausted_restore_escalates(make_request, monkeypatch, order_service, buyer, seed_product, stock_of):
    product = await seed_product(available_quantity=10)
    restore_calls = []

    async def failing_add(self, order):
        raise StorageUnavailable("insert failed")

    async def broken_restore(self, product_id, quantity):
        restore_calls.append(quantity)
        raise StorageUnavailable("restore failed")

    monkeypatch.setattr(SqlAlchemyOrderRepository, "add", failing_add)
    monkeypatch.setattr(SqlAlchemyProductRepository, "restore_stock", broken_restore)

    with pytest.raises(ReservationRollbackFailed) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 3))

    assert isinstance(exc_info.value, StorageUnavailable)
    assert exc_info.value.context == {"product_id": product.id, "quantity": 3, "attempts": 3}
    assert len(restore_calls) == 3
    # Stock stays decremented; the CRITICAL log is the operator's signal.
    assert await stock_of(product.id) == 7


@pytest.mark.asyncio
async def test_cancelled_placement_releases_reservation(
    make_request, monkeypatch, order_service, buyer, seed_product, stock_of, session_factory, event_bus
):
    """A request dropped while the order insert is in flight gives the stock back."""
    product = await seed_product(available_quantity=10)
    insert_started = asyncio.Event()

    async def hanging_add(self, order):
        insert_started.set()
        await asyncio.sleep(3600)

    monkeypatch.setattr(SqlAlchemyOrderRepository, "add", hanging_add)

    task = asyncio.create_task(order_service.place_order(buyer, make_request(product.id, 3)))
    await insert_started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert await stock_of(product.id) == 10
    assert await _order_count(session_factory) == 0
    assert event_bus.events == []


# =============================================================================
# TRACKING ID COLLISIONS
# =============================================================================

def _pin_tracking_ids(monkeypatch, codes):
    monkeypatch.setattr(
        TrackingId,
        "generate",
        classmethod(lambda cls, prefix="GF", now=None: cls(value=next(codes))),
    )


@pytest.mark.asyncio
async def test_tracking_id_collision_draws_new_code(
    make_request, monkeypatch, order_service, buyer, seed_product, stock_of, session_factory
):
    product = await seed_product(available_quantity=10)
    _pin_tracking_ids(
        monkeypatch,
        iter(["GF-20260101-AAAAAA", "GF-20260101-AAAAAA", "GF-20260101-BBBBBB"]),
    )

    first = await order_service.place_order(buyer, make_request(product.id, 2))
    second = await order_service.place_order(buyer, make_request(product.id, 3))

    assert first.tracking_id == "GF-20260101-AAAAAA"
    assert second.tracking_id == "GF-20260101-BBBBBB"
    assert await stock_of(product.id) == 5
    assert await _order_count(session_factory) == 2


@pytest.mark.asyncio
async def test_repeated_tracking_id_collisions_release_reservation(
    make_request, monkeypatch, order_service, buyer, seed_product, stock_of, session_factory
):
    product = await seed_product(available_quantity=10)
    _pin_tracking_ids(monkeypatch, itertools.repeat("GF-20260101-AAAAAA"))

    await order_service.place_order(buyer, make_request(product.id, 2))

    with pytest.raises(StorageUnavailable) as exc_info:
        await order_service.place_order(buyer, make_request(product.id, 3))

    assert not isinstance(exc_info.value, ReservationRollbackFailed)
    assert await stock_of(product.id) == 8
    assert await _order_count(session_factory) == 1
