"""Application tests for approve / reject / cancel."""

import pytest

from core.data.repositories.order_repository_impl import SqlAlchemyOrderRepository
from core.data.uow import create_uow
from core.domain.errors import InvalidStateTransition, OrderNotFound, RoleNotPermitted
from core.domain.value_objects import OrderStatus


@pytest.fixture
def placed_order(order_service, buyer, seed_product, make_request):
    async def _place(quantity: int = 5):
        product = await seed_product(moq=5, available_quantity=20)
        return await order_service.place_order(buyer, make_request(product.id, quantity))

    return _place


async def _history(session_factory, order_id):
    async with create_uow(session_factory) as uow:
        order = await uow.orders.find_by_id(order_id)
    return [entry.status for entry in order.status_history]


@pytest.mark.asyncio
async def test_scenario_d_approve_then_cancel(placed_order, lifecycle_service, manager, buyer, session_factory):
    order = await placed_order()

    approved = await lifecycle_service.approve_order(manager, order.id)

    assert approved.status is OrderStatus.APPROVED
    assert [e.status for e in approved.status_history] == [OrderStatus.PENDING, OrderStatus.APPROVED]
    assert approved.approved_at is not None

    with pytest.raises(InvalidStateTransition) as exc_info:
        await lifecycle_service.cancel_order(buyer, order.id)

    assert exc_info.value.context == {"current_status": "approved", "target_status": "cancelled"}
    assert await _history(session_factory, order.id) == [OrderStatus.PENDING, OrderStatus.APPROVED]


@pytest.mark.asyncio
async def test_approved_at_is_persisted(placed_order, lifecycle_service, admin, session_factory):
    order = await placed_order()
    await lifecycle_service.approve_order(admin, order.id)

    async with create_uow(session_factory) as uow:
        stored = await uow.orders.find_by_id(order.id)
    assert stored.approved_at is not None
    assert stored.current_status is OrderStatus.APPROVED


@pytest.mark.asyncio
@pytest.mark.parametrize("first", ["approve_order", "reject_order"])
@pytest.mark.parametrize("second", ["approve_order", "reject_order"])
async def test_repeating_a_transition_fails(placed_order, lifecycle_service, manager, first, second):
    order = await placed_order()
    await getattr(lifecycle_service, first)(manager, order.id)

    with pytest.raises(InvalidStateTransition):
        await getattr(lifecycle_service, second)(manager, order.id)


@pytest.mark.asyncio
async def test_buyer_cancels_own_pending_order(placed_order, lifecycle_service, buyer, event_bus, stock_of):
    order = await placed_order()

    cancelled = await lifecycle_service.cancel_order(buyer, order.id)

    assert cancelled.status is OrderStatus.CANCELLED
    assert event_bus.event_types[-1] == "OrderStatusChangedEvent"
    # Cancelling does not return stock.
    assert await stock_of(order.product_id) == 15


@pytest.mark.asyncio
async def test_other_buyer_cannot_cancel(placed_order, lifecycle_service, other_buyer, session_factory):
    order = await placed_order()

    with pytest.raises(RoleNotPermitted):
        await lifecycle_service.cancel_order(other_buyer, order.id)

    assert await _history(session_factory, order.id) == [OrderStatus.PENDING]


@pytest.mark.asyncio
@pytest.mark.parametrize("caller_fixture", ["manager", "admin"])
async def test_staff_cannot_cancel(request, placed_order, lifecycle_service, caller_fixture):
    order = await placed_order()
    with pytest.raises(RoleNotPermitted):
        await lifecycle_service.cancel_order(request.getfixturevalue(caller_fixture), order.id)


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["approve_order", "reject_order"])
async def test_buyer_cannot_approve_or_reject(placed_order, lifecycle_service, buyer, action):
    order = await placed_order()
    with pytest.raises(RoleNotPermitted):
        await getattr(lifecycle_service, action)(buyer, order.id)


@pytest.mark.asyncio
async def test_unknown_order(lifecycle_service, manager):
    with pytest.raises(OrderNotFound):
        await lifecycle_service.approve_order(manager, "missing-order")


@pytest.mark.asyncio
async def test_losing_a_race_reports_invalid_transition(
    monkeypatch, placed_order, lifecycle_service, manager, buyer, session_factory
):
    """A writer that loaded the order before another transition landed is rejected."""
    order = await placed_order()

    async with create_uow(session_factory) as uow:
        stale = await uow.orders.find_by_id(order.id)

    await lifecycle_service.cancel_order(buyer, order.id)

    original_find = SqlAlchemyOrderRepository.find_by_id
    served_stale = []

    async def find_stale_once(self, order_id):
        if not served_stale:
            served_stale.append(order_id)
            return stale
        return await original_find(self, order_id)

    monkeypatch.setattr(SqlAlchemyOrderRepository, "find_by_id", find_stale_once)

    with pytest.raises(InvalidStateTransition) as exc_info:
        await lifecycle_service.approve_order(manager, order.id)

    assert exc_info.value.context["current_status"] == "cancelled"
    monkeypatch.undo()
    assert await _history(session_factory, order.id) == [OrderStatus.PENDING, OrderStatus.CANCELLED]
