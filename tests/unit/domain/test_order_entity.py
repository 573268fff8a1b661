"""Unit tests for the Order aggregate and its state machine."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from core.domain.entities import Order, Product, StatusEntry
from core.domain.errors import BelowMinimumOrderQuantity, InvalidStateTransition
from core.domain.value_objects import (
    ExecutionID,
    Money,
    OrderStatus,
    ShippingInfo,
    TrackingId,
)


@pytest.fixture
def product() -> Product:
    return Product.create(
        name="Denim Jacket",
        price=Money(amount=Decimal("10.00")),
        moq=5,
        available_quantity=20,
        manager_email="manager@example.com",
    )


@pytest.fixture
def shipping() -> ShippingInfo:
    return ShippingInfo(
        first_name="Amina",
        last_name="Rahman",
        contact="+8801700000000",
        delivery_address="Dhaka",
    )


@pytest.fixture
def order(product, shipping) -> Order:
    return Order.place(
        product=product,
        buyer_email="buyer@example.com",
        quantity=5,
        shipping=shipping,
        tracking_id=TrackingId.generate(),
        execution_id=ExecutionID.generate(),
    )


def test_place_snapshots_catalog_fields_and_computes_price(order, product):
    assert order.product_id == product.id
    assert order.product_name == "Denim Jacket"
    assert order.manager_email == "manager@example.com"
    assert order.price_per_unit == Money(amount=Decimal("10.00"))
    assert order.order_price == Money(amount=Decimal("50.00"))
    assert order.order_price == order.price_per_unit * order.quantity


def test_place_starts_history_at_pending(order):
    assert [e.status for e in order.status_history] == [OrderStatus.PENDING]
    assert order.current_status is OrderStatus.PENDING
    assert order.approved_at is None
    assert order.tracking == []


def test_place_records_order_placed_event(order):
    events = order.get_domain_events()
    assert len(events) == 1
    assert events[0].event_type == "OrderPlacedEvent"
    assert events[0].aggregate_id == order.id
    assert events[0].aggregate_type == "Order"
    assert events[0].to_dict()["data"]["order_price"] == "50.00"

    order.clear_domain_events()
    assert order.get_domain_events() == []


def test_approve_appends_entry_and_stamps_approved_at(order):
    at = datetime(2026, 1, 19, 12, 0, 0)
    entry = order.approve(by="manager@example.com", at=at)

    assert entry == StatusEntry(status=OrderStatus.APPROVED, timestamp=at)
    assert [e.status for e in order.status_history] == [OrderStatus.PENDING, OrderStatus.APPROVED]
    assert order.current_status is OrderStatus.APPROVED
    assert order.approved_at == at


@pytest.mark.parametrize("action", ["approve", "reject", "cancel"])
def test_transitions_out_of_terminal_status_fail(order, action):
    order.reject(by="admin@example.com")
    history_before = list(order.status_history)

    with pytest.raises(InvalidStateTransition) as exc_info:
        getattr(order, action)()

    assert exc_info.value.context["current_status"] == "rejected"
    assert order.status_history == history_before


@pytest.mark.parametrize(
    "reach, terminal",
    [("approve", OrderStatus.APPROVED), ("reject", OrderStatus.REJECTED), ("cancel", OrderStatus.CANCELLED)],
)
def test_every_terminal_status_blocks_further_transitions(order, reach, terminal):
    getattr(order, reach)()
    assert order.current_status.is_terminal

    for action in ("approve", "reject", "cancel"):
        with pytest.raises(InvalidStateTransition) as exc_info:
            getattr(order, action)()
        assert exc_info.value.context["current_status"] == terminal.value

    assert len(order.status_history) == 2


def test_history_is_prefix_extension(order):
    before = list(order.status_history)
    order.cancel(by="buyer@example.com")
    assert order.status_history[: len(before)] == before
    assert len(order.status_history) == len(before) + 1


def test_transition_records_status_changed_event(order):
    order.clear_domain_events()
    order.cancel(by="buyer@example.com")

    [event] = order.get_domain_events()
    assert event.event_type == "OrderStatusChangedEvent"
    assert event.previous_status == "pending"
    assert event.new_status == "cancelled"
    assert event.changed_by == "buyer@example.com"


def test_tracking_events_are_not_gated_by_status(order):
    # Tracking is independent of the lifecycle: a rejected order still accepts events.
    order.reject()
    event = order.add_tracking_event(status="Returned", location="Chittagong port", note="")

    assert order.tracking == [event]
    assert order.current_status is OrderStatus.REJECTED


def test_order_rejects_price_mismatch(product, shipping):
    with pytest.raises(ValueError):
        Order(
            id="o-1",
            tracking_id=TrackingId.generate(),
            buyer_email="buyer@example.com",
            manager_email=product.manager_email,
            product_id=product.id,
            product_name=product.name,
            price_per_unit=Money(amount=Decimal("10.00")),
            quantity=5,
            order_price=Money(amount=Decimal("49.99")),
            shipping=shipping,
            status_history=[StatusEntry(OrderStatus.PENDING, datetime.utcnow())],
        )


@pytest.mark.parametrize("quantity", [0, -3, True])
def test_order_rejects_non_positive_quantity(product, shipping, quantity):
    with pytest.raises((ValueError, TypeError)):
        Order.place(
            product=product,
            buyer_email="buyer@example.com",
            quantity=quantity,
            shipping=shipping,
            tracking_id=TrackingId.generate(),
        )


def test_order_history_must_start_pending(product, shipping):
    with pytest.raises(ValueError):
        Order(
            id="o-1",
            tracking_id=TrackingId.generate(),
            buyer_email="buyer@example.com",
            manager_email=product.manager_email,
            product_id=product.id,
            product_name=product.name,
            price_per_unit=product.price,
            quantity=5,
            order_price=product.price * 5,
            shipping=shipping,
            status_history=[StatusEntry(OrderStatus.APPROVED, datetime.utcnow() - timedelta(days=1))],
        )


def test_product_minimum_order_quantity(product):
    product.ensure_meets_minimum(5)
    with pytest.raises(BelowMinimumOrderQuantity) as exc_info:
        product.ensure_meets_minimum(3)
    assert exc_info.value.context == {"requested": 3, "minimum": 5}
