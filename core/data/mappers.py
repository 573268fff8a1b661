"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal
from uuid import UUID

from core.domain.entities import (
    Order,
    Product,
    StatusEntry,
    TrackingEvent,
    User,
    UserStatus,
)
from core.domain.value_objects import (
    ExecutionID,
    Money,
    OrderStatus,
    Role,
    ShippingInfo,
    TrackingId,
)

from .models import (
    OrderModel,
    OrderStatusModel,
    OrderTrackingModel,
    ProductModel,
    UserModel,
)


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model (with history and tracking loaded) to domain entity.

        Args:
            model: OrderModel instance

        Returns:
            Order domain entity
        """
        return Order(
            id=model.id,
            tracking_id=TrackingId(model.tracking_id),
            buyer_email=model.buyer_email,
            manager_email=model.manager_email,
            product_id=model.product_id,
            product_name=model.product_name,
            price_per_unit=Money(
                amount=Decimal(str(model.price_per_unit)),
                currency=model.currency,
            ),
            quantity=model.quantity,
            order_price=Money(
                amount=Decimal(str(model.order_price)),
                currency=model.currency,
            ),
            shipping=ShippingInfo(
                first_name=model.first_name,
                last_name=model.last_name,
                contact=model.contact,
                delivery_address=model.delivery_address,
                additional_notes=model.additional_notes or "",
            ),
            status_history=[
                StatusEntry(status=OrderStatus(row.status), timestamp=row.timestamp)
                for row in model.status_history
            ],
            tracking=[
                TrackingEvent(
                    status=row.status,
                    location=row.location,
                    note=row.note or "",
                    timestamp=row.timestamp,
                )
                for row in model.tracking
            ],
            created_at=model.created_at,
            approved_at=model.approved_at,
            execution_id=ExecutionID(UUID(model.execution_id)) if model.execution_id else None,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert a freshly placed Order to an ORM model.

        Args:
            entity: Order domain entity

        Returns:
            OrderModel instance with its initial history rows attached
        """
        return OrderModel(
            id=entity.id,
            tracking_id=entity.tracking_id.value,
            buyer_email=entity.buyer_email,
            manager_email=entity.manager_email,
            product_id=entity.product_id,
            product_name=entity.product_name,
            price_per_unit=entity.price_per_unit.amount,
            currency=entity.price_per_unit.currency,
            quantity=entity.quantity,
            order_price=entity.order_price.amount,
            first_name=entity.shipping.first_name,
            last_name=entity.shipping.last_name,
            contact=entity.shipping.contact,
            delivery_address=entity.shipping.delivery_address,
            additional_notes=entity.shipping.additional_notes,
            approved_at=entity.approved_at,
            created_at=entity.created_at,
            execution_id=str(entity.execution_id) if entity.execution_id else None,
            status_history=[
                StatusMapper.to_persistence(entity.id, sequence, entry)
                for sequence, entry in enumerate(entity.status_history)
            ],
            tracking=[
                TrackingMapper.to_persistence(entity.id, event)
                for event in entity.tracking
            ],
        )


class StatusMapper:
    """Static mapper for StatusEntry → OrderStatusModel."""

    @staticmethod
    def to_persistence(order_id: str, sequence: int, entry: StatusEntry) -> OrderStatusModel:
        return OrderStatusModel(
            order_id=order_id,
            sequence=sequence,
            status=entry.status.value,
            timestamp=entry.timestamp,
        )


class TrackingMapper:
    """Static mapper for TrackingEvent → OrderTrackingModel."""

    @staticmethod
    def to_persistence(order_id: str, event: TrackingEvent) -> OrderTrackingModel:
        return OrderTrackingModel(
            order_id=order_id,
            status=event.status,
            location=event.location,
            note=event.note,
            timestamp=event.timestamp,
        )


class ProductMapper:
    """Static mapper for Product ↔ ProductModel transformation."""

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            price=Money(amount=Decimal(str(model.price)), currency=model.currency),
            moq=model.moq,
            available_quantity=model.available_quantity,
            manager_email=model.manager_email,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Product) -> ProductModel:
        return ProductModel(
            id=entity.id,
            name=entity.name,
            price=entity.price.amount,
            currency=entity.price.currency,
            moq=entity.moq,
            available_quantity=entity.available_quantity,
            manager_email=entity.manager_email,
            created_at=entity.created_at,
        )


class UserMapper:
    """Static mapper for User ↔ UserModel transformation."""

    @staticmethod
    def to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            photo_url=model.photo_url,
            role=Role(model.role) if model.role else None,
            status=UserStatus(model.status),
            suspend_reason=model.suspend_reason,
            suspend_feedback=model.suspend_feedback,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: User) -> UserModel:
        model = UserModel(id=entity.id, created_at=entity.created_at)
        UserMapper.update_persistence(entity, model)
        return model

    @staticmethod
    def update_persistence(entity: User, model: UserModel) -> None:
        """Copy mutable fields onto an existing ORM row."""
        model.email = entity.email
        model.display_name = entity.display_name
        model.photo_url = entity.photo_url
        model.role = entity.role.value if entity.role else None
        model.status = entity.status.value
        model.suspend_reason = entity.suspend_reason
        model.suspend_feedback = entity.suspend_feedback
