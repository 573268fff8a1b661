"""
Domain errors.

Every rejection carries a stable ``kind`` plus a human-readable message
and a ``context`` dict explaining why (minimum quantity, stock actually
available, current status...). The API layer maps kinds to HTTP status
codes; nothing below the API knows about HTTP.
"""
from typing import Any, Dict, List, Optional


class CommerceError(Exception):
    """Base class for all typed errors raised by the core."""

    kind: str = "CommerceError"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.message, **self.context}


class Unauthenticated(CommerceError):
    kind = "Unauthenticated"

    def __init__(self, reason: str = "Unauthorized Access"):
        super().__init__(reason)


class RoleNotPermitted(CommerceError):
    kind = "RoleNotPermitted"

    def __init__(self, role: str, required: List[str], reason: Optional[str] = None):
        super().__init__(
            reason or f"Role '{role}' may not perform this operation (requires one of: {', '.join(required)})",
            role=role,
            required_roles=required,
        )


class ProductNotFound(CommerceError):
    kind = "ProductNotFound"

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}", product_id=product_id)


class OrderNotFound(CommerceError):
    kind = "OrderNotFound"

    def __init__(self, reference: str):
        super().__init__(f"Order not found: {reference}", reference=reference)


class BelowMinimumOrderQuantity(CommerceError):
    kind = "BelowMinimumOrderQuantity"

    def __init__(self, requested: int, minimum: int):
        super().__init__(
            f"Minimum order quantity is {minimum}, requested {requested}",
            requested=requested,
            minimum=minimum,
        )


class InsufficientStock(CommerceError):
    kind = "InsufficientStock"

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Only {available} unit(s) available, requested {requested}",
            requested=requested,
            available=available,
        )


class InvalidStateTransition(CommerceError):
    kind = "InvalidStateTransition"

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move order from '{current}' to '{target}'",
            current_status=current,
            target_status=target,
        )


class StorageUnavailable(CommerceError):
    kind = "StorageUnavailable"

    def __init__(self, reason: str = "Storage temporarily unavailable", **context: Any):
        super().__init__(reason, **context)


class ReservationRollbackFailed(StorageUnavailable):
    """Stock was decremented but neither the order nor the restore landed."""

    kind = "ReservationRollbackFailed"

    def __init__(self, product_id: str, quantity: int, attempts: int):
        super().__init__(
            f"Failed to restore {quantity} unit(s) of product {product_id} after {attempts} attempt(s)",
            product_id=product_id,
            quantity=quantity,
            attempts=attempts,
        )


class UserNotFound(CommerceError):
    kind = "UserNotFound"

    def __init__(self, reference: str):
        super().__init__(f"User not found: {reference}", reference=reference)


class UserAlreadyExists(CommerceError):
    kind = "UserAlreadyExists"

    def __init__(self, email: str):
        super().__init__(f"User already exists: {email}", email=email)
