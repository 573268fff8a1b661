"""Order lifecycle status and role value objects."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet

from ..errors import RoleNotPermitted


class OrderStatus(str, Enum):
    """Status values recorded in an order's status history."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


class Role(str, Enum):
    """Caller roles resolved from the user directory."""

    BUYER = "buyer"
    MANAGER = "manager"
    ADMIN = "admin"


STAFF_ROLES: FrozenSet[Role] = frozenset({Role.ADMIN, Role.MANAGER})

# Target status -> roles allowed to trigger the transition out of PENDING.
TRANSITION_ROLES: Dict[OrderStatus, FrozenSet[Role]] = {
    OrderStatus.APPROVED: STAFF_ROLES,
    OrderStatus.REJECTED: STAFF_ROLES,
    OrderStatus.CANCELLED: frozenset({Role.BUYER}),
}


@dataclass(frozen=True)
class CallerContext:
    """
    Resolved identity of the caller of a core operation.

    Resolved once per request at the boundary and passed explicitly
    into every service call.
    """
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def require(self, *roles: Role) -> None:
        """Raise RoleNotPermitted unless the caller holds one of ``roles``."""
        if self.role not in roles:
            raise RoleNotPermitted(
                role=self.role.value,
                required=[r.value for r in roles],
            )

    def require_self_or_admin(self, email: str) -> None:
        """Allow the caller acting on their own records, or any admin."""
        if self.is_admin or self.email == email:
            return
        raise RoleNotPermitted(
            role=self.role.value,
            required=[Role.ADMIN.value],
            reason=f"{self.email} may not access records of {email}",
        )
