"""User directory entity."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from ..value_objects import Role


class UserStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"


@dataclass
class User:
    """A registered account. A missing role means buyer."""
    id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: Optional[Role] = None
    status: UserStatus = UserStatus.PENDING
    suspend_reason: Optional[str] = None
    suspend_feedback: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def register(
        cls,
        email: str,
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> 'User':
        return cls(
            id=str(uuid.uuid4()),
            email=email,
            display_name=display_name,
            photo_url=photo_url,
            role=role,
        )

    @property
    def effective_role(self) -> Role:
        return self.role or Role.BUYER

    def suspend(self, reason: Optional[str], feedback: Optional[str]) -> None:
        self.status = UserStatus.SUSPENDED
        self.suspend_reason = reason
        self.suspend_feedback = feedback
