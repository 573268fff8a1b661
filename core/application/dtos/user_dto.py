"""Application DTOs for user accounts."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from core.domain.entities import User, UserStatus
from core.domain.value_objects import Role


class RegisterUserRequest(BaseModel):
    """Request DTO for registering an account after sign-in."""

    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    display_name: Optional[str] = None
    photo_url: Optional[str] = None

    model_config = {"frozen": True}


class UpdateUserRequest(BaseModel):
    """Admin update of role and/or status."""

    role: Optional[Role] = None
    status: Optional[UserStatus] = None

    model_config = {"frozen": True}


class SuspendUserRequest(BaseModel):
    suspend_reason: Optional[str] = None
    suspend_feedback: Optional[str] = None

    model_config = {"frozen": True}


class UserDTO(BaseModel):
    """Response DTO for user details."""

    id: str
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: Role
    status: UserStatus
    suspend_reason: Optional[str] = None
    suspend_feedback: Optional[str] = None
    created_at: datetime

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            photo_url=user.photo_url,
            role=user.effective_role,
            status=user.status,
            suspend_reason=user.suspend_reason,
            suspend_feedback=user.suspend_feedback,
            created_at=user.created_at,
        )


class RegisterUserResponse(BaseModel):
    created: bool
    message: str
    user: UserDTO

    model_config = {"frozen": True}


class UserRoleDTO(BaseModel):
    role: Role

    model_config = {"frozen": True}
