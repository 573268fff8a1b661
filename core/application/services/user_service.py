"""Application service for user accounts and roles."""

from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos.user_dto import (
    RegisterUserRequest,
    RegisterUserResponse,
    SuspendUserRequest,
    UpdateUserRequest,
    UserDTO,
)
from core.data.uow import create_uow
from core.domain.entities.user import User
from core.domain.errors import UserAlreadyExists, UserNotFound
from core.domain.value_objects import CallerContext, Role
from core.infrastructure.logging import get_logger


logger = get_logger(__name__)


class UserService:
    """
    User directory operations.

    Registration is idempotent: signing in again with an existing email
    returns the stored account instead of failing. Accounts without a
    role are treated as buyers.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def register_user(self, request: RegisterUserRequest) -> RegisterUserResponse:
        async with create_uow(self._session_factory) as uow:
            existing = await uow.users.find_by_email(request.email)
            if existing is not None:
                return self._already_registered(existing)

        user = User.register(
            email=request.email,
            display_name=request.display_name,
            photo_url=request.photo_url,
        )
        try:
            async with create_uow(self._session_factory) as uow:
                await uow.users.add(user)
                await uow.commit()
                logger.info(f"[{uow.execution_id}] ✅ Registered user {user.email} ({user.effective_role.value})")
        except UserAlreadyExists:
            # A concurrent registration of the same email won the insert.
            async with create_uow(self._session_factory) as uow:
                existing = await uow.users.find_by_email(request.email)
            if existing is None:
                raise
            return self._already_registered(existing)

        return RegisterUserResponse(created=True, message="User registered", user=UserDTO.from_entity(user))

    @staticmethod
    def _already_registered(user: User) -> RegisterUserResponse:
        return RegisterUserResponse(
            created=False,
            message="User already exists",
            user=UserDTO.from_entity(user),
        )

    async def get_role(self, caller: CallerContext, email: str) -> Role:
        """Role of ``email``; unknown accounts read as buyer."""
        async with create_uow(self._session_factory) as uow:
            user = await uow.users.find_by_email(email)
        return user.effective_role if user else Role.BUYER

    async def list_users(
        self,
        caller: CallerContext,
        search_text: Optional[str] = None,
        limit: int = 100,
    ) -> List[UserDTO]:
        caller.require(Role.ADMIN)
        async with create_uow(self._session_factory) as uow:
            users = await uow.users.find_all(search_text=search_text, limit=limit)
        return [UserDTO.from_entity(user) for user in users]

    async def update_user(
        self, caller: CallerContext, user_id: str, request: UpdateUserRequest
    ) -> UserDTO:
        """Change a user's role and/or status (admins only)."""
        caller.require(Role.ADMIN)
        async with create_uow(self._session_factory) as uow:
            user = await self._get(uow, user_id)
            if request.role is not None:
                user.role = request.role
            if request.status is not None:
                user.status = request.status
            await uow.users.update(user)
            await uow.commit()
            logger.info(
                f"[{uow.execution_id}] User {user.email} updated by {caller.email}: "
                f"role={user.effective_role.value} status={user.status.value}"
            )
        return UserDTO.from_entity(user)

    async def suspend_user(
        self, caller: CallerContext, user_id: str, request: SuspendUserRequest
    ) -> UserDTO:
        caller.require(Role.ADMIN)
        async with create_uow(self._session_factory) as uow:
            user = await self._get(uow, user_id)
            user.suspend(request.suspend_reason, request.suspend_feedback)
            await uow.users.update(user)
            await uow.commit()
            logger.info(f"[{uow.execution_id}] User {user.email} suspended by {caller.email}")
        return UserDTO.from_entity(user)

    async def delete_user(self, caller: CallerContext, user_id: str) -> None:
        caller.require(Role.ADMIN)
        async with create_uow(self._session_factory) as uow:
            deleted = await uow.users.delete(user_id)
            if not deleted:
                raise UserNotFound(user_id)
            await uow.commit()
            logger.info(f"[{uow.execution_id}] User {user_id} deleted by {caller.email}")

    @staticmethod
    async def _get(uow, user_id: str) -> User:
        user = await uow.users.find_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user
