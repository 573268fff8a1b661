"""Role lookup backed by the users table."""
from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IRoleDirectory
from core.data.uow import create_uow
from core.domain.value_objects import Role


class UserRoleDirectory(IRoleDirectory):
    """Reads the stored role; unknown users are buyers."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def lookup_role(self, email: str) -> Role:
        async with create_uow(self._session_factory) as uow:
            user = await uow.users.find_by_email(email)
        return user.effective_role if user else Role.BUYER
