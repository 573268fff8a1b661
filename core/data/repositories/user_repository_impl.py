"""SQLAlchemy implementation of UserRepository."""

from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities.user import User
from core.domain.errors import UserAlreadyExists
from core.domain.repositories.user_repository import UserRepository

from ..mappers import UserMapper
from ..models.user_model import UserModel


class SqlAlchemyUserRepository(UserRepository):
    """Concrete implementation of UserRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, user: User) -> None:
        self._session.add(UserMapper.to_persistence(user))
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if "email" in str(exc.orig):
                raise UserAlreadyExists(user.email) from exc
            raise

    async def find_by_id(self, user_id: str) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return UserMapper.to_domain(model) if model else None

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        model = result.scalar_one_or_none()
        return UserMapper.to_domain(model) if model else None

    async def find_all(self, search_text: Optional[str] = None, limit: int = 100) -> List[User]:
        stmt = select(UserModel)
        if search_text:
            pattern = f"%{search_text}%"
            stmt = stmt.where(
                or_(
                    UserModel.display_name.ilike(pattern),
                    UserModel.email.ilike(pattern),
                )
            )
        stmt = stmt.order_by(UserModel.created_at.desc()).limit(limit)

        result = await self._session.execute(stmt)
        return [UserMapper.to_domain(model) for model in result.scalars().all()]

    async def update(self, user: User) -> None:
        model = await self._session.get(UserModel, user.id)
        if model is None:
            return
        UserMapper.update_persistence(user, model)
        await self._session.flush()

    async def delete(self, user_id: str) -> bool:
        model = await self._session.get(UserModel, user_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
