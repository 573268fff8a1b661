"""Repository interface for user accounts."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.user import User


class UserRepository(ABC):

    @abstractmethod
    async def add(self, user: User) -> None:
        """Raises UserAlreadyExists if the email is already registered."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_all(self, search_text: Optional[str] = None, limit: int = 100) -> List[User]:
        """Newest first; ``search_text`` matches display name or email, case-insensitive."""
        pass

    @abstractmethod
    async def update(self, user: User) -> None:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        pass
