"""Unit of Work pattern for atomic transactions."""

import logging
from typing import Optional

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.domain.errors import StorageUnavailable
from core.domain.value_objects import ExecutionID

from .repositories.order_repository_impl import SqlAlchemyOrderRepository
from .repositories.product_repository_impl import SqlAlchemyProductRepository
from .repositories.user_repository_impl import SqlAlchemyUserRepository


logger = logging.getLogger(__name__)


def _is_storage_failure(exc: BaseException) -> bool:
    """Infrastructure failure (connection, lock, timeout), not a constraint violation."""
    return isinstance(exc, DBAPIError) and not isinstance(exc, IntegrityError)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories
    5. Surface driver-level failures as StorageUnavailable
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        execution_id: Optional[ExecutionID] = None,
    ) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
            execution_id: ExecutionID to reuse (a new one is generated otherwise)
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = execution_id

        # Lazy-loaded repositories
        self._order_repository: Optional[SqlAlchemyOrderRepository] = None
        self._product_repository: Optional[SqlAlchemyProductRepository] = None
        self._user_repository: Optional[SqlAlchemyUserRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        if self._execution_id is None:
            self._execution_id = ExecutionID.generate()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, always close the session."""
        try:
            if exc_type is not None:
                await self._session.rollback()
        finally:
            await self._session.close()

        if exc_val is not None and _is_storage_failure(exc_val):
            logger.error(f"[{self._execution_id}] Storage failure: {exc_val}")
            raise StorageUnavailable(
                f"Storage unavailable: {exc_val.__class__.__name__}"
            ) from exc_val

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        session = self._require_session()
        if self._order_repository is None:
            self._order_repository = SqlAlchemyOrderRepository(session)
        return self._order_repository

    @property
    def products(self) -> SqlAlchemyProductRepository:
        """Lazy-load product repository."""
        session = self._require_session()
        if self._product_repository is None:
            self._product_repository = SqlAlchemyProductRepository(session)
        return self._product_repository

    @property
    def users(self) -> SqlAlchemyUserRepository:
        """Lazy-load user repository."""
        session = self._require_session()
        if self._user_repository is None:
            self._user_repository = SqlAlchemyUserRepository(session)
        return self._user_repository

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self._require_session().commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self._require_session().rollback()


def create_uow(
    session_factory: async_sessionmaker,
    execution_id: Optional[ExecutionID] = None,
) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory
        execution_id: Optional ExecutionID shared across several units of work

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory, execution_id=execution_id)
