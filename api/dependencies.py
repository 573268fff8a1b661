"""
FastAPI Dependencies.

Provides dependency injection for services and the per-request caller context.
"""
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Header

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IIdentityResolver, IRoleDirectory
from core.application.services import (
    CatalogService,
    OrderApplicationService,
    OrderLifecycleService,
    TrackingService,
    UserService,
)
from core.domain.errors import Unauthenticated
from core.domain.event_bus import EventBus
from core.domain.value_objects import CallerContext
from core.infrastructure.adapters.identity import UserRoleDirectory
from core.infrastructure.database.config import get_session_factory as _create_session_factory
from core.infrastructure.event_bus import get_event_bus as _get_global_event_bus
from core.settings import get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_session_factory: Optional[async_sessionmaker] = None
_identity_resolver: Optional[IIdentityResolver] = None


class _DisabledIdentityResolver(IIdentityResolver):
    """Rejects every credential while no identity provider is configured."""

    async def resolve(self, credential: str) -> str:
        raise Unauthenticated("Identity provider is not configured")


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

def get_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = _create_session_factory()
        logger.info("Created session factory")
    return _session_factory


def get_event_bus() -> EventBus:
    return _get_global_event_bus()


def get_identity_resolver() -> IIdentityResolver:
    global _identity_resolver

    if _identity_resolver is None:
        settings = get_app_settings()

        if settings.firebase.enabled:
            from core.infrastructure.adapters.identity.firebase_identity_resolver import (
                FirebaseIdentityResolver,
            )
            _identity_resolver = FirebaseIdentityResolver(settings.firebase)
            logger.info("Created FirebaseIdentityResolver instance")
        else:
            _identity_resolver = _DisabledIdentityResolver()
            logger.warning("Firebase disabled: authenticated endpoints will answer 401")

    return _identity_resolver


def get_role_directory(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> IRoleDirectory:
    return UserRoleDirectory(session_factory)


# =============================================================================
# CALLER CONTEXT
# =============================================================================

def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthenticated()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated()
    return token.strip()


async def get_caller(
    authorization: Optional[str] = Header(default=None),
    identity_resolver: IIdentityResolver = Depends(get_identity_resolver),
    role_directory: IRoleDirectory = Depends(get_role_directory),
) -> CallerContext:
    """Resolve the caller once per request: bearer token -> email -> role."""
    email = await identity_resolver.resolve(_bearer_token(authorization))
    role = await role_directory.lookup_role(email)
    return CallerContext(email=email, role=role)


# =============================================================================
# SERVICES
# =============================================================================

def get_order_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    event_bus: EventBus = Depends(get_event_bus),
) -> OrderApplicationService:
    return OrderApplicationService(session_factory, event_bus, get_app_settings().orders)


def get_lifecycle_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    event_bus: EventBus = Depends(get_event_bus),
) -> OrderLifecycleService:
    return OrderLifecycleService(session_factory, event_bus)


def get_tracking_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    event_bus: EventBus = Depends(get_event_bus),
) -> TrackingService:
    return TrackingService(session_factory, event_bus)


def get_catalog_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> CatalogService:
    return CatalogService(session_factory, get_app_settings().orders)


def get_user_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> UserService:
    return UserService(session_factory)


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _session_factory, _identity_resolver

    _session_factory = None
    _identity_resolver = None

    logger.info("Dependencies reset")
