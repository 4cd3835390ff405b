"""FastAPI dependency providers for the authorization core."""

from datetime import timedelta
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from intake_portal.core.auth import require_caller
from intake_portal.core.config import settings
from intake_portal.core.exceptions import AccessDeniedError
from intake_portal.database.session import get_async_session
from intake_portal.repositories.resource_store import ResourceStore, SQLAlchemyResourceStore
from intake_portal.schemas.auth import Caller
from intake_portal.services.authorization import AuthorizationService, DelegationTokenService
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


async def get_resource_store(
    session: AsyncSession = Depends(get_async_session),
) -> ResourceStore:
    """Provide a store bound to the request's database session."""
    return SQLAlchemyResourceStore(session)


@lru_cache
def get_delegation_token_service() -> DelegationTokenService:
    """Provide the process-wide delegation token service.

    Raises:
        ConfigurationError: If the signing secret is not configured
    """
    return DelegationTokenService(
        secret=settings.prefill_secret,
        default_ttl=timedelta(minutes=settings.prefill_ttl_minutes),
    )


async def get_authorization_service(
    store: ResourceStore = Depends(get_resource_store),
    token_service: DelegationTokenService = Depends(get_delegation_token_service),
) -> AuthorizationService:
    return AuthorizationService(
        store=store,
        token_service=token_service,
        configured_admin_emails=settings.admin_email_allowlist,
    )


async def require_admin(
    caller: Caller = Depends(require_caller),
    authorization: AuthorizationService = Depends(get_authorization_service),
) -> Caller:
    """Get the current caller or fail with 403 if not an admin.

    Raises:
        UnauthenticatedError: If the request carries no identity
        AccessDeniedError: If the caller is not an admin
    """
    if not await authorization.is_admin_caller(caller):
        LOGGER.info(f"Admin access denied for {caller.identifier}")
        raise AccessDeniedError("Admin access required")
    return caller
