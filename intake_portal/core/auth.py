"""Authentication dependencies for FastAPI routes.

This module resolves the caller of a request from its bearer token.
Requests without a token resolve to an anonymous caller; routes that
need an identity depend on ``require_caller``.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from intake_portal.core.exceptions import UnauthenticatedError
from intake_portal.core.jwt import jwt_verifier
from intake_portal.schemas.auth import Caller
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Caller:
    """Resolve the caller of the current request.

    Args:
        credentials: HTTP Authorization credentials (automatically injected)

    Returns:
        Caller: Authenticated caller, or an anonymous caller if no token was sent

    Raises:
        HTTPException: If a token was sent but is invalid or expired
    """
    if not credentials:
        return Caller.anonymous()

    try:
        claims = await jwt_verifier.verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        LOGGER.warning(f"Invalid token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    caller = Caller.from_claims(claims)
    LOGGER.debug(f"Authenticated caller: {caller.identifier}")
    return caller


async def require_caller(caller: Caller = Depends(get_current_caller)) -> Caller:
    """Get the current caller or fail with 401 if anonymous.

    Raises:
        UnauthenticatedError: If the request carries no identity
    """
    if not caller.is_authenticated:
        raise UnauthenticatedError("Authentication required")
    return caller
