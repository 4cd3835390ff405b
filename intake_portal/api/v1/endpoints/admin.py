"""Admin endpoints.

Privilege failures map to 401 (no identity) and 403 (not an admin).
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends

from intake_portal.core.auth import require_caller
from intake_portal.dependencies import get_authorization_service, require_admin
from intake_portal.schemas.auth import Caller
from intake_portal.schemas.authorization import (
    AdminCheckResponse,
    DelegationTokenRequest,
    DelegationTokenResponse,
)
from intake_portal.services.authorization import AuthorizationService
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/check",
    response_model=AdminCheckResponse,
    summary="Check admin access",
    description="Report whether the current caller has admin access",
    operation_id="check_admin_access",
)
async def check_admin(
    caller: Annotated[Caller, Depends(require_caller)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> AdminCheckResponse:
    return AdminCheckResponse(is_allowed=await authorization.is_admin_caller(caller))


@router.post(
    "/applications/{application_id}/delegation-token",
    response_model=DelegationTokenResponse,
    summary="Issue a delegation token",
    description="Issue a short-lived prefill token bound to one application",
    operation_id="issue_delegation_token",
)
async def issue_delegation_token(
    application_id: str,
    admin: Annotated[Caller, Depends(require_admin)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
    request: Annotated[Optional[DelegationTokenRequest], Body()] = None,
) -> DelegationTokenResponse:
    """Issue a delegation token for an application.

    Args:
        application_id: Application the token is bound to
        admin: Current caller, verified as admin
        authorization: Authorization service
        request: Optional token lifetime override

    Returns:
        DelegationTokenResponse: The signed token and its lifetime
    """
    ttl_minutes = request.ttl_minutes if request and request.ttl_minutes else None
    token = authorization.issue_delegation_token(application_id, ttl_minutes)

    effective_ttl = ttl_minutes or authorization.tokens.default_ttl.total_seconds() / 60
    LOGGER.info(f"Admin {admin.identifier} issued delegation token for {application_id}")

    return DelegationTokenResponse(
        token=token,
        application_id=application_id,
        expires_in_minutes=effective_ttl,
    )
