"""Delegation token verification endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from intake_portal.dependencies import get_delegation_token_service
from intake_portal.schemas.authorization import DelegationVerifyRequest, DelegationVerifyResponse
from intake_portal.services.authorization import DelegationTokenService

router = APIRouter()


@router.post(
    "/verify",
    response_model=DelegationVerifyResponse,
    summary="Verify a delegation token",
    description="Resolve a delegation token to the application it grants access to",
    operation_id="verify_delegation_token",
)
async def verify_delegation_token(
    request: DelegationVerifyRequest,
    tokens: Annotated[DelegationTokenService, Depends(get_delegation_token_service)],
) -> DelegationVerifyResponse:
    application_id = tokens.verify(request.token)
    if application_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return DelegationVerifyResponse(application_id=application_id)
