"""Ownership check endpoint.

A resource that does not exist and a resource owned by someone else
both answer 404.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from intake_portal.core.auth import require_caller
from intake_portal.dependencies import get_authorization_service
from intake_portal.schemas.auth import Caller
from intake_portal.schemas.authorization import OwnershipResponse, ResourceKind
from intake_portal.services.authorization import AuthorizationService
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/{leaf_kind}/{leaf_id}",
    response_model=OwnershipResponse,
    summary="Check resource ownership",
    description="Resolve a resource to its application if the caller owns it",
    operation_id="check_resource_ownership",
)
async def check_ownership(
    leaf_kind: ResourceKind,
    leaf_id: str,
    caller: Annotated[Caller, Depends(require_caller)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> OwnershipResponse:
    application_id = await authorization.verify_ownership(caller, leaf_kind, leaf_id)
    if application_id is None:
        LOGGER.info(f"Ownership denied: {leaf_kind.value} {leaf_id} for {caller.identifier}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    return OwnershipResponse(application_id=application_id)
