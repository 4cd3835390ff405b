from fastapi import APIRouter

from intake_portal.api.v1.endpoints import access, admin, delegation

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(access.router, prefix="/access", tags=["Access"])
api_router.include_router(delegation.router, prefix="/delegation", tags=["Delegation"])

__all__ = ["api_router"]
