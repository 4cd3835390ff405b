"""Schemas for authorization decisions and their HTTP payloads."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ResourceKind(str, Enum):
    """Kinds of resource that sit on the ownership chain."""

    APPLICATION = "application"
    INCIDENT = "incident"
    SLOT = "slot"
    FILE = "file"


class AdminDecision(BaseModel):
    """Outcome of privilege resolution.

    Attributes:
        is_admin: Combined decision
        signals: Per-source outcome, keyed by signal name
    """

    is_admin: bool = False
    signals: Dict[str, bool] = Field(default_factory=dict)


class AdminCheckResponse(BaseModel):
    """Response for the admin check endpoint."""

    is_allowed: bool = Field(..., description="Whether the caller has admin access")


class OwnershipResponse(BaseModel):
    """Response for an ownership check that succeeded."""

    application_id: str = Field(..., description="Owning application ID")


class DelegationTokenRequest(BaseModel):
    """Request body for issuing a delegation token."""

    ttl_minutes: Optional[float] = Field(
        None, gt=0, description="Token lifetime in minutes (defaults to the configured TTL)"
    )


class DelegationTokenResponse(BaseModel):
    """Issued delegation token."""

    token: str = Field(..., description="Signed delegation token")
    application_id: str = Field(..., description="Application the token is bound to")
    expires_in_minutes: float = Field(..., description="Token lifetime in minutes")


class DelegationVerifyRequest(BaseModel):
    """Request body for verifying a delegation token."""

    token: str = Field(..., description="Delegation token to verify")


class DelegationVerifyResponse(BaseModel):
    """Result of a successful delegation token verification."""

    application_id: str = Field(..., description="Application the bearer may act on")


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str = Field(default="healthy", description="Service health status", examples=["healthy", "degraded"])
    version: str = Field(..., description="Application version", examples=["0.1.0"])
    service: str = Field(..., description="Service name", examples=["Intake Portal"])
