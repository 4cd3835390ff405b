"""Authentication schemas for Supabase JWT tokens.

This module defines Pydantic models for the JWT claims issued by the
identity provider and the per-request caller identity derived from them.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class JWTClaims(BaseModel):
    """JWT claims extracted from Supabase access token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User email")
    role: str = Field(default="authenticated", description="Token role")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    iss: str = Field(..., description="Token issuer")

    # Optional Supabase-specific claims
    aud: Optional[str] = Field(None, description="Audience")
    app_metadata: Optional[Dict[str, Any]] = Field(None, description="Application metadata")
    user_metadata: Optional[Dict[str, Any]] = Field(None, description="User metadata")
    session_id: Optional[str] = Field(None, description="Session ID")


class Caller(BaseModel):
    """Resolved identity of an inbound request.

    ``identifier`` is absent for anonymous requests. ``emails`` holds the
    verified addresses, lower-cased and de-duplicated.
    """

    identifier: Optional[str] = Field(None, description="Identity provider user ID")
    emails: List[str] = Field(default_factory=list, description="Verified email addresses")

    @field_validator("identifier")
    @classmethod
    def _blank_identifier_is_anonymous(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("emails")
    @classmethod
    def _normalize_emails(cls, value: List[str]) -> List[str]:
        normalized: List[str] = []
        for email in value:
            email = (email or "").strip().lower()
            if email and email not in normalized:
                normalized.append(email)
        return normalized

    @property
    def is_authenticated(self) -> bool:
        return self.identifier is not None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()

    @classmethod
    def from_claims(cls, claims: JWTClaims) -> "Caller":
        """Build a caller from verified token claims."""
        emails = [claims.email] if claims.email else []
        return cls(identifier=claims.sub, emails=emails)
