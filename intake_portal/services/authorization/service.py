"""Authorization decisions consumed by route handlers."""

from datetime import timedelta
from typing import Iterable, Optional

from intake_portal.repositories.resource_store import ResourceStore
from intake_portal.schemas.auth import Caller
from intake_portal.schemas.authorization import ResourceKind
from intake_portal.services.authorization.delegation_token import DelegationTokenService
from intake_portal.services.authorization.ownership import OwnershipChainVerifier
from intake_portal.services.authorization.privilege_resolver import PrivilegeResolver
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)


class AuthorizationService:
    """Single entry point for admin, ownership and delegation checks.

    None of the methods raise for an expected denial: a failed check is
    reported as ``False`` or ``None``.
    """

    def __init__(
        self,
        store: ResourceStore,
        token_service: DelegationTokenService,
        configured_admin_emails: Iterable[str] = (),
    ):
        """Initialize the service.

        Args:
            store: Read access to the portal relations
            token_service: Delegation token issuer/verifier
            configured_admin_emails: Operator allowlist from configuration
        """
        self.privileges = PrivilegeResolver.for_store(store, configured_admin_emails)
        self.ownership = OwnershipChainVerifier(store)
        self.tokens = token_service

    async def is_admin_caller(self, caller: Caller) -> bool:
        decision = await self.privileges.resolve_admin(caller)
        return decision.is_admin

    async def verify_ownership(
        self, caller: Caller, leaf_kind: ResourceKind, leaf_id: str
    ) -> Optional[str]:
        """Return the owning application ID if the caller owns the resource."""
        if not caller.is_authenticated:
            return None
        return await self.ownership.owns_via_chain(caller.identifier, leaf_id, leaf_kind)

    def issue_delegation_token(
        self, application_id: str, ttl_minutes: Optional[float] = None
    ) -> str:
        ttl = timedelta(minutes=ttl_minutes) if ttl_minutes is not None else None
        token = self.tokens.issue(application_id, ttl)
        LOGGER.info(f"Issued delegation token for application {application_id}")
        return token

    def verify_delegation_token(self, token: str) -> Optional[str]:
        return self.tokens.verify(token)
