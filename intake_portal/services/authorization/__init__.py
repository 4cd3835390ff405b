"""Authorization core: admin privilege, resource ownership and delegation tokens."""

from intake_portal.services.authorization.delegation_token import DelegationTokenService
from intake_portal.services.authorization.ownership import (
    OWNERSHIP_CHAIN,
    RELATIONS,
    OwnershipChainVerifier,
)
from intake_portal.services.authorization.privilege_resolver import (
    ADMIN_ROLES,
    AdminSignalSource,
    AllowlistTableSignal,
    ConfiguredAllowlistSignal,
    PrivilegeResolver,
    ProfileRoleSignal,
)
from intake_portal.services.authorization.service import AuthorizationService

__all__ = [
    "ADMIN_ROLES",
    "OWNERSHIP_CHAIN",
    "RELATIONS",
    "AdminSignalSource",
    "AllowlistTableSignal",
    "AuthorizationService",
    "ConfiguredAllowlistSignal",
    "DelegationTokenService",
    "OwnershipChainVerifier",
    "PrivilegeResolver",
    "ProfileRoleSignal",
]
