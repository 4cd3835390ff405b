"""Admin privilege resolution.

Admin status comes from independent signals: the ``admin_users`` email
allowlist, the role tag on the caller's ``user_profiles`` row and,
optionally, an operator allowlist from configuration. The decision is the
OR of all signals. A signal whose store lookup fails counts as ``False``
and does not prevent the remaining signals from being evaluated.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Sequence

from intake_portal.core.exceptions import StoreUnavailableError
from intake_portal.repositories.resource_store import ResourceStore
from intake_portal.schemas.auth import Caller
from intake_portal.schemas.authorization import AdminDecision
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

ADMIN_ROLES = frozenset({"admin", "super_admin"})

ADMIN_USERS_RELATION = "admin_users"
USER_PROFILES_RELATION = "user_profiles"


class AdminSignalSource(ABC):
    """A single, independently failable source of admin status."""

    name: str = "signal"

    @abstractmethod
    async def is_admin(self, caller: Caller) -> bool:
        """Return whether this source considers the caller an admin.

        Raises:
            StoreUnavailableError: If the backing store cannot be queried
        """


class AllowlistTableSignal(AdminSignalSource):
    """Caller has an email listed in the ``admin_users`` relation."""

    name = "allowlist"

    def __init__(self, store: ResourceStore):
        self.store = store

    async def is_admin(self, caller: Caller) -> bool:
        if not caller.emails:
            return False
        rows = await self.store.list_where(ADMIN_USERS_RELATION, {"email": list(caller.emails)})
        return any((row.get("email") or "").lower() in caller.emails for row in rows)


class ProfileRoleSignal(AdminSignalSource):
    """Caller's profile carries an admin or super_admin role."""

    name = "profile_role"

    def __init__(self, store: ResourceStore):
        self.store = store

    async def is_admin(self, caller: Caller) -> bool:
        if not caller.identifier:
            return False
        profile = await self.store.get_by_id(USER_PROFILES_RELATION, caller.identifier)
        if profile is None:
            # Older profiles are keyed by clerk_id
            rows = await self.store.list_where(
                USER_PROFILES_RELATION, {"clerk_id": caller.identifier}
            )
            if not rows:
                return False
            profile = rows[0]
        return (profile.get("role") or "").strip().lower() in ADMIN_ROLES


class ConfiguredAllowlistSignal(AdminSignalSource):
    """Caller has an email in the operator-configured allowlist."""

    name = "configured_allowlist"

    def __init__(self, emails: Iterable[str]):
        self.emails = frozenset(e.strip().lower() for e in emails if e and e.strip())

    async def is_admin(self, caller: Caller) -> bool:
        return any(email in self.emails for email in caller.emails)


class PrivilegeResolver:
    """Combines admin signals into one decision."""

    def __init__(self, signals: Sequence[AdminSignalSource]):
        """Initialize the resolver.

        Args:
            signals: Sources to consult, in evaluation order
        """
        self.signals: List[AdminSignalSource] = list(signals)

    @classmethod
    def for_store(cls, store: ResourceStore, configured_emails: Iterable[str] = ()) -> "PrivilegeResolver":
        """Build the standard resolver over a resource store.

        The configured allowlist signal is only installed when it has entries.
        """
        signals: List[AdminSignalSource] = [
            AllowlistTableSignal(store),
            ProfileRoleSignal(store),
        ]
        configured = ConfiguredAllowlistSignal(configured_emails)
        if configured.emails:
            signals.append(configured)
        return cls(signals)

    async def resolve_admin(self, caller: Caller) -> AdminDecision:
        """Resolve whether the caller holds admin privilege.

        Args:
            caller: Resolved request identity

        Returns:
            AdminDecision with the combined outcome and each signal's result
        """
        if not caller.is_authenticated:
            return AdminDecision(is_admin=False)

        # Signals share one session per request, so they run one after another
        outcomes = {}
        for signal in self.signals:
            try:
                outcomes[signal.name] = await signal.is_admin(caller)
            except StoreUnavailableError as e:
                LOGGER.warning(
                    f"Admin signal '{signal.name}' unavailable for {caller.identifier}, treating as false: {e}"
                )
                outcomes[signal.name] = False

        decision = AdminDecision(is_admin=any(outcomes.values()), signals=outcomes)
        LOGGER.debug(f"Admin decision for {caller.identifier}: {decision.is_admin} ({outcomes})")
        return decision
