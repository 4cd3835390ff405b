"""Ownership verification along the application resource chain.

Ownership is recorded only on the application. Every other resource
reaches its application by following parent references upward:

    file -> slot -> incident -> application

Parent references never change after insert, so a lookup against a
stale replica can only produce a spurious denial, never a grant.
"""

from typing import Dict, Optional, Tuple

from intake_portal.core.exceptions import StoreUnavailableError
from intake_portal.repositories.resource_store import ResourceStore
from intake_portal.schemas.authorization import ResourceKind
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

# kind -> (parent reference column, parent kind)
OWNERSHIP_CHAIN: Dict[ResourceKind, Tuple[str, ResourceKind]] = {
    ResourceKind.FILE: ("slot_id", ResourceKind.SLOT),
    ResourceKind.SLOT: ("incident_id", ResourceKind.INCIDENT),
    ResourceKind.INCIDENT: ("application_id", ResourceKind.APPLICATION),
}

RELATIONS: Dict[ResourceKind, str] = {
    ResourceKind.APPLICATION: "contractor_applications",
    ResourceKind.INCIDENT: "incidents",
    ResourceKind.SLOT: "required_document_slots",
    ResourceKind.FILE: "uploaded_files",
}

OWNER_FIELD = "user_id"


class OwnershipChainVerifier:
    """Resolves a resource to its application and checks the owner."""

    def __init__(self, store: ResourceStore):
        self.store = store

    async def resolve_application(self, leaf_id: str, leaf_kind: ResourceKind) -> Optional[dict]:
        """Walk parent references from a resource up to its application.

        Args:
            leaf_id: ID of the starting resource
            leaf_kind: Kind of the starting resource

        Returns:
            The application record, or None if any hop is missing

        Raises:
            StoreUnavailableError: If a lookup fails
        """
        kind = ResourceKind(leaf_kind)
        record_id = leaf_id

        # One hop per chain entry plus the application lookup itself
        for _ in range(len(OWNERSHIP_CHAIN) + 1):
            record = await self.store.get_by_id(RELATIONS[kind], record_id)
            if record is None:
                LOGGER.debug(f"{kind.value} {record_id} not found")
                return None

            if kind is ResourceKind.APPLICATION:
                return record

            parent_field, parent_kind = OWNERSHIP_CHAIN[kind]
            parent_id = record.get(parent_field)
            if not parent_id:
                LOGGER.debug(f"{kind.value} {record_id} has no {parent_field}")
                return None

            kind, record_id = parent_kind, str(parent_id)

        LOGGER.error(f"Ownership chain did not terminate at an application from {leaf_kind}")
        return None

    async def owns_via_chain(
        self,
        caller_identifier: Optional[str],
        leaf_id: str,
        leaf_kind: ResourceKind,
    ) -> Optional[str]:
        """Check that the caller owns a resource.

        Missing resources, broken chains, owner mismatches and store
        failures all produce the same ``None`` result.

        Args:
            caller_identifier: Identity provider user ID of the caller
            leaf_id: ID of the resource being accessed
            leaf_kind: Kind of the resource being accessed

        Returns:
            The owning application ID, or None if not owned
        """
        if not caller_identifier or not leaf_id:
            return None

        try:
            application = await self.resolve_application(str(leaf_id), leaf_kind)
        except StoreUnavailableError as e:
            LOGGER.warning(f"Ownership lookup for {leaf_kind} {leaf_id} failed, denying: {e}")
            return None

        if application is None:
            return None

        owner = application.get(OWNER_FIELD)
        if owner is None or str(owner) != caller_identifier:
            LOGGER.debug(f"{leaf_kind} {leaf_id} is not owned by {caller_identifier}")
            return None

        return str(application["id"])
