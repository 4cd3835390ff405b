"""Generic read access to the portal's relations.

The authorization core only ever reads. Records are returned as plain
dictionaries keyed by column name so the core stays independent of the
ORM and can be exercised against any store implementation.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake_portal.core.exceptions import StoreUnavailableError
from intake_portal.database.base import Base
from intake_portal.database.models import (
    AdminUser,
    ContractorApplication,
    Incident,
    RequiredDocumentSlot,
    UploadedFile,
    UserProfile,
)
from intake_portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

Record = Dict[str, Any]

RELATION_MODELS: Dict[str, Type[Base]] = {
    AdminUser.__tablename__: AdminUser,
    UserProfile.__tablename__: UserProfile,
    ContractorApplication.__tablename__: ContractorApplication,
    Incident.__tablename__: Incident,
    RequiredDocumentSlot.__tablename__: RequiredDocumentSlot,
    UploadedFile.__tablename__: UploadedFile,
}

_MEMBERSHIP_TYPES = (list, tuple, set, frozenset)


class ResourceStore(ABC):
    """Read interface over named relations."""

    @abstractmethod
    async def get_by_id(self, relation: str, record_id: str) -> Optional[Record]:
        """Point lookup by primary key.

        Raises:
            StoreUnavailableError: If the store cannot be queried
        """

    @abstractmethod
    async def list_where(self, relation: str, filters: Mapping[str, Any]) -> List[Record]:
        """Return every record matching all filters.

        A filter value that is a list, tuple or set matches by membership;
        any other value matches by equality.

        Raises:
            StoreUnavailableError: If the store cannot be queried
        """


class SQLAlchemyResourceStore(ResourceStore):
    """ResourceStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        """Initialize the store.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session
        self.logger = LOGGER

    @staticmethod
    def _model_for(relation: str) -> Type[Base]:
        model = RELATION_MODELS.get(relation)
        if model is None:
            raise ValueError(f"Unknown relation: {relation}")
        return model

    @staticmethod
    def _to_record(instance: Base) -> Record:
        mapper = sa_inspect(instance).mapper
        return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}

    @staticmethod
    def _is_malformed_uuid(column: Any, value: Any) -> bool:
        if not isinstance(column.type, UUID):
            return False
        try:
            uuid.UUID(str(value))
        except ValueError:
            return True
        return False

    async def _rollback(self) -> None:
        """Clear a failed transaction so later lookups on the session still run."""
        try:
            await self.session.rollback()
        except SQLAlchemyError as e:
            self.logger.warning(f"Rollback after failed lookup also failed: {str(e)}")

    async def get_by_id(self, relation: str, record_id: str) -> Optional[Record]:
        model = self._model_for(relation)
        pk_column = sa_inspect(model).primary_key[0]
        if self._is_malformed_uuid(pk_column, record_id):
            self.logger.debug(f"Malformed {relation} ID {record_id!r}, no lookup")
            return None

        try:
            query = select(model).where(pk_column == record_id)
            result = await self.session.execute(query)
            instance = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving {relation} by ID {record_id}: {str(e)}",
                exc_info=True
            )
            await self._rollback()
            raise StoreUnavailableError(f"Lookup on {relation} failed", original_error=e) from e

        return self._to_record(instance) if instance is not None else None

    async def list_where(self, relation: str, filters: Mapping[str, Any]) -> List[Record]:
        model = self._model_for(relation)
        query = select(model)

        for field, value in filters.items():
            # Unknown fields are rejected, never ignored
            if not hasattr(model, field):
                raise ValueError(f"Unknown field {field!r} on {relation}")
            column = getattr(model, field)
            if isinstance(value, _MEMBERSHIP_TYPES):
                query = query.where(column.in_(list(value)))
            else:
                query = query.where(column == value)

        try:
            result = await self.session.execute(query)
            instances = list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error listing {relation}: {str(e)}",
                exc_info=True
            )
            await self._rollback()
            raise StoreUnavailableError(f"Query on {relation} failed", original_error=e) from e

        return [self._to_record(instance) for instance in instances]
