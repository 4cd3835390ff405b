"""Database module for SQLAlchemy models and session management."""

from intake_portal.database.base import Base, engine, async_session_maker
from intake_portal.database.client import DatabaseClient, db_client, init_database, close_database
from intake_portal.database.models import (
    AdminUser,
    ContractorApplication,
    Incident,
    RequiredDocumentSlot,
    UploadedFile,
    UserProfile,
)
from intake_portal.database.session import get_async_session

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "get_async_session",
    "DatabaseClient",
    "db_client",
    "init_database",
    "close_database",
    "AdminUser",
    "UserProfile",
    "ContractorApplication",
    "Incident",
    "RequiredDocumentSlot",
    "UploadedFile",
]
