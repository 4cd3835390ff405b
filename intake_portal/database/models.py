"""SQLAlchemy models for the relations read by the authorization core.

Only the columns the core reads are mapped. The tables themselves are
created and written by the wider portal.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, String, TIMESTAMP
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from intake_portal.database.base import Base


class AdminUser(Base):
    """Admin email allowlist entry."""

    __tablename__ = "admin_users"

    email: Mapped[str] = mapped_column(String, primary_key=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="admin")
    user_id: Mapped[str | None] = mapped_column(String, nullable=True)
    invited_by: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )


class UserProfile(Base):
    """Per-user profile carrying the role tag."""

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    clerk_id: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(
        String, nullable=False, default="applicant"
    )  # applicant | admin | super_admin
    updated_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )


class ContractorApplication(Base):
    """Application record, root of the ownership chain."""

    __tablename__ = "contractor_applications"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), server_default="NOW()"
    )


class Incident(Base):
    """Incident disclosed on an application."""

    __tablename__ = "incidents"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    application_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("contractor_applications.id"), nullable=False
    )


class RequiredDocumentSlot(Base):
    """Supporting-document slot required for an incident."""

    __tablename__ = "required_document_slots"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    incident_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("incidents.id"), nullable=False
    )
    slot_code: Mapped[str | None] = mapped_column(String, nullable=True)


class UploadedFile(Base):
    """File uploaded into a document slot."""

    __tablename__ = "uploaded_files"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    slot_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("required_document_slots.id"), nullable=False
    )
    version: Mapped[int | None] = mapped_column(nullable=True)
