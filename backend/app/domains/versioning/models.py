import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.domains.document.models import Visibility, enum_values
from backend.app.domains.versioning.errors import VersionImmutableError
from backend.app.infrastructure.database import Base
from backend.app.infrastructure.datetime_utils import utc_now


class ChangeType(str, PyEnum):
    CREATED = "created"
    UPDATED = "updated"
    TITLE_CHANGED = "title_changed"
    CONTENT_CHANGED = "content_changed"
    VISIBILITY_CHANGED = "visibility_changed"


class DocumentVersion(Base):
    __tablename__ = "document_versions"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("documents.id"), nullable=False
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    visibility: Mapped[Visibility] = mapped_column(
        SQLEnum(Visibility, name="visibility_enum", values_callable=enum_values),
        nullable=False,
    )
    # Weak reference: versions outlive user accounts
    changed_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    change_type: Mapped[ChangeType] = mapped_column(
        SQLEnum(ChangeType, name="change_type_enum", values_callable=enum_values),
        nullable=False,
    )
    change_summary: Mapped[str] = mapped_column(String, nullable=False, default="")
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    character_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("document_id", "version_number", name="uq_document_version"),
        Index("ix_document_versions_document_version", "document_id", "version_number"),
        Index("ix_document_versions_document_created", "document_id", "created_at"),
    )


@event.listens_for(DocumentVersion, "before_update")
def _reject_version_update(mapper, connection, target: DocumentVersion) -> None:
    raise VersionImmutableError(target.document_id, target.version_number)


@event.listens_for(DocumentVersion, "before_delete")
def _reject_version_delete(mapper, connection, target: DocumentVersion) -> None:
    raise VersionImmutableError(target.document_id, target.version_number, operation="delete")
