from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backend.app.domains.document.models import Visibility
from backend.app.domains.document.schemas import DocumentResponse
from backend.app.domains.versioning.errors import DocumentValidationError
from backend.app.domains.versioning.models import ChangeType

TRACKED_FIELDS = ("title", "content", "visibility")


class DocumentState(BaseModel):
    """The versioned fields of a document at one point in time."""

    title: str = Field(..., max_length=255)
    content: str = ""
    visibility: Visibility = Visibility.PRIVATE

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value


def build_state(
    title: str | None,
    content: str | None,
    visibility: Visibility | str | None,
    document_id: UUID | None = None,
) -> DocumentState:
    """Validate raw field values into a DocumentState or raise DocumentValidationError."""
    if title is None:
        raise DocumentValidationError("title", "field required", document_id=document_id)
    try:
        return DocumentState(
            title=title,
            content=content or "",
            visibility=visibility if visibility is not None else Visibility.PRIVATE,
        )
    except ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "state"
        raise DocumentValidationError(field, first["msg"], document_id=document_id) from e


class ChangeDecision(BaseModel):
    requires_version: bool
    change_type: ChangeType | None = None
    change_summary: str = ""
    changed_fields: list[str] = Field(default_factory=list)


class VersionResponse(BaseModel):
    id: UUID
    document_id: UUID
    version_number: int
    title: str
    content: str
    visibility: Visibility
    changed_by: UUID
    change_type: ChangeType
    change_summary: str
    word_count: int
    character_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthorInfo(BaseModel):
    id: UUID
    name: str | None = None
    email: str | None = None


class VersionHistoryEntry(BaseModel):
    version_id: UUID
    version_number: int
    title: str
    visibility: Visibility
    change_type: ChangeType
    change_summary: str
    word_count: int
    character_count: int
    changed_by: AuthorInfo
    created_at: datetime


class VersionHistory(BaseModel):
    document_id: UUID
    current_version: int
    total_versions: int
    limit: int
    offset: int
    versions: list[VersionHistoryEntry]


class VersionDetail(VersionHistoryEntry):
    document_id: UUID
    content: str


class FieldDiff(BaseModel):
    old: str
    new: str
    changed: bool


class ContentDiff(FieldDiff):
    word_count_diff: int
    character_count_diff: int


class VersionRef(BaseModel):
    version_number: int
    change_type: ChangeType
    change_summary: str
    changed_by: AuthorInfo
    created_at: datetime


class VersionDiff(BaseModel):
    document_id: UUID
    from_version: VersionRef
    to_version: VersionRef
    title: FieldDiff
    content: ContentDiff
    visibility: FieldDiff


class RecordResult(BaseModel):
    created: bool
    version: VersionResponse | None = None
    change_type: ChangeType | None = None
    changed_fields: list[str] = Field(default_factory=list)


class RestoreResult(BaseModel):
    restored_from: int
    restored_version: VersionResponse
    document: DocumentResponse


class DocumentSaveResponse(BaseModel):
    document: DocumentResponse
    version_created: bool
    version: VersionResponse | None = None
    changed_fields: list[str] = Field(default_factory=list)
