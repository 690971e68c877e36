from typing import Optional
from uuid import UUID

from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.versioning.errors import DocumentNotFoundError, VersionNotFoundError
from backend.app.domains.versioning.models import DocumentVersion
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.schemas import (
    AuthorInfo,
    VersionDetail,
    VersionHistory,
    VersionHistoryEntry,
)

DEFAULT_HISTORY_LIMIT = 50


def _author(version: DocumentVersion, name: Optional[str], email: Optional[str]) -> AuthorInfo:
    return AuthorInfo(id=version.changed_by, name=name, email=email)


def to_history_entry(
    version: DocumentVersion, name: Optional[str] = None, email: Optional[str] = None
) -> VersionHistoryEntry:
    return VersionHistoryEntry(
        version_id=version.id,
        version_number=version.version_number,
        title=version.title,
        visibility=version.visibility,
        change_type=version.change_type,
        change_summary=version.change_summary,
        word_count=version.word_count,
        character_count=version.character_count,
        changed_by=_author(version, name, email),
        created_at=version.created_at,
    )


class HistoryReader:
    """Read façade over the version store; every entry carries its author's name and email."""

    def __init__(self, store: VersionStore, documents: DocumentRepository):
        self.store = store
        self.documents = documents

    async def get_history(
        self, document_id: UUID, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0
    ) -> VersionHistory:
        document = await self.documents.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)

        rows = await self.store.list_with_authors(document_id, limit=limit, offset=offset)
        total = await self.store.count(document_id)

        return VersionHistory(
            document_id=document_id,
            current_version=document.current_version,
            total_versions=total,
            limit=limit,
            offset=offset,
            versions=[to_history_entry(v, name, email) for v, name, email in rows],
        )

    async def get_version(self, document_id: UUID, version_number: int) -> VersionDetail:
        row = await self.store.get_with_author(document_id, version_number)
        if row is None:
            raise VersionNotFoundError(document_id, version_number)

        version, name, email = row
        entry = to_history_entry(version, name, email)
        return VersionDetail(
            **entry.model_dump(),
            document_id=version.document_id,
            content=version.content,
        )
