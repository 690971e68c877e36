from uuid import UUID

from backend.app.domains.audit.models import AuditAction, AuditEntityType
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.models import Document
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.versioning.errors import DocumentNotFoundError
from backend.app.domains.versioning.metrics import compute_counts
from backend.app.domains.versioning.models import ChangeType, DocumentVersion
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.schemas import DocumentState
from backend.app.infrastructure.datetime_utils import utc_now
from backend.app.logging_config import get_logger

logger = get_logger("app.domains.versioning.factory")


class VersionFactory:
    """
    Allocates the next version number and commits a version record.

    Callers must hold the document's write lock. The factory is the only
    writer of ``Document.current_version``.
    """

    def __init__(
        self,
        store: VersionStore,
        documents: DocumentRepository,
        audit: AuditService,
    ):
        self.store = store
        self.documents = documents
        self.audit = audit

    async def load_document(self, document_id: UUID) -> Document:
        document = await self.documents.get_for_update(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def create_version(
        self,
        document_id: UUID,
        state: DocumentState,
        user_id: UUID,
        change_type: ChangeType,
        change_summary: str | None = None,
    ) -> DocumentVersion:
        document = await self.load_document(document_id)

        version_number = await self.store.max_version(document_id) + 1
        counts = compute_counts(state.content)

        version = DocumentVersion(
            document_id=document_id,
            version_number=version_number,
            title=state.title,
            content=state.content,
            visibility=state.visibility,
            changed_by=user_id,
            change_type=change_type,
            change_summary=change_summary or "",
            word_count=counts.word_count,
            character_count=counts.character_count,
            created_at=utc_now(),
        )
        await self.store.append(version)

        document.current_version = version_number
        document.last_version_created_at = version.created_at
        await self.documents.save(document)

        await self.audit.log_action(
            AuditEntityType.DOCUMENT_VERSION,
            version.id,
            AuditAction.CREATE,
            {
                "document_id": str(document_id),
                "version_number": version_number,
                "change_type": change_type.value,
                "word_count": counts.word_count,
                "character_count": counts.character_count,
            },
            actor=user_id,
        )
        await self.audit.log_action(
            AuditEntityType.DOCUMENT,
            document_id,
            AuditAction.UPDATE_CURRENT_VERSION,
            {"document_id": str(document_id), "new_current_version": version_number},
            actor=user_id,
        )

        logger.info(
            f"Created version {version_number} ({change_type.value}) for document {document_id}"
        )
        return version
