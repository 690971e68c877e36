from uuid import UUID

from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.versioning.detector import ChangeDetector
from backend.app.domains.versioning.diff import DiffEngine
from backend.app.domains.versioning.errors import VersionConflictError
from backend.app.domains.versioning.factory import VersionFactory
from backend.app.domains.versioning.history import DEFAULT_HISTORY_LIMIT, HistoryReader
from backend.app.domains.versioning.models import ChangeType, DocumentVersion
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.restore import RestoreCoordinator
from backend.app.domains.versioning.schemas import (
    DocumentState,
    RecordResult,
    RestoreResult,
    VersionDetail,
    VersionDiff,
    VersionHistory,
    VersionResponse,
)
from backend.app.infrastructure.locks import DocumentLockRegistry, get_document_locks
from backend.app.logging_config import LogContext, get_logger

logger = get_logger("app.domains.versioning.service")


class DocumentVersioningService:
    """
    Entry point of the version-control engine used by the document CRUD layer.

    Writes are serialized per document; the caller owns the transaction and
    must commit on success and roll back on any VersioningError.
    """

    def __init__(
        self,
        repository: VersionStore,
        documents: DocumentRepository,
        audit: AuditService,
        locks: DocumentLockRegistry | None = None,
        detector: ChangeDetector | None = None,
    ):
        self.repository = repository
        self.documents = documents
        self.audit = audit
        self.locks = locks or get_document_locks()
        self.detector = detector or ChangeDetector()
        self.factory = VersionFactory(repository, documents, audit)
        self.history = HistoryReader(repository, documents)
        self.diff_engine = DiffEngine(self.history)
        self.restorer = RestoreCoordinator(repository, self.factory, audit, self.locks)

    async def create_initial_version(
        self, document_id: UUID, state: DocumentState, user_id: UUID
    ) -> DocumentVersion:
        with LogContext(document_id=str(document_id), user_id=str(user_id)):
            async with self.locks.hold(document_id):
                existing = await self.repository.max_version(document_id)
                if existing:
                    raise VersionConflictError(
                        document_id,
                        existing,
                        reason=f"Document {document_id} already has {existing} version(s)",
                    )
                decision = self.detector.detect(None, state)
                return await self.factory.create_version(
                    document_id,
                    state,
                    user_id,
                    ChangeType.CREATED,
                    decision.change_summary,
                )

    async def record_change_if_any(
        self, document_id: UUID, proposed: DocumentState, user_id: UUID
    ) -> RecordResult:
        with LogContext(document_id=str(document_id), user_id=str(user_id)):
            async with self.locks.hold(document_id):
                latest = await self.repository.latest(document_id)
                decision = self.detector.detect(latest, proposed)
                if not decision.requires_version:
                    logger.debug(f"No changes detected for document {document_id}")
                    return RecordResult(created=False)

                version = await self.factory.create_version(
                    document_id,
                    proposed,
                    user_id,
                    decision.change_type,
                    decision.change_summary,
                )

        return RecordResult(
            created=True,
            version=VersionResponse.model_validate(version),
            change_type=decision.change_type,
            changed_fields=decision.changed_fields,
        )

    async def list_versions(
        self, document_id: UUID, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0
    ) -> VersionHistory:
        return await self.history.get_history(document_id, limit=limit, offset=offset)

    async def get_version(self, document_id: UUID, version_number: int) -> VersionDetail:
        return await self.history.get_version(document_id, version_number)

    async def compare_versions(
        self, document_id: UUID, version_a: int, version_b: int
    ) -> VersionDiff:
        return await self.diff_engine.compare(document_id, version_a, version_b)

    async def restore_version(
        self, document_id: UUID, version_number: int, user_id: UUID
    ) -> RestoreResult:
        with LogContext(document_id=str(document_id), user_id=str(user_id)):
            return await self.restorer.restore(document_id, version_number, user_id)
