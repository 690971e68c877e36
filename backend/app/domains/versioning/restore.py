from uuid import UUID

from backend.app.domains.audit.models import AuditAction, AuditEntityType
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.schemas import DocumentResponse
from backend.app.domains.versioning.errors import VersionNotFoundError
from backend.app.domains.versioning.factory import VersionFactory
from backend.app.domains.versioning.models import ChangeType
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.schemas import DocumentState, RestoreResult, VersionResponse
from backend.app.infrastructure.locks import DocumentLockRegistry
from backend.app.logging_config import get_logger

logger = get_logger("app.domains.versioning.restore")


def restore_summary(version_number: int) -> str:
    return f"Restored to version {version_number}"


class RestoreCoordinator:
    """
    Re-applies a stored version onto the live document as a new version.

    fetch target -> validate -> apply onto document -> create version. A
    missing target fails before anything is written. Restoring the current
    version still appends a record.
    """

    def __init__(
        self,
        store: VersionStore,
        factory: VersionFactory,
        audit: AuditService,
        locks: DocumentLockRegistry,
    ):
        self.store = store
        self.factory = factory
        self.audit = audit
        self.locks = locks

    async def restore(self, document_id: UUID, target_version: int, user_id: UUID) -> RestoreResult:
        async with self.locks.hold(document_id):
            target = await self.store.get(document_id, target_version)
            if target is None:
                raise VersionNotFoundError(document_id, target_version)

            document = await self.factory.load_document(document_id)
            state = DocumentState.model_validate(target)

            document.title = state.title
            document.content = state.content
            document.visibility = state.visibility

            version = await self.factory.create_version(
                document_id,
                state,
                user_id,
                ChangeType.UPDATED,
                restore_summary(target_version),
            )

            await self.audit.log_action(
                AuditEntityType.DOCUMENT,
                document_id,
                AuditAction.RESTORE,
                {
                    "document_id": str(document_id),
                    "restored_from": target_version,
                    "new_version": version.version_number,
                },
                actor=user_id,
            )

        logger.info(
            f"Restored document {document_id} to version {target_version} "
            f"as version {version.version_number}"
        )
        return RestoreResult(
            restored_from=target_version,
            restored_version=VersionResponse.model_validate(version),
            document=DocumentResponse.model_validate(document),
        )
