from typing import Sequence
from uuid import UUID

from backend.app.domains.audit.models import AuditAction, AuditEntityType
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.models import Document
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.document.schemas import DocumentCreate, DocumentUpdate
from backend.app.domains.user.repository import UserRepository
from backend.app.domains.versioning.errors import (
    DocumentNotFoundError,
    DocumentValidationError,
    UserNotFoundError,
)
from backend.app.domains.versioning.models import DocumentVersion
from backend.app.domains.versioning.schemas import RecordResult, build_state
from backend.app.domains.versioning.service import DocumentVersioningService
from backend.app.logging_config import get_logger

logger = get_logger("app.domains.document.service")


class DocumentService:
    def __init__(
        self,
        repo: DocumentRepository,
        versioning: DocumentVersioningService,
        audit: AuditService,
        users: UserRepository,
    ):
        self.repo = repo
        self.versioning = versioning
        self.audit = audit
        self.users = users

    async def get_document(self, document_id: UUID) -> Document:
        document = await self.repo.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def list_documents(self) -> Sequence[Document]:
        return await self.repo.list_all()

    async def search_documents(
        self, query: str, user_id: UUID, limit: int = 50
    ) -> Sequence[Document]:
        """Public documents and the caller's own whose title or content contains `query`."""
        term = query.strip()
        if not term:
            raise DocumentValidationError("q", "search query must not be blank")
        return await self.repo.search(term, user_id, limit=limit)

    async def create_document(
        self, data: DocumentCreate, user_id: UUID
    ) -> tuple[Document, DocumentVersion]:
        state = build_state(data.title, data.content, data.visibility)
        if not await self.users.exists(user_id):
            raise UserNotFoundError(user_id)

        document = Document(
            title=state.title,
            content=state.content,
            visibility=state.visibility,
            author_id=user_id,
            current_version=0,
        )
        created = await self.repo.create(document)

        await self.audit.log_action(
            AuditEntityType.DOCUMENT,
            created.id,
            AuditAction.CREATE,
            {"title": state.title, "visibility": state.visibility.value},
            actor=user_id,
        )

        version = await self.versioning.create_initial_version(created.id, state, user_id)
        logger.info(f"Created document {created.id}")
        return created, version

    async def update_document(
        self, document_id: UUID, data: DocumentUpdate, user_id: UUID
    ) -> tuple[Document, RecordResult]:
        document = await self.get_document(document_id)

        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        state = build_state(
            fields.get("title", document.title),
            fields.get("content", document.content),
            fields.get("visibility", document.visibility),
            document_id=document_id,
        )

        document.title = state.title
        document.content = state.content
        document.visibility = state.visibility
        await self.repo.save(document)

        result = await self.versioning.record_change_if_any(document_id, state, user_id)
        if result.created:
            await self.audit.log_action(
                AuditEntityType.DOCUMENT,
                document_id,
                AuditAction.UPDATE,
                {"changed_fields": result.changed_fields},
                actor=user_id,
            )
        return document, result
