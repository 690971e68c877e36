from unittest.mock import AsyncMock
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.domains.audit.repository import AuditRepository
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.models import Document
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.document.service import DocumentService
from backend.app.domains.user.models import User
from backend.app.domains.user.repository import UserRepository
from backend.app.domains.versioning.models import DocumentVersion
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.schemas import DocumentState
from backend.app.domains.versioning.service import DocumentVersioningService
from backend.app.infrastructure.locks import DocumentLockRegistry


@pytest.fixture
def user_id(author: User) -> UUID:
    return author.id


@pytest.fixture
def lock_registry() -> DocumentLockRegistry:
    return DocumentLockRegistry()


@pytest.fixture
def audit_service(audit_repository: AuditRepository) -> AuditService:
    return AuditService(audit_repository)


@pytest.fixture
def versioning_service(
    version_store: VersionStore,
    document_repository: DocumentRepository,
    audit_service: AuditService,
    lock_registry: DocumentLockRegistry,
) -> DocumentVersioningService:
    return DocumentVersioningService(
        repository=version_store,
        documents=document_repository,
        audit=audit_service,
        locks=lock_registry,
    )


@pytest.fixture
def document_service(
    document_repository: DocumentRepository,
    versioning_service: DocumentVersioningService,
    audit_service: AuditService,
    user_repository: UserRepository,
) -> DocumentService:
    return DocumentService(document_repository, versioning_service, audit_service, user_repository)


@pytest_asyncio.fixture
async def created_document(
    document_service: DocumentService, sample_document_data, user_id: UUID
) -> tuple[Document, DocumentVersion]:
    """A document with its initial version already recorded."""
    return await document_service.create_document(sample_document_data(), user_id)


@pytest_asyncio.fixture
async def bare_document(db_session: AsyncSession, author: User) -> Document:
    """A document row with no version history yet."""
    document = Document(
        title="Draft",
        content="<p>first draft</p>",
        author_id=author.id,
        current_version=0,
    )
    db_session.add(document)
    await db_session.flush()
    return document


@pytest.fixture
def make_state():
    def _make(
        title: str = "Quarterly Report",
        content: str = "<p>Hello world</p>",
        visibility: str = "private",
    ) -> DocumentState:
        return DocumentState(title=title, content=content, visibility=visibility)

    return _make


@pytest.fixture
def mock_version_store() -> AsyncMock:
    store = AsyncMock(spec=VersionStore)
    store.max_version.return_value = 0
    store.latest.return_value = None
    store.exists.return_value = False
    return store


@pytest.fixture
def mock_audit_service() -> AsyncMock:
    return AsyncMock(spec=AuditService)
