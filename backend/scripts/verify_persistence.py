import asyncio
import uuid

from backend.app.infrastructure.database import get_db_session
from backend.app.domains.audit.repository import AuditRepository
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.document.schemas import DocumentCreate, DocumentUpdate
from backend.app.domains.document.service import DocumentService
from backend.app.domains.user.models import User
from backend.app.domains.user.repository import UserRepository
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.service import DocumentVersioningService

async def verify_persistence():
    print("Starting persistence verification...")
    async for session in get_db_session():
        try:
            user = User(name="Persistence Check", email=f"check-{uuid.uuid4()}@example.com")
            session.add(user)
            await session.flush()

            documents = DocumentRepository(session)
            audit = AuditService(AuditRepository(session))
            versioning = DocumentVersioningService(VersionStore(session), documents, audit)
            service = DocumentService(documents, versioning, audit, UserRepository(session))

            # 1. Create with initial version
            document, version = await service.create_document(
                DocumentCreate(title="Persistence check", content="<p>one two</p>"), user.id
            )
            assert version.version_number == 1
            print(f"Created Document: {document.id}")

            # 2. Auto-save, then repeat it (second save must be a no-op)
            _, result = await service.update_document(
                document.id, DocumentUpdate(content="<p>one two three</p>"), user.id
            )
            assert result.created and result.version.version_number == 2
            _, repeat = await service.update_document(
                document.id, DocumentUpdate(content="<p>one two three</p>"), user.id
            )
            assert not repeat.created
            print("Verified auto-save idempotency")

            # 3. Restore appends
            restored = await versioning.restore_version(document.id, 1, user.id)
            assert restored.restored_version.version_number == 3
            history = await versioning.list_versions(document.id)
            assert [v.version_number for v in history.versions] == [3, 2, 1]
            print("Verified restore and history")

        except Exception as e:
            print(f"Verification failed: {e}")
            raise
        finally:
            # Leave the database untouched
            await session.rollback()
            print("Rolled back verification data")

if __name__ == "__main__":
    asyncio.run(verify_persistence())
