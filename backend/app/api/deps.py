from contextlib import asynccontextmanager
from typing import Annotated, AsyncGenerator, AsyncIterator
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import Settings, get_settings
from backend.app.domains.audit.repository import AuditRepository
from backend.app.domains.audit.service import AuditService
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.document.service import DocumentService
from backend.app.domains.user.repository import UserRepository
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.schemas import VersionResponse
from backend.app.domains.versioning.service import DocumentVersioningService
from backend.app.infrastructure.database import get_db_session
from backend.app.infrastructure.locks import get_document_locks
from backend.app.infrastructure.redis import RedisClient, get_redis_client


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_acting_user(x_user_id: Annotated[UUID, Header()]) -> UUID:
    """Acting user id, supplied by the authenticating gateway in front of this service."""
    return x_user_id


ActingUser = Annotated[UUID, Depends(get_acting_user)]


def get_redis(settings: SettingsDep) -> RedisClient:
    return get_redis_client(settings.redis_url)


def get_audit_repository(session: DbSession) -> AuditRepository:
    return AuditRepository(session)


def get_audit_service(
    repo: Annotated[AuditRepository, Depends(get_audit_repository)],
) -> AuditService:
    return AuditService(repo)


def get_document_repository(session: DbSession) -> DocumentRepository:
    return DocumentRepository(session)


def get_user_repository(session: DbSession) -> UserRepository:
    return UserRepository(session)


def get_version_store(session: DbSession) -> VersionStore:
    return VersionStore(session)


def get_versioning_service(
    store: Annotated[VersionStore, Depends(get_version_store)],
    documents: Annotated[DocumentRepository, Depends(get_document_repository)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> DocumentVersioningService:
    return DocumentVersioningService(store, documents, audit, locks=get_document_locks())


def get_document_service(
    repo: Annotated[DocumentRepository, Depends(get_document_repository)],
    versioning: Annotated[DocumentVersioningService, Depends(get_versioning_service)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> DocumentService:
    return DocumentService(repo, versioning, audit, users)


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back on any error so no partial write survives."""
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    await session.commit()


def publish_version_event(
    redis: RedisClient, settings: Settings, version: VersionResponse
) -> None:
    if not settings.version_events_enabled:
        return
    redis.notify_version_created(
        version.document_id,
        version.version_number,
        version.change_type.value,
        version.changed_by,
    )
