from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from backend.app.api.deps import (
    ActingUser,
    DbSession,
    SettingsDep,
    get_redis,
    get_versioning_service,
    publish_version_event,
    transaction,
)
from backend.app.domains.versioning.schemas import (
    RestoreResult,
    VersionDetail,
    VersionDiff,
    VersionHistory,
)
from backend.app.domains.versioning.service import DocumentVersioningService
from backend.app.infrastructure.redis import RedisClient

router = APIRouter()
VersioningServiceDep = Annotated[DocumentVersioningService, Depends(get_versioning_service)]
RedisDep = Annotated[RedisClient, Depends(get_redis)]


@router.get("/{document_id}/versions", response_model=VersionHistory)
async def list_versions(
    document_id: UUID,
    service: VersioningServiceDep,
    settings: SettingsDep,
    limit: Annotated[Optional[int], Query(ge=1)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> VersionHistory:
    """Version history, most recent first."""
    effective_limit = min(
        limit or settings.version_history_default_limit,
        settings.version_history_max_limit,
    )
    return await service.list_versions(document_id, limit=effective_limit, offset=offset)


@router.get("/{document_id}/versions/{version_number}", response_model=VersionDetail)
async def get_version(
    document_id: UUID,
    version_number: int,
    service: VersioningServiceDep,
) -> VersionDetail:
    return await service.get_version(document_id, version_number)


@router.get("/{document_id}/compare/{version_a}/{version_b}", response_model=VersionDiff)
async def compare_versions(
    document_id: UUID,
    version_a: int,
    version_b: int,
    service: VersioningServiceDep,
) -> VersionDiff:
    return await service.compare_versions(document_id, version_a, version_b)


@router.post("/{document_id}/restore/{version_number}", response_model=RestoreResult)
async def restore_version(
    document_id: UUID,
    version_number: int,
    user_id: ActingUser,
    service: VersioningServiceDep,
    session: DbSession,
    redis: RedisDep,
    settings: SettingsDep,
) -> RestoreResult:
    """
    Restore the document to a stored version.

    The restoration is appended as a new version; history is never rewritten.
    """
    async with transaction(session):
        result = await service.restore_version(document_id, version_number, user_id)

    publish_version_event(redis, settings, result.restored_version)
    return result
