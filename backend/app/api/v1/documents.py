from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from backend.app.api.deps import (
    ActingUser,
    DbSession,
    SettingsDep,
    get_document_service,
    get_redis,
    publish_version_event,
    transaction,
)
from backend.app.domains.document.schemas import DocumentCreate, DocumentResponse, DocumentUpdate
from backend.app.domains.document.service import DocumentService
from backend.app.domains.versioning.schemas import DocumentSaveResponse, VersionResponse
from backend.app.infrastructure.redis import RedisClient

router = APIRouter()
DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
RedisDep = Annotated[RedisClient, Depends(get_redis)]


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    data: DocumentCreate,
    user_id: ActingUser,
    service: DocumentServiceDep,
    session: DbSession,
    redis: RedisDep,
    settings: SettingsDep,
) -> DocumentResponse:
    """
    Create a document and record its initial version.

    Version 1 is always written with change type ``created``.
    """
    async with transaction(session):
        doc, version = await service.create_document(data, user_id)
        response = DocumentResponse.model_validate(doc)
        initial = VersionResponse.model_validate(version)

    publish_version_event(redis, settings, initial)
    return response


@router.get("", response_model=list[DocumentResponse])
async def list_documents(service: DocumentServiceDep) -> list[DocumentResponse]:
    docs = await service.list_documents()
    return [DocumentResponse.model_validate(d) for d in docs]


@router.get("/search", response_model=list[DocumentResponse])
async def search_documents(
    user_id: ActingUser,
    service: DocumentServiceDep,
    q: Annotated[str, Query(min_length=1, max_length=255)],
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[DocumentResponse]:
    """Title/content search over public documents and the caller's own."""
    docs = await service.search_documents(q, user_id, limit=limit)
    return [DocumentResponse.model_validate(d) for d in docs]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    service: DocumentServiceDep,
) -> DocumentResponse:
    doc = await service.get_document(document_id)
    return DocumentResponse.model_validate(doc)


@router.put("/{document_id}", response_model=DocumentSaveResponse)
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    user_id: ActingUser,
    service: DocumentServiceDep,
    session: DbSession,
    redis: RedisDep,
    settings: SettingsDep,
) -> DocumentSaveResponse:
    """
    Auto-save endpoint. Saving unchanged fields records no new version.
    """
    async with transaction(session):
        doc, result = await service.update_document(document_id, data, user_id)
        response = DocumentSaveResponse(
            document=DocumentResponse.model_validate(doc),
            version_created=result.created,
            version=result.version,
            changed_fields=result.changed_fields,
        )

    if result.version is not None:
        publish_version_event(redis, settings, result.version)
    return response
