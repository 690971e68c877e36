from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from backend.app.domains.audit.models import AuditAction, AuditEntityType


class AuditQuery(BaseModel):
    entity_type: Optional[AuditEntityType] = None
    entity_id: Optional[UUID] = None
    action: Optional[AuditAction] = None
    actor: Optional[UUID] = None
    from_timestamp: Optional[datetime] = None
    to_timestamp: Optional[datetime] = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=100, ge=1, le=1000)


class AuditLogResponse(BaseModel):
    id: UUID
    entity_type: str
    entity_id: UUID
    action: str
    actor: Optional[UUID]
    metadata: dict[str, Any] = Field(validation_alias="metadata_")
    timestamp: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}
