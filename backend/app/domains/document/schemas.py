from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from backend.app.domains.document.models import Visibility


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    visibility: Visibility = Visibility.PRIVATE


class DocumentUpdate(BaseModel):
    """Auto-save payload; omitted fields keep their current value."""

    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    visibility: Optional[Visibility] = None


class DocumentResponse(BaseModel):
    id: UUID
    title: str
    content: str
    visibility: Visibility
    author_id: UUID
    current_version: int
    last_version_created_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
