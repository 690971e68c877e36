from backend.app.domains.document.models import Document, Visibility
from backend.app.domains.document.repository import DocumentRepository
from backend.app.domains.document.schemas import (
    DocumentCreate,
    DocumentResponse,
    DocumentUpdate,
)

__all__ = [
    "Document",
    "Visibility",
    "DocumentCreate",
    "DocumentResponse",
    "DocumentUpdate",
    "DocumentRepository",
]
