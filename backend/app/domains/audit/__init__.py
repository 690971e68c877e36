from backend.app.domains.audit.models import AuditAction, AuditEntityType, AuditLog
from backend.app.domains.audit.repository import AuditRepository
from backend.app.domains.audit.schemas import AuditLogResponse, AuditQuery
from backend.app.domains.audit.service import AuditService

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "AuditLogResponse",
    "AuditQuery",
    "AuditService",
    "AuditRepository",
]
