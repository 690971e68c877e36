from typing import Any, Sequence
from uuid import UUID

from backend.app.domains.audit.models import AuditAction, AuditEntityType, AuditLog
from backend.app.domains.audit.repository import AuditRepository
from backend.app.domains.audit.schemas import AuditQuery


class AuditService:
    def __init__(self, repo: AuditRepository):
        self.repo = repo

    async def log_action(
        self,
        entity_type: AuditEntityType,
        entity_id: UUID,
        action: AuditAction,
        metadata: dict[str, Any],
        actor: UUID | None = None,
    ) -> AuditLog:
        log = AuditLog(
            entity_type=entity_type.value,
            entity_id=entity_id,
            action=action.value,
            actor=actor,
            metadata_=metadata,
        )
        return await self.repo.create(log)

    async def query_audit_log(self, query: AuditQuery) -> Sequence[AuditLog]:
        return await self.repo.query(
            entity_type=query.entity_type.value if query.entity_type else None,
            entity_id=query.entity_id,
            action=query.action.value if query.action else None,
            actor=query.actor,
            from_timestamp=query.from_timestamp,
            to_timestamp=query.to_timestamp,
            skip=query.skip,
            limit=query.limit,
        )
