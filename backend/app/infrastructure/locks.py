"""Per-document write serialization.

Version numbers are allocated as ``max + 1`` inside a critical section keyed by
document id. Writers for different documents never share a lock.

The lock only covers the service call. It is released before the request
commits, and it is local to one process. Between sessions, numbering is held
together by the ``SELECT ... FOR UPDATE`` row lock on the document (PostgreSQL)
and by the ``uq_document_version`` constraint, which turns a stale
``max + 1`` into ``VersionConflictError``.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from backend.app.logging_config import get_logger

logger = get_logger("app.infrastructure.locks")


class DocumentLockRegistry:
    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._waiters: dict[UUID, int] = {}

    @asynccontextmanager
    async def hold(self, document_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.get(document_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[document_id] = lock
        self._waiters[document_id] = self._waiters.get(document_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._waiters[document_id] - 1
            if remaining:
                self._waiters[document_id] = remaining
            else:
                # Nobody queued behind us
                del self._waiters[document_id]
                del self._locks[document_id]

    def is_locked(self, document_id: UUID) -> bool:
        lock = self._locks.get(document_id)
        return lock is not None and lock.locked()

    def active_documents(self) -> int:
        return len(self._locks)


_registry = DocumentLockRegistry()


def get_document_locks() -> DocumentLockRegistry:
    """Process-wide registry shared by every request."""
    return _registry
