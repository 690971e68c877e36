from backend.app.domains.versioning.detector import ChangeDetector
from backend.app.domains.versioning.diff import DiffEngine
from backend.app.domains.versioning.errors import (
    DocumentNotFoundError,
    DocumentValidationError,
    VersionConflictError,
    VersionImmutableError,
    VersioningError,
    VersioningErrorCode,
    VersionNotFoundError,
)
from backend.app.domains.versioning.factory import VersionFactory
from backend.app.domains.versioning.history import HistoryReader
from backend.app.domains.versioning.models import ChangeType, DocumentVersion
from backend.app.domains.versioning.repository import VersionStore
from backend.app.domains.versioning.restore import RestoreCoordinator
from backend.app.domains.versioning.schemas import (
    ChangeDecision,
    DocumentState,
    RecordResult,
    RestoreResult,
    VersionDetail,
    VersionDiff,
    VersionHistory,
    VersionHistoryEntry,
)
from backend.app.domains.versioning.service import DocumentVersioningService

__all__ = [
    "ChangeDecision",
    "ChangeDetector",
    "ChangeType",
    "DiffEngine",
    "DocumentNotFoundError",
    "DocumentState",
    "DocumentValidationError",
    "DocumentVersion",
    "DocumentVersioningService",
    "HistoryReader",
    "RecordResult",
    "RestoreCoordinator",
    "RestoreResult",
    "VersionConflictError",
    "VersionDetail",
    "VersionDiff",
    "VersionFactory",
    "VersionHistory",
    "VersionHistoryEntry",
    "VersionImmutableError",
    "VersionNotFoundError",
    "VersionStore",
    "VersioningError",
    "VersioningErrorCode",
]
