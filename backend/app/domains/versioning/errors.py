from enum import Enum
from typing import Any
from uuid import UUID

from backend.app.infrastructure.errors import (
    ErrorCategory,
    ErrorSeverity,
    RecoveryAction,
    StructuredError,
)


class VersioningErrorCode(str, Enum):
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    VERSION_IMMUTABLE = "VERSION_IMMUTABLE"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class VersioningError(Exception):
    code: VersioningErrorCode
    category: ErrorCategory = ErrorCategory.VERSIONING
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    recovery_action: RecoveryAction = RecoveryAction.NONE
    recovery_hint: str | None = None
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        document_id: UUID | None = None,
        version_number: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.document_id = document_id
        self.version_number = version_number
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    def to_structured(self, correlation_id: str | None = None) -> StructuredError:
        return StructuredError(
            code=self.code.value,
            category=self.category,
            severity=self.severity,
            message=self.message,
            details=self.details,
            correlation_id=correlation_id,
            document_id=self.document_id,
            version_number=self.version_number,
            recovery_action=self.recovery_action,
            recovery_hint=self.recovery_hint,
            is_retryable=self.is_retryable,
        )


class DocumentNotFoundError(VersioningError):
    code = VersioningErrorCode.DOCUMENT_NOT_FOUND
    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW
    recovery_action = RecoveryAction.RELOAD
    recovery_hint = "The document may have been deleted; reload the document list"

    def __init__(self, document_id: UUID):
        super().__init__(
            message=f"Document {document_id} not found",
            document_id=document_id,
            details={"document_id": str(document_id)},
        )


class UserNotFoundError(VersioningError):
    code = VersioningErrorCode.USER_NOT_FOUND
    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW
    recovery_action = RecoveryAction.CORRECT_INPUT
    recovery_hint = "Send the id of an existing user in X-User-Id"

    def __init__(self, user_id: UUID):
        super().__init__(
            message=f"User {user_id} not found",
            details={"user_id": str(user_id)},
        )


class VersionNotFoundError(VersioningError):
    code = VersioningErrorCode.VERSION_NOT_FOUND
    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW
    recovery_action = RecoveryAction.RELOAD
    recovery_hint = "Reload the version history and pick an existing version"

    def __init__(self, document_id: UUID, version_number: int):
        super().__init__(
            message=f"Version {version_number} not found for document {document_id}",
            document_id=document_id,
            version_number=version_number,
            details={"document_id": str(document_id), "version_number": version_number},
        )


class VersionConflictError(VersioningError):
    code = VersioningErrorCode.VERSION_CONFLICT
    category = ErrorCategory.INVALID_STATE
    severity = ErrorSeverity.HIGH
    recovery_action = RecoveryAction.RETRY
    recovery_hint = "Another write to this document won the race; reload and retry"
    is_retryable = True

    def __init__(self, document_id: UUID, version_number: int, reason: str | None = None):
        super().__init__(
            message=reason or f"Version {version_number} already exists for document {document_id}",
            document_id=document_id,
            version_number=version_number,
            details={"document_id": str(document_id), "version_number": version_number},
        )


class VersionImmutableError(VersioningError):
    code = VersioningErrorCode.VERSION_IMMUTABLE
    category = ErrorCategory.INVALID_STATE
    severity = ErrorSeverity.HIGH
    recovery_action = RecoveryAction.MANUAL_INTERVENTION
    recovery_hint = "Version records are append-only; record a new version instead"

    def __init__(self, document_id: UUID, version_number: int, operation: str = "update"):
        super().__init__(
            message=f"Cannot {operation} version {version_number} of document {document_id}: "
            "versions are immutable once persisted.",
            document_id=document_id,
            version_number=version_number,
            details={
                "document_id": str(document_id),
                "version_number": version_number,
                "operation": operation,
            },
        )


class DocumentValidationError(VersioningError):
    code = VersioningErrorCode.VALIDATION_FAILED
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW
    recovery_action = RecoveryAction.CORRECT_INPUT
    recovery_hint = "Correct the document fields and save again"

    def __init__(self, field: str, reason: str, document_id: UUID | None = None):
        super().__init__(
            message=f"Validation failed: field '{field}' - {reason}",
            document_id=document_id,
            details={"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason
