"""
Error envelope shared by the API and the logs.

Every failure leaving the service is rendered as a StructuredError: a stable
code, a category and severity, the document/version it concerns and a hint
telling the client what to do next.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from backend.app.infrastructure.datetime_utils import utc_now


class ErrorCategory(str, PyEnum):
    """High-level error categories for classification."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    VERSIONING = "VERSIONING"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    CONFIGURATION = "CONFIGURATION"
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(str, PyEnum):
    """Error severity levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RecoveryAction(str, PyEnum):
    """Suggested recovery actions."""

    RETRY = "RETRY"
    RELOAD = "RELOAD"
    CORRECT_INPUT = "CORRECT_INPUT"
    MANUAL_INTERVENTION = "MANUAL_INTERVENTION"
    CONTACT_SUPPORT = "CONTACT_SUPPORT"
    NONE = "NONE"


class StructuredError(BaseModel):
    """JSON body of every error response; `to_log_dict` flattens it for log records."""

    code: str = Field(description="Unique error code for identification")
    category: ErrorCategory
    severity: ErrorSeverity
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional error context")

    correlation_id: str | None = None
    document_id: UUID | None = None
    version_number: int | None = None

    recovery_action: RecoveryAction = RecoveryAction.NONE
    recovery_hint: str | None = None
    is_retryable: bool = False

    occurred_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(from_attributes=True)

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to dictionary suitable for logging."""
        return {
            "error_code": self.code,
            "error_category": self.category.value,
            "error_severity": self.severity.value,
            "error_message": self.message,
            "error_details": self.details,
            "correlation_id": self.correlation_id,
            "document_id": str(self.document_id) if self.document_id else None,
            "version_number": self.version_number,
            "recovery_action": self.recovery_action.value,
            "is_retryable": self.is_retryable,
        }


class InvalidRequestError(StructuredError):
    """Error when a request body or parameter fails schema validation."""

    def __init__(
        self,
        errors: list[dict[str, Any]],
        correlation_id: str | None = None,
    ):
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in errors]
        super().__init__(
            code="VALIDATION_INVALID_REQUEST",
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            message=f"Invalid request: {', '.join(fields) or 'malformed payload'}",
            details={"errors": [str(err.get("msg", "")) for err in errors], "fields": fields},
            correlation_id=correlation_id,
            recovery_action=RecoveryAction.CORRECT_INPUT,
            recovery_hint="Correct the listed fields and resend the request",
            is_retryable=False,
        )


class UnexpectedServerError(StructuredError):
    """Error for failures that escaped the domain error taxonomy."""

    def __init__(self, exception: str, correlation_id: str | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.HIGH,
            message="An unexpected error occurred",
            details={"exception": exception},
            correlation_id=correlation_id,
            recovery_action=RecoveryAction.CONTACT_SUPPORT,
            recovery_hint="Quote the correlation id when reporting the problem",
            is_retryable=True,
        )
