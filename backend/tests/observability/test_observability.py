import json
import logging
import uuid

import pytest

from backend.app.domains.versioning.errors import (
    DocumentNotFoundError,
    DocumentValidationError,
    UserNotFoundError,
    VersionConflictError,
    VersionImmutableError,
    VersioningError,
    VersioningErrorCode,
    VersionNotFoundError,
)
from backend.app.infrastructure.errors import (
    ErrorCategory,
    ErrorSeverity,
    InvalidRequestError,
    RecoveryAction,
    StructuredError,
    UnexpectedServerError,
)
from backend.app.logging_config import (
    LogContext,
    StructuredJSONFormatter,
    clear_context,
    correlation_id_var,
    document_id_var,
    set_correlation_id,
    user_id_var,
)


class TestStructuredErrors:
    def test_error_category_values(self):
        assert ErrorCategory.VALIDATION.value == "VALIDATION"
        assert ErrorCategory.NOT_FOUND.value == "NOT_FOUND"
        assert ErrorCategory.INVALID_STATE.value == "INVALID_STATE"
        assert ErrorCategory.VERSIONING.value == "VERSIONING"
        assert ErrorCategory.UNKNOWN.value == "UNKNOWN"

    def test_structured_error_to_log_dict(self):
        document_id = uuid.uuid4()
        error = StructuredError(
            category=ErrorCategory.INVALID_STATE,
            severity=ErrorSeverity.HIGH,
            code="VERSION_CONFLICT",
            message="Version 2 already exists",
            document_id=document_id,
            version_number=2,
            recovery_action=RecoveryAction.RETRY,
        )

        error_dict = error.to_log_dict()

        assert error_dict["error_code"] == "VERSION_CONFLICT"
        assert error_dict["error_category"] == "INVALID_STATE"
        assert error_dict["document_id"] == str(document_id)
        assert error_dict["version_number"] == 2
        assert error_dict["recovery_action"] == "RETRY"

    def test_invalid_request_error_lists_fields(self):
        error = InvalidRequestError(
            [{"loc": ("body", "title"), "msg": "Field required"}], correlation_id="corr-1"
        )

        assert error.code == "VALIDATION_INVALID_REQUEST"
        assert error.details["fields"] == ["body.title"]
        assert error.correlation_id == "corr-1"
        assert error.recovery_action == RecoveryAction.CORRECT_INPUT

    def test_unexpected_server_error(self):
        error = UnexpectedServerError("RuntimeError")

        assert error.code == "INTERNAL_ERROR"
        assert error.severity == ErrorSeverity.HIGH
        assert error.details["exception"] == "RuntimeError"


class TestVersioningErrors:
    def test_not_found_messages_distinguish_document_and_version(self):
        document_id = uuid.uuid4()
        missing_document = DocumentNotFoundError(document_id)
        missing_version = VersionNotFoundError(document_id, 4)

        assert missing_document.code == VersioningErrorCode.DOCUMENT_NOT_FOUND
        assert missing_version.code == VersioningErrorCode.VERSION_NOT_FOUND
        assert f"Document {document_id} not found" == missing_document.message
        assert "Version 4 not found" in missing_version.message

    @pytest.mark.parametrize(
        "error, category",
        [
            (DocumentNotFoundError(uuid.uuid4()), ErrorCategory.NOT_FOUND),
            (VersionNotFoundError(uuid.uuid4(), 1), ErrorCategory.NOT_FOUND),
            (UserNotFoundError(uuid.uuid4()), ErrorCategory.NOT_FOUND),
            (VersionConflictError(uuid.uuid4(), 1), ErrorCategory.INVALID_STATE),
            (VersionImmutableError(uuid.uuid4(), 1), ErrorCategory.INVALID_STATE),
            (DocumentValidationError("title", "must not be empty"), ErrorCategory.VALIDATION),
        ],
    )
    def test_taxonomy(self, error: VersioningError, category: ErrorCategory):
        assert isinstance(error, VersioningError)
        assert error.category == category

    def test_conflict_is_retryable(self):
        error = VersionConflictError(uuid.uuid4(), 3)

        assert error.is_retryable is True
        assert error.recovery_action == RecoveryAction.RETRY

    def test_to_dict(self):
        error = DocumentValidationError("title", "must not be empty")

        assert error.to_dict() == {
            "error_type": "DocumentValidationError",
            "code": "VALIDATION_FAILED",
            "message": "Validation failed: field 'title' - must not be empty",
            "details": {"field": "title", "reason": "must not be empty"},
        }

    def test_to_structured_carries_context(self):
        document_id = uuid.uuid4()
        structured = VersionNotFoundError(document_id, 7).to_structured("corr-xyz")

        assert structured.code == "VERSION_NOT_FOUND"
        assert structured.correlation_id == "corr-xyz"
        assert structured.document_id == document_id
        assert structured.version_number == 7
        assert structured.recovery_action == RecoveryAction.RELOAD


class TestErrorLogLevels:
    @pytest.mark.parametrize(
        "status_code, level",
        [
            (404, logging.INFO),
            (422, logging.INFO),
            (409, logging.WARNING),
            (500, logging.ERROR),
        ],
    )
    def test_level_follows_status(self, status_code: int, level: int):
        from backend.app.main import log_level_for_status

        assert log_level_for_status(status_code) == level

    def test_every_versioning_code_has_a_status(self):
        from backend.app.main import ERROR_STATUS_CODES

        assert set(ERROR_STATUS_CODES) == set(VersioningErrorCode)
        assert ERROR_STATUS_CODES[VersioningErrorCode.USER_NOT_FOUND] == 404


class TestStructuredLogging:
    def test_correlation_id_context_var(self):
        test_id = "test-correlation-123"
        correlation_id_var.set(test_id)
        assert correlation_id_var.get() == test_id
        clear_context()

    def test_set_correlation_id_generates_when_missing(self):
        cid = set_correlation_id()
        assert cid.startswith("corr-")
        assert correlation_id_var.get() == cid
        clear_context()

    def test_log_context_manager(self):
        test_document = str(uuid.uuid4())
        test_user = str(uuid.uuid4())

        with LogContext(correlation_id="ctx-test-123", document_id=test_document, user_id=test_user):
            assert correlation_id_var.get() == "ctx-test-123"
            assert document_id_var.get() == test_document
            assert user_id_var.get() == test_user
        assert correlation_id_var.get() is None
        assert document_id_var.get() is None
        assert user_id_var.get() is None

    def test_log_context_with_auto_generate(self):
        clear_context()
        with LogContext(auto_generate_correlation_id=True):
            cid = correlation_id_var.get()
            assert cid is not None
            assert len(cid) > 0
        assert correlation_id_var.get() is None

    def test_structured_json_formatter_format(self):
        formatter = StructuredJSONFormatter()
        record = logging.LogRecord(
            name="app.domains.versioning.factory",
            level=logging.INFO,
            pathname="factory.py",
            lineno=10,
            msg="Created version 2",
            args=(),
            exc_info=None,
        )
        record.version_number = 2

        with LogContext(correlation_id="test-corr-id", document_id="doc-1"):
            formatted = json.loads(formatter.format(record))

        assert formatted["message"] == "Created version 2"
        assert formatted["correlation_id"] == "test-corr-id"
        assert formatted["document_id"] == "doc-1"
        assert formatted["version_number"] == 2
