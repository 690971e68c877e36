import json
import logging
import logging.handlers
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

# Request-scoped context stamped onto every record
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
document_id_var: ContextVar[str | None] = ContextVar("document_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "correlation_id": correlation_id_var,
    "document_id": document_id_var,
    "user_id": user_id_var,
}

# Attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

_MAX_BYTES = 10 * 1024 * 1024  # 10MB
_BACKUP_COUNT = 5


def generate_correlation_id() -> str:
    return f"corr-{uuid.uuid4().hex[:12]}"


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context, generating one when absent."""
    cid = correlation_id or generate_correlation_id()
    correlation_id_var.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


def current_context() -> dict[str, str]:
    """Context values that are currently set."""
    return {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get()}


def clear_context():
    for var in _CONTEXT_VARS.values():
        var.set(None)


class StructuredJSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Carries timestamp, level, logger, message and source location, the
    correlation/document/user context, the formatted exception if any, and
    every attribute passed through ``extra=``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **current_context(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            log_data[key] = value

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for local development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    ABBREVIATIONS = {"correlation_id": "cid", "document_id": "doc", "user_id": "user"}

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        context = current_context()
        tags = ", ".join(
            f"{self.ABBREVIATIONS[k]}={v if k == 'correlation_id' else v[:8]}"
            for k, v in context.items()
        )
        context_str = f" [{tags}]" if tags else ""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        formatted = (
            f"{color}{timestamp} {record.levelname:8}{self.RESET} "
            f"{record.name}{context_str} - {record.getMessage()}"
        )
        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"
        return formatted


def _rotating_handler(
    path: Path,
    level: int,
    formatter: logging.Formatter,
    accept: Optional[Callable[[logging.LogRecord], bool]] = None,
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    if accept is not None:
        handler.addFilter(accept)
    return handler


def setup_logging(log_dir: str, enable_console: bool = True) -> None:
    """
    Route logs to rotating JSON files under ``log_dir``:

    - api.log: application and uvicorn loggers
    - versioning.log: version writes, restores and diffs
    - errors.log: everything at ERROR and above
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    json_formatter = StructuredJSONFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    root_logger.addHandler(
        _rotating_handler(
            log_path / "api.log",
            logging.INFO,
            json_formatter,
            lambda record: record.name.startswith(("app", "uvicorn")),
        )
    )
    root_logger.addHandler(
        _rotating_handler(
            log_path / "versioning.log",
            logging.INFO,
            json_formatter,
            lambda record: record.name.startswith("app.domains.versioning"),
        )
    )
    root_logger.addHandler(_rotating_handler(log_path / "errors.log", logging.ERROR, json_formatter))

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ConsoleFormatter())
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Bind correlation/document/user context for the duration of a block.

    Usage:
        with LogContext(document_id=str(doc_id), user_id=str(user_id)):
            logger.info("Created version 3")

    Values are restored on exit, so contexts nest.
    """

    def __init__(
        self,
        correlation_id: str | None = None,
        document_id: str | None = None,
        user_id: str | None = None,
        auto_generate_correlation_id: bool = False,
    ):
        self.values = {
            "correlation_id": correlation_id,
            "document_id": document_id,
            "user_id": user_id,
        }
        self.auto_generate_correlation_id = auto_generate_correlation_id
        self._tokens: list[tuple[ContextVar[str | None], Token]] = []

    def __enter__(self):
        if (
            not self.values["correlation_id"]
            and self.auto_generate_correlation_id
            and not correlation_id_var.get()
        ):
            self.values["correlation_id"] = generate_correlation_id()

        for name, value in self.values.items():
            if value:
                var = _CONTEXT_VARS[name]
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
        return False
