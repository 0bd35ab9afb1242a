"""
Structured JSON logging for the fleet analytics service.

Every record is emitted as one JSON object so the log pipeline can index it
without parsing free text.

Standard fields:
- timestamp: ISO8601 format with timezone (UTC)
- level: Log level (info, error, warning, debug)
- service: Service name (fleet-analytics)
- environment: Current environment (production, staging, local)
- trace_id: Request identifier, propagated through X-Trace-Id
- message: Log message
- context: Additional contextual data

Request fields (when available):
- actor_id: ID of the user that requested the analysis
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

# Context variables (safe across asyncio tasks)
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="unknown")
actor_id_var: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)


def get_trace_id() -> str:
    """Get the current trace ID from context."""
    return trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID in context."""
    trace_id_var.set(trace_id)


def new_trace_id() -> str:
    """Generate a fresh trace ID."""
    return uuid.uuid4().hex


def get_actor_id() -> Optional[str]:
    """Get the current actor ID from context."""
    return actor_id_var.get()


def set_actor_id(actor_id: Optional[str]) -> None:
    """Set the actor ID in context."""
    actor_id_var.set(actor_id)


def set_request_context(trace_id: str, actor_id: Optional[str] = None) -> None:
    """Set all request context variables at once."""
    set_trace_id(trace_id)
    set_actor_id(actor_id)


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON documents."""

    def __init__(self, service: str = "fleet-analytics", environment: str = "production"):
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "service": self.service,
            "environment": self.environment,
            "trace_id": get_trace_id(),
            "message": record.getMessage(),
        }

        actor_id = get_actor_id()
        if actor_id is not None:
            log_data["actor_id"] = actor_id

        if record.name and record.name != "root":
            log_data["logger"] = record.name

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = self._sanitize_context(context)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else "Unknown",
                "message": str(record.exc_info[1]) if record.exc_info[1] else "",
                "traceback": self.formatException(record.exc_info),
            }

        # Source location for errors
        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str, ensure_ascii=False)

    def _sanitize_context(self, context: Any) -> Any:
        """Make context data JSON serializable."""
        if isinstance(context, dict):
            return {k: self._sanitize_context(v) for k, v in context.items()}
        elif isinstance(context, (list, tuple, set)):
            return [self._sanitize_context(item) for item in context]
        elif isinstance(context, (str, int, float, bool, type(None))):
            return context
        elif hasattr(context, "model_dump"):  # Pydantic models
            return context.model_dump(mode="json")
        return str(context)


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that accepts a ``context`` keyword.

    Usage:
        logger = get_logger(__name__)
        logger.info("Driver analyzed", context={"driver_id": "d-1"})
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        context = kwargs.pop("context", None)

        extra = kwargs.get("extra", {})
        if context:
            extra["context"] = context
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    service: str = "fleet-analytics",
    environment: Optional[str] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure structured JSON logging for the application.

    Args:
        service: Service name for log entries
        environment: Environment name, "production" when omitted
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file (optional, stdout only by default)
        max_bytes: Max size of log file before rotation
        backup_count: Number of backup files to keep
    """
    env = environment or "production"
    level = getattr(logging, log_level.upper(), logging.INFO)

    formatter = JsonFormatter(service=service, environment=env)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(level)
    root_logger.addHandler(stdout_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        ContextLogger instance with structured logging support
    """
    return ContextLogger(logging.getLogger(name), {})
