"""
SAP Technologies API - Logging

Every module logs through the shared `logger` ("saptech"). Records carry
the request and user ids of the request being served; production writes
one JSON object per line, other environments a readable text line.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from app.core.config import settings


request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

# Attributes every LogRecord has; anything else came in through extra={...}
_STANDARD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {
    'message', 'asctime', 'taskName', 'request_id', 'user_id',
}


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Eight hex characters, enough to correlate the lines of one request"""
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """Structured output for log shippers"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "service": settings.APP_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if get_request_id():
            entry["request_id"] = get_request_id()
        if get_user_id():
            entry["user_id"] = get_user_id()

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        entry.update({
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith('_')
        })
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Text formatter; %(request_id)s and %(user_id)s fall back to '-'"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class SAPTechLogger(logging.Logger):
    """Logger with helpers for the events the API reports on"""

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Login, registration and password changes; failures log at WARNING"""
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        if user_email:
            parts.append(user_email)
        if reason:
            parts.append(reason)
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_admin_action(self, action: str, resource: str, resource_id: str = "",
                         **kwargs) -> None:
        """Audit line for a change made through the admin API"""
        self.info(
            f"Admin {action} {resource} {resource_id}".rstrip(),
            extra={
                "event_type": "admin_action",
                "admin_action": action,
                "resource": resource,
                "resource_id": resource_id,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        self.error(
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs
            }
        )

    def log_slow_request(self, operation: str, duration_ms: float, threshold_ms: float, **kwargs) -> None:
        self.warning(
            f"Slow request: {operation} took {duration_ms:.2f}ms (threshold: {threshold_ms}ms)",
            extra={
                "event_type": "performance",
                "operation": operation,
                "duration_ms": duration_ms,
                "threshold_ms": threshold_ms,
                **kwargs
            }
        )


def _file_handler(formatter: logging.Formatter, backup_count: int) -> RotatingFileHandler:
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=backup_count)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> SAPTechLogger:
    """Configure the "saptech" logger for the current environment"""
    logging.setLoggerClass(SAPTechLogger)

    logger = logging.getLogger("saptech")
    logger.__class__ = SAPTechLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    json_logs = settings.ENVIRONMENT == "production"
    if json_logs:
        console_formatter = file_formatter = JSONFormatter()
        backup_count = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | [%(request_id)s] %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        backup_count = 5

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(console_formatter)
    logger.addHandler(console)

    if settings.LOG_FILE:
        logger.addHandler(_file_handler(file_formatter, backup_count))

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "PIL", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "log_level": settings.LOG_LEVEL, "json_logging": json_logs}
    )
    return logger


logger: SAPTechLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'SAPTechLogger',
    'JSONFormatter',
    'ContextualFormatter',
]
