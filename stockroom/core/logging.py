from __future__ import annotations

import json
import logging
import logging.config
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from stockroom.core.config import settings

_STANDARD_ATTRS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime", "request_id"}

_request_id: ContextVar[str | None] = ContextVar("stockroom_request_id", default=None)


def current_request_id() -> str | None:
    return _request_id.get()


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` to every record logged inside the block."""
    token = _request_id.set(request_id)
    try:
        yield request_id
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamps records with the id of the request being served, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = current_request_id()
        return True


class JsonFormatter(logging.Formatter):
    """JSON lines with the service environment and request id at top level."""

    def format(self, record: logging.LogRecord) -> str:
        message = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "environment": settings.ENVIRONMENT,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            message["request_id"] = request_id
        if record.exc_info:
            message["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            message["stack_info"] = record.stack_info

        extra = {key: value for key, value in record.__dict__.items() if key not in _STANDARD_ATTRS}
        if extra:
            message["extra"] = extra

        return json.dumps(message, default=str)


def setup_logging() -> None:
    """Apply centralized logging configuration."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {"()": RequestIdFilter},
        },
        "formatters": {
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["request_id"],
            }
        },
        "root": {
            "handlers": ["default"],
            "level": level,
        },
        "loggers": {
            "stockroom.security": {"level": logging.WARNING},
            # SQL echo stays off unless explicitly debugging queries.
            "sqlalchemy.engine": {"level": logging.WARNING},
            "uvicorn.access": {"handlers": ["default"], "level": level, "propagate": False},
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def security_alert(message: str, **context: Any) -> None:
    """Warn on the security channel; the current request id is attached by the filter."""
    get_logger("stockroom.security").warning(message, extra={"alert": True, **context})
