"""Structured Logging - JSON formatter, correlated spans and request ids.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Every record emitted inside span() carries that span's fields
      (span name, span_id, request_id, subscriber_email, ...)
    - Span fields are bound with structlog.contextvars: concurrent requests
      never see each other's fields, and leaving a span restores the parent's
    - setup_logging is idempotent (one handler, however often it is called)

Design Decisions:
    - Records stay on stdlib logging + JSONFormatter; structlog only carries
      the request-scoped context
"""

import json
import logging
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from structlog.contextvars import bound_contextvars, get_contextvars
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Attributes every LogRecord has; anything else came from span() or extra=
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__,
) | {"message", "asctime", "taskName"}


def current_span_fields() -> dict[str, Any]:
    """Fields of the innermost active span (empty outside any span)."""
    return {key: val for key, val in get_contextvars().items() if val is not None}


@contextmanager
def span(name: str, **fields: Any) -> Iterator[dict[str, Any]]:
    """Open a correlated span; logs START/END and tags records emitted inside it."""
    parent_span_id = get_contextvars().get("span_id")
    with bound_contextvars(
        **fields,
        span=name,
        span_id=uuid.uuid4().hex[:16],
        parent_span_id=parent_span_id,
    ):
        started = time.perf_counter()
        logger.info(f"[{name.upper()} - START]")
        try:
            yield current_span_fields()
        finally:
            elapsed_ms = round((time.perf_counter() - started) * 1000, 3)
            logger.info(f"[{name.upper()} - END]", extra={"elapsed_ms": elapsed_ms})


_base_record_factory = logging.getLogRecordFactory()


def _span_record_factory(*args, **kwargs) -> logging.LogRecord:
    """Stamp the active span fields on every record when it is created."""
    record = _base_record_factory(*args, **kwargs)
    for key, val in current_span_fields().items():
        setattr(record, key, val)
    return record


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, val in record.__dict__.items():
            if key not in _RESERVED_ATTRS and val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _TextFormatter(logging.Formatter):
    """Human-readable lines with span fields appended as key=value."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = " ".join(
            f"{key}={val}" for key, val in record.__dict__.items()
            if key not in _RESERVED_ATTRS and val is not None
        )
        return f"{line} {extras}" if extras else line


_HANDLER_NAME = "newsletter"


def setup_logging(level: str = "INFO", fmt: str = "json", stream=None):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(_TextFormatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    if logging.getLogRecordFactory() is not _span_record_factory:
        logging.setLogRecordFactory(_span_record_factory)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Wrap each request in an "HTTP request" span with a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        with span(
            "HTTP request",
            request_id=request_id,
            http_method=request.method,
            http_path=request.url.path,
        ):
            response = await call_next(request)
            logger.info(
                "Request finished",
                extra={"http_status": response.status_code},
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
