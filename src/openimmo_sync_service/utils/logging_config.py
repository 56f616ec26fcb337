"""
Logging setup for the sync service.

Every record carries the id of the trigger request it belongs to. The id lives
in a ContextVar, so overlapping triggers keep their own ids and a sync run that
outlives its request (see the cron router timeout) keeps logging with the id of
the request that started it.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from openimmo_sync_service.config import Environment, settings

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "-"

logger = logging.getLogger("openimmo_sync_service")

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def current_request_id() -> Optional[str]:
    return request_id_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind the incoming (or a fresh) X-Request-ID to the request's context."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            # Tasks spawned during the request hold their own copy of the context
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestIdFilter(logging.Filter):
    """Stamp `request_id` onto every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id() or NO_REQUEST_ID
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "environment": settings.ENVIRONMENT.value,
        }
        request_id = getattr(record, "request_id", NO_REQUEST_ID)
        if request_id != NO_REQUEST_ID:
            payload["request_id"] = request_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging for the service, the CLI and the trigger endpoint."""
    level_name = (level or settings.LOGGING_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    use_json = settings.ENVIRONMENT == Environment.PRODUCTION

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - [%(request_id)s] %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logger.setLevel(log_level)
    for noisy in ("uvicorn.access", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(f"Logging configured with level {level_name} and {'JSON' if use_json else 'plain text'} format")
