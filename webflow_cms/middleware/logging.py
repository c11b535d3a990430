"""
Request logging for the Webflow proxy

Every request gets an ID, taken from ``X-Request-ID`` when the UI sends one.
The ID is echoed back on the response and stamped on every log record made
while the request runs, so a failed form submission in the browser can be
matched with the Webflow call that failed behind it.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from webflow_cms.utils.metrics import record_http_request

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# polled by the UI and by Prometheus; counted but not logged
QUIET_PATHS = {"/api/health", "/metrics"}

# record attributes copied into JSON output when a log call sets them
LOGGED_EXTRAS = (
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "operation",
    "collection_id",
    "error_code",
)


def get_request_id() -> str:
    return request_id_var.get("")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", ""):
            record.request_id = get_request_id()
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, carrying the request ID and any LOGGED_EXTRAS."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        entry.update({key: getattr(record, key) for key in LOGGED_EXTRAS if hasattr(record, key)})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def client_address(request: Request) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else "unknown"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns request IDs, records HTTP metrics and writes the access log."""

    def __init__(self, app: ASGIApp, logger_name: str = "webflow_cms.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            self._finish(request, 500, started, error=exc)
            raise
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        self._finish(request, response.status_code, started, request_id=request_id)
        return response

    def _finish(
        self,
        request: Request,
        status_code: int,
        started: float,
        request_id: str | None = None,
        error: Exception | None = None,
    ) -> None:
        elapsed = time.perf_counter() - started
        path = request.url.path
        record_http_request(request.method, path, status_code, elapsed)
        if path in QUIET_PATHS:
            return

        level = logging.ERROR if status_code >= 500 else logging.WARNING if status_code >= 400 else logging.INFO
        message = f"{request.method} {path} -> {status_code} in {elapsed * 1000:.1f}ms"
        if error is not None:
            message += f" ({type(error).__name__}: {error})"
        self.logger.log(
            level,
            message,
            extra={
                "request_id": request_id or get_request_id(),
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(elapsed * 1000, 2),
                "client_ip": client_address(request),
            },
        )


def setup_structured_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Route all logging through one stderr handler.

    JSON lines in production; ``json_format=False`` gives a readable line
    format for local runs. uvicorn and httpx are held at WARNING so their
    own access and connection logs do not duplicate ours.
    """
    level = getattr(logging, log_level.upper())

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("uvicorn", "uvicorn.access", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
