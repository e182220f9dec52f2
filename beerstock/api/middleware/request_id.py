"""Request ID middleware — tags every request and its log lines with an id."""

from __future__ import annotations

import re
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger(__name__)

HEADER = "X-Request-ID"

# Accept caller-supplied ids only if they are short and header-safe.
_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

# Probe endpoints are polled constantly; keep them out of the request log.
_QUIET_PATHS = frozenset({"/health"})


def resolve_request_id(raw: str | None) -> str:
    """Return *raw* if it is an acceptable id, else a fresh UUID4 string."""
    if raw and _ID_PATTERN.match(raw):
        return raw
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind request_id / method / path into structlog contextvars per request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(HEADER))
        path = request.url.path
        quiet = path in _QUIET_PATHS

        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            log.exception("request.failed", duration_ms=duration_ms)
            raise
        else:
            if not quiet:
                duration_ms = round((time.perf_counter() - start) * 1000, 1)
                log.info("request.completed", status_code=response.status_code, duration_ms=duration_ms)
            response.headers[HEADER] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)
