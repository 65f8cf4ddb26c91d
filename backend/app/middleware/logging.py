"""
Contacts API — Request Logging Middleware
==========================================

What:  Logs every HTTP request with its status and duration, tagged with a
       request ID that is also returned to the client.
Why:   One access log line per request is enough to debug and monitor a
       small CRUD service; the request ID ties error responses to log lines.
How:   Takes the client's X-Request-ID (or generates a short one), stores it
       in a ContextVar for exception handlers, times the downstream call, and
       logs at a level chosen from the status class.
Who:   The only middleware registered by create_app().

What we log vs what we DON'T log (privacy):
    Log: method, path, status, duration, IP, request ID
    Don't log: request bodies (names, emails, birthdays are PII)
"""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local so concurrent requests never see each other's ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("contacts.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request ID and logs method, path, status and duration.

    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    /health is not logged (probes run every few seconds).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # Short IDs are enough for correlation and easier to read in logs
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            # The catch-all handler answers 500 outside this middleware
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "%s %s 500 %.1fms [%s] from %s (unhandled exception)",
                method,
                path,
                duration_ms,
                rid,
                client_ip,
                extra={
                    "request_id": rid,
                    "method": method,
                    "path": path,
                    "status": 500,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                },
            )
            raise
        response.headers["X-Request-ID"] = rid

        if path == "/health":
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
