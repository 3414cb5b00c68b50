"""
DualStore — Request Logging Middleware
========================================

What:  One access-log line per request: method, path, status, duration, request id.
Why:   This is the request trace of the service; together with the error handler's
       log line it tells which store call failed for which request.
How:   Times call_next with perf_counter and logs at a level chosen by status:
       5xx → ERROR, 4xx → WARNING, otherwise INFO.

What we log vs what we DON'T log:
    Log:       method, path, status, duration, client IP, request ID
    Don't log: request bodies (customer names are personal data)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dualstore.middleware.request_id import request_id_var

logger = logging.getLogger("dualstore.access")

# Probed every few seconds by orchestrators; logging them drowns real traffic
QUIET_PATHS = frozenset({"/health", "/api/healthchecker"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            level_for_status(status),
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
