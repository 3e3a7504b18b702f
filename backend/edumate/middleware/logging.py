"""
EduMate Backend — Request Logging Middleware
==============================================

What:  One access-log record per HTTP request on the `edumate.access` logger.
How:   Times the downstream handler and logs method, path, status, duration,
       request id and client IP. The level follows the status class
       (5xx ERROR, 4xx WARNING, else INFO). /health is not logged.

Never logged: request bodies (they carry whole notes) and query strings
(they may carry user ids).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from edumate.middleware.request_id import request_id_var

logger = logging.getLogger("edumate.access")

QUIET_PATHS = {"/health"}


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        status = response.status_code

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
