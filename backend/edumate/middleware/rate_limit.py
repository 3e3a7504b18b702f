"""
EduMate Backend — Rate Limiting Middleware
============================================

What:  Per-IP sliding window limit on the AI generation endpoints.
How:   Keeps each IP's request timestamps inside the window; once the count
       reaches the limit, answers 429 with a Retry-After header until the
       oldest timestamp ages out. Other paths pass through untouched.

State lives in process memory: the limit applies per worker process.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from edumate.config import settings
from edumate.exceptions import RateLimitExceededError
from edumate.middleware.request_id import REQUEST_ID_HEADER, new_request_id

logger = logging.getLogger(__name__)

LIMITED_PREFIX = "/api/ai/"

# Drop idle IPs every this many recorded requests
CLEANUP_INTERVAL = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Args:
        max_requests:  Requests allowed per IP per window (settings default)
        window:        Window length in seconds (settings default)
    """

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window = window or settings.rate_limit_window
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(LIMITED_PREFIX):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - self.window

        timestamps = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = timestamps

        if len(timestamps) >= self.max_requests:
            retry_after = int(timestamps[0] + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(timestamps),
                self.window,
            )
            # Runs outside RequestIDMiddleware, so the id is assigned here
            rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": exc.error_code,
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": rid,
                },
                headers={"Retry-After": str(retry_after), REQUEST_ID_HEADER: rid},
            )

        timestamps.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_INTERVAL == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
