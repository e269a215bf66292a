"""
QuoteVault Backend - Access Log Middleware
===========================================

What:  One log line per HTTP request on the `quotevault.access` logger.
How:   Times the downstream call and logs method, path, status, duration,
       request ID, client IP and whether a credential query parameter was sent.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Never logged: request bodies and query values. Credentials travel in both.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quotevault.middleware.request_id import request_id_var

logger = logging.getLogger("quotevault.access")

SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logging. 5xx logs at ERROR, 4xx at WARNING, everything else at INFO.
    Health checks are not logged.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        credential_sent = bool(request.query_params.get("credential"))
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            " (credential)" if credential_sent else "",
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "credential_sent": credential_sent,
            },
        )
        return response
