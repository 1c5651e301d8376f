"""
Tourlist Backend - Request Logging Middleware
==============================================

What:  One access-log line per request: method, path, status, duration,
       request ID, client IP and the caller's role.
Who:   Applied to every request except GET /health.

Log level by status:
    5xx → ERROR, 4xx → WARNING, 2xx/3xx → INFO

Not logged: request bodies, uploaded file contents, cookies and the
Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("tourlist.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    The role comes from request.state.identity, which the identity
    dependency or the session gate sets when they resolve the caller;
    public routes that never resolve it log "-".
    """

    SKIP_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        identity = getattr(request.state, "identity", None)
        role = identity.role.value if identity is not None else "-"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s role=%s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            role,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "role": role,
            },
        )

        return response
