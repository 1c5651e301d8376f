"""
Tourlist Backend - Session Gate Middleware
===========================================

What:  Protects whole path trees before routing:
           /checkout[/...]  signed-in users (ACCESS_CHECKOUT)
           /admin[/...]     admins only      (ACCESS_ADMIN_AREA)
How:   Resolves the Identity with the shared SessionResolver and asks the
       authorization gate. Matching is by whole path segment, so
       `/checkout-info` and `/administer` are not gated.

Denied requests:
    Browsers (Accept includes text/html) get a 307 redirect to the sign-in
    page with `callbackUrl` set to the requested path. Everything else gets
    the standard 401 JSON error body.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from app.auth import Decision, Operation, SessionResolver, authorize
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

GATED_PREFIXES: Dict[str, Operation] = {
    "/checkout": Operation.ACCESS_CHECKOUT,
    "/admin": Operation.ACCESS_ADMIN_AREA,
}


def match_gated_path(path: str) -> Optional[Operation]:
    """Operation protecting `path`, or None when the path is not gated."""
    for prefix, operation in GATED_PREFIXES.items():
        if path == prefix or path.startswith(prefix + "/"):
            return operation
    return None


def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


class SessionGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, resolver: SessionResolver, sign_in_path: str = "/auth/signin"):
        super().__init__(app)
        self.resolver = resolver
        self.sign_in_path = sign_in_path

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        operation = match_gated_path(request.url.path)
        if operation is None:
            return await call_next(request)

        identity = self.resolver.resolve(request)
        request.state.identity = identity
        decision = authorize(identity, operation)
        if decision.allowed:
            return await call_next(request)

        rid = request_id_var.get("")
        logger.info(
            "[%s] Session gate denied %s %s (%s, role=%s)",
            rid,
            request.method,
            request.url.path,
            decision.value,
            identity.role.value,
        )

        if wants_html(request):
            callback = request.url.path
            if request.url.query:
                callback = f"{callback}?{request.url.query}"
            location = f"{self.sign_in_path}?{urlencode({'callbackUrl': callback})}"
            return RedirectResponse(url=location, status_code=307)

        code = "forbidden" if decision is Decision.FORBIDDEN else "unauthenticated"
        return JSONResponse(
            status_code=401,
            content={"error": "Unauthorized", "code": code, "request_id": rid},
        )
