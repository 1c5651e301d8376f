"""
Tourlist Backend - Request ID Middleware
=========================================

What:  Gives every request a short correlation ID and returns it in the
       `X-Request-ID` response header.
How:   Reuses the client's X-Request-ID when it is a plain token, otherwise
       generates one; stores it in a ContextVar (for loggers, exception
       handlers and the media service) and on request.state.
When:  Outermost middleware, so every response carries the header,
       including session-gate denials and error responses.

Accepted client IDs:
    1-64 characters from [A-Za-z0-9._-]. Anything else (spaces, newlines,
    very long values) is replaced, since the ID is written verbatim into
    log lines and error bodies.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value: Optional[str]) -> str:
    """The client's ID when it is a safe token, else a fresh one."""
    if header_value and _CLIENT_ID.fullmatch(header_value):
        return header_value
    return new_request_id()


def current_request_id() -> str:
    """ID of the request being served, or a fresh one outside a request."""
    return request_id_var.get() or new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request ID.

    Error bodies echo the same value as `request_id`, and image uploads log
    under it, so a client quoting it after a failed upload or a 500 points
    straight at the media host calls that request made.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
