"""
Tourlist Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every error scenario the API reports.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right HTTP status.
Who:   Raised by the authorization gate, validators and services.
When:  During request processing when a recoverable error occurs.

Exception Hierarchy:
    TourlistError (base)
    ├── UnauthenticatedError  → 401 (no or invalid session)
    ├── ForbiddenError        → 401 (valid session, insufficient role)
    ├── ValidationError       → 400 (client input fails a named constraint)
    ├── ConflictError         → 400 (uniqueness violation)
    ├── NotFoundError         → 404
    ├── UpstreamError         → 500 (media service failure)
    └── StorageError          → 500 (store unreachable / unexpected)

UnauthenticatedError and ForbiddenError share the external status code;
the `code` attribute keeps them apart in responses and logs.
"""

from typing import Any, Dict, Optional


class TourlistError(Exception):
    """
    Base exception for all Tourlist application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response
                  for 4xx errors; replaced by a generic text for 5xx)
        context:  Additional debug info (logged, returned as `details` for 4xx only)
        code:     Machine-readable error code used in the response body
        status_code: HTTP status the global handler responds with
    """

    code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthenticatedError(TourlistError):
    """
    Raised when the request carries no valid session.

    When:    Missing, expired, tampered or otherwise undecodable session token,
             or a token whose subject no longer exists.
    HTTP:    401 Unauthorized
    """

    code = "unauthenticated"
    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TourlistError):
    """
    Raised when a valid session lacks the role (or ownership) an operation needs.

    HTTP:    401 externally, code "forbidden"
    """

    code = "forbidden"
    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(TourlistError):
    """
    Raised when client input fails validation.

    When:    Missing required name, non-positive price, unknown category,
             bad file type, wrong number of images, malformed body field.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Category name is required",
            "code": "validation_error",
            "details": {"field": "name"}
        }
    """

    code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(TourlistError):
    """
    Raised when a create or update would violate a uniqueness constraint.

    Raised both by the application pre-check and by the service when the
    store rejects the write with an IntegrityError, so concurrent duplicate
    requests get the same response as sequential ones.
    HTTP:    400 Bad Request
    """

    code = "conflict"
    status_code = 400

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(TourlistError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert None into
    this exception.
    HTTP:    404 Not Found
    """

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UpstreamError(TourlistError):
    """
    Raised when the external media service fails.

    When:    Upload failed after retries, or the circuit breaker is open.
    HTTP:    500 Internal Server Error (generic message in the response)
    """

    code = "upstream_error"
    status_code = 500

    def __init__(
        self,
        message: str = "Failed to upload images",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class StorageError(TourlistError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. The context
        (exception type, entity, ids) is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
