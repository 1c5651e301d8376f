"""
Tourlist Backend - Shared Schemas
==================================

What:  ApiModel base class, error and health response models.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for every API schema.

    - Serializes with camelCase aliases (`maxVisitors`, `imageUrl`, ...)
    - Accepts camelCase or snake_case keys on input
    - Builds from ORM objects (from_attributes)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Human-readable description, e.g. "Unauthorized"
        code: Machine-readable error code, e.g. "conflict", "forbidden"
        details: Extra context for 4xx errors (e.g. the failing field)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "A category with this name already exists",
            "code": "conflict",
            "details": {"field": "name"},
            "request_id": "1f0c2a9b"
        }
    """

    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    media: str = Field(description="Media service status: available, unavailable, circuit_open")
    uptime_seconds: float = Field(description="Seconds since service started")
