"""
CloudNote Backend — Shared Response Schemas
=============================================

What:  Response models shared by every route: confirmations, errors, health.
Why:   Clients get one consistent envelope regardless of which route answered.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain confirmation returned by mutations that produce no resource body."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "Please provide your sex.",
            "details": {"field": "gender"},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# Messages reported when request-body validation fails on a given field.
# Keys are the JSON (camelCase) field names.
FIELD_ERROR_MESSAGES: Dict[str, str] = {
    "firstName": "First Name is required!",
    "lastName": "Last Name is required!",
    "gender": "Please provide your sex.",
    "birthDate": "Please enter your Date for Birth.",
    "email": "Please enter a valid email.",
    "password": "Please enter your password properly",
    "title": "Please enter note title!",
    "content": "Please enter note content!",
}
