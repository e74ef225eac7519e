"""
CloudNote Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services raise domain errors; global handlers registered in main.py
       turn them into JSON error responses with the right HTTP status code.
How:   Each exception class carries a user-facing message, an optional
       context dict, and the HTTP status / machine-readable code it maps to.

Exception Hierarchy:
    CloudNoteError (base)                  → 500
    ├── ValidationError                    → 403 validation_error
    ├── NothingToUpdateError               → 400 nothing_to_update
    ├── AuthenticationRequiredError        → 401 unauthorized
    ├── InvalidTokenError                  → 401 invalid_token
    │   └── TokenExpiredError              → 401 token_expired
    ├── AuthenticationFailedError          → 401 not_authenticated
    ├── NotOwnerError                      → 401 not_owner
    ├── NotFoundError                      → 404 not_found
    ├── ConflictError                      → 409 conflict
    └── DatabaseError                      → 500 server_error

Security Note:
    `message` is safe to return to clients. `context` is logged server-side
    and only echoed back for client errors (4xx).
"""

from typing import Any, Dict, Optional


class CloudNoteError(Exception):
    """
    Base exception for all CloudNote application errors.

    Attributes:
        message:     User-facing error description
        context:     Additional debug info
        status_code: HTTP status used by the global handler
        error_code:  Machine-readable code placed in the response body
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CloudNoteError):
    """
    Raised when client input fails validation.

    HTTP: 403, matching the status the note service has always used for
    rejected input. FastAPI's own RequestValidationError is mapped to the
    same status and body shape in main.py.
    """

    status_code = 403
    error_code = "validation_error"

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


class NothingToUpdateError(CloudNoteError):
    """An update request supplied neither a title nor content."""

    status_code = 400
    error_code = "nothing_to_update"

    def __init__(self, message: str = "No data to update!", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthenticationRequiredError(CloudNoteError):
    """
    The request carried no usable bearer credential.

    When: Authorization header missing, or missing its token part.
    HTTP: 401 with WWW-Authenticate: Bearer
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Unauthorized Access Request!",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(CloudNoteError):
    """The bearer token is malformed or its signature does not match."""

    status_code = 401
    error_code = "invalid_token"

    def __init__(self, message: str = "invalid token", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class TokenExpiredError(InvalidTokenError):
    """The bearer token's signature is valid but its expiry has passed."""

    error_code = "token_expired"

    def __init__(self, message: str = "jwt expired", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthenticationFailedError(CloudNoteError):
    """
    Login with an unknown email or a wrong password.

    Both cases share one message so responses don't reveal which emails
    are registered.
    """

    status_code = 401
    error_code = "not_authenticated"

    def __init__(
        self,
        message: str = "You are NOT authenticated.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotOwnerError(CloudNoteError):
    """
    The note exists but belongs to another user.

    HTTP: 401, the status clients of the note API already handle for
    ownership failures.
    """

    status_code = 401
    error_code = "not_owner"

    def __init__(
        self,
        message: str = "Unauthorized Access Request!",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CloudNoteError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; the service layer converts
    that into this exception so routes never deal with None checks.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} does not exist!"
        if resource_id:
            message = f"{resource.capitalize()} '{resource_id}' does not exist!"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(CloudNoteError):
    """Raised when creating a resource that already exists (duplicate email)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "User already exists.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(CloudNoteError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Details (driver
    message, statement) are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
