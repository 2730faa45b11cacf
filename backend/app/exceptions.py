"""
Folio Backend — Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Controllers and services never format HTTP responses themselves; they
       raise a typed error and a single set of handlers (registered in
       main.py) turns it into the response envelope.
How:   Each exception class carries a message, an optional context dict, and
       the HTTP status code it maps to.
Who:   Raised by services, dependencies, and middleware.

Exception Hierarchy:
    FolioError (base)                → 500
    ├── ValidationError              → 400 Bad Request (bad input, duplicate key)
    ├── AuthError                    → 401 Unauthorized
    ├── AuthzError                   → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── RateLimitExceededError       → 429 Too Many Requests
    ├── InternalError                → 500 (notification failure and friends)
    ├── FileStorageError             → 500
    └── DatabaseError                → 500

Response envelope:
    {"success": false, "error": "<message>"}

    `context` is logged server-side only and never sent to the client.
"""

from typing import Any, Dict, Optional


class FolioError(Exception):
    """
    Base exception for all Folio application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        context:     Additional debug info (logged but NOT returned to client)
        status_code: HTTP status the central handler responds with
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FolioError):
    """
    Raised when client input fails validation.

    When:    Missing/malformed fields, unknown category, disallowed upload,
             duplicate unique field (slug, email, username).
    HTTP:    400 Bad Request
    """

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


class DuplicateKeyError(ValidationError):
    """
    Raised when a write collides with a unique index.

    The storage-layer error is remapped here so its text (constraint names,
    SQL) never leaks to the client.
    """

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Duplicate field value entered: {field}",
            field=field,
            context=context,
        )


class AuthError(FolioError):
    """
    Raised when a credential is missing, malformed, expired, or wrong.

    HTTP:    401 Unauthorized

    Login failures for an unknown email and for a wrong password share the
    same message so callers cannot enumerate accounts.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not authorized to access this route",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthzError(FolioError):
    """
    Raised when an authenticated user lacks the role or ownership required.

    HTTP:    403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FolioError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown id or slug, and ids that are not valid UUIDs at all.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} not found with id of {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(FolioError):
    """
    Raised when a client exceeds the per-client request window.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class InternalError(FolioError):
    """
    Raised for failures the client cannot fix, such as a notification email
    that could not be delivered after the contact was already stored.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Server error. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(FolioError):
    """
    Raised when file system operations fail (disk full, permission denied).

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FolioError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; details are
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
