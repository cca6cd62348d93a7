"""
Plant API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions, one per failure class the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py map each class to an HTTP
       status code and a JSON body; context is logged, never returned.
Who:   Raised by services, dependencies and middleware; caught by the handlers.

Exception Hierarchy:
    PlantAPIError (base)
    ├── ValidationError              → 400 Bad Request
    ├── UploadError                  → 400 Bad Request (size / type of a file)
    ├── InvalidCredentialsError      → 400 Bad Request (login failure)
    ├── AuthenticationRequiredError  → 401 Unauthorized
    ├── TokenVerificationError       → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    ├── RateLimitExceededError       → 429 Too Many Requests
    ├── DatabaseError                → 500 Internal Server Error
    ├── PasswordHashError            → 500 Internal Server Error
    └── MediaHostError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class PlantAPIError(Exception):
    """
    Base exception for all Plant API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PlantAPIError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, unknown foreign keys, malformed ids.
    HTTP:    400 Bad Request
    """

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


class UploadError(PlantAPIError):
    """
    Raised when an uploaded file is rejected before leaving the server.

    When:    File exceeds the size limit or is not an image/* content type.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Upload rejected",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(PlantAPIError):
    """
    Raised when a login attempt fails.

    The same message is used for an unknown username and for a wrong
    password, so the response does not reveal which usernames exist.
    HTTP:    400 Bad Request
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class AuthenticationRequiredError(PlantAPIError):
    """
    Raised by the bearer gate when no usable bearer token was sent.

    When:    Authorization header missing, or not of the form `Bearer <token>`.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenVerificationError(PlantAPIError):
    """
    Raised when a bearer token fails verification.

    Bad signature, malformed token and expiry are deliberately reported
    with one message; the cause is kept in context for the server log.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Invalid or expired token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PlantAPIError):
    """
    Raised when a requested row does not exist.

    HTTP:    404 Not Found
    Message: "Plant not found", "Category not found", ...
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(PlantAPIError):
    """
    Raised when a write collides with a constraint the store enforces.

    When:    Duplicate username, duplicate category name, deleting a category
             that plants still reference.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PlantAPIError):
    """
    Raised when a client exceeds the per-IP limit on the credential endpoints.

    HTTP:    429 Too Many Requests (with Retry-After)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class DatabaseError(PlantAPIError):
    """
    Raised when a database statement fails for a reason the client cannot fix.

    The message returned to the client is always generic; the original
    driver error is logged server-side only.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PasswordHashError(PlantAPIError):
    """
    Raised when hashing or verifying a password fails internally.

    When:    Malformed stored hash, backend failure inside bcrypt.
             Never converted into "invalid credentials".
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Password processing failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MediaHostError(PlantAPIError):
    """
    Raised when the remote media host rejects, fails or times out an upload.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Image upload to the media host failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
