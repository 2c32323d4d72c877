"""
Cooking Tips Backend — Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the error scenarios of the tips API.
Why:   Services raise domain errors; global handlers (registered in main.py)
       translate them into HTTP status codes and a consistent JSON body.
How:   Each exception carries a user-facing message and an optional context dict.

Exception Hierarchy:
    CookingTipsError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized (no/invalid bearer token)
    ├── UnauthorizedError        → 403 Forbidden (caller does not own the resource)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error

Naming note:
    `UnauthorizedError` keeps the domain's wording for ownership violations
    ("only the author may ..."), while `AuthenticationError` covers requests
    that arrive without a usable identity at all.
"""

from typing import Any, Dict, Optional


class CookingTipsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, and returned only where the
                  handler decides it is safe)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CookingTipsError):
    """
    Raised when client input breaks a business rule.

    When:    Rating outside 1..5 (strict mode), unknown store field name.
    HTTP:    400 Bad Request

    Schema-level problems (missing body fields, wrong types) never get here:
    FastAPI rejects them with its own 422 response.
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


class AuthenticationError(CookingTipsError):
    """
    Raised when a request needs a caller identity and none can be resolved.

    When:    Missing Authorization header, malformed/expired/forged token,
             token without a `sub` claim.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(CookingTipsError):
    """
    Raised when an authenticated caller acts on something they do not own.

    When:    Deleting another user's tip, editing or deleting another user's
             comment, rating on behalf of somebody else, toggling `featured`
             without being an administrator.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(CookingTipsError):
    """
    Raised when a referenced tip or comment does not exist.

    HTTP:    404 Not Found

    Stores return None for missing documents; the service converts that into
    this exception so HTTP concerns stay out of the store layer.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(CookingTipsError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the original error
    type is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(CookingTipsError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
