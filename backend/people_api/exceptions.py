"""
People API — Custom Exception Hierarchy
=========================================

What:  Defines application-specific exceptions for the error kinds the service knows.
Why:   Routes and repositories raise by kind; one handler per kind picks the HTTP
       status, so no internal detail reaches the client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status code.
Who:   Raised by repositories and routes; caught by global handlers.
When:  During request processing when an expected failure occurs.

Exception Hierarchy:
    PeopleApiError (base)
    ├── ValidationError          → 400 Bad Request (malformed id or query)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 422 Unprocessable Entity (nickname taken)
    └── StoreUnavailableError    → 500 Internal Server Error (transport failure)

Request bodies that fail schema validation never reach this hierarchy:
FastAPI raises RequestValidationError for them, handled separately in main.py.
"""

from typing import Any, Dict, Optional


class PeopleApiError(Exception):
    """
    Base exception for all application errors.

    What:    Root of the exception hierarchy.
    Why:     Lets main.py catch every application error with one handler.

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
        # context is logged server-side and never serialized into the response
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PeopleApiError):
    """
    Raised when client input fails validation outside of the request body.

    When:    A path identifier is not a UUID, a query parameter is missing.
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


class NotFoundError(PeopleApiError):
    """
    Raised when a requested resource does not exist.

    Repositories return None for missing rows; the route converts None into
    this exception so the global handler can answer 404.
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


class ConflictError(PeopleApiError):
    """
    Raised when the store rejects a write because of a uniqueness constraint.

    What:    Another person already uses the requested nickname.
    HTTP:    422 Unprocessable Entity
    """

    def __init__(
        self,
        field: str = "apelido",
        value: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"A person with this {field} already exists"
        if value is not None:
            message = f"A person with {field} '{value}' already exists"
        ctx = context or {}
        ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreUnavailableError(PeopleApiError):
    """
    Raised when the store cannot be reached or a query fails for any reason
    other than a constraint violation.

    What:    Network, protocol, pool-timeout or statement-timeout failures.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        exception type and operation are kept in context for server-side logs.
        No retries are attempted; the failure surfaces immediately.
    """

    def __init__(
        self,
        message: str = "The data store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
