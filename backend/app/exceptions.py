"""
Contacts API — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for each failure the API can report.
Why:   Custom exceptions let the global handlers pick the HTTP status code and
       the client-safe message, while the accessor stays free of HTTP details.
How:   Each exception carries a message and an optional context dict.
       Handlers registered in main.py turn them into JSON error responses.
Who:   Raised by the accessor and validation rules; caught by global handlers.

Exception Hierarchy:
    ContactsAPIError (base)
    ├── InvalidIdentifierError  → 400 Bad Request (malformed path id)
    ├── ValidationError         → 400 Bad Request (client can fix)
    ├── NotFoundError           → 404 Not Found
    └── StorageError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ContactsAPIError(Exception):
    """
    Base exception for all Contacts API errors.

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


class InvalidIdentifierError(ContactsAPIError):
    """
    Raised when a path identifier is not a syntactically valid contact id.

    What:    The id could never exist, so the lookup is not attempted.
    When:    GET/PUT/DELETE /contacts/{id} with something that is not a UUID.
    HTTP:    400 Bad Request (never 404)
    """

    def __init__(
        self,
        identifier: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["identifier"] = identifier
        super().__init__(message=f"Invalid contact ID format: '{identifier}'", context=ctx)
        self.identifier = identifier


class ValidationError(ContactsAPIError):
    """
    Raised when contact fields fail validation.

    What:    Missing or blank required field, malformed email, duplicate email,
             unknown field, or an update with nothing to change.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Please enter a valid email",
            "details": {"field": "email", "errors": {"email": "Please enter a valid email"}}
        }
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


class NotFoundError(ContactsAPIError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the accessor converts that
    into NotFoundError so the handler layer gets a 404 without checking.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(ContactsAPIError):
    """
    Raised when database operations fail unexpectedly.

    What:    Connection lost, query failed, driver error.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        error type and identifiers go into `context` and are logged only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
