"""
DocStore CRUD — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for each failure the handlers can report.
How:   Each exception carries a message, a machine-readable `kind`, and an
       optional context dict. Global exception handlers (registered in main.py)
       catch these and return a typed ErrorResponse with the matching status.
Who:   Raised by DocumentService and the identifier parser; caught by global handlers.

Exception Hierarchy:
    DocStoreError (base)
    ├── InvalidIdentifierError   → 400 Bad Request (path id is not an ObjectId)
    ├── InsertFailedError        → 400 Bad Request (storage rejected the insert)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

Malformed JSON bodies never reach this hierarchy: FastAPI raises
RequestValidationError while decoding, and main.py maps that to 400 as well.
"""

from typing import Any, Dict, Optional


class DocStoreError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
        kind:     Machine-readable error code placed in ErrorResponse.error
    """

    kind = "internal_server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidIdentifierError(DocStoreError):
    """
    Raised when a path identifier is not a valid ObjectId.

    When:    PUT/DELETE /{resource}/{id} where id is not 24 hex characters.
    HTTP:    400 Bad Request

    Raised before any storage call, so a bad identifier never mutates a record.
    """

    kind = "invalid_id"

    def __init__(
        self,
        identifier: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["identifier"] = identifier
        super().__init__(
            message=f"'{identifier}' is not a valid identifier; expected a 24-character hex string",
            context=ctx,
        )
        self.identifier = identifier


class InsertFailedError(DocStoreError):
    """
    Raised when the store rejects an insert.

    HTTP:    400 Bad Request
    The driver's error text stays in `context`; the client gets a generic message.
    """

    kind = "insert_failed"

    def __init__(
        self,
        resource: str = "record",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=f"The {resource} could not be created", context=context)


class NotFoundError(DocStoreError):
    """
    Raised when no record matches the requested identifier.

    When:    PUT/DELETE on an id with no matching document, or the post-insert
             refetch coming back empty.
    HTTP:    404 Not Found
    """

    kind = "not_found"

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


class DatabaseError(DocStoreError):
    """
    Raised when a MongoDB operation fails for any reason other than "no match".

    When:    Network errors, server selection timeouts, server-side rejections.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The driver's
        error text is kept in `context` and logged server-side only.
    """

    kind = "database_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
