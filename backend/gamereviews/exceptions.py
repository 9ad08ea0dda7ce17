"""
Game Reviews API — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios the API knows.
Why:   Each exception maps to one HTTP status via the global handlers in
       main.py, so services raise and routes stay free of try/except.
How:   Every exception carries a client-safe ``message`` and an optional
       ``context`` dict that is logged but never returned to the client.

Exception Hierarchy:
    GameReviewsError (base)  → 500 Internal Server Error
    ├── ValidationError      → 400 Bad Request
    ├── NotFoundError        → 404 Not Found
    └── DatabaseError        → 500 Internal Server Error

Response body for all of them: {"message": "<message>"}
"""

from typing import Any, Dict, Optional


class GameReviewsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, NOT returned to client)
    """

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GameReviewsError):
    """
    Raised when client input is malformed.

    When:  Non-integer review_id path token, missing or wrongly typed
           fields in a comment body.
    HTTP:  400 Bad Request

    Example response:
        {"message": "Bad Request: Missing username property"}
    """

    def __init__(
        self,
        message: str = "Bad Request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GameReviewsError):
    """
    Raised when a requested resource does not exist.

    Message format:
        NotFoundError("Review ID", 100)    → "Review ID: 100 Not Found"
        NotFoundError("Username", "bob")   → "Username: bob Not Found"
        NotFoundError("Path")              → "Path Not Found"
    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if resource_id is None:
            message = f"{resource} Not Found"
        else:
            message = f"{resource}: {resource_id} Not Found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(GameReviewsError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; the SQL error
    type and operation name travel in ``context`` and are logged only.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Internal Server Error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
