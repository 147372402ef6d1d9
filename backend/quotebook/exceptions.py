"""
Quotebook Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the storage port; caught by global handlers.

Exception Hierarchy:
    QuotebookError (base)
    ├── ValidationError   → 400 Bad Request (violations listed verbatim)
    ├── NotFoundError     → 404 Not Found (HTTP layer only)
    └── StorageError      → 500 Internal Server Error

Absence is not an error inside the service layer: lookups such as
get-by-id, random selection with no match, or the daily quote on an empty
catalog return None. Only route handlers turn None into NotFoundError.
"""

from typing import Any, Dict, List, Optional


class QuotebookError(Exception):
    """
    Base exception for all Quotebook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuotebookError):
    """
    Raised when a quote or source record fails validation.

    Carries the full, ordered list of violations produced by the
    validation engine. Validation never stops at the first failure, so a
    caller can surface every problem at once.

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": {"violations": ["Quote text must be at least 10 characters long"]}
        }
    """

    def __init__(
        self,
        violations: Optional[List[str]] = None,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.violations = list(violations or [])
        ctx = context or {}
        if self.violations:
            ctx["violations"] = self.violations
        super().__init__(message=message, context=ctx)


class NotFoundError(QuotebookError):
    """
    Raised by the HTTP layer when a requested resource does not exist.

    When:    GET /api/quotes/{id} with an unknown id, random selection that
             matched nothing, daily quote on an empty catalog.
    HTTP:    404 Not Found
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


class StorageError(QuotebookError):
    """
    Raised when a read or write against the storage port fails.

    The core never retries; the caller decides what to do. The message
    returned to HTTP clients is always generic. The failing operation and
    driver error type are kept in `context` for server-side logs.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
