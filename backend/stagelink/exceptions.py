"""
StageLink Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages, without leaking driver errors
       or SQL to the client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, the authorization gate and middleware.

Exception Hierarchy:
    StageLinkError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden (create-time rules)
    ├── NotFoundError            → 404 Not Found (absent OR not visible to you)
    ├── ConflictError            → 409 Conflict (uniqueness / check constraint)
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Note on 403 vs 404:
    A row the requester may not see or mutate is reported exactly like a row
    that does not exist. PermissionDeniedError is reserved for rules that do
    not reveal anything about a specific row ("Only venues can post jobs").
"""

from typing import Any, Dict, Optional


class StageLinkError(Exception):
    """
    Base exception for all StageLink application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler chooses)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StageLinkError):
    """
    Raised when client input fails a business validation rule.

    When:  Blank required field after trimming, sending a message to yourself,
           password too short.
    HTTP:  400 Bad Request. Schema-level problems (wrong types, bad enum
           values) are caught earlier by FastAPI and answered with 422.
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


class AuthenticationError(StageLinkError):
    """
    Raised when the caller has no valid session.

    When:  Missing, malformed, expired or revoked bearer token; wrong
           email/password on sign-in. The message never says which part
           of the credentials was wrong.
    HTTP:  401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(StageLinkError):
    """
    Raised when a create-time rule rejects the caller.

    When:  An artist tries to post a job, a venue tries to form a group,
           a non-member applies on behalf of a group.
    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(StageLinkError):
    """
    Raised when a requested resource does not exist or is not visible.

    When:  GET/PATCH/DELETE on an unknown id, or on a row owned by someone
           else. The two cases are deliberately indistinguishable.
    HTTP:  404 Not Found
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


class ConflictError(StageLinkError):
    """
    Raised when a write trips a uniqueness or check constraint.

    When:  Second application to the same job, duplicate membership,
           duplicate account email.
    HTTP:  409 Conflict

    The message is specific ("You have already applied for this job") so the
    client can show it as-is instead of a generic failure.
    """

    def __init__(
        self,
        message: str = "This record already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(StageLinkError):
    """
    Raised when database operations fail unexpectedly.

    When:  Connection lost mid-query, store unavailable.
    HTTP:  500 Internal Server Error

    The operation is considered not applied and is safe to retry. Detailed
    error info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(StageLinkError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:  429 Too Many Requests, with a Retry-After header.
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
