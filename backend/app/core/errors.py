"""Error Hierarchy — typed, classified exceptions for all Bloglist failure modes.

Invariants:
    - Every error has a code (str), kind (ErrorKind), category (ErrorCategory), severity (ErrorSeverity)
    - ErrorKind is a closed taxonomy: transport maps kinds to statuses without
      inspecting storage- or driver-specific exception objects
    - classify_error() never raises; unknown exceptions classify as INTERNAL
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BloglistError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - OwnershipMismatch is 403, AuthenticationFailed is 401: caller identity is known
      but lacks rights vs. identity unknown (ADR: distinguish authn from authz)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


class ErrorKind(str, Enum):
    """Closed failure taxonomy consumed by the transport layer."""
    MALFORMED_IDENTIFIER = "malformed_identifier"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_USERNAME = "duplicate_username"
    AUTHENTICATION_FAILED = "authentication_failed"
    OWNERSHIP_MISMATCH = "ownership_mismatch"
    PARTIALLY_APPLIED_MUTATION = "partially_applied_mutation"
    INTERNAL = "internal"


class AuthFailureReason(str, Enum):
    """Why a bearer credential could not be resolved to a user."""
    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID = "invalid"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    blog_id: str | None = None
    user_id: str | None = None
    operation: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class BloglistError(Exception):
    """Base exception for all Bloglist errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "kind": self.kind.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "blog_id": self.context.blog_id,
                    "user_id": self.context.user_id,
                    "operation": self.context.operation,
                    "field": self.context.field_name,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class MalformedIdentifierError(BloglistError):
    """Identifier does not conform to the store's identifier syntax."""
    kind = ErrorKind.MALFORMED_IDENTIFIER

    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        super().__init__(
            "Malformatted ID", "MALFORMED_IDENTIFIER",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.raw_id = raw_id


class ResourceNotFoundError(BloglistError):
    """Requested resource does not exist."""
    kind = ErrorKind.NOT_FOUND

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ValidationFailedError(BloglistError):
    """Payload is missing a required field or violates a field constraint."""
    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class DuplicateUsernameError(BloglistError):
    """Username uniqueness constraint violated."""
    kind = ErrorKind.DUPLICATE_USERNAME

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "a user with this username already exists",
            "DUPLICATE_USERNAME", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 400,
        )


class AuthenticationFailedError(BloglistError):
    """Credential missing, malformed, invalid or expired."""
    kind = ErrorKind.AUTHENTICATION_FAILED

    _MESSAGES = {
        AuthFailureReason.MISSING: "token missing",
        AuthFailureReason.MALFORMED: "token malformed",
        AuthFailureReason.INVALID: "token invalid or expired",
    }

    def __init__(
        self,
        reason: AuthFailureReason,
        message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or self._MESSAGES[reason],
            "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.reason = reason


class OwnershipMismatchError(BloglistError):
    """Authenticated caller does not own the target resource."""
    kind = ErrorKind.OWNERSHIP_MISMATCH

    def __init__(self, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            "you are not logged in as the user who saved this blog post",
            "OWNERSHIP_MISMATCH", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, ctx, 403,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PartiallyAppliedMutationError(BloglistError):
    """Blog-side write succeeded but the owner-list write failed."""
    kind = ErrorKind.PARTIALLY_APPLIED_MUTATION

    def __init__(
        self, operation: str, blog_id: str, user_id: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        ctx.blog_id = blog_id
        ctx.user_id = user_id
        super().__init__(
            f"{operation} of blog '{blog_id}' was applied to the blog store "
            f"but not to the owner list of user '{user_id}'",
            "PARTIALLY_APPLIED_MUTATION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation


class DatabaseError(BloglistError):
    """Database operation failed."""

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConcurrencyError(BloglistError):
    """Concurrent modification detected."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Classification ─────────────────────────────────────────────

def classify_error(exc: BaseException) -> ErrorKind:
    """Map any exception to its ErrorKind. Pure, never raises."""
    if isinstance(exc, BloglistError):
        return exc.kind
    if isinstance(exc, PydanticValidationError):
        return ErrorKind.VALIDATION_FAILED
    return ErrorKind.INTERNAL
