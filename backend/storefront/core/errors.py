"""Error Hierarchy — typed, categorized exceptions for all Storefront failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages
    - error_for_code() covers every ErrorKind

Design Decisions:
    - Single hierarchy with StorefrontError base: FastAPI global handler catches all
    - Services return error dicts; only the API layer turns them into exceptions
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from storefront.core.domain_types import ErrorKind


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor_id: UUID | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class StorefrontError(Exception):
    """Base exception for all Storefront errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "actor_id": (
                        str(self.context.actor_id)
                        if self.context.actor_id else None
                    ),
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(StorefrontError):
    """Referenced entity does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.NOT_FOUND.value,
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context, 404,
        )


class ForbiddenError(StorefrontError):
    """Role or ownership check failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.FORBIDDEN.value,
            ErrorCategory.AUTHORIZATION, ErrorSeverity.WARNING, context, 403,
        )


class InvalidRequestError(StorefrontError):
    """Malformed request that passed schema validation (e.g. refund field mix)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.INVALID_REQUEST.value,
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )


class InsufficientStockError(StorefrontError):
    """Reservation would drive product stock negative."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.INSUFFICIENT_STOCK.value,
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, context, 409,
        )


class InvalidTransitionError(StorefrontError):
    """Order item status move not permitted from its current state."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.INVALID_TRANSITION.value,
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.ERROR, context, 409,
        )


class AlreadyFinalizedError(StorefrontError):
    """Order item was already exchanged or refunded."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorKind.ALREADY_FINALIZED.value,
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.ERROR, context, 409,
        )


class AuthenticationRequiredError(StorefrontError):
    """Request reached the API without a resolvable caller."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(StorefrontError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            ErrorKind.STORAGE_ERROR.value, ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


_ERRORS_BY_KIND: dict[ErrorKind, type[StorefrontError]] = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.FORBIDDEN: ForbiddenError,
    ErrorKind.INVALID_REQUEST: InvalidRequestError,
    ErrorKind.INSUFFICIENT_STOCK: InsufficientStockError,
    ErrorKind.INVALID_TRANSITION: InvalidTransitionError,
    ErrorKind.ALREADY_FINALIZED: AlreadyFinalizedError,
}


def error_for_code(
    code: str, message: str, context: ErrorContext | None = None,
) -> StorefrontError:
    """Map a service result error_code to its typed exception."""
    kind = ErrorKind(code)
    if kind == ErrorKind.STORAGE_ERROR:
        return DatabaseError(message, "request", context)
    return _ERRORS_BY_KIND[kind](message, context)
