"""Error Hierarchy — typed, categorized exceptions for every Taskboard failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope
    - Invitation tokens never appear in messages or context

Design Decisions:
    - Single hierarchy with TaskboardError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to the logging setup
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    board_id: str | None = None
    invitation_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TaskboardError(Exception):
    """Base exception for all Taskboard errors."""

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
                    "board_id": self.context.board_id,
                    "invitation_id": self.context.invitation_id,
                },
            }
        }


# ─── Access Errors ──────────────────────────────────────────────

class AuthenticationError(TaskboardError):
    """No valid principal could be established for the request."""
    def __init__(self, message: str = "Authentication required", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(TaskboardError):
    """Principal is not allowed to act on the board."""
    def __init__(self, message: str = "Access denied", context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(TaskboardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found"
            if resource_id else f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


# ─── Invitation Lifecycle Errors ────────────────────────────────

class InvitationExpiredError(TaskboardError):
    """Invitation is past its acceptance window."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This invitation has expired",
            "INVITATION_EXPIRED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 410,
        )


class EmailMismatchError(TaskboardError):
    """Invitation token redeemed by an identity other than the invitee."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This invitation is not for your email address",
            "EMAIL_MISMATCH", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class InvitationAlreadyAcceptedError(TaskboardError):
    """Invitation was already redeemed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This invitation has already been accepted",
            "INVITATION_ALREADY_ACCEPTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class AlreadyCollaboratorError(TaskboardError):
    """Invitee already has access to the board."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"{email} already has access to this board",
            "ALREADY_COLLABORATOR", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.email = email


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TaskboardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TokenCollisionError(TaskboardError):
    """Freshly generated invitation tokens kept colliding with stored ones."""
    def __init__(self, attempts: int, context: ErrorContext | None = None):
        super().__init__(
            f"Could not issue a unique invitation token after {attempts} attempts",
            "TOKEN_COLLISION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.attempts = attempts
