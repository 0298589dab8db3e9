"""Error Hierarchy — typed, categorized exceptions for every reviewer-service failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Each domain failure kind has its own machine-readable code
    - Domain errors (4xx) are never retried; infrastructure errors (5xx) abort the transaction
    - to_response() produces the REST envelope; no internal details leaked in messages

Design Decisions:
    - Single hierarchy with ReviewServiceError base: FastAPI global handler catches all
    - AlreadyExistsError is a base for the three duplicate kinds so callers can
      catch the kind without caring which entity collided
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


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
    CONFLICT = "conflict"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers involved in the failure, for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    pull_request_id: str | None = None
    user_id: str | None = None
    team_name: str | None = None
    debug_info: dict[str, Any] | None = None


class ReviewServiceError(Exception):
    """Base exception for all reviewer-service errors."""

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
            }
        }


# ─── Domain Errors (4xx) ────────────────────────────────────────

class AlreadyExistsError(ReviewServiceError):
    """An entity with this identifier is already stored."""
    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        code: str = "ALREADY_EXISTS",
        http_status: int = 409,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, http_status,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class TeamExistsError(AlreadyExistsError):
    """Team name already taken."""
    def __init__(self, team_name: str, context: ErrorContext | None = None):
        super().__init__(
            "Team", team_name, "TEAM_EXISTS", 400,
            context or ErrorContext(team_name=team_name),
        )


class UserExistsError(AlreadyExistsError):
    """Team member id already registered (possibly in another team)."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        super().__init__(
            "User", user_id, "USER_EXISTS", 409,
            context or ErrorContext(user_id=user_id),
        )


class PullRequestExistsError(AlreadyExistsError):
    """Pull request id already taken."""
    def __init__(self, pull_request_id: str, context: ErrorContext | None = None):
        super().__init__(
            "PullRequest", pull_request_id, "PR_EXISTS", 409,
            context or ErrorContext(pull_request_id=pull_request_id),
        )


class AlreadyMergedError(ReviewServiceError):
    """Mutation attempted on a merged pull request."""
    def __init__(self, pull_request_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"PullRequest '{pull_request_id}' is already merged",
            "PR_MERGED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR,
            context or ErrorContext(pull_request_id=pull_request_id), 409,
        )


class ReviewerNotAssignedError(ReviewServiceError):
    """Reassignment target is not currently a reviewer of the pull request."""
    def __init__(
        self, pull_request_id: str, user_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"User '{user_id}' is not assigned to PullRequest '{pull_request_id}'",
            "NOT_ASSIGNED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR,
            context or ErrorContext(pull_request_id=pull_request_id, user_id=user_id),
            409,
        )


class NoCandidateError(ReviewServiceError):
    """No active team member is eligible as a replacement reviewer."""
    def __init__(self, pull_request_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"No active replacement candidate for PullRequest '{pull_request_id}'",
            "NO_CANDIDATE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR,
            context or ErrorContext(pull_request_id=pull_request_id), 409,
        )


class ResourceNotFoundError(ReviewServiceError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class DatabaseError(ReviewServiceError):
    """Database operation failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        retryable: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
        self.retryable = retryable


class OperationTimeoutError(ReviewServiceError):
    """Transaction exceeded its deadline and was rolled back."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Operation timed out after {timeout_seconds}s",
            "TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
        self.timeout_seconds = timeout_seconds
