"""Error Hierarchy — typed, categorized exceptions for all post index failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - PostsLoadError is fatal to one load attempt but recoverable by reload
    - PostNotFoundError is recoverable and never a retry case
    - An empty filter/search result is NOT an error (see query_engine.QueryResult.is_empty)
    - to_response() produces REST envelope; to_event() produces reader stream envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with PostIndexError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATA_SOURCE = "data_source"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    post_id: int | None = None
    source: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class PostIndexError(Exception):
    """Base exception for all post index errors."""

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

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "post_id": self.context.post_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }

    def to_event(self) -> dict:
        """Convert to reader stream error event."""
        return {
            "type": "error",
            "data": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
            },
        }


# ─── Data Errors ────────────────────────────────────────────────

class PostsLoadError(PostIndexError):
    """Post set could not be fetched, parsed, or validated."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        if ctx.user_message is None:
            ctx.user_message = "Failed to load blog posts. Please try again later."
        super().__init__(
            message, "POSTS_LOAD_FAILED", ErrorCategory.DATA_SOURCE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )


class PostsNotReadyError(PostIndexError):
    """Query issued while the post set is still loading."""
    def __init__(self, retry_after_ms: int = 500, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            "Posts are still loading", "POSTS_LOADING",
            ErrorCategory.UNAVAILABLE, ErrorSeverity.WARNING, ctx, 503,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class PostNotFoundError(PostIndexError):
    """Requested post id is absent from the loaded set."""
    def __init__(self, post_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.post_id = post_id
        if ctx.user_message is None:
            ctx.user_message = "Post not found"
        super().__init__(
            f"Post '{post_id}' not found", "POST_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING, ctx, 404,
        )


class QueryValidationError(PostIndexError):
    """Query input rejected before reaching the engine."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field
