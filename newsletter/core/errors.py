"""Error Hierarchy - typed, categorized exceptions for the subscription service.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation failures are handled by FastAPI (RequestValidationError), not here
    - DatabaseError stops at the subscription route (500, empty body);
      ConfigurationError stops at main() (exit 1). Neither reaches the client
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    DATABASE = "database"
    CONFIGURATION = "configuration"


class NewsletterError(Exception):
    """Base exception for all service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity


class DatabaseError(NewsletterError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE, ErrorSeverity.CRITICAL,
        )
        self.operation = operation


class ConfigurationError(NewsletterError):
    """Settings unreadable, database unreachable or address unbindable at startup."""
    def __init__(self, message: str):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
        )
