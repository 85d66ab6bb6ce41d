"""Error Hierarchy: typed, categorized exceptions for every Employee Service failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and the HTTP status it maps to
    - Layers branch on the category or the class, never on object identity
    - to_response() carries the message text only (no tracebacks, no driver objects)

Design Decisions:
    - RecordNotFoundError (record access, zero rows) and EmployeeNotFoundError
      (application layer) are distinct: only the latter is a 404
    - ConstraintViolationError subclasses StorageError and keeps status 500;
      its code is what tells a duplicate email apart from a dead connection
"""

from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Tag carried by every error; the kind callers match on."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NO_ROWS = "no_rows"
    CONSTRAINT = "constraint"
    DATABASE = "database"
    TIMEOUT = "timeout"
    STARTUP = "startup"
    INTERNAL = "internal"


class EmployeeServiceError(Exception):
    """Base exception for all Employee Service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.timestamp = datetime.now(timezone.utc)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.timestamp.isoformat(),
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(EmployeeServiceError):
    """Request body or path parameter could not be decoded."""
    def __init__(self, message: str):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )


class EmployeeNotFoundError(EmployeeServiceError):
    """Application-level "not found" for an employee id."""
    def __init__(self, employee_id: int):
        super().__init__(
            f"employee {employee_id} not found",
            "EMPLOYEE_NOT_FOUND", ErrorCategory.NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )
        self.employee_id = employee_id


class RequestTimeoutError(EmployeeServiceError):
    """Handler exceeded the server-wide request timeout."""
    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"request exceeded {timeout_seconds:g}s timeout",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, 504,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class RecordNotFoundError(EmployeeServiceError):
    """Record access touched zero rows for the given id."""
    def __init__(self, table: str, record_id: int, operation: str):
        super().__init__(
            f"{operation} {table}: no row with id {record_id}",
            "NO_ROWS", ErrorCategory.NO_ROWS,
            ErrorSeverity.ERROR, 500,
        )
        self.table = table
        self.record_id = record_id
        self.operation = operation


class StorageError(EmployeeServiceError):
    """Database operation failed (connectivity, driver, unexpected state)."""
    def __init__(
        self,
        message: str,
        operation: str,
        code: str = "DATABASE_ERROR",
        category: ErrorCategory = ErrorCategory.DATABASE,
    ):
        super().__init__(
            f"{operation}: {message}", code, category,
            ErrorSeverity.CRITICAL, 500,
        )
        self.operation = operation


class ConstraintViolationError(StorageError):
    """Integrity constraint rejected the statement (e.g. duplicate email)."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            message, operation,
            code="CONSTRAINT_VIOLATION", category=ErrorCategory.CONSTRAINT,
        )
        self.severity = ErrorSeverity.ERROR


class StartupError(EmployeeServiceError):
    """Storage could not be brought up; the process must not serve."""
    def __init__(self, message: str):
        super().__init__(
            message, "STARTUP_FAILED", ErrorCategory.STARTUP,
            ErrorSeverity.CRITICAL, 500,
        )
