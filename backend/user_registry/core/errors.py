"""Error Hierarchy: typed, categorized exceptions for every User Registry failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), http_status (int)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are not
    - to_response() produces the REST envelope: success=False, message, optional error
    - No internal details leaked in user-facing messages (detail is a short summary)

Design Decisions:
    - Single hierarchy with UserRegistryError base: FastAPI global handler catches all
      (ADR: uniform envelope shape)
    - Conflicts map to 400, not 409: clients of the API treat duplicate email as
      a bad request (ADR: wire compatibility with existing consumers)
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for routing and log filtering."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    ROUTE_NOT_FOUND = "route_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


class UserRegistryError(Exception):
    """Base exception for all User Registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        detail: str | None = None,
        violations: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.detail = detail
        self.violations = violations or []

    def to_response(self) -> dict:
        """Convert to the standard failure envelope."""
        body: dict = {"success": False, "message": self.message}
        if self.detail:
            body["error"] = self.detail
        return body


# ─── Domain Errors (400-level) ──────────────────────────────────

class RecordValidationError(UserRegistryError):
    """One or more fields failed their constraints."""
    def __init__(self, message: str, violations: list[dict] | None = None):
        violations = violations or []
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION, 400,
            detail=format_violations(violations) or None,
            violations=violations,
        )


class InvalidIdError(UserRegistryError):
    """Path identifier is not a well-formed record id."""
    def __init__(self, raw_id: str):
        super().__init__(
            "Invalid user ID format", "INVALID_ID",
            ErrorCategory.VALIDATION, 400,
        )
        self.raw_id = raw_id


class EmailConflictError(UserRegistryError):
    """Another record already owns this email."""
    def __init__(self, email: str):
        super().__init__(
            "Email already exists", "EMAIL_CONFLICT",
            ErrorCategory.CONFLICT, 400,
        )
        self.email = email


class RecordNotFoundError(UserRegistryError):
    """Requested record does not exist."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found", "RESOURCE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, 404,
        )
        self.resource_id = resource_id


class RouteNotFoundError(UserRegistryError):
    """No route serves this method/path."""
    def __init__(self, path: str):
        super().__init__(
            "Route not found", "ROUTE_NOT_FOUND",
            ErrorCategory.ROUTE_NOT_FOUND, 404,
        )
        self.path = path


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(UserRegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE, 500,
            detail=message,
        )
        self.operation = operation


class DatabaseUnavailableError(DatabaseError):
    """Database unreachable at startup: fatal."""
    def __init__(self, message: str = "Database connection could not be established"):
        super().__init__(message, "connect")


class InternalError(UserRegistryError):
    """Unclassified failure while serving an operation."""
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL, 500,
            detail=detail,
        )


def format_violations(violations: list[dict]) -> str:
    """Render violations as 'field: message' pairs joined by ', '."""
    return ", ".join(f"{v['field']}: {v['message']}" for v in violations)
