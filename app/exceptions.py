# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error types for the console API. Every error carries a machine
# readable code, an HTTP status, and an actionable suggestion.
#
# Taxonomy:
# - UnknownTableError / RowNotFoundError: target does not exist or is hidden
#   by row-level security (the two cases are indistinguishable)
# - RowValidationError: rejected client-side before any network call
# - BackendRequestError: transport/auth failure from the hosted database
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ConsoleException(Exception):
    """
    Base exception for the content console.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONSOLE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Table / Row Exceptions
# =============================================================================

class UnknownTableError(ConsoleException):
    """Raised when a table name is not in the schema registry."""

    def __init__(self, table_name: str):
        super().__init__(
            message=f"Unknown table: {table_name}",
            code="UNKNOWN_TABLE",
            status_code=404,
            suggestion="Use GET /api/v1/admin/tables to list the managed tables",
            details={"table": table_name}
        )


class RowNotFoundError(ConsoleException):
    """
    Raised when a row doesn't exist.

    Row-level security denials look the same as missing rows (zero rows
    affected), so both surface through this error.
    """

    def __init__(self, table_name: str, row_id: str):
        super().__init__(
            message=f"Row not found in {table_name}: {row_id}",
            code="ROW_NOT_FOUND",
            status_code=404,
            suggestion="Check that the row exists and that your account can access it",
            details={"table": table_name, "row_id": row_id}
        )


class UnknownColumnError(ConsoleException):
    """Raised when a column key is not part of the table's schema."""

    def __init__(self, table_name: str, column_key: str):
        super().__init__(
            message=f"Unknown column for {table_name}: {column_key}",
            code="UNKNOWN_COLUMN",
            status_code=404,
            suggestion=f"Use GET /api/v1/admin/tables/{table_name} to list its columns",
            details={"table": table_name, "column": column_key}
        )


class NoActiveTableError(ConsoleException):
    """Raised when a grid action arrives before any table tab is selected."""

    def __init__(self):
        super().__init__(
            message="No table selected",
            code="NO_ACTIVE_TABLE",
            status_code=409,
            suggestion="Select a table with POST /api/v1/admin/console/tabs/{table} first",
        )


class RowValidationError(ConsoleException):
    """Raised when row data fails schema validation. Lists every problem at once."""

    def __init__(self, table_name: str, errors: list[str]):
        super().__init__(
            message="; ".join(errors) if errors else "Invalid row data",
            code="ROW_VALIDATION_FAILED",
            status_code=422,
            suggestion="Fill in every required field before saving",
            details={"table": table_name, "errors": errors}
        )
        self.errors = errors


class BackendRequestError(ConsoleException):
    """Raised when a request to the hosted database fails."""

    def __init__(self, table_name: str, operation: str, error: str):
        super().__init__(
            message=error,
            code="BACKEND_REQUEST_FAILED",
            status_code=502,
            suggestion="Try again; if the problem persists check the Supabase project status",
            details={"table": table_name, "operation": operation}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AdminAccessDeniedError(ConsoleException):
    """Raised when an authenticated user lacks admin capability."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Admin access denied: {reason}",
            code="ADMIN_ACCESS_DENIED",
            status_code=403,
            suggestion="Sign in again with an account that has the admin role",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def console_exception_handler(
    request: Request,
    exc: ConsoleException
) -> JSONResponse:
    """
    Convert ConsoleException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
