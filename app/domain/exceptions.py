"""Domain exceptions for the Deal Clarity application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.

Action failures and unknown condition operators are not exceptions: the
workflow engine records them as failed outcomes / false evaluations.
"""

from typing import Any


class DealClarityException(Exception):
    """Base exception for all Deal Clarity application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DealClarityException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DealClarityException):
    """Raised when authentication fails (e.g. invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DealClarityException):
    """Raised when the caller may not act on a team's resources."""

    def __init__(
        self,
        resource: str | None = None,
        team_id: str | None = None,
        message: str = "Access denied",
    ) -> None:
        """Initialize with optional resource and team.

        Args:
            resource: Optional resource type (e.g. 'workflow', 'deal').
            team_id: Team the caller tried to reach.
            message: Human-readable message; default used when resource omitted.
        """
        if resource:
            message = f"Access denied: {resource} belongs to another team"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if team_id:
            details["team_id"] = team_id
        super().__init__(message, "AUTHORIZATION_ERROR", details)


class ResourceNotFoundException(DealClarityException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'workflow', 'deal').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConditionsNotMetException(DealClarityException):
    """Raised by manual execution when the deal does not satisfy the workflow's conditions.

    Automatic triggering skips such workflows silently instead.
    """

    def __init__(self, workflow_id: str, record_id: str) -> None:
        super().__init__(
            "Deal does not meet workflow conditions",
            "CONDITIONS_NOT_MET",
            {"workflow_id": workflow_id, "record_id": record_id},
        )


class SqlNotConfiguredException(DealClarityException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
