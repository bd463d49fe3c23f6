"""
Platform-wide exception hierarchy.

Services raise these types; blueprints map them to HTTP responses with
``privacy_guard.utils.errors.api_error`` so status codes stay consistent.

Usage:
    from privacy_guard.core.exceptions import ValidationError, AlreadyInstalledError

    raise ValidationError("Unknown reference data type", details={"type": kind})
    raise AlreadyInstalledError()
"""


class ValidationError(Exception):
    """Raised when input fails validation in the service layer.

    Maps to HTTP 400 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation conflicts with the current state of the store.

    Maps to HTTP 409.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class AlreadyInstalledError(ConflictError):
    """Raised when an installation is requested but the flag row already exists."""

    def __init__(self, installation_date: str | None = None) -> None:
        self.installation_date = installation_date
        details = {"installation_date": installation_date} if installation_date else None
        super().__init__("Application is already installed", details=details)


class UnsupportedDialectError(Exception):
    """Raised when the bound database has no ``INSERT … ON CONFLICT`` support."""

    def __init__(self, dialect: str) -> None:
        self.dialect = dialect
        super().__init__(f"Upserts are not supported on dialect {dialect!r}")
