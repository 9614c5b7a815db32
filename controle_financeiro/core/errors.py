"""Application error taxonomy. Each error carries a user-facing message and an HTTP status."""


class AppError(Exception):
    """Base class for errors rendered as {"message": ...} by the API."""

    status_code: int = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class AuthError(AppError):
    """Bad credentials, or a missing/invalid/expired token."""

    status_code = 401


class ForbiddenError(AppError):
    """Authenticated, but the identity lacks the required capability."""

    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """Email already registered."""

    status_code = 409


class StorageError(AppError):
    """Credential store or entry table failure. The message never includes driver details."""

    status_code = 500


class ConfigurationError(AppError):
    """Required configuration (e.g. JWT_SECRET) is missing."""

    status_code = 500
