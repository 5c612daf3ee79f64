"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
NOT_AUTHORIZED = "NOT_AUTHORIZED"
UNAUTHORIZED = "UNAUTHORIZED"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested saloon, or a named service inside one, does not exist."""

    pass


class NotAuthorizedError(DomainError):
    """Raised when the caller is not the owner of the saloon it tries to modify."""

    pass


class UnauthorizedError(DomainError):
    """Raised when a request carries no caller principal at all."""

    pass


class DomainValidationError(DomainError):
    """Raised when a payload fails validation (e.g. empty or whitespace-only required fields)."""

    pass


class StorageError(Exception):
    """Base exception for internal storage failures.

    These are programming errors, not user errors: validated input never
    produces them under normal operation.
    """

    pass


class StorageCapacityError(StorageError):
    """Raised when a value or key does not fit the durable store's bounds."""

    pass


class StorageCorruptionError(StorageError):
    """Raised when a stored value can no longer be decoded."""

    pass


class StorageEncodingError(StorageError):
    """Raised when a value cannot be serialized for storage."""

    pass
