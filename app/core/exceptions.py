"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidInputError(AppError):
    """Raised when caller-supplied data violates a field constraint."""
    def __init__(self, field: str, message: str, original_error: Exception = None):
        super().__init__(message, original_error)
        self.field = field


class NotFoundError(AppError):
    """Raised when a referenced entity does not exist."""
    def __init__(self, entity: str, entity_id: object, original_error: Exception = None):
        super().__init__(f"{entity} with ID {entity_id} not found.", original_error)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(AppError):
    """Raised when a request violates a business rule against existing state."""
    pass


class TransientError(AppError):
    """Raised when storage fails during a background scan.

    The poller retries these; they are never shown to an end user.
    """
    pass


def error_field(error: AppError) -> Optional[str]:
    """Return the offending field name for input errors, if any."""
    return getattr(error, "field", None)
