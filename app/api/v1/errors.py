"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from app.core.exceptions import (
    AppError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    TransientError,
    error_field,
)

STATUS_BY_ERROR = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    TransientError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_detail(error: AppError) -> dict:
    return {
        "error": error.__class__.__name__,
        "message": str(error),
        "field": error_field(error),
    }


def to_http_exception(error: AppError) -> HTTPException:
    """Map an AppError to an HTTPException with a structured detail body."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(status_code=status_code, detail=error_detail(error))
