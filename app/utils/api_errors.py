from typing import Any, Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base class for errors rendered as the uniform JSON error envelope."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Any = None,
        headers: Optional[dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        super().__init__(
            status_code=status_code or self.default_status,
            detail=self.message,
            headers=headers,
        )


class ValidationError(ApiError):
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class InvalidDateError(ValidationError):
    default_message = "Invalid date format, expected YYYY-MM-DD"


class InvalidRangeError(ApiError):
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "Start date must be before end date"


class UnauthorizedError(ApiError):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class NotFoundError(ApiError):
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class OwnerRequiredError(NotFoundError):
    default_message = "User not found"


class ConflictError(ApiError):
    default_status = status.HTTP_409_CONFLICT
    default_message = "Resource conflict"


class InternalError(ApiError):
    pass


def ensure_owner(user_id: Optional[int]) -> int:
    if not user_id:
        raise OwnerRequiredError()
    return user_id
