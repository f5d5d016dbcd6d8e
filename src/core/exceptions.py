"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    SALON_NOT_FOUND = "SALON_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400 / 422)
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Caller is authenticated but not allowed to perform the action."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message="Target user profile not found",
            status_code=404,
            details={"user_id": user_id},
        )


class SalonNotFoundError(AppException):
    """Salon not found."""

    def __init__(self, salon_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SALON_NOT_FOUND,
            message=f"Salon not found: {salon_id}",
            status_code=404,
            details={"salon_id": salon_id},
        )


class OwnerNotFoundError(AppException):
    """No identity provider account matches the given email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User with email {email} not found. Please ensure the user exists.",
            status_code=404,
            details={"email": email},
        )


class InvalidArgumentError(AppException):
    """Malformed input that passed schema validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ARGUMENT,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ProfileAlreadyExistsError(AppException):
    """A conditional create found an existing profile document."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_ALREADY_EXISTS,
            message="Profile already exists",
            status_code=409,
            details={"user_id": user_id},
        )


class IdentityProviderError(AppException):
    """The identity provider could not be reached or rejected an admin call."""

    def __init__(self, message: str = "Identity provider request failed") -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_PROVIDER_ERROR,
            message=message,
            status_code=500,
        )
