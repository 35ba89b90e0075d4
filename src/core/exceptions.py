"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    SELLER_NOT_FOUND = "SELLER_NOT_FOUND"
    LISTING_NOT_FOUND = "LISTING_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SLUG = "INVALID_SLUG"
    INVALID_LISTING = "INVALID_LISTING"
    NAME_CHANGE_LIMIT_REACHED = "NAME_CHANGE_LIMIT_REACHED"

    # Conflict errors (409)
    SLUG_TAKEN = "SLUG_TAKEN"
    SLUG_ALLOCATION_EXHAUSTED = "SLUG_ALLOCATION_EXHAUSTED"
    PROFILE_ALREADY_EXISTS = "PROFILE_ALREADY_EXISTS"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


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


class EmailNotVerifiedError(AppException):
    """Action requires a verified email address."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_NOT_VERIFIED,
            message="Verify your email before posting",
            status_code=403,
        )


class SlugValidationError(AppException):
    """A requested seller handle breaks the syntax or name-alignment rules."""

    def __init__(self, slug: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_SLUG,
            message=reason,
            status_code=400,
            details={"slug": slug},
        )


class SlugTakenError(AppException):
    """Seller handle is reserved by another user."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            error_code=ErrorCode.SLUG_TAKEN,
            message=f"That username is taken: {slug}",
            status_code=409,
            details={"slug": slug},
        )


class SlugAllocationExhaustedError(AppException):
    """Every candidate handle was invalid or owned by someone else."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            error_code=ErrorCode.SLUG_ALLOCATION_EXHAUSTED,
            message="Could not create a unique username. Try different details.",
            status_code=409,
            details={"attempts": attempts},
        )


class StoreUnavailableError(AppException):
    """The backing store failed mid-operation."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=f"Store unavailable during {operation}",
            status_code=503,
            details={"operation": operation, **(details or {})},
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class ProfileAlreadyExistsError(AppException):
    """Signup attempted for a user who already has a profile."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_ALREADY_EXISTS,
            message="Profile already exists",
            status_code=409,
            details={"user_id": user_id},
        )


class NameChangeLimitError(AppException):
    """First/last name has been edited the maximum number of times."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            error_code=ErrorCode.NAME_CHANGE_LIMIT_REACHED,
            message=f"Name can only be changed {limit} times",
            status_code=400,
            details={"limit": limit},
        )


class SellerNotFoundError(AppException):
    """No seller owns the requested handle."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            error_code=ErrorCode.SELLER_NOT_FOUND,
            message=f"The username /{slug} does not exist",
            status_code=404,
            details={"slug": slug},
        )


class ListingNotFoundError(AppException):
    """Listing not found."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.LISTING_NOT_FOUND,
            message=f"Listing not found: {listing_id}",
            status_code=404,
            details={"listing_id": listing_id},
        )


class ListingValidationError(AppException):
    """Listing payload rejected by business rules."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_LISTING,
            message=message,
            status_code=400,
        )
