"""Domain rejection codes for the admissions module.

Business rejections are values, returned inside ``Rejected`` results.
Exceptions are reserved for storage failures and bugs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_CONTACT = "INVALID_CONTACT"
    TOKEN_NOT_FOUND = "TOKEN_NOT_FOUND"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INACTIVE = "TOKEN_INACTIVE"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    EVENT_INACTIVE = "EVENT_INACTIVE"
    OUTSIDE_WINDOW = "OUTSIDE_WINDOW"
    COOLDOWN_ACTIVE = "COOLDOWN_ACTIVE"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    DUPLICATE_REFERENCE = "DUPLICATE_REFERENCE"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    INVALID_REGISTRATION_ID = "INVALID_REGISTRATION_ID"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    NOTIFICATION_FAILURE = "NOTIFICATION_FAILURE"


RETRYABLE_CODES = frozenset({ErrorCode.PERSISTENCE_FAILURE})


@dataclass(frozen=True)
class Rejection:
    """Base rejection with code, user-safe message and render details."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return self.code in RETRYABLE_CODES

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationFailed(Rejection):
    """Registration payload is missing or malformed."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={"field": field_name},
        )


class InvalidContact(Rejection):
    """Contact identifier could not be normalized."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CONTACT,
            message="Invalid phone number. Use +1234567890 or 1234567890 format.",
        )


class TokenNotFound(Rejection):
    """No usable token with that identifier."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TOKEN_NOT_FOUND,
            message="Invalid or unknown QR code",
        )


class TokenExpired(Rejection):
    def __init__(self, expires_at: datetime) -> None:
        super().__init__(
            code=ErrorCode.TOKEN_EXPIRED,
            message="This QR code has expired",
            details={"expires_at": expires_at.isoformat()},
        )


class TokenInactive(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TOKEN_INACTIVE,
            message="This QR code has been deactivated",
        )


class EventNotFound(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Distribution event not found",
        )


class InvalidEventId(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class EventInactive(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_INACTIVE,
            message="This distribution event is not active",
        )


class OutsideWindow(Rejection):
    """Submission arrived before the window opened or after it closed."""

    def __init__(self, starts_at: datetime, ends_at: datetime) -> None:
        super().__init__(
            code=ErrorCode.OUTSIDE_WINDOW,
            message="Submission period is not active",
            details={"starts_at": starts_at.isoformat(), "ends_at": ends_at.isoformat()},
        )


class CooldownActive(Rejection):
    """Contact already registered within the cooldown period."""

    def __init__(self, last_submitted_at: datetime, days_remaining: int) -> None:
        super().__init__(
            code=ErrorCode.COOLDOWN_ACTIVE,
            message="You have already registered recently. Please wait.",
            details={
                "last_submitted_at": last_submitted_at.isoformat(),
                "days_remaining": days_remaining,
            },
        )


class QuotaExceeded(Rejection):
    """Every slot in the window has been allocated."""

    def __init__(self, capacity: int, used: int) -> None:
        super().__init__(
            code=ErrorCode.QUOTA_EXCEEDED,
            message="Quota has been reached. No more registrations accepted.",
            details={"capacity": capacity, "used": used},
        )


class DuplicateReference(Rejection):
    def __init__(self, reference_number: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_REFERENCE,
            message="Reference number already issued",
            details={"reference_number": reference_number},
        )


class RegistrationNotFound(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="Registration not found",
        )


class InvalidRegistrationId(Rejection):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REGISTRATION_ID,
            message="Invalid registration ID format",
        )


class PersistenceFailure(Rejection):
    """Storage or transaction failure; the caller may resubmit."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_FAILURE,
            message="Registration failed. Please try again later.",
        )
