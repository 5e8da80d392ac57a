"""Domain error codes for the booking administration."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    SHOW_NOT_FOUND = "SHOW_NOT_FOUND"
    DUPLICATE_SHOW = "DUPLICATE_SHOW"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    WAITLIST_ENTRY_NOT_FOUND = "WAITLIST_ENTRY_NOT_FOUND"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    BOOKING_RULE_VIOLATION = "BOOKING_RULE_VIOLATION"
    INVALID_BULK_DELETE = "INVALID_BULK_DELETE"
    WAITLIST_NOT_NEEDED = "WAITLIST_NOT_NEEDED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ShowNotFoundError(DomainError):
    """Raised when no show exists for an id or date."""

    def __init__(self, ref: str) -> None:
        super().__init__(code=ErrorCode.SHOW_NOT_FOUND, message="Show not found")
        self.ref = ref


class DuplicateShowError(DomainError):
    """Raised when a date already has a scheduled show."""

    def __init__(self, date: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_SHOW,
            message=f"A show is already scheduled on {date}",
        )
        self.date = date


class ReservationNotFoundError(DomainError):
    """Raised when a reservation is not found."""

    def __init__(self, reservation_id: str) -> None:
        super().__init__(code=ErrorCode.RESERVATION_NOT_FOUND, message="Reservation not found")
        self.reservation_id = reservation_id


class WaitlistEntryNotFoundError(DomainError):
    """Raised when a waiting list entry is not found."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(code=ErrorCode.WAITLIST_ENTRY_NOT_FOUND, message="Waiting list entry not found")
        self.entry_id = entry_id


class InvalidStatusTransitionError(DomainError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot change status from '{current}' to '{target}'",
        )


class BookingRuleError(DomainError):
    """Raised when a booking breaks the configured booking rules."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.BOOKING_RULE_VIOLATION, message=message)


class InvalidBulkDeleteError(DomainError):
    """Raised when bulk delete criteria are incomplete or span several months."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_BULK_DELETE, message=message)


class WaitlistNotNeededError(DomainError):
    """Raised when a waiting list request targets a date with free seats."""

    def __init__(self, date: str, available: int) -> None:
        super().__init__(
            code=ErrorCode.WAITLIST_NOT_NEEDED,
            message=f"{available} seats are still available on {date}",
        )
