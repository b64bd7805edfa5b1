"""Domain error codes for the ticketing module."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIG_ERROR = "CONFIG_ERROR"
    INVALID_SEAT = "INVALID_SEAT"
    SEAT_UNAVAILABLE = "SEAT_UNAVAILABLE"
    UNKNOWN_TIER = "UNKNOWN_TIER"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_BOOKING_ID = "INVALID_BOOKING_ID"
    FORBIDDEN = "FORBIDDEN"
    PAYMENT_TOKEN_MISMATCH = "PAYMENT_TOKEN_MISMATCH"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    PAYMENT_ALREADY_SETTLED = "PAYMENT_ALREADY_SETTLED"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    TRANSIENT_STORAGE_ERROR = "TRANSIENT_STORAGE_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ConfigError(DomainError):
    """Raised when an event's tier/row layout is malformed."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message="This event's seating layout is misconfigured",
        )
        self.detail = detail


class InvalidSeatError(DomainError):
    """Raised when a requested seat is outside the tier or seat map."""

    def __init__(self, seat_ids: Iterable[str], reason: str = "") -> None:
        self.seat_ids = tuple(seat_ids)
        listed = ", ".join(self.seat_ids)
        super().__init__(
            code=ErrorCode.INVALID_SEAT,
            message=reason or f"Seats not available in the selected tier: {listed}",
        )


class SeatUnavailableError(DomainError):
    """Raised when requested seats are already taken or the race was lost."""

    def __init__(self, seat_ids: Iterable[str]) -> None:
        self.seat_ids = tuple(seat_ids)
        message = "That seat was just taken, please choose another"
        if self.seat_ids:
            message = f"{message}: {', '.join(self.seat_ids)}"
        super().__init__(code=ErrorCode.SEAT_UNAVAILABLE, message=message)


class UnknownTierError(DomainError):
    """Raised when a tier name matches no tier of the event."""

    def __init__(self, tier_name: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_TIER,
            message="The selected ticket tier does not exist for this event",
        )
        self.tier_name = tier_name


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class BookingNotFoundError(DomainError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidBookingIdError(DomainError):
    """Raised when a booking ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_ID,
            message="Invalid booking ID format",
        )


class ForbiddenError(DomainError):
    """Raised when the acting user may not touch the booking."""

    def __init__(self, message: str = "You can only manage your own bookings") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class PaymentTokenMismatchError(DomainError):
    """Raised when a payment callback carries the wrong confirmation token."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_TOKEN_MISMATCH,
            message="Payment confirmation does not match this booking",
        )


class AlreadyCancelledError(DomainError):
    """Raised when cancelling a booking that no longer holds seats."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CANCELLED,
            message="This booking has already been cancelled",
        )
        self.booking_id = booking_id


class PaymentAlreadySettledError(DomainError):
    """Raised when a payment failure arrives for an already paid booking."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_ALREADY_SETTLED,
            message="Payment for this booking has already been confirmed",
        )
        self.booking_id = booking_id


class InvariantViolationError(DomainError):
    """Raised when a seat is held by more than one confirmed booking."""

    def __init__(self, event_id: str, seat_ids: Iterable[str]) -> None:
        self.seat_ids = tuple(sorted(seat_ids))
        super().__init__(
            code=ErrorCode.INVARIANT_VIOLATION,
            message="Booking could not be completed, please try again later",
        )
        self.event_id = event_id


class TransientStorageError(DomainError):
    """Raised when the storage layer fails in a retryable way."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.TRANSIENT_STORAGE_ERROR,
            message="The booking service is busy, please try again",
        )
        self.detail = detail
