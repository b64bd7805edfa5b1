"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from ticketing.domain import Booking, BookingId, BookingStatus, Event, EventId, Money


class WriteConflict(Exception):
    """A conditional write lost against a concurrent modification."""

    def __init__(self, message: str, seat_ids: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.seat_ids = tuple(seat_ids)


class EventStore(ABC):
    """Interface for read-only access to the event catalog."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence.

    Writes are conditional: implementations raise WriteConflict instead of
    overwriting concurrent changes, and TransientStorageError for retryable
    infrastructure failures.
    """

    @abstractmethod
    def list_bookings(self, event_id: EventId) -> list[Booking]:
        """Return every booking of an event, in any status."""
        ...

    @abstractmethod
    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        """Return a user's bookings, newest first."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def append_booking(self, booking: Booking) -> Booking:
        """Persist a new booking.

        Raises:
            WriteConflict: If any of its seats is held by a confirmed booking.
        """
        ...

    @abstractmethod
    def update_booking_status(
        self,
        booking_id: BookingId,
        previous: BookingStatus,
        new: BookingStatus,
        *,
        require_unpaid: bool = False,
    ) -> Booking:
        """Move a booking from previous to new status.

        With require_unpaid the move also requires paid_at to be unset.

        Raises:
            WriteConflict: If the stored status is no longer previous, or the
                booking was paid and require_unpaid is set.
        """
        ...

    @abstractmethod
    def record_payment(self, booking_id: BookingId, paid_at: datetime) -> Booking:
        """Stamp paid_at on a confirmed, unpaid booking and return it.

        Bookings already paid or no longer confirmed are returned unchanged.
        """
        ...

    @abstractmethod
    def confirmed_revenue(self, event_id: EventId | None = None) -> Money:
        """Sum the totals of CONFIRMED bookings, for one event or all of them."""
        ...
