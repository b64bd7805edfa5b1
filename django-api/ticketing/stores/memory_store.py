"""In-memory stores for tests and local tooling.

The booking store mirrors the database's partial unique index: appending a
booking whose seats are held by a confirmed booking raises WriteConflict.
"""

import threading
from datetime import datetime

from ticketing.domain import Booking, BookingId, BookingStatus, Event, EventId, Money
from ticketing.stores.interfaces import BookingStore, EventStore, WriteConflict


class InMemoryEventStore(EventStore):
    """Event catalog held in a dict."""

    def __init__(self, events: list[Event] | None = None) -> None:
        self._events: dict[EventId, Event] = {event.id: event for event in events or []}

    def add(self, event: Event) -> None:
        self._events[event.id] = event

    def list_events(self) -> list[Event]:
        return sorted(
            self._events.values(),
            key=lambda event: event.created_at or datetime.min,
            reverse=True,
        )

    def get_event(self, event_id: EventId) -> Event | None:
        return self._events.get(event_id)

    def event_exists(self, event_id: EventId) -> bool:
        return event_id in self._events


class InMemoryBookingStore(BookingStore):
    """Thread-safe booking ledger storage."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bookings: dict[BookingId, Booking] = {}

    def list_bookings(self, event_id: EventId) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.event_id == event_id]

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        with self._lock:
            owned = [b for b in self._bookings.values() if b.user_id == user_id]
        return sorted(owned, key=lambda b: b.created_at, reverse=True)

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def append_booking(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id in self._bookings:
                raise WriteConflict(f"Booking {booking.id} already exists")
            held = {
                seat
                for existing in self._bookings.values()
                if existing.event_id == booking.event_id and existing.status.holds_seats
                for seat in existing.seats
            }
            clashing = [seat for seat in booking.seats if seat in held]
            if booking.status.holds_seats and clashing:
                raise WriteConflict("Seats already held", seat_ids=clashing)
            self._bookings[booking.id] = booking
            return booking

    def update_booking_status(
        self,
        booking_id: BookingId,
        previous: BookingStatus,
        new: BookingStatus,
        *,
        require_unpaid: bool = False,
    ) -> Booking:
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None or current.status is not previous:
                raise WriteConflict(f"Booking {booking_id} is not {previous.value}")
            if require_unpaid and current.is_paid:
                raise WriteConflict(f"Booking {booking_id} is already paid")
            updated = current.with_status(new)
            self._bookings[booking_id] = updated
            return updated

    def record_payment(self, booking_id: BookingId, paid_at: datetime) -> Booking:
        with self._lock:
            current = self._bookings[booking_id]
            if current.is_confirmed and not current.is_paid:
                current = current.with_payment(paid_at)
                self._bookings[booking_id] = current
            return current

    def confirmed_revenue(self, event_id: EventId | None = None) -> Money:
        with self._lock:
            totals = [
                b.total_amount.minor_units
                for b in self._bookings.values()
                if b.is_confirmed and (event_id is None or b.event_id == event_id)
            ]
        return Money(sum(totals))
