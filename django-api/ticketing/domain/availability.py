"""Seat occupancy derived from the confirmed bookings of an event.

Nothing here is stored: every call recomputes from the booking snapshot
it is given, so the ledger stays the only source of truth.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from ticketing.domain.errors import InvariantViolationError
from ticketing.domain.models import Booking, Event, TicketTier
from ticketing.domain.seat_map import all_seats, seats_for_tier, validate_layout
from ticketing.domain.value_objects import EventId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierAvailability:
    """Seat statuses of one tier, in seat-map order."""

    tier: TicketTier
    seats: tuple[tuple[str, bool], ...]

    @property
    def free_count(self) -> int:
        return sum(1 for _, available in self.seats if available)


def booked_seats(event_id: EventId, bookings: Iterable[Booking]) -> frozenset[str]:
    """Return seats held by CONFIRMED bookings of the event.

    Raises:
        InvariantViolationError: If two confirmed bookings share a seat.
    """
    counts = Counter(
        seat
        for booking in bookings
        if booking.event_id == event_id and booking.status.holds_seats
        for seat in booking.seats
    )
    duplicated = [seat for seat, count in counts.items() if count > 1]
    if duplicated:
        logger.critical(
            "Seats held by more than one confirmed booking for event %s: %s",
            event_id,
            ", ".join(sorted(duplicated)),
        )
        raise InvariantViolationError(str(event_id), duplicated)
    return frozenset(counts)


def free_seats(event: Event, bookings: Iterable[Booking]) -> frozenset[str]:
    return all_seats(event) - booked_seats(event.id, bookings)


def seat_statuses(event: Event, bookings: Iterable[Booking]) -> tuple[TierAvailability, ...]:
    """Return per-tier (seat_id, available) pairs for rendering a seat grid."""
    validate_layout(event)
    taken = booked_seats(event.id, bookings)
    return tuple(
        TierAvailability(
            tier=tier,
            seats=tuple(
                (seat, seat not in taken) for seat in seats_for_tier(tier, event.seats_per_row)
            ),
        )
        for tier in event.tiers
    )
