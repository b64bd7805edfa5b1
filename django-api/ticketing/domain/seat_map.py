"""Seat map derivation.

Pure functions from an Event's tier configuration to its seat universe.
Safe to call concurrently from any number of readers.
"""

from ticketing.domain.errors import ConfigError
from ticketing.domain.models import DEFAULT_SEATS_PER_ROW, Event, TicketTier
from ticketing.domain.value_objects import SeatId, is_valid_row_label


def validate_layout(event: Event) -> None:
    """Check the tier/row invariants of an event.

    Raises:
        ConfigError: If seats_per_row is not positive, a tier name repeats,
            a row label is malformed, or two tiers share a row label.
    """
    if event.seats_per_row < 1:
        raise ConfigError(f"seats_per_row must be positive, got {event.seats_per_row}")

    tier_names: set[str] = set()
    row_owner: dict[str, str] = {}
    for tier in event.tiers:
        if tier.name in tier_names:
            raise ConfigError(f"tier {tier.name!r} is defined more than once")
        tier_names.add(tier.name)
        for row in tier.rows:
            if not is_valid_row_label(row):
                raise ConfigError(f"row label {row!r} in tier {tier.name!r} is malformed")
            if row in row_owner:
                raise ConfigError(
                    f"row {row!r} is assigned to both {row_owner[row]!r} and {tier.name!r}"
                )
            row_owner[row] = tier.name


def seats_for_tier(tier: TicketTier, seats_per_row: int = DEFAULT_SEATS_PER_ROW) -> tuple[str, ...]:
    """Return the tier's seat ids, row by row in configured order."""
    return tuple(
        str(SeatId(row=row, number=number))
        for row in tier.rows
        for number in range(1, seats_per_row + 1)
    )


def all_seats(event: Event) -> frozenset[str]:
    """Return every valid seat id of the event."""
    validate_layout(event)
    return frozenset(
        seat for tier in event.tiers for seat in seats_for_tier(tier, event.seats_per_row)
    )


def total_seats(event: Event) -> int:
    validate_layout(event)
    return sum(len(tier.rows) for tier in event.tiers) * event.seats_per_row


def tier_of(event: Event, seat_id: str) -> TicketTier | None:
    """Return the tier owning seat_id, or None if the seat is not on the map."""
    try:
        seat = SeatId.parse(seat_id)
    except ValueError:
        return None
    if seat.number > event.seats_per_row:
        return None
    for tier in event.tiers:
        if seat.row in tier.rows:
            return tier
    return None
