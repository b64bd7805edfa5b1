"""Authoritative ticket pricing shared by booking, display and refund."""

from ticketing.domain.errors import UnknownTierError
from ticketing.domain.models import Event
from ticketing.domain.value_objects import Money


def unit_price(event: Event, tier_name: str) -> Money:
    """Return the per-seat price of a tier.

    Raises:
        UnknownTierError: If no tier of the event is named tier_name.
    """
    for tier in event.tiers:
        if tier.name == tier_name:
            return tier.price
    raise UnknownTierError(tier_name)


def price_for(event: Event, tier_name: str, seat_count: int) -> Money:
    """Return unit price x seat_count in integer minor units."""
    if seat_count < 0:
        raise ValueError("Seat count cannot be negative")
    return unit_price(event, tier_name) * seat_count
