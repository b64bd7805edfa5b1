"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass, replace
from datetime import datetime

from ticketing.domain.value_objects import BookingId, BookingStatus, EventId, Money, Role

DEFAULT_SEATS_PER_ROW = 10


@dataclass(frozen=True)
class TicketTier:
    """A named pricing category owning a set of row labels."""

    name: str
    price: Money
    rows: tuple[str, ...]


@dataclass(frozen=True)
class Event:
    """Domain representation of a catalog Event and its seat layout."""

    id: EventId
    title: str
    tiers: tuple[TicketTier, ...]
    seats_per_row: int = DEFAULT_SEATS_PER_ROW
    description: str = ""
    location: str = ""
    category: str = ""
    starts_at: datetime | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Booking:
    """Domain representation of a seat reservation held by the ledger."""

    id: BookingId
    event_id: EventId
    user_id: str
    tier_name: str
    seats: tuple[str, ...]
    total_amount: Money
    created_at: datetime
    status: BookingStatus
    confirmation_token: str
    paid_at: datetime | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.status is BookingStatus.CONFIRMED

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None

    def with_status(self, status: BookingStatus) -> "Booking":
        return replace(self, status=status)

    def with_payment(self, paid_at: datetime) -> "Booking":
        return replace(self, paid_at=paid_at)


@dataclass(frozen=True)
class UserIdentity:
    """Caller identity as supplied by the identity provider."""

    user_id: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
