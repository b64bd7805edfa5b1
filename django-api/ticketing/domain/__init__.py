from ticketing.domain.models import Booking, Event, TicketTier, UserIdentity
from ticketing.domain.value_objects import BookingId, BookingStatus, EventId, Money, Role, SeatId

__all__ = [
    "Booking",
    "Event",
    "TicketTier",
    "UserIdentity",
    "BookingId",
    "BookingStatus",
    "EventId",
    "Money",
    "Role",
    "SeatId",
]
