"""Event service - catalog reads for the HTTP layer.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from ticketing.domain.errors import EventNotFoundError, InvalidEventIdError
from ticketing.domain.models import Event
from ticketing.domain.seat_map import validate_layout
from ticketing.domain.value_objects import EventId
from ticketing.stores.interfaces import EventStore


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except ValueError as exc:
        raise InvalidEventIdError() from exc


class EventService:
    """Service for event catalog operations."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def list_events(self) -> list[Event]:
        """Return all events."""
        return self._store.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def get_bookable_event(self, event_id: str) -> Event:
        """Return an event whose seating layout is valid.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            ConfigError: If the tiers share rows or are otherwise malformed.
        """
        event = self.get_event(event_id)
        validate_layout(event)
        return event
