"""Builds the process-wide services from Django settings.

The ledger must be shared by every request handler of a process so that
they all use the same per-event locks.
"""

from functools import lru_cache

from django.conf import settings

from ticketing.services.booking_ledger import BookingLedger
from ticketing.services.event_service import EventService
from ticketing.stores.django_store import DjangoBookingStore, DjangoEventStore


@lru_cache(maxsize=1)
def get_event_service() -> EventService:
    return EventService(DjangoEventStore())


@lru_cache(maxsize=1)
def get_booking_ledger() -> BookingLedger:
    return BookingLedger(
        get_event_service(),
        DjangoBookingStore(),
        max_attempts=settings.TICKETING_RESERVE_MAX_ATTEMPTS,
        lock_timeout=settings.TICKETING_LOCK_TIMEOUT,
        retry_delay=settings.TICKETING_RETRY_DELAY,
    )
