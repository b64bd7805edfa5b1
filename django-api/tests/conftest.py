"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from ticketing.domain import Event, EventId, Money, TicketTier
from ticketing.services.booking_ledger import BookingLedger
from ticketing.services.event_service import EventService
from ticketing.stores.memory_store import InMemoryBookingStore, InMemoryEventStore

PAYMENT_SECRET = "test-payment-secret"


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def payment_secret(settings):
    settings.PAYMENT_CALLBACK_SECRET = PAYMENT_SECRET
    return PAYMENT_SECRET


@pytest.fixture
def jazz_fest() -> Event:
    return Event(
        id=EventId(uuid4()),
        title="Jazz Fest",
        tiers=(
            TicketTier(name="Gold", price=Money.from_major("25.00"), rows=("A", "B")),
            TicketTier(name="Silver", price=Money.from_major("15.00"), rows=("C", "D")),
            TicketTier(name="Bronze", price=Money.from_major("8.00"), rows=("E", "F")),
        ),
        seats_per_row=10,
        created_at=datetime(2024, 12, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def event_store(jazz_fest) -> InMemoryEventStore:
    return InMemoryEventStore([jazz_fest])


@pytest.fixture
def booking_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self) -> None:
        self.now = datetime(2024, 12, 5, 18, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def ledger(event_store, booking_store) -> BookingLedger:
    return BookingLedger(
        EventService(event_store),
        booking_store,
        retry_delay=0.0,
        lock_timeout=5.0,
        clock=FakeClock(),
    )


@pytest.fixture
def event_id(jazz_fest) -> str:
    return str(jazz_fest.id)


@pytest.fixture
def catalog_event():
    from ticketing import models as orm

    event = orm.Event.objects.create(
        title="Jazz Fest",
        description="A weekend of smooth jazz and soul music.",
        location="Central Park, NY",
        category="Music",
    )
    for position, (name, price_minor, rows) in enumerate(
        [("Gold", 2500, ["A", "B"]), ("Silver", 1500, ["C", "D"]), ("Bronze", 800, ["E", "F"])]
    ):
        orm.TicketTier.objects.create(
            event=event, name=name, price_minor=price_minor, rows=rows, position=position
        )
    return event
