"""Django ORM implementations of the catalog and booking stores.

The partial unique index on active BookingSeat rows is what keeps two
worker processes from confirming the same seat; an IntegrityError on
append is reported as WriteConflict.
"""

from datetime import datetime

from django.db import IntegrityError, OperationalError, transaction
from django.db.models import Prefetch, Sum
from django.utils import timezone

from ticketing import models as orm
from ticketing.domain import Booking, BookingId, BookingStatus, Event, EventId, Money, TicketTier
from ticketing.domain.errors import TransientStorageError
from ticketing.stores.interfaces import BookingStore, EventStore, WriteConflict


def _event_to_domain(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        tiers=tuple(
            TicketTier(
                name=tier.name,
                price=Money(tier.price_minor),
                rows=tuple(tier.rows),
            )
            for tier in row.tiers.all()
        ),
        seats_per_row=row.seats_per_row,
        description=row.description,
        location=row.location,
        category=row.category,
        starts_at=row.starts_at,
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        event_id=EventId(row.event_id),
        user_id=row.user_id,
        tier_name=row.tier_name,
        seats=tuple(seat.seat_id for seat in row.seats.all()),
        total_amount=Money(row.total_minor),
        created_at=row.created_at,
        status=BookingStatus(row.status),
        confirmation_token=row.confirmation_token,
        paid_at=row.paid_at,
    )


class DjangoEventStore(EventStore):
    """Database-backed event catalog."""

    def _queryset(self):
        return orm.Event.objects.prefetch_related("tiers")

    def list_events(self) -> list[Event]:
        return [_event_to_domain(row) for row in self._queryset().order_by("-created_at")]

    def get_event(self, event_id: EventId) -> Event | None:
        row = self._queryset().filter(pk=event_id.value).first()
        return _event_to_domain(row) if row is not None else None

    def event_exists(self, event_id: EventId) -> bool:
        return orm.Event.objects.filter(pk=event_id.value).exists()


class DjangoBookingStore(BookingStore):
    """Database-backed booking ledger storage."""

    def _queryset(self):
        return orm.Booking.objects.prefetch_related(
            Prefetch("seats", queryset=orm.BookingSeat.objects.order_by("position"))
        )

    def list_bookings(self, event_id: EventId) -> list[Booking]:
        try:
            rows = list(self._queryset().filter(event_id=event_id.value))
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return [_booking_to_domain(row) for row in rows]

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        try:
            rows = list(self._queryset().filter(user_id=user_id).order_by("-created_at"))
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return [_booking_to_domain(row) for row in rows]

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        try:
            row = self._queryset().filter(pk=booking_id.value).first()
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return _booking_to_domain(row) if row is not None else None

    def append_booking(self, booking: Booking) -> Booking:
        try:
            with transaction.atomic():
                row = orm.Booking.objects.create(
                    id=booking.id.value,
                    event_id=booking.event_id.value,
                    user_id=booking.user_id,
                    tier_name=booking.tier_name,
                    total_minor=booking.total_amount.minor_units,
                    status=booking.status.value,
                    confirmation_token=booking.confirmation_token,
                    paid_at=booking.paid_at,
                    created_at=booking.created_at,
                )
                orm.BookingSeat.objects.bulk_create(
                    orm.BookingSeat(
                        booking=row,
                        event_id=booking.event_id.value,
                        seat_id=seat,
                        position=position,
                        active=booking.status.holds_seats,
                    )
                    for position, seat in enumerate(booking.seats)
                )
        except IntegrityError as exc:
            held = orm.BookingSeat.objects.filter(
                event_id=booking.event_id.value,
                seat_id__in=booking.seats,
                active=True,
            ).values_list("seat_id", flat=True)
            raise WriteConflict("Seats already held", seat_ids=sorted(held)) from exc
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return booking

    def update_booking_status(
        self,
        booking_id: BookingId,
        previous: BookingStatus,
        new: BookingStatus,
        *,
        require_unpaid: bool = False,
    ) -> Booking:
        rows = orm.Booking.objects.filter(pk=booking_id.value, status=previous.value)
        if require_unpaid:
            rows = rows.filter(paid_at__isnull=True)
        try:
            with transaction.atomic():
                updated = rows.update(status=new.value, updated_at=timezone.now())
                if not updated:
                    raise WriteConflict(f"Booking {booking_id} is no longer {previous.value}")
                orm.BookingSeat.objects.filter(booking_id=booking_id.value).update(
                    active=new.holds_seats
                )
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return self.get_booking(booking_id)

    def record_payment(self, booking_id: BookingId, paid_at: datetime) -> Booking:
        try:
            orm.Booking.objects.filter(
                pk=booking_id.value,
                status=BookingStatus.CONFIRMED.value,
                paid_at__isnull=True,
            ).update(paid_at=paid_at, updated_at=timezone.now())
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return self.get_booking(booking_id)

    def confirmed_revenue(self, event_id: EventId | None = None) -> Money:
        rows = orm.Booking.objects.filter(status=BookingStatus.CONFIRMED.value)
        if event_id is not None:
            rows = rows.filter(event_id=event_id.value)
        try:
            total = rows.aggregate(total=Sum("total_minor"))["total"]
        except OperationalError as exc:
            raise TransientStorageError(str(exc)) from exc
        return Money(total or 0)
