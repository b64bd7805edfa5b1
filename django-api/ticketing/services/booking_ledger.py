"""Booking ledger - the only writer of Booking records.

Reservation runs "read occupancy, check disjointness, append booking" as one
critical section per event. The store's own conflict detection backs the
in-process lock, and conflicts are retried a bounded number of times before
being reported to the caller.
"""

import logging
import secrets
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from ticketing.domain.availability import TierAvailability, booked_seats, seat_statuses
from ticketing.domain.errors import (
    AlreadyCancelledError,
    BookingNotFoundError,
    ForbiddenError,
    InvalidBookingIdError,
    InvalidSeatError,
    PaymentAlreadySettledError,
    PaymentTokenMismatchError,
    SeatUnavailableError,
    TransientStorageError,
)
from ticketing.domain.models import Booking, Event, UserIdentity
from ticketing.domain.pricing import price_for, unit_price
from ticketing.domain.seat_map import tier_of
from ticketing.domain.value_objects import (
    BookingId,
    BookingStatus,
    Money,
    SeatId,
    normalize_seat_id,
)
from ticketing.services.event_service import EventService
from ticketing.services.locks import EventLockRegistry, LockTimeout
from ticketing.signals import booking_released, booking_reserved, payment_confirmed
from ticketing.stores.interfaces import BookingStore, WriteConflict

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_LOCK_TIMEOUT = 2.0
TOKEN_PREFIX = "TKT"


@dataclass(frozen=True)
class SeatMapView:
    """Latest committed occupancy of an event."""

    event: Event
    booked: frozenset[str]
    tiers: tuple[TierAvailability, ...]

    @property
    def free_count(self) -> int:
        return sum(tier.free_count for tier in self.tiers)


def parse_booking_id(booking_id: str) -> BookingId:
    try:
        return BookingId.from_string(booking_id)
    except ValueError as exc:
        raise InvalidBookingIdError() from exc


def make_confirmation_token(booking_id: BookingId) -> str:
    return f"{TOKEN_PREFIX}-{booking_id.value.hex}-{secrets.token_hex(8)}"


class BookingLedger:
    """Reserves, cancels and settles bookings for catalog events."""

    def __init__(
        self,
        events: EventService,
        bookings: BookingStore,
        *,
        locks: EventLockRegistry | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        retry_delay: float = 0.0,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._events = events
        self._bookings = bookings
        self._locks = locks or EventLockRegistry()
        self._max_attempts = max_attempts
        self._lock_timeout = lock_timeout
        self._retry_delay = retry_delay
        self._clock = clock

    # Queries

    def seat_map(self, event_id: str) -> SeatMapView:
        """Return seat availability from the latest committed bookings."""
        event = self._events.get_bookable_event(event_id)
        bookings = self._bookings.list_bookings(event.id)
        return SeatMapView(
            event=event,
            booked=booked_seats(event.id, bookings),
            tiers=seat_statuses(event, bookings),
        )

    def get_booking(self, booking_id: str, identity: UserIdentity) -> Booking:
        """Return a booking visible to the caller.

        Raises:
            InvalidBookingIdError: If booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            ForbiddenError: If the caller is neither the owner nor an admin.
        """
        booking = self._require_booking(booking_id)
        if booking.user_id != identity.user_id and not identity.is_admin:
            raise ForbiddenError()
        return booking

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        return self._bookings.list_bookings_for_user(user_id)

    def list_bookings_for_event(self, event_id: str) -> list[Booking]:
        event = self._events.get_event(event_id)
        return sorted(self._bookings.list_bookings(event.id), key=lambda b: b.created_at)

    def revenue(self, event_id: str | None = None) -> Money:
        """Total of CONFIRMED bookings for one event, or across the catalog.

        Refunded and cancelled bookings do not count.
        """
        if event_id is None:
            return self._bookings.confirmed_revenue()
        event = self._events.get_event(event_id)
        return self._bookings.confirmed_revenue(event.id)

    # Commands

    def reserve(
        self, event_id: str, user_id: str, tier_name: str, seat_ids: Sequence[str]
    ) -> Booking:
        """Reserve seats of one tier for a user.

        Raises:
            InvalidEventIdError, EventNotFoundError: If the event is unknown.
            ConfigError: If the event's seating layout is malformed.
            UnknownTierError: If tier_name is not a tier of the event.
            InvalidSeatError: If a seat is malformed, repeated or outside the tier.
            SeatUnavailableError: If a seat is taken or the race was lost.
            TransientStorageError: If storage kept failing after retries.
            InvariantViolationError: If the ledger already holds a double booking.
        """
        event = self._events.get_bookable_event(event_id)
        unit_price(event, tier_name)  # unknown tier fails before seat checks
        seats = self._validate_seats(event, tier_name, seat_ids)
        total = price_for(event, tier_name, len(seats))

        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                booking = self._try_reserve(event, user_id, tier_name, seats, total)
            except (WriteConflict, LockTimeout, TransientStorageError) as exc:
                last_error = exc
                logger.warning(
                    "Reserve attempt %d/%d for event %s failed: %s",
                    attempt,
                    self._max_attempts,
                    event.id,
                    exc,
                )
                if attempt < self._max_attempts and self._retry_delay:
                    time.sleep(self._retry_delay * attempt)
                continue

            logger.info(
                "Booking %s reserved %s (%s) for user %s on event %s, total %s",
                booking.id,
                ",".join(booking.seats),
                tier_name,
                user_id,
                event.id,
                booking.total_amount,
            )
            booking_reserved.send(sender=self.__class__, booking=booking)
            return booking

        if isinstance(last_error, TransientStorageError):
            raise last_error
        # only name seats the store reported as held
        raise SeatUnavailableError(getattr(last_error, "seat_ids", ()))

    def cancel(self, booking_id: str, acting_user_id: str) -> Booking:
        """Cancel a confirmed booking and refund it.

        Cancelling a booking that is no longer confirmed is an error, not a
        no-op.

        Raises:
            InvalidBookingIdError: If booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            ForbiddenError: If acting_user_id does not own the booking.
            AlreadyCancelledError: If the booking is REFUNDED or CANCELLED.
        """
        booking = self._require_booking(booking_id)
        if booking.user_id != acting_user_id:
            logger.warning(
                "User %s tried to cancel booking %s owned by %s",
                acting_user_id,
                booking.id,
                booking.user_id,
            )
            raise ForbiddenError()
        if not booking.is_confirmed:
            raise AlreadyCancelledError(booking_id)

        try:
            refunded = self._with_storage_retries(
                lambda: self._bookings.update_booking_status(
                    booking.id, BookingStatus.CONFIRMED, BookingStatus.REFUNDED
                )
            )
        except WriteConflict as exc:
            raise AlreadyCancelledError(booking_id) from exc

        logger.info("Booking %s refunded %s", refunded.id, refunded.total_amount)
        booking_released.send(sender=self.__class__, booking=refunded)
        return refunded

    def confirm_payment(self, booking_id: str, token: str) -> Booking | None:
        """Record the external payment confirmation of a booking.

        Idempotent: repeated confirmations leave the booking as the first one
        did. Returns None when no such booking exists.

        Raises:
            InvalidBookingIdError: If booking_id is not a valid UUID.
            PaymentTokenMismatchError: If token is not the booking's token.
        """
        booking = self._find_for_payment(booking_id, token)
        if booking is None:
            return None
        if not booking.is_confirmed or booking.is_paid:
            logger.info("Payment confirmation for booking %s ignored (%s)", booking.id, booking.status.value)
            return booking

        paid = self._with_storage_retries(
            lambda: self._bookings.record_payment(booking.id, self._clock())
        )
        logger.info("Payment confirmed for booking %s", paid.id)
        payment_confirmed.send(sender=self.__class__, booking=paid)
        return paid

    def fail_payment(self, booking_id: str, token: str) -> Booking | None:
        """Release an unpaid booking after the payment failed.

        Raises:
            InvalidBookingIdError: If booking_id is not a valid UUID.
            PaymentTokenMismatchError: If token is not the booking's token.
            PaymentAlreadySettledError: If the booking was already paid.
        """
        booking = self._find_for_payment(booking_id, token)
        if booking is None or not booking.is_confirmed:
            return booking
        if booking.is_paid:
            raise PaymentAlreadySettledError(booking_id)

        try:
            released = self._with_storage_retries(
                lambda: self._bookings.update_booking_status(
                    booking.id,
                    BookingStatus.CONFIRMED,
                    BookingStatus.CANCELLED,
                    require_unpaid=True,
                )
            )
        except WriteConflict as exc:
            current = self._bookings.get_booking(booking.id)
            if current is not None and current.is_paid:
                raise PaymentAlreadySettledError(booking_id) from exc
            return current

        logger.info("Booking %s released after failed payment", released.id)
        booking_released.send(sender=self.__class__, booking=released)
        return released

    # Internals

    def _validate_seats(self, event: Event, tier_name: str, seat_ids: Sequence[str]) -> tuple[str, ...]:
        if isinstance(seat_ids, str) or not seat_ids:
            raise InvalidSeatError((), reason="Please select at least one seat")

        seats = tuple(normalize_seat_id(seat) for seat in seat_ids)
        repeated = sorted({seat for seat in seats if seats.count(seat) > 1})
        if repeated:
            raise InvalidSeatError(repeated, reason=f"Seats selected more than once: {', '.join(repeated)}")

        outside = []
        for seat in seats:
            try:
                SeatId.parse(seat)
            except ValueError:
                outside.append(seat)
                continue
            tier = tier_of(event, seat)
            if tier is None or tier.name != tier_name:
                outside.append(seat)
        if outside:
            raise InvalidSeatError(outside)
        return seats

    def _try_reserve(
        self,
        event: Event,
        user_id: str,
        tier_name: str,
        seats: tuple[str, ...],
        total: Money,
    ) -> Booking:
        with self._locks.hold(event.id, timeout=self._lock_timeout):
            taken = booked_seats(event.id, self._bookings.list_bookings(event.id))
            conflicting = [seat for seat in seats if seat in taken]
            if conflicting:
                raise SeatUnavailableError(conflicting)

            booking_id = BookingId(uuid.uuid4())
            booking = Booking(
                id=booking_id,
                event_id=event.id,
                user_id=user_id,
                tier_name=tier_name,
                seats=seats,
                total_amount=total,
                created_at=self._clock(),
                status=BookingStatus.CONFIRMED,
                confirmation_token=make_confirmation_token(booking_id),
            )
            return self._bookings.append_booking(booking)

    def _with_storage_retries(self, operation: Callable[[], Booking]) -> Booking:
        attempt = 1
        while True:
            try:
                return operation()
            except TransientStorageError as exc:
                if attempt >= self._max_attempts:
                    raise
                logger.warning("Storage attempt %d/%d failed: %s", attempt, self._max_attempts, exc)
                if self._retry_delay:
                    time.sleep(self._retry_delay * attempt)
                attempt += 1

    def _require_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get_booking(parse_booking_id(booking_id))
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def _find_for_payment(self, booking_id: str, token: str) -> Booking | None:
        booking = self._bookings.get_booking(parse_booking_id(booking_id))
        if booking is None:
            logger.info("Payment callback for unknown booking %s ignored", booking_id)
            return None
        if not secrets.compare_digest(str(token).encode(), booking.confirmation_token.encode()):
            raise PaymentTokenMismatchError()
        return booking
