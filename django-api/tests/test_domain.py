"""Unit tests for domain primitives and the seat map, availability and pricing rules.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from ticketing.domain import Booking, BookingId, BookingStatus, EventId, Money, SeatId, TicketTier
from ticketing.domain.availability import booked_seats, free_seats, seat_statuses
from ticketing.domain.errors import ConfigError, InvariantViolationError, UnknownTierError
from ticketing.domain.pricing import price_for, unit_price
from ticketing.domain.seat_map import all_seats, seats_for_tier, tier_of, total_seats, validate_layout


def make_booking(event_id, seats, status=BookingStatus.CONFIRMED, user_id="user-1") -> Booking:
    return Booking(
        id=BookingId(uuid4()),
        event_id=event_id,
        user_id=user_id,
        tier_name="Silver",
        seats=tuple(seats),
        total_amount=Money(1500 * len(seats)),
        created_at=datetime(2024, 12, 1, tzinfo=timezone.utc),
        status=status,
        confirmation_token=f"TKT-{uuid4().hex}",
    )


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        """Money can be created with positive amount."""
        assert Money(2500).minor_units == 2500

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money.zero().minor_units == 0

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(-1)

    def test_money_rejects_float_amount(self):
        """Money only accepts integer minor units."""
        with pytest.raises(TypeError):
            Money(25.5)

    def test_money_from_major_uses_minor_units(self):
        """Major units convert to exact cents without float error."""
        assert Money.from_major("0.10").minor_units == 10
        assert Money.from_major(Decimal("19.99")).minor_units == 1999
        assert Money.from_major(3).minor_units == 300

    def test_money_multiplication_is_exact(self):
        """Ten seats at 0.10 is exactly 1.00."""
        assert Money.from_major("0.10") * 10 == Money(100)
        assert 3 * Money(1999) == Money(5997)

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(2500)) == "25.00"
        assert str(Money(5)) == "0.05"


class TestSeatId:
    """Tests for SeatId value object."""

    def test_parse_splits_row_and_number(self):
        """SeatId.parse splits "A3" into row A and seat 3."""
        seat = SeatId.parse("A3")
        assert (seat.row, seat.number) == ("A", 3)
        assert str(seat) == "A3"

    def test_parse_normalizes_case_and_whitespace(self):
        """Lower-case or padded input resolves to the canonical id."""
        assert str(SeatId.parse(" c10 ")) == "C10"

    def test_parse_multi_letter_rows(self):
        """Row labels may have several letters."""
        assert SeatId.parse("AA12") == SeatId(row="AA", number=12)

    @pytest.mark.parametrize("value", ["", "A", "3", "A0", "A-1", "1A", "A03"])
    def test_parse_rejects_malformed(self, value):
        """Malformed seat ids raise ValueError."""
        with pytest.raises(ValueError):
            SeatId.parse(value)


class TestEventId:
    """Tests for EventId value object."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        value = "12345678-1234-5678-1234-567812345678"
        assert EventId.from_string(value).value == UUID(value)

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")


class TestSeatMap:
    """Tests for seat map derivation."""

    def test_seats_for_tier_preserves_row_order(self, jazz_fest):
        """Seats are produced row by row, numbered from 1."""
        silver = jazz_fest.tiers[1]
        seats = seats_for_tier(silver, jazz_fest.seats_per_row)
        assert seats[:3] == ("C1", "C2", "C3")
        assert seats[9:11] == ("C10", "D1")
        assert len(seats) == 20

    def test_all_seats_is_union_of_tiers(self, jazz_fest):
        """Every tier contributes rows x seats_per_row seats."""
        seats = all_seats(jazz_fest)
        assert len(seats) == 60
        assert {"A1", "D10", "F10"} <= seats
        assert total_seats(jazz_fest) == 60

    def test_shared_row_is_config_error(self, jazz_fest):
        """Two tiers claiming the same row make ownership ambiguous."""
        broken = replace(
            jazz_fest,
            tiers=jazz_fest.tiers + (TicketTier(name="VIP", price=Money(9000), rows=("A",)),),
        )
        with pytest.raises(ConfigError):
            all_seats(broken)

    def test_duplicate_tier_name_is_config_error(self, jazz_fest):
        """Tier names must be unique within an event."""
        broken = replace(
            jazz_fest,
            tiers=jazz_fest.tiers + (TicketTier(name="Gold", price=Money(9000), rows=("G",)),),
        )
        with pytest.raises(ConfigError):
            validate_layout(broken)

    @pytest.mark.parametrize("row", ["", "1", "A1", "a"])
    def test_malformed_row_label_is_config_error(self, jazz_fest, row):
        """Row labels must be upper-case letters only."""
        broken = replace(jazz_fest, tiers=(TicketTier(name="Gold", price=Money(100), rows=(row,)),))
        with pytest.raises(ConfigError):
            validate_layout(broken)

    def test_non_positive_seats_per_row_is_config_error(self, jazz_fest):
        """A row must hold at least one seat."""
        with pytest.raises(ConfigError):
            validate_layout(replace(jazz_fest, seats_per_row=0))

    def test_tier_of_resolves_owner(self, jazz_fest):
        """tier_of returns the tier whose rows include the seat's row."""
        assert tier_of(jazz_fest, "C2").name == "Silver"
        assert tier_of(jazz_fest, "a1").name == "Gold"

    @pytest.mark.parametrize("seat", ["Z9", "A11", "A0", "garbage"])
    def test_tier_of_unknown_seat(self, jazz_fest, seat):
        """Seats outside the map have no tier."""
        assert tier_of(jazz_fest, seat) is None


class TestAvailability:
    """Tests for the derived availability index."""

    def test_booked_seats_only_counts_confirmed(self, jazz_fest):
        """Refunded and cancelled bookings do not hold seats."""
        bookings = [
            make_booking(jazz_fest.id, ["C1", "C2"]),
            make_booking(jazz_fest.id, ["C3"], status=BookingStatus.REFUNDED),
            make_booking(jazz_fest.id, ["C4"], status=BookingStatus.CANCELLED),
        ]
        assert booked_seats(jazz_fest.id, bookings) == {"C1", "C2"}

    def test_booked_seats_filters_by_event(self, jazz_fest):
        """Bookings of other events are ignored."""
        other = EventId(uuid4())
        bookings = [make_booking(other, ["C1"]), make_booking(jazz_fest.id, ["D1"])]
        assert booked_seats(jazz_fest.id, bookings) == {"D1"}

    def test_duplicate_confirmed_seat_is_invariant_violation(self, jazz_fest):
        """Two confirmed bookings on one seat are surfaced, never merged."""
        bookings = [make_booking(jazz_fest.id, ["C1", "C2"]), make_booking(jazz_fest.id, ["C2"])]
        with pytest.raises(InvariantViolationError) as exc_info:
            booked_seats(jazz_fest.id, bookings)
        assert exc_info.value.seat_ids == ("C2",)

    def test_free_seats_is_complement(self, jazz_fest):
        """free_seats = all_seats - booked_seats."""
        free = free_seats(jazz_fest, [make_booking(jazz_fest.id, ["C1", "C2"])])
        assert len(free) == 58
        assert "C1" not in free
        assert "D1" in free

    def test_seat_statuses_follow_seat_map_order(self, jazz_fest):
        """Each tier lists its seats in order with availability flags."""
        tiers = seat_statuses(jazz_fest, [make_booking(jazz_fest.id, ["C2"])])
        silver = tiers[1]
        assert silver.tier.name == "Silver"
        assert silver.seats[:2] == (("C1", True), ("C2", False))
        assert silver.free_count == 19


class TestPricing:
    """Tests for the pricing calculator."""

    def test_price_for_multiplies_unit_price(self, jazz_fest):
        """Total is unit price times seat count."""
        assert price_for(jazz_fest, "Silver", 3) == Money(4500)

    def test_price_for_zero_seats(self, jazz_fest):
        """No seats cost nothing."""
        assert price_for(jazz_fest, "Gold", 0) == Money(0)

    def test_unknown_tier(self, jazz_fest):
        """An unknown tier name raises UnknownTierError."""
        with pytest.raises(UnknownTierError):
            price_for(jazz_fest, "Platinum", 1)

    def test_negative_seat_count(self, jazz_fest):
        """Negative seat counts are rejected."""
        with pytest.raises(ValueError):
            price_for(jazz_fest, "Gold", -1)

    def test_unit_price(self, jazz_fest):
        """unit_price returns the tier's configured price."""
        assert unit_price(jazz_fest, "Bronze") == Money(800)
