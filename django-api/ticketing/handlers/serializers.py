"""Serializers for transforming domain models to API responses and parsing requests."""

from rest_framework import serializers

from ticketing.domain.errors import ConfigError
from ticketing.domain.seat_map import total_seats
from ticketing.domain.value_objects import SeatId


class MoneyField(serializers.Field):
    """Renders Money in major units, e.g. "25.00"."""

    def to_representation(self, value):
        return str(value)


class TicketTierSerializer(serializers.Serializer):
    """Serializer for TicketTier domain model."""

    name = serializers.CharField()
    price = MoneyField()
    price_minor = serializers.IntegerField(source="price.minor_units")
    rows = serializers.ListField(child=serializers.CharField())


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    category = serializers.CharField()
    starts_at = serializers.DateTimeField(allow_null=True)
    image_url = serializers.CharField(allow_null=True)
    seats_per_row = serializers.IntegerField()
    total_seats = serializers.SerializerMethodField()
    tiers = TicketTierSerializer(many=True)

    def get_total_seats(self, event) -> int | None:
        try:
            return total_seats(event)
        except ConfigError:
            return None


class TierAvailabilitySerializer(serializers.Serializer):
    """Serializer for one tier of a seat map."""

    name = serializers.CharField(source="tier.name")
    price = MoneyField(source="tier.price")
    rows = serializers.ListField(source="tier.rows", child=serializers.CharField())
    free_count = serializers.IntegerField()
    seats = serializers.SerializerMethodField()

    def get_seats(self, availability) -> list[dict]:
        result = []
        for seat_id, available in availability.seats:
            seat = SeatId.parse(seat_id)
            result.append(
                {"id": seat_id, "row": seat.row, "number": seat.number, "available": available}
            )
        return result


class SeatMapSerializer(serializers.Serializer):
    """Serializer for the seat map of an event."""

    event_id = serializers.UUIDField(source="event.id.value")
    seats_per_row = serializers.IntegerField(source="event.seats_per_row")
    free_count = serializers.IntegerField()
    booked = serializers.SerializerMethodField()
    tiers = TierAvailabilitySerializer(many=True)

    def get_booked(self, view) -> list[str]:
        return sorted(view.booked)


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    user_id = serializers.CharField()
    tier_name = serializers.CharField()
    seats = serializers.ListField(child=serializers.CharField())
    total_amount = MoneyField()
    total_minor = serializers.IntegerField(source="total_amount.minor_units")
    status = serializers.CharField(source="status.value")
    confirmation_token = serializers.CharField()
    created_at = serializers.DateTimeField()
    paid_at = serializers.DateTimeField(allow_null=True)


class RevenueSerializer(serializers.Serializer):
    """Total of CONFIRMED bookings."""

    revenue = MoneyField()
    revenue_minor = serializers.IntegerField(source="revenue.minor_units")


class OccupancySerializer(RevenueSerializer):
    """Every booking of an event plus its confirmed revenue."""

    bookings = BookingSerializer(many=True)


class ReserveRequestSerializer(serializers.Serializer):
    """Reservation request. Any client-supplied amount is ignored."""

    tier = serializers.CharField(max_length=100)
    seats = serializers.ListField(
        child=serializers.CharField(max_length=16), allow_empty=True, max_length=100
    )


class PaymentCallbackSerializer(serializers.Serializer):
    """Settlement notice from the payment channel."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"

    token = serializers.CharField(max_length=128)
    outcome = serializers.ChoiceField(choices=[SUCCEEDED, FAILED], default=SUCCEEDED)
