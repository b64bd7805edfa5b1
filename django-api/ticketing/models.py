"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.db.models import Q

from ticketing.domain.models import DEFAULT_SEATS_PER_ROW


class Event(models.Model):
    """Persistence model for catalog events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    category = models.CharField(max_length=100, blank=True)
    starts_at = models.DateTimeField(blank=True, null=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    seats_per_row = models.PositiveSmallIntegerField(default=DEFAULT_SEATS_PER_ROW)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="event_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class TicketTier(models.Model):
    """Persistence model for an event's pricing tiers and their rows."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tiers")
    name = models.CharField(max_length=100)
    price_minor = models.PositiveIntegerField(help_text="Unit price in minor units (cents)")
    rows = models.JSONField(default=list, help_text='Row labels, e.g. ["A", "B"]')
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "name"]
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_tier_name_per_event"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price_minor}"


class Booking(models.Model):
    """Persistence model for ledger bookings. Rows are never deleted."""

    class Status(models.TextChoices):
        CONFIRMED = "CONFIRMED", "Confirmed"
        REFUNDED = "REFUNDED", "Refunded"
        CANCELLED = "CANCELLED", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="bookings")
    user_id = models.CharField(max_length=128)
    tier_name = models.CharField(max_length=100)
    total_minor = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
    confirmation_token = models.CharField(max_length=128, unique=True)
    paid_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "status"], name="booking_event_status_idx"),
            models.Index(fields=["user_id", "-created_at"], name="booking_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} ({self.status})"


class BookingSeat(models.Model):
    """One seat of a booking; active while the booking is CONFIRMED."""

    booking = models.ForeignKey(Booking, on_delete=models.PROTECT, related_name="seats")
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="+")
    seat_id = models.CharField(max_length=16)
    position = models.PositiveSmallIntegerField()
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "seat_id"],
                condition=Q(active=True),
                name="unique_active_seat_per_event",
            ),
        ]

    def __str__(self) -> str:
        return self.seat_id
