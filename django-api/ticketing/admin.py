from django.contrib import admin

from ticketing.models import Booking, BookingSeat, Event, TicketTier


class TicketTierInline(admin.TabularInline):
    model = TicketTier
    extra = 1


class BookingSeatInline(admin.TabularInline):
    model = BookingSeat
    extra = 0
    can_delete = False
    readonly_fields = ["seat_id", "position", "active"]
    exclude = ["event"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "starts_at", "seats_per_row", "created_at"]
    search_fields = ["title", "location"]
    inlines = [TicketTierInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Read-only audit view; bookings change only through the ledger."""

    list_display = ["id", "event", "user_id", "tier_name", "status", "total_minor", "paid_at", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["user_id", "confirmation_token"]
    inlines = [BookingSeatInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
