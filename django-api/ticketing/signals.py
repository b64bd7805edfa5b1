"""Django signals for booking notifications and cache invalidation.

The ledger sends booking_reserved, booking_released and payment_confirmed
after each committed change, with the domain Booking as the ``booking``
argument. Listeners (push channels, mailers) are optional.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from ticketing.models import Event, TicketTier

booking_reserved = Signal()
booking_released = Signal()
payment_confirmed = Signal()

EVENT_LIST_CACHE_KEY = "events:list"


def event_cache_key(event_id) -> str:
    return f"events:{event_id}"


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    cache.delete_many([EVENT_LIST_CACHE_KEY, event_cache_key(instance.pk)])


@receiver([post_save, post_delete], sender=TicketTier)
def invalidate_ticket_tier_cache(sender, instance, **kwargs):
    """Invalidate caches when a tier changes prices or rows."""
    cache.delete_many([EVENT_LIST_CACHE_KEY, event_cache_key(instance.event_id)])
