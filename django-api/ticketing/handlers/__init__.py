from ticketing.handlers.views import (
    BookingCancelView,
    BookingDetailView,
    BookingListView,
    EventBookingsView,
    EventDetailView,
    EventListView,
    EventSeatsView,
    PaymentCallbackView,
    RevenueView,
)

__all__ = [
    "BookingCancelView",
    "BookingDetailView",
    "BookingListView",
    "EventBookingsView",
    "EventDetailView",
    "EventListView",
    "EventSeatsView",
    "PaymentCallbackView",
    "RevenueView",
]
