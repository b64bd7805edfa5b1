from django.urls import path

from ticketing.handlers import (
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

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/seats", EventSeatsView.as_view(), name="event-seats"),
    path(
        "events/<str:event_id>/bookings",
        EventBookingsView.as_view(),
        name="event-bookings",
    ),
    path("revenue", RevenueView.as_view(), name="revenue"),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
    path(
        "bookings/<str:booking_id>/cancel",
        BookingCancelView.as_view(),
        name="booking-cancel",
    ),
    path(
        "bookings/<str:booking_id>/payment",
        PaymentCallbackView.as_view(),
        name="booking-payment",
    ),
]
