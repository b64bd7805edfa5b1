"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.domain.errors import DomainError, ErrorCode
from ticketing.handlers.permissions import HasPaymentCallbackSecret, IsAdminRole
from ticketing.handlers.serializers import (
    BookingSerializer,
    EventSerializer,
    OccupancySerializer,
    PaymentCallbackSerializer,
    ReserveRequestSerializer,
    RevenueSerializer,
    SeatMapSerializer,
)
from ticketing.services.event_service import parse_event_id
from ticketing.services.wiring import get_booking_ledger, get_event_service
from ticketing.signals import EVENT_LIST_CACHE_KEY, event_cache_key

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.CONFIG_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.INVALID_SEAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SEAT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.UNKNOWN_TIER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BOOKING_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.PAYMENT_TOKEN_MISMATCH: status.HTTP_403_FORBIDDEN,
    ErrorCode.ALREADY_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.PAYMENT_ALREADY_SETTLED: status.HTTP_409_CONFLICT,
    ErrorCode.INVARIANT_VIOLATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.TRANSIENT_STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_SEAT_ERROR_CODES = {ErrorCode.INVALID_SEAT, ErrorCode.SEAT_UNAVAILABLE}


def error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    if error.code in _SEAT_ERROR_CODES and getattr(error, "seat_ids", ()):
        body["seats"] = list(error.seat_ids)
    return Response({"error": body}, status=_STATUS_BY_CODE.get(error.code, 400))


def invalid_request_response(errors) -> Response:
    return Response(
        {"error": {"code": "INVALID_REQUEST", "message": "Invalid request", "fields": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )


class DomainAPIView(APIView):
    """APIView that renders domain errors as structured error bodies."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            if exc.code is ErrorCode.INVARIANT_VIOLATION:
                logger.critical("Invariant violation while handling %s: %r", self.request.path, exc)
            return error_response(exc)
        return super().handle_exception(exc)


class EventListView(DomainAPIView):
    """Handler for GET /api/events"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cache.get(EVENT_LIST_CACHE_KEY)
        if data is None:
            events = get_event_service().list_events()
            data = EventSerializer(events, many=True).data
            cache.set(EVENT_LIST_CACHE_KEY, data, settings.EVENT_CACHE_TIMEOUT)
        return Response(data)


class EventDetailView(DomainAPIView):
    """Handler for GET /api/events/{event_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_cache_key(parse_event_id(event_id))
        data = cache.get(key)
        if data is None:
            event = get_event_service().get_event(event_id)
            data = EventSerializer(event).data
            cache.set(key, data, settings.EVENT_CACHE_TIMEOUT)
        return Response(data)


class EventSeatsView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/seats (never cached)"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        seat_map = get_booking_ledger().seat_map(event_id)
        return Response(SeatMapSerializer(seat_map).data)


class EventBookingsView(DomainAPIView):
    """Handler for GET (admin occupancy) and POST (reserve) /api/events/{event_id}/bookings"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request: Request, event_id: str) -> Response:
        ledger = get_booking_ledger()
        occupancy = {
            "bookings": ledger.list_bookings_for_event(event_id),
            "revenue": ledger.revenue(event_id),
        }
        return Response(OccupancySerializer(occupancy).data)

    def post(self, request: Request, event_id: str) -> Response:
        serializer = ReserveRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        booking = get_booking_ledger().reserve(
            event_id,
            request.user.identity.user_id,
            serializer.validated_data["tier"],
            serializer.validated_data["seats"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class RevenueView(DomainAPIView):
    """Handler for GET /api/revenue (admin dashboard total)"""

    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request: Request) -> Response:
        revenue = get_booking_ledger().revenue()
        return Response(RevenueSerializer({"revenue": revenue}).data)


class BookingListView(DomainAPIView):
    """Handler for GET /api/bookings (the caller's tickets)"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        bookings = get_booking_ledger().list_bookings_for_user(request.user.identity.user_id)
        return Response(BookingSerializer(bookings, many=True).data)


class BookingDetailView(DomainAPIView):
    """Handler for GET /api/bookings/{booking_id}"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, booking_id: str) -> Response:
        booking = get_booking_ledger().get_booking(booking_id, request.user.identity)
        return Response(BookingSerializer(booking).data)


class BookingCancelView(DomainAPIView):
    """Handler for POST /api/bookings/{booking_id}/cancel"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request, booking_id: str) -> Response:
        booking = get_booking_ledger().cancel(booking_id, request.user.identity.user_id)
        return Response(BookingSerializer(booking).data)


class PaymentCallbackView(DomainAPIView):
    """Handler for POST /api/bookings/{booking_id}/payment (payment channel)"""

    authentication_classes = []
    permission_classes = [HasPaymentCallbackSecret]

    def post(self, request: Request, booking_id: str) -> Response:
        serializer = PaymentCallbackSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer.errors)

        ledger = get_booking_ledger()
        token = serializer.validated_data["token"]
        if serializer.validated_data["outcome"] == PaymentCallbackSerializer.FAILED:
            booking = ledger.fail_payment(booking_id, token)
        else:
            booking = ledger.confirm_payment(booking_id, token)

        if booking is None:
            return Response({"status": "ignored"}, status=status.HTTP_202_ACCEPTED)
        return Response(BookingSerializer(booking).data)
