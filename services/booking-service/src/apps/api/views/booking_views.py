# services/booking-service/src/apps/api/views/booking_views.py
"""
Booking API Views

Pet owner booking endpoints.
"""

import logging

from rest_framework import viewsets, mixins, status, filters
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import Booking
from apps.core.services import BookingService, BookingServiceError
from apps.api.serializers import (
    BookingListSerializer,
    BookingDetailSerializer,
    BookingCreateSerializer,
    BookingUpdateSerializer,
)
from shared.common.permissions import IsPetOwner
from .errors import domain_error_response
from .filters import BookingFilter

logger = logging.getLogger(__name__)


class BookingViewSet(
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for a pet owner's bookings.

    Every query is scoped to the requesting owner; bookings of other owners
    answer 404. DELETE cancels instead of deleting.
    """

    serializer_class = BookingDetailSerializer
    permission_classes = [IsPetOwner]
    lookup_value_regex = '[0-9a-f-]{36}'
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = BookingFilter
    ordering_fields = ['servedate', 'booked_at', 'status']
    ordering = ['-servedate']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.booking_service = BookingService()

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()
        return self.booking_service.list_bookings(self.request.user.id)

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == 'list':
            return BookingListSerializer
        elif self.action == 'create':
            return BookingCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return BookingUpdateSerializer
        return BookingDetailSerializer

    def create(self, request, *args, **kwargs):
        """Book a service slot on a date."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = self.booking_service.create_booking(
                owner_id=request.user.id,
                service_id=data['serviceid'],
                slot=data['slot'],
                servedate=data['servedate'],
                payment_method=data['payment_method'],
                pet_ids=data['petIds'],
            )
        except BookingServiceError as e:
            return domain_error_response(e, request)

        booking = self.get_queryset().get(id=booking.id)
        return Response(
            BookingDetailSerializer(booking).data,
            status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        try:
            booking = self.booking_service.get_booking(pk, request.user.id)
        except BookingServiceError as e:
            return domain_error_response(e, request)
        return Response(BookingDetailSerializer(booking).data)

    def update(self, request, pk=None, partial=False):
        """Change servedate or payment method, or cancel."""
        serializer = BookingUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            booking = self.booking_service.update_booking(
                pk, request.user.id, **serializer.validated_data
            )
        except BookingServiceError as e:
            return domain_error_response(e, request)

        return Response(BookingDetailSerializer(booking).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        """Cancel the booking; it is kept for history."""
        try:
            booking = self.booking_service.cancel_booking(pk, request.user.id)
        except BookingServiceError as e:
            return domain_error_response(e, request)

        return Response(BookingDetailSerializer(booking).data)
