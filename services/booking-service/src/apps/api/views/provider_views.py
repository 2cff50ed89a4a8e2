# services/booking-service/src/apps/api/views/provider_views.py
"""
Provider Booking Views

Schedule of bookings against a provider's own services.
"""

import logging

from rest_framework import viewsets, mixins, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import Booking
from apps.core.services import BookingService, BookingServiceError
from apps.api.serializers import ProviderBookingSerializer
from shared.common.permissions import IsServiceProvider
from .errors import domain_error_response
from .filters import BookingFilter

logger = logging.getLogger(__name__)


class ProviderBookingViewSet(
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    serializer_class = ProviderBookingSerializer
    permission_classes = [IsServiceProvider]
    lookup_value_regex = '[0-9a-f-]{36}'
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = BookingFilter
    ordering_fields = ['servedate', 'booked_at', 'status']
    ordering = ['servedate']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.booking_service = BookingService()

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Booking.objects.none()
        return self.booking_service.list_provider_bookings(self.request.user.id)

    def retrieve(self, request, pk=None):
        try:
            booking = self.booking_service.get_provider_booking(pk, request.user.id)
        except BookingServiceError as e:
            return domain_error_response(e, request)
        return Response(ProviderBookingSerializer(booking).data)

    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        """Confirm a pending booking."""
        return self._transition(request, pk, self.booking_service.confirm_booking)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Mark a booking as completed."""
        return self._transition(request, pk, self.booking_service.complete_booking)

    def _transition(self, request, pk, operation):
        try:
            booking = operation(pk, request.user.id)
        except BookingServiceError as e:
            return domain_error_response(e, request)

        booking = self.get_queryset().get(id=booking.id)
        return Response(ProviderBookingSerializer(booking).data)
