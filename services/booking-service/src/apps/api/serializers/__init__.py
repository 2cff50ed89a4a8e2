# services/booking-service/src/apps/api/serializers/__init__.py
"""
Booking API Serializers
"""

from .booking_serializers import (
    BookingSerializer,
    BookingListSerializer,
    BookingDetailSerializer,
    ProviderBookingSerializer,
    BookingCreateSerializer,
    BookingUpdateSerializer,
)

from .service_serializers import (
    ServiceSerializer,
    ServiceDetailSerializer,
    ServiceCreateSerializer,
    ServiceUpdateSerializer,
    TimeslotCheckSerializer,
    ServiceRejectSerializer,
)


__all__ = [
    # Booking
    'BookingSerializer',
    'BookingListSerializer',
    'BookingDetailSerializer',
    'ProviderBookingSerializer',
    'BookingCreateSerializer',
    'BookingUpdateSerializer',

    # Service
    'ServiceSerializer',
    'ServiceDetailSerializer',
    'ServiceCreateSerializer',
    'ServiceUpdateSerializer',
    'TimeslotCheckSerializer',
    'ServiceRejectSerializer',
]
