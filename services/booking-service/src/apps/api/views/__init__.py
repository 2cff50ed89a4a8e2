# services/booking-service/src/apps/api/views/__init__.py
"""
Booking API Views
"""

from .booking_views import BookingViewSet
from .provider_views import ProviderBookingViewSet
from .service_views import ServiceViewSet


__all__ = [
    'BookingViewSet',
    'ProviderBookingViewSet',
    'ServiceViewSet',
]
