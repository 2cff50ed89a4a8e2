# services/booking-service/src/apps/api/urls.py
"""
Booking API URL Configuration

Defines all API routes for the booking service.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    BookingViewSet,
    ProviderBookingViewSet,
    ServiceViewSet,
)

app_name = 'api'

# Create router and register viewsets
router = DefaultRouter()
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'services', ServiceViewSet, basename='service')
router.register(r'provider/bookings', ProviderBookingViewSet, basename='provider-booking')

urlpatterns = [
    path('', include(router.urls)),
]
