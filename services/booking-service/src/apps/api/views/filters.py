# services/booking-service/src/apps/api/views/filters.py
"""
API Filters

Django Filter classes for booking API.
"""

import django_filters

from apps.core.models import Booking, Service


class BookingFilter(django_filters.FilterSet):
    """Filter for booking queries."""

    # Date filters
    servedate = django_filters.DateFilter()
    servedate_from = django_filters.DateFilter(
        field_name='servedate',
        lookup_expr='gte'
    )
    servedate_to = django_filters.DateFilter(
        field_name='servedate',
        lookup_expr='lte'
    )

    # Status filters
    status = django_filters.ChoiceFilter(
        choices=Booking.Status.choices
    )
    status_in = django_filters.BaseInFilter(
        field_name='status'
    )
    active = django_filters.BooleanFilter(
        method='filter_active'
    )

    # Service filters
    service_id = django_filters.UUIDFilter()
    slot = django_filters.CharFilter(field_name='timeslot__slot')

    class Meta:
        model = Booking
        fields = ['status', 'servedate', 'service_id']

    def filter_active(self, queryset, name, value):
        """Filter for active (non-cancelled, non-completed) bookings."""
        if value:
            return queryset.active()
        return queryset.filter(status__in=Booking.TERMINAL_STATUSES)


class NumberInFilter(django_filters.BaseInFilter, django_filters.NumberFilter):
    """Comma separated numbers, e.g. ``?type_ids=1,3``."""


class ServiceFilter(django_filters.FilterSet):

    status = django_filters.ChoiceFilter(
        choices=Service.Status.choices
    )
    type_id = django_filters.NumberFilter()
    type_ids = NumberInFilter(
        field_name='type_id',
        lookup_expr='in'
    )
    provider_id = django_filters.UUIDFilter()
    name = django_filters.CharFilter(lookup_expr='icontains')
    min_price = django_filters.NumberFilter(
        field_name='price',
        lookup_expr='gte'
    )
    max_price = django_filters.NumberFilter(
        field_name='price',
        lookup_expr='lte'
    )

    class Meta:
        model = Service
        fields = ['status', 'type_id', 'provider_id']
