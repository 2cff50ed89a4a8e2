# services/booking-service/src/apps/api/views/service_views.py
"""
Service API Views

Listings, provider updates (including timeslot changes) and manager
moderation.
"""

import logging

from django.db.models import Q
from rest_framework import viewsets, mixins, status, filters
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import Service
from apps.core.services import (
    ListingService,
    TimeslotService,
    BookingServiceError,
    ServiceNotFoundError,
)
from apps.api.serializers import (
    ServiceSerializer,
    ServiceDetailSerializer,
    ServiceCreateSerializer,
    ServiceUpdateSerializer,
    TimeslotCheckSerializer,
    ServiceRejectSerializer,
)
from shared.common.constants import UserRole
from shared.common.permissions import (
    IsServiceProvider,
    IsManager,
    IsProviderOrManager,
)
from .errors import domain_error_response
from .filters import ServiceFilter

logger = logging.getLogger(__name__)


class ServiceViewSet(
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for service listings.

    Visibility:
    - Managers see every listing and filter by ``status``.
    - Providers see approved listings plus their own (``?mine=true`` for
      only their own).
    - Everyone else sees approved listings only.
    """

    serializer_class = ServiceSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-f-]{36}'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = ServiceFilter
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'price', 'created_at']
    ordering = ['name']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.listing_service = ListingService()
        self.timeslot_service = TimeslotService()

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update']:
            return [IsServiceProvider()]
        if self.action in ['approve', 'reject']:
            return [IsManager()]
        if self.action == 'check_timeslots':
            return [IsProviderOrManager()]
        return super().get_permissions()

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Service.objects.none()

        user = self.request.user
        queryset = self.listing_service.list_services(status=None)

        if user.has_role(UserRole.MANAGER):
            return queryset

        if user.has_role(UserRole.SERVICE_PROVIDER):
            if self.request.query_params.get('mine') in ('true', '1'):
                return queryset.for_provider(user.id)
            return queryset.filter(
                Q(status=Service.Status.APPROVED) | Q(provider_id=user.id)
            )

        return queryset.approved()

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ServiceDetailSerializer
        return ServiceSerializer

    def retrieve(self, request, pk=None):
        service = self.get_queryset().filter(id=pk).first()
        if service is None:
            return domain_error_response(
                ServiceNotFoundError(f"Service {pk} not found"), request
            )
        return Response(ServiceDetailSerializer(service).data)

    def create(self, request):
        """Create a listing; it stays pending until a manager approves it."""
        serializer = ServiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = self.listing_service.create_service(
            provider_id=request.user.id,
            **serializer.validated_data
        )
        return Response(
            ServiceDetailSerializer(service).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, pk=None, partial=False):
        """
        Update descriptive fields and/or replace the timeslot set.

        A timeslot removal that hits active bookings answers 409 with the
        conflicting bookings, and nothing is changed.
        """
        serializer = ServiceUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        fields = dict(serializer.validated_data)
        timeslots = fields.pop('timeslots', None)

        try:
            service = self.listing_service.update_service(
                pk, request.user.id, fields, timeslots=timeslots
            )
        except BookingServiceError as e:
            return domain_error_response(e, request)

        return Response(ServiceDetailSerializer(service).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @action(detail=True, methods=['post'], url_path='check-timeslots')
    def check_timeslots(self, request, pk=None):
        """Dry run of a timeslot change; nothing is modified."""
        serializer = TimeslotCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        provider_id = None if request.user.has_role(UserRole.MANAGER) else request.user.id
        try:
            result = self.timeslot_service.check_removal(
                pk, serializer.validated_data['timeslots'], provider_id=provider_id
            )
        except BookingServiceError as e:
            return domain_error_response(e, request)

        return Response(result)

    # ==========================================================================
    # Moderation
    # ==========================================================================

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        try:
            service = self.listing_service.approve_service(pk, request.user.id)
        except BookingServiceError as e:
            return domain_error_response(e, request)
        return Response(ServiceDetailSerializer(service).data)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = ServiceRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            service = self.listing_service.reject_service(
                pk, request.user.id, serializer.validated_data['reason']
            )
        except BookingServiceError as e:
            return domain_error_response(e, request)
        return Response(ServiceDetailSerializer(service).data)
