# services/booking-service/src/apps/core/services/listing_service.py
"""
Listing Service

Service listings: provider creation and updates, manager moderation.
"""

import uuid
import logging
from typing import Any, Dict, Iterable, Optional

from django.db import transaction

from apps.core.models import Service

from .catalog_service import TimeslotCatalog
from .timeslot_service import TimeslotService

logger = logging.getLogger(__name__)


class ListingService:

    UPDATABLE_FIELDS = ['name', 'description', 'price', 'duration', 'type_id']

    def __init__(
        self,
        catalog: TimeslotCatalog = None,
        timeslots: TimeslotService = None
    ):
        self.catalog = catalog or TimeslotCatalog()
        self.timeslots = timeslots or TimeslotService(catalog=self.catalog)

    @transaction.atomic
    def create_service(
        self,
        provider_id: uuid.UUID,
        name: str,
        price,
        duration: str = '',
        type_id: int = None,
        description: str = '',
        timeslots: Iterable[str] = None
    ) -> Service:
        """Create a listing awaiting moderation, with its initial slots."""
        service = Service.objects.create(
            provider_id=provider_id,
            name=name,
            price=price,
            duration=duration or '',
            type_id=type_id,
            description=description or '',
        )
        if timeslots:
            self.catalog.replace_slots(service.id, timeslots)

        logger.info(f"Created service {service.id} for provider {provider_id}")
        return service

    def get_service(self, service_id: uuid.UUID) -> Service:
        from . import ServiceNotFoundError

        service = Service.objects.filter(id=service_id).first()
        if service is None:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        return service

    def list_services(
        self,
        status: Optional[str] = Service.Status.APPROVED,
        provider_id: uuid.UUID = None
    ):
        queryset = Service.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        if provider_id:
            queryset = queryset.for_provider(provider_id)
        return queryset.prefetch_related('timeslots')

    @transaction.atomic
    def update_service(
        self,
        service_id: uuid.UUID,
        provider_id: uuid.UUID,
        fields: Dict[str, Any],
        timeslots: Iterable[str] = None
    ) -> Service:
        """
        Update descriptive fields and optionally the slot set.

        The slot change runs first; a timeslot conflict rolls back the whole
        update.
        """
        if timeslots is not None:
            self.timeslots.update_timeslots(service_id, timeslots, provider_id)

        service = self.get_service(service_id)
        self.timeslots.check_owner(service, provider_id)

        changed = []
        for field, value in (fields or {}).items():
            if field in self.UPDATABLE_FIELDS:
                setattr(service, field, value)
                changed.append(field)

        if changed:
            service.save(update_fields=changed + ['updated_at'])

        logger.info(f"Updated service {service_id}")
        return service

    # ==========================================================================
    # Moderation
    # ==========================================================================

    def approve_service(self, service_id: uuid.UUID, manager_id: uuid.UUID) -> Service:
        service = self.get_service(service_id)
        service.approve(manager_id)
        logger.info(f"Service {service_id} approved by {manager_id}")
        return service

    def reject_service(
        self,
        service_id: uuid.UUID,
        manager_id: uuid.UUID,
        reason: str = ''
    ) -> Service:
        service = self.get_service(service_id)
        service.reject(manager_id, reason)
        logger.info(f"Service {service_id} rejected by {manager_id}")
        return service
