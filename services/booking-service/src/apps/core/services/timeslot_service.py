# services/booking-service/src/apps/core/services/timeslot_service.py
"""
Timeslot Service

Provider-driven changes to a service's slot set, guarded by the conflict
detector.
"""

import uuid
import logging
from typing import Dict, Iterable, List

from django.db import transaction

from apps.core.models import Service

from .catalog_service import TimeslotCatalog, normalize_slots
from .conflict_service import ConflictDetector

logger = logging.getLogger(__name__)


class TimeslotService:
    """Replace or dry-run a slot set change for one service."""

    def __init__(
        self,
        catalog: TimeslotCatalog = None,
        detector: ConflictDetector = None
    ):
        self.catalog = catalog or TimeslotCatalog()
        self.detector = detector or ConflictDetector()

    @transaction.atomic
    def update_timeslots(
        self,
        service_id: uuid.UUID,
        desired_slots: Iterable[str],
        provider_id: uuid.UUID
    ) -> List[str]:
        """
        Replace the slot set of a provider's service.

        Raises TimeslotConflictError, leaving the catalog untouched, when any
        slot being removed still has active bookings today or later.
        """
        from . import TimeslotConflictError

        service = self._lock_service(service_id)
        self.check_owner(service, provider_id)

        desired = normalize_slots(desired_slots)
        current = self.catalog.list_slots(service.id)
        to_remove = [slot for slot in current if slot not in desired]

        if to_remove:
            conflicts = self.detector.detect_conflicts(service.id, to_remove)
            if conflicts:
                logger.warning(
                    f"Blocked timeslot update of service {service_id}: "
                    f"{[c['slot'] for c in conflicts]} have active bookings"
                )
                raise TimeslotConflictError(conflicts)

        result = self.catalog.replace_slots(service.id, desired)
        return result['slots']

    def check_removal(
        self,
        service_id: uuid.UUID,
        desired_slots: Iterable[str],
        provider_id: uuid.UUID = None
    ) -> Dict:
        """
        Dry run of ``update_timeslots``.

        ``provider_id`` of None skips the ownership check (manager access).
        """
        from . import ServiceNotFoundError

        service = Service.objects.filter(id=service_id).first()
        if service is None:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        if provider_id is not None:
            self.check_owner(service, provider_id)

        desired = normalize_slots(desired_slots)
        current = self.catalog.list_slots(service.id)
        to_remove = [slot for slot in current if slot not in desired]
        to_add = [slot for slot in desired if slot not in current]
        conflicts = (
            self.detector.detect_conflicts(service.id, to_remove)
            if to_remove else []
        )

        return {
            'current': current,
            'desired': desired,
            'to_add': to_add,
            'to_remove': to_remove,
            'conflicts': conflicts,
            'safe': not conflicts,
        }

    def _lock_service(self, service_id: uuid.UUID) -> Service:
        from . import ServiceNotFoundError

        service = Service.objects.select_for_update().filter(id=service_id).first()
        if service is None:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        return service

    def check_owner(self, service: Service, provider_id: uuid.UUID):
        from . import NotOwnerError

        if not service.is_owned_by(provider_id):
            raise NotOwnerError("You can only update your own services")
