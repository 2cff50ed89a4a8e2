# services/booking-service/src/apps/core/services/catalog_service.py
"""
Timeslot Catalog

Per-service set of bookable slot labels.
"""

import uuid
import logging
from typing import Dict, Iterable, List, Optional

from apps.core.models import Timeslot

logger = logging.getLogger(__name__)


def normalize_slots(slots: Iterable[str]) -> List[str]:
    """Strip labels, drop blanks and duplicates, keep first-seen order."""
    seen = []
    for slot in slots or []:
        label = (slot or '').strip()
        if label and label not in seen:
            seen.append(label)
    return seen


class TimeslotCatalog:
    """
    Reads and replaces the slot set of a service.

    Does not check bookings; callers run the conflict detector before
    removing anything.
    """

    def list_slots(self, service_id: uuid.UUID) -> List[str]:
        return list(
            Timeslot.objects.for_service(service_id)
            .active()
            .order_by('slot')
            .values_list('slot', flat=True)
        )

    def slot_exists(self, service_id: uuid.UUID, slot: str) -> bool:
        return Timeslot.objects.for_service(service_id).active().filter(
            slot=slot
        ).exists()

    def get_timeslot(self, service_id: uuid.UUID, slot: str) -> Optional[Timeslot]:
        return Timeslot.objects.for_service(service_id).active().filter(
            slot=slot
        ).first()

    def replace_slots(self, service_id: uuid.UUID, desired: Iterable[str]) -> Dict:
        """
        Make the active slot set equal to ``desired``.

        Removed labels are retired; added labels reuse a retired row when one
        exists for the same label.
        """
        desired = normalize_slots(desired)
        current = set(self.list_slots(service_id))

        to_remove = sorted(current - set(desired))
        to_add = [slot for slot in desired if slot not in current]

        for timeslot in Timeslot.objects.for_service(service_id).filter(
            slot__in=to_remove, is_active=True
        ):
            timeslot.retire()

        for slot in to_add:
            timeslot = Timeslot.objects.for_service(service_id).filter(
                slot=slot
            ).first()
            if timeslot is None:
                Timeslot.objects.create(service_id=service_id, slot=slot)
            else:
                timeslot.reactivate()

        if to_add or to_remove:
            logger.info(
                f"Replaced timeslots of service {service_id}: "
                f"added={to_add} removed={to_remove}"
            )

        return {
            'slots': self.list_slots(service_id),
            'added': to_add,
            'removed': to_remove,
        }
