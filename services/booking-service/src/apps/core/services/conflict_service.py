# services/booking-service/src/apps/core/services/conflict_service.py
"""
Conflict Detector

Finds slots that cannot be removed because they still carry active bookings
on or after a reference date.
"""

import uuid
from datetime import date
from typing import Dict, Iterable, List

from django.utils import timezone

from apps.core.models import Booking

from .ledger_service import BookingLedger


class ConflictDetector:
    """Used both by the dry-run endpoint and by committed slot updates."""

    def __init__(self, ledger: BookingLedger = None):
        self.ledger = ledger or BookingLedger()

    def detect_conflicts(
        self,
        service_id: uuid.UUID,
        candidate_slots: Iterable[str],
        from_date: date = None
    ) -> List[Dict]:
        """
        Return one entry per candidate slot with active bookings.

        Candidates keep their input order; duplicates are checked once. An
        empty list means every candidate can be removed.
        """
        from_date = from_date or timezone.localdate()

        conflicts = []
        checked = set()
        for slot in candidate_slots:
            if slot in checked:
                continue
            checked.add(slot)

            bookings = self.ledger.find_active_bookings_for_slot(
                service_id, slot, from_date
            )
            if bookings:
                conflicts.append({
                    'slot': slot,
                    'active_bookings': [
                        self._describe(booking) for booking in bookings
                    ],
                })

        return conflicts

    def _describe(self, booking: Booking) -> Dict:
        return {
            'booking_id': str(booking.id),
            'servedate': booking.servedate.isoformat(),
            'status': booking.status,
            'owner_id': str(booking.owner_id),
            'owner_name': booking.owner.name,
            'owner_email': booking.owner.email,
            'pet_names': [pet.name for pet in booking.pets.all()],
        }
