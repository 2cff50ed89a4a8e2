# services/booking-service/src/apps/core/services/ledger_service.py
"""
Booking Ledger

Storage of bookings and their pet links.
"""

import uuid
from datetime import date
from typing import Iterable, List, Optional

from django.db.models import QuerySet

from apps.core.models import Booking, BookingPet, Timeslot


class BookingLedger:
    """Queries and writes against the booking tables."""

    # ==========================================================================
    # Active bookings
    # ==========================================================================

    def find_active_booking(
        self,
        service_id: uuid.UUID,
        slot: str,
        servedate: date,
        exclude_booking_id: uuid.UUID = None
    ) -> Optional[Booking]:
        queryset = Booking.objects.for_slot(service_id, slot).active().filter(
            servedate=servedate
        )
        if exclude_booking_id:
            queryset = queryset.exclude(id=exclude_booking_id)
        return queryset.first()

    def find_active_bookings_for_slot(
        self,
        service_id: uuid.UUID,
        slot: str,
        from_date: date
    ) -> List[Booking]:
        return list(
            Booking.objects.for_slot(service_id, slot)
            .active()
            .upcoming(from_date)
            .select_related('owner')
            .prefetch_related('pets')
            .order_by('servedate', 'booked_at')
        )

    # ==========================================================================
    # Writes
    # ==========================================================================

    def insert(
        self,
        owner_id: uuid.UUID,
        timeslot: Timeslot,
        servedate: date,
        payment_method: str
    ) -> Booking:
        booking = Booking(
            owner_id=owner_id,
            service_id=timeslot.service_id,
            timeslot=timeslot,
            servedate=servedate,
            payment_method=payment_method,
        )
        booking.apply_status(Booking.Status.PENDING)
        booking.save()
        return booking

    def link_pets(self, booking: Booking, pet_ids: Iterable[uuid.UUID]):
        BookingPet.objects.bulk_create([
            BookingPet(booking=booking, pet_id=pet_id)
            for pet_id in pet_ids
        ])

    def set_status(self, booking: Booking, new_status: str) -> Booking:
        """Persist a status change. Legality is checked by the caller."""
        booking.apply_status(new_status)
        booking.save(update_fields=[
            'status', 'confirmed_at', 'completed_at', 'cancelled_at',
            'status_history', 'updated_at',
        ])
        return booking

    # ==========================================================================
    # Reads
    # ==========================================================================

    def list_for_owner(self, owner_id: uuid.UUID) -> QuerySet:
        return Booking.objects.for_owner(owner_id).with_details()

    def get_for_owner(self, booking_id: uuid.UUID, owner_id: uuid.UUID) -> Booking:
        from . import BookingNotFoundError

        booking = self.list_for_owner(owner_id).filter(id=booking_id).first()
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return booking

    def list_for_provider(self, provider_id: uuid.UUID) -> QuerySet:
        return Booking.objects.for_provider(provider_id).with_details()

    def get_for_provider(
        self,
        booking_id: uuid.UUID,
        provider_id: uuid.UUID
    ) -> Booking:
        from . import BookingNotFoundError

        booking = self.list_for_provider(provider_id).filter(id=booking_id).first()
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")
        return booking
