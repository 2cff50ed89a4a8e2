# services/booking-service/src/apps/core/services/booking_service.py
"""
Booking Service

Admission of new bookings and the owner/provider status operations.
"""

import uuid
import logging
from datetime import date
from typing import List

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.models import Booking, Pet, PetOwner, Service

from .catalog_service import TimeslotCatalog
from .ledger_service import BookingLedger

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service for managing bookings.

    Handles:
    - Admission (no double booking of a slot on a date)
    - Owner updates and cancellation
    - Provider confirmation and completion
    """

    def __init__(self, catalog: TimeslotCatalog = None, ledger: BookingLedger = None):
        self.catalog = catalog or TimeslotCatalog()
        self.ledger = ledger or BookingLedger()

    # ==========================================================================
    # Admission
    # ==========================================================================

    @transaction.atomic
    def create_booking(
        self,
        owner_id: uuid.UUID,
        service_id: uuid.UUID,
        slot: str,
        servedate: date,
        payment_method: str,
        pet_ids: List[uuid.UUID]
    ) -> Booking:
        """
        Book ``slot`` of a service on ``servedate``.

        The service row stays locked until commit, so admissions and slot
        updates of the same service run one at a time. The partial unique
        constraint on active (timeslot, servedate) catches any insert that
        still races past the check.
        """
        from . import (
            ServiceNotBookableError,
            UnknownTimeslotError,
            SlotAlreadyBookedError,
            BookingValidationError,
        )

        # 1. Service must exist and be approved
        service = Service.objects.select_for_update().filter(id=service_id).first()
        if service is None or not service.is_bookable:
            logger.info(f"Rejected booking: service {service_id} not bookable")
            raise ServiceNotBookableError("Service not found or not available")

        # 2. Slot must be in the catalog
        timeslot = self.catalog.get_timeslot(service.id, slot)
        if timeslot is None:
            logger.info(f"Rejected booking: slot {slot!r} not offered by {service_id}")
            raise UnknownTimeslotError("Invalid timeslot for this service")

        # 3. Pets must belong to the owner
        if not PetOwner.objects.filter(id=owner_id).exists():
            raise BookingValidationError("Pet owner profile not found")
        self._validate_pet_ownership(owner_id, pet_ids)

        # 4. Slot must be free on that date
        if self.ledger.find_active_booking(service.id, slot, servedate):
            logger.info(f"Rejected booking: {slot} on {servedate} already booked")
            raise SlotAlreadyBookedError(
                "This timeslot is already booked for the selected date"
            )

        # 5. Insert booking and pet links
        try:
            with transaction.atomic():
                booking = self.ledger.insert(
                    owner_id, timeslot, servedate, payment_method
                )
        except IntegrityError:
            logger.warning(
                f"Concurrent booking lost for {slot} on {servedate} "
                f"(service {service_id})"
            )
            raise SlotAlreadyBookedError(
                "This timeslot is already booked for the selected date"
            )

        self.ledger.link_pets(booking, pet_ids)

        logger.info(
            f"Created booking {booking.id} for service {service_id} "
            f"slot {slot} on {servedate}"
        )
        return booking

    def _validate_pet_ownership(self, owner_id: uuid.UUID, pet_ids: List[uuid.UUID]):
        from . import PetNotOwnedError

        owned = {
            str(pet_id) for pet_id in
            Pet.objects.filter(id__in=pet_ids, owner_id=owner_id)
            .values_list('id', flat=True)
        }
        for pet_id in pet_ids:
            if str(pet_id) not in owned:
                raise PetNotOwnedError(pet_id)

    # ==========================================================================
    # Owner operations
    # ==========================================================================

    def get_booking(self, booking_id: uuid.UUID, owner_id: uuid.UUID) -> Booking:
        """Get a booking of the owner."""
        return self.ledger.get_for_owner(booking_id, owner_id)

    def list_bookings(self, owner_id: uuid.UUID):
        return self.ledger.list_for_owner(owner_id)

    @transaction.atomic
    def update_booking(
        self,
        booking_id: uuid.UUID,
        owner_id: uuid.UUID,
        **kwargs
    ) -> Booking:
        """
        Owner update of servedate, payment method or status.

        The only status an owner may set is ``cancelled``. A new servedate goes
        through admission again under the service lock: the service must still
        be bookable and offer the slot, and the slot must be free on that date.
        """
        from . import (
            BookingValidationError,
            InvalidBookingStateError,
            ServiceNotBookableError,
            SlotAlreadyBookedError,
            UnknownTimeslotError,
        )

        booking = self.get_booking(booking_id, owner_id)

        if booking.is_terminal:
            raise InvalidBookingStateError(
                f"Cannot update booking in {booking.status} status"
            )

        servedate = kwargs.get('servedate')
        payment_method = kwargs.get('payment_method')
        status = kwargs.get('status')

        if servedate is None and payment_method is None and status is None:
            raise BookingValidationError("No fields to update")

        if status is not None and status != Booking.Status.CANCELLED:
            raise BookingValidationError("Pet owners can only cancel bookings")

        update_fields = []

        if servedate is not None and servedate != booking.servedate:
            if servedate < timezone.localdate():
                raise BookingValidationError("Service date cannot be in the past")

            service = Service.objects.select_for_update().filter(id=booking.service_id).first()
            if service is None or not service.is_bookable:
                raise ServiceNotBookableError("Service not found or not available")
            if self.catalog.get_timeslot(service.id, booking.slot) is None:
                raise UnknownTimeslotError("Invalid timeslot for this service")

            if self.ledger.find_active_booking(
                booking.service_id, booking.slot, servedate,
                exclude_booking_id=booking.id
            ):
                raise SlotAlreadyBookedError(
                    "This timeslot is already booked for the selected date"
                )

            booking.servedate = servedate
            update_fields.append('servedate')

        if payment_method is not None:
            booking.payment_method = payment_method
            update_fields.append('payment_method')

        if update_fields:
            try:
                with transaction.atomic():
                    booking.save(update_fields=update_fields + ['updated_at'])
            except IntegrityError:
                raise SlotAlreadyBookedError(
                    "This timeslot is already booked for the selected date"
                )

        if status is not None:
            self.ledger.set_status(booking, status)

        logger.info(f"Updated booking {booking.id}")
        return booking

    @transaction.atomic
    def cancel_booking(self, booking_id: uuid.UUID, owner_id: uuid.UUID) -> Booking:
        """Cancel a booking of the owner; the slot is free again."""
        from . import InvalidBookingStateError

        booking = self.get_booking(booking_id, owner_id)

        if booking.status == Booking.Status.CANCELLED:
            raise InvalidBookingStateError("Booking is already cancelled")
        if booking.status == Booking.Status.COMPLETED:
            raise InvalidBookingStateError("Cannot cancel completed booking")

        self.ledger.set_status(booking, Booking.Status.CANCELLED)

        logger.info(f"Cancelled booking {booking.id}")
        return booking

    # ==========================================================================
    # Provider operations
    # ==========================================================================

    def get_provider_booking(
        self,
        booking_id: uuid.UUID,
        provider_id: uuid.UUID
    ) -> Booking:
        return self.ledger.get_for_provider(booking_id, provider_id)

    def list_provider_bookings(self, provider_id: uuid.UUID):
        return self.ledger.list_for_provider(provider_id)

    @transaction.atomic
    def confirm_booking(self, booking_id: uuid.UUID, provider_id: uuid.UUID) -> Booking:
        """Confirm a pending booking of one of the provider's services."""
        booking = self._transition_for_provider(
            booking_id, provider_id, Booking.Status.CONFIRMED
        )
        logger.info(f"Confirmed booking {booking.id}")
        return booking

    @transaction.atomic
    def complete_booking(self, booking_id: uuid.UUID, provider_id: uuid.UUID) -> Booking:
        """Mark an active booking completed; the slot is free again."""
        booking = self._transition_for_provider(
            booking_id, provider_id, Booking.Status.COMPLETED
        )
        logger.info(f"Completed booking {booking.id}")
        return booking

    def _transition_for_provider(
        self,
        booking_id: uuid.UUID,
        provider_id: uuid.UUID,
        new_status: str
    ) -> Booking:
        from . import BookingNotFoundError, NotOwnerError, InvalidBookingStateError

        booking = (
            Booking.objects.select_related('service', 'timeslot')
            .filter(id=booking_id)
            .first()
        )
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        if not booking.service.is_owned_by(provider_id):
            raise NotOwnerError("You can only manage bookings of your own services")

        if not booking.can_transition_to(new_status):
            raise InvalidBookingStateError(
                f"Cannot change booking from {booking.status} to {new_status}"
            )

        return self.ledger.set_status(booking, new_status)
