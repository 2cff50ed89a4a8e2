# services/booking-service/src/apps/core/services/__init__.py
"""
Booking Service Business Logic
"""

from .catalog_service import TimeslotCatalog
from .ledger_service import BookingLedger
from .conflict_service import ConflictDetector
from .booking_service import BookingService
from .timeslot_service import TimeslotService
from .listing_service import ListingService


# Custom Exceptions
class BookingServiceError(Exception):
    """Base exception for booking service errors."""
    error_code = 'BOOKING_SERVICE_ERROR'


class ServiceNotFoundError(BookingServiceError):
    """Service does not exist."""
    error_code = 'SERVICE_NOT_FOUND'


class ServiceNotBookableError(BookingServiceError):
    """Service does not exist or is not approved."""
    error_code = 'SERVICE_NOT_BOOKABLE'


class UnknownTimeslotError(BookingServiceError):
    """Requested slot is not in the service's catalog."""
    error_code = 'UNKNOWN_TIMESLOT'


class PetNotOwnedError(BookingServiceError):
    """A pet does not belong to the booking owner."""
    error_code = 'PET_NOT_OWNED'

    def __init__(self, pet_id, message: str = None):
        self.pet_id = pet_id
        super().__init__(message or f"Pet {pet_id} does not belong to you")


class SlotAlreadyBookedError(BookingServiceError):
    """An active booking already holds the slot on that date."""
    error_code = 'SLOT_ALREADY_BOOKED'


class NotOwnerError(BookingServiceError):
    """Caller does not own the service."""
    error_code = 'NOT_OWNER'


class TimeslotConflictError(BookingServiceError):
    """Slots proposed for removal still carry active bookings."""
    error_code = 'TIMESLOT_CONFLICT'

    SUGGESTIONS = [
        'Keep existing timeslots that have bookings',
        'Contact customers to reschedule their bookings',
        'Wait until bookings are completed or cancelled',
        'Add new timeslots without removing existing ones',
    ]

    def __init__(self, conflicts: list, message: str = None):
        self.conflicts = conflicts
        self.suggestions = list(self.SUGGESTIONS)
        slots = ', '.join(c['slot'] for c in conflicts)
        super().__init__(
            message or f"Cannot remove timeslots with active bookings: {slots}"
        )


class InvalidBookingStateError(BookingServiceError):
    """Booking status does not allow the requested change."""
    error_code = 'INVALID_BOOKING_STATE'


class BookingNotFoundError(BookingServiceError):
    """Booking not found."""
    error_code = 'BOOKING_NOT_FOUND'


class BookingValidationError(BookingServiceError):
    """Booking validation failed."""
    error_code = 'VALIDATION_ERROR'


__all__ = [
    # Services
    'TimeslotCatalog',
    'BookingLedger',
    'ConflictDetector',
    'BookingService',
    'TimeslotService',
    'ListingService',

    # Exceptions
    'BookingServiceError',
    'ServiceNotFoundError',
    'ServiceNotBookableError',
    'UnknownTimeslotError',
    'PetNotOwnedError',
    'SlotAlreadyBookedError',
    'NotOwnerError',
    'TimeslotConflictError',
    'InvalidBookingStateError',
    'BookingNotFoundError',
    'BookingValidationError',
]
