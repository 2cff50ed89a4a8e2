# services/booking-service/src/apps/api/views/errors.py
"""
Domain error responses

Maps booking service exceptions to HTTP status codes in the shared error
envelope.
"""

import logging

from rest_framework import status

from apps.core.services import (
    BookingServiceError,
    ServiceNotFoundError,
    ServiceNotBookableError,
    UnknownTimeslotError,
    PetNotOwnedError,
    SlotAlreadyBookedError,
    NotOwnerError,
    TimeslotConflictError,
    InvalidBookingStateError,
    BookingNotFoundError,
    BookingValidationError,
)
from shared.common.exceptions import error_response

logger = logging.getLogger(__name__)


STATUS_CODES = {
    ServiceNotFoundError: status.HTTP_404_NOT_FOUND,
    ServiceNotBookableError: status.HTTP_404_NOT_FOUND,
    UnknownTimeslotError: status.HTTP_400_BAD_REQUEST,
    PetNotOwnedError: status.HTTP_400_BAD_REQUEST,
    SlotAlreadyBookedError: status.HTTP_409_CONFLICT,
    NotOwnerError: status.HTTP_403_FORBIDDEN,
    TimeslotConflictError: status.HTTP_409_CONFLICT,
    InvalidBookingStateError: status.HTTP_400_BAD_REQUEST,
    BookingNotFoundError: status.HTTP_404_NOT_FOUND,
    BookingValidationError: status.HTTP_400_BAD_REQUEST,
}


def domain_error_response(exc: BookingServiceError, request=None):
    """Build the error response for a booking service exception."""
    status_code = STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)

    extra = {}
    if isinstance(exc, TimeslotConflictError):
        extra = {'conflicts': exc.conflicts, 'suggestions': exc.suggestions}
    elif isinstance(exc, PetNotOwnedError):
        extra = {'pet_id': str(exc.pet_id)}

    if status_code >= 409:
        logger.warning(f"{exc.error_code}: {exc}")

    return error_response(status_code, exc.error_code, str(exc), request=request, **extra)
