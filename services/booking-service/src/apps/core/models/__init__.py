# services/booking-service/src/apps/core/models/__init__.py
"""
Booking Service Models
"""

from .service import Service
from .timeslot import Timeslot
from .owner import PetOwner, Pet
from .booking import Booking, BookingPet

__all__ = [
    'Service',
    'Timeslot',
    'PetOwner',
    'Pet',
    'Booking',
    'BookingPet',
]
