# services/booking-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for booking service tests.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from shared.common.authentication import TokenUser
from shared.common.constants import UserRole


@pytest.fixture
def api_client():
    """Provide API client for testing."""
    return APIClient()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def tomorrow(today):
    return today + timedelta(days=1)


@pytest.fixture
def provider_id():
    """Provide a test service provider ID."""
    return uuid.uuid4()


@pytest.fixture
def manager_id():
    """Provide a test manager ID."""
    return uuid.uuid4()


# ==========================================================================
# Owners and pets
# ==========================================================================

@pytest.fixture
def owner():
    from apps.core.models import PetOwner

    return PetOwner.objects.create(
        id=uuid.uuid4(),
        name='Alice Owner',
        email='alice@example.com',
        phone='555-0100',
    )


@pytest.fixture
def other_owner():
    from apps.core.models import PetOwner

    return PetOwner.objects.create(
        id=uuid.uuid4(),
        name='Bob Owner',
        email='bob@example.com',
    )


@pytest.fixture
def pet(owner):
    from apps.core.models import Pet

    return Pet.objects.create(owner=owner, name='Rex', breed='Beagle')


@pytest.fixture
def other_pet(other_owner):
    from apps.core.models import Pet

    return Pet.objects.create(owner=other_owner, name='Milo', breed='Tabby')


# ==========================================================================
# Services
# ==========================================================================

@pytest.fixture
def create_service(provider_id):
    """Factory fixture for creating services with a slot catalog."""
    from apps.core.models import Service, Timeslot

    def _create_service(slots=('09:00', '10:00', '11:00'), **kwargs):
        defaults = {
            'provider_id': provider_id,
            'name': 'Dog Walking',
            'price': Decimal('25.00'),
            'duration': '1 hour',
            'status': Service.Status.APPROVED,
        }
        defaults.update(kwargs)

        service = Service.objects.create(**defaults)
        for slot in slots:
            Timeslot.objects.create(service=service, slot=slot)
        return service

    return _create_service


@pytest.fixture
def service(create_service):
    """Approved service offering 09:00, 10:00 and 11:00."""
    return create_service()


@pytest.fixture
def create_booking(owner, pet):
    """Factory fixture for writing bookings straight to the ledger."""
    from apps.core.models import Booking, BookingPet, Timeslot

    def _create_booking(service, slot, servedate, status=Booking.Status.PENDING, **kwargs):
        booking_owner = kwargs.pop('owner', owner)
        pets = kwargs.pop('pets', [pet] if booking_owner == owner else [])

        booking = Booking.objects.create(
            owner=booking_owner,
            service=service,
            timeslot=Timeslot.objects.get(service=service, slot=slot),
            servedate=servedate,
            payment_method=kwargs.pop('payment_method', 'card'),
            status=status,
            **kwargs
        )
        for booked_pet in pets:
            BookingPet.objects.create(booking=booking, pet=booked_pet)
        return booking

    return _create_booking


# ==========================================================================
# Authenticated clients
# ==========================================================================

def _client_for(user_id, role, email=None):
    client = APIClient()
    client.force_authenticate(user=TokenUser({
        'sub': str(user_id),
        'email': email,
        'role': role,
    }))
    return client


@pytest.fixture
def owner_client(owner):
    return _client_for(owner.id, UserRole.PET_OWNER, owner.email)


@pytest.fixture
def other_owner_client(other_owner):
    return _client_for(other_owner.id, UserRole.PET_OWNER, other_owner.email)


@pytest.fixture
def provider_client(provider_id):
    return _client_for(provider_id, UserRole.SERVICE_PROVIDER)


@pytest.fixture
def other_provider_client():
    return _client_for(uuid.uuid4(), UserRole.SERVICE_PROVIDER)


@pytest.fixture
def manager_client(manager_id):
    return _client_for(manager_id, UserRole.MANAGER)
