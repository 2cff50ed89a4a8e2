# services/booking-service/src/tests/unit/test_services.py
"""
Unit Tests for Booking Services

Tests for service layer business logic.
"""

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.core.models import Booking, Service, Timeslot
from apps.core.services import (
    TimeslotCatalog,
    BookingLedger,
    ConflictDetector,
    BookingService,
    TimeslotService,
    ListingService,
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


@pytest.mark.django_db
class TestTimeslotCatalog:
    """Tests for TimeslotCatalog."""

    def setup_method(self):
        self.catalog = TimeslotCatalog()

    def test_list_slots_sorted(self, create_service):
        service = create_service(slots=('14:00', '09:00', '10:30'))

        assert self.catalog.list_slots(service.id) == ['09:00', '10:30', '14:00']

    def test_list_slots_unknown_service(self):
        assert self.catalog.list_slots(uuid.uuid4()) == []

    def test_slot_exists(self, service):
        assert self.catalog.slot_exists(service.id, '09:00')
        assert not self.catalog.slot_exists(service.id, '15:00')

    def test_replace_slots(self, service):
        result = self.catalog.replace_slots(service.id, ['10:00', '11:00', '12:00'])

        assert result == {
            'slots': ['10:00', '11:00', '12:00'],
            'added': ['12:00'],
            'removed': ['09:00'],
        }
        assert not self.catalog.slot_exists(service.id, '09:00')

    def test_replace_slots_normalizes_input(self, service):
        result = self.catalog.replace_slots(
            service.id, [' 09:00 ', '10:00', '10:00', '11:00', '']
        )

        assert result['slots'] == ['09:00', '10:00', '11:00']
        assert result['added'] == []
        assert result['removed'] == []

    def test_readding_retired_slot_reactivates_row(self, service):
        original = Timeslot.objects.get(service=service, slot='09:00')

        self.catalog.replace_slots(service.id, ['10:00', '11:00'])
        self.catalog.replace_slots(service.id, ['09:00', '10:00', '11:00'])

        assert Timeslot.objects.filter(service=service, slot='09:00').count() == 1
        assert self.catalog.get_timeslot(service.id, '09:00').id == original.id


@pytest.mark.django_db
class TestBookingLedger:
    """Tests for BookingLedger."""

    def setup_method(self):
        self.ledger = BookingLedger()

    def test_find_active_booking_exact_date(self, service, create_booking, tomorrow):
        booking = create_booking(service, '10:00', tomorrow)

        assert self.ledger.find_active_booking(service.id, '10:00', tomorrow) == booking
        assert self.ledger.find_active_booking(
            service.id, '10:00', tomorrow + timedelta(days=1)
        ) is None
        assert self.ledger.find_active_booking(service.id, '11:00', tomorrow) is None

    def test_find_active_booking_ignores_terminal(self, service, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow, status=Booking.Status.CANCELLED)

        assert self.ledger.find_active_booking(service.id, '10:00', tomorrow) is None

    def test_find_active_bookings_for_slot(self, service, create_booking, today):
        create_booking(service, '10:00', today - timedelta(days=1))
        later = create_booking(service, '10:00', today + timedelta(days=7))
        sooner = create_booking(service, '10:00', today)
        create_booking(
            service, '10:00', today + timedelta(days=3), status=Booking.Status.COMPLETED
        )

        result = self.ledger.find_active_bookings_for_slot(service.id, '10:00', today)

        assert result == [sooner, later]

    def test_insert_is_pending(self, service, owner, tomorrow):
        timeslot = service.timeslots.get(slot='11:00')

        booking = self.ledger.insert(owner.id, timeslot, tomorrow, 'cash')

        assert booking.status == Booking.Status.PENDING
        assert booking.service_id == service.id
        assert booking.status_history[0]['status'] == 'pending'

    def test_set_status(self, service, create_booking, tomorrow):
        booking = create_booking(service, '10:00', tomorrow)

        self.ledger.set_status(booking, Booking.Status.CANCELLED)
        booking.refresh_from_db()

        assert booking.status == Booking.Status.CANCELLED
        assert booking.cancelled_at is not None

    def test_get_for_owner_hides_other_owners(self, service, create_booking, tomorrow, other_owner):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(BookingNotFoundError):
            self.ledger.get_for_owner(booking.id, other_owner.id)

    def test_list_for_provider(self, service, create_service, create_booking, tomorrow, provider_id):
        mine = create_booking(service, '10:00', tomorrow)
        elsewhere = create_service(provider_id=uuid.uuid4(), name='Elsewhere')
        create_booking(elsewhere, '10:00', tomorrow)

        assert list(self.ledger.list_for_provider(provider_id)) == [mine]


@pytest.mark.django_db
class TestConflictDetector:
    """Tests for ConflictDetector."""

    def setup_method(self):
        self.detector = ConflictDetector()

    def test_no_conflicts(self, service):
        assert self.detector.detect_conflicts(service.id, ['09:00', '10:00']) == []

    def test_reports_active_future_bookings(self, service, create_booking, tomorrow, owner, pet):
        booking = create_booking(service, '10:00', tomorrow)

        conflicts = self.detector.detect_conflicts(service.id, ['09:00', '10:00'])

        assert conflicts == [{
            'slot': '10:00',
            'active_bookings': [{
                'booking_id': str(booking.id),
                'servedate': tomorrow.isoformat(),
                'status': 'pending',
                'owner_id': str(owner.id),
                'owner_name': 'Alice Owner',
                'owner_email': 'alice@example.com',
                'pet_names': ['Rex'],
            }],
        }]

    def test_past_bookings_are_not_conflicts(self, service, create_booking, today):
        create_booking(service, '10:00', today - timedelta(days=1))

        assert self.detector.detect_conflicts(service.id, ['10:00']) == []

    def test_booking_today_is_a_conflict(self, service, create_booking, today):
        create_booking(service, '10:00', today)

        assert len(self.detector.detect_conflicts(service.id, ['10:00'])) == 1

    def test_terminal_bookings_are_not_conflicts(self, service, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow, status=Booking.Status.CANCELLED)
        create_booking(service, '11:00', tomorrow, status=Booking.Status.COMPLETED)

        assert self.detector.detect_conflicts(service.id, ['10:00', '11:00']) == []

    def test_preserves_input_order(self, service, create_booking, tomorrow):
        create_booking(service, '09:00', tomorrow)
        create_booking(service, '11:00', tomorrow)

        conflicts = self.detector.detect_conflicts(service.id, ['11:00', '09:00', '11:00'])

        assert [c['slot'] for c in conflicts] == ['11:00', '09:00']

    def test_explicit_from_date(self, service, create_booking, today):
        create_booking(service, '10:00', today + timedelta(days=2))

        assert self.detector.detect_conflicts(
            service.id, ['10:00'], from_date=today + timedelta(days=3)
        ) == []


@pytest.mark.django_db
class TestBookingService:
    """Tests for BookingService."""

    def setup_method(self):
        """Set up test dependencies."""
        self.service = BookingService()

    def test_create_booking_success(self, service, owner, pet, tomorrow):
        booking = self.service.create_booking(
            owner_id=owner.id,
            service_id=service.id,
            slot='10:00',
            servedate=tomorrow,
            payment_method='card',
            pet_ids=[pet.id],
        )

        assert booking.status == Booking.Status.PENDING
        assert booking.slot == '10:00'
        assert list(booking.pets.all()) == [pet]

    def test_unknown_service(self, owner, pet, tomorrow):
        with pytest.raises(ServiceNotBookableError):
            self.service.create_booking(owner.id, uuid.uuid4(), '10:00', tomorrow, 'card', [pet.id])

    @pytest.mark.parametrize('status', [Service.Status.PENDING, Service.Status.REJECTED])
    def test_unapproved_service(self, create_service, owner, pet, tomorrow, status):
        service = create_service(status=status)

        with pytest.raises(ServiceNotBookableError):
            self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])

    def test_unknown_slot(self, service, owner, pet, tomorrow):
        with pytest.raises(UnknownTimeslotError):
            self.service.create_booking(owner.id, service.id, '15:00', tomorrow, 'card', [pet.id])

        assert Booking.objects.count() == 0

    def test_retired_slot_not_bookable(self, service, owner, pet, tomorrow):
        TimeslotCatalog().replace_slots(service.id, ['09:00', '11:00'])

        with pytest.raises(UnknownTimeslotError):
            self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])

    def test_pet_not_owned(self, service, owner, pet, other_pet, tomorrow):
        with pytest.raises(PetNotOwnedError) as exc_info:
            self.service.create_booking(
                owner.id, service.id, '10:00', tomorrow, 'card', [pet.id, other_pet.id]
            )

        assert exc_info.value.pet_id == other_pet.id
        assert Booking.objects.count() == 0

    def test_unknown_owner_profile(self, service, tomorrow):
        with pytest.raises(BookingValidationError):
            self.service.create_booking(uuid.uuid4(), service.id, '10:00', tomorrow, 'card', [])

    def test_slot_already_booked(self, service, owner, pet, other_owner, other_pet, tomorrow):
        self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])

        with pytest.raises(SlotAlreadyBookedError):
            self.service.create_booking(
                other_owner.id, service.id, '10:00', tomorrow, 'cash', [other_pet.id]
            )

        assert Booking.objects.count() == 1

    def test_cancelled_booking_frees_slot(self, service, owner, pet, tomorrow):
        first = self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])
        self.service.cancel_booking(first.id, owner.id)

        second = self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])

        assert second.id != first.id
        assert Booking.objects.active().count() == 1

    def test_constraint_catches_missed_precheck(self, service, owner, pet, other_owner, other_pet, tomorrow):
        self.service.create_booking(owner.id, service.id, '10:00', tomorrow, 'card', [pet.id])

        with patch.object(BookingLedger, 'find_active_booking', return_value=None):
            with pytest.raises(SlotAlreadyBookedError):
                self.service.create_booking(
                    other_owner.id, service.id, '10:00', tomorrow, 'cash', [other_pet.id]
                )

        assert Booking.objects.active().count() == 1

    def test_update_payment_method(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow)

        updated = self.service.update_booking(booking.id, owner.id, payment_method='cash')

        assert updated.payment_method == 'cash'

    def test_update_servedate_conflict(self, service, create_booking, tomorrow, owner, other_owner):
        booking = create_booking(service, '10:00', tomorrow)
        create_booking(service, '10:00', tomorrow + timedelta(days=1), owner=other_owner)

        with pytest.raises(SlotAlreadyBookedError):
            self.service.update_booking(
                booking.id, owner.id, servedate=tomorrow + timedelta(days=1)
            )

    def test_update_servedate_in_past(self, service, create_booking, tomorrow, today, owner):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(BookingValidationError):
            self.service.update_booking(booking.id, owner.id, servedate=today - timedelta(days=1))

    def test_move_to_new_date_after_slot_retired(self, service, create_booking, today, owner, provider_id):
        booking = create_booking(service, '10:00', today - timedelta(days=1))
        TimeslotService().update_timeslots(service.id, ['09:00', '11:00'], provider_id)

        with pytest.raises(UnknownTimeslotError):
            self.service.update_booking(
                booking.id, owner.id, servedate=today + timedelta(days=7)
            )

        booking.refresh_from_db()
        assert booking.servedate == today - timedelta(days=1)
        assert not Booking.objects.active().upcoming().exists()

    def test_move_to_new_date_on_rejected_service(self, service, create_booking, tomorrow, owner, manager_id):
        booking = create_booking(service, '10:00', tomorrow)
        service.reject(manager_id, 'Incomplete listing')

        with pytest.raises(ServiceNotBookableError):
            self.service.update_booking(
                booking.id, owner.id, servedate=tomorrow + timedelta(days=1)
            )

        booking.refresh_from_db()
        assert booking.servedate == tomorrow

    def test_payment_method_update_on_rejected_service(self, service, create_booking, tomorrow, owner, manager_id):
        booking = create_booking(service, '10:00', tomorrow)
        service.reject(manager_id)

        updated = self.service.update_booking(booking.id, owner.id, payment_method='cash')

        assert updated.payment_method == 'cash'

    def test_owner_cannot_confirm(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(BookingValidationError):
            self.service.update_booking(booking.id, owner.id, status=Booking.Status.CONFIRMED)

    def test_update_requires_fields(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(BookingValidationError):
            self.service.update_booking(booking.id, owner.id)

    def test_update_terminal_booking(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow, status=Booking.Status.COMPLETED)

        with pytest.raises(InvalidBookingStateError):
            self.service.update_booking(booking.id, owner.id, payment_method='cash')

    def test_cancel_twice(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow)
        self.service.cancel_booking(booking.id, owner.id)

        with pytest.raises(InvalidBookingStateError, match='already cancelled'):
            self.service.cancel_booking(booking.id, owner.id)

    def test_cancel_completed(self, service, create_booking, tomorrow, owner):
        booking = create_booking(service, '10:00', tomorrow, status=Booking.Status.COMPLETED)

        with pytest.raises(InvalidBookingStateError, match='completed'):
            self.service.cancel_booking(booking.id, owner.id)

    def test_cancel_other_owners_booking(self, service, create_booking, tomorrow, other_owner):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(BookingNotFoundError):
            self.service.cancel_booking(booking.id, other_owner.id)

    def test_confirm_and_complete(self, service, create_booking, tomorrow, provider_id):
        booking = create_booking(service, '10:00', tomorrow)

        self.service.confirm_booking(booking.id, provider_id)
        completed = self.service.complete_booking(booking.id, provider_id)

        assert completed.status == Booking.Status.COMPLETED
        assert completed.confirmed_at is not None
        assert completed.completed_at is not None

    def test_confirm_twice(self, service, create_booking, tomorrow, provider_id):
        booking = create_booking(service, '10:00', tomorrow, status=Booking.Status.CONFIRMED)

        with pytest.raises(InvalidBookingStateError):
            self.service.confirm_booking(booking.id, provider_id)

    def test_confirm_other_providers_booking(self, service, create_booking, tomorrow):
        booking = create_booking(service, '10:00', tomorrow)

        with pytest.raises(NotOwnerError):
            self.service.confirm_booking(booking.id, uuid.uuid4())


@pytest.mark.django_db
class TestTimeslotService:
    """Tests for TimeslotService."""

    def setup_method(self):
        self.service = TimeslotService()

    def test_add_only(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow)

        slots = self.service.update_timeslots(
            service.id, ['09:00', '10:00', '11:00', '12:00'], provider_id
        )

        assert slots == ['09:00', '10:00', '11:00', '12:00']

    def test_remove_unbooked_slot(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow)

        slots = self.service.update_timeslots(service.id, ['10:00', '11:00'], provider_id)

        assert slots == ['10:00', '11:00']

    def test_remove_booked_slot_blocked(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow)

        with pytest.raises(TimeslotConflictError) as exc_info:
            self.service.update_timeslots(service.id, ['09:00', '12:00'], provider_id)

        assert [c['slot'] for c in exc_info.value.conflicts] == ['10:00']
        assert len(exc_info.value.suggestions) == 4
        # Nothing changed, not even the added slot
        assert TimeslotCatalog().list_slots(service.id) == ['09:00', '10:00', '11:00']

    def test_remove_slot_after_cancellation(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow, status=Booking.Status.CANCELLED)

        slots = self.service.update_timeslots(service.id, ['09:00', '11:00'], provider_id)

        assert slots == ['09:00', '11:00']

    def test_remove_slot_with_only_past_bookings(self, service, provider_id, create_booking, today):
        create_booking(service, '10:00', today - timedelta(days=1))

        slots = self.service.update_timeslots(service.id, ['09:00', '11:00'], provider_id)

        assert slots == ['09:00', '11:00']

    def test_same_set_is_noop(self, service, provider_id):
        slots = self.service.update_timeslots(service.id, ['11:00', '09:00', '10:00'], provider_id)

        assert slots == ['09:00', '10:00', '11:00']
        assert Timeslot.objects.filter(service=service).count() == 3

    def test_not_owner(self, service):
        with pytest.raises(NotOwnerError):
            self.service.update_timeslots(service.id, ['09:00'], uuid.uuid4())

    def test_unknown_service(self, provider_id):
        with pytest.raises(ServiceNotFoundError):
            self.service.update_timeslots(uuid.uuid4(), ['09:00'], provider_id)

    def test_check_removal_is_dry_run(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow)

        result = self.service.check_removal(service.id, ['09:00', '12:00'], provider_id)

        assert result['current'] == ['09:00', '10:00', '11:00']
        assert result['to_add'] == ['12:00']
        assert result['to_remove'] == ['10:00', '11:00']
        assert [c['slot'] for c in result['conflicts']] == ['10:00']
        assert result['safe'] is False
        assert TimeslotCatalog().list_slots(service.id) == ['09:00', '10:00', '11:00']

    def test_check_removal_without_owner_check(self, service):
        result = self.service.check_removal(service.id, ['09:00', '10:00', '11:00'])

        assert result['safe'] is True
        assert result['conflicts'] == []


@pytest.mark.django_db
class TestListingService:
    """Tests for ListingService."""

    def setup_method(self):
        self.service = ListingService()

    def test_create_service_pending_with_slots(self, provider_id):
        service = self.service.create_service(
            provider_id=provider_id,
            name='Grooming',
            price=Decimal('40.00'),
            timeslots=['13:00', '09:00'],
        )

        assert service.status == Service.Status.PENDING
        assert TimeslotCatalog().list_slots(service.id) == ['09:00', '13:00']

    def test_list_services_approved_only(self, create_service):
        approved = create_service()
        create_service(status=Service.Status.PENDING, name='Pending')

        assert list(self.service.list_services()) == [approved]

    def test_approve_and_reject(self, create_service, manager_id):
        service = create_service(status=Service.Status.PENDING)

        assert self.service.approve_service(service.id, manager_id).is_bookable
        rejected = self.service.reject_service(service.id, manager_id, 'Duplicate')
        assert rejected.status == Service.Status.REJECTED

    def test_update_fields_and_slots(self, service, provider_id):
        updated = self.service.update_service(
            service.id, provider_id, {'name': 'Long Walk'}, timeslots=['09:00', '18:00']
        )

        assert updated.name == 'Long Walk'
        assert TimeslotCatalog().list_slots(service.id) == ['09:00', '18:00']

    def test_update_not_owner(self, service):
        with pytest.raises(NotOwnerError):
            self.service.update_service(service.id, uuid.uuid4(), {'name': 'Hijacked'})

    def test_conflict_aborts_field_changes(self, service, provider_id, create_booking, tomorrow):
        create_booking(service, '10:00', tomorrow)

        with pytest.raises(TimeslotConflictError):
            self.service.update_service(
                service.id, provider_id,
                {'name': 'Renamed', 'price': Decimal('99.00')},
                timeslots=['09:00'],
            )

        service.refresh_from_db()
        assert service.name == 'Dog Walking'
        assert service.price == Decimal('25.00')
