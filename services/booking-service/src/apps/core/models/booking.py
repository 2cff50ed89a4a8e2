# services/booking-service/src/apps/core/models/booking.py
"""
Booking Model

Reservation of one service timeslot on one servedate by a pet owner.
"""

from datetime import date

from django.db import models
from django.db.models import Q
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class BookingQuerySet(models.QuerySet):

    def active(self):
        """Bookings that still occupy their slot."""
        return self.exclude(status__in=Booking.TERMINAL_STATUSES)

    def upcoming(self, from_date: date = None):
        """Bookings on or after ``from_date`` (default: today)."""
        return self.filter(servedate__gte=from_date or timezone.localdate())

    def for_slot(self, service_id, slot: str):
        return self.filter(
            service_id=service_id,
            timeslot__slot=slot,
        )

    def for_owner(self, owner_id):
        return self.filter(owner_id=owner_id)

    def for_provider(self, provider_id):
        return self.filter(service__provider_id=provider_id)

    def with_details(self):
        return self.select_related(
            'owner', 'service', 'timeslot'
        ).prefetch_related('pets')


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Booking of a (service, slot, servedate) triple.

    At most one non-terminal booking may exist per (timeslot, servedate);
    the partial unique constraint enforces this in the database so that two
    concurrent admissions cannot both commit. Bookings are never deleted;
    cancelled and completed ones stay for history.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    TERMINAL_STATUSES = (Status.CANCELLED, Status.COMPLETED)

    ALLOWED_TRANSITIONS = {
        Status.PENDING: (Status.CONFIRMED, Status.CANCELLED, Status.COMPLETED),
        Status.CONFIRMED: (Status.CANCELLED, Status.COMPLETED),
        Status.COMPLETED: (),
        Status.CANCELLED: (),
    }

    # References
    owner = models.ForeignKey(
        'core.PetOwner',
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    service = models.ForeignKey(
        'core.Service',
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    timeslot = models.ForeignKey(
        'core.Timeslot',
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    pets = models.ManyToManyField(
        'core.Pet',
        through='core.BookingPet',
        related_name='bookings'
    )

    # Reservation
    servedate = models.DateField(db_index=True)
    payment_method = models.CharField(max_length=50)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    # Lifecycle timestamps
    booked_at = models.DateTimeField(default=timezone.now)
    confirmed_at = models.DateTimeField(blank=True, null=True)
    completed_at = models.DateTimeField(blank=True, null=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)
    status_history = models.JSONField(default=list, blank=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        db_table = 'bookings'
        ordering = ['servedate', 'timeslot__slot']
        indexes = [
            models.Index(fields=['service', 'servedate']),
            models.Index(fields=['owner', 'servedate']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['timeslot', 'servedate'],
                condition=~Q(status__in=['cancelled', 'completed']),
                name='unique_active_booking_per_slot_date'
            ),
        ]

    def __str__(self):
        return f"Booking {self.id} - {self.slot} on {self.servedate}"

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def slot(self) -> str:
        return self.timeslot.slot

    @property
    def is_active(self) -> bool:
        """Whether the booking still occupies its slot."""
        return self.status not in self.TERMINAL_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not self.is_active

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, ())

    # ==========================================================================
    # Status
    # ==========================================================================

    def apply_status(self, new_status: str):
        """
        Set the status and stamp the matching lifecycle fields.

        No transition check here; callers decide what is legal.
        """
        now = timezone.now()
        self.status = new_status

        if new_status == self.Status.CONFIRMED:
            self.confirmed_at = now
        elif new_status == self.Status.COMPLETED:
            self.completed_at = now
        elif new_status == self.Status.CANCELLED:
            self.cancelled_at = now

        self.status_history = list(self.status_history or []) + [
            {'status': new_status, 'at': now.isoformat()}
        ]


class BookingPet(models.Model):
    """Pet covered by a booking."""

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='booking_pets'
    )
    pet = models.ForeignKey(
        'core.Pet',
        on_delete=models.PROTECT,
        related_name='booking_links'
    )

    class Meta:
        db_table = 'booking_pets'
        constraints = [
            models.UniqueConstraint(
                fields=['booking', 'pet'],
                name='unique_booking_pet'
            ),
        ]

    def __str__(self):
        return f"{self.booking_id} / {self.pet_id}"
