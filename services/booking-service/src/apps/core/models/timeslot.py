# services/booking-service/src/apps/core/models/timeslot.py
"""
Timeslot Model

Bookable time labels of a service. A timeslot is a catalog entry that
recurs on every date, not a calendar instance.
"""

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin


class TimeslotQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def for_service(self, service_id):
        return self.filter(service_id=service_id)


class Timeslot(UUIDPrimaryKeyMixin, TimestampMixin, ActiveMixin, models.Model):
    """
    One slot label of a service's catalog, identified by (service, slot).

    Removing a slot from the catalog retires the row instead of deleting it:
    bookings keep a protected reference to the slot they occupied, and adding
    the same label again reactivates the row.
    """

    service = models.ForeignKey(
        'core.Service',
        on_delete=models.CASCADE,
        related_name='timeslots'
    )
    slot = models.CharField(max_length=20)
    retired_at = models.DateTimeField(blank=True, null=True)

    objects = TimeslotQuerySet.as_manager()

    class Meta:
        db_table = 'timeslots'
        ordering = ['slot']
        constraints = [
            models.UniqueConstraint(
                fields=['service', 'slot'],
                name='unique_service_timeslot'
            ),
        ]

    def __str__(self):
        state = '' if self.is_active else ' (retired)'
        return f"{self.slot}{state}"

    def retire(self):
        self.is_active = False
        self.retired_at = timezone.now()
        self.save(update_fields=['is_active', 'retired_at', 'updated_at'])

    def reactivate(self):
        self.is_active = True
        self.retired_at = None
        self.save(update_fields=['is_active', 'retired_at', 'updated_at'])
