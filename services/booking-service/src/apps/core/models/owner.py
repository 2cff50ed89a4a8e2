# services/booking-service/src/apps/core/models/owner.py
"""
Pet owner and pet records.

Both are owned by the profile service; this service keeps the fields it
needs for ownership checks and conflict reports.
"""

from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class PetOwner(TimestampMixin, models.Model):
    """Pet owner; the primary key is the owner's user id."""

    id = models.UUIDField(primary_key=True, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, default='')

    class Meta:
        db_table = 'pet_owners'
        ordering = ['name']

    def __str__(self):
        return self.name


class Pet(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):

    owner = models.ForeignKey(
        PetOwner,
        on_delete=models.CASCADE,
        related_name='pets'
    )
    name = models.CharField(max_length=100)
    breed = models.CharField(max_length=100, blank=True, default='')

    class Meta:
        db_table = 'pets'
        ordering = ['name']

    def __str__(self):
        return self.name
