# services/booking-service/src/apps/core/models/service.py
"""
Service Model

A sellable pet-care offering published by a service provider.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class ServiceQuerySet(models.QuerySet):

    def approved(self):
        return self.filter(status=Service.Status.APPROVED)

    def for_provider(self, provider_id):
        return self.filter(provider_id=provider_id)


class Service(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Service offered by a provider.

    Only approved services are publicly listed and bookable. The provider
    reference is fixed at creation.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending Review'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    # Ownership (user id of the service provider)
    provider_id = models.UUIDField(db_index=True, editable=False)

    # Listing
    type_id = models.PositiveIntegerField(blank=True, null=True, db_index=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    duration = models.CharField(max_length=50, blank=True, default='')

    # Moderation
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    reviewed_by = models.UUIDField(blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    rejection_reason = models.TextField(blank=True, default='')

    objects = ServiceQuerySet.as_manager()

    class Meta:
        db_table = 'services'
        ordering = ['name']
        indexes = [
            models.Index(fields=['provider_id', 'status']),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.APPROVED

    def is_owned_by(self, provider_id) -> bool:
        return str(self.provider_id) == str(provider_id)

    # ==========================================================================
    # Moderation
    # ==========================================================================

    def approve(self, manager_id: uuid.UUID):
        """Approve the listing; it becomes bookable."""
        self.status = self.Status.APPROVED
        self.reviewed_by = manager_id
        self.reviewed_at = timezone.now()
        self.rejection_reason = ''
        self.save(update_fields=[
            'status', 'reviewed_by', 'reviewed_at', 'rejection_reason', 'updated_at'
        ])

    def reject(self, manager_id: uuid.UUID, reason: str = ''):
        """Reject the listing; it is hidden and no longer bookable."""
        self.status = self.Status.REJECTED
        self.reviewed_by = manager_id
        self.reviewed_at = timezone.now()
        self.rejection_reason = reason or ''
        self.save(update_fields=[
            'status', 'reviewed_by', 'reviewed_at', 'rejection_reason', 'updated_at'
        ])
