# services/booking-service/src/apps/core/signals.py
"""
Django Signals for Booking Service

Audit logging of booking and timeslot changes.
"""

import logging
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import Booking, Timeslot

logger = logging.getLogger(__name__)


# ==========================================================================
# Booking Signals
# ==========================================================================

@receiver(pre_save, sender=Booking)
def booking_pre_save(sender, instance, **kwargs):
    """Track status changes before save."""
    instance._old_status = None
    if instance.pk:
        instance._old_status = (
            Booking.objects.filter(pk=instance.pk)
            .values_list('status', flat=True)
            .first()
        )


@receiver(post_save, sender=Booking)
def booking_status_change(sender, instance, created, **kwargs):
    """Log booking creation and status changes."""
    if created:
        logger.info(
            f"Booking created: {instance.id} "
            f"(service {instance.service_id}, {instance.servedate})"
        )
        return

    old_status = getattr(instance, '_old_status', None)
    if old_status is None or old_status == instance.status:
        return

    logger.info(
        f"Booking {instance.id} status changed: {old_status} -> {instance.status}"
    )


# ==========================================================================
# Timeslot Signals
# ==========================================================================

@receiver(post_save, sender=Timeslot)
def timeslot_post_save(sender, instance, created, **kwargs):
    if created:
        logger.info(f"Timeslot {instance.slot} added to service {instance.service_id}")
    elif not instance.is_active:
        logger.info(f"Timeslot {instance.slot} retired from service {instance.service_id}")
