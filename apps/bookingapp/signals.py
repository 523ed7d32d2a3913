# apps/bookingapp/signals.py
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.bookingapp.models import Appointment

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Appointment)
def appointment_post_save(sender, instance, created, **kwargs):
    """
    Handle post-save signal for Appointments.
    Logs bookings, reschedules and status transitions.
    """
    if created:
        logger.info(
            f"Appointment {instance.id} booked for {instance.start_time} "
            f"({instance.duration} min, technician {instance.technician_id})"
        )
        return

    if instance.tracker.has_changed("status"):
        logger.info(
            f"Appointment {instance.id} status "
            f"{instance.tracker.previous('status')} -> {instance.status}"
        )
    elif instance.tracker.has_changed("start_time") or instance.tracker.has_changed(
        "technician_id"
    ):
        logger.info(
            f"Appointment {instance.id} rescheduled to {instance.start_time} "
            f"(technician {instance.technician_id})"
        )
