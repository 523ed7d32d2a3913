# apps/bookingapp/models.py
import uuid
from enum import Enum

from django.db import models
from django.utils.translation import gettext_lazy as _
from model_utils import FieldTracker

from apps.bookingapp.utils.time_calculator import calculate_end_time
from apps.techniciansapp.models import Technician
from apps.tenantsapp.models import Tenant
from apps.workorderapp.models import WorkOrder


class AppointmentStatus(str, Enum):
    """Enum for appointment status values"""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Appointments in these statuses never block a technician or a slot
INACTIVE_STATUSES = (
    AppointmentStatus.CANCELLED.value,
    AppointmentStatus.COMPLETED.value,
    AppointmentStatus.NO_SHOW.value,
)


class Appointment(models.Model):
    """Workshop appointment, optionally tied to a technician and a work order"""

    STATUS_CHOICES = (
        ("scheduled", _("Scheduled")),
        ("in_progress", _("In Progress")),
        ("completed", _("Completed")),
        ("cancelled", _("Cancelled")),
        ("no_show", _("No Show")),
    )

    # Allowed status changes, keyed by current status
    TRANSITIONS = {
        "scheduled": {"in_progress", "cancelled", "no_show"},
        "in_progress": {"completed"},
        "completed": set(),
        "cancelled": set(),
        "no_show": set(),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="appointments",
        verbose_name=_("Tenant"),
    )
    technician = models.ForeignKey(
        Technician,
        on_delete=models.SET_NULL,
        related_name="appointments",
        verbose_name=_("Technician"),
        null=True,
        blank=True,
    )
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.SET_NULL,
        related_name="appointments",
        verbose_name=_("Work Order"),
        null=True,
        blank=True,
    )
    customer_name = models.CharField(_("Customer Name"), max_length=200, blank=True)
    service_type = models.CharField(_("Service Type"), max_length=100, blank=True)
    start_time = models.DateTimeField(_("Start Time"), db_index=True)
    duration = models.PositiveIntegerField(_("Duration (minutes)"), default=60)
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default="scheduled",
        db_index=True,
    )
    notes = models.TextField(_("Notes"), blank=True)
    cancellation_reason = models.TextField(_("Cancellation Reason"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    # Track field changes for signals
    tracker = FieldTracker(fields=["status", "start_time", "technician_id"])

    class Meta:
        verbose_name = _("Appointment")
        verbose_name_plural = _("Appointments")
        ordering = ["-start_time"]
        indexes = [
            models.Index(fields=["tenant", "start_time", "status"]),
            models.Index(fields=["technician", "start_time", "status"]),
        ]

    def __str__(self):
        return f"{self.customer_name or self.service_type or self.id} - {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def end_time(self):
        return calculate_end_time(self.start_time, self.duration)

    @property
    def is_active(self):
        return self.status not in INACTIVE_STATUSES

    def can_transition_to(self, new_status):
        return new_status in self.TRANSITIONS.get(self.status, set())
