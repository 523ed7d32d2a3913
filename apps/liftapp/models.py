# apps/liftapp/models.py
import uuid
from enum import Enum

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from apps.bookingapp.utils.time_calculator import OPEN_END, floor_minutes
from apps.tenantsapp.models import Tenant
from apps.workorderapp.models import WorkOrder
from core.exceptions import (
    LiftAlreadyInUseException,
    LiftInMaintenanceException,
    LiftNotAvailableException,
    NoActiveUsageException,
)


class LiftStatus(str, Enum):
    """Enum for lift status values. Derived from the usage ledger, never stored."""

    FREE = "free"
    OCCUPIED = "occupied"
    SCHEDULED = "scheduled"
    MAINTENANCE = "maintenance"


class LiftOperation(str, Enum):
    RESERVE = "reserve"
    START_USAGE = "start_usage"
    END_USAGE = "end_usage"


# (current status, operation) -> next status, or the exception that rejects it
LIFT_TRANSITIONS = {
    (LiftStatus.FREE, LiftOperation.RESERVE): LiftStatus.SCHEDULED,
    (LiftStatus.FREE, LiftOperation.START_USAGE): LiftStatus.OCCUPIED,
    (LiftStatus.FREE, LiftOperation.END_USAGE): NoActiveUsageException,
    (LiftStatus.SCHEDULED, LiftOperation.RESERVE): LiftAlreadyInUseException,
    (LiftStatus.SCHEDULED, LiftOperation.START_USAGE): LiftStatus.OCCUPIED,
    (LiftStatus.SCHEDULED, LiftOperation.END_USAGE): LiftStatus.FREE,
    (LiftStatus.OCCUPIED, LiftOperation.RESERVE): LiftAlreadyInUseException,
    (LiftStatus.OCCUPIED, LiftOperation.START_USAGE): LiftNotAvailableException,
    (LiftStatus.OCCUPIED, LiftOperation.END_USAGE): LiftStatus.FREE,
    (LiftStatus.MAINTENANCE, LiftOperation.RESERVE): LiftInMaintenanceException,
    (LiftStatus.MAINTENANCE, LiftOperation.START_USAGE): LiftInMaintenanceException,
    (LiftStatus.MAINTENANCE, LiftOperation.END_USAGE): LiftInMaintenanceException,
}


class Lift(models.Model):
    """Vehicle lift (elevator) shared by the technicians of a workshop"""

    TYPE_CHOICES = (
        ("hydraulic", _("Hydraulic")),
        ("pneumatic", _("Pneumatic")),
        ("scissor", _("Scissor")),
    )

    STATUS_CHOICES = (
        (LiftStatus.FREE.value, _("Free")),
        (LiftStatus.OCCUPIED.value, _("Occupied")),
        (LiftStatus.SCHEDULED.value, _("Scheduled")),
        (LiftStatus.MAINTENANCE.value, _("Maintenance")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="lifts",
        verbose_name=_("Tenant"),
    )
    name = models.CharField(_("Name"), max_length=100)
    number = models.CharField(_("Number"), max_length=20)
    lift_type = models.CharField(
        _("Type"), max_length=20, choices=TYPE_CHOICES, default="hydraulic"
    )
    capacity = models.DecimalField(
        _("Capacity (tonnes)"), max_digits=5, decimal_places=2, null=True, blank=True
    )
    location = models.CharField(_("Location"), max_length=200, blank=True)
    notes = models.TextField(_("Notes"), blank=True)
    in_maintenance = models.BooleanField(_("In Maintenance"), default=False)
    maintenance_reason = models.TextField(_("Maintenance Reason"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Lift")
        verbose_name_plural = _("Lifts")
        ordering = ["number"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "number"], name="unique_lift_number_per_tenant"
            ),
        ]

    def __str__(self):
        return f"{self.name} #{self.number}"

    @property
    def open_usage(self):
        """The open ledger record, if any. Uses ``open_usages`` when prefetched."""
        if hasattr(self, "open_usages"):
            return self.open_usages[0] if self.open_usages else None
        return self.usages.filter(end_time__isnull=True).first()

    @property
    def status(self):
        if self.in_maintenance:
            return LiftStatus.MAINTENANCE
        usage = self.open_usage
        if usage is None:
            return LiftStatus.FREE
        if usage.started_at is None:
            return LiftStatus.SCHEDULED
        return LiftStatus.OCCUPIED


class LiftUsage(models.Model):
    """Ledger entry for one reservation or occupancy of a lift"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lift = models.ForeignKey(
        Lift,
        on_delete=models.CASCADE,
        related_name="usages",
        verbose_name=_("Lift"),
    )
    work_order = models.ForeignKey(
        WorkOrder,
        on_delete=models.SET_NULL,
        related_name="lift_usages",
        verbose_name=_("Work Order"),
        null=True,
        blank=True,
    )
    vehicle_id = models.CharField(_("Vehicle ID"), max_length=64, blank=True)
    start_time = models.DateTimeField(_("Start Time"), db_index=True)
    planned_end = models.DateTimeField(_("Planned End"), null=True, blank=True)
    started_at = models.DateTimeField(_("Started At"), null=True, blank=True)
    end_time = models.DateTimeField(_("End Time"), null=True, blank=True, db_index=True)
    notes = models.TextField(_("Notes"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Lift Usage")
        verbose_name_plural = _("Lift Usages")
        ordering = ["-start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["lift"],
                condition=Q(end_time__isnull=True),
                name="unique_open_usage_per_lift",
            ),
        ]
        indexes = [
            models.Index(fields=["lift", "start_time"]),
        ]

    def __str__(self):
        return f"{self.lift} from {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def is_open(self):
        return self.end_time is None

    @property
    def interval_end(self):
        """End of the interval this record blocks on the lift's calendar"""
        if self.end_time is not None:
            return self.end_time
        if self.started_at is None and self.planned_end is not None:
            return self.planned_end
        return OPEN_END

    @property
    def duration_minutes(self):
        if self.end_time is None:
            return None
        return floor_minutes(self.start_time, self.end_time)
