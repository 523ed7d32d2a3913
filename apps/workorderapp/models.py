# apps/workorderapp/models.py
import uuid
from datetime import timedelta
from enum import Enum

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.techniciansapp.models import Technician
from apps.tenantsapp.models import Tenant


class WorkOrderStatus(str, Enum):
    """Enum for work order status values"""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrder(models.Model):
    """Service order for one vehicle; in-progress orders block the workshop calendar"""

    STATUS_CHOICES = (
        ("draft", _("Draft")),
        ("scheduled", _("Scheduled")),
        ("in_progress", _("In Progress")),
        ("completed", _("Completed")),
        ("cancelled", _("Cancelled")),
    )

    # Allowed status changes, keyed by current status
    TRANSITIONS = {
        "draft": {"scheduled", "in_progress", "cancelled"},
        "scheduled": {"in_progress", "cancelled"},
        "in_progress": {"completed", "cancelled"},
        "completed": set(),
        "cancelled": set(),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="work_orders",
        verbose_name=_("Tenant"),
    )
    number = models.CharField(_("Number"), max_length=50)
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default="draft",
        db_index=True,
    )
    technician = models.ForeignKey(
        Technician,
        on_delete=models.SET_NULL,
        related_name="work_orders",
        verbose_name=_("Technician"),
        null=True,
        blank=True,
    )
    vehicle_id = models.CharField(_("Vehicle ID"), max_length=64, blank=True)
    scheduled_start = models.DateTimeField(_("Scheduled Start"), null=True, blank=True)
    estimated_hours = models.DecimalField(
        _("Estimated Hours"), max_digits=6, decimal_places=2, null=True, blank=True
    )
    notes = models.TextField(_("Notes"), blank=True)
    started_at = models.DateTimeField(_("Started At"), null=True, blank=True)
    completed_at = models.DateTimeField(_("Completed At"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Work Order")
        verbose_name_plural = _("Work Orders")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "number"], name="unique_work_order_number_per_tenant"
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "status", "scheduled_start"]),
        ]

    def __str__(self):
        return f"{self.number} ({self.status})"

    @property
    def scheduled_end(self):
        """End of the planned work window, or None when it cannot be computed"""
        if self.scheduled_start is None or self.estimated_hours is None:
            return None
        return self.scheduled_start + timedelta(hours=float(self.estimated_hours))

    def can_transition_to(self, new_status):
        return new_status in self.TRANSITIONS.get(self.status, set())
