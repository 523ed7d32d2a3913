# apps/quoteapp/models.py
import uuid
from enum import Enum

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.liftapp.models import Lift
from apps.techniciansapp.models import Technician
from apps.tenantsapp.models import Tenant
from apps.workorderapp.models import WorkOrder


class QuoteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class Quote(models.Model):
    """Customer quote; approving it books the work it describes"""

    STATUS_CHOICES = (
        ("pending", _("Pending")),
        ("accepted", _("Accepted")),
        ("rejected", _("Rejected")),
        ("expired", _("Expired")),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="quotes",
        verbose_name=_("Tenant"),
    )
    number = models.CharField(_("Number"), max_length=50)
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=STATUS_CHOICES,
        default="pending",
        db_index=True,
    )
    customer_name = models.CharField(_("Customer Name"), max_length=200, blank=True)
    service_type = models.CharField(_("Service Type"), max_length=100, blank=True)
    vehicle_id = models.CharField(_("Vehicle ID"), max_length=64, blank=True)
    technician = models.ForeignKey(
        Technician,
        on_delete=models.SET_NULL,
        related_name="quotes",
        verbose_name=_("Technician"),
        null=True,
        blank=True,
    )
    lift = models.ForeignKey(
        Lift,
        on_delete=models.SET_NULL,
        related_name="quotes",
        verbose_name=_("Lift"),
        null=True,
        blank=True,
    )
    requested_start = models.DateTimeField(_("Requested Start"), null=True, blank=True)
    estimated_hours = models.DecimalField(
        _("Estimated Hours"), max_digits=6, decimal_places=2, null=True, blank=True
    )
    work_order = models.OneToOneField(
        WorkOrder,
        on_delete=models.SET_NULL,
        related_name="quote",
        verbose_name=_("Work Order"),
        null=True,
        blank=True,
    )
    # Outcome of each approval step, e.g. {"lift": {"status": "failed", "message": "..."}}
    approval_steps = models.JSONField(_("Approval Steps"), default=dict, blank=True)
    accepted_at = models.DateTimeField(_("Accepted At"), null=True, blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Quote")
        verbose_name_plural = _("Quotes")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["tenant", "number"], name="unique_quote_number_per_tenant"),
        ]

    def __str__(self):
        return f"{self.number} ({self.status})"
