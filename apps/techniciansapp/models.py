# apps/techniciansapp/models.py
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.tenantsapp.models import Tenant


class Technician(models.Model):
    """Mechanic that appointments and work orders are assigned to"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="technicians",
        verbose_name=_("Tenant"),
    )
    name = models.CharField(_("Name"), max_length=200)
    email = models.EmailField(_("Email"), blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Technician")
        verbose_name_plural = _("Technicians")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant", "is_active"]),
        ]

    def __str__(self):
        return self.name
