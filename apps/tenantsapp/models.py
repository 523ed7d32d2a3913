# apps/tenantsapp/models.py
import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Tenant(models.Model):
    """A workshop operating on the platform. Every scheduling record belongs to one."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=200)
    slug = models.SlugField(_("Slug"), max_length=100, unique=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("Tenant")
        verbose_name_plural = _("Tenants")
        ordering = ["name"]

    def __str__(self):
        return self.name
