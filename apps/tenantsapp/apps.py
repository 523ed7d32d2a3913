from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TenantsAppConfig(AppConfig):
    name = "apps.tenantsapp"
    verbose_name = _("Tenants")
