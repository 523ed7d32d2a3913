from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class TechniciansAppConfig(AppConfig):
    name = "apps.techniciansapp"
    verbose_name = _("Technicians")
