from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class WorkOrderAppConfig(AppConfig):
    name = "apps.workorderapp"
    verbose_name = _("Work Orders")
