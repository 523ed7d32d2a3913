from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class LiftAppConfig(AppConfig):
    name = "apps.liftapp"
    verbose_name = _("Lifts")
