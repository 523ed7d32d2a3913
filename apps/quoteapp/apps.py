from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class QuoteAppConfig(AppConfig):
    name = "apps.quoteapp"
    verbose_name = _("Quotes")
