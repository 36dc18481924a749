"""
Django Atelier app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AtelierConfig(AppConfig):
    """Atelier application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "atelier"
    verbose_name = _("Production & Costing")

    def ready(self):
        """Import signal handlers when app is ready."""
        # Import handlers to register them
        from atelier.signals import handlers  # noqa: F401
