"""
Django Fulfillman app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class FulfillmanConfig(AppConfig):
    """Fulfillman application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "fulfillman"
    verbose_name = _("Fulfillment")

    def ready(self):
        """Import signal handlers when app is ready."""
        # Import handlers to register them
        from fulfillman.signals import handlers  # noqa: F401
