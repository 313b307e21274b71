"""Wiki farm Django app configuration."""

from django.apps import AppConfig


class FarmConfig(AppConfig):
    """Farm app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "farm"

    def ready(self):
        """Connect invalidation signals."""
        from . import signals  # noqa: F401
