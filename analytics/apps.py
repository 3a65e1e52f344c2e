from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "analytics"

    def ready(self):
        """Register signal handlers for cache invalidation."""
        from . import signals  # noqa: F401
