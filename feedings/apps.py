from django.apps import AppConfig


class FeedingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "feedings"
    verbose_name = "Beslemeler"
