"""Reminder toggle for feeding reminders.

The application has a single user, so there is exactly one ReminderSetting
row. Delivering the reminder is the client's job; the server only stores the
toggle and interval.
"""

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

MIN_INTERVAL_HOURS = 1
MAX_INTERVAL_HOURS = 12
DEFAULT_INTERVAL_HOURS = 3

SINGLETON_PK = 1


class ReminderSetting(models.Model):
    """Whether feeding reminders are on, and how often they fire."""

    enabled = models.BooleanField(default=False)
    interval_hours = models.PositiveSmallIntegerField(
        default=DEFAULT_INTERVAL_HOURS,
        validators=[
            MinValueValidator(MIN_INTERVAL_HOURS),
            MaxValueValidator(MAX_INTERVAL_HOURS),
        ],
        help_text="Hours between reminders (1-12)",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "hatırlatıcı ayarı"
        verbose_name_plural = "hatırlatıcı ayarları"

    def __str__(self):
        if self.enabled:
            return f"Her {self.interval_hours} saatte bir"
        return "Kapalı"

    def save(self, *args, **kwargs):
        self.pk = SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "ReminderSetting":
        """Return the single settings row, creating it on first access."""
        setting, _ = cls.objects.get_or_create(pk=SINGLETON_PK)
        return setting

    @property
    def message(self) -> str:
        """Confirmation text shown after saving."""
        if self.enabled:
            return f"Her {self.interval_hours} saatte bir hatırlatma alacaksınız."
        return "Hatırlatıcılar devre dışı bırakıldı."
