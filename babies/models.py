import uuid

from django.db import models

from .constants import DEFAULT_AVATAR_COLOR, MAX_AVATAR_COLOR_LENGTH, MAX_NAME_LENGTH


class Baby(models.Model):
    """Baby profile that owns feeding records.

    The first registered baby is the dashboard's default selection, so the
    default ordering is oldest first.

    Attributes:
        id (UUIDField): Primary key, exposed as a string in the API
        name (CharField): Display name
        birth_date (DateField): Date of birth (not in the future)
        avatar_color (CharField): CSS class used for the profile avatar
        created_at (DateTimeField): When the profile was registered
        updated_at (DateTimeField): When the profile was last modified
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=MAX_NAME_LENGTH)
    birth_date = models.DateField()
    avatar_color = models.CharField(
        max_length=MAX_AVATAR_COLOR_LENGTH,
        default=DEFAULT_AVATAR_COLOR,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        verbose_name = "bebek"
        verbose_name_plural = "bebekler"

    def __str__(self):
        return self.name
