import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import CheckConstraint, Q

from babies.models import Baby

from .constants import (
    AMOUNT_TOO_LARGE_MESSAGE,
    AMOUNT_TOO_SMALL_MESSAGE,
    MAX_AMOUNT_ML,
    MAX_NOTES_LENGTH,
    MIN_AMOUNT_ML,
)


class FeedingRecord(models.Model):
    """A single bottle feeding.

    The amount range is enforced three times: model validators, the API
    serializer, and a CheckConstraint at the schema level. Statistics code only
    reads these records and tolerates any positive amount.

    Attributes:
        id (UUIDField): Primary key, exposed as a string in the API
        baby (ForeignKey): The baby who was fed
        feeding_time (DateTimeField): When the feeding happened (UTC, indexed)
        amount (PositiveIntegerField): Volume in mL (1-500)
        notes (TextField): Optional free text
        created_at (DateTimeField): When record was created
        updated_at (DateTimeField): When record was last modified
    """

    MIN_AMOUNT_ML = MIN_AMOUNT_ML
    MAX_AMOUNT_ML = MAX_AMOUNT_ML

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    baby = models.ForeignKey(
        Baby,
        on_delete=models.CASCADE,
        related_name="feeding_records",
    )
    feeding_time = models.DateTimeField(db_index=True)
    amount = models.PositiveIntegerField(
        validators=[
            MinValueValidator(MIN_AMOUNT_ML, message=AMOUNT_TOO_SMALL_MESSAGE),
            MaxValueValidator(MAX_AMOUNT_ML, message=AMOUNT_TOO_LARGE_MESSAGE),
        ],
    )
    notes = models.TextField(max_length=MAX_NOTES_LENGTH, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-feeding_time"]
        indexes = [
            models.Index(
                fields=["baby", "-feeding_time"],
                name="feeding_baby_time_idx",
            ),
        ]
        constraints = [
            CheckConstraint(
                condition=Q(amount__gte=MIN_AMOUNT_ML, amount__lte=MAX_AMOUNT_ML),
                name="feeding_amount_in_range",
            ),
        ]

    def __str__(self):
        return f"{self.baby.name} - {self.amount} ml"
