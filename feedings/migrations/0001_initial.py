import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("babies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FeedingRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("feeding_time", models.DateTimeField(db_index=True)),
                (
                    "amount",
                    models.PositiveIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(
                                1, message="Miktar en az 1 ml olmalı"
                            ),
                            django.core.validators.MaxValueValidator(
                                500, message="Miktar en fazla 500 ml olabilir"
                            ),
                        ]
                    ),
                ),
                ("notes", models.TextField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "baby",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feeding_records",
                        to="babies.baby",
                    ),
                ),
            ],
            options={
                "ordering": ["-feeding_time"],
            },
        ),
        migrations.AddIndex(
            model_name="feedingrecord",
            index=models.Index(
                fields=["baby", "-feeding_time"], name="feeding_baby_time_idx"
            ),
        ),
        migrations.AddConstraint(
            model_name="feedingrecord",
            constraint=models.CheckConstraint(
                condition=models.Q(("amount__gte", 1), ("amount__lte", 500)),
                name="feeding_amount_in_range",
            ),
        ),
    ]
