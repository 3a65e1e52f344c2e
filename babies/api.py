"""REST API for babies app: Baby."""

import logging

from django.utils import timezone
from rest_framework import serializers, viewsets

from .models import Baby

logger = logging.getLogger(__name__)


class BabySerializer(serializers.ModelSerializer):
    """Baby profile serializer."""

    class Meta:
        model = Baby
        fields = [
            "id",
            "name",
            "birth_date",
            "avatar_color",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "name": {
                "error_messages": {
                    "blank": "Bebek adı gerekli.",
                    "required": "Bebek adı gerekli.",
                }
            },
        }

    def validate_birth_date(self, value):
        """Reject birth dates after today's local date."""
        if value > timezone.localdate():
            raise serializers.ValidationError("Doğum tarihi gelecekte olamaz.")
        return value


class BabyViewSet(viewsets.ModelViewSet):
    """ViewSet for Baby CRUD.

    Deleting a baby cascades to its feeding records.
    """

    queryset = Baby.objects.all()
    serializer_class = BabySerializer

    def perform_create(self, serializer):
        baby = serializer.save()
        logger.info("Registered baby", extra={"baby_id": str(baby.pk)})

    def perform_destroy(self, instance):
        baby_id = str(instance.pk)
        instance.delete()
        logger.info("Deleted baby", extra={"baby_id": baby_id})


