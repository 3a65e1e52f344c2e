"""REST API for feedings app: FeedingRecord.

Supports both nested routes (/babies/{baby_pk}/feeding-records/) and the
top-level route (/feeding-records/) used by the dashboard.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any, List

from django.db.models import QuerySet
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers, viewsets
from rest_framework.exceptions import ValidationError

from babies.models import Baby
from django_project.throttles import FeedingCreateThrottle

from .constants import AMOUNT_TOO_LARGE_MESSAGE, AMOUNT_TOO_SMALL_MESSAGE
from .models import FeedingRecord

logger = logging.getLogger(__name__)

# Tolerated client clock skew for feeding times slightly in the future
FUTURE_TOLERANCE = timedelta(minutes=5)


class FeedingRecordSerializer(serializers.ModelSerializer):
    """Feeding record serializer for the top-level route (baby in body)."""

    baby_name = serializers.CharField(source="baby.name", read_only=True)

    class Meta:
        model = FeedingRecord
        fields = [
            "id",
            "baby",
            "baby_name",
            "feeding_time",
            "amount",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "baby_name", "created_at", "updated_at"]
        extra_kwargs = {
            "amount": {
                "min_value": FeedingRecord.MIN_AMOUNT_ML,
                "max_value": FeedingRecord.MAX_AMOUNT_ML,
                "error_messages": {
                    "min_value": AMOUNT_TOO_SMALL_MESSAGE,
                    "max_value": AMOUNT_TOO_LARGE_MESSAGE,
                },
            },
        }

    def validate_feeding_time(self, value):
        """Reject feeding times in the future (beyond small clock skew)."""
        if value > timezone.now() + FUTURE_TOLERANCE:
            raise serializers.ValidationError("Besleme zamanı gelecekte olamaz.")
        return value


class NestedFeedingRecordSerializer(FeedingRecordSerializer):
    """Feeding record serializer for nested routes (baby from URL)."""

    class Meta(FeedingRecordSerializer.Meta):
        fields = [
            "id",
            "baby_name",
            "feeding_time",
            "amount",
            "notes",
            "created_at",
            "updated_at",
        ]


class FeedingRecordViewSet(viewsets.ModelViewSet):
    """ViewSet for FeedingRecord CRUD.

    Handles:
        - Nested routing (/babies/{baby_pk}/feeding-records/)
        - Top-level routing (/feeding-records/), optionally filtered by ?baby=
        - Date range filtering via feeding_time__gte / feeding_time__lt
        - Stricter throttling for writes
    """

    queryset = FeedingRecord.objects.all()
    serializer_class = FeedingRecordSerializer
    nested_serializer_class = NestedFeedingRecordSerializer
    datetime_filter_field = "feeding_time"

    def get_throttles(self) -> List[Any]:
        """Apply stricter rate limiting for create/update operations."""
        throttles = super().get_throttles()
        if self.action in ["create", "update", "partial_update"]:
            throttles.append(FeedingCreateThrottle())
        return throttles

    def get_serializer_class(self) -> type:
        """Use nested serializer when baby is in URL."""
        if "baby_pk" in self.kwargs:
            return self.nested_serializer_class
        return self.serializer_class

    def get_baby(self) -> Baby:
        """Return the baby from the URL, or 404."""
        return get_object_or_404(Baby, pk=self.kwargs["baby_pk"])

    def get_queryset(self) -> QuerySet[FeedingRecord]:
        """Return records for the baby (nested) or all records (top-level)."""
        if "baby_pk" in self.kwargs:
            qs = FeedingRecord.objects.filter(baby=self.get_baby())
        else:
            qs = FeedingRecord.objects.all()
            baby_param = self.request.query_params.get("baby")
            if baby_param:
                try:
                    baby_id = uuid.UUID(baby_param)
                except ValueError:
                    raise ValidationError({"baby": "Geçersiz bebek kimliği."})
                qs = qs.filter(baby_id=baby_id)
        return self._apply_datetime_filters(qs.select_related("baby"))

    def _apply_datetime_filters(self, queryset: QuerySet[Any]) -> QuerySet[Any]:
        """Apply date range filtering from {field}__gte and {field}__lt.

        Invalid dates are silently ignored.
        """
        field = self.datetime_filter_field

        gte_param = self.request.query_params.get(f"{field}__gte")
        lt_param = self.request.query_params.get(f"{field}__lt")

        if gte_param:
            parsed = parse_datetime(gte_param)
            if parsed:
                queryset = queryset.filter(**{f"{field}__gte": parsed})

        if lt_param:
            parsed = parse_datetime(lt_param)
            if parsed:
                queryset = queryset.filter(**{f"{field}__lt": parsed})

        return queryset

    def perform_create(self, serializer):
        """Set baby from URL parameter on nested routes."""
        if "baby_pk" in self.kwargs:
            record = serializer.save(baby=self.get_baby())
        else:
            record = serializer.save()
        logger.info(
            "Created feeding record",
            extra={"baby_id": str(record.baby_id), "record_id": str(record.pk)},
        )

    def perform_destroy(self, instance):
        record_id = str(instance.pk)
        baby_id = str(instance.baby_id)
        instance.delete()
        logger.info(
            "Deleted feeding record",
            extra={"baby_id": baby_id, "record_id": record_id},
        )


