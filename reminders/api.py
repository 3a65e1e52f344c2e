"""API view for the feeding reminder toggle."""

import logging

from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import MAX_INTERVAL_HOURS, MIN_INTERVAL_HOURS, ReminderSetting

logger = logging.getLogger(__name__)


class ReminderSettingSerializer(serializers.ModelSerializer):
    """Serializer for the reminder toggle."""

    message = serializers.CharField(read_only=True)

    class Meta:
        model = ReminderSetting
        fields = ["enabled", "interval_hours", "message", "updated_at"]
        read_only_fields = ["message", "updated_at"]
        extra_kwargs = {
            "interval_hours": {
                "min_value": MIN_INTERVAL_HOURS,
                "max_value": MAX_INTERVAL_HOURS,
                "error_messages": {
                    "min_value": f"Aralık en az {MIN_INTERVAL_HOURS} saat olmalı",
                    "max_value": f"Aralık en fazla {MAX_INTERVAL_HOURS} saat olabilir",
                },
            },
        }


class ReminderSettingView(APIView):
    """View for the reminder toggle.

    GET   /api/v1/reminder/ - Get reminder setting
    PATCH /api/v1/reminder/ - Update reminder setting
    """

    def get(self, request):
        return Response(ReminderSettingSerializer(ReminderSetting.load()).data)

    def patch(self, request):
        setting = ReminderSetting.load()
        serializer = ReminderSettingSerializer(setting, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info(
            "Updated reminder setting",
            extra={
                "enabled": setting.enabled,
                "interval_hours": setting.interval_hours,
            },
        )
        return Response(serializer.data)
