"""Serializers for analytics endpoints.

Request validation and response formatting for feeding statistics.
"""

from django.conf import settings
from rest_framework import serializers


class FeedingStatsQuerySerializer(serializers.Serializer):
    """Validate the 'locale' query parameter for the feeding stats endpoint."""

    locale = serializers.ChoiceField(
        choices=[code for code, _name in settings.LANGUAGES],
        required=False,
        help_text="Language code for day labels (default FEEDING_STATS_LOCALE)",
    )


class BucketSerializer(serializers.Serializer):
    """One time slot of a rollup."""

    label = serializers.CharField()
    total_amount = serializers.IntegerField()
    count = serializers.IntegerField()


class SummarySerializer(serializers.Serializer):
    """Today's totals, all-time average and latest feeding."""

    total_today = serializers.IntegerField()
    count_today = serializers.IntegerField()
    avg_amount = serializers.IntegerField()
    last_feeding = serializers.DateTimeField(allow_null=True)
    last_feeding_id = serializers.CharField(allow_null=True)


class FeedingStatsResponseSerializer(serializers.Serializer):
    """Response for feeding stats endpoint."""

    baby_id = serializers.UUIDField()
    locale = serializers.CharField()
    hourly = BucketSerializer(many=True)
    daily = BucketSerializer(many=True)
    weekly = BucketSerializer(many=True)
    summary = SummarySerializer()
    last_updated = serializers.DateTimeField()


class TodaySummaryResponseSerializer(SummarySerializer):
    """Response for today's summary endpoint."""

    baby_id = serializers.UUIDField()
    period = serializers.DateField()
    last_updated = serializers.DateTimeField()
