"""REST API views for analytics endpoints.

Serve the dashboard's charts (hourly / daily / weekly rollups) and its
summary cards for one baby.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from babies.models import Baby

from .cache import build_cache_key
from .serializers import (
    FeedingStatsQuerySerializer,
    FeedingStatsResponseSerializer,
    TodaySummaryResponseSerializer,
)
from .utils import get_feeding_stats, get_today_summary

logger = logging.getLogger(__name__)

# Cached responses are keyed to the minute so the hour grid and "today"
# move with the clock.
MINUTE_STAMP_FORMAT = "%Y%m%dT%H%M"


class AnalyticsViewSet(viewsets.ViewSet):
    """ViewSet for analytics endpoints.

    All endpoints are read-only. Results are cached briefly per baby and
    invalidated whenever the baby's feeding records change.
    """

    def get_baby(self, baby_id) -> Baby:
        """Get baby or raise NotFound.

        Args:
            baby_id: The baby's ID

        Returns:
            Baby object

        Raises:
            NotFound: If baby not found
        """
        try:
            return Baby.objects.get(pk=baby_id)
        except Baby.DoesNotExist:
            raise NotFound("Bebek bulunamadı.")

    def _get_cached_data(
        self,
        cache_key: str,
        compute_func,
        *args,
        cache_ttl: int = 60,
        **kwargs,
    ) -> dict:
        """Get data from cache or compute and cache it.

        Args:
            cache_key: Cache key to use
            compute_func: Function to call if not cached
            cache_ttl: Cache time-to-live in seconds
            *args: Positional args for compute_func
            **kwargs: Keyword args for compute_func

        Returns:
            Computed or cached data dict
        """
        cached = cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache HIT", extra={"cache_key": cache_key})
            return cached

        logger.debug("Cache MISS", extra={"cache_key": cache_key})
        data = compute_func(*args, **kwargs)
        cache.set(cache_key, data, cache_ttl)
        return data

    @action(detail=True, methods=["get"], url_path="feeding-stats")
    def feeding_stats(self, request, pk=None):
        """Get hourly, daily and weekly rollups plus the summary for a baby.

        Query params: locale (language code for day labels)
        """
        baby = self.get_baby(pk)
        serializer = FeedingStatsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        locale = serializer.validated_data.get("locale") or settings.FEEDING_STATS_LOCALE

        now = timezone.localtime()
        cache_key = build_cache_key(
            "feeding-stats", baby.pk, locale, now.strftime(MINUTE_STAMP_FORMAT)
        )
        data = self._get_cached_data(
            cache_key,
            get_feeding_stats,
            baby.pk,
            cache_ttl=settings.FEEDING_STATS_CACHE_TTL,
            now=now,
            locale=locale,
        )
        return Response(
            FeedingStatsResponseSerializer(data).data, status=status.HTTP_200_OK
        )

    @action(detail=True, methods=["get"], url_path="today-summary")
    def today_summary(self, request, pk=None):
        """Get today's totals, the all-time average and the latest feeding."""
        baby = self.get_baby(pk)

        now = timezone.localtime()
        cache_key = build_cache_key(
            "today-summary", baby.pk, now.strftime(MINUTE_STAMP_FORMAT)
        )
        data = self._get_cached_data(
            cache_key,
            get_today_summary,
            baby.pk,
            cache_ttl=settings.TODAY_SUMMARY_CACHE_TTL,
            now=now,
        )
        return Response(
            TodaySummaryResponseSerializer(data).data, status=status.HTTP_200_OK
        )
