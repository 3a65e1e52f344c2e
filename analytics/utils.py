"""Database-facing helpers for feeding statistics.

Loads a baby's feeding records as an immutable snapshot and hands them to the
pure aggregation code. "Now" is read once per call (or passed in) and
expressed in the project's TIME_ZONE, whose wall clock defines the hour, day
and week buckets.
"""

import logging
from datetime import datetime
from typing import Any

from django.conf import settings
from django.utils import timezone

from feedings.models import FeedingRecord

from .aggregation import build_feeding_stats, compute_daily_summary

logger = logging.getLogger(__name__)


def _reference_now(now: datetime | None = None) -> datetime:
    """Return now (or the current time) in the active timezone."""
    return timezone.localtime(now if now is not None else timezone.now())


def get_baby_records(baby_id) -> list[FeedingRecord]:
    """Fetch the fields statistics need for every record of a baby.

    Args:
        baby_id: The baby's ID

    Returns:
        List of FeedingRecord instances, newest first
    """
    return list(
        FeedingRecord.objects.filter(baby_id=baby_id).only(
            "id", "baby_id", "feeding_time", "amount"
        )
    )


def get_feeding_stats(
    baby_id,
    now: datetime | None = None,
    locale: str | None = None,
) -> dict[str, Any]:
    """Get hourly, daily and weekly rollups plus today's summary for a baby.

    Args:
        baby_id: The baby's ID
        now: Reference instant (defaults to the current time)
        locale: Language code for day labels (defaults to FEEDING_STATS_LOCALE)

    Returns:
        Dict with baby_id, locale, hourly, daily, weekly, summary, last_updated
    """
    now = _reference_now(now)
    locale = locale or settings.FEEDING_STATS_LOCALE
    records = get_baby_records(baby_id)

    logger.debug(
        "Computing feeding stats",
        extra={"baby_id": str(baby_id), "record_count": len(records)},
    )

    stats = build_feeding_stats(records, baby_id, now, locale)
    return {
        "baby_id": baby_id,
        "locale": locale,
        **stats,
        "last_updated": now.isoformat(),
    }


def get_today_summary(baby_id, now: datetime | None = None) -> dict[str, Any]:
    """Get today's totals, the all-time average and the latest feeding for a baby.

    Args:
        baby_id: The baby's ID
        now: Reference instant (defaults to the current time)

    Returns:
        Dict with baby_id, period, the summary fields and last_updated
    """
    now = _reference_now(now)
    summary = compute_daily_summary(get_baby_records(baby_id), baby_id, now)
    return {
        "baby_id": baby_id,
        "period": now.date().isoformat(),
        **summary.as_dict(),
        "last_updated": now.isoformat(),
    }
