"""Test suite for analytics endpoints.

Tests data aggregation through the API, caching behavior, cache
invalidation and error handling.
"""

from datetime import date, datetime
from datetime import timezone as dt_timezone
from unittest.mock import patch
from uuid import uuid4
from zoneinfo import ZoneInfo

from django.core.cache import cache
from django.test import TestCase
from django.utils.dateparse import parse_datetime
from rest_framework import status
from rest_framework.test import APITestCase

from babies.models import Baby
from feedings.models import FeedingRecord

from .cache import build_cache_key, get_cache_version, invalidate_baby_analytics
from .utils import get_feeding_stats, get_today_summary

ISTANBUL = ZoneInfo("Europe/Istanbul")

# 14:30 on Sunday 5 January 2025 in Istanbul
FIXED_NOW = datetime(2025, 1, 5, 11, 30, tzinfo=dt_timezone.utc)


def local(day, hour, minute=0):
    return datetime(2025, 1, day, hour, minute, tzinfo=ISTANBUL)


def stats_url(baby_id):
    return f"/api/v1/analytics/babies/{baby_id}/feeding-stats/"


def summary_url(baby_id):
    return f"/api/v1/analytics/babies/{baby_id}/today-summary/"


def by_label(buckets):
    return {bucket["label"]: bucket for bucket in buckets}


@patch("django.utils.timezone.now", return_value=FIXED_NOW)
class FeedingStatsAPITests(APITestCase):
    """Tests for GET /analytics/babies/{id}/feeding-stats/."""

    def setUp(self):
        cache.clear()
        self.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))
        self.other = Baby.objects.create(name="Can", birth_date=date(2024, 11, 1))

    def test_empty_baby(self, mock_now):
        response = self.client.get(stats_url(self.baby.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data["baby_id"], str(self.baby.pk))
        self.assertEqual(data["locale"], "tr")
        self.assertEqual(len(data["hourly"]), 24)
        self.assertEqual(len(data["daily"]), 7)
        self.assertEqual(len(data["weekly"]), 4)
        self.assertTrue(all(b["total_amount"] == 0 for b in data["hourly"]))
        self.assertEqual(
            data["summary"],
            {
                "total_today": 0,
                "count_today": 0,
                "avg_amount": 0,
                "last_feeding": None,
                "last_feeding_id": None,
            },
        )

    def test_rollups_and_summary(self, mock_now):
        FeedingRecord.objects.create(baby=self.baby, feeding_time=local(5, 8), amount=100)
        latest = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=local(5, 9), amount=150
        )
        FeedingRecord.objects.create(baby=self.other, feeding_time=local(5, 9), amount=400)

        data = self.client.get(stats_url(self.baby.pk)).json()

        daily = by_label(data["daily"])
        self.assertEqual(daily["05 Oca"]["total_amount"], 250)
        self.assertEqual(daily["05 Oca"]["count"], 2)
        hourly = by_label(data["hourly"])
        self.assertEqual(hourly["08:00"]["total_amount"], 100)
        self.assertEqual(hourly["09:00"]["total_amount"], 150)
        self.assertEqual(data["weekly"][3], {"label": "Hafta 4", "total_amount": 250, "count": 2})

        summary = data["summary"]
        self.assertEqual(summary["total_today"], 250)
        self.assertEqual(summary["count_today"], 2)
        self.assertEqual(summary["avg_amount"], 125)
        self.assertEqual(parse_datetime(summary["last_feeding"]), local(5, 9))
        self.assertEqual(summary["last_feeding_id"], str(latest.pk))

    def test_record_just_ahead_of_clock_counted_everywhere(self, mock_now):
        FeedingRecord.objects.create(baby=self.baby, feeding_time=local(5, 13, 30), amount=100)
        FeedingRecord.objects.create(
            baby=self.baby, feeding_time=local(5, 14, 33), amount=150
        )

        data = self.client.get(stats_url(self.baby.pk)).json()

        self.assertEqual(data["summary"]["total_today"], 250)
        self.assertEqual(data["daily"][-1]["total_amount"], 250)
        self.assertEqual(data["hourly"][-1]["total_amount"], 150)

    def test_weekly_labels(self, mock_now):
        data = self.client.get(stats_url(self.baby.pk)).json()
        self.assertEqual(
            [b["label"] for b in data["weekly"]],
            ["Hafta 1", "Hafta 2", "Hafta 3", "Hafta 4"],
        )

    def test_daily_labels_are_oldest_first(self, mock_now):
        data = self.client.get(stats_url(self.baby.pk)).json()
        self.assertEqual(data["daily"][0]["label"], "30 Ara")
        self.assertEqual(data["daily"][-1]["label"], "05 Oca")
        self.assertEqual(data["hourly"][-1]["label"], "14:00")

    def test_english_locale(self, mock_now):
        response = self.client.get(stats_url(self.baby.pk), {"locale": "en"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data["locale"], "en")
        self.assertEqual(data["daily"][-1]["label"], "05 Jan")

    def test_invalid_locale(self, mock_now):
        response = self.client.get(stats_url(self.baby.pk), {"locale": "xx"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("locale", response.data)

    def test_baby_not_found(self, mock_now):
        response = self.client.get(stats_url(uuid4()))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_response_is_cached(self, mock_now):
        self.client.get(stats_url(self.baby.pk))
        with patch("analytics.views.get_feeding_stats") as compute:
            response = self.client.get(stats_url(self.baby.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        compute.assert_not_called()

    def test_new_record_visible_after_create(self, mock_now):
        self.client.get(stats_url(self.baby.pk))

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                f"/api/v1/babies/{self.baby.pk}/feeding-records/",
                {"feeding_time": "2025-01-05T10:00:00+03:00", "amount": 120},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        data = self.client.get(stats_url(self.baby.pk)).json()
        self.assertEqual(data["summary"]["count_today"], 1)
        self.assertEqual(by_label(data["hourly"])["10:00"]["total_amount"], 120)

    def test_deleted_record_disappears(self, mock_now):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=local(5, 8), amount=100
        )
        self.assertEqual(
            self.client.get(stats_url(self.baby.pk)).json()["summary"]["count_today"], 1
        )

        with self.captureOnCommitCallbacks(execute=True):
            self.client.delete(f"/api/v1/feeding-records/{record.pk}/")

        data = self.client.get(stats_url(self.baby.pk)).json()
        self.assertEqual(data["summary"]["count_today"], 0)


@patch("django.utils.timezone.now", return_value=FIXED_NOW)
class TodaySummaryAPITests(APITestCase):
    """Tests for GET /analytics/babies/{id}/today-summary/."""

    def setUp(self):
        cache.clear()
        self.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))

    def test_summary(self, mock_now):
        FeedingRecord.objects.create(baby=self.baby, feeding_time=local(5, 8), amount=100)
        FeedingRecord.objects.create(baby=self.baby, feeding_time=local(5, 9), amount=150)
        FeedingRecord.objects.create(baby=self.baby, feeding_time=local(4, 9), amount=50)

        response = self.client.get(summary_url(self.baby.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data["baby_id"], str(self.baby.pk))
        self.assertEqual(data["period"], "2025-01-05")
        self.assertEqual(data["total_today"], 250)
        self.assertEqual(data["count_today"], 2)
        self.assertEqual(data["avg_amount"], 100)

    def test_empty(self, mock_now):
        data = self.client.get(summary_url(self.baby.pk)).json()
        self.assertEqual(data["total_today"], 0)
        self.assertEqual(data["count_today"], 0)
        self.assertEqual(data["avg_amount"], 0)
        self.assertIsNone(data["last_feeding"])

    def test_baby_not_found(self, mock_now):
        response = self.client.get(summary_url(uuid4()))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AnalyticsUtilsTests(TestCase):
    """Tests for the database-facing helpers."""

    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))
        FeedingRecord.objects.create(baby=cls.baby, feeding_time=local(5, 8), amount=90)

    def test_get_feeding_stats_with_explicit_now(self):
        stats = get_feeding_stats(self.baby.pk, now=FIXED_NOW, locale="tr")
        self.assertEqual(stats["baby_id"], self.baby.pk)
        self.assertEqual(stats["locale"], "tr")
        self.assertEqual(stats["summary"]["total_today"], 90)
        self.assertEqual(stats["last_updated"], "2025-01-05T14:30:00+03:00")

    def test_get_today_summary_next_day(self):
        next_day = datetime(2025, 1, 6, 9, 0, tzinfo=ISTANBUL)
        summary = get_today_summary(self.baby.pk, now=next_day)
        self.assertEqual(summary["period"], "2025-01-06")
        self.assertEqual(summary["total_today"], 0)
        self.assertEqual(summary["avg_amount"], 90)


class CacheInvalidationTests(TestCase):
    """Tests for versioned analytics cache keys."""

    @classmethod
    def setUpTestData(cls):
        cls.baby = Baby.objects.create(name="Ela", birth_date=date(2024, 12, 1))
        cls.other = Baby.objects.create(name="Can", birth_date=date(2024, 11, 1))

    def setUp(self):
        cache.clear()

    def test_cache_key_stable_without_writes(self):
        self.assertEqual(
            build_cache_key("feeding-stats", self.baby.pk, "tr"),
            build_cache_key("feeding-stats", self.baby.pk, "tr"),
        )

    def test_invalidate_changes_key(self):
        before = build_cache_key("feeding-stats", self.baby.pk, "tr")
        with self.captureOnCommitCallbacks(execute=True):
            invalidate_baby_analytics(self.baby.pk)
        self.assertNotEqual(build_cache_key("feeding-stats", self.baby.pk, "tr"), before)

    def test_invalidation_waits_for_commit(self):
        version = get_cache_version(self.baby.pk)
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            invalidate_baby_analytics(self.baby.pk)
        self.assertEqual(len(callbacks), 1)
        self.assertEqual(get_cache_version(self.baby.pk), version)

    def test_save_invalidates(self):
        version = get_cache_version(self.baby.pk)
        with self.captureOnCommitCallbacks(execute=True):
            FeedingRecord.objects.create(
                baby=self.baby, feeding_time=local(5, 8), amount=100
            )
        self.assertNotEqual(get_cache_version(self.baby.pk), version)

    def test_delete_invalidates(self):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=local(5, 8), amount=100
        )
        version = get_cache_version(self.baby.pk)
        with self.captureOnCommitCallbacks(execute=True):
            record.delete()
        self.assertNotEqual(get_cache_version(self.baby.pk), version)

    def test_moving_record_invalidates_both_babies(self):
        record = FeedingRecord.objects.create(
            baby=self.baby, feeding_time=local(5, 8), amount=100
        )
        baby_version = get_cache_version(self.baby.pk)
        other_version = get_cache_version(self.other.pk)
        record.baby = self.other
        with self.captureOnCommitCallbacks(execute=True):
            record.save()
        self.assertNotEqual(get_cache_version(self.baby.pk), baby_version)
        self.assertNotEqual(get_cache_version(self.other.pk), other_version)

    def test_other_baby_untouched(self):
        version = get_cache_version(self.other.pk)
        with self.captureOnCommitCallbacks(execute=True):
            invalidate_baby_analytics(self.baby.pk)
        self.assertEqual(get_cache_version(self.other.pk), version)

    @patch("analytics.cache.cache")
    def test_cache_error_is_logged_not_raised(self, mock_cache):
        mock_cache.set.side_effect = ConnectionError("redis down")
        with self.assertLogs("analytics.cache", level="ERROR"):
            with self.captureOnCommitCallbacks(execute=True):
                invalidate_baby_analytics(self.baby.pk)
