"""Tests for bucket skeletons, labels and window boundaries."""

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from .buckets import (
    Bucket,
    InvalidFeedingRecord,
    Skeleton,
    build_daily_skeleton,
    build_hourly_skeleton,
    build_weekly_skeleton,
    daily_key,
    daily_window_end,
    daily_window_start,
    format_day_label,
    hourly_key,
    hourly_window_end,
    hourly_window_start,
    start_of_week,
    to_local,
    weekly_key,
    weekly_window_end,
    weekly_window_start,
)

ISTANBUL = ZoneInfo("Europe/Istanbul")

# Sunday afternoon
NOW = datetime(2025, 1, 5, 14, 30, tzinfo=ISTANBUL)


class SkeletonTests(SimpleTestCase):
    """Tests for the ordered bucket container."""

    def test_preserves_construction_order(self):
        skeleton = Skeleton(["c", "a", "b"])
        self.assertEqual(skeleton.labels, ["c", "a", "b"])

    def test_buckets_start_empty(self):
        skeleton = Skeleton(["a", "b"])
        for bucket in skeleton:
            self.assertEqual(bucket.total_amount, 0)
            self.assertEqual(bucket.count, 0)

    def test_get_unknown_label_returns_none(self):
        self.assertIsNone(Skeleton(["a"]).get("z"))

    def test_copy_is_independent(self):
        skeleton = Skeleton(["a"])
        clone = skeleton.copy()
        clone.get("a").total_amount = 100
        self.assertEqual(skeleton.get("a").total_amount, 0)

    def test_duplicate_label_resolves_to_newest_bucket(self):
        skeleton = Skeleton(["01:00", "02:00", "01:00"])
        self.assertEqual(len(skeleton), 3)
        skeleton.get("01:00").count = 1
        self.assertEqual([b.count for b in skeleton], [0, 0, 1])

    def test_as_list(self):
        self.assertEqual(
            Skeleton(["a"]).as_list(),
            [{"label": "a", "total_amount": 0, "count": 0}],
        )

    def test_equality(self):
        self.assertEqual(Skeleton(["a", "b"]), Skeleton(["a", "b"]))
        self.assertNotEqual(Skeleton(["a", "b"]), Skeleton(["b", "a"]))
        self.assertEqual(Bucket("a"), Bucket("a", 0, 0))


class HourlySkeletonTests(SimpleTestCase):
    def test_has_24_buckets(self):
        self.assertEqual(len(build_hourly_skeleton(NOW)), 24)

    def test_labels_end_on_current_hour(self):
        labels = build_hourly_skeleton(NOW).labels
        self.assertEqual(labels[0], "15:00")
        self.assertEqual(labels[-1], "14:00")
        self.assertEqual(labels, [f"{(15 + i) % 24:02d}:00" for i in range(24)])

    def test_labels_are_unique(self):
        labels = build_hourly_skeleton(NOW).labels
        self.assertEqual(len(set(labels)), 24)

    def test_window_starts_at_oldest_hour(self):
        self.assertEqual(
            hourly_window_start(NOW), datetime(2025, 1, 4, 15, 0, tzinfo=ISTANBUL)
        )

    def test_window_ends_after_current_hour(self):
        self.assertEqual(
            hourly_window_end(NOW), datetime(2025, 1, 5, 15, 0, tzinfo=ISTANBUL)
        )

    def test_dst_end_repeats_an_hour(self):
        now = datetime(2025, 10, 26, 12, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        skeleton = build_hourly_skeleton(now)
        labels = skeleton.labels
        self.assertEqual(len(labels), 24)
        self.assertEqual(labels.count("02:00"), 2)
        self.assertNotIn("13:00", labels)
        # Records for the repeated hour fill the newer bucket only
        newer = len(labels) - 1 - labels[::-1].index("02:00")
        skeleton.get("02:00").count = 1
        self.assertEqual([i for i, b in enumerate(skeleton) if b.count], [newer])

    def test_key_truncates_to_hour(self):
        key = hourly_key(NOW)
        self.assertEqual(key(datetime(2025, 1, 5, 9, 59, 59, tzinfo=ISTANBUL)), "09:00")

    def test_key_converts_utc_to_local_wall_clock(self):
        key = hourly_key(NOW)
        # 06:15 UTC is 09:15 in Istanbul
        self.assertEqual(key(datetime(2025, 1, 5, 6, 15, tzinfo=dt_timezone.utc)), "09:00")

    def test_deterministic(self):
        self.assertEqual(build_hourly_skeleton(NOW), build_hourly_skeleton(NOW))


class DailySkeletonTests(SimpleTestCase):
    def test_has_7_buckets(self):
        self.assertEqual(len(build_daily_skeleton(NOW)), 7)

    def test_turkish_labels(self):
        self.assertEqual(
            build_daily_skeleton(NOW, "tr").labels,
            ["30 Ara", "31 Ara", "01 Oca", "02 Oca", "03 Oca", "04 Oca", "05 Oca"],
        )

    def test_english_labels(self):
        self.assertEqual(
            build_daily_skeleton(NOW, "en").labels,
            ["30 Dec", "31 Dec", "01 Jan", "02 Jan", "03 Jan", "04 Jan", "05 Jan"],
        )

    def test_format_day_label(self):
        self.assertEqual(format_day_label(date(2025, 1, 5), "tr"), "05 Oca")

    def test_window_starts_at_midnight_six_days_ago(self):
        self.assertEqual(
            daily_window_start(NOW), datetime(2024, 12, 30, 0, 0, tzinfo=ISTANBUL)
        )

    def test_window_ends_at_next_midnight(self):
        self.assertEqual(
            daily_window_end(NOW), datetime(2025, 1, 6, 0, 0, tzinfo=ISTANBUL)
        )

    def test_key_uses_local_date(self):
        key = daily_key(NOW, "tr")
        # 22:30 UTC on the 3rd is 01:30 on the 4th in Istanbul
        self.assertEqual(key(datetime(2025, 1, 3, 22, 30, tzinfo=dt_timezone.utc)), "04 Oca")

    def test_deterministic(self):
        self.assertEqual(build_daily_skeleton(NOW), build_daily_skeleton(NOW))


class WeeklySkeletonTests(SimpleTestCase):
    def test_labels(self):
        self.assertEqual(
            build_weekly_skeleton(NOW).labels,
            ["Hafta 1", "Hafta 2", "Hafta 3", "Hafta 4"],
        )

    def test_start_of_week_is_monday(self):
        self.assertEqual(start_of_week(date(2025, 1, 5)), date(2024, 12, 30))
        self.assertEqual(start_of_week(date(2024, 12, 30)), date(2024, 12, 30))

    def test_window_starts_three_mondays_before_current_week(self):
        self.assertEqual(
            weekly_window_start(NOW), datetime(2024, 12, 9, 0, 0, tzinfo=ISTANBUL)
        )

    def test_window_ends_at_next_monday(self):
        self.assertEqual(
            weekly_window_end(NOW), datetime(2025, 1, 6, 0, 0, tzinfo=ISTANBUL)
        )

    def test_key_positions(self):
        key = weekly_key(NOW)
        self.assertEqual(key(datetime(2025, 1, 5, 10, 0, tzinfo=ISTANBUL)), "Hafta 4")
        self.assertEqual(key(datetime(2024, 12, 30, 0, 0, tzinfo=ISTANBUL)), "Hafta 4")
        self.assertEqual(key(datetime(2024, 12, 29, 23, 59, tzinfo=ISTANBUL)), "Hafta 3")
        self.assertEqual(key(datetime(2024, 12, 9, 10, 0, tzinfo=ISTANBUL)), "Hafta 1")

    def test_key_outside_window_matches_no_bucket(self):
        key = weekly_key(NOW)
        skeleton = build_weekly_skeleton(NOW)
        self.assertIsNone(skeleton.get(key(datetime(2024, 12, 8, 10, 0, tzinfo=ISTANBUL))))

    def test_week_boundary_on_monday(self):
        monday = datetime(2025, 1, 6, 0, 30, tzinfo=ISTANBUL)
        key = weekly_key(monday)
        self.assertEqual(key(datetime(2025, 1, 5, 23, 0, tzinfo=ISTANBUL)), "Hafta 3")
        self.assertEqual(key(datetime(2025, 1, 6, 0, 10, tzinfo=ISTANBUL)), "Hafta 4")


class ToLocalTests(SimpleTestCase):
    def test_converts_to_now_timezone(self):
        local = to_local(datetime(2025, 1, 5, 0, 0, tzinfo=dt_timezone.utc), NOW)
        self.assertEqual(local.hour, 3)
        self.assertEqual(local.utcoffset(), timedelta(hours=3))

    def test_rejects_non_datetime(self):
        with self.assertRaises(InvalidFeedingRecord):
            to_local("2025-01-05T10:00:00", NOW)

    def test_rejects_naive_instant_with_aware_now(self):
        with self.assertRaises(InvalidFeedingRecord):
            to_local(datetime(2025, 1, 5, 10, 0), NOW)

    def test_naive_pair_is_returned_unchanged(self):
        naive = datetime(2025, 1, 5, 10, 0)
        self.assertEqual(to_local(naive, datetime(2025, 1, 5, 14, 30)), naive)
