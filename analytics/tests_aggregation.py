"""Tests for folding feeding records into rollups and the daily summary."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal
from itertools import count
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from .aggregation import (
    DailySummary,
    aggregate,
    build_feeding_stats,
    compute_daily_summary,
    records_for_baby,
)
from .buckets import InvalidFeedingRecord, daily_plan, hourly_plan, weekly_plan

ISTANBUL = ZoneInfo("Europe/Istanbul")
NOW = datetime(2025, 1, 5, 14, 30, tzinfo=ISTANBUL)

BABY = "baby-a"
OTHER_BABY = "baby-b"

_ids = count(1)


@dataclass
class Record:
    feeding_time: datetime
    amount: object
    baby_id: str = BABY
    id: str = field(default_factory=lambda: f"rec-{next(_ids):05d}")


def at(day, hour, minute=0):
    return datetime(2025, 1, day, hour, minute, tzinfo=ISTANBUL)


def totals(buckets):
    return {bucket["label"]: bucket["total_amount"] for bucket in buckets}


class AggregateTests(SimpleTestCase):
    """Tests for aggregate()."""

    def fold(self, plan, records):
        return aggregate(
            records,
            plan.skeleton,
            plan.bucket_key,
            NOW,
            plan.window_start,
            plan.window_end,
        )

    def test_empty_records_keep_zero_buckets(self):
        plan = hourly_plan(NOW)
        self.assertEqual(self.fold(plan, []), plan.skeleton)

    def test_hourly_bucketing(self):
        records = [
            Record(at(5, 14, 5), 50),
            Record(at(5, 14, 30), 100),
            Record(at(4, 15, 10), 80),
        ]
        result = self.fold(hourly_plan(NOW), records)
        self.assertEqual(result.get("14:00").total_amount, 150)
        self.assertEqual(result.get("14:00").count, 2)
        self.assertEqual(result.get("15:00").total_amount, 80)

    def test_hourly_drops_record_before_window(self):
        # 14:50 yesterday has the same label as the current hour
        result = self.fold(hourly_plan(NOW), [Record(at(4, 14, 50), 70)])
        self.assertEqual(result.get("14:00").total_amount, 0)
        self.assertEqual(sum(b.count for b in result), 0)

    def test_counts_record_later_in_current_hour(self):
        result = self.fold(hourly_plan(NOW), [Record(at(5, 14, 33), 70)])
        self.assertEqual(result.get("14:00").total_amount, 70)

    def test_drops_records_after_current_hour(self):
        # 15:00 today would otherwise land in the oldest bucket, also "15:00"
        records = [Record(at(5, 15, 0), 70), Record(at(5, 15, 10), 80)]
        result = self.fold(hourly_plan(NOW), records)
        self.assertEqual(sum(b.count for b in result), 0)

    def test_daily_counts_rest_of_today_only(self):
        records = [Record(at(5, 23, 59), 60), Record(at(6, 0, 1), 90)]
        result = self.fold(daily_plan(NOW, "tr"), records)
        self.assertEqual(result.get("05 Oca").total_amount, 60)
        self.assertEqual(sum(b.count for b in result), 1)

    def test_weekly_stops_at_end_of_current_week(self):
        records = [Record(at(5, 23, 0), 60), Record(at(6, 0, 30), 90)]
        result = self.fold(weekly_plan(NOW), records)
        self.assertEqual(result.get("Hafta 4").total_amount, 60)
        self.assertEqual(sum(b.count for b in result), 1)

    def test_open_ended_window(self):
        plan = daily_plan(NOW, "tr")
        result = aggregate(
            [Record(at(5, 23, 0), 60)],
            plan.skeleton,
            plan.bucket_key,
            NOW,
            plan.window_start,
        )
        self.assertEqual(result.get("05 Oca").total_amount, 60)

    def test_daily_bucketing(self):
        records = [
            Record(at(5, 8), 100),
            Record(at(5, 9), 150),
            Record(at(1, 23, 59), 40),
        ]
        result = self.fold(daily_plan(NOW, "tr"), records)
        self.assertEqual(result.get("05 Oca").total_amount, 250)
        self.assertEqual(result.get("05 Oca").count, 2)
        self.assertEqual(result.get("01 Oca").total_amount, 40)

    def test_daily_drops_record_before_window(self):
        old = Record(datetime(2024, 12, 29, 23, 0, tzinfo=ISTANBUL), 60)
        result = self.fold(daily_plan(NOW, "tr"), [old])
        self.assertEqual(sum(b.count for b in result), 0)

    def test_weekly_bucketing(self):
        records = [
            Record(at(5, 10), 100),
            Record(datetime(2024, 12, 25, 10, 0, tzinfo=ISTANBUL), 90),
            Record(datetime(2024, 12, 9, 10, 0, tzinfo=ISTANBUL), 30),
            Record(datetime(2024, 12, 8, 10, 0, tzinfo=ISTANBUL), 999),
        ]
        result = self.fold(weekly_plan(NOW), records)
        self.assertEqual(
            [b.total_amount for b in result],
            [30, 0, 90, 100],
        )

    def test_utc_records_use_local_wall_clock(self):
        # 21:15 UTC on the 4th is 00:15 on the 5th in Istanbul
        record = Record(datetime(2025, 1, 4, 21, 15, tzinfo=dt_timezone.utc), 60)
        result = self.fold(daily_plan(NOW, "tr"), [record])
        self.assertEqual(result.get("05 Oca").total_amount, 60)

    def test_sum_never_exceeds_input(self):
        records = [
            Record(NOW - timedelta(hours=h), 10 + h) for h in range(0, 24 * 40, 7)
        ]
        input_total = sum(r.amount for r in records)
        for plan in (hourly_plan(NOW), daily_plan(NOW), weekly_plan(NOW)):
            result = self.fold(plan, records)
            self.assertLessEqual(sum(b.total_amount for b in result), input_total)

    def test_bucket_count_independent_of_input_size(self):
        records = [Record(NOW - timedelta(minutes=m), 100) for m in range(10000)]
        self.assertEqual(len(self.fold(hourly_plan(NOW), records)), 24)
        self.assertEqual(len(self.fold(daily_plan(NOW), records)), 7)
        self.assertEqual(len(self.fold(weekly_plan(NOW), records)), 4)

    def test_idempotent_and_skeleton_untouched(self):
        plan = daily_plan(NOW, "tr")
        records = [Record(at(5, 8), 100), Record(at(3, 8), 120)]
        first = self.fold(plan, records)
        second = self.fold(plan, records)
        self.assertEqual(first, second)
        self.assertEqual(sum(b.total_amount for b in plan.skeleton), 0)

    def test_order_of_records_does_not_matter(self):
        plan = hourly_plan(NOW)
        records = [Record(at(5, h), 10 * h) for h in range(1, 14)]
        self.assertEqual(
            self.fold(plan, records), self.fold(plan, list(reversed(records)))
        )

    def test_preserves_bucket_order(self):
        plan = hourly_plan(NOW)
        result = self.fold(plan, [Record(at(5, 3), 10)])
        self.assertEqual(result.labels, plan.skeleton.labels)

    def test_invalid_feeding_time_raises(self):
        with self.assertRaises(InvalidFeedingRecord):
            self.fold(hourly_plan(NOW), [Record("2025-01-05 10:00", 100)])

    def test_naive_feeding_time_raises(self):
        with self.assertRaises(InvalidFeedingRecord):
            self.fold(hourly_plan(NOW), [Record(datetime(2025, 1, 5, 10, 0), 100)])

    def test_non_numeric_amount_raises(self):
        with self.assertRaises(InvalidFeedingRecord):
            self.fold(hourly_plan(NOW), [Record(at(5, 10), "100")])

    def test_boolean_amount_raises(self):
        with self.assertRaises(InvalidFeedingRecord):
            self.fold(hourly_plan(NOW), [Record(at(5, 10), True)])


class DailySummaryTests(SimpleTestCase):
    """Tests for compute_daily_summary()."""

    def test_no_records(self):
        summary = compute_daily_summary([], BABY, NOW)
        self.assertEqual(summary, DailySummary())
        self.assertEqual(summary.total_today, 0)
        self.assertEqual(summary.count_today, 0)
        self.assertEqual(summary.avg_amount, 0)
        self.assertIsNone(summary.last_feeding)

    def test_two_feedings_today(self):
        first = Record(at(5, 8), 100)
        second = Record(at(5, 9), 150)
        summary = compute_daily_summary([first, second], BABY, NOW)
        self.assertEqual(summary.total_today, 250)
        self.assertEqual(summary.count_today, 2)
        self.assertEqual(summary.avg_amount, 125)
        self.assertEqual(summary.last_feeding, second.feeding_time)
        self.assertEqual(summary.last_feeding_id, second.id)

    def test_average_covers_all_days(self):
        records = [Record(at(5, 8), 100), Record(at(5, 9), 150), Record(at(2, 9), 50)]
        summary = compute_daily_summary(records, BABY, NOW)
        self.assertEqual(summary.total_today, 250)
        self.assertEqual(summary.count_today, 2)
        self.assertEqual(summary.avg_amount, 100)

    def test_only_earlier_days(self):
        summary = compute_daily_summary([Record(at(3, 9), 90)], BABY, NOW)
        self.assertEqual(summary.total_today, 0)
        self.assertEqual(summary.count_today, 0)
        self.assertEqual(summary.avg_amount, 90)

    def test_average_rounds_half_up(self):
        records = [Record(at(5, 8), 100), Record(at(5, 9), 101)]
        self.assertEqual(compute_daily_summary(records, BABY, NOW).avg_amount, 101)

    def test_decimal_amounts(self):
        records = [Record(at(5, 8), Decimal("100")), Record(at(5, 9), Decimal("50"))]
        self.assertEqual(compute_daily_summary(records, BABY, NOW).avg_amount, 75)

    def test_filters_other_babies(self):
        records = [Record(at(5, 8), 100), Record(at(5, 10), 400, baby_id=OTHER_BABY)]
        summary = compute_daily_summary(records, BABY, NOW)
        self.assertEqual(summary.total_today, 100)
        self.assertEqual(summary.avg_amount, 100)

    def test_midnight_uses_local_date(self):
        now = datetime(2025, 1, 5, 0, 30, tzinfo=ISTANBUL)
        records = [
            Record(datetime(2025, 1, 4, 23, 59, tzinfo=ISTANBUL), 70),
            Record(datetime(2025, 1, 4, 21, 15, tzinfo=dt_timezone.utc), 80),
        ]
        summary = compute_daily_summary(records, BABY, now)
        self.assertEqual(summary.total_today, 80)
        self.assertEqual(summary.count_today, 1)

    def test_last_feeding_tie_prefers_smallest_id(self):
        records = [
            Record(at(5, 9), 100, id="b"),
            Record(at(5, 9), 120, id="a"),
            Record(at(5, 8), 90, id="0"),
        ]
        summary = compute_daily_summary(records, BABY, NOW)
        self.assertEqual(summary.last_feeding_id, "a")

    def test_accepts_baby_instance(self):
        class FakeBaby:
            pk = BABY

        summary = compute_daily_summary([Record(at(5, 8), 100)], FakeBaby(), NOW)
        self.assertEqual(summary.count_today, 1)

    def test_as_dict(self):
        self.assertEqual(
            DailySummary().as_dict(),
            {
                "total_today": 0,
                "count_today": 0,
                "avg_amount": 0,
                "last_feeding": None,
                "last_feeding_id": None,
            },
        )


class BuildFeedingStatsTests(SimpleTestCase):
    """Tests for build_feeding_stats()."""

    def test_shapes(self):
        stats = build_feeding_stats([], BABY, NOW, "tr")
        self.assertEqual(len(stats["hourly"]), 24)
        self.assertEqual(len(stats["daily"]), 7)
        self.assertEqual(len(stats["weekly"]), 4)
        self.assertEqual(
            [b["label"] for b in stats["weekly"]],
            ["Hafta 1", "Hafta 2", "Hafta 3", "Hafta 4"],
        )
        self.assertEqual(stats["summary"]["count_today"], 0)

    def test_example_day(self):
        records = [Record(at(5, 8), 100), Record(at(5, 9), 150)]
        stats = build_feeding_stats(records, BABY, NOW, "tr")
        self.assertEqual(totals(stats["daily"])["05 Oca"], 250)
        self.assertEqual(totals(stats["hourly"])["08:00"], 100)
        self.assertEqual(totals(stats["hourly"])["09:00"], 150)
        self.assertEqual(stats["weekly"][-1]["total_amount"], 250)
        self.assertEqual(stats["weekly"][-1]["count"], 2)
        self.assertEqual(stats["summary"]["avg_amount"], 125)

    def test_summary_matches_today_bucket_with_slightly_future_record(self):
        records = [
            Record(NOW - timedelta(hours=1), 100),
            Record(NOW + timedelta(minutes=3), 150),
        ]
        stats = build_feeding_stats(records, BABY, NOW, "tr")
        self.assertEqual(stats["summary"]["total_today"], 250)
        self.assertEqual(stats["daily"][-1]["total_amount"], 250)
        self.assertEqual(
            stats["summary"]["count_today"], stats["daily"][-1]["count"]
        )
        self.assertEqual(stats["hourly"][-1]["total_amount"], 150)
        self.assertEqual(stats["weekly"][-1]["total_amount"], 250)

    def test_other_baby_records_ignored(self):
        records = [Record(at(5, 8), 100, baby_id=OTHER_BABY)]
        stats = build_feeding_stats(records, BABY, NOW, "tr")
        self.assertEqual(sum(b["count"] for b in stats["daily"]), 0)

    def test_locale_changes_only_day_labels(self):
        tr = build_feeding_stats([], BABY, NOW, "tr")
        en = build_feeding_stats([], BABY, NOW, "en")
        self.assertEqual(tr["hourly"], en["hourly"])
        self.assertEqual(tr["weekly"], en["weekly"])
        self.assertEqual(en["daily"][-1]["label"], "05 Jan")

    def test_records_for_baby_keeps_order(self):
        a1 = Record(at(5, 8), 1)
        b1 = Record(at(5, 9), 2, baby_id=OTHER_BABY)
        a2 = Record(at(5, 7), 3)
        self.assertEqual(records_for_baby([a1, b1, a2], BABY), [a1, a2])
