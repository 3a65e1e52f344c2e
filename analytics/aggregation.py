"""In-memory aggregation of feeding records.

Folds a snapshot of feeding records into the bucket skeletons from
:mod:`analytics.buckets` and computes the dashboard's summary numbers. All
functions are pure: they read the records, never mutate them, and take the
reference instant ``now`` as an argument.

Records only need the attributes ``id``, ``baby_id``, ``feeding_time`` and
``amount``, so model instances and plain objects both work.
"""

from __future__ import annotations

import numbers
from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable

from .buckets import (
    DEFAULT_LOCALE,
    InvalidFeedingRecord,
    Skeleton,
    daily_plan,
    hourly_plan,
    to_local,
    weekly_plan,
)


@dataclass(frozen=True)
class DailySummary:
    """Same-day totals plus all-time average and latest feeding for one baby."""

    total_today: int | float = 0
    count_today: int = 0
    avg_amount: int = 0
    last_feeding: datetime | None = None
    last_feeding_id: str | None = None

    def as_dict(self) -> dict:
        return asdict(self)


def _amount(record: Any) -> int | float:
    amount = record.amount
    if isinstance(amount, bool) or not isinstance(amount, (numbers.Real, Decimal)):
        raise InvalidFeedingRecord(
            f"amount must be a number, got {type(amount).__name__}"
        )
    return amount


def _baby_id(baby: Any) -> str:
    """Accept a Baby instance or a raw id."""
    return str(getattr(baby, "pk", baby))


def records_for_baby(records: Iterable[Any], baby: Any) -> list:
    """Return the records belonging to baby, in their original order."""
    baby_id = _baby_id(baby)
    return [record for record in records if str(record.baby_id) == baby_id]


def aggregate(
    records: Iterable[Any],
    skeleton: Skeleton,
    bucket_key: Callable[[datetime], str],
    now: datetime,
    window_start: datetime,
    window_end: datetime | None = None,
) -> Skeleton:
    """Fold records into a copy of skeleton.

    Records with ``window_start <= feeding_time < window_end`` are mapped to
    a label with bucket_key; the matching bucket's total and count are
    incremented. A label that matches no bucket is dropped without error. The
    skeleton passed in is left untouched.

    Args:
        records: Feeding records in any order (may be empty)
        skeleton: Ordered buckets to fill
        bucket_key: Maps a feeding time to a bucket label, using the same
            truncation and formatting as the skeleton's builder
        now: Reference instant; record times are read on its wall clock
        window_start: Inclusive lower bound of the window
        window_end: Exclusive upper bound, the end of the newest bucket;
            None leaves the window open-ended

    Returns:
        Populated Skeleton in the original bucket order

    Raises:
        InvalidFeedingRecord: A record has a malformed feeding_time or amount
    """
    populated = skeleton.copy()
    for record in records:
        feeding_time = to_local(record.feeding_time, now)
        amount = _amount(record)
        if feeding_time < window_start:
            continue
        if window_end is not None and feeding_time >= window_end:
            continue
        bucket = populated.get(bucket_key(feeding_time))
        if bucket is None:
            continue
        bucket.total_amount += amount
        bucket.count += 1
    return populated


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_daily_summary(
    records: Iterable[Any],
    baby: Any,
    now: datetime,
) -> DailySummary:
    """Summarize one baby's feedings relative to now.

    - total_today / count_today: records on now's calendar day
    - avg_amount: mean amount over all of the baby's records, rounded half
      up to an integer; 0 when the baby has no records
    - last_feeding: latest feeding_time; among records sharing it, the one
      with the smallest id (as a string) is reported in last_feeding_id
    """
    baby_records = records_for_baby(records, baby)
    if not baby_records:
        return DailySummary()

    today = now.date()
    total_today = 0
    count_today = 0
    total_all = Decimal(0)
    latest = None
    latest_time = None

    for record in baby_records:
        feeding_time = to_local(record.feeding_time, now)
        amount = _amount(record)
        total_all += Decimal(str(amount))
        if feeding_time.date() == today:
            total_today += amount
            count_today += 1
        if (
            latest is None
            or feeding_time > latest_time
            or (feeding_time == latest_time and str(record.id) < str(latest.id))
        ):
            latest = record
            latest_time = feeding_time

    return DailySummary(
        total_today=total_today,
        count_today=count_today,
        avg_amount=_round_half_up(total_all / len(baby_records)),
        last_feeding=latest.feeding_time,
        last_feeding_id=str(latest.id),
    )


def build_feeding_stats(
    records: Iterable[Any],
    baby: Any,
    now: datetime,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """Compute every rollup and the summary for one baby.

    Returns:
        Dict with hourly (24), daily (7) and weekly (4) bucket lists and the
        summary dict
    """
    baby_records = records_for_baby(records, baby)

    rollups = {}
    for name, plan in (
        ("hourly", hourly_plan(now)),
        ("daily", daily_plan(now, locale)),
        ("weekly", weekly_plan(now)),
    ):
        populated = aggregate(
            baby_records,
            plan.skeleton,
            plan.bucket_key,
            now,
            plan.window_start,
            plan.window_end,
        )
        rollups[name] = populated.as_list()

    return {
        **rollups,
        "summary": compute_daily_summary(baby_records, baby, now).as_dict(),
    }
