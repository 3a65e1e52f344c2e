"""Bucket skeletons for the feeding charts.

Builds the ordered, zero-filled buckets that form the x-axis of the hourly
(last 24 hours), daily (last 7 days) and weekly (last 4 weeks) rollups, along
with the function that maps a feeding time onto a bucket label and the bounds
of each rollup's window. A window ends where its newest bucket ends, so a
feeding logged a little ahead of the clock still counts in the current bucket.

Every calculation is done on the wall clock of ``now``'s timezone: record
instants are converted into that zone before they are truncated. Weeks start
on Monday regardless of locale.

Nothing here reads the clock; ``now`` is always passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Iterable, Iterator, NamedTuple

from django.utils import dateformat, translation

HOURS_IN_WINDOW = 24
DAYS_IN_WINDOW = 7
WEEKS_IN_WINDOW = 4

# Monday, as returned by date.weekday()
WEEK_STARTS_ON = 0

HOUR_LABEL_FORMAT = "%H:00"
DAY_LABEL_FORMAT = "d M"
WEEK_LABEL_TEMPLATE = "Hafta {}"

DEFAULT_LOCALE = "tr"


class InvalidFeedingRecord(ValueError):
    """A record handed to the statistics code is malformed.

    Raised for feeding times that are not datetimes, feeding times whose
    naive/aware state differs from the reference instant, and non-numeric
    amounts. Records are validated when they are written, so this signals a
    programming error upstream rather than bad user input.
    """


@dataclass
class Bucket:
    """One time slot of a rollup."""

    label: str
    total_amount: int | float = 0
    count: int = 0

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "total_amount": self.total_amount,
            "count": self.count,
        }


class Skeleton:
    """Ordered buckets with a label index.

    Iteration order is the construction order (oldest bucket first), never
    the order of a hash map.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._buckets: list[Bucket] = []
        self._index: dict[str, int] = {}
        for label in labels:
            self._append(Bucket(label))

    def _append(self, bucket: Bucket) -> None:
        # A repeated label (the doubled hour when DST ends) resolves to the
        # newest bucket carrying it.
        self._index[bucket.label] = len(self._buckets)
        self._buckets.append(bucket)

    def get(self, label: str) -> Bucket | None:
        """Return the bucket for label, or None if the label is not in the rollup."""
        position = self._index.get(label)
        if position is None:
            return None
        return self._buckets[position]

    def copy(self) -> Skeleton:
        """Return an independent copy (buckets included)."""
        clone = Skeleton()
        for bucket in self._buckets:
            clone._append(replace(bucket))
        return clone

    @property
    def labels(self) -> list[str]:
        return [bucket.label for bucket in self._buckets]

    def as_list(self) -> list[dict]:
        return [bucket.as_dict() for bucket in self._buckets]

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Skeleton):
            return NotImplemented
        return self._buckets == other._buckets

    def __repr__(self) -> str:
        return f"Skeleton({self.labels!r})"


class RollupPlan(NamedTuple):
    """Everything the aggregator needs for one rollup."""

    skeleton: Skeleton
    bucket_key: Callable[[datetime], str]
    window_start: datetime
    window_end: datetime


def to_local(instant: datetime, now: datetime) -> datetime:
    """Express instant on the wall clock of now's timezone.

    Raises:
        InvalidFeedingRecord: instant is not a datetime, or only one of
            instant and now carries a timezone
    """
    if not isinstance(instant, datetime):
        raise InvalidFeedingRecord(
            f"feeding_time must be a datetime, got {type(instant).__name__}"
        )
    instant_is_aware = instant.utcoffset() is not None
    now_is_aware = now.utcoffset() is not None
    if instant_is_aware != now_is_aware:
        raise InvalidFeedingRecord(
            "feeding_time and now must both be timezone-aware or both be naive"
        )
    if now_is_aware:
        return instant.astimezone(now.tzinfo)
    return instant


def truncate_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)


def truncate_to_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(day: date) -> date:
    """Return the Monday on or before day."""
    return day - timedelta(days=(day.weekday() - WEEK_STARTS_ON) % 7)


def _midnight(day: date, now: datetime) -> datetime:
    """Midnight of day in now's timezone."""
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def _hours_before(now: datetime, hours: int) -> datetime:
    """Step back in absolute time, so DST changes do not skew the hour grid."""
    if now.utcoffset() is None:
        return now - timedelta(hours=hours)
    shifted = now.astimezone(timezone.utc) - timedelta(hours=hours)
    return shifted.astimezone(now.tzinfo)


def _hours_after(dt: datetime, hours: int) -> datetime:
    return _hours_before(dt, -hours)


# --- Locale boundary ---


def format_day_label(day: date, locale: str = DEFAULT_LOCALE) -> str:
    """Format a calendar day as a short day-and-month label.

    Month abbreviations come from Django's translation catalogues, e.g.
    ``05 Oca`` for ``tr`` and ``05 Jan`` for ``en``. This is the only
    locale-sensitive text in the rollups.
    """
    with translation.override(locale):
        return dateformat.format(day, DAY_LABEL_FORMAT)


def format_hour_label(dt: datetime) -> str:
    return truncate_to_hour(dt).strftime(HOUR_LABEL_FORMAT)


def format_week_label(position: int) -> str:
    """Label for a 1-based week position (4 is the current week)."""
    return WEEK_LABEL_TEMPLATE.format(position)


# --- Hourly ---


def build_hourly_skeleton(now: datetime) -> Skeleton:
    """24 hour buckets covering [now - 23h, now], oldest first.

    When DST ends the repeated wall-clock hour yields two buckets with the
    same label; only the newer one can receive records.
    """
    return Skeleton(
        format_hour_label(_hours_before(now, offset))
        for offset in range(HOURS_IN_WINDOW - 1, -1, -1)
    )


def hourly_window_start(now: datetime) -> datetime:
    """Start of the oldest hour bucket."""
    return truncate_to_hour(_hours_before(now, HOURS_IN_WINDOW - 1))


def hourly_window_end(now: datetime) -> datetime:
    """End of the current hour bucket (exclusive)."""
    return _hours_after(truncate_to_hour(now), 1)


def hourly_key(now: datetime) -> Callable[[datetime], str]:
    def key(feeding_time: datetime) -> str:
        return format_hour_label(to_local(feeding_time, now))

    return key


def hourly_plan(now: datetime) -> RollupPlan:
    return RollupPlan(
        build_hourly_skeleton(now),
        hourly_key(now),
        hourly_window_start(now),
        hourly_window_end(now),
    )


# --- Daily ---


def build_daily_skeleton(now: datetime, locale: str = DEFAULT_LOCALE) -> Skeleton:
    """7 calendar-day buckets ending on now's day, oldest first."""
    today = now.date()
    return Skeleton(
        format_day_label(today - timedelta(days=offset), locale)
        for offset in range(DAYS_IN_WINDOW - 1, -1, -1)
    )


def daily_window_start(now: datetime) -> datetime:
    """Midnight of the oldest day bucket."""
    return _midnight(now.date() - timedelta(days=DAYS_IN_WINDOW - 1), now)


def daily_window_end(now: datetime) -> datetime:
    """Midnight after now's day (exclusive)."""
    return _midnight(now.date() + timedelta(days=1), now)


def daily_key(now: datetime, locale: str = DEFAULT_LOCALE) -> Callable[[datetime], str]:
    def key(feeding_time: datetime) -> str:
        return format_day_label(to_local(feeding_time, now).date(), locale)

    return key


def daily_plan(now: datetime, locale: str = DEFAULT_LOCALE) -> RollupPlan:
    return RollupPlan(
        build_daily_skeleton(now, locale),
        daily_key(now, locale),
        daily_window_start(now),
        daily_window_end(now),
    )


# --- Weekly ---


def build_weekly_skeleton(now: datetime) -> Skeleton:
    """Hafta 1 .. Hafta 4; Hafta 4 is the week containing now.

    The labels do not depend on now; the parameter keeps the builders uniform.
    """
    return Skeleton(
        format_week_label(position) for position in range(1, WEEKS_IN_WINDOW + 1)
    )


def weekly_window_start(now: datetime) -> datetime:
    """Monday midnight of the oldest week bucket."""
    first_monday = start_of_week(now.date()) - timedelta(weeks=WEEKS_IN_WINDOW - 1)
    return _midnight(first_monday, now)


def weekly_window_end(now: datetime) -> datetime:
    """Monday midnight after the current week (exclusive)."""
    return _midnight(start_of_week(now.date()) + timedelta(weeks=1), now)


def weekly_key(now: datetime) -> Callable[[datetime], str]:
    """Map a feeding time to its week label.

    Weeks outside the window produce labels such as ``Hafta 0`` or
    ``Hafta 5`` that match no bucket.
    """
    current_week = start_of_week(now.date())

    def key(feeding_time: datetime) -> str:
        record_week = start_of_week(to_local(feeding_time, now).date())
        weeks_ago = (current_week - record_week).days // 7
        return format_week_label(WEEKS_IN_WINDOW - weeks_ago)

    return key


def weekly_plan(now: datetime) -> RollupPlan:
    return RollupPlan(
        build_weekly_skeleton(now),
        weekly_key(now),
        weekly_window_start(now),
        weekly_window_end(now),
    )
