"""Schedules and next-occurrence search.

There are exactly two kinds of schedule:

    SpecSchedule       six field masks plus a time zone, built from a cron
                       expression or a calendar descriptor (@daily, ...)
    IntervalSchedule   a fixed delay, built from ``@every <duration>``

Both are immutable and answer ``next(after)``: the earliest firing time
strictly after ``after``. Callers keep the last result and feed it back in.

Spec schedules search on wall-clock fields (year, month, day, hour, minute,
second) in the schedule's zone rather than on elapsed time, so "02:30 every
day" stays at 02:30 local time across DST changes. A wall-clock time that
does not exist in the zone (inside a spring-forward gap) is skipped. A time
repeated by a fall-back transition fires once, at its first occurrence,
unless the search starts inside the second pass; then the rest of that
second pass is used.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import MAXYEAR, datetime, timedelta, timezone, tzinfo
from typing import Iterator

from cronmask.config import DEFAULT_SEARCH_HORIZON_YEARS
from cronmask.fields import FieldMask

logger = logging.getLogger(__name__)

_ONE_SECOND = timedelta(seconds=1)
_ONE_MINUTE = timedelta(minutes=1)
_ONE_HOUR = timedelta(hours=1)
_ONE_DAY = timedelta(days=1)


# =============================================================================
# Schedule Base
# =============================================================================


class Schedule(ABC):
    """Something that can say when it next fires."""

    @abstractmethod
    def next(self, after: datetime | None = None) -> datetime | None:
        """Earliest firing time strictly after ``after`` (default: now).

        Returns:
            The next firing time, or None if there is none within the
            search horizon.
        """

    def next_n(self, n: int, after: datetime | None = None) -> list[datetime]:
        """Chain ``next`` n times, feeding each result back in.

        Stops early when ``next`` returns None, so an unsatisfiable schedule
        gives an empty list and one that runs past the search horizon gives
        a short one.
        """
        return list(self.iter(after, limit=n))

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> "ScheduleIterator":
        """Iterate firing times after ``after``, up to ``limit`` of them.

        Iteration also ends when the search horizon is exhausted.
        """
        return ScheduleIterator(self, after, limit)


class ScheduleIterator(Iterator[datetime]):
    """Walks a schedule one ``next`` call at a time; stops on a None result."""

    def __init__(
        self,
        schedule: Schedule,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> None:
        self._schedule = schedule
        self._last = after
        self._remaining = limit

    def __iter__(self) -> "ScheduleIterator":
        return self

    def __next__(self) -> datetime:
        if self._remaining is not None:
            if self._remaining <= 0:
                raise StopIteration
            self._remaining -= 1

        fire = self._schedule.next(self._last)
        if fire is None:
            self._remaining = 0
            raise StopIteration
        self._last = fire
        return fire


# =============================================================================
# Interval Schedule
# =============================================================================


@dataclass(frozen=True)
class IntervalSchedule(Schedule):
    """Fires every ``delay``, aligned to whole seconds.

    Attributes:
        delay: Whole number of seconds, at least one. Use every() to build
            one from an arbitrary duration.
    """

    delay: timedelta

    def __post_init__(self) -> None:
        if self.delay < _ONE_SECOND or self.delay.microseconds:
            raise ValueError(f"delay must be a whole number of seconds >= 1s, got {self.delay}")

    def next(self, after: datetime | None = None) -> datetime | None:
        """Add the delay to ``after`` with its sub-second part dropped.

        Aware instants advance in absolute time and keep their zone.
        """
        if after is None:
            after = datetime.now(timezone.utc)

        step = self.delay - timedelta(microseconds=after.microsecond)
        if after.tzinfo is None:
            return after + step
        return (after.astimezone(timezone.utc) + step).astimezone(after.tzinfo)


def every(duration: timedelta) -> IntervalSchedule:
    """Build an IntervalSchedule firing once per duration.

    Durations under a second become one second; any sub-second remainder is
    truncated.
    """
    if duration < _ONE_SECOND:
        duration = _ONE_SECOND
    return IntervalSchedule(duration - timedelta(microseconds=duration.microseconds))


# =============================================================================
# Spec Schedule
# =============================================================================


@dataclass(frozen=True)
class SpecSchedule(Schedule):
    """Cron schedule: one FieldMask per field plus a time zone.

    Example:
        >>> schedule = parse("0 30 9 * * MON-FRI", "Europe/London")
        >>> schedule.next(datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 16, 9, 30, tzinfo=zoneinfo.ZoneInfo(key='Europe/London'))
    """

    second: FieldMask
    minute: FieldMask
    hour: FieldMask
    day_of_month: FieldMask
    month: FieldMask
    day_of_week: FieldMask
    tz: tzinfo = timezone.utc
    horizon_years: int = field(default=DEFAULT_SEARCH_HORIZON_YEARS, compare=False)

    def matches(self, dt: datetime) -> bool:
        """Check whether an instant falls on this schedule (microseconds ignored).

        Naive datetimes are read as wall-clock time in the schedule's zone.
        """
        wall = self._wall_clock(dt)
        return (
            self.second.matches(wall.second)
            and self.minute.matches(wall.minute)
            and self.hour.matches(wall.hour)
            and self.month.matches(wall.month)
            and self._day_matches(wall)
        )

    def next(self, after: datetime | None = None) -> datetime | None:
        """Earliest matching instant strictly after ``after``.

        Aware input is converted to the schedule's zone; naive input is read
        as wall-clock time in that zone. The result is aware, in the
        schedule's zone.
        """
        if after is None:
            after = datetime.now(timezone.utc)

        floor = after.astimezone(timezone.utc) if after.tzinfo is not None else None
        candidate = self._wall_clock(after).replace(microsecond=0) + _ONE_SECOND
        year_limit = min(candidate.year + self.horizon_years, MAXYEAR - 1)

        while True:
            found = self._search(candidate, year_limit)
            if found is None:
                logger.warning(
                    "No matching time found within search horizon",
                    extra={"after": after.isoformat(), "horizon_years": self.horizon_years},
                )
                return None

            result = _localize(found, self.tz)
            if result is not None and floor is not None and result.astimezone(timezone.utc) <= floor:
                # ``after`` is inside the second pass of a repeated hour
                result = _localize(found.replace(fold=1), self.tz)
            if result is not None and (floor is None or result.astimezone(timezone.utc) > floor):
                return result
            candidate = found + _ONE_SECOND

    def _wall_clock(self, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(self.tz).replace(tzinfo=None)

    def _search(self, t: datetime, year_limit: int) -> datetime | None:
        """Walk naive wall-clock time forward until every field matches.

        Each mismatch moves to the start of the next permitted unit and
        restarts the checks from the month, so a carry into a new day or
        month is re-validated against the coarser fields.
        """
        while t.year <= year_limit:
            if not self.month.matches(t.month):
                month = self.month.next_value(t.month + 1)
                if month is None:
                    t = datetime(t.year + 1, self.month.first(), 1)
                else:
                    t = datetime(t.year, month, 1)
                continue

            if not self._day_matches(t):
                t = datetime(t.year, t.month, t.day) + _ONE_DAY
                continue

            if not self.hour.matches(t.hour):
                hour = self.hour.next_value(t.hour + 1)
                if hour is None:
                    t = datetime(t.year, t.month, t.day) + _ONE_DAY
                else:
                    t = t.replace(hour=hour, minute=0, second=0)
                continue

            if not self.minute.matches(t.minute):
                minute = self.minute.next_value(t.minute + 1)
                if minute is None:
                    t = t.replace(minute=0, second=0) + _ONE_HOUR
                else:
                    t = t.replace(minute=minute, second=0)
                continue

            if not self.second.matches(t.second):
                second = self.second.next_value(t.second + 1)
                if second is None:
                    t = t.replace(second=0) + _ONE_MINUTE
                else:
                    t = t.replace(second=second)
                continue

            return t

        return None

    def _day_matches(self, t: datetime) -> bool:
        """Day-of-month/day-of-week rule.

        With a wildcard on either side both fields must match (the wildcard
        side always does). Otherwise a day matching either field is enough.
        """
        dom_match = self.day_of_month.matches(t.day)
        # Python weekday: Monday=0; cron weekday: Sunday=0
        dow_match = self.day_of_week.matches((t.weekday() + 1) % 7)
        if self.day_of_month.wildcard or self.day_of_week.wildcard:
            return dom_match and dow_match
        return dom_match or dow_match


def _localize(wall: datetime, tz: tzinfo) -> datetime | None:
    """Attach tz to a wall-clock time; None if that time does not exist there."""
    aware = wall.replace(tzinfo=tz)
    round_trip = aware.astimezone(timezone.utc).astimezone(tz)
    if round_trip.replace(tzinfo=None) != wall:
        return None
    return aware
