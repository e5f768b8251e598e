# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - ``None`` marks an unbounded side. Operations that need a bound raise
#   UnboundedInterval rather than silently using Date.MIN or Date.MAX.
# - All empty ranges (and intervals) are equal to each other, whatever
#   bounds they were created with.
# - Month progressions compute each element from the first one, so that
#   clamping to the end of a short month doesn't carry over.
from __future__ import annotations

import re
from typing import Any, ClassVar, Iterator, Optional

from ._calendar import (
    Date,
    DateTime,
    Duration,
    Instant,
    Period,
    Time,
    TimeUnit,
    UtcOffset,
)
from ._common import (
    EmptyInterval,
    InvalidFormat,
    UnboundedInterval,
    div_trunc,
)
from ._zone import TimeZone, TimeZoneRulesProvider
from ._zoned import AwareDateTime, OffsetDateTime, ZonedDateTime

__all__ = [
    "DateRange",
    "DateProgression",
    "DateTimeInterval",
    "InstantInterval",
    "OffsetDateTimeInterval",
    "ZonedDateTimeInterval",
]

_UNBOUNDED_STR = ".."


class DateRange:
    """An inclusive range of dates. A side given as ``None`` is unbounded.

    Example
    -------

    >>> r = DateRange(Date(2020, 1, 30), Date(2020, 2, 2))
    DateRange(2020-01-30/2020-02-02)
    >>> len(r)
    4
    >>> Date(2020, 2, 1) in r
    True
    >>> list(r.step(days=2))
    [Date(2020-01-30), Date(2020-02-01)]

    """

    __slots__ = ("_start", "_end")

    EMPTY: ClassVar[DateRange]
    UNBOUNDED: ClassVar[DateRange]

    def __init__(
        self, start: Optional[Date] = None, end: Optional[Date] = None
    ) -> None:
        self._start = start
        self._end = end

    @property
    def start(self) -> Optional[Date]:
        return self._start

    @property
    def end(self) -> Optional[Date]:
        """The last date in the range (inclusive), or ``None``"""
        return self._end

    def has_bounded_start(self) -> bool:
        return self._start is not None

    def has_bounded_end(self) -> bool:
        return self._end is not None

    def is_bounded(self) -> bool:
        return self._start is not None and self._end is not None

    def is_unbounded(self) -> bool:
        return self._start is None and self._end is None

    def is_empty(self) -> bool:
        return (
            self._start is not None
            and self._end is not None
            and self._start > self._end
        )

    @property
    def first(self) -> Date:
        """The first date in the range

        Raises
        ------
        EmptyInterval
            If the range is empty.
        UnboundedInterval
            If the range has no start.

        """
        if self.is_empty():
            raise EmptyInterval("the range is empty")
        if self._start is None:
            raise UnboundedInterval("the range has no start")
        return self._start

    @property
    def last(self) -> Date:
        if self.is_empty():
            raise EmptyInterval("the range is empty")
        if self._end is None:
            raise UnboundedInterval("the range has no end")
        return self._end

    def __contains__(self, d: object) -> bool:
        if not isinstance(d, Date) or self.is_empty():
            return False
        return (self._start is None or self._start <= d) and (
            self._end is None or d <= self._end
        )

    def __iter__(self) -> Iterator[Date]:
        """Iterate day by day. Without an end, this continues up to
        :attr:`Date.MAX`."""
        if self._start is None:
            raise UnboundedInterval("can't iterate a range without start")
        return iter(self.step(days=1))

    def __reversed__(self) -> Iterator[Date]:
        if self._end is None:
            raise UnboundedInterval("can't iterate a range without end back")
        return iter(
            DateProgression(self._end, self._start or Date.MIN, days=-1)
        )

    def __len__(self) -> int:
        return self.length_in(TimeUnit.DAYS)

    def __bool__(self) -> bool:
        return not self.is_empty()

    def step(
        self, *, days: int = 0, weeks: int = 0, months: int = 0, years: int = 0
    ) -> DateProgression:
        """A progression over this range, in steps of days or months.
        Day and month steps can't be mixed.

        Example
        -------

        >>> r = DateRange(Date(2018, 1, 31), Date(2018, 4, 30))
        >>> list(r.step(months=2))
        [Date(2018-01-31), Date(2018-03-31)]

        Raises
        ------
        ValueError
            If the step isn't positive, or mixes days and months.
        UnboundedInterval
            If the range has no start.

        """
        step_days = days + weeks * 7
        step_months = months + years * 12
        if step_days and step_months:
            raise ValueError("a step can't mix days and months")
        if step_days < 0 or step_months < 0 or not (step_days or step_months):
            raise ValueError("the step must be positive")
        if self._start is None:
            raise UnboundedInterval("can't step through a range without start")
        return DateProgression(
            self._start,
            Date.MIN if self.is_empty() else self._end or Date.MAX,
            days=step_days,
            months=step_months,
        )

    def as_period(self) -> Period:
        """The period covered by the range. A range of a single day is
        one day long.

        Example
        -------

        >>> DateRange(Date(2020, 1, 1), Date(2020, 1, 31)).as_period()
        Period(P1M)
        >>> DateRange(Date(2020, 1, 31), Date(2020, 2, 29)).as_period()
        Period(P1M1D)

        """
        if self.is_empty():
            return Period.ZERO
        start, end = self._bounds()
        return Period.between(start, end.add(days=1))

    def length_in(self, unit: TimeUnit, /) -> int:
        """The number of whole units in the range, counting the last day
        in full"""
        if self.is_empty():
            return 0
        start, end = self._bounds()
        return unit.between(start, end.add(days=1))

    def _bounds(self) -> tuple[Date, Date]:
        if self._start is None or self._end is None:
            raise UnboundedInterval("the range is unbounded")
        return self._start, self._end

    def as_date_time_interval(self) -> DateTimeInterval:
        """The interval from the start of the first day to the start of
        the day after the last"""
        if self.is_empty():
            return DateTimeInterval.EMPTY
        return DateTimeInterval(
            None if self._start is None else self._start.at(Time.MIDNIGHT),
            None if self._end is None else _start_of_next_day(self._end),
        )

    def at(self, zone: TimeZone, /) -> ZonedDateTimeInterval:
        """The interval from the start of the first day to the start of
        the day after the last, in the given zone"""
        return self.as_date_time_interval().at(zone)

    def canonical_format(self) -> str:
        """The range in ISO 8601 interval format

        Example
        -------

        >>> DateRange(Date(2020, 1, 30), None).canonical_format()
        '2020-01-30/..'
        >>> DateRange.EMPTY.canonical_format()
        ''

        """
        if self.is_empty():
            return ""
        return (
            f"{_UNBOUNDED_STR if self._start is None else self._start}/"
            f"{_UNBOUNDED_STR if self._end is None else self._end}"
        )

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> DateRange:
        if not s:
            return cls.EMPTY
        start, end = _split_interval(s)
        return cls(
            None if start is None else Date.from_canonical_format(start),
            None if end is None else Date.from_canonical_format(end),
        )

    def __repr__(self) -> str:
        return f"DateRange({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateRange):
            return NotImplemented
        if self.is_empty() or other.is_empty():
            return self.is_empty() and other.is_empty()
        return self._start == other._start and self._end == other._end

    def __hash__(self) -> int:
        if self.is_empty():
            return hash(())
        return hash((self._start, self._end))


DateRange.EMPTY = DateRange(Date.from_epoch_day(1), Date.from_epoch_day(0))
DateRange.UNBOUNDED = DateRange()


class DateProgression:
    """Dates from ``first`` toward ``end`` (inclusive), in steps of a whole
    number of days or months. A negative step counts down.

    Elements are computed as ``first + k * step``, so month steps don't
    drift when a day is clamped to the end of a short month.

    Example
    -------

    >>> p = DateProgression(Date(2018, 1, 31), Date(2018, 4, 30), months=1)
    >>> list(p)
    [Date(2018-01-31), Date(2018-02-28), Date(2018-03-31), Date(2018-04-30)]
    >>> p.last
    Date(2018-04-30)

    """

    __slots__ = ("_first", "_last", "_days", "_months", "_count")

    def __init__(
        self, first: Date, end: Date, /, *, days: int = 0, months: int = 0
    ) -> None:
        if (not days) == (not months):
            raise ValueError("give a non-zero step of either days or months")
        self._first = first
        self._days = days
        self._months = months
        step = days or months
        if (step > 0 and first > end) or (step < 0 and first < end):
            self._last = end
            self._count = 0
        elif days:
            steps = div_trunc(end.epoch_day - first.epoch_day, days)
            self._last = first.add(days=steps * days)
            self._count = steps + 1
        else:
            steps = div_trunc(_progression_months_between(first, end), months)
            self._last = first.add(months=steps * months)
            self._count = steps + 1

    @property
    def first(self) -> Date:
        return self._first

    @property
    def last(self) -> Date:
        """The last date reached by whole steps without passing the end"""
        return self._last

    @property
    def step(self) -> Period:
        return Period(months=self._months, days=self._days)

    def is_empty(self) -> bool:
        return not self._count

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return bool(self._count)

    def __iter__(self) -> Iterator[Date]:
        first = self._first
        if self._days:
            for k in range(self._count):
                yield first.add(days=k * self._days)
        else:
            for k in range(self._count):
                yield first.add(months=k * self._months)

    def reversed(self) -> DateProgression:
        """The progression from :attr:`last` back toward :attr:`first`"""
        return DateProgression(
            self._last, self._first, days=-self._days, months=-self._months
        )

    def __reversed__(self) -> Iterator[Date]:
        return iter(self.reversed())

    def __contains__(self, d: object) -> bool:
        if not isinstance(d, Date) or not self._count:
            return False
        low, high = sorted((self._first, self._last))
        if not low <= d <= high:
            return False
        if self._days:
            return (d.epoch_day - self._first.epoch_day) % self._days == 0
        months = (d.year - self._first.year) * 12 + d.month - self._first.month
        return months % self._months == 0 and self._first.add(months=months) == d

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateProgression):
            return NotImplemented
        if not self._count or not other._count:
            return not self._count and not other._count
        return (
            self._first == other._first
            and self._last == other._last
            and self._days == other._days
            and self._months == other._months
        )

    def __hash__(self) -> int:
        if not self._count:
            return hash(())
        return hash((self._first, self._last, self._days, self._months))

    def __repr__(self) -> str:
        return f"DateProgression({self._first}, {self._last}, step={self.step})"


def _progression_months_between(start: Date, end: Date) -> int:
    # Whole months, counting a month once the start's day of month (clamped
    # to the length of the end month) is reached.
    months = (end.year - start.year) * 12 + end.month - start.month
    start_day = min(start.day, end.days_in_month())
    if end > start and end.day < start_day:
        return months - 1
    elif end < start and end.day > start_day:
        return months + 1
    return months


def _start_of_next_day(d: Date) -> DateTime:
    if d == Date.MAX:
        return DateTime.MAX
    return d.add(days=1).at(Time.MIDNIGHT)


def _split_interval(s: str) -> tuple[Optional[str], Optional[str]]:
    if not (match := _match_interval(s)):
        raise InvalidFormat(f"invalid interval: {s!r}")
    start, end = match.groups()
    return (
        None if start == _UNBOUNDED_STR else start,
        None if end == _UNBOUNDED_STR else end,
    )


# A slash inside a bracketed zone id doesn't separate the sides
_INTERVAL_SIDE = r"((?:[^/\[]|\[[^\]]*\])+)"
_match_interval = re.compile(_INTERVAL_SIDE + "/" + _INTERVAL_SIDE, re.ASCII).fullmatch


class _TimeInterval:
    """Base of half-open intervals of time points. ``end`` is exclusive;
    a side given as ``None`` is unbounded."""

    __slots__ = ("_start", "_end")

    EMPTY: ClassVar[Any]
    UNBOUNDED: ClassVar[Any]
    _point_types: ClassVar[tuple[type, ...]]

    def __init__(self, start: Any = None, end: Any = None) -> None:
        self._start = start
        self._end = end

    @classmethod
    def inclusive(cls, start: Any, end: Any):
        """An interval that includes ``end``, by ending one nanosecond
        after it"""
        return cls(start, None if end is None else end + Duration(nanoseconds=1))

    @property
    def start(self) -> Any:
        return self._start

    @property
    def end(self) -> Any:
        """The exclusive end, or ``None``"""
        return self._end

    def has_bounded_start(self) -> bool:
        return self._start is not None

    def has_bounded_end(self) -> bool:
        return self._end is not None

    def is_bounded(self) -> bool:
        return self._start is not None and self._end is not None

    def is_unbounded(self) -> bool:
        return self._start is None and self._end is None

    def is_empty(self) -> bool:
        return (
            self._start is not None
            and self._end is not None
            and self._start >= self._end
        )

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, self._point_types) or self.is_empty():
            return False
        return (self._start is None or self._start <= value) and (
            self._end is None or value < self._end
        )

    def _bounds(self) -> tuple[Any, Any]:
        if self._start is None or self._end is None:
            raise UnboundedInterval("the interval is unbounded")
        return self._start, self._end

    def _local(self, point: Any) -> DateTime:
        return point.date_time()

    def _local_bounds(self) -> tuple[DateTime, DateTime]:
        start, end = self._bounds()
        return self._local(start), self._local(end)

    def as_duration(self) -> Duration:
        """The exact length of the interval

        Raises
        ------
        UnboundedInterval
            If either side is unbounded.

        """
        start, end = self._bounds()
        if self.is_empty():
            return Duration.ZERO
        return end - start

    def as_period(self) -> Period:
        """The calendar period between start and end, counting a day
        only once the time of day is reached again"""
        start, end = self._local_bounds()
        if self.is_empty():
            return Period.ZERO
        end_date = end.date()
        if end_date > start.date() and end.time() < start.time():
            end_date = end_date.add(days=-1)
        return Period.between(start.date(), end_date)

    def length_in(self, unit: TimeUnit, /) -> int:
        """The number of whole units in the interval. Time-based units
        are measured on the time line, date-based units on the calendar."""
        if unit.is_time_based:
            return div_trunc(self.as_duration().in_nanoseconds(), unit.nanoseconds)
        start, end = self._local_bounds()
        if self.is_empty():
            return 0
        return unit.between(start, end)

    def to_date_range(self) -> DateRange:
        """The range of local dates the interval touches"""
        if self.is_empty():
            return DateRange.EMPTY
        first = None if self._start is None else self._local(self._start).date()
        last = None
        if self._end is not None:
            end = self._local(self._end)
            last = end.date()
            if end.time() == Time.MIDNIGHT:
                last = last.add(days=-1)
        return DateRange(first, last)

    def canonical_format(self) -> str:
        if self.is_empty():
            return ""
        return (
            f"{_UNBOUNDED_STR if self._start is None else self._start}/"
            f"{_UNBOUNDED_STR if self._end is None else self._end}"
        )

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        if self.is_empty() or other.is_empty():
            return self.is_empty() and other.is_empty()
        return self._start == other._start and self._end == other._end

    def __hash__(self) -> int:
        if self.is_empty():
            return hash(())
        return hash((self._start, self._end))


class DateTimeInterval(_TimeInterval):
    """A half-open interval of local date-times

    Example
    -------

    >>> i = DateTimeInterval(DateTime(2020, 1, 1), DateTime(2020, 1, 2, 12))
    DateTimeInterval(2020-01-01T00:00:00/2020-01-02T12:00:00)
    >>> i.as_duration()
    Duration(PT36H)

    """

    __slots__ = ()
    _point_types = (DateTime,)

    start: Optional[DateTime]
    end: Optional[DateTime]

    def _local(self, point: DateTime) -> DateTime:
        return point

    def at(self, zone: TimeZone, /) -> ZonedDateTimeInterval:
        """Bind both sides to a zone, resolving them with the default
        disambiguation"""
        if self.is_empty():
            return ZonedDateTimeInterval.EMPTY
        return ZonedDateTimeInterval(
            None
            if self._start is None
            else ZonedDateTime.from_local(self._start, zone),
            None if self._end is None else ZonedDateTime.from_local(self._end, zone),
        )

    @classmethod
    def from_canonical_format(cls, s: str, /) -> DateTimeInterval:
        if not s:
            return cls.EMPTY
        start, end = _split_interval(s)
        return cls(
            None if start is None else DateTime.from_canonical_format(start),
            None if end is None else DateTime.from_canonical_format(end),
        )


class InstantInterval(_TimeInterval):
    """A half-open interval of instants. Date-based measurements use the
    UTC calendar.

    Example
    -------

    >>> i = InstantInterval(Instant.EPOCH, Instant.from_epoch_second(90))
    >>> i.length_in(TimeUnit.MINUTES)
    1

    """

    __slots__ = ()
    _point_types = (Instant, AwareDateTime)

    start: Optional[Instant]
    end: Optional[Instant]

    def _local(self, point: Instant) -> DateTime:
        return DateTime.from_epoch_second(point.epoch_second, point.nanosecond)

    def to_instant_interval(self) -> InstantInterval:
        return self

    def at(self, zone: TimeZone, /) -> ZonedDateTimeInterval:
        if self.is_empty():
            return ZonedDateTimeInterval.EMPTY
        return ZonedDateTimeInterval(
            None
            if self._start is None
            else ZonedDateTime.from_instant(self._start, zone),
            None
            if self._end is None
            else ZonedDateTime.from_instant(self._end, zone),
        )

    @classmethod
    def from_canonical_format(cls, s: str, /) -> InstantInterval:
        if not s:
            return cls.EMPTY
        start, end = _split_interval(s)
        return cls(
            None if start is None else Instant.from_canonical_format(start),
            None if end is None else Instant.from_canonical_format(end),
        )


class OffsetDateTimeInterval(_TimeInterval):
    """A half-open interval of offset date-times. Date-based measurements
    compare the local date-times of each side, ignoring the offsets.

    Example
    -------

    >>> i = OffsetDateTimeInterval(
    ...     OffsetDateTime(2020, 1, 1, offset=UtcOffset(hours=-10)),
    ...     OffsetDateTime(2020, 1, 2, offset=UtcOffset(hours=10)),
    ... )
    >>> i.as_period()
    Period(P1D)
    >>> i.as_duration()
    Duration(PT4H)

    """

    __slots__ = ()
    _point_types = (Instant, AwareDateTime)

    start: Optional[OffsetDateTime]
    end: Optional[OffsetDateTime]

    def to_instant_interval(self) -> InstantInterval:
        return _to_instant_interval(self)

    @classmethod
    def from_canonical_format(cls, s: str, /) -> OffsetDateTimeInterval:
        if not s:
            return cls.EMPTY
        start, end = _split_interval(s)
        return cls(
            None if start is None else OffsetDateTime.from_canonical_format(start),
            None if end is None else OffsetDateTime.from_canonical_format(end),
        )


class ZonedDateTimeInterval(_TimeInterval):
    """A half-open interval of zoned date-times. Date-based measurements
    convert the end to the zone of the start first.

    Example
    -------

    >>> ny = tzdb.region("America/New_York")
    >>> i = DateRange(Date(2020, 3, 8), Date(2020, 3, 8)).at(ny)
    >>> i.as_duration()
    Duration(PT23H)

    """

    __slots__ = ()
    _point_types = (Instant, AwareDateTime)

    start: Optional[ZonedDateTime]
    end: Optional[ZonedDateTime]

    def _local_bounds(self) -> tuple[DateTime, DateTime]:
        start, end = self._bounds()
        return start.date_time(), end.as_zoned(start.zone).date_time()

    def to_instant_interval(self) -> InstantInterval:
        return _to_instant_interval(self)

    @classmethod
    def from_canonical_format(
        cls, s: str, /, provider: TimeZoneRulesProvider | None = None
    ) -> ZonedDateTimeInterval:
        if not s:
            return cls.EMPTY
        start, end = _split_interval(s)
        return cls(
            None
            if start is None
            else ZonedDateTime.from_canonical_format(start, provider),
            None
            if end is None
            else ZonedDateTime.from_canonical_format(end, provider),
        )


def _to_instant_interval(
    interval: OffsetDateTimeInterval | ZonedDateTimeInterval,
) -> InstantInterval:
    if interval.is_empty():
        return InstantInterval.EMPTY
    return InstantInterval(
        None if interval._start is None else interval._start.as_instant(),
        None if interval._end is None else interval._end.as_instant(),
    )


DateTimeInterval.EMPTY = DateTimeInterval(
    DateTime(1970, 1, 2), DateTime(1970, 1, 1)
)
DateTimeInterval.UNBOUNDED = DateTimeInterval()
InstantInterval.EMPTY = InstantInterval(
    Instant.from_epoch_second(86_400), Instant.EPOCH
)
InstantInterval.UNBOUNDED = InstantInterval()
OffsetDateTimeInterval.EMPTY = OffsetDateTimeInterval(
    OffsetDateTime(1970, 1, 2, offset=UtcOffset.ZERO),
    OffsetDateTime(1970, 1, 1, offset=UtcOffset.ZERO),
)
OffsetDateTimeInterval.UNBOUNDED = OffsetDateTimeInterval()
ZonedDateTimeInterval.EMPTY = ZonedDateTimeInterval(
    ZonedDateTime(1970, 1, 2, zone=TimeZone.UTC),
    ZonedDateTime(1970, 1, 1, zone=TimeZone.UTC),
)
ZonedDateTimeInterval.UNBOUNDED = ZonedDateTimeInterval()
