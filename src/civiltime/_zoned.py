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
# - Both aware types store the local date-time and the offset. The instant
#   is derived when needed.
# - Equality of OffsetDateTime is field-exact, while ZonedDateTime compares
#   instants. Hashes follow the same split, so the two never compare equal
#   to each other.
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Literal, Optional, TypeVar, overload

from ._calendar import (
    Date,
    DateTime,
    Duration,
    Instant,
    Period,
    Time,
    UtcOffset,
    WeekSettings,
    Weekday,
    _Rounding,
    _RoundMode,
)
from ._common import (
    NOT_SET,
    NS_PER_HOUR,
    NS_PER_MIN,
    NS_PER_MS,
    NS_PER_SEC,
    NS_PER_US,
    Ambiguous,
    DoesntExistInZone,
    InvalidFormat,
    InvalidOffsetForZone,
    _object_new,
)
from ._zone import TimeZone, TimeZoneRulesProvider

if TYPE_CHECKING:
    from ._clock import Clock

__all__ = [
    "AwareDateTime",
    "OffsetDateTime",
    "ZonedDateTime",
    "OffsetTime",
    "Disambiguate",
]

Disambiguate = Literal["compatible", "earlier", "later", "raise"]
_DISAMBIGUATE_OPTIONS = ("compatible", "earlier", "later", "raise")
_A = TypeVar("_A", bound="AwareDateTime")


class AwareDateTime(_Rounding, ABC):
    """Common behavior of date-times that are bound to an offset,
    and therefore to an instant on the time line.

    Instances can be ordered and subtracted across subclasses, and
    against :class:`Instant`.
    """

    __slots__ = ("_date_time", "_offset")

    @property
    def year(self) -> int:
        return self._date_time.year

    @property
    def month(self) -> int:
        return self._date_time.month

    @property
    def day(self) -> int:
        return self._date_time.day

    @property
    def hour(self) -> int:
        return self._date_time.hour

    @property
    def minute(self) -> int:
        return self._date_time.minute

    @property
    def second(self) -> int:
        return self._date_time.second

    @property
    def nanosecond(self) -> int:
        return self._date_time.nanosecond

    @property
    def offset(self) -> UtcOffset:
        return self._offset

    def date_time(self) -> DateTime:
        """The local date and time"""
        return self._date_time

    def date(self) -> Date:
        return self._date_time.date()

    def time(self) -> Time:
        return self._date_time.time()

    @property
    def epoch_second(self) -> int:
        return self._date_time.epoch_second_at(self._offset)

    def as_instant(self) -> Instant:
        """The instant on the UTC time line"""
        return self._date_time.instant_at(self._offset)

    @abstractmethod
    def as_offset(self, offset: UtcOffset | None = None, /) -> OffsetDateTime:
        """Convert to an :class:`OffsetDateTime` at the same instant.
        Without argument, the current offset is kept."""

    def as_zoned(self, zone: TimeZone, /) -> ZonedDateTime:
        """The same instant in another time zone"""
        return ZonedDateTime.from_instant(self.as_instant(), zone)

    @abstractmethod
    def canonical_format(self) -> str: ...

    def __str__(self) -> str:
        return self.canonical_format()

    @abstractmethod
    def exact_eq(self, other: AwareDateTime, /) -> bool:
        """Compare objects by their fields, rather than their instant"""

    def _epoch_nano(self) -> int:
        return self.epoch_second * NS_PER_SEC + self._date_time.nanosecond

    def __lt__(self, other: AwareDateTime | Instant) -> bool:
        if (other_ns := _epoch_nano_of(other)) is None:
            return NotImplemented
        return self._epoch_nano() < other_ns

    def __le__(self, other: AwareDateTime | Instant) -> bool:
        if (other_ns := _epoch_nano_of(other)) is None:
            return NotImplemented
        return self._epoch_nano() <= other_ns

    def __gt__(self, other: AwareDateTime | Instant) -> bool:
        if (other_ns := _epoch_nano_of(other)) is None:
            return NotImplemented
        return self._epoch_nano() > other_ns

    def __ge__(self, other: AwareDateTime | Instant) -> bool:
        if (other_ns := _epoch_nano_of(other)) is None:
            return NotImplemented
        return self._epoch_nano() >= other_ns

    def __rsub__(self, other: Instant) -> Duration:
        if not isinstance(other, Instant):
            return NotImplemented
        return Duration(nanoseconds=other.epoch_nano - self._epoch_nano())

    def _duration_since(self, other: object) -> Optional[Duration]:
        if (other_ns := _epoch_nano_of(other)) is None:
            return None
        return Duration(nanoseconds=self._epoch_nano() - other_ns)

    def __copy__(self) -> AwareDateTime:
        return self

    def __deepcopy__(self, _: object) -> AwareDateTime:
        return self

    @abstractmethod
    def _with_local(self: _A, date_time: DateTime) -> _A:
        """The given local date-time, keeping the current offset
        where the type allows it"""

    def _at_start_of(self: _A, date: Date) -> _A:
        return self._with_local(date.at(Time.MIDNIGHT))

    def _at_end_of(self: _A, date: Date) -> _A:
        return self._with_local(date.at(Time.MAX))

    def _round(self: _A, step: int, mode: _RoundMode) -> _A:
        return self._with_local(self._date_time._round(step, mode))

    def start_of_day(self: _A) -> _A:
        """The first moment of the day"""
        return self._at_start_of(self._date_time.date())

    def end_of_day(self: _A) -> _A:
        """The last nanosecond of the day"""
        return self._at_end_of(self._date_time.date())

    def start_of_week(self: _A, settings: WeekSettings = WeekSettings.ISO) -> _A:
        """The first moment of the week containing this date-time"""
        return self._at_start_of(self._date_time.date().start_of_week(settings))

    def end_of_week(self: _A, settings: WeekSettings = WeekSettings.ISO) -> _A:
        """The last nanosecond of the week containing this date-time"""
        return self._at_end_of(self._date_time.date().end_of_week(settings))

    def start_of_month(self: _A) -> _A:
        return self._at_start_of(self._date_time.date().start_of_month())

    def end_of_month(self: _A) -> _A:
        return self._at_end_of(self._date_time.date().end_of_month())

    def start_of_year(self: _A) -> _A:
        return self._at_start_of(self._date_time.date().start_of_year())

    def end_of_year(self: _A) -> _A:
        return self._at_end_of(self._date_time.date().end_of_year())

    def next(self: _A, weekday: Weekday, /) -> _A:
        """The same local time on the first later date falling
        on ``weekday``"""
        return self._with_local(self._date_time.next(weekday))

    def next_or_same(self: _A, weekday: Weekday, /) -> _A:
        return self._with_local(self._date_time.next_or_same(weekday))

    def previous(self: _A, weekday: Weekday, /) -> _A:
        """The same local time on the last earlier date falling
        on ``weekday``"""
        return self._with_local(self._date_time.previous(weekday))

    def previous_or_same(self: _A, weekday: Weekday, /) -> _A:
        return self._with_local(self._date_time.previous_or_same(weekday))


def _epoch_nano_of(value: object) -> Optional[int]:
    if isinstance(value, AwareDateTime):
        return value._epoch_nano()
    elif isinstance(value, Instant):
        return value.epoch_nano
    return None


def _time_nanos(
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
) -> int:
    return (
        hours * NS_PER_HOUR
        + minutes * NS_PER_MIN
        + seconds * NS_PER_SEC
        + milliseconds * NS_PER_MS
        + microseconds * NS_PER_US
        + nanoseconds
    )


class OffsetDateTime(AwareDateTime):
    """A date and time with a fixed offset from UTC.

    The offset is kept exactly as given, so two values for the same
    instant at different offsets are not equal. Use
    :meth:`is_same_instant` to compare the instants.

    Example
    -------

    >>> d = OffsetDateTime(2020, 8, 15, 23, 12, offset=UtcOffset(hours=1))
    OffsetDateTime(2020-08-15T23:12:00+01:00)
    >>> d.as_instant()
    Instant(2020-08-15T22:12:00Z)

    The canonical string format is:

    .. code-block:: text

       YYYY-MM-DDTHH:MM:SS(.fffffffff)±HH:MM(:SS)

    """

    __slots__ = ()

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
        *,
        offset: UtcOffset,
    ) -> None:
        if not isinstance(offset, UtcOffset):
            raise TypeError(f"offset must be a UtcOffset, got {offset!r}")
        self._date_time = DateTime(
            year, month, day, hour, minute, second, nanosecond
        )
        self._offset = offset

    @classmethod
    def from_local(cls, date_time: DateTime, offset: UtcOffset, /) -> OffsetDateTime:
        return cls._from_parts(date_time, offset)

    @classmethod
    def from_instant(cls, instant: Instant, offset: UtcOffset, /) -> OffsetDateTime:
        return cls._from_parts(
            DateTime.from_epoch_second(
                instant.epoch_second, instant.nanosecond, offset
            ),
            offset,
        )

    @classmethod
    def now(cls, clock: Clock) -> OffsetDateTime:
        """The current date and time at the offset of the clock's zone"""
        instant = clock.read_instant()
        return cls.from_instant(instant, clock.zone.rules.offset_at(instant))

    def canonical_format(self) -> str:
        return f"{self._date_time}{self._offset}"

    @classmethod
    def from_canonical_format(cls, s: str, /) -> OffsetDateTime:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Example
        -------

        >>> OffsetDateTime.from_canonical_format("2020-08-15T23:12:00+01:00")
        OffsetDateTime(2020-08-15T23:12:00+01:00)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_offset_dt(s)):
            raise InvalidFormat(f"invalid offset date-time: {s!r}")
        return cls._from_parts(
            DateTime.from_canonical_format(match[1]),
            UtcOffset.from_canonical_format(match[2]),
        )

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            year: int | NOT_SET = NOT_SET(),
            month: int | NOT_SET = NOT_SET(),
            day: int | NOT_SET = NOT_SET(),
            hour: int | NOT_SET = NOT_SET(),
            minute: int | NOT_SET = NOT_SET(),
            second: int | NOT_SET = NOT_SET(),
            nanosecond: int | NOT_SET = NOT_SET(),
            offset: UtcOffset | NOT_SET = NOT_SET(),
        ) -> OffsetDateTime: ...

    else:

        def replace(self, **kwargs) -> OffsetDateTime:
            """Create a new instance with the given fields replaced.
            Replacing the offset keeps the local date and time."""
            offset = kwargs.pop("offset", self._offset)
            return self._from_parts(self._date_time.replace(**kwargs), offset)

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Compare the local date-time and offset

            Example
            -------

            >>> d = OffsetDateTime(2020, 8, 15, 23, offset=UtcOffset(hours=1))
            >>> d == OffsetDateTime(2020, 8, 15, 22, offset=UtcOffset.ZERO)
            False
            >>> d.is_same_instant(OffsetDateTime(2020, 8, 15, 22, offset=UtcOffset.ZERO))
            True

            """
            if not isinstance(other, OffsetDateTime):
                return NotImplemented
            return (
                self._date_time == other._date_time
                and self._offset == other._offset
            )

    def __hash__(self) -> int:
        return hash((self._date_time, self._offset))

    def exact_eq(self, other: AwareDateTime, /) -> bool:
        return (
            isinstance(other, OffsetDateTime)
            and self._date_time == other._date_time
            and self._offset == other._offset
        )

    def is_same_instant(self, other: AwareDateTime | Instant, /) -> bool:
        return self._epoch_nano() == _epoch_nano_of(other)

    # Same instants are ordered by local date-time, consistent with __eq__
    def __lt__(self, other: AwareDateTime | Instant) -> bool:
        if isinstance(other, OffsetDateTime):
            return self._sort_key() < other._sort_key()
        return super().__lt__(other)

    def __le__(self, other: AwareDateTime | Instant) -> bool:
        if isinstance(other, OffsetDateTime):
            return self._sort_key() <= other._sort_key()
        return super().__le__(other)

    def __gt__(self, other: AwareDateTime | Instant) -> bool:
        if isinstance(other, OffsetDateTime):
            return self._sort_key() > other._sort_key()
        return super().__gt__(other)

    def __ge__(self, other: AwareDateTime | Instant) -> bool:
        if isinstance(other, OffsetDateTime):
            return self._sort_key() >= other._sort_key()
        return super().__ge__(other)

    def _sort_key(self) -> tuple[int, int]:
        return self._epoch_nano(), self._date_time._local_ns()

    def add(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> OffsetDateTime:
        """Add date and time components, keeping the offset"""
        return self._from_parts(
            self._date_time.add(
                years=years,
                months=months,
                weeks=weeks,
                days=days,
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                milliseconds=milliseconds,
                microseconds=microseconds,
                nanoseconds=nanoseconds,
            ),
            self._offset,
        )

    def __add__(self, delta: Duration | Period) -> OffsetDateTime:
        if isinstance(delta, (Duration, Period)):
            return self._from_parts(self._date_time + delta, self._offset)
        return NotImplemented

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: AwareDateTime | Instant) -> Duration: ...

        @overload
        def __sub__(self, other: Duration | Period) -> OffsetDateTime: ...

        def __sub__(
            self, other: AwareDateTime | Instant | Duration | Period
        ) -> OffsetDateTime | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract another datetime or instant, giving the exact
            duration between them, or subtract a duration or period"""
            if isinstance(other, (Duration, Period)):
                return self._from_parts(self._date_time - other, self._offset)
            elif (result := self._duration_since(other)) is not None:
                return result
            return NotImplemented

    @overload
    def as_offset(self, /) -> OffsetDateTime: ...

    @overload
    def as_offset(self, offset: UtcOffset, /) -> OffsetDateTime: ...

    def as_offset(self, offset: UtcOffset | None = None, /) -> OffsetDateTime:
        """The same instant at another offset

        Example
        -------

        >>> d = OffsetDateTime(2020, 8, 15, 23, offset=UtcOffset(hours=1))
        >>> d.as_offset(UtcOffset(hours=-4))
        OffsetDateTime(2020-08-15T18:00:00-04:00)

        """
        if offset is None or offset == self._offset:
            return self
        return self.from_instant(self.as_instant(), offset)

    def offset_time(self) -> OffsetTime:
        """The time of day with this offset, without the date"""
        return OffsetTime._from_parts(self._date_time.time(), self._offset)

    def _with_local(self, date_time: DateTime) -> OffsetDateTime:
        return self._from_parts(date_time, self._offset)

    def __repr__(self) -> str:
        return f"OffsetDateTime({self})"

    @classmethod
    def _from_parts(cls, date_time: DateTime, offset: UtcOffset) -> OffsetDateTime:
        self = _object_new(cls)
        self._date_time = date_time
        self._offset = offset
        return self

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_offset_dt, (
            self._date_time.date().epoch_day,
            self._date_time.time().nanosecond_of_day,
            self._offset.total_seconds,
        )


def _unpkl_offset_dt(epoch_day: int, nanos: int, offset_secs: int) -> OffsetDateTime:
    return OffsetDateTime._from_parts(
        Date.from_epoch_day(epoch_day).at(Time.from_nanosecond_of_day(nanos)),
        UtcOffset.from_total_seconds(offset_secs),
    )


class OffsetTime(_Rounding):
    """A time of day with a fixed offset from UTC, such as the
    opening time of a shop in a known region.

    Equality compares both the time and the offset. Ordering compares
    the times as if on the same UTC day, then the local time.

    Example
    -------

    >>> t = OffsetTime(9, 30, offset=UtcOffset(hours=2))
    OffsetTime(09:30:00+02:00)
    >>> t.as_offset(UtcOffset.ZERO)
    OffsetTime(07:30:00Z)

    """

    __slots__ = ("_time", "_offset")

    MIN: ClassVar[OffsetTime]
    MAX: ClassVar[OffsetTime]

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
        *,
        offset: UtcOffset,
    ) -> None:
        if not isinstance(offset, UtcOffset):
            raise TypeError(f"offset must be a UtcOffset, got {offset!r}")
        self._time = Time(hour, minute, second, nanosecond)
        self._offset = offset

    @property
    def hour(self) -> int:
        return self._time.hour

    @property
    def minute(self) -> int:
        return self._time.minute

    @property
    def second(self) -> int:
        return self._time.second

    @property
    def nanosecond(self) -> int:
        return self._time.nanosecond

    @property
    def offset(self) -> UtcOffset:
        return self._offset

    def time(self) -> Time:
        return self._time

    def on(self, date: Date, /) -> OffsetDateTime:
        """Combine with a date to create an :class:`OffsetDateTime`"""
        return OffsetDateTime._from_parts(date.at(self._time), self._offset)

    def as_offset(self, offset: UtcOffset, /) -> OffsetTime:
        """The same moment of the day at another offset, wrapping
        around midnight where needed"""
        return self._from_parts(
            self._time + (offset.as_duration() - self._offset.as_duration()),
            offset,
        )

    def __add__(self, d: Duration) -> OffsetTime:
        if not isinstance(d, Duration):
            return NotImplemented
        return self._from_parts(self._time + d, self._offset)

    def __sub__(self, d: Duration) -> OffsetTime:
        if not isinstance(d, Duration):
            return NotImplemented
        return self._from_parts(self._time - d, self._offset)

    def _round(self, step: int, mode: _RoundMode) -> OffsetTime:
        return self._from_parts(self._time._round(step, mode), self._offset)

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            hour: int | NOT_SET = NOT_SET(),
            minute: int | NOT_SET = NOT_SET(),
            second: int | NOT_SET = NOT_SET(),
            nanosecond: int | NOT_SET = NOT_SET(),
            offset: UtcOffset | NOT_SET = NOT_SET(),
        ) -> OffsetTime: ...

    else:

        def replace(self, **kwargs) -> OffsetTime:
            offset = kwargs.pop("offset", self._offset)
            return self._from_parts(self._time.replace(**kwargs), offset)

    def canonical_format(self) -> str:
        return f"{self._time}{self._offset}"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> OffsetTime:
        """Create from the canonical string representation, e.g.
        ``09:30:00+02:00``

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_offset_time(s)):
            raise InvalidFormat(f"invalid offset time: {s!r}")
        return cls._from_parts(
            Time.from_canonical_format(match[1]),
            UtcOffset.from_canonical_format(match[2]),
        )

    def __repr__(self) -> str:
        return f"OffsetTime({self})"

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            if not isinstance(other, OffsetTime):
                return NotImplemented
            return self._time == other._time and self._offset == other._offset

    def __hash__(self) -> int:
        return hash((self._time, self._offset))

    def __lt__(self, other: OffsetTime) -> bool:
        if not isinstance(other, OffsetTime):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: OffsetTime) -> bool:
        if not isinstance(other, OffsetTime):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: OffsetTime) -> bool:
        if not isinstance(other, OffsetTime):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: OffsetTime) -> bool:
        if not isinstance(other, OffsetTime):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def _sort_key(self) -> tuple[int, int]:
        nanos = self._time.nanosecond_of_day
        return nanos - self._offset.total_seconds * NS_PER_SEC, nanos

    @classmethod
    def _from_parts(cls, time: Time, offset: UtcOffset) -> OffsetTime:
        self = _object_new(cls)
        self._time = time
        self._offset = offset
        return self

    def __copy__(self) -> OffsetTime:
        return self

    def __deepcopy__(self, _: object) -> OffsetTime:
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_offset_time, (
            self._time.nanosecond_of_day,
            self._offset.total_seconds,
        )


def _unpkl_offset_time(nanos: int, offset_secs: int) -> OffsetTime:
    return OffsetTime._from_parts(
        Time.from_nanosecond_of_day(nanos),
        UtcOffset.from_total_seconds(offset_secs),
    )


OffsetTime.MIN = OffsetTime._from_parts(Time.MIN, UtcOffset.MAX)
OffsetTime.MAX = OffsetTime._from_parts(Time.MAX, UtcOffset.MIN)


class ZonedDateTime(AwareDateTime):
    """A date and time in a time zone, with the offset that applies there.

    Example
    -------

    >>> from civiltime import tzdb
    >>> ny = tzdb.region("America/New_York")
    >>>
    >>> # always at 11:00 in New York, regardless of the offset
    >>> ZonedDateTime(2024, 12, 8, hour=11, zone=ny)
    ZonedDateTime(2024-12-08T11:00:00-05:00[America/New_York])
    >>>
    >>> # 2:30 doesn't exist on this day: the clock jumps to 3:30
    >>> ZonedDateTime(2020, 3, 8, 2, 30, zone=ny)
    ZonedDateTime(2020-03-08T03:30:00-04:00[America/New_York])
    >>>
    >>> # Explicitly resolve ambiguities when clocks are set backwards.
    >>> ZonedDateTime(2020, 11, 1, 1, 30, zone=ny, disambiguate="later")
    ZonedDateTime(2020-11-01T01:30:00-05:00[America/New_York])

    Disambiguation
    --------------

    The ``disambiguate`` argument controls how local times that occur
    twice (an *overlap*) or not at all (a *gap*) are handled:

    +------------------+-------------------------------------------------+
    | ``disambiguate`` | Behavior                                        |
    +==================+=================================================+
    | ``"compatible"`` | (default) Choose "earlier" for overlaps and     |
    |                  | "later" for gaps. This matches RFC 5545.        |
    +------------------+-------------------------------------------------+
    | ``"earlier"``    | Choose the earlier of the two instants          |
    +------------------+-------------------------------------------------+
    | ``"later"``      | Choose the later of the two instants            |
    +------------------+-------------------------------------------------+
    | ``"raise"``      | Refuse to guess:                                |
    |                  | raise :exc:`~civiltime.Ambiguous`               |
    |                  | or :exc:`~civiltime.DoesntExistInZone`.         |
    +------------------+-------------------------------------------------+

    In a gap, "earlier" and "later" shift the local time by the length of
    the gap, backward and forward respectively.

    The canonical string format is:

    .. code-block:: text

       YYYY-MM-DDTHH:MM:SS(.fffffffff)±HH:MM(:SS)[ZONE ID]

    The offset is included to disambiguate local times that occur twice.
    For fixed-offset zones the bracketed id is left out.
    """

    __slots__ = ("_zone",)

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
        *,
        zone: TimeZone,
        disambiguate: Disambiguate = "compatible",
    ) -> None:
        self._date_time, self._offset = _resolve(
            DateTime(year, month, day, hour, minute, second, nanosecond),
            zone,
            disambiguate,
            None,
        )
        self._zone = zone

    @classmethod
    def from_local(
        cls,
        date_time: DateTime,
        zone: TimeZone,
        /,
        disambiguate: Disambiguate = "compatible",
        preferred_offset: UtcOffset | None = None,
    ) -> ZonedDateTime:
        """Bind a local date-time to a zone.

        If the local time occurs twice and ``preferred_offset`` is one of
        the valid offsets, it is used. Otherwise ``disambiguate`` decides.

        Raises
        ------
        DoesntExistInZone
            In a gap, with ``disambiguate="raise"``.
        Ambiguous
            In an overlap, with ``disambiguate="raise"``.

        """
        return cls._from_parts(
            *_resolve(date_time, zone, disambiguate, preferred_offset), zone
        )

    @classmethod
    def from_instant(cls, instant: Instant, zone: TimeZone, /) -> ZonedDateTime:
        offset = zone.rules.offset_at(instant)
        return cls._from_parts(
            DateTime.from_epoch_second(
                instant.epoch_second, instant.nanosecond, offset
            ),
            offset,
            zone,
        )

    @classmethod
    def now(cls, clock: Clock) -> ZonedDateTime:
        """The current date and time in the clock's zone"""
        return cls.from_instant(clock.read_instant(), clock.zone)

    @property
    def zone(self) -> TimeZone:
        return self._zone

    def canonical_format(self) -> str:
        if self._zone.is_fixed:
            return f"{self._date_time}{self._offset}"
        return f"{self._date_time}{self._offset}[{self._zone.id}]"

    @classmethod
    def from_canonical_format(
        cls, s: str, /, provider: TimeZoneRulesProvider | None = None
    ) -> ZonedDateTime:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`. A provider is needed for
        region zones.

        Example
        -------

        >>> ZonedDateTime.from_canonical_format(
        ...     "2020-11-01T01:30:00-05:00[America/New_York]",
        ...     provider=tzdb.default_provider(),
        ... )
        ZonedDateTime(2020-11-01T01:30:00-05:00[America/New_York])

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.
        InvalidOffsetForZone
            If the offset isn't valid for the local time in the zone.

        """
        if not (match := _match_zoned(s)):
            raise InvalidFormat(f"invalid zoned date-time: {s!r}")
        date_time = DateTime.from_canonical_format(match[1])
        offset = UtcOffset.from_canonical_format(match[2])
        zone = (
            TimeZone.parse(match[3], provider)
            if match[3]
            else TimeZone.fixed(offset)
        )
        if not zone.rules.is_valid_offset(date_time, offset):
            raise InvalidOffsetForZone(
                f"offset {offset} is not valid for {date_time} in {zone.id}"
            )
        return cls._from_parts(date_time, offset, zone)

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            year: int | NOT_SET = NOT_SET(),
            month: int | NOT_SET = NOT_SET(),
            day: int | NOT_SET = NOT_SET(),
            hour: int | NOT_SET = NOT_SET(),
            minute: int | NOT_SET = NOT_SET(),
            second: int | NOT_SET = NOT_SET(),
            nanosecond: int | NOT_SET = NOT_SET(),
            zone: TimeZone | NOT_SET = NOT_SET(),
            disambiguate: Disambiguate | NOT_SET = NOT_SET(),
        ) -> ZonedDateTime: ...

    else:

        def replace(self, disambiguate="compatible", **kwargs) -> ZonedDateTime:
            """Create a new instance with the given fields replaced.
            The current offset is kept if it is still valid."""
            zone = kwargs.pop("zone", self._zone)
            return self.from_local(
                self._date_time.replace(**kwargs),
                zone,
                disambiguate,
                self._offset,
            )

    def __hash__(self) -> int:
        return hash(self._epoch_nano())

    # Hiding __eq__ from mypy ensures that --strict-equality works.
    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Compare the instants, regardless of zone

            Use :meth:`exact_eq` to also compare the zone and offset.
            """
            if not isinstance(other, ZonedDateTime):
                return NotImplemented
            return self._epoch_nano() == other._epoch_nano()

    def exact_eq(self, other: AwareDateTime, /) -> bool:
        return (
            isinstance(other, ZonedDateTime)
            and self._zone == other._zone
            and self._offset == other._offset
            and self._date_time == other._date_time
        )

    def add(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> ZonedDateTime:
        """Add components. The date components are added to the local date,
        keeping the local time. The time components are then added exactly,
        on the time line.

        Example
        -------

        >>> d = ZonedDateTime(2020, 3, 7, 12, zone=ny)
        >>> d.add(days=1)
        ZonedDateTime(2020-03-08T12:00:00-04:00[America/New_York])
        >>> d.add(hours=24)
        ZonedDateTime(2020-03-08T13:00:00-04:00[America/New_York])

        """
        return self + Period(
            years=years, months=months, weeks=weeks, days=days
        ) + Duration(
            nanoseconds=_time_nanos(
                hours, minutes, seconds, milliseconds, microseconds, nanoseconds
            )
        )

    def __add__(self, delta: Duration | Period) -> ZonedDateTime:
        """Add an amount of time, accounting for changes in offset.

        Adding a :class:`Duration` moves exactly that far on the time line.
        Adding a :class:`Period` moves the local date, keeping the local
        time of day. If the result falls in a gap, it's shifted forward;
        in an overlap, the current offset is kept if possible.
        """
        if isinstance(delta, Duration):
            if not delta:
                return self
            return self.from_instant(self.as_instant() + delta, self._zone)
        elif isinstance(delta, Period):
            if not delta:
                return self
            return self.from_local(
                self._date_time + delta, self._zone, "compatible", self._offset
            )
        return NotImplemented

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: AwareDateTime | Instant) -> Duration: ...

        @overload
        def __sub__(self, other: Duration | Period) -> ZonedDateTime: ...

        def __sub__(
            self, other: AwareDateTime | Instant | Duration | Period
        ) -> ZonedDateTime | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract another datetime, instant, duration or period"""
            if isinstance(other, (Duration, Period)):
                return self + -other
            elif (result := self._duration_since(other)) is not None:
                return result
            return NotImplemented

    def is_ambiguous(self) -> bool:
        """Whether the local time occurs twice in the zone

        Example
        -------

        >>> ZonedDateTime(2020, 8, 15, 23, zone=ny).is_ambiguous()
        False
        >>> ZonedDateTime(2020, 11, 1, 1, 30, zone=ny).is_ambiguous()
        True

        """
        return len(self._zone.rules.valid_offsets_at(self._date_time)) > 1

    def with_earlier_offset_at_overlap(self) -> ZonedDateTime:
        """In an overlap, the same local time at the offset before the
        transition (the earlier instant). Otherwise, this value."""
        transition = self._zone.rules.transition_at(self._date_time)
        if transition is None or transition.is_gap:
            return self
        return self._from_parts(
            self._date_time, transition.offset_before, self._zone
        )

    def with_later_offset_at_overlap(self) -> ZonedDateTime:
        """In an overlap, the same local time at the offset after the
        transition (the later instant). Otherwise, this value."""
        transition = self._zone.rules.transition_at(self._date_time)
        if transition is None or transition.is_gap:
            return self
        return self._from_parts(
            self._date_time, transition.offset_after, self._zone
        )

    def with_fixed_offset_zone(self) -> ZonedDateTime:
        """The same value, in a zone fixed at the current offset"""
        return self._from_parts(
            self._date_time, self._offset, TimeZone.fixed(self._offset)
        )

    @overload
    def as_offset(self, /) -> OffsetDateTime: ...

    @overload
    def as_offset(self, offset: UtcOffset, /) -> OffsetDateTime: ...

    def as_offset(self, offset: UtcOffset | None = None, /) -> OffsetDateTime:
        dt = OffsetDateTime._from_parts(self._date_time, self._offset)
        return dt if offset is None else dt.as_offset(offset)

    def as_zoned(self, zone: TimeZone, /) -> ZonedDateTime:
        if zone == self._zone:
            return self
        return self.from_instant(self.as_instant(), zone)

    def day_length(self) -> Duration:
        """The exact length of the current day, which may differ from
        24 hours around offset changes

        Example
        -------

        >>> ZonedDateTime(2020, 3, 8, 12, zone=ny).day_length()
        Duration(PT23H)
        >>> ZonedDateTime(2020, 3, 8, 12, zone=ny).start_of_day()
        ZonedDateTime(2020-03-08T00:00:00-05:00[America/New_York])

        """
        date = self._date_time.date()
        return self._at_start_of(date._plus_days(1)) - self._at_start_of(date)

    def _with_local(self, date_time: DateTime) -> ZonedDateTime:
        return self.from_local(date_time, self._zone, "compatible", self._offset)

    def _at_start_of(self, date: Date) -> ZonedDateTime:
        # A day doesn't always start at midnight: it may be skipped
        midnight = date.at(Time.MIDNIGHT)
        transition = self._zone.rules.transition_at(midnight)
        if transition is not None and transition.is_gap:
            return self._from_parts(
                transition.date_time_after, transition.offset_after, self._zone
            )
        return self.from_local(midnight, self._zone, "earlier")

    def _at_end_of(self, date: Date) -> ZonedDateTime:
        if date == Date.MAX:
            return self.from_local(date.at(Time.MAX), self._zone, "later")
        return self.from_instant(
            self._at_start_of(date._plus_days(1)).as_instant()
            - Duration(nanoseconds=1),
            self._zone,
        )

    def __repr__(self) -> str:
        return f"ZonedDateTime({self})"

    @classmethod
    def _from_parts(
        cls, date_time: DateTime, offset: UtcOffset, zone: TimeZone
    ) -> ZonedDateTime:
        self = _object_new(cls)
        self._date_time = date_time
        self._offset = offset
        self._zone = zone
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_zoned, (
            self._date_time.date().epoch_day,
            self._date_time.time().nanosecond_of_day,
            self._offset.total_seconds,
            self._zone,
        )


def _unpkl_zoned(
    epoch_day: int, nanos: int, offset_secs: int, zone: TimeZone
) -> ZonedDateTime:
    return ZonedDateTime._from_parts(
        Date.from_epoch_day(epoch_day).at(Time.from_nanosecond_of_day(nanos)),
        UtcOffset.from_total_seconds(offset_secs),
        zone,
    )


def _resolve(
    dt: DateTime,
    zone: TimeZone,
    disambiguate: str,
    preferred_offset: UtcOffset | None,
) -> tuple[DateTime, UtcOffset]:
    if disambiguate not in _DISAMBIGUATE_OPTIONS:
        raise ValueError(
            f"disambiguate must be one of {_DISAMBIGUATE_OPTIONS}, "
            f"got {disambiguate!r}"
        )
    rules = zone.rules
    transition = rules.transition_at(dt)
    if transition is None:
        return dt, rules.offset_at(dt)
    elif transition.is_gap:
        if disambiguate == "raise":
            raise DoesntExistInZone(
                f"{dt} is skipped in time zone {zone.id}"
            )
        elif disambiguate == "earlier":
            return dt - transition.duration, transition.offset_before
        return dt + transition.duration, transition.offset_after
    elif preferred_offset is not None and preferred_offset in (
        transition.offset_before,
        transition.offset_after,
    ):
        return dt, preferred_offset
    elif disambiguate == "raise":
        raise Ambiguous(f"{dt} is ambiguous in time zone {zone.id}")
    elif disambiguate == "later":
        return dt, transition.offset_after
    return dt, transition.offset_before


_DATETIME_PART = r"(.+T[^Z+\-\[]+)"
_OFFSET_PART = r"(Z|[+-][\d:]+)"
_match_offset_dt = re.compile(_DATETIME_PART + _OFFSET_PART, re.ASCII).fullmatch
_match_zoned = re.compile(
    _DATETIME_PART + _OFFSET_PART + r"(?:\[([^\]]+)\])?", re.ASCII
).fullmatch
_match_offset_time = re.compile(r"([^Z+\-]+)(Z|[+-][\d:]+)", re.ASCII).fullmatch
