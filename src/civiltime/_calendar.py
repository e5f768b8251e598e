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
# - The local calendar types live together in this module because they
#   'know' about each other (DateTime - DateTime gives a Duration, etc.)
# - Dates are stored as a day count since 1970-01-01. Year, month and day
#   are cached alongside because nearly every operation needs them.
# - Python's // and % already floor, so the remainders used to derive
#   weekdays and month/year carries are never negative.
from __future__ import annotations

import enum
import re
from time import time_ns
from typing import (
    TYPE_CHECKING,
    Callable,
    ClassVar,
    Literal,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    overload,
)

from ._common import (
    INT64_MAX,
    INT64_MIN,
    MAX_YEAR,
    MIN_YEAR,
    NOT_SET,
    NS_PER_DAY,
    NS_PER_HOUR,
    NS_PER_MIN,
    NS_PER_MS,
    NS_PER_SEC,
    NS_PER_US,
    SECS_PER_DAY,
    DateTimeOverflow,
    InvalidFormat,
    _object_new,
    check_hour,
    check_minute,
    check_month,
    check_nanosecond,
    check_range,
    check_second,
    check_year,
    div_trunc,
    plus_exact,
    times_exact,
    to_int32_exact,
)

if TYPE_CHECKING:
    from ._clock import Clock

__all__ = [
    "Weekday",
    "Month",
    "WeekSettings",
    "DateTimeField",
    "derive",
    "TimeUnit",
    "Date",
    "Time",
    "DateTime",
    "UtcOffset",
    "Instant",
    "Duration",
    "Period",
    "is_leap",
    "days_in_year",
    "days_in_month",
]


def is_leap(year: int, /) -> bool:
    """Whether the year is a leap year in the proleptic Gregorian calendar

    Example
    -------

    >>> is_leap(2000), is_leap(1900), is_leap(-4)
    (True, False, True)

    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int, /) -> int:
    return 366 if is_leap(year) else 365


def days_in_month(year: int, month: int, /) -> int:
    if month == 2:
        return 29 if is_leap(year) else 28
    return _DAYS_IN_MONTH[month]


_DAYS_IN_MONTH = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
# Days from 0000-03-01 to 1970-01-01. Counting from March puts the leap day
# at the end of the year, which keeps the cycle arithmetic below simple.
_DAYS_0000_03_01_TO_EPOCH = 719_468
_DAYS_PER_400_YEARS = 146_097


def _epoch_day_from_ymd(year: int, month: int, day: int) -> int:
    y = year - (month <= 2)
    era, year_of_era = divmod(y, 400)
    day_of_year = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365
        + year_of_era // 4
        - year_of_era // 100
        + day_of_year
    )
    return era * _DAYS_PER_400_YEARS + day_of_era - _DAYS_0000_03_01_TO_EPOCH


def _ymd_from_epoch_day(epoch_day: int) -> tuple[int, int, int]:
    era, day_of_era = divmod(
        epoch_day + _DAYS_0000_03_01_TO_EPOCH, _DAYS_PER_400_YEARS
    )
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    month_from_march = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * month_from_march + 2) // 5 + 1
    month = month_from_march + 3 if month_from_march < 10 else month_from_march - 9
    return year_of_era + era * 400 + (month <= 2), month, day


def _day_of_year(year: int, month: int, day: int) -> int:
    return _DAYS_BEFORE_MONTH[month] + day + (month > 2 and is_leap(year))


def _month_day_from_day_of_year(year: int, day_of_year: int) -> tuple[int, int]:
    check_range(day_of_year, 1, days_in_year(year), "day of year")
    leap = is_leap(year)
    month = 12
    while _DAYS_BEFORE_MONTH[month] + (month > 2 and leap) >= day_of_year:
        month -= 1
    return month, day_of_year - _DAYS_BEFORE_MONTH[month] - (month > 2 and leap)


def _months_since_year_0(year: int, month: int) -> int:
    return year * 12 + month - 1


class Weekday(enum.Enum):
    """Day of the week. The value is the ISO 8601 day number,
    from 1 (Monday) to 7 (Sunday)."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def number(self, settings: WeekSettings) -> int:
        """The 1-based position of this day in a week as defined by
        ``settings``

        Example
        -------

        >>> Weekday.SUNDAY.number(WeekSettings.ISO)
        7
        >>> Weekday.SUNDAY.number(WeekSettings.SUNDAY_START)
        1

        """
        return (self.value - settings.first_day_of_week.value) % 7 + 1


class Month(enum.Enum):
    """Month of the year, with the value as its number from 1 to 12.
    Adding or subtracting an integer wraps around the year.

    Example
    -------

    >>> Month.FEBRUARY.length_in(2020)
    29
    >>> Month.NOVEMBER + 3
    <Month.FEBRUARY: 2>

    """

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def length_in(self, year: int, /) -> int:
        """The number of days in this month of the given year"""
        return days_in_month(year, self.value)

    last_day_in = length_in

    def first_day_of_year_in(self, year: int, /) -> int:
        return _day_of_year(year, self.value, 1)

    def last_day_of_year_in(self, year: int, /) -> int:
        return _day_of_year(year, self.value, days_in_month(year, self.value))

    def __add__(self, months: int) -> Month:
        if not isinstance(months, int):
            return NotImplemented
        return Month((self.value - 1 + months) % 12 + 1)

    def __sub__(self, months: int) -> Month:
        if not isinstance(months, int):
            return NotImplemented
        return Month((self.value - 1 - months) % 12 + 1)


class WeekSettings:
    """The definition of a week: which day it starts on, and how many days
    of a new year (or month) the first week must contain.

    Example
    -------

    >>> WeekSettings.ISO
    WeekSettings(MONDAY, 4)
    >>> WeekSettings(Weekday.SUNDAY, minimum_days_in_first_week=1)
    WeekSettings(SUNDAY, 1)

    """

    __slots__ = ("_first_day", "_min_days")

    ISO: ClassVar[WeekSettings]
    """Weeks start on Monday, and the first week of a year contains
    at least 4 days of that year"""
    SUNDAY_START: ClassVar[WeekSettings]
    """Weeks start on Sunday, and the first week of a year contains
    January 1st"""

    def __init__(
        self,
        first_day_of_week: Weekday,
        minimum_days_in_first_week: int = 1,
    ) -> None:
        if not isinstance(first_day_of_week, Weekday):
            raise TypeError(
                f"first_day_of_week must be a Weekday, got {first_day_of_week!r}"
            )
        self._first_day = first_day_of_week
        self._min_days = check_range(
            minimum_days_in_first_week, 1, 7, "minimum_days_in_first_week"
        )

    @property
    def first_day_of_week(self) -> Weekday:
        return self._first_day

    @property
    def minimum_days_in_first_week(self) -> int:
        return self._min_days

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeekSettings):
            return NotImplemented
        return (self._first_day, self._min_days) == (
            other._first_day,
            other._min_days,
        )

    def __hash__(self) -> int:
        return hash((self._first_day, self._min_days))

    def __repr__(self) -> str:
        return f"WeekSettings({self._first_day.name}, {self._min_days})"


WeekSettings.ISO = WeekSettings(Weekday.MONDAY, 4)
WeekSettings.SUNDAY_START = WeekSettings(Weekday.SUNDAY, 1)


def _start_of_week_offset(
    day_of_period: int, weekday: Weekday, settings: WeekSettings
) -> int:
    start = (day_of_period - weekday.number(settings)) % 7
    return 7 - start if start >= settings.minimum_days_in_first_week else -start


def _week_number(day_of_period: int, start_offset: int) -> int:
    return (7 + start_offset + day_of_period - 1) // 7


def _week_based_year_and_week(
    year: int, day_of_year: int, weekday: Weekday, settings: WeekSettings
) -> tuple[int, int]:
    offset = _start_of_week_offset(day_of_year, weekday, settings)
    week = _week_number(day_of_year, offset)
    if week == 0:
        # Belongs to the last week of the previous year. December 31st
        # lies ``day_of_year`` days earlier, and can't itself be in week 0.
        return _week_based_year_and_week(
            year - 1,
            days_in_year(year - 1),
            Weekday((weekday.value - 1 - day_of_year) % 7 + 1),
            settings,
        )
    first_week_of_next_year = _week_number(
        days_in_year(year) + settings.minimum_days_in_first_week, offset
    )
    if week >= first_week_of_next_year:
        return year + 1, week - first_week_of_next_year + 1
    return year, week


class DateTimeField(enum.Enum):
    """A field of a date, time or offset. Used to assemble values from
    partial information, e.g. while parsing."""

    YEAR = "year"
    YEAR_OF_ERA = "year of era"
    ERA = "era"
    MONTH_OF_YEAR = "month of year"
    DAY_OF_MONTH = "day of month"
    DAY_OF_YEAR = "day of year"
    DAY_OF_WEEK = "day of week"
    DAY_OF_UNIX_EPOCH = "day of unix epoch"
    AM_PM_OF_DAY = "AM/PM of day"
    HOUR_OF_AM_PM = "hour of AM/PM"
    HOUR_OF_DAY = "hour of day"
    MINUTE_OF_HOUR = "minute of hour"
    SECOND_OF_MINUTE = "second of minute"
    NANOSECOND_OF_SECOND = "nanosecond of second"
    SECOND_OF_DAY = "second of day"
    NANOSECOND_OF_DAY = "nanosecond of day"
    UTC_OFFSET_TOTAL_SECONDS = "UTC offset total seconds"
    SECOND_OF_UNIX_EPOCH = "second of unix epoch"


_F = DateTimeField
_Rule = Tuple[Tuple[DateTimeField, ...], Callable[..., int]]

# For each field, the alternative ways of deriving it, tried in order
_DERIVATIONS: dict[DateTimeField, Sequence[_Rule]] = {
    _F.YEAR: (
        ((_F.YEAR_OF_ERA, _F.ERA), lambda y, era: y if era else 1 - y),
        ((_F.DAY_OF_UNIX_EPOCH,), lambda d: _ymd_from_epoch_day(d)[0]),
    ),
    _F.YEAR_OF_ERA: (((_F.YEAR,), lambda y: y if y >= 1 else 1 - y),),
    _F.ERA: (((_F.YEAR,), lambda y: int(y >= 1)),),
    _F.MONTH_OF_YEAR: (
        ((_F.DAY_OF_UNIX_EPOCH,), lambda d: _ymd_from_epoch_day(d)[1]),
        (
            (_F.YEAR, _F.DAY_OF_YEAR),
            lambda y, doy: _month_day_from_day_of_year(y, doy)[0],
        ),
    ),
    _F.DAY_OF_MONTH: (
        ((_F.DAY_OF_UNIX_EPOCH,), lambda d: _ymd_from_epoch_day(d)[2]),
        (
            (_F.YEAR, _F.DAY_OF_YEAR),
            lambda y, doy: _month_day_from_day_of_year(y, doy)[1],
        ),
    ),
    _F.DAY_OF_YEAR: (
        ((_F.YEAR, _F.MONTH_OF_YEAR, _F.DAY_OF_MONTH), _day_of_year),
    ),
    _F.DAY_OF_WEEK: (((_F.DAY_OF_UNIX_EPOCH,), lambda d: (d + 3) % 7 + 1),),
    _F.DAY_OF_UNIX_EPOCH: (
        ((_F.YEAR, _F.MONTH_OF_YEAR, _F.DAY_OF_MONTH), _epoch_day_from_ymd),
    ),
    _F.AM_PM_OF_DAY: (((_F.HOUR_OF_DAY,), lambda h: h // 12),),
    _F.HOUR_OF_AM_PM: (((_F.HOUR_OF_DAY,), lambda h: h % 12),),
    _F.HOUR_OF_DAY: (
        ((_F.AM_PM_OF_DAY, _F.HOUR_OF_AM_PM), lambda ampm, h: ampm * 12 + h),
        ((_F.SECOND_OF_DAY,), lambda s: s // 3600),
    ),
    _F.MINUTE_OF_HOUR: (((_F.SECOND_OF_DAY,), lambda s: s // 60 % 60),),
    _F.SECOND_OF_MINUTE: (((_F.SECOND_OF_DAY,), lambda s: s % 60),),
    _F.NANOSECOND_OF_SECOND: (
        ((_F.NANOSECOND_OF_DAY,), lambda n: n % NS_PER_SEC),
    ),
    _F.SECOND_OF_DAY: (
        (
            (_F.HOUR_OF_DAY, _F.MINUTE_OF_HOUR, _F.SECOND_OF_MINUTE),
            lambda h, m, s: h * 3600 + m * 60 + s,
        ),
        ((_F.NANOSECOND_OF_DAY,), lambda n: n // NS_PER_SEC),
    ),
    _F.NANOSECOND_OF_DAY: (
        (
            (_F.SECOND_OF_DAY, _F.NANOSECOND_OF_SECOND),
            lambda s, n: s * NS_PER_SEC + n,
        ),
    ),
    _F.UTC_OFFSET_TOTAL_SECONDS: (),
    _F.SECOND_OF_UNIX_EPOCH: (
        (
            (_F.DAY_OF_UNIX_EPOCH, _F.SECOND_OF_DAY, _F.UTC_OFFSET_TOTAL_SECONDS),
            lambda d, s, off: d * SECS_PER_DAY + s - off,
        ),
    ),
}


def derive(
    field: DateTimeField, fields: Mapping[DateTimeField, int], /
) -> Optional[int]:
    """The value of ``field``, taken from ``fields`` or derived from the
    other fields present. Returns ``None`` if it can't be determined.

    Example
    -------

    >>> derive(DateTimeField.DAY_OF_WEEK, {DateTimeField.DAY_OF_UNIX_EPOCH: 0})
    4
    >>> derive(
    ...     DateTimeField.YEAR,
    ...     {DateTimeField.YEAR_OF_ERA: 44, DateTimeField.ERA: 0},
    ... )
    -43
    >>> derive(DateTimeField.HOUR_OF_DAY, {}) is None
    True

    """
    return _derive(field, fields, frozenset())


def _derive(
    field: DateTimeField,
    fields: Mapping[DateTimeField, int],
    visiting: frozenset[DateTimeField],
) -> Optional[int]:
    try:
        return fields[field]
    except KeyError:
        pass
    if field in visiting:
        return None
    visiting |= {field}
    for sources, rule in _DERIVATIONS[field]:
        values = []
        for source in sources:
            value = _derive(source, fields, visiting)
            if value is None:
                break
            values.append(value)
        else:
            return rule(*values)
    return None


def _get_field(owner: object, field: DateTimeField, fields: dict) -> int:
    if (value := _derive(field, fields, frozenset())) is None:
        raise ValueError(
            f"{type(owner).__name__} doesn't support the field {field.name}"
        )
    return value


_RoundMode = Literal["down", "up", "half_up"]
_T = TypeVar("_T", bound="_Rounding")


class _Rounding:
    """Rounding of a time of day to a multiple of a unit. Subclasses
    implement ``_round``."""

    __slots__ = ()

    def rounded_to(self: _T, unit: TimeUnit, /, increment: int = 1) -> _T:
        """Round to the nearest multiple of ``increment`` units,
        with halfway values rounding up.

        The increment must divide evenly into the next larger unit,
        e.g. 15 minutes or 6 hours. Only one day may be rounded to.

        Example
        -------

        >>> Time(12, 37, 30).rounded_to(TimeUnit.MINUTES, increment=15)
        Time(12:45:00)
        >>> Time(12, 37, 29).rounded_to(TimeUnit.MINUTES, increment=15)
        Time(12:30:00)

        Raises
        ------
        ValueError
            If the unit is weeks or longer, or the increment is invalid.

        """
        return self._round(_rounding_step(unit, increment), "half_up")

    def rounded_up_to(self: _T, unit: TimeUnit, /, increment: int = 1) -> _T:
        """Round up to the next multiple of ``increment`` units,
        unless already on one. See :meth:`rounded_to` for valid units."""
        return self._round(_rounding_step(unit, increment), "up")

    def rounded_down_to(self: _T, unit: TimeUnit, /, increment: int = 1) -> _T:
        """Round down to the previous multiple of ``increment`` units,
        unless already on one. See :meth:`rounded_to` for valid units."""
        return self._round(_rounding_step(unit, increment), "down")

    def truncated_to(self: _T, unit: TimeUnit, /) -> _T:
        """Drop all precision smaller than ``unit``

        Example
        -------

        >>> Time(12, 37, 59).truncated_to(TimeUnit.HOURS)
        Time(12:00:00)

        """
        return self._round(_rounding_step(unit, 1), "down")

    def _round(self: _T, step: int, mode: _RoundMode) -> _T:
        raise NotImplementedError()


class Date:
    """A date in the proleptic Gregorian calendar, without a time component

    Supported years range from -999,999,999 to 999,999,999.

    Example
    -------

    >>> d = Date(2021, 1, 2)
    Date(2021-01-02)
    >>> d.day_of_week()
    <Weekday.SATURDAY: 6>

    """

    __slots__ = ("_epoch_day", "_year", "_month", "_day")

    MIN: ClassVar[Date]
    """The earliest supported date, -999999999-01-01"""
    MAX: ClassVar[Date]
    """The latest supported date, +999999999-12-31"""

    def __init__(self, year: int, month: int, day: int) -> None:
        check_year(year)
        check_month(month)
        check_range(day, 1, days_in_month(year, month), "day")
        self._year = year
        self._month = month
        self._day = day
        self._epoch_day = _epoch_day_from_ymd(year, month, day)

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def day(self) -> int:
        return self._day

    @property
    def epoch_day(self) -> int:
        """The number of days since 1970-01-01

        Example
        -------

        >>> Date(1970, 1, 2).epoch_day
        1
        >>> Date(1969, 12, 31).epoch_day
        -1

        """
        return self._epoch_day

    @classmethod
    def from_epoch_day(cls, day: int, /) -> Date:
        """Create from the number of days since 1970-01-01

        Inverse of :attr:`epoch_day`

        Example
        -------

        >>> Date.from_epoch_day(18628)
        Date(2021-01-01)

        """
        check_range(day, _MIN_EPOCH_DAY, _MAX_EPOCH_DAY, "epoch day")
        return cls._from_epoch_day_unchecked(day)

    @classmethod
    def from_day_of_year(cls, year: int, day_of_year: int, /) -> Date:
        check_year(year)
        return cls(year, *_month_day_from_day_of_year(year, day_of_year))

    @classmethod
    def today(cls, clock: Clock) -> Date:
        """The current date, as read from the clock in its time zone"""
        return DateTime.now(clock)._date

    @classmethod
    def from_fields(cls, fields: Mapping[DateTimeField, int], /) -> Date:
        """Create from a mapping of fields, deriving missing fields
        where possible.

        Example
        -------

        >>> Date.from_fields({
        ...     DateTimeField.YEAR: 2021,
        ...     DateTimeField.DAY_OF_YEAR: 32,
        ... })
        Date(2021-02-01)

        Raises
        ------
        ValueError
            If the fields are insufficient or invalid.

        """
        if (day := fields.get(_F.DAY_OF_UNIX_EPOCH)) is not None:
            return cls.from_epoch_day(day)
        year = _derive(_F.YEAR, fields, frozenset())
        month = _derive(_F.MONTH_OF_YEAR, fields, frozenset())
        day = _derive(_F.DAY_OF_MONTH, fields, frozenset())
        if year is None or month is None or day is None:
            raise ValueError("insufficient fields to determine a date")
        return cls(year, month, day)

    def get(self, field: DateTimeField, /) -> int:
        """The value of a field, e.g. ``DateTimeField.DAY_OF_YEAR``

        Raises
        ------
        ValueError
            If the field doesn't apply to dates.

        """
        return _get_field(self, field, self._fields())

    def _fields(self) -> dict[DateTimeField, int]:
        return {
            _F.YEAR: self._year,
            _F.MONTH_OF_YEAR: self._month,
            _F.DAY_OF_MONTH: self._day,
            _F.DAY_OF_UNIX_EPOCH: self._epoch_day,
        }

    def day_of_week(self) -> Weekday:
        """The day of the week

        Example
        -------

        >>> Date(2021, 1, 2).day_of_week()
        <Weekday.SATURDAY: 6>

        """
        return Weekday((self._epoch_day + 3) % 7 + 1)

    def day_of_year(self) -> int:
        return _day_of_year(self._year, self._month, self._day)

    def days_in_month(self) -> int:
        return days_in_month(self._year, self._month)

    def days_in_year(self) -> int:
        return days_in_year(self._year)

    def is_leap_year(self) -> bool:
        return is_leap(self._year)

    def week_of_month(self, settings: WeekSettings = WeekSettings.ISO) -> int:
        """The week of the month, from 0 to 6. Week 0 holds the days
        before the first week that has enough days in this month."""
        return _week_number(
            self._day,
            _start_of_week_offset(self._day, self.day_of_week(), settings),
        )

    def week_of_year(self, settings: WeekSettings = WeekSettings.ISO) -> int:
        """The week of the year, from 0 to 54. Unlike
        :meth:`week_of_week_based_year`, days before the first week are
        in week 0."""
        day_of_year = self.day_of_year()
        return _week_number(
            day_of_year,
            _start_of_week_offset(day_of_year, self.day_of_week(), settings),
        )

    def week_based_year(self, settings: WeekSettings = WeekSettings.ISO) -> int:
        """The year the week of this date belongs to

        Example
        -------

        >>> Date(2005, 1, 1).week_based_year()
        2004
        >>> Date(2008, 12, 29).week_based_year()
        2009

        """
        return self.week_date(settings)[0]

    def week_of_week_based_year(
        self, settings: WeekSettings = WeekSettings.ISO
    ) -> int:
        return self.week_date(settings)[1]

    def week_date(
        self, settings: WeekSettings = WeekSettings.ISO
    ) -> tuple[int, int, int]:
        """The week date: week-based year, week, and day of the week

        Example
        -------

        >>> Date(2005, 1, 1).week_date()
        (2004, 53, 6)
        >>> Date(2017, 12, 31).week_date(WeekSettings.SUNDAY_START)
        (2018, 1, 1)

        """
        weekday = self.day_of_week()
        year, week = _week_based_year_and_week(
            self._year, self.day_of_year(), weekday, settings
        )
        return year, week, weekday.number(settings)

    @classmethod
    def from_week_date(
        cls,
        year: int,
        week: int,
        day: int,
        settings: WeekSettings = WeekSettings.ISO,
    ) -> Date:
        """Create from a week date. Inverse of :meth:`week_date`

        Example
        -------

        >>> Date.from_week_date(2004, 53, 6)
        Date(2005-01-01)

        Raises
        ------
        ValueError
            If the week doesn't exist in the week-based year, or the day
            isn't in 1..7.

        """
        # Week-based years reach one past the calendar years at both ends
        check_range(year, MIN_YEAR - 1, MAX_YEAR + 1, "week-based year")
        check_range(week, 1, 53, "week")
        check_range(day, 1, 7, "day of week")
        # The day numbered 'minimum days' in January is always in week 1.
        # Only its epoch day is needed, so the year may be out of range.
        anchor = _epoch_day_from_ymd(year, 1, settings.minimum_days_in_first_week)
        epoch_day = (
            anchor
            + (week - 1) * 7
            + day
            - Weekday((anchor + 3) % 7 + 1).number(settings)
        )
        if not _MIN_EPOCH_DAY <= epoch_day <= _MAX_EPOCH_DAY:
            raise ValueError(
                f"week date {year}-W{week}-{day} is out of range"
            )
        result = cls._from_epoch_day_unchecked(epoch_day)
        if result.week_date(settings) != (year, week, day):
            raise ValueError(
                f"week {week} doesn't exist in week-based year {year}"
            )
        return result

    def add(
        self, years: int = 0, months: int = 0, weeks: int = 0, days: int = 0
    ) -> Date:
        """Add a components to a date.

        Components are added in the order of years, months, weeks, and days.
        After adding years and months, the day is clamped to the last day
        of the resulting month.

        Example
        -------

        >>> d = Date(2021, 1, 2)
        >>> d.add(years=1, months=2, days=3)
        Date(2022-03-05)

        >>> Date(2020, 2, 29).add(years=1)
        Date(2021-02-28)
        >>> Date(2018, 1, 31).add(months=1)
        Date(2018-02-28)

        Raises
        ------
        DateTimeOverflow
            If the result is outside the supported range.

        """
        return (
            self._plus_months(times_exact(years, 12))
            ._plus_months(months)
            ._plus_days(plus_exact(times_exact(weeks, 7), days))
        )

    def _plus_months(self, months: int) -> Date:
        if not months:
            return self
        year, month = divmod(
            plus_exact(_months_since_year_0(self._year, self._month), months),
            12,
        )
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise DateTimeOverflow("resulting date is out of range")
        month += 1
        return Date._from_ymd_unchecked(
            year, month, min(self._day, days_in_month(year, month))
        )

    def _plus_days(self, days: int) -> Date:
        if not days:
            return self
        day = plus_exact(self._epoch_day, days)
        if not _MIN_EPOCH_DAY <= day <= _MAX_EPOCH_DAY:
            raise DateTimeOverflow("resulting date is out of range")
        return Date._from_epoch_day_unchecked(day)

    def __add__(self, p: Period) -> Date:
        """Add a period to the date

        Example
        -------

        >>> Date(2021, 1, 31) + Period(months=1, days=2)
        Date(2021-03-02)

        """
        if not isinstance(p, Period):
            return NotImplemented
        return self.add(years=p._years, months=p._months, days=p._days)

    @overload
    def __sub__(self, other: Period) -> Date: ...

    @overload
    def __sub__(self, other: Date) -> Period: ...

    def __sub__(self, other: Period | Date) -> Date | Period:
        """Subtract a period, or get the period between two dates

        Example
        -------

        >>> Date(2021, 3, 1) - Period(days=1)
        Date(2021-02-28)
        >>> Date(2021, 3, 1) - Date(2021, 1, 31)
        Period(P1M1D)

        """
        if isinstance(other, Period):
            return self.add(
                years=-other._years, months=-other._months, days=-other._days
            )
        elif isinstance(other, Date):
            return Period.between(other, self)
        return NotImplemented

    def at(self, time: Time, /) -> DateTime:
        """Combine with a time to create a :class:`DateTime`"""
        return DateTime._from_parts(self, time)

    def start_of_week(self, settings: WeekSettings = WeekSettings.ISO) -> Date:
        """The first day of the week containing this date

        Example
        -------

        >>> Date(2021, 1, 2).start_of_week()
        Date(2020-12-28)
        >>> Date(2021, 1, 2).start_of_week(WeekSettings.SUNDAY_START)
        Date(2020-12-27)

        Raises
        ------
        DateTimeOverflow
            If the week starts before :attr:`Date.MIN`.

        """
        return self._plus_days(1 - self.day_of_week().number(settings))

    def end_of_week(self, settings: WeekSettings = WeekSettings.ISO) -> Date:
        """The last day of the week containing this date"""
        return self._plus_days(7 - self.day_of_week().number(settings))

    def start_of_month(self) -> Date:
        return Date._from_ymd_unchecked(self._year, self._month, 1)

    def end_of_month(self) -> Date:
        return Date._from_ymd_unchecked(
            self._year, self._month, days_in_month(self._year, self._month)
        )

    def start_of_year(self) -> Date:
        return Date._from_ymd_unchecked(self._year, 1, 1)

    def end_of_year(self) -> Date:
        return Date._from_ymd_unchecked(self._year, 12, 31)

    def next(self, weekday: Weekday, /) -> Date:
        """The first date after this one that falls on ``weekday``

        Example
        -------

        >>> Date(2021, 1, 2).next(Weekday.SATURDAY)
        Date(2021-01-09)
        >>> Date(2021, 1, 2).next_or_same(Weekday.SATURDAY)
        Date(2021-01-02)

        Raises
        ------
        DateTimeOverflow
            If the result is after :attr:`Date.MAX`.

        """
        return self._plus_days((weekday.value - self.day_of_week().value - 1) % 7 + 1)

    def next_or_same(self, weekday: Weekday, /) -> Date:
        return self._plus_days((weekday.value - self.day_of_week().value) % 7)

    def previous(self, weekday: Weekday, /) -> Date:
        """The last date before this one that falls on ``weekday``"""
        return self._plus_days(
            -((self.day_of_week().value - weekday.value - 1) % 7 + 1)
        )

    def previous_or_same(self, weekday: Weekday, /) -> Date:
        return self._plus_days(-((self.day_of_week().value - weekday.value) % 7))

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            year: int | NOT_SET = NOT_SET(),
            month: int | NOT_SET = NOT_SET(),
            day: int | NOT_SET = NOT_SET(),
        ) -> Date: ...

    else:

        def replace(self, **kwargs) -> Date:
            """Create a new instance with the given fields replaced

            Example
            -------

            >>> Date(2021, 1, 2).replace(day=4)
            Date(2021-01-04)

            """
            return Date(
                kwargs.get("year", self._year),
                kwargs.get("month", self._month),
                kwargs.get("day", self._day),
            )

    def canonical_format(self) -> str:
        """The date in canonical format.

        Years outside 0000-9999 get a sign, so that the format stays
        unambiguous.

        Example
        -------

        >>> Date(2021, 1, 2).canonical_format()
        '2021-01-02'
        >>> Date(-43, 3, 15).canonical_format()
        '-0043-03-15'
        >>> Date(12021, 1, 2).canonical_format()
        '+12021-01-02'

        """
        return f"{_format_year(self._year)}-{self._month:02}-{self._day:02}"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Date:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Example
        -------

        >>> Date.from_canonical_format("2021-01-02")
        Date(2021-01-02)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_date(s)):
            raise InvalidFormat(f"invalid date: {s!r}")
        return _from_fields_or_invalid(cls, _date_fields(match, 1), s)

    def __repr__(self) -> str:
        return f"Date({self})"

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Compare for equality

            Example
            -------

            >>> d = Date(2021, 1, 2)
            >>> d == Date(2021, 1, 2)
            True
            >>> d == Date(2021, 1, 3)
            False

            """
            if not isinstance(other, Date):
                return NotImplemented
            return self._epoch_day == other._epoch_day

    def __hash__(self) -> int:
        return hash(self._epoch_day)

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._epoch_day < other._epoch_day

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._epoch_day <= other._epoch_day

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._epoch_day > other._epoch_day

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._epoch_day >= other._epoch_day

    @classmethod
    def _from_epoch_day_unchecked(cls, day: int) -> Date:
        self = _object_new(cls)
        self._year, self._month, self._day = _ymd_from_epoch_day(day)
        self._epoch_day = day
        return self

    @classmethod
    def _from_ymd_unchecked(cls, year: int, month: int, day: int) -> Date:
        self = _object_new(cls)
        self._year = year
        self._month = month
        self._day = day
        self._epoch_day = _epoch_day_from_ymd(year, month, day)
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_date, (self._year, self._month, self._day)


def _unpkl_date(year: int, month: int, day: int) -> Date:
    return Date(year, month, day)


_MIN_EPOCH_DAY = _epoch_day_from_ymd(MIN_YEAR, 1, 1)
_MAX_EPOCH_DAY = _epoch_day_from_ymd(MAX_YEAR, 12, 31)
Date.MIN = Date._from_epoch_day_unchecked(_MIN_EPOCH_DAY)
Date.MAX = Date._from_epoch_day_unchecked(_MAX_EPOCH_DAY)


class Time(_Rounding):
    """Time of day without a date component, with nanosecond precision

    Example
    -------

    >>> t = Time(12, 30, 0)
    Time(12:30:00)

    """

    __slots__ = ("_nanos",)

    MIDNIGHT: ClassVar[Time]
    NOON: ClassVar[Time]
    MIN: ClassVar[Time]
    MAX: ClassVar[Time]

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
    ) -> None:
        self._nanos = (
            check_hour(hour) * NS_PER_HOUR
            + check_minute(minute) * NS_PER_MIN
            + check_second(second) * NS_PER_SEC
            + check_nanosecond(nanosecond)
        )

    @property
    def hour(self) -> int:
        return self._nanos // NS_PER_HOUR

    @property
    def minute(self) -> int:
        return self._nanos // NS_PER_MIN % 60

    @property
    def second(self) -> int:
        return self._nanos // NS_PER_SEC % 60

    @property
    def nanosecond(self) -> int:
        return self._nanos % NS_PER_SEC

    @property
    def nanosecond_of_day(self) -> int:
        return self._nanos

    @property
    def second_of_day(self) -> int:
        return self._nanos // NS_PER_SEC

    @classmethod
    def from_nanosecond_of_day(cls, nanos: int, /) -> Time:
        check_range(nanos, 0, NS_PER_DAY - 1, "nanosecond of day")
        return cls._from_nanos_unchecked(nanos)

    @classmethod
    def from_fields(cls, fields: Mapping[DateTimeField, int], /) -> Time:
        if (nanos := fields.get(_F.NANOSECOND_OF_DAY)) is not None:
            return cls.from_nanosecond_of_day(nanos)
        hour = _derive(_F.HOUR_OF_DAY, fields, frozenset())
        if hour is None:
            raise ValueError("insufficient fields to determine a time")
        return cls(
            hour,
            _derive(_F.MINUTE_OF_HOUR, fields, frozenset()) or 0,
            _derive(_F.SECOND_OF_MINUTE, fields, frozenset()) or 0,
            _derive(_F.NANOSECOND_OF_SECOND, fields, frozenset()) or 0,
        )

    def get(self, field: DateTimeField, /) -> int:
        return _get_field(self, field, self._fields())

    def _fields(self) -> dict[DateTimeField, int]:
        return {
            _F.HOUR_OF_DAY: self.hour,
            _F.MINUTE_OF_HOUR: self.minute,
            _F.SECOND_OF_MINUTE: self.second,
            _F.NANOSECOND_OF_SECOND: self.nanosecond,
            _F.NANOSECOND_OF_DAY: self._nanos,
        }

    def add(
        self,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> Time:
        """Add time components, wrapping around midnight

        Example
        -------

        >>> Time(23, 30).add(hours=1)
        Time(00:30:00)

        """
        return self._from_nanos_unchecked(
            (
                self._nanos
                + hours * NS_PER_HOUR
                + minutes * NS_PER_MIN
                + seconds * NS_PER_SEC
                + milliseconds * NS_PER_MS
                + microseconds * NS_PER_US
                + nanoseconds
            )
            % NS_PER_DAY
        )

    def __add__(self, d: Duration) -> Time:
        if not isinstance(d, Duration):
            return NotImplemented
        return self._from_nanos_unchecked((self._nanos + d._total_ns) % NS_PER_DAY)

    def __sub__(self, d: Duration) -> Time:
        if not isinstance(d, Duration):
            return NotImplemented
        return self._from_nanos_unchecked((self._nanos - d._total_ns) % NS_PER_DAY)

    def on(self, date: Date, /) -> DateTime:
        """Combine with a date to create a :class:`DateTime`"""
        return DateTime._from_parts(date, self)

    def _round(self, step: int, mode: _RoundMode) -> Time:
        # Rounding up past the last increment wraps around to midnight
        return self._from_nanos_unchecked(
            _round_ns(self._nanos, step, mode) % NS_PER_DAY
        )

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            hour: int | NOT_SET = NOT_SET(),
            minute: int | NOT_SET = NOT_SET(),
            second: int | NOT_SET = NOT_SET(),
            nanosecond: int | NOT_SET = NOT_SET(),
        ) -> Time: ...

    else:

        def replace(self, **kwargs) -> Time:
            return Time(
                kwargs.get("hour", self.hour),
                kwargs.get("minute", self.minute),
                kwargs.get("second", self.second),
                kwargs.get("nanosecond", self.nanosecond),
            )

    def canonical_format(self) -> str:
        """The time in canonical format.

        Fractions of a second are written with 3, 6 or 9 digits,
        whichever is the shortest exact representation.

        Example
        -------

        >>> Time(12, 30).canonical_format()
        '12:30:00'
        >>> Time(12, 30, 5, 1_500_000).canonical_format()
        '12:30:05.001500'

        """
        return _format_time(self._nanos)

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Time:
        if not (match := _match_time(s)):
            raise InvalidFormat(f"invalid time: {s!r}")
        return _from_fields_or_invalid(cls, _time_fields(match, 1), s)

    def __repr__(self) -> str:
        return f"Time({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._nanos == other._nanos

    def __hash__(self) -> int:
        return hash(self._nanos)

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._nanos < other._nanos

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._nanos <= other._nanos

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._nanos > other._nanos

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._nanos >= other._nanos

    @classmethod
    def _from_nanos_unchecked(cls, nanos: int) -> Time:
        self = _object_new(cls)
        self._nanos = nanos
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_time, (self._nanos,)


def _unpkl_time(nanos: int) -> Time:
    return Time._from_nanos_unchecked(nanos)


Time.MIDNIGHT = Time.MIN = Time()
Time.NOON = Time(12)
Time.MAX = Time._from_nanos_unchecked(NS_PER_DAY - 1)


class UtcOffset:
    """A fixed offset from UTC, of at most 18 hours in either direction

    Example
    -------

    >>> UtcOffset(hours=5, minutes=30)
    UtcOffset(+05:30)
    >>> UtcOffset(hours=-4)
    UtcOffset(-04:00)

    """

    __slots__ = ("_secs",)

    ZERO: ClassVar[UtcOffset]
    MIN: ClassVar[UtcOffset]
    MAX: ClassVar[UtcOffset]

    def __init__(self, hours: int = 0, minutes: int = 0, seconds: int = 0) -> None:
        check_range(hours, -18, 18, "hours")
        check_range(minutes, -59, 59, "minutes")
        check_range(seconds, -59, 59, "seconds")
        if (hours > 0 or minutes > 0 or seconds > 0) and (
            hours < 0 or minutes < 0 or seconds < 0
        ):
            raise ValueError("hours, minutes and seconds must have the same sign")
        self._secs = check_range(
            hours * 3600 + minutes * 60 + seconds,
            -_MAX_OFFSET_SECS,
            _MAX_OFFSET_SECS,
            "total offset seconds",
        )

    @classmethod
    def from_total_seconds(cls, seconds: int, /) -> UtcOffset:
        check_range(
            seconds, -_MAX_OFFSET_SECS, _MAX_OFFSET_SECS, "total offset seconds"
        )
        return cls._from_secs_unchecked(seconds)

    @property
    def total_seconds(self) -> int:
        return self._secs

    def as_tuple(self) -> tuple[int, int, int]:
        """The (hours, minutes, seconds) components, sharing one sign"""
        hours, rem = divmod(abs(self._secs), 3600)
        minutes, seconds = divmod(rem, 60)
        if self._secs < 0:
            return -hours, -minutes, -seconds
        return hours, minutes, seconds

    def as_duration(self) -> Duration:
        return Duration._from_ns_unchecked(self._secs * NS_PER_SEC)

    @classmethod
    def from_fields(cls, fields: Mapping[DateTimeField, int], /) -> UtcOffset:
        if (secs := fields.get(_F.UTC_OFFSET_TOTAL_SECONDS)) is None:
            raise ValueError("insufficient fields to determine an offset")
        return cls.from_total_seconds(secs)

    def get(self, field: DateTimeField, /) -> int:
        return _get_field(self, field, {_F.UTC_OFFSET_TOTAL_SECONDS: self._secs})

    def __neg__(self) -> UtcOffset:
        return self._from_secs_unchecked(-self._secs)

    def canonical_format(self) -> str:
        """The offset in canonical format: ``Z`` for zero, otherwise
        ``±HH:MM``, with seconds only when non-zero.

        Example
        -------

        >>> UtcOffset.ZERO.canonical_format()
        'Z'
        >>> UtcOffset(hours=-3, minutes=-30).canonical_format()
        '-03:30'

        """
        if not self._secs:
            return "Z"
        hours, minutes, seconds = map(abs, self.as_tuple())
        return (
            f"{'-' if self._secs < 0 else '+'}{hours:02}:{minutes:02}"
            + f":{seconds:02}" * bool(seconds)
        )

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> UtcOffset:
        if s == "Z":
            return cls.ZERO
        if not (match := _match_offset(s)):
            raise InvalidFormat(f"invalid offset: {s!r}")
        sign = -1 if match[1] == "-" else 1
        try:
            return cls(
                sign * int(match[2]),
                sign * int(match[3]),
                sign * int(match[4] or 0),
            )
        except ValueError as e:
            raise InvalidFormat(f"invalid offset: {s!r}") from e

    def __repr__(self) -> str:
        return f"UtcOffset({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs == other._secs

    def __hash__(self) -> int:
        return hash(self._secs)

    def __lt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs < other._secs

    def __le__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs <= other._secs

    def __gt__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs > other._secs

    def __ge__(self, other: UtcOffset) -> bool:
        if not isinstance(other, UtcOffset):
            return NotImplemented
        return self._secs >= other._secs

    @classmethod
    def _from_secs_unchecked(cls, secs: int) -> UtcOffset:
        self = _object_new(cls)
        self._secs = secs
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_offset, (self._secs,)


def _unpkl_offset(secs: int) -> UtcOffset:
    return UtcOffset._from_secs_unchecked(secs)


_MAX_OFFSET_SECS = 18 * 3600
UtcOffset.ZERO = UtcOffset()
UtcOffset.MIN = UtcOffset(hours=-18)
UtcOffset.MAX = UtcOffset(hours=18)


class DateTime(_Rounding):
    """A date and time of day, not bound to any time zone or offset

    Example
    -------

    >>> dt = DateTime(2020, 8, 15, 23, 12)
    DateTime(2020-08-15T23:12:00)
    >>> dt.add(months=1, hours=2)
    DateTime(2020-09-16T01:12:00)

    """

    __slots__ = ("_date", "_time")

    MIN: ClassVar[DateTime]
    MAX: ClassVar[DateTime]

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        nanosecond: int = 0,
    ) -> None:
        self._date = Date(year, month, day)
        self._time = Time(hour, minute, second, nanosecond)

    @property
    def year(self) -> int:
        return self._date._year

    @property
    def month(self) -> int:
        return self._date._month

    @property
    def day(self) -> int:
        return self._date._day

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

    def date(self) -> Date:
        return self._date

    def time(self) -> Time:
        return self._time

    @classmethod
    def now(cls, clock: Clock) -> DateTime:
        """The current local date and time, as read from the clock
        in its time zone"""
        instant = clock.read_instant()
        return cls.from_epoch_second(
            instant._secs,
            instant._nanos,
            clock.zone.rules.offset_at(instant),
        )

    @classmethod
    def from_epoch_second(
        cls, second: int, nanosecond: int = 0, offset: UtcOffset = UtcOffset.ZERO
    ) -> DateTime:
        """The local date and time at ``offset`` of a moment given in
        seconds since 1970-01-01T00:00Z

        Raises
        ------
        DateTimeOverflow
            If the local date-time is outside the supported range.

        """
        return cls._from_local_ns(
            plus_exact(second, offset._secs) * NS_PER_SEC + nanosecond
        )

    def epoch_second_at(self, offset: UtcOffset, /) -> int:
        """Seconds since 1970-01-01T00:00Z, interpreting this
        date-time at the given offset"""
        return self._local_secs() - offset._secs

    def instant_at(self, offset: UtcOffset, /) -> Instant:
        return Instant._from_secs_checked(
            self.epoch_second_at(offset), self._time._nanos % NS_PER_SEC
        )

    @classmethod
    def from_fields(cls, fields: Mapping[DateTimeField, int], /) -> DateTime:
        return cls._from_parts(Date.from_fields(fields), Time.from_fields(fields))

    def get(self, field: DateTimeField, /) -> int:
        return _get_field(
            self, field, {**self._date._fields(), **self._time._fields()}
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
    ) -> DateTime:
        """Add date and time components.

        Years, months, weeks and days are added to the date first (in that
        order, clamping the day to the end of the month where needed).
        The time components are then added exactly.

        Example
        -------

        >>> DateTime(2020, 1, 31, 23).add(months=1, hours=2)
        DateTime(2020-03-01T01:00:00)

        Raises
        ------
        DateTimeOverflow
            If the result is outside the supported range.

        """
        dt = self._from_parts(
            self._date.add(years=years, months=months, weeks=weeks, days=days),
            self._time,
        )
        return dt._plus_nanos(
            hours * NS_PER_HOUR
            + minutes * NS_PER_MIN
            + seconds * NS_PER_SEC
            + milliseconds * NS_PER_MS
            + microseconds * NS_PER_US
            + nanoseconds
        )

    def _plus_nanos(self, nanos: int) -> DateTime:
        if not nanos:
            return self
        return self._from_local_ns(self._local_ns() + nanos)

    def _round(self, step: int, mode: _RoundMode) -> DateTime:
        return self._from_local_ns(_round_ns(self._local_ns(), step, mode))

    def start_of_week(self, settings: WeekSettings = WeekSettings.ISO) -> DateTime:
        """Midnight at the start of the week containing this date-time

        Example
        -------

        >>> DateTime(2021, 1, 2, 15, 30).start_of_week()
        DateTime(2020-12-28T00:00:00)
        >>> DateTime(2021, 1, 2, 15, 30).end_of_month()
        DateTime(2021-01-31T23:59:59.999999999)

        """
        return self._from_parts(self._date.start_of_week(settings), Time.MIDNIGHT)

    def end_of_week(self, settings: WeekSettings = WeekSettings.ISO) -> DateTime:
        """The last nanosecond of the week containing this date-time"""
        return self._from_parts(self._date.end_of_week(settings), Time.MAX)

    def start_of_month(self) -> DateTime:
        return self._from_parts(self._date.start_of_month(), Time.MIDNIGHT)

    def end_of_month(self) -> DateTime:
        return self._from_parts(self._date.end_of_month(), Time.MAX)

    def start_of_year(self) -> DateTime:
        return self._from_parts(self._date.start_of_year(), Time.MIDNIGHT)

    def end_of_year(self) -> DateTime:
        return self._from_parts(self._date.end_of_year(), Time.MAX)

    def next(self, weekday: Weekday, /) -> DateTime:
        """The same time on the first later date falling on ``weekday``"""
        return self._from_parts(self._date.next(weekday), self._time)

    def next_or_same(self, weekday: Weekday, /) -> DateTime:
        return self._from_parts(self._date.next_or_same(weekday), self._time)

    def previous(self, weekday: Weekday, /) -> DateTime:
        """The same time on the last earlier date falling on ``weekday``"""
        return self._from_parts(self._date.previous(weekday), self._time)

    def previous_or_same(self, weekday: Weekday, /) -> DateTime:
        return self._from_parts(self._date.previous_or_same(weekday), self._time)

    def __add__(self, delta: Duration | Period) -> DateTime:
        """Add a duration (exactly) or a period (to the date)"""
        if isinstance(delta, Duration):
            return self._plus_nanos(delta._total_ns)
        elif isinstance(delta, Period):
            return self._from_parts(self._date + delta, self._time)
        return NotImplemented

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: DateTime) -> Duration: ...

        @overload
        def __sub__(self, other: Duration | Period) -> DateTime: ...

        def __sub__(
            self, other: DateTime | Duration | Period
        ) -> DateTime | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract another datetime, giving the exact duration between
            them, or subtract a duration or period"""
            if isinstance(other, DateTime):
                return Duration._from_ns_unchecked(
                    self._local_ns() - other._local_ns()
                )
            elif isinstance(other, Duration):
                return self._plus_nanos(-other._total_ns)
            elif isinstance(other, Period):
                return self._from_parts(self._date - other, self._time)
            return NotImplemented

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
        ) -> DateTime: ...

    else:

        def replace(self, **kwargs) -> DateTime:
            return DateTime(
                kwargs.get("year", self.year),
                kwargs.get("month", self.month),
                kwargs.get("day", self.day),
                kwargs.get("hour", self.hour),
                kwargs.get("minute", self.minute),
                kwargs.get("second", self.second),
                kwargs.get("nanosecond", self.nanosecond),
            )

    def canonical_format(self) -> str:
        """The date-time in canonical format, e.g. ``2020-08-15T23:12:00``"""
        return f"{self._date}T{self._time}"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> DateTime:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_datetime(s)):
            raise InvalidFormat(f"invalid date-time: {s!r}")
        return _from_fields_or_invalid(cls, _datetime_fields(match, 1), s)

    def __repr__(self) -> str:
        return f"DateTime({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._date == other._date and self._time == other._time

    def __hash__(self) -> int:
        return hash((self._date, self._time))

    def __lt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._local_ns() < other._local_ns()

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._local_ns() <= other._local_ns()

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._local_ns() > other._local_ns()

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._local_ns() >= other._local_ns()

    def _local_ns(self) -> int:
        return self._date._epoch_day * NS_PER_DAY + self._time._nanos

    def _local_secs(self) -> int:
        return self._date._epoch_day * SECS_PER_DAY + self._time._nanos // NS_PER_SEC

    @classmethod
    def _from_local_ns(cls, nanos: int) -> DateTime:
        days, nanos_of_day = divmod(nanos, NS_PER_DAY)
        if not _MIN_EPOCH_DAY <= days <= _MAX_EPOCH_DAY:
            raise DateTimeOverflow("resulting date-time is out of range")
        return cls._from_parts(
            Date._from_epoch_day_unchecked(days),
            Time._from_nanos_unchecked(nanos_of_day),
        )

    @classmethod
    def _from_parts(cls, date: Date, time: Time) -> DateTime:
        self = _object_new(cls)
        self._date = date
        self._time = time
        return self

    def __copy__(self) -> DateTime:
        return self

    def __deepcopy__(self, _: object) -> DateTime:
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_datetime, (
            self._date._year,
            self._date._month,
            self._date._day,
            self._time._nanos,
        )


def _unpkl_datetime(year: int, month: int, day: int, nanos: int) -> DateTime:
    return DateTime._from_parts(
        Date(year, month, day), Time._from_nanos_unchecked(nanos)
    )


DateTime.MIN = DateTime._from_parts(Date.MIN, Time.MIN)
DateTime.MAX = DateTime._from_parts(Date.MAX, Time.MAX)


class Instant(_Rounding):
    """A point on the UTC time line, with nanosecond precision

    Stored as whole seconds since 1970-01-01T00:00Z, plus a non-negative
    nanosecond of that second.

    Example
    -------

    >>> Instant.from_epoch_second(1_597_493_520)
    Instant(2020-08-15T12:12:00Z)
    >>> Instant.from_epoch_second(0, -1)
    Instant(1969-12-31T23:59:59.999999999Z)

    """

    __slots__ = ("_secs", "_nanos")

    MIN: ClassVar[Instant]
    MAX: ClassVar[Instant]
    EPOCH: ClassVar[Instant]

    def __init__(self) -> None:
        raise TypeError(
            "Instant instances cannot be created through the constructor. "
            "Use `Instant.from_epoch_second` or `Instant.now` instead."
        )

    @classmethod
    def from_epoch_second(cls, second: int, /, nanosecond: int = 0) -> Instant:
        """Create from seconds since the epoch. The nanosecond adjustment
        may be negative or exceed a second; it is normalized.

        Raises
        ------
        DateTimeOverflow
            If the instant is outside the supported range.

        """
        extra_secs, nanos = divmod(nanosecond, NS_PER_SEC)
        return cls._from_secs_checked(plus_exact(second, extra_secs), nanos)

    @classmethod
    def from_epoch_milli(cls, millis: int, /) -> Instant:
        secs, millis = divmod(millis, 1_000)
        return cls.from_epoch_second(secs, millis * NS_PER_MS)

    @classmethod
    def now(cls, clock: Clock | None = None) -> Instant:
        """The current instant, from the given clock or else the
        system time"""
        if clock is not None:
            return clock.read_instant()
        return cls._from_ns(time_ns())

    @property
    def epoch_second(self) -> int:
        return self._secs

    @property
    def nanosecond(self) -> int:
        return self._nanos

    @property
    def epoch_milli(self) -> int:
        return self._secs * 1_000 + self._nanos // NS_PER_MS

    @property
    def epoch_nano(self) -> int:
        return self._secs * NS_PER_SEC + self._nanos

    @classmethod
    def from_fields(cls, fields: Mapping[DateTimeField, int], /) -> Instant:
        if (secs := fields.get(_F.SECOND_OF_UNIX_EPOCH)) is not None:
            return cls.from_epoch_second(
                secs, fields.get(_F.NANOSECOND_OF_SECOND, 0)
            )
        if (offset := fields.get(_F.UTC_OFFSET_TOTAL_SECONDS)) is None:
            raise ValueError("insufficient fields to determine an instant")
        # Going through DateTime validates the local fields
        return DateTime.from_fields(fields).instant_at(
            UtcOffset.from_total_seconds(offset)
        )

    def get(self, field: DateTimeField, /) -> int:
        return _get_field(
            self,
            field,
            {
                _F.SECOND_OF_UNIX_EPOCH: self._secs,
                _F.NANOSECOND_OF_SECOND: self._nanos,
            },
        )

    def __add__(self, d: Duration) -> Instant:
        """Add a duration

        Raises
        ------
        DateTimeOverflow
            If the result is outside the supported range.

        """
        if not isinstance(d, Duration):
            return NotImplemented
        return self._from_ns(self.epoch_nano + d._total_ns)

    def _round(self, step: int, mode: _RoundMode) -> Instant:
        # Days are whole UTC days
        return self._from_ns(_round_ns(self.epoch_nano, step, mode))

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: Instant) -> Duration: ...

        @overload
        def __sub__(self, other: Duration) -> Instant: ...

        def __sub__(self, other: Instant | Duration) -> Instant | Duration: ...

    else:

        def __sub__(self, other):
            """Subtract a duration, or get the duration between two instants"""
            if isinstance(other, Instant):
                return Duration._from_ns_unchecked(
                    self.epoch_nano - other.epoch_nano
                )
            elif isinstance(other, Duration):
                return self._from_ns(self.epoch_nano - other._total_ns)
            return NotImplemented

    def canonical_format(self) -> str:
        """The instant in RFC 3339 format with a ``Z`` suffix

        Example
        -------

        >>> Instant.from_epoch_milli(1_500).canonical_format()
        '1970-01-01T00:00:01.500Z'

        """
        return f"{DateTime.from_epoch_second(self._secs, self._nanos)}Z"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Instant:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_instant(s)):
            raise InvalidFormat(f"invalid instant: {s!r}")
        fields = _datetime_fields(match, 1)
        fields[_F.UTC_OFFSET_TOTAL_SECONDS] = 0
        return _from_fields_or_invalid(cls, fields, s)

    @classmethod
    def from_rfc3339(cls, s: str, /) -> Instant:
        """Create from an RFC 3339 string, with any offset.

        Example
        -------

        >>> Instant.from_rfc3339("2020-08-15T12:08:30+02:00")
        Instant(2020-08-15T10:08:30Z)
        >>> Instant.from_rfc3339("2020-08-15 10:08:30z")
        Instant(2020-08-15T10:08:30Z)

        """
        if not (match := _match_rfc3339(s)):
            raise InvalidFormat(f"invalid RFC 3339 string: {s!r}")
        fields = _datetime_fields(match, 1)
        fields[_F.UTC_OFFSET_TOTAL_SECONDS] = UtcOffset.from_canonical_format(
            match[8].upper()
        )._secs
        return _from_fields_or_invalid(cls, fields, s)

    def __repr__(self) -> str:
        return f"Instant({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._secs == other._secs and self._nanos == other._nanos

    def __hash__(self) -> int:
        return hash((self._secs, self._nanos))

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self._secs, self._nanos) < (other._secs, other._nanos)

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self._secs, self._nanos) <= (other._secs, other._nanos)

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self._secs, self._nanos) > (other._secs, other._nanos)

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return (self._secs, self._nanos) >= (other._secs, other._nanos)

    @classmethod
    def _from_ns(cls, nanos: int) -> Instant:
        return cls._from_secs_checked(*divmod(nanos, NS_PER_SEC))

    @classmethod
    def _from_secs_checked(cls, secs: int, nanos: int) -> Instant:
        if not _MIN_INSTANT_SECS <= secs <= _MAX_INSTANT_SECS:
            raise DateTimeOverflow("resulting instant is out of range")
        return cls._from_secs_unchecked(secs, nanos)

    @classmethod
    def _from_secs_unchecked(cls, secs: int, nanos: int) -> Instant:
        self = _object_new(cls)
        self._secs = secs
        self._nanos = nanos
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_instant, (self._secs, self._nanos)


def _unpkl_instant(secs: int, nanos: int) -> Instant:
    return Instant._from_secs_unchecked(secs, nanos)


_MIN_INSTANT_SECS = _MIN_EPOCH_DAY * SECS_PER_DAY
_MAX_INSTANT_SECS = _MAX_EPOCH_DAY * SECS_PER_DAY + SECS_PER_DAY - 1
Instant.MIN = Instant._from_secs_unchecked(_MIN_INSTANT_SECS, 0)
Instant.MAX = Instant._from_secs_unchecked(_MAX_INSTANT_SECS, NS_PER_SEC - 1)
Instant.EPOCH = Instant._from_secs_unchecked(0, 0)


class Duration:
    """An exact amount of time, measured in nanoseconds.
    Independent of any calendar: a day is always 24 hours.

    The inputs are normalized, so 90 minutes becomes 1 hour and 30 minutes,
    for example.

    Examples
    --------

    >>> d = Duration(hours=1, minutes=30)
    Duration(PT1H30M)
    >>> d.in_minutes()
    90.0

    """

    __slots__ = ("_total_ns",)

    ZERO: ClassVar[Duration]
    """A duration of zero"""
    MIN: ClassVar[Duration]
    MAX: ClassVar[Duration]

    def __init__(
        self,
        *,
        days: float = 0,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        assert type(nanoseconds) is int  # catch this common mistake
        self._total_ns = _check_duration_ns(
            # Cast individual components to int to avoid floating point errors
            int(days * NS_PER_DAY)
            + int(hours * NS_PER_HOUR)
            + int(minutes * NS_PER_MIN)
            + int(seconds * NS_PER_SEC)
            + milliseconds * NS_PER_MS
            + microseconds * NS_PER_US
            + nanoseconds
        )

    @classmethod
    def of(cls, amount: int, unit: TimeUnit, /) -> Duration:
        """Create from an amount of a time-based unit

        Example
        -------

        >>> Duration.of(90, TimeUnit.MINUTES)
        Duration(PT1H30M)

        """
        if not unit.is_time_based:
            raise ValueError(f"{unit.name} is not a time-based unit")
        return cls._from_ns_checked(amount * unit.nanoseconds)

    @property
    def seconds(self) -> int:
        """The whole seconds, rounded toward zero"""
        return div_trunc(self._total_ns, NS_PER_SEC)

    @property
    def nanosecond_adjustment(self) -> int:
        """The nanoseconds beyond the whole seconds. Has the same sign
        as :attr:`seconds`."""
        return self._total_ns - self.seconds * NS_PER_SEC

    def in_days(self) -> float:
        """The total duration in days of exactly 24 hours"""
        return self._total_ns / NS_PER_DAY

    def in_hours(self) -> float:
        """The total duration in hours

        >>> d = Duration(hours=1, minutes=30)
        >>> d.in_hours()
        1.5

        """
        return self._total_ns / NS_PER_HOUR

    def in_minutes(self) -> float:
        return self._total_ns / NS_PER_MIN

    def in_seconds(self) -> float:
        """The total duration in seconds

        >>> d = Duration(minutes=2, seconds=1, microseconds=500_000)
        >>> d.in_seconds()
        121.5

        """
        return self._total_ns / NS_PER_SEC

    def in_nanoseconds(self) -> int:
        return self._total_ns

    def in_unit(self, unit: TimeUnit, /) -> int:
        """The number of whole units in this duration, rounded toward zero"""
        if not unit.is_time_based:
            raise ValueError(f"{unit.name} is not a time-based unit")
        return div_trunc(self._total_ns, unit.nanoseconds)

    def is_negative(self) -> bool:
        return self._total_ns < 0

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d == Duration(minutes=90)
        True
        >>> d == Duration(hours=2)
        False

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns == other._total_ns

    def __hash__(self) -> int:
        return hash(self._total_ns)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns < other._total_ns

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns <= other._total_ns

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns > other._total_ns

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ns >= other._total_ns

    def __bool__(self) -> bool:
        """True if the duration is non-zero

        Example
        -------

        >>> bool(Duration())
        False
        >>> bool(Duration(minutes=1))
        True

        """
        return bool(self._total_ns)

    def __add__(self, other: Duration) -> Duration:
        """Add two durations together

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d + Duration(minutes=30)
        Duration(PT2H)

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._from_ns_checked(self._total_ns + other._total_ns)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._from_ns_checked(self._total_ns - other._total_ns)

    def __mul__(self, other: float) -> Duration:
        """Multiply by a number

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d * 2.5
        Duration(PT3H45M)

        """
        if isinstance(other, int):
            return self._from_ns_checked(self._total_ns * other)
        elif isinstance(other, float):
            return self._from_ns_checked(int(self._total_ns * other))
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> Duration:
        return self._from_ns_checked(-self._total_ns)

    @overload
    def __truediv__(self, other: float) -> Duration: ...

    @overload
    def __truediv__(self, other: Duration) -> float: ...

    def __truediv__(self, other: float | Duration) -> Duration | float:
        """Divide by a number or another duration

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d / 2
        Duration(PT45M)
        >>> d / Duration(minutes=30)
        3.0

        """
        if isinstance(other, Duration):
            return self._total_ns / other._total_ns
        elif isinstance(other, int):
            return self._from_ns_unchecked(div_trunc(self._total_ns, other))
        elif isinstance(other, float):
            return self._from_ns_checked(int(self._total_ns / other))
        return NotImplemented

    @overload
    def __floordiv__(self, other: Duration) -> int: ...

    @overload
    def __floordiv__(self, other: int) -> Duration: ...

    def __floordiv__(self, other: Duration | int) -> int | Duration:
        """How many whole times the other duration fits in this one,
        or this duration divided by an integer, rounded down to the
        nanosecond

        Example
        -------

        >>> Duration(minutes=100) // Duration(minutes=30)
        3
        >>> Duration(nanoseconds=7) // 2
        Duration(PT0.000000003S)

        """
        if isinstance(other, Duration):
            return self._total_ns // other._total_ns
        elif isinstance(other, int):
            return self._from_ns_unchecked(self._total_ns // other)
        return NotImplemented

    def __abs__(self) -> Duration:
        return self._from_ns_checked(abs(self._total_ns))

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Convert to a tuple of (hours, minutes, seconds, nanoseconds),
        all with the sign of the duration

        Example
        -------

        >>> d = Duration(hours=1, minutes=30, microseconds=5_000_090)
        >>> d.as_tuple()
        (1, 30, 5, 90000)

        """
        hours, rem = divmod(abs(self._total_ns), NS_PER_HOUR)
        mins, rem = divmod(rem, NS_PER_MIN)
        secs, nanos = divmod(rem, NS_PER_SEC)
        return (
            (hours, mins, secs, nanos)
            if self._total_ns >= 0
            else (-hours, -mins, -secs, -nanos)
        )

    def canonical_format(self) -> str:
        """The duration in canonical ISO 8601 format.

        Components share the sign of the duration, and are never larger
        than hours.

        .. code-block:: text

           PT0S
           PT1H30M
           PT-26H-0.5S

        """
        if not self._total_ns:
            return "PT0S"
        hours, mins, secs, nanos = self.as_tuple()
        seconds = ""
        if secs or nanos:
            seconds = (
                f"{'-' * (self._total_ns < 0)}{abs(secs)}"
                + f".{abs(nanos):09}".rstrip("0") * bool(nanos)
                + "S"
            )
        return f"PT{f'{hours}H' * bool(hours)}{f'{mins}M' * bool(mins)}{seconds}"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Duration:
        """Create from a canonical string representation.

        Inverse of :meth:`canonical_format`

        Example
        -------

        >>> Duration.from_canonical_format("PT1H30M")
        Duration(PT1H30M)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_duration(s)) or s == "PT":
            raise InvalidFormat(f"invalid duration: {s!r}")
        hours, mins, sign, secs, fraction = match.groups()
        try:
            return cls._from_ns_checked(
                int(hours or 0) * NS_PER_HOUR
                + int(mins or 0) * NS_PER_MIN
                + (-1 if sign == "-" else 1)
                * (
                    int(secs or 0) * NS_PER_SEC
                    + int((fraction or "").ljust(9, "0"))
                )
            )
        except DateTimeOverflow as e:
            raise InvalidFormat(f"duration out of range: {s!r}") from e

    def __repr__(self) -> str:
        return f"Duration({self})"

    @classmethod
    def _from_ns_checked(cls, nanos: int) -> Duration:
        return cls._from_ns_unchecked(_check_duration_ns(nanos))

    @classmethod
    def _from_ns_unchecked(cls, nanos: int) -> Duration:
        self = _object_new(cls)
        self._total_ns = nanos
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_duration, (self._total_ns,)


def _check_duration_ns(nanos: int) -> int:
    if not INT64_MIN <= div_trunc(nanos, NS_PER_SEC) <= INT64_MAX:
        raise DateTimeOverflow("duration is out of range")
    return nanos


def _unpkl_duration(nanos: int) -> Duration:
    return Duration._from_ns_unchecked(nanos)


Duration.ZERO = Duration()
Duration.MIN = Duration._from_ns_unchecked(INT64_MIN * NS_PER_SEC - NS_PER_SEC + 1)
Duration.MAX = Duration._from_ns_unchecked(INT64_MAX * NS_PER_SEC + NS_PER_SEC - 1)


class Period:
    """A calendar-based span of years, months and days.

    Unlike :class:`Duration`, a period has no fixed length: one month
    is 28 to 31 days, depending on the date it is added to.

    The canonical string format is:

    .. code-block:: text

        PnYnMnD

    For example:

    .. code-block:: text

        P1Y2M3D
        P-3M
        P0D

    Note
    ----
    The fields are not normalized. For example, "14 months" is not
    converted to "1 year and 2 months", unless :meth:`normalized` is called.
    Weeks are converted to 7 days.

    """

    __slots__ = ("_years", "_months", "_days")

    ZERO: ClassVar[Period]
    """A period of zero"""

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
    ) -> None:
        self._years = to_int32_exact(years)
        self._months = to_int32_exact(months)
        self._days = to_int32_exact(weeks * 7 + days)

    @classmethod
    def of(cls, amount: int, unit: TimeUnit, /) -> Period:
        """Create from an amount of a date-based unit

        Example
        -------

        >>> Period.of(2, TimeUnit.WEEKS)
        Period(P14D)

        """
        if unit is TimeUnit.YEARS:
            return cls(years=amount)
        elif unit is TimeUnit.MONTHS:
            return cls(months=amount)
        elif unit is TimeUnit.WEEKS:
            return cls(weeks=amount)
        elif unit is TimeUnit.DAYS:
            return cls(days=amount)
        raise ValueError(f"{unit.name} is not a date-based unit")

    @classmethod
    def between(cls, start: Date, end: Date, /) -> Period:
        """The period between two dates, as whole years, months and days.
        Negative if ``end`` is before ``start``.

        Example
        -------

        >>> Period.between(Date(2020, 1, 31), Date(2021, 3, 1))
        Period(P1Y1M1D)
        >>> Period.between(Date(2020, 3, 1), Date(2020, 1, 31))
        Period(P-1M-1D)

        """
        total_months = _months_since_year_0(
            end._year, end._month
        ) - _months_since_year_0(start._year, start._month)
        day_diff = end._day - start._day
        if total_months > 0 and day_diff < 0:
            total_months -= 1
            days = end._epoch_day - start._plus_months(total_months)._epoch_day
        elif total_months < 0 and day_diff > 0:
            total_months += 1
            days = day_diff - end.days_in_month()
        else:
            days = day_diff
        years = div_trunc(total_months, 12)
        return cls(years=years, months=total_months - years * 12, days=days)

    @property
    def years(self) -> int:
        return self._years

    @property
    def months(self) -> int:
        return self._months

    @property
    def days(self) -> int:
        return self._days

    @property
    def total_months(self) -> int:
        """The years and months combined, in months"""
        return self._years * 12 + self._months

    def is_negative(self) -> bool:
        """True if any field is negative"""
        return self._years < 0 or self._months < 0 or self._days < 0

    def normalized(self) -> Period:
        """Carry months into years, so that months is within -11..11 and
        has the same sign as years. Days are unaffected.

        Example
        -------

        >>> Period(years=1, months=14, days=40).normalized()
        Period(P2Y2M40D)
        >>> Period(years=1, months=-14).normalized()
        Period(P-2M)

        """
        total = self.total_months
        years = div_trunc(total, 12)
        return Period(years=years, months=total - years * 12, days=self._days)

    def __eq__(self, other: object) -> bool:
        """Compare for equality of all fields

        Note
        ----
        Periods are equal if they have the same values for all fields.
        No normalization is done, so "one year" is not equal to "12 months".

        Example
        -------

        >>> p = Period(years=1, days=3)
        >>> p == Period(years=1, months=0, days=3)
        True
        >>> p == Period(months=12, days=3)
        False
        """
        if not isinstance(other, Period):
            return NotImplemented
        return (
            self._years == other._years
            and self._months == other._months
            and self._days == other._days
        )

    def __hash__(self) -> int:
        return hash((self._years, self._months, self._days))

    def __bool__(self) -> bool:
        """True if any field is non-zero

        Example
        -------

        >>> bool(Period())
        False
        >>> bool(Period(days=-1))
        True

        """
        return bool(self._years or self._months or self._days)

    def canonical_format(self) -> str:
        """The period in canonical format.

        Example
        -------

        >>> p = Period(years=1, days=-3)
        >>> p.canonical_format()
        'P1Y-3D'

        """
        return "P" + (
            f"{self._years}Y" * bool(self._years)
            + f"{self._months}M" * bool(self._months)
            + f"{self._days}D" * bool(self._days)
            or "0D"
        )

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Period:
        """Create from a canonical string representation.

        Inverse of :meth:`canonical_format`. Weeks (``W``) are accepted too.

        Example
        -------

        >>> Period.from_canonical_format("P1Y2M-3W4D")
        Period(P1Y2M-17D)

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_period(s)) or s == "P":
            raise InvalidFormat(f"invalid period: {s!r}")
        years, months, weeks, days = match.groups()
        try:
            return cls(
                years=int(years or 0),
                months=int(months or 0),
                weeks=int(weeks or 0),
                days=int(days or 0),
            )
        except DateTimeOverflow as e:
            raise InvalidFormat(f"period out of range: {s!r}") from e

    if TYPE_CHECKING:

        def replace(
            self,
            *,
            years: int | NOT_SET = NOT_SET(),
            months: int | NOT_SET = NOT_SET(),
            days: int | NOT_SET = NOT_SET(),
        ) -> Period: ...

    else:

        def replace(self, **kwargs) -> Period:
            """Create a new instance with the given fields replaced.

            Example
            -------

            >>> p = Period(years=1, months=2)
            >>> p.replace(years=2)
            Period(P2Y2M)

            """
            return Period(
                years=kwargs.get("years", self._years),
                months=kwargs.get("months", self._months),
                days=kwargs.get("days", self._days),
            )

    def __repr__(self) -> str:
        return f"Period({self})"

    def __neg__(self) -> Period:
        """Negate each field of the period

        Example
        -------

        >>> p = Period(years=2, days=-3)
        >>> -p
        Period(P-2Y3D)

        """
        return Period(years=-self._years, months=-self._months, days=-self._days)

    def __mul__(self, other: int) -> Period:
        """Multiply each field by a round number

        Example
        -------

        >>> p = Period(months=2, days=1)
        >>> p * 2
        Period(P4M2D)

        """
        if not isinstance(other, int):
            return NotImplemented
        return Period(
            years=self._years * other,
            months=self._months * other,
            days=self._days * other,
        )

    __rmul__ = __mul__

    def __add__(self, other: Period) -> Period:
        """Add the fields of another period to this one

        Example
        -------

        >>> p = Period(months=2, days=10)
        >>> p + Period(days=-4)
        Period(P2M6D)

        """
        if not isinstance(other, Period):
            return NotImplemented
        return Period(
            years=self._years + other._years,
            months=self._months + other._months,
            days=self._days + other._days,
        )

    def __sub__(self, other: Period) -> Period:
        if not isinstance(other, Period):
            return NotImplemented
        return Period(
            years=self._years - other._years,
            months=self._months - other._months,
            days=self._days - other._days,
        )

    def as_tuple(self) -> tuple[int, int, int]:
        """Convert to a tuple of (years, months, days)"""
        return (self._years, self._months, self._days)

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_period, self.as_tuple()


def _unpkl_period(years: int, months: int, days: int) -> Period:
    return Period(years=years, months=months, days=days)


Period.ZERO = Period()


class _UnitInfo(NamedTuple):
    nanoseconds: int
    days: int
    months: int
    designator: str
    fractional: bool


class TimeUnit(enum.Enum):
    """A unit of time. Time-based units have an exact length in
    nanoseconds; date-based units count calendar days or months.

    Example
    -------

    >>> TimeUnit.MINUTES.nanoseconds
    60000000000
    >>> TimeUnit.between(TimeUnit.MONTHS, Date(2020, 1, 31), Date(2020, 3, 30))
    1

    """

    NANOSECONDS = _UnitInfo(1, 0, 0, "S", True)
    MICROSECONDS = _UnitInfo(NS_PER_US, 0, 0, "S", True)
    MILLISECONDS = _UnitInfo(NS_PER_MS, 0, 0, "S", True)
    SECONDS = _UnitInfo(NS_PER_SEC, 0, 0, "S", False)
    MINUTES = _UnitInfo(NS_PER_MIN, 0, 0, "M", False)
    HOURS = _UnitInfo(NS_PER_HOUR, 0, 0, "H", False)
    DAYS = _UnitInfo(0, 1, 0, "D", False)
    WEEKS = _UnitInfo(0, 7, 0, "W", False)
    MONTHS = _UnitInfo(0, 0, 1, "M", False)
    YEARS = _UnitInfo(0, 0, 12, "Y", False)

    @property
    def nanoseconds(self) -> int:
        """Length in nanoseconds. Zero for date-based units."""
        return self.value.nanoseconds

    @property
    def designator(self) -> str:
        """The ISO 8601 designator, e.g. ``H`` for hours"""
        return self.value.designator

    @property
    def is_fractional(self) -> bool:
        """Whether the unit is written as a fraction of a second"""
        return self.value.fractional

    @property
    def is_time_based(self) -> bool:
        return self.value.nanoseconds > 0

    @property
    def is_date_based(self) -> bool:
        return self.value.nanoseconds == 0

    @overload
    def between(self, start: Date, end: Date, /) -> int: ...

    @overload
    def between(self, start: DateTime, end: DateTime, /) -> int: ...

    @overload
    def between(self, start: Instant, end: Instant, /) -> int: ...

    def between(
        self,
        start: Union[Date, DateTime, Instant],
        end: Union[Date, DateTime, Instant],
        /,
    ) -> int:
        """The number of whole units from ``start`` to ``end``, rounded
        toward zero. Instants are compared on the UTC calendar for
        date-based units.
        """
        if isinstance(start, Date) and isinstance(end, Date):
            if self.is_time_based:
                return div_trunc(
                    (end._epoch_day - start._epoch_day) * NS_PER_DAY,
                    self.nanoseconds,
                )
            return self._between_dates(start, end)
        elif isinstance(start, Instant) and isinstance(end, Instant):
            if self.is_time_based:
                return div_trunc(end.epoch_nano - start.epoch_nano, self.nanoseconds)
            return self.between(
                DateTime.from_epoch_second(start._secs, start._nanos),
                DateTime.from_epoch_second(end._secs, end._nanos),
            )
        elif isinstance(start, DateTime) and isinstance(end, DateTime):
            if self.is_time_based:
                return div_trunc(
                    end._local_ns() - start._local_ns(), self.nanoseconds
                )
            # A day only counts once the time of day is reached again
            end_date = end._date
            if end_date > start._date and end._time < start._time:
                end_date = end_date._plus_days(-1)
            elif end_date < start._date and end._time > start._time:
                end_date = end_date._plus_days(1)
            return self._between_dates(start._date, end_date)
        raise TypeError(
            "start and end must both be Date, DateTime or Instant, "
            f"got {type(start).__name__} and {type(end).__name__}"
        )

    def _between_dates(self, start: Date, end: Date) -> int:
        if self.value.days:
            return div_trunc(end._epoch_day - start._epoch_day, self.value.days)
        return div_trunc(_months_between(start, end), self.value.months)


# The largest increment of each unit that can be rounded to.
# Increments must divide evenly into it.
_ROUNDING_LIMITS = {
    TimeUnit.NANOSECONDS: 1_000_000_000,
    TimeUnit.MICROSECONDS: 1_000_000,
    TimeUnit.MILLISECONDS: 1_000,
    TimeUnit.SECONDS: 60,
    TimeUnit.MINUTES: 60,
    TimeUnit.HOURS: 24,
    TimeUnit.DAYS: 1,
}


def _rounding_step(unit: TimeUnit, increment: int) -> int:
    try:
        limit = _ROUNDING_LIMITS[unit]
    except KeyError:
        raise ValueError(f"cannot round to {unit.name.lower()}") from None
    if not 0 < increment <= limit or limit % increment:
        raise ValueError(
            f"increment for {unit.name.lower()} must divide evenly "
            f"into {limit}, got {increment}"
        )
    return increment * (unit.nanoseconds or NS_PER_DAY)


def _round_ns(nanos: int, step: int, mode: _RoundMode) -> int:
    down = nanos - nanos % step
    if down == nanos or mode == "down":
        return down
    elif mode == "up" or (nanos - down) * 2 >= step:
        return down + step
    return down


def _months_between(start: Date, end: Date) -> int:
    # Packing the day into the low bits makes a partial month round
    # toward zero, e.g. Jan 31 to Feb 28 is 0 months.
    packed_start = _months_since_year_0(start._year, start._month) * 32 + start._day
    packed_end = _months_since_year_0(end._year, end._month) * 32 + end._day
    return div_trunc(packed_end - packed_start, 32)


def _format_year(year: int) -> str:
    if year > 9999:
        return f"+{year}"
    elif year < 0:
        return f"-{-year:04}"
    return f"{year:04}"


def _format_time(nanos: int) -> str:
    secs, frac = divmod(nanos, NS_PER_SEC)
    hours, rem = divmod(secs, 3600)
    minutes, seconds = divmod(rem, 60)
    if not frac:
        fraction = ""
    elif frac % NS_PER_MS == 0:
        fraction = f".{frac // NS_PER_MS:03}"
    elif frac % NS_PER_US == 0:
        fraction = f".{frac // NS_PER_US:06}"
    else:
        fraction = f".{frac:09}"
    return f"{hours:02}:{minutes:02}:{seconds:02}{fraction}"


def _date_fields(match: re.Match[str], start: int) -> dict[DateTimeField, int]:
    return {
        _F.YEAR: int(match[start]),
        _F.MONTH_OF_YEAR: int(match[start + 1]),
        _F.DAY_OF_MONTH: int(match[start + 2]),
    }


def _time_fields(match: re.Match[str], start: int) -> dict[DateTimeField, int]:
    return {
        _F.HOUR_OF_DAY: int(match[start]),
        _F.MINUTE_OF_HOUR: int(match[start + 1]),
        _F.SECOND_OF_MINUTE: int(match[start + 2] or 0),
        _F.NANOSECOND_OF_SECOND: int((match[start + 3] or "").ljust(9, "0")),
    }


def _datetime_fields(match: re.Match[str], start: int) -> dict[DateTimeField, int]:
    return {**_date_fields(match, start), **_time_fields(match, start + 3)}


def _from_fields_or_invalid(cls, fields, s: str):
    try:
        return cls.from_fields(fields)
    except ValueError as e:
        raise InvalidFormat(f"invalid {cls.__name__}: {s!r}") from e


# YYYY-MM-DD, with a sign for years outside 0000-9999
_DATE_RE = r"([+-]\d{4,9}|\d{4})-(\d{2})-(\d{2})"
# HH:MM[:SS[.fffffffff]]
_TIME_RE = r"(\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?"
_DATETIME_RE = rf"{_DATE_RE}T{_TIME_RE}"
_match_date = re.compile(_DATE_RE, re.ASCII).fullmatch
_match_time = re.compile(_TIME_RE, re.ASCII).fullmatch
_match_datetime = re.compile(_DATETIME_RE, re.ASCII).fullmatch
_match_instant = re.compile(rf"{_DATETIME_RE}Z", re.ASCII).fullmatch
_match_rfc3339 = re.compile(
    rf"{_DATE_RE}[Tt ]{_TIME_RE}([Zz]|[+-]\d{{2}}:\d{{2}})", re.ASCII
).fullmatch
_match_offset = re.compile(r"([+-])(\d{2}):(\d{2})(?::(\d{2}))?", re.ASCII).fullmatch
_match_period = re.compile(
    r"P(?:([-+]?\d+)Y)?(?:([-+]?\d+)M)?(?:([-+]?\d+)W)?(?:([-+]?\d+)D)?",
    re.ASCII,
).fullmatch
_match_duration = re.compile(
    r"PT(?:([-+]?\d+)H)?(?:([-+]?\d+)M)?(?:([-+]?)(\d+)(?:\.(\d{1,9}))?S)?",
    re.ASCII,
).fullmatch
