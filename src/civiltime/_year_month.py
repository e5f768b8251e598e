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
# - Year and YearMonth are coarser calendar values. They live apart from
#   the core calendar types because they hand out DateRange objects.
from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar, Union

from ._calendar import (
    Date,
    Month,
    _format_year,
    _months_since_year_0,
    days_in_month,
    days_in_year,
    is_leap,
)
from ._common import (
    MAX_YEAR,
    MIN_YEAR,
    DateTimeOverflow,
    InvalidFormat,
    _object_new,
    check_month,
    check_year,
)
from ._ranges import DateRange

if TYPE_CHECKING:
    from ._clock import Clock

__all__ = ["Year", "YearMonth"]


class Year:
    """A year in the proleptic Gregorian calendar

    Example
    -------

    >>> y = Year(2020)
    Year(2020)
    >>> y.is_leap
    True
    >>> Date(2020, 2, 29) in y
    True
    >>> y + 1
    Year(2021)

    """

    __slots__ = ("_value",)

    MIN: ClassVar[Year]
    MAX: ClassVar[Year]

    def __init__(self, value: int) -> None:
        self._value = check_year(value)

    @classmethod
    def now(cls, clock: Clock) -> Year:
        return cls._from_value_unchecked(Date.today(clock).year)

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_leap(self) -> bool:
        return is_leap(self._value)

    @property
    def length(self) -> int:
        """The number of days in the year"""
        return days_in_year(self._value)

    def start_date(self) -> Date:
        return Date(self._value, 1, 1)

    def end_date(self) -> Date:
        return Date(self._value, 12, 31)

    def date_range(self) -> DateRange:
        """All dates in the year"""
        return DateRange(self.start_date(), self.end_date())

    def at_day(self, day_of_year: int, /) -> Date:
        return Date.from_day_of_year(self._value, day_of_year)

    def at_month(self, month: Union[int, Month], /) -> YearMonth:
        return YearMonth(
            self._value, month.value if isinstance(month, Month) else month
        )

    def __contains__(self, value: object) -> bool:
        if isinstance(value, (Date, YearMonth)):
            return value.year == self._value
        return False

    def __add__(self, years: int) -> Year:
        """Add a number of years

        Raises
        ------
        DateTimeOverflow
            If the result is outside the supported range.

        """
        if not isinstance(years, int):
            return NotImplemented
        return self._from_value_checked(self._value + years)

    def __sub__(self, years: int) -> Year:
        if not isinstance(years, int):
            return NotImplemented
        return self._from_value_checked(self._value - years)

    def canonical_format(self) -> str:
        """The year as at least four digits. Years beyond 9999 carry
        a ``+`` sign, years before 0 a ``-`` sign."""
        return _format_year(self._value)

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> Year:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_year(s)):
            raise InvalidFormat(f"invalid year: {s!r}")
        try:
            return cls(int(match[1]))
        except ValueError as e:
            raise InvalidFormat(f"invalid year: {s!r}") from e

    def __repr__(self) -> str:
        return f"Year({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: Year) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value < other._value

    def __le__(self, other: Year) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value <= other._value

    def __gt__(self, other: Year) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value > other._value

    def __ge__(self, other: Year) -> bool:
        if not isinstance(other, Year):
            return NotImplemented
        return self._value >= other._value

    @classmethod
    def _from_value_checked(cls, value: int) -> Year:
        if not MIN_YEAR <= value <= MAX_YEAR:
            raise DateTimeOverflow("resulting year is out of range")
        return cls._from_value_unchecked(value)

    @classmethod
    def _from_value_unchecked(cls, value: int) -> Year:
        self = _object_new(cls)
        self._value = value
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_year, (self._value,)


def _unpkl_year(value: int) -> Year:
    return Year._from_value_unchecked(value)


Year.MIN = Year._from_value_unchecked(MIN_YEAR)
Year.MAX = Year._from_value_unchecked(MAX_YEAR)


class YearMonth:
    """A month of a specific year, such as a credit card's expiry

    Example
    -------

    >>> ym = YearMonth(2020, 2)
    YearMonth(2020-02)
    >>> ym.days_in_month()
    29
    >>> ym.add(months=11)
    YearMonth(2021-01)
    >>> ym.date_range()
    DateRange(2020-02-01/2020-02-29)

    """

    __slots__ = ("_year", "_month")

    MIN: ClassVar[YearMonth]
    MAX: ClassVar[YearMonth]

    def __init__(self, year: int, month: int) -> None:
        self._year = check_year(year)
        self._month = check_month(month)

    @classmethod
    def from_date(cls, date: Date, /) -> YearMonth:
        return cls._from_ym_unchecked(date.year, date.month)

    @classmethod
    def now(cls, clock: Clock) -> YearMonth:
        return cls.from_date(Date.today(clock))

    @property
    def year(self) -> int:
        return self._year

    @property
    def month(self) -> int:
        return self._month

    @property
    def month_of_year(self) -> Month:
        return Month(self._month)

    def days_in_month(self) -> int:
        return days_in_month(self._year, self._month)

    def is_leap_year(self) -> bool:
        return is_leap(self._year)

    def start_date(self) -> Date:
        return Date(self._year, self._month, 1)

    def end_date(self) -> Date:
        return Date(self._year, self._month, self.days_in_month())

    def date_range(self) -> DateRange:
        """All dates in the month"""
        return DateRange(self.start_date(), self.end_date())

    def at_day(self, day: int, /) -> Date:
        return Date(self._year, self._month, day)

    def __contains__(self, value: object) -> bool:
        if isinstance(value, Date):
            return (value.year, value.month) == (self._year, self._month)
        return False

    def add(self, *, years: int = 0, months: int = 0) -> YearMonth:
        """Add years and months

        Example
        -------

        >>> YearMonth(2020, 11).add(years=1, months=3)
        YearMonth(2022-02)

        Raises
        ------
        DateTimeOverflow
            If the result is outside the supported range.

        """
        year, month = divmod(
            _months_since_year_0(self._year, self._month) + years * 12 + months,
            12,
        )
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise DateTimeOverflow("resulting year-month is out of range")
        return self._from_ym_unchecked(year, month + 1)

    def months_until(self, other: YearMonth, /) -> int:
        """The number of months from this year-month to ``other``"""
        return _months_since_year_0(other._year, other._month) - (
            _months_since_year_0(self._year, self._month)
        )

    def canonical_format(self) -> str:
        """The year-month in ``YYYY-MM`` format"""
        return f"{_format_year(self._year)}-{self._month:02}"

    __str__ = canonical_format

    @classmethod
    def from_canonical_format(cls, s: str, /) -> YearMonth:
        """Create from the canonical string representation.

        Inverse of :meth:`canonical_format`

        Raises
        ------
        InvalidFormat
            If the string does not match this exact format.

        """
        if not (match := _match_year_month(s)):
            raise InvalidFormat(f"invalid year-month: {s!r}")
        try:
            return cls(int(match[1]), int(match[2]))
        except ValueError as e:
            raise InvalidFormat(f"invalid year-month: {s!r}") from e

    def __repr__(self) -> str:
        return f"YearMonth({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) == (other._year, other._month)

    def __hash__(self) -> int:
        return hash((self._year, self._month))

    def __lt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) < (other._year, other._month)

    def __le__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) <= (other._year, other._month)

    def __gt__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) > (other._year, other._month)

    def __ge__(self, other: YearMonth) -> bool:
        if not isinstance(other, YearMonth):
            return NotImplemented
        return (self._year, self._month) >= (other._year, other._month)

    @classmethod
    def _from_ym_unchecked(cls, year: int, month: int) -> YearMonth:
        self = _object_new(cls)
        self._year = year
        self._month = month
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_year_month, (self._year, self._month)


def _unpkl_year_month(year: int, month: int) -> YearMonth:
    return YearMonth._from_ym_unchecked(year, month)


YearMonth.MIN = YearMonth._from_ym_unchecked(MIN_YEAR, 1)
YearMonth.MAX = YearMonth._from_ym_unchecked(MAX_YEAR, 12)

_YEAR_RE = r"([+-]\d{4,9}|\d{4})"
_match_year = re.compile(_YEAR_RE, re.ASCII).fullmatch
_match_year_month = re.compile(rf"{_YEAR_RE}-(\d{{2}})", re.ASCII).fullmatch
