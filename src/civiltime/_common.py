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
"""Helpers shared by all modules: exact integer math, field validators
and the exception types."""
from __future__ import annotations

__all__ = [
    "INT64_MIN",
    "INT64_MAX",
    "INT32_MIN",
    "INT32_MAX",
    "plus_exact",
    "minus_exact",
    "times_exact",
    "negate_exact",
    "to_int32_exact",
    "DateTimeOverflow",
    "InvalidFormat",
    "UnboundedInterval",
    "EmptyInterval",
    "TimeZoneRulesError",
    "DoesntExistInZone",
    "Ambiguous",
    "InvalidOffsetForZone",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

MAX_YEAR = 999_999_999
MIN_YEAR = -MAX_YEAR

NS_PER_US = 1_000
NS_PER_MS = 1_000_000
NS_PER_SEC = 1_000_000_000
NS_PER_MIN = 60 * NS_PER_SEC
NS_PER_HOUR = 60 * NS_PER_MIN
NS_PER_DAY = 24 * NS_PER_HOUR
SECS_PER_DAY = 86_400


class NOT_SET:
    pass  # sentinel for when no value is passed


class DateTimeOverflow(OverflowError):
    """The result of an operation doesn't fit in the supported range"""


class InvalidFormat(ValueError):
    """A string has an invalid format"""


class UnboundedInterval(ValueError):
    """The operation requires a bounded interval"""


class EmptyInterval(IndexError):
    """The interval contains no elements"""


class TimeZoneRulesError(LookupError):
    """Rules for a time zone could not be obtained"""


class DoesntExistInZone(Exception):
    """A local date-time doesn't exist in a time zone, e.g. because of DST"""


class Ambiguous(Exception):
    """A local date-time is ambiguous in a time zone"""


class InvalidOffsetForZone(ValueError):
    """A string has an invalid offset for the given zone"""


def _check_int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise DateTimeOverflow(f"{value} doesn't fit in a 64-bit integer")
    return value


def plus_exact(a: int, b: int, /) -> int:
    """Add two 64-bit integers, raising on overflow

    Example
    -------

    >>> plus_exact(INT64_MAX - 1, 1) == INT64_MAX
    True
    >>> plus_exact(INT64_MAX, 1)
    Traceback (most recent call last):
      ...
    DateTimeOverflow: 9223372036854775808 doesn't fit in a 64-bit integer

    """
    return _check_int64(_check_int64(a) + _check_int64(b))


def minus_exact(a: int, b: int, /) -> int:
    """Subtract two 64-bit integers, raising on overflow"""
    return _check_int64(_check_int64(a) - _check_int64(b))


def times_exact(a: int, b: int, /) -> int:
    """Multiply two 64-bit integers, raising on overflow"""
    return _check_int64(_check_int64(a) * _check_int64(b))


def negate_exact(a: int, /) -> int:
    # -INT64_MIN is the only negation that overflows
    return _check_int64(-_check_int64(a))


def to_int32_exact(a: int, /) -> int:
    if not INT32_MIN <= a <= INT32_MAX:
        raise DateTimeOverflow(f"{a} doesn't fit in a 32-bit integer")
    return a


def check_range(value: int, low: int, high: int, name: str) -> int:
    if not low <= value <= high:
        raise ValueError(f"{name} must be in {low}..{high}, got {value}")
    return value


def check_year(year: int) -> int:
    return check_range(year, MIN_YEAR, MAX_YEAR, "year")


def check_month(month: int) -> int:
    return check_range(month, 1, 12, "month")


def check_hour(hour: int) -> int:
    return check_range(hour, 0, 23, "hour")


def check_minute(minute: int) -> int:
    return check_range(minute, 0, 59, "minute")


def check_second(second: int) -> int:
    return check_range(second, 0, 59, "second")


def check_nanosecond(nanosecond: int) -> int:
    return check_range(nanosecond, 0, 999_999_999, "nanosecond")


def div_trunc(a: int, b: int) -> int:
    """Integer division rounding toward zero"""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


_object_new = object.__new__
