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
"""Sources of the current time"""
from __future__ import annotations

from abc import ABC, abstractmethod
from time import time_ns

from ._calendar import Duration, Instant
from ._zone import TimeZone

__all__ = ["Clock", "SystemClock", "FixedClock"]


class Clock(ABC):
    """A source of the current instant, along with a time zone to
    interpret it in"""

    __slots__ = ()

    @property
    @abstractmethod
    def zone(self) -> TimeZone: ...

    @abstractmethod
    def read_instant(self) -> Instant: ...


class SystemClock(Clock):
    """Reads the system's wall clock

    Example
    -------

    >>> clock = SystemClock(TimeZone.UTC)
    >>> Date.today(clock)
    Date(2024-01-19)

    """

    __slots__ = ("_zone",)

    def __init__(self, zone: TimeZone = TimeZone.UTC) -> None:
        self._zone = zone

    @property
    def zone(self) -> TimeZone:
        return self._zone

    def read_instant(self) -> Instant:
        return Instant._from_ns(time_ns())

    def __repr__(self) -> str:
        return f"SystemClock({self._zone})"


class FixedClock(Clock):
    """A clock that stays at the instant it is set to. Useful in tests.

    Example
    -------

    >>> clock = FixedClock(Instant.from_epoch_second(1_000))
    >>> clock += Duration(seconds=5)
    >>> clock.read_instant()
    Instant(1970-01-01T00:16:45Z)

    """

    __slots__ = ("_instant", "_zone")

    def __init__(
        self, instant: Instant = Instant.EPOCH, zone: TimeZone = TimeZone.UTC
    ) -> None:
        self._instant = instant
        self._zone = zone

    @property
    def zone(self) -> TimeZone:
        return self._zone

    def read_instant(self) -> Instant:
        return self._instant

    def set(self, instant: Instant, /) -> None:
        self._instant = instant

    def __iadd__(self, d: Duration) -> FixedClock:
        if not isinstance(d, Duration):
            return NotImplemented
        self._instant += d
        return self

    def __isub__(self, d: Duration) -> FixedClock:
        if not isinstance(d, Duration):
            return NotImplemented
        self._instant -= d
        return self

    def __repr__(self) -> str:
        return f"FixedClock({self._instant}, {self._zone})"
