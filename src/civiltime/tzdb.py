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
"""Time zone rules from the IANA database, as found by :mod:`zoneinfo`.

The search path is :mod:`zoneinfo`'s own: the system's zoneinfo directories
(configurable with ``PYTHONTZPATH``), then the ``tzdata`` package.

Example
-------

>>> from civiltime import tzdb, ZonedDateTime
>>> ny = tzdb.region("America/New_York")
>>> ZonedDateTime(2020, 3, 8, 2, 30, zone=ny)
ZonedDateTime(2020-03-08T03:30:00-04:00[America/New_York])

"""
from __future__ import annotations

import logging
from datetime import datetime as _datetime
from datetime import timedelta as _timedelta
from datetime import timezone as _timezone
from functools import cached_property, lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

import tzdata

from ._calendar import UtcOffset
from ._common import TimeZoneRulesError
from ._zone import TimeZone, TimeZoneRulesProvider, TransitionRules

__all__ = [
    "ZoneInfoRules",
    "ZoneInfoRulesProvider",
    "default_provider",
    "region",
]

logger = logging.getLogger(__name__)

_UNIX_EPOCH = _datetime(1970, 1, 1, tzinfo=_timezone.utc)
# The range the standard library's datetime can represent, with a day
# to spare for the local offset
_MIN_SECOND = int(
    (_datetime(1, 1, 2, tzinfo=_timezone.utc) - _UNIX_EPOCH).total_seconds()
)
_MAX_SECOND = int(
    (_datetime(9999, 12, 30, tzinfo=_timezone.utc) - _UNIX_EPOCH).total_seconds()
)
# Zones never change offset twice within this time
_SCAN_STEP = 6 * 3600
# Sampling window for detecting zones with a fixed offset
_FIXED_CHECK_START = int(
    (_datetime(1850, 1, 1, tzinfo=_timezone.utc) - _UNIX_EPOCH).total_seconds()
)
_FIXED_CHECK_END = int(
    (_datetime(2100, 1, 1, tzinfo=_timezone.utc) - _UNIX_EPOCH).total_seconds()
)
_FIXED_CHECK_STEP = 30 * 86_400


class ZoneInfoRules(TransitionRules):
    """Rules of a :class:`~zoneinfo.ZoneInfo` zone

    Moments outside the years 1 to 9999 get the offset at the nearest
    moment inside that range.
    """

    def __init__(self, zone: ZoneInfo) -> None:
        super().__init__()
        self._zone = zone

    @property
    def key(self) -> str:
        return self._zone.key

    def _at(self, second: int) -> _datetime:
        clamped = min(max(second, _MIN_SECOND), _MAX_SECOND)
        return (_UNIX_EPOCH + _timedelta(seconds=clamped)).astimezone(self._zone)

    def _utcoffset_secs(self, second: int) -> int:
        return int(self._at(second).utcoffset().total_seconds())  # type: ignore[union-attr]

    def offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        return UtcOffset.from_total_seconds(self._utcoffset_secs(second))

    def standard_offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        dt = self._at(second)
        return UtcOffset.from_total_seconds(
            int((dt.utcoffset() - dt.dst()).total_seconds())  # type: ignore[operator]
        )

    def next_transition_after(self, second: int, until: int, /) -> Optional[int]:
        current = self._utcoffset_secs(second)
        low = second
        while low < until:
            high = min(low + _SCAN_STEP, until)
            if self._utcoffset_secs(high) != current:
                # narrow down to the first second with the new offset
                while high - low > 1:
                    mid = (low + high) // 2
                    if self._utcoffset_secs(mid) == current:
                        low = mid
                    else:
                        high = mid
                return high
            low = high
        return None

    @cached_property
    def has_fixed_offset(self) -> bool:  # type: ignore[override]
        first = self._utcoffset_secs(_FIXED_CHECK_START)
        return all(
            self._utcoffset_secs(s) == first
            for s in range(_FIXED_CHECK_START, _FIXED_CHECK_END, _FIXED_CHECK_STEP)
        )

    def __repr__(self) -> str:
        return f"ZoneInfoRules({self._zone.key})"


class ZoneInfoRulesProvider(TimeZoneRulesProvider):
    """Provides rules for region ids through :mod:`zoneinfo`. Rules are
    cached per id until :meth:`clear_cache` is called."""

    def __init__(self) -> None:
        self._cache: dict[str, ZoneInfoRules] = {}

    @property
    def database_version(self) -> str:
        """The version of the ``tzdata`` package's database, e.g. ``2024a``"""
        return tzdata.IANA_VERSION

    @cached_property
    def available_region_ids(self) -> frozenset[str]:  # type: ignore[override]
        return frozenset(available_timezones())

    def has_rules_for(self, region_id: str, /) -> bool:
        if region_id in self._cache or region_id in self.available_region_ids:
            return True
        try:
            self.get_rules_for(region_id)
        except TimeZoneRulesError:
            return False
        return True

    def get_rules_for(self, region_id: str, /) -> ZoneInfoRules:
        """The rules for the region

        Raises
        ------
        TimeZoneRulesError
            If no zone with this id is found.

        """
        try:
            return self._cache[region_id]
        except KeyError:
            pass
        try:
            zone = ZoneInfo(region_id)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise TimeZoneRulesError(
                f"No time zone rules found for {region_id!r}"
            ) from e
        logger.debug("Loaded time zone rules for %s", region_id)
        rules = self._cache[region_id] = ZoneInfoRules(zone)
        return rules

    def clear_cache(self) -> None:
        logger.debug("Clearing %d cached time zone rules", len(self._cache))
        self._cache.clear()

    def __repr__(self) -> str:
        return f"ZoneInfoRulesProvider({self.database_version})"

    def __reduce__(self) -> tuple[object, ...]:
        return ZoneInfoRulesProvider, ()


@lru_cache(maxsize=None)
def default_provider() -> ZoneInfoRulesProvider:
    """A shared :class:`ZoneInfoRulesProvider` for application code"""
    return ZoneInfoRulesProvider()


def region(region_id: str, /) -> TimeZone:
    """A region zone with rules from :func:`default_provider`

    Example
    -------

    >>> region("Europe/Amsterdam")
    TimeZone(Europe/Amsterdam)

    """
    return TimeZone.region(region_id, default_provider())
