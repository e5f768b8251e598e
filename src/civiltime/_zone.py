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
# - The core never loads time zone data itself. Region zones get their rules
#   from a provider passed in explicitly (see civiltime.tzdb for one backed
#   by zoneinfo).
# - TransitionRules works on plain epoch seconds, so that providers with
#   data outside our supported range don't need special cases.
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Union, overload

from ._calendar import Date, DateTime, Duration, Instant, UtcOffset
from ._common import (
    MAX_YEAR,
    MIN_YEAR,
    NS_PER_SEC,
    SECS_PER_DAY,
    TimeZoneRulesError,
    _object_new,
)

__all__ = [
    "TimeZone",
    "TimeZoneRules",
    "FixedOffsetRules",
    "TimeZoneOffsetTransition",
    "TransitionRules",
    "TimeZoneRulesProvider",
]

logger = logging.getLogger(__name__)


class TimeZoneOffsetTransition:
    """A change of UTC offset in a time zone, such as the start or end of
    daylight saving time.

    A transition where the clock jumps forward is a *gap*: local times
    in it don't exist. One where the clock jumps back is an *overlap*:
    local times in it occur twice.

    Example
    -------

    >>> t = TimeZoneOffsetTransition(
    ...     DateTime(2020, 3, 8, 2),
    ...     UtcOffset(hours=-5),
    ...     UtcOffset(hours=-4),
    ... )
    >>> t.is_gap
    True
    >>> t.date_time_after
    DateTime(2020-03-08T03:00:00)

    """

    __slots__ = ("_date_time_before", "_offset_before", "_offset_after")

    def __init__(
        self,
        date_time_before: DateTime,
        offset_before: UtcOffset,
        offset_after: UtcOffset,
    ) -> None:
        if offset_before == offset_after:
            raise ValueError(
                "the offsets before and after a transition must differ"
            )
        self._date_time_before = date_time_before
        self._offset_before = offset_before
        self._offset_after = offset_after

    @property
    def date_time_before(self) -> DateTime:
        """The local date-time at which the transition occurs, at the
        old offset"""
        return self._date_time_before

    @property
    def date_time_after(self) -> DateTime:
        """The local date-time right after the transition, at the new
        offset"""
        return self._date_time_before + self.duration

    @property
    def offset_before(self) -> UtcOffset:
        return self._offset_before

    @property
    def offset_after(self) -> UtcOffset:
        return self._offset_after

    @property
    def duration(self) -> Duration:
        """How far the local clock jumps. Positive for gaps."""
        return Duration(
            seconds=self._offset_after.total_seconds
            - self._offset_before.total_seconds
        )

    @property
    def is_gap(self) -> bool:
        return self._offset_after > self._offset_before

    @property
    def is_overlap(self) -> bool:
        return self._offset_after < self._offset_before

    @property
    def valid_offsets(self) -> list[UtcOffset]:
        """The offsets valid for local times inside the transition window:
        none for a gap, both for an overlap"""
        if self.is_gap:
            return []
        return [self._offset_before, self._offset_after]

    @property
    def epoch_second(self) -> int:
        return self._date_time_before.epoch_second_at(self._offset_before)

    @property
    def instant(self) -> Instant:
        return self._date_time_before.instant_at(self._offset_before)

    def contains(self, dt: DateTime, /) -> bool:
        """Whether the local date-time falls in the window of this
        transition: skipped by a gap, or repeated by an overlap"""
        if self.is_gap:
            return self._date_time_before <= dt < self.date_time_after
        return self.date_time_after <= dt < self._date_time_before

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZoneOffsetTransition):
            return NotImplemented
        return (
            self._date_time_before == other._date_time_before
            and self._offset_before == other._offset_before
            and self._offset_after == other._offset_after
        )

    def __hash__(self) -> int:
        return hash(
            (self._date_time_before, self._offset_before, self._offset_after)
        )

    def __repr__(self) -> str:
        kind = "gap" if self.is_gap else "overlap"
        return (
            f"TimeZoneOffsetTransition({kind} at "
            f"{self._date_time_before}{self._offset_before} "
            f"to {self._offset_after})"
        )


class TimeZoneRules(ABC):
    """The UTC offsets of a time zone over time"""

    __slots__ = ()

    @property
    @abstractmethod
    def has_fixed_offset(self) -> bool:
        """Whether the zone always has the same offset"""

    @overload
    def offset_at(self, at: Instant, /) -> UtcOffset: ...

    @overload
    def offset_at(self, at: DateTime, /) -> UtcOffset: ...

    @abstractmethod
    def offset_at(self, at: Union[Instant, DateTime], /) -> UtcOffset:
        """The offset at an instant, or the best offset for a local
        date-time. In a gap, that's the offset after the transition.
        In an overlap, it's the offset before it."""

    @abstractmethod
    def valid_offsets_at(self, dt: DateTime, /) -> list[UtcOffset]:
        """All offsets valid for the local date-time: one in the normal
        case, none in a gap, two in an overlap"""

    @abstractmethod
    def transition_at(
        self, dt: DateTime, /
    ) -> Optional[TimeZoneOffsetTransition]:
        """The transition whose gap or overlap contains the local
        date-time, if any"""

    def is_valid_offset(self, dt: DateTime, offset: UtcOffset, /) -> bool:
        return offset in self.valid_offsets_at(dt)

    @abstractmethod
    def is_daylight_savings_at(self, instant: Instant, /) -> bool: ...

    @abstractmethod
    def daylight_savings_at(self, instant: Instant, /) -> Duration:
        """The amount of daylight saving time in effect, or zero"""


class FixedOffsetRules(TimeZoneRules):
    """Rules of a zone that never changes its offset"""

    __slots__ = ("_offset",)

    def __init__(self, offset: UtcOffset) -> None:
        self._offset = offset

    @property
    def offset(self) -> UtcOffset:
        return self._offset

    @property
    def has_fixed_offset(self) -> bool:
        return True

    def offset_at(self, at: Union[Instant, DateTime], /) -> UtcOffset:
        return self._offset

    def valid_offsets_at(self, dt: DateTime, /) -> list[UtcOffset]:
        return [self._offset]

    def transition_at(
        self, dt: DateTime, /
    ) -> Optional[TimeZoneOffsetTransition]:
        return None

    def is_valid_offset(self, dt: DateTime, offset: UtcOffset, /) -> bool:
        return offset == self._offset

    def is_daylight_savings_at(self, instant: Instant, /) -> bool:
        return False

    def daylight_savings_at(self, instant: Instant, /) -> Duration:
        return Duration.ZERO

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedOffsetRules):
            return NotImplemented
        return self._offset == other._offset

    def __hash__(self) -> int:
        return hash(self._offset)

    def __repr__(self) -> str:
        return f"FixedOffsetRules({self._offset})"


# Offsets never exceed this, so a transition affecting a local date-time
# is always within this distance of it.
_MAX_OFFSET_SECS = 18 * 3600


class TransitionRules(TimeZoneRules):
    """Base for rules from a source that can tell the offset and standard
    offset at any moment, and find the next transition.

    Subclasses implement :meth:`offset_at_epoch_second`,
    :meth:`standard_offset_at_epoch_second` and
    :meth:`next_transition_after`. The rest of the rules protocol is
    derived from these, with the transitions of each year computed once
    and cached.
    """

    def __init__(self) -> None:
        # Concurrent misses may compute a year twice; the results are equal
        self._transitions_by_year: dict[int, list[TimeZoneOffsetTransition]] = {}

    @abstractmethod
    def offset_at_epoch_second(self, second: int, /) -> UtcOffset: ...

    @abstractmethod
    def standard_offset_at_epoch_second(self, second: int, /) -> UtcOffset: ...

    @abstractmethod
    def next_transition_after(self, second: int, until: int, /) -> Optional[int]:
        """The epoch second of the first offset change after ``second``,
        up to and including ``until``, or ``None``.

        At the returned second the new offset is in effect.
        """

    def transitions_in(self, year: int, /) -> list[TimeZoneOffsetTransition]:
        """The transitions that happen in the given local year, in order"""
        try:
            return self._transitions_by_year[year]
        except KeyError:
            pass
        transitions = []
        if MIN_YEAR <= year <= MAX_YEAR:
            # Scan a bit beyond the year, since local time differs from UTC
            second = Date(year, 1, 1).epoch_day * SECS_PER_DAY - 2 * SECS_PER_DAY
            until = (Date(year, 12, 31).epoch_day + 3) * SECS_PER_DAY
            while (second := self.next_transition_after(second, until)) is not None:
                before = self.offset_at_epoch_second(second - 1)
                after = self.offset_at_epoch_second(second)
                if before == after:
                    continue  # only the name or DST flag changed
                dt_before = DateTime.from_epoch_second(second, 0, before)
                if dt_before.year == year:
                    transitions.append(
                        TimeZoneOffsetTransition(dt_before, before, after)
                    )
        logger.debug(
            "Computed %d transitions for %r in %d",
            len(transitions),
            self,
            year,
        )
        self._transitions_by_year[year] = transitions
        return transitions

    def transition_at(
        self, dt: DateTime, /
    ) -> Optional[TimeZoneOffsetTransition]:
        # A window can cross New Year, so the neighbouring years count too
        for year in (dt.year - 1, dt.year, dt.year + 1):
            for transition in self.transitions_in(year):
                if transition.contains(dt):
                    return transition
        return None

    def offset_at(self, at: Union[Instant, DateTime], /) -> UtcOffset:
        if isinstance(at, Instant):
            return self.offset_at_epoch_second(at.epoch_second)
        elif isinstance(at, DateTime):
            if (transition := self.transition_at(at)) is not None:
                return (
                    transition.offset_after
                    if transition.is_gap
                    else transition.offset_before
                )
            return self._unique_offset(at)
        raise TypeError(f"expected Instant or DateTime, got {type(at).__name__}")

    def _unique_offset(self, dt: DateTime) -> UtcOffset:
        # Outside gaps and overlaps, exactly one offset maps the local
        # time back to itself.
        local = dt.epoch_second_at(UtcOffset.ZERO)
        guess = self.offset_at_epoch_second(local)
        candidates = (
            guess,
            self.offset_at_epoch_second(local - guess.total_seconds),
            self.offset_at_epoch_second(local - _MAX_OFFSET_SECS),
            self.offset_at_epoch_second(local + _MAX_OFFSET_SECS),
        )
        for offset in candidates:
            if self.offset_at_epoch_second(local - offset.total_seconds) == offset:
                return offset
        return candidates[1]

    def valid_offsets_at(self, dt: DateTime, /) -> list[UtcOffset]:
        if (transition := self.transition_at(dt)) is not None:
            return transition.valid_offsets
        return [self._unique_offset(dt)]

    def is_daylight_savings_at(self, instant: Instant, /) -> bool:
        return self.offset_at_epoch_second(
            instant.epoch_second
        ) != self.standard_offset_at_epoch_second(instant.epoch_second)

    def daylight_savings_at(self, instant: Instant, /) -> Duration:
        return Duration(
            nanoseconds=(
                self.offset_at_epoch_second(instant.epoch_second).total_seconds
                - self.standard_offset_at_epoch_second(
                    instant.epoch_second
                ).total_seconds
            )
            * NS_PER_SEC
        )


class TimeZoneRulesProvider(ABC):
    """A source of rules for region time zones, such as a copy of the
    IANA time zone database"""

    @property
    def database_version(self) -> str:
        """The version of the underlying database, if known"""
        return ""

    @property
    @abstractmethod
    def available_region_ids(self) -> frozenset[str]: ...

    def has_rules_for(self, region_id: str, /) -> bool:
        return region_id in self.available_region_ids

    @abstractmethod
    def get_rules_for(self, region_id: str, /) -> TimeZoneRules:
        """The rules for the region

        Raises
        ------
        TimeZoneRulesError
            If the provider has no rules for it.

        """


class TimeZone:
    """A time zone: either a fixed offset from UTC, or a region
    (e.g. ``America/New_York``) whose offsets come from a provider.

    Region ids aren't checked when the zone is created. Looking up its
    :attr:`rules` raises if the provider doesn't know the id.

    Example
    -------

    >>> TimeZone.fixed(UtcOffset(hours=2))
    TimeZone(+02:00)
    >>> TimeZone.parse("Z") == TimeZone.UTC
    True

    """

    __slots__ = ("_id", "_rules", "_provider")

    UTC: ClassVar[TimeZone]
    """The UTC time zone, with id ``Z``"""

    def __init__(self) -> None:
        raise TypeError(
            "TimeZone instances cannot be created through the constructor. "
            "Use `TimeZone.fixed`, `TimeZone.region` or `TimeZone.parse`."
        )

    @classmethod
    def fixed(cls, offset: UtcOffset, /) -> TimeZone:
        """A zone with a fixed offset. Its id is the offset's canonical
        string."""
        self = _object_new(cls)
        self._id = offset.canonical_format()
        self._rules = FixedOffsetRules(offset)
        self._provider = None
        return self

    @classmethod
    def region(
        cls, region_id: str, /, provider: Optional[TimeZoneRulesProvider]
    ) -> TimeZone:
        """A region zone whose rules come from ``provider``"""
        if not region_id or region_id[0] in "+-" or region_id == "Z":
            raise ValueError(f"invalid region id: {region_id!r}")
        self = _object_new(cls)
        self._id = region_id
        self._rules = None
        self._provider = provider
        return self

    @classmethod
    def parse(
        cls, zone_id: str, /, provider: Optional[TimeZoneRulesProvider] = None
    ) -> TimeZone:
        """Create from an id: ``Z`` for UTC, ``±HH:MM[:SS]`` for a fixed
        offset, anything else for a region.

        Example
        -------

        >>> TimeZone.parse("-04:30")
        TimeZone(-04:30)

        """
        if zone_id == "Z":
            return cls.UTC
        elif zone_id[:1] in ("+", "-"):
            return cls.fixed(UtcOffset.from_canonical_format(zone_id))
        return cls.region(zone_id, provider)

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_fixed(self) -> bool:
        return self._rules is not None

    @property
    def provider(self) -> Optional[TimeZoneRulesProvider]:
        return self._provider

    @property
    def rules(self) -> TimeZoneRules:
        """The rules of this zone

        Raises
        ------
        TimeZoneRulesError
            For a region zone without a provider, or whose provider
            doesn't know its id.

        """
        if self._rules is not None:
            return self._rules
        if self._provider is None:
            raise TimeZoneRulesError(
                f"no rules provider given for region {self._id!r}"
            )
        return self._provider.get_rules_for(self._id)

    def is_valid(self) -> bool:
        """Whether rules are available, without raising"""
        if self._rules is not None:
            return True
        return self._provider is not None and self._provider.has_rules_for(
            self._id
        )

    def validate(self) -> TimeZone:
        """Return the zone itself if it is valid

        Raises
        ------
        TimeZoneRulesError
            If no rules are available.

        """
        self.rules
        return self

    def normalized(self) -> TimeZone:
        """A fixed-offset zone if the rules never change offset,
        otherwise this zone"""
        if self._rules is not None:
            return self
        rules = self.rules
        if rules.has_fixed_offset:
            return TimeZone.fixed(rules.offset_at(Instant.EPOCH))
        return self

    def canonical_format(self) -> str:
        return self._id

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"TimeZone({self._id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __lt__(self, other: TimeZone) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id < other._id

    def __le__(self, other: TimeZone) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id <= other._id

    def __gt__(self, other: TimeZone) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id > other._id

    def __ge__(self, other: TimeZone) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id >= other._id

    def __reduce__(self) -> tuple[object, ...]:
        return _unpkl_zone, (self._id, self._provider)


def _unpkl_zone(
    zone_id: str, provider: Optional[TimeZoneRulesProvider]
) -> TimeZone:
    return TimeZone.parse(zone_id, provider)


TimeZone.UTC = TimeZone.fixed(UtcOffset.ZERO)
