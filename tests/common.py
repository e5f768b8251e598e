from typing import Optional

from civiltime import (
    Date,
    DateTime,
    FixedOffsetRules,
    TimeZone,
    TimeZoneRules,
    TimeZoneRulesError,
    TimeZoneRulesProvider,
    TransitionRules,
    UtcOffset,
    Weekday,
)


class AlwaysEqual:
    def __eq__(self, other):
        return True


class NeverEqual:
    def __eq__(self, other):
        return False


class AlwaysLarger:
    def __lt__(self, other):
        return False

    def __le__(self, other):
        return False

    def __gt__(self, other):
        return True

    def __ge__(self, other):
        return True


class AlwaysSmaller:
    def __lt__(self, other):
        return True

    def __le__(self, other):
        return True

    def __gt__(self, other):
        return False

    def __ge__(self, other):
        return False


EST = UtcOffset(hours=-5)
EDT = UtcOffset(hours=-4)


def _nth_sunday(year: int, month: int, n: int) -> int:
    first = Date(year, month, 1)
    return 1 + (Weekday.SUNDAY.value - first.day_of_week().value) % 7 + 7 * (n - 1)


class USEasternRules(TransitionRules):
    """US Eastern time as defined since 2007, applied to every year:
    DST from 02:00 on the second Sunday of March to 02:00 on the first
    Sunday of November."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    @property
    def has_fixed_offset(self) -> bool:
        return False

    def _dst_bounds(self, year: int) -> tuple[int, int]:
        start = DateTime(year, 3, _nth_sunday(year, 3, 2), 2).epoch_second_at(EST)
        end = DateTime(year, 11, _nth_sunday(year, 11, 1), 2).epoch_second_at(EDT)
        return start, end

    def offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        start, end = self._dst_bounds(DateTime.from_epoch_second(second).year)
        return EDT if start <= second < end else EST

    def standard_offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        return EST

    def next_transition_after(self, second: int, until: int, /) -> Optional[int]:
        self.calls += 1
        year = DateTime.from_epoch_second(second).year
        for candidate in (*self._dst_bounds(year), *self._dst_bounds(year + 1)):
            if second < candidate <= until:
                return candidate
        return None

    def __repr__(self) -> str:
        return "USEasternRules()"


class SingleTransitionRules(TransitionRules):
    """One change of offset at a fixed moment"""

    def __init__(self, at: int, before: UtcOffset, after: UtcOffset) -> None:
        super().__init__()
        self.at = at
        self.before = before
        self.after = after

    @property
    def has_fixed_offset(self) -> bool:
        return False

    def offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        return self.before if second < self.at else self.after

    def standard_offset_at_epoch_second(self, second: int, /) -> UtcOffset:
        return self.offset_at_epoch_second(second)

    def next_transition_after(self, second: int, until: int, /) -> Optional[int]:
        return self.at if second < self.at <= until else None


# Jumps from +01:00 to +02:00 half an hour before New Year 2016
NEW_YEAR_JUMP = SingleTransitionRules(
    DateTime(2015, 12, 31, 23, 30).epoch_second_at(UtcOffset(hours=1)),
    UtcOffset(hours=1),
    UtcOffset(hours=2),
)


class FakeProvider(TimeZoneRulesProvider):
    """An in-memory rules provider with a few made-up zones"""

    def __init__(self) -> None:
        self.zones: dict[str, TimeZoneRules] = {
            "America/New_York": USEasternRules(),
            "Test/NewYearJump": NEW_YEAR_JUMP,
            "Test/Fixed": FixedOffsetRules(UtcOffset(hours=3)),
        }

    @property
    def database_version(self) -> str:
        return "test"

    @property
    def available_region_ids(self) -> frozenset[str]:
        return frozenset(self.zones)

    def get_rules_for(self, region_id: str, /) -> TimeZoneRules:
        try:
            return self.zones[region_id]
        except KeyError:
            raise TimeZoneRulesError(f"unknown zone {region_id!r}") from None


PROVIDER = FakeProvider()
NEW_YORK = TimeZone.region("America/New_York", PROVIDER)
NEW_YEAR_JUMP_ZONE = TimeZone.region("Test/NewYearJump", PROVIDER)
