import pickle

import pytest

from civiltime import (
    DateTime,
    Duration,
    FixedOffsetRules,
    Instant,
    InvalidFormat,
    TimeZone,
    TimeZoneOffsetTransition,
    TimeZoneRulesError,
    UtcOffset,
)

from .common import (
    EDT,
    EST,
    NEW_YEAR_JUMP,
    PROVIDER,
    FakeProvider,
    USEasternRules,
)


class TestTransition:

    def test_gap(self):
        t = TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EST, EDT)
        assert t.is_gap
        assert not t.is_overlap
        assert t.date_time_before == DateTime(2020, 3, 8, 2)
        assert t.date_time_after == DateTime(2020, 3, 8, 3)
        assert t.offset_before == EST
        assert t.offset_after == EDT
        assert t.duration == Duration(hours=1)
        assert t.valid_offsets == []
        assert t.instant == Instant.from_rfc3339("2020-03-08T07:00:00Z")
        assert t.epoch_second == t.instant.epoch_second
        assert t.contains(DateTime(2020, 3, 8, 2, 30))
        assert t.contains(DateTime(2020, 3, 8, 2))
        assert not t.contains(DateTime(2020, 3, 8, 3))
        assert not t.contains(DateTime(2020, 3, 8, 1, 59))

    def test_overlap(self):
        t = TimeZoneOffsetTransition(DateTime(2020, 11, 1, 2), EDT, EST)
        assert t.is_overlap
        assert not t.is_gap
        assert t.date_time_after == DateTime(2020, 11, 1, 1)
        assert t.duration == Duration(hours=-1)
        assert t.valid_offsets == [EDT, EST]
        assert t.contains(DateTime(2020, 11, 1, 1))
        assert t.contains(DateTime(2020, 11, 1, 1, 59))
        assert not t.contains(DateTime(2020, 11, 1, 2))
        assert not t.contains(DateTime(2020, 11, 1, 0, 59))

    def test_same_offsets(self):
        with pytest.raises(ValueError):
            TimeZoneOffsetTransition(DateTime(2020, 1, 1), EST, EST)

    def test_equality(self):
        t = TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EST, EDT)
        same = TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EST, EDT)
        different = TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EDT, EST)
        assert t == same
        assert t != different
        assert hash(t) == hash(same)

    def test_repr(self):
        t = TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EST, EDT)
        assert repr(t) == (
            "TimeZoneOffsetTransition(gap at 2020-03-08T02:00:00-05:00 to -04:00)"
        )


class TestFixedOffsetRules:

    def test_basics(self):
        rules = FixedOffsetRules(UtcOffset(hours=3))
        dt = DateTime(2020, 3, 8, 2, 30)
        assert rules.has_fixed_offset
        assert rules.offset == UtcOffset(hours=3)
        assert rules.offset_at(dt) == UtcOffset(hours=3)
        assert rules.offset_at(Instant.EPOCH) == UtcOffset(hours=3)
        assert rules.valid_offsets_at(dt) == [UtcOffset(hours=3)]
        assert rules.transition_at(dt) is None
        assert rules.is_valid_offset(dt, UtcOffset(hours=3))
        assert not rules.is_valid_offset(dt, UtcOffset(hours=2))
        assert not rules.is_daylight_savings_at(Instant.EPOCH)
        assert rules.daylight_savings_at(Instant.EPOCH) == Duration.ZERO

    def test_equality(self):
        assert FixedOffsetRules(EST) == FixedOffsetRules(EST)
        assert FixedOffsetRules(EST) != FixedOffsetRules(EDT)
        assert hash(FixedOffsetRules(EST)) == hash(FixedOffsetRules(EST))
        assert repr(FixedOffsetRules(EST)) == "FixedOffsetRules(-05:00)"


class TestTransitionRules:

    def test_transitions_in(self):
        rules = USEasternRules()
        assert rules.transitions_in(2020) == [
            TimeZoneOffsetTransition(DateTime(2020, 3, 8, 2), EST, EDT),
            TimeZoneOffsetTransition(DateTime(2020, 11, 1, 2), EDT, EST),
        ]

    def test_transitions_are_cached(self):
        rules = USEasternRules()
        first = rules.transitions_in(2021)
        calls = rules.calls
        assert calls > 0
        assert rules.transitions_in(2021) is first
        assert rules.calls == calls

    def test_offset_at_instant(self):
        rules = USEasternRules()
        assert rules.offset_at(Instant.from_rfc3339("2020-07-01T12:00:00Z")) == EDT
        assert rules.offset_at(Instant.from_rfc3339("2020-12-01T12:00:00Z")) == EST
        # the second the transition happens has the new offset
        assert rules.offset_at(Instant.from_rfc3339("2020-03-08T07:00:00Z")) == EDT
        assert rules.offset_at(Instant.from_rfc3339("2020-03-08T06:59:59Z")) == EST

    def test_offset_at_local(self):
        rules = USEasternRules()
        assert rules.offset_at(DateTime(2020, 7, 1, 12)) == EDT
        assert rules.offset_at(DateTime(2020, 12, 1, 12)) == EST
        # gap: the offset after; overlap: the offset before
        assert rules.offset_at(DateTime(2020, 3, 8, 2, 30)) == EDT
        assert rules.offset_at(DateTime(2020, 11, 1, 1, 30)) == EDT
        # right at the edges of the windows
        assert rules.offset_at(DateTime(2020, 3, 8, 3)) == EDT
        assert rules.offset_at(DateTime(2020, 3, 8, 1, 59, 59)) == EST
        assert rules.offset_at(DateTime(2020, 11, 1, 2)) == EST
        assert rules.offset_at(DateTime(2020, 11, 1, 0, 59, 59)) == EDT

    def test_offset_at_unsupported(self):
        with pytest.raises(TypeError):
            USEasternRules().offset_at(1)  # type: ignore[call-overload]

    def test_valid_offsets(self):
        rules = USEasternRules()
        assert rules.valid_offsets_at(DateTime(2020, 7, 1, 12)) == [EDT]
        assert rules.valid_offsets_at(DateTime(2020, 3, 8, 2, 30)) == []
        assert rules.valid_offsets_at(DateTime(2020, 11, 1, 1, 30)) == [EDT, EST]
        assert rules.is_valid_offset(DateTime(2020, 11, 1, 1, 30), EST)
        assert not rules.is_valid_offset(DateTime(2020, 7, 1, 12), EST)

    def test_transition_at(self):
        rules = USEasternRules()
        assert rules.transition_at(DateTime(2020, 7, 1)) is None
        transition = rules.transition_at(DateTime(2020, 11, 1, 1, 30))
        assert transition is not None
        assert transition.is_overlap
        assert transition.date_time_before == DateTime(2020, 11, 1, 2)

    def test_transition_window_crossing_new_year(self):
        # The gap runs from 2015-12-31T23:30 to 2016-01-01T00:30
        transition = NEW_YEAR_JUMP.transition_at(DateTime(2016, 1, 1, 0, 15))
        assert transition is not None
        assert transition.is_gap
        assert transition.date_time_before == DateTime(2015, 12, 31, 23, 30)
        assert transition.date_time_after == DateTime(2016, 1, 1, 0, 30)
        assert NEW_YEAR_JUMP.transitions_in(2016) == []
        assert NEW_YEAR_JUMP.transition_at(DateTime(2016, 1, 1, 0, 30)) is None
        assert NEW_YEAR_JUMP.offset_at(DateTime(2016, 1, 1, 0, 15)) == UtcOffset(
            hours=2
        )

    def test_daylight_savings(self):
        rules = USEasternRules()
        summer = Instant.from_rfc3339("2020-07-01T12:00:00Z")
        winter = Instant.from_rfc3339("2020-12-01T12:00:00Z")
        assert rules.is_daylight_savings_at(summer)
        assert not rules.is_daylight_savings_at(winter)
        assert rules.daylight_savings_at(summer) == Duration(hours=1)
        assert rules.daylight_savings_at(winter) == Duration.ZERO

    def test_years_out_of_range(self):
        assert USEasternRules().transitions_in(1_000_000_000) == []

    def test_not_fixed(self):
        assert not USEasternRules().has_fixed_offset


class TestProvider:

    def test_basics(self):
        provider = FakeProvider()
        assert provider.database_version == "test"
        assert "America/New_York" in provider.available_region_ids
        assert provider.has_rules_for("Test/Fixed")
        assert not provider.has_rules_for("Mars/Olympus_Mons")
        with pytest.raises(TimeZoneRulesError):
            provider.get_rules_for("Mars/Olympus_Mons")


class TestTimeZone:

    def test_no_constructor(self):
        with pytest.raises(TypeError):
            TimeZone()

    def test_fixed(self):
        zone = TimeZone.fixed(UtcOffset(hours=2))
        assert zone.id == "+02:00"
        assert zone.is_fixed
        assert zone.provider is None
        assert zone.rules == FixedOffsetRules(UtcOffset(hours=2))
        assert zone.is_valid()
        assert zone.validate() is zone

    def test_utc(self):
        assert TimeZone.UTC.id == "Z"
        assert TimeZone.UTC == TimeZone.fixed(UtcOffset.ZERO)
        assert TimeZone.UTC.rules.offset_at(Instant.EPOCH) == UtcOffset.ZERO

    def test_region(self):
        zone = TimeZone.region("America/New_York", PROVIDER)
        assert zone.id == "America/New_York"
        assert not zone.is_fixed
        assert zone.provider is PROVIDER
        assert isinstance(zone.rules, USEasternRules)
        assert zone.is_valid()

    @pytest.mark.parametrize("region_id", ["", "+01:00", "-05:00", "Z"])
    def test_region_invalid_id(self, region_id):
        with pytest.raises(ValueError):
            TimeZone.region(region_id, PROVIDER)

    def test_region_unknown(self):
        # unknown ids are only detected when the rules are needed
        zone = TimeZone.region("Mars/Olympus_Mons", PROVIDER)
        assert not zone.is_valid()
        with pytest.raises(TimeZoneRulesError):
            zone.rules
        with pytest.raises(TimeZoneRulesError):
            zone.validate()

    def test_region_without_provider(self):
        zone = TimeZone.region("America/New_York", None)
        assert not zone.is_valid()
        with pytest.raises(TimeZoneRulesError):
            zone.rules

    @pytest.mark.parametrize(
        "zone_id, expect",
        [
            ("Z", TimeZone.UTC),
            ("+02:00", TimeZone.fixed(UtcOffset(hours=2))),
            ("-04:30", TimeZone.fixed(UtcOffset(hours=-4, minutes=-30))),
            ("America/New_York", TimeZone.region("America/New_York", PROVIDER)),
        ],
    )
    def test_parse(self, zone_id, expect):
        zone = TimeZone.parse(zone_id, PROVIDER)
        assert zone == expect
        assert zone.canonical_format() == zone_id
        assert str(zone) == zone_id

    def test_parse_invalid_offset(self):
        with pytest.raises(InvalidFormat):
            TimeZone.parse("+25:00")

    def test_normalized(self):
        fixed_region = TimeZone.region("Test/Fixed", PROVIDER)
        assert fixed_region.normalized() == TimeZone.fixed(UtcOffset(hours=3))
        ny = TimeZone.region("America/New_York", PROVIDER)
        assert ny.normalized() is ny
        utc = TimeZone.UTC
        assert utc.normalized() is utc

    def test_equality_and_order(self):
        a = TimeZone.region("America/New_York", PROVIDER)
        b = TimeZone.region("America/New_York", None)
        c = TimeZone.region("Europe/Amsterdam", None)
        assert a == b
        assert hash(a) == hash(b)
        assert a != c
        assert a < c
        assert c >= a
        assert sorted([c, TimeZone.UTC, a]) == [a, c, TimeZone.UTC]

    def test_repr(self):
        assert repr(TimeZone.fixed(UtcOffset(hours=2))) == "TimeZone(+02:00)"
        assert repr(TimeZone.UTC) == "TimeZone(Z)"

    def test_pickle(self):
        zone = TimeZone.fixed(UtcOffset(hours=2))
        assert pickle.loads(pickle.dumps(zone)) == zone
        assert pickle.loads(pickle.dumps(TimeZone.UTC)) is TimeZone.UTC
