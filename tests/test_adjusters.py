import pytest
from hypothesis import given
from hypothesis.strategies import integers, sampled_from

from civiltime import (
    Date,
    DateTime,
    DateTimeOverflow,
    Duration,
    OffsetDateTime,
    Time,
    UtcOffset,
    Weekday,
    WeekSettings,
    ZonedDateTime,
)

from .common import EDT, EST, NEW_YEAR_JUMP_ZONE, NEW_YORK

# A Saturday
SAT = Date(2021, 1, 2)


class TestDate:

    def test_start_and_end_of_week(self):
        assert SAT.start_of_week() == Date(2020, 12, 28)
        assert SAT.end_of_week() == Date(2021, 1, 3)
        assert SAT.start_of_week(WeekSettings.SUNDAY_START) == Date(2020, 12, 27)
        assert SAT.end_of_week(WeekSettings.SUNDAY_START) == SAT
        saturday_start = WeekSettings(Weekday.SATURDAY)
        assert SAT.start_of_week(saturday_start) == SAT
        assert SAT.end_of_week(saturday_start) == Date(2021, 1, 8)

    @pytest.mark.parametrize(
        "d, start, end",
        [
            (Date(2020, 2, 14), Date(2020, 2, 1), Date(2020, 2, 29)),
            (Date(2021, 2, 1), Date(2021, 2, 1), Date(2021, 2, 28)),
            (Date(2021, 12, 31), Date(2021, 12, 1), Date(2021, 12, 31)),
            (Date(-4, 4, 30), Date(-4, 4, 1), Date(-4, 4, 30)),
        ],
    )
    def test_start_and_end_of_month(self, d, start, end):
        assert d.start_of_month() == start
        assert d.end_of_month() == end

    def test_start_and_end_of_year(self):
        assert SAT.start_of_year() == Date(2021, 1, 1)
        assert SAT.end_of_year() == Date(2021, 12, 31)
        assert Date.MAX.start_of_year() == Date(999_999_999, 1, 1)
        assert Date.MIN.end_of_year() == Date(-999_999_999, 12, 31)

    @pytest.mark.parametrize(
        "weekday, next_, next_or_same, previous, previous_or_same",
        [
            (
                Weekday.SATURDAY,
                Date(2021, 1, 9),
                SAT,
                Date(2020, 12, 26),
                SAT,
            ),
            (
                Weekday.SUNDAY,
                Date(2021, 1, 3),
                Date(2021, 1, 3),
                Date(2020, 12, 27),
                Date(2020, 12, 27),
            ),
            (
                Weekday.FRIDAY,
                Date(2021, 1, 8),
                Date(2021, 1, 8),
                Date(2021, 1, 1),
                Date(2021, 1, 1),
            ),
            (
                Weekday.MONDAY,
                Date(2021, 1, 4),
                Date(2021, 1, 4),
                Date(2020, 12, 28),
                Date(2020, 12, 28),
            ),
        ],
    )
    def test_next_and_previous(
        self, weekday, next_, next_or_same, previous, previous_or_same
    ):
        assert SAT.next(weekday) == next_
        assert SAT.next_or_same(weekday) == next_or_same
        assert SAT.previous(weekday) == previous
        assert SAT.previous_or_same(weekday) == previous_or_same

    @given(
        integers(Date.MIN.epoch_day + 7, Date.MAX.epoch_day - 7),
        sampled_from(list(Weekday)),
    )
    def test_next_and_previous_land_on_weekday(self, epoch_day, weekday):
        d = Date.from_epoch_day(epoch_day)
        assert d < d.next(weekday) <= d.add(days=7)
        assert d <= d.next_or_same(weekday) < d.add(days=7)
        assert d.add(days=-7) <= d.previous(weekday) < d
        assert d.add(days=-7) < d.previous_or_same(weekday) <= d
        for result in (
            d.next(weekday),
            d.next_or_same(weekday),
            d.previous(weekday),
            d.previous_or_same(weekday),
        ):
            assert result.day_of_week() is weekday

    def test_out_of_range(self):
        assert Date.MAX.day_of_week() is Weekday.FRIDAY
        assert Date.MIN.day_of_week() is Weekday.MONDAY
        assert Date.MAX.end_of_week(WeekSettings(Weekday.SATURDAY)) == Date.MAX
        assert Date.MIN.start_of_week() == Date.MIN
        with pytest.raises(DateTimeOverflow):
            Date.MIN.start_of_week(WeekSettings.SUNDAY_START)
        with pytest.raises(DateTimeOverflow):
            Date.MAX.end_of_week()
        with pytest.raises(DateTimeOverflow):
            Date.MAX.next(Weekday.MONDAY)
        with pytest.raises(DateTimeOverflow):
            Date.MIN.previous(Weekday.MONDAY)


class TestDateTime:

    def test_start_and_end(self):
        d = DateTime(2021, 1, 2, 15, 30, 5, 123)
        assert d.start_of_week() == DateTime(2020, 12, 28)
        assert d.end_of_week() == DateTime(2021, 1, 3).replace(
            hour=23, minute=59, second=59, nanosecond=999_999_999
        )
        assert d.start_of_month() == DateTime(2021, 1, 1)
        assert d.end_of_month() == Date(2021, 1, 31).at(Time.MAX)
        assert d.start_of_year() == DateTime(2021, 1, 1)
        assert d.end_of_year() == Date(2021, 12, 31).at(Time.MAX)

    def test_next_and_previous_keep_time(self):
        d = DateTime(2021, 1, 2, 15, 30)
        assert d.next(Weekday.SATURDAY) == DateTime(2021, 1, 9, 15, 30)
        assert d.next_or_same(Weekday.SATURDAY) == d
        assert d.previous(Weekday.MONDAY) == DateTime(2020, 12, 28, 15, 30)
        assert d.previous_or_same(Weekday.SUNDAY) == DateTime(2020, 12, 27, 15, 30)


class TestOffsetDateTime:

    def test_keeps_offset(self):
        offset = UtcOffset(hours=-3)
        d = OffsetDateTime(2021, 1, 2, 15, 30, offset=offset)
        assert d.start_of_day().exact_eq(OffsetDateTime(2021, 1, 2, offset=offset))
        assert d.end_of_day().exact_eq(
            OffsetDateTime(2021, 1, 2, 23, 59, 59, 999_999_999, offset=offset)
        )
        assert d.start_of_week().exact_eq(
            OffsetDateTime(2020, 12, 28, offset=offset)
        )
        assert d.end_of_month().exact_eq(
            OffsetDateTime(2021, 1, 31, 23, 59, 59, 999_999_999, offset=offset)
        )
        assert d.start_of_year().exact_eq(OffsetDateTime(2021, 1, 1, offset=offset))
        assert d.next(Weekday.MONDAY).exact_eq(
            OffsetDateTime(2021, 1, 4, 15, 30, offset=offset)
        )
        assert d.previous_or_same(Weekday.SATURDAY).exact_eq(d)


class TestZonedDateTime:

    def test_regular_day(self):
        d = ZonedDateTime(2020, 8, 15, 14, zone=NEW_YORK)
        assert d.start_of_day().exact_eq(ZonedDateTime(2020, 8, 15, zone=NEW_YORK))
        assert d.end_of_day().exact_eq(
            ZonedDateTime(2020, 8, 15, 23, 59, 59, 999_999_999, zone=NEW_YORK)
        )
        assert d.day_length() == Duration(hours=24)

    @pytest.mark.parametrize(
        "d, hours",
        [
            (ZonedDateTime(2020, 3, 8, 12, zone=NEW_YORK), 23),
            (ZonedDateTime(2020, 11, 1, 12, zone=NEW_YORK), 25),
            (ZonedDateTime(2020, 3, 7, 12, zone=NEW_YORK), 24),
        ],
    )
    def test_day_length_around_offset_changes(self, d, hours):
        assert d.day_length() == Duration(hours=hours)

    def test_day_starting_in_a_gap(self):
        # Local 23:30 on New Year's Eve jumps to 00:30 on New Year's Day
        d = ZonedDateTime(2016, 1, 1, 12, zone=NEW_YEAR_JUMP_ZONE)
        start = d.start_of_day()
        assert start.date_time() == DateTime(2016, 1, 1, 0, 30)
        assert start.offset == UtcOffset(hours=2)
        assert d.day_length() == Duration(hours=23, minutes=30)

        eve = ZonedDateTime(2015, 12, 31, 12, zone=NEW_YEAR_JUMP_ZONE)
        end = eve.end_of_day()
        assert end.date_time() == DateTime(2015, 12, 31, 23, 29, 59, 999_999_999)
        assert end.offset == UtcOffset(hours=1)
        assert eve.day_length() == Duration(hours=23, minutes=30)

    def test_start_of_month_and_year(self):
        d = ZonedDateTime(2020, 11, 15, 9, zone=NEW_YORK)
        assert d.start_of_month().exact_eq(ZonedDateTime(2020, 11, 1, zone=NEW_YORK))
        assert d.start_of_month().offset == EDT
        assert d.end_of_year().exact_eq(
            ZonedDateTime(2020, 12, 31, 23, 59, 59, 999_999_999, zone=NEW_YORK)
        )
        assert d.start_of_year().offset == EST

    def test_end_of_day_in_overlap_day(self):
        d = ZonedDateTime(2020, 11, 1, 0, 30, zone=NEW_YORK)
        assert d.end_of_day().exact_eq(
            ZonedDateTime(2020, 11, 1, 23, 59, 59, 999_999_999, zone=NEW_YORK)
        )

    def test_next_resolves_in_zone(self):
        # 02:30 doesn't exist on the next Sunday, so it's shifted forward
        d = ZonedDateTime(2020, 3, 1, 2, 30, zone=NEW_YORK)
        assert d.next(Weekday.SUNDAY).exact_eq(
            ZonedDateTime(2020, 3, 8, 3, 30, zone=NEW_YORK)
        )

    def test_previous_keeps_offset_in_overlap(self):
        d = ZonedDateTime(2020, 11, 8, 1, 30, zone=NEW_YORK)
        assert d.offset == EST
        result = d.previous(Weekday.SUNDAY)
        assert result.date_time() == DateTime(2020, 11, 1, 1, 30)
        assert result.offset == EST
