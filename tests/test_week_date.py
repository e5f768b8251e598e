import pytest
from hypothesis import given
from hypothesis.strategies import integers, sampled_from

from civiltime import Date, Weekday, WeekSettings

SETTINGS = [
    WeekSettings.ISO,
    WeekSettings.SUNDAY_START,
    WeekSettings(Weekday.SATURDAY, 1),
    WeekSettings(Weekday.WEDNESDAY, 7),
    WeekSettings(Weekday.SATURDAY, 7),
    WeekSettings(Weekday.MONDAY, 1),
]


def test_settings():
    assert WeekSettings.ISO == WeekSettings(Weekday.MONDAY, 4)
    assert WeekSettings.SUNDAY_START == WeekSettings(Weekday.SUNDAY, 1)
    assert hash(WeekSettings.ISO) == hash(WeekSettings(Weekday.MONDAY, 4))
    assert WeekSettings.ISO != WeekSettings.SUNDAY_START
    assert repr(WeekSettings.ISO) == "WeekSettings(MONDAY, 4)"
    assert WeekSettings(Weekday.FRIDAY).minimum_days_in_first_week == 1


@pytest.mark.parametrize("min_days", [0, 8])
def test_invalid_settings(min_days):
    with pytest.raises(ValueError):
        WeekSettings(Weekday.MONDAY, min_days)


def test_settings_need_a_weekday():
    with pytest.raises(TypeError):
        WeekSettings(1, 4)  # type: ignore[arg-type]


def test_weekday_number():
    assert Weekday.MONDAY.number(WeekSettings.ISO) == 1
    assert Weekday.SUNDAY.number(WeekSettings.ISO) == 7
    assert Weekday.SUNDAY.number(WeekSettings.SUNDAY_START) == 1
    assert Weekday.SATURDAY.number(WeekSettings.SUNDAY_START) == 7
    assert Weekday.MONDAY.number(WeekSettings(Weekday.TUESDAY)) == 7


@pytest.mark.parametrize(
    "d, expect",
    [
        (Date(2005, 1, 1), (2004, 53, 6)),
        (Date(2005, 1, 2), (2004, 53, 7)),
        (Date(2005, 12, 31), (2005, 52, 6)),
        (Date(2007, 1, 1), (2007, 1, 1)),
        (Date(2007, 12, 30), (2007, 52, 7)),
        (Date(2007, 12, 31), (2008, 1, 1)),
        (Date(2008, 12, 28), (2008, 52, 7)),
        (Date(2008, 12, 29), (2009, 1, 1)),
        (Date(2009, 12, 31), (2009, 53, 4)),
        (Date(2010, 1, 3), (2009, 53, 7)),
        (Date(2010, 1, 4), (2010, 1, 1)),
        (Date(2020, 12, 31), (2020, 53, 4)),
        (Date(2021, 1, 3), (2020, 53, 7)),
    ],
)
def test_iso_week_date(d, expect):
    assert d.week_date() == expect
    assert d.week_based_year() == expect[0]
    assert d.week_of_week_based_year() == expect[1]
    assert Date.from_week_date(*expect) == d


@pytest.mark.parametrize(
    "d, expect",
    [
        (Date(2017, 1, 1), (2017, 1, 1)),
        (Date(2017, 12, 30), (2017, 52, 7)),
        (Date(2017, 12, 31), (2018, 1, 1)),
        (Date(2021, 1, 1), (2021, 1, 6)),
        (Date(2020, 12, 27), (2021, 1, 1)),
        (Date(2020, 12, 26), (2020, 52, 7)),
    ],
)
def test_sunday_start_week_date(d, expect):
    assert d.week_date(WeekSettings.SUNDAY_START) == expect
    assert Date.from_week_date(*expect, WeekSettings.SUNDAY_START) == d


def test_week_of_year():
    # 2005-01-01 is a Saturday: it comes before ISO week 1 of 2005
    assert Date(2005, 1, 1).week_of_year() == 0
    assert Date(2005, 1, 3).week_of_year() == 1
    assert Date(2005, 1, 1).week_of_year(WeekSettings.SUNDAY_START) == 1
    assert Date(2005, 1, 2).week_of_year(WeekSettings.SUNDAY_START) == 2
    # a week that belongs to the next week-based year still counts here
    assert Date(2008, 12, 29).week_of_year() == 53


def test_week_of_month():
    # March 2021 starts on a Monday
    assert Date(2021, 3, 1).week_of_month() == 1
    assert Date(2021, 3, 7).week_of_month() == 1
    assert Date(2021, 3, 8).week_of_month() == 2
    assert Date(2021, 3, 31).week_of_month() == 5
    # May 2021 starts on a Saturday: too few days for a first ISO week
    assert Date(2021, 5, 1).week_of_month() == 0
    assert Date(2021, 5, 3).week_of_month() == 1
    assert Date(2021, 5, 1).week_of_month(WeekSettings.SUNDAY_START) == 1
    assert Date(2021, 5, 2).week_of_month(WeekSettings.SUNDAY_START) == 2


@pytest.mark.parametrize(
    "year, week, day",
    [
        (2005, 53, 1),  # 2005 has 52 ISO weeks
        (2021, 53, 1),
        (2020, 0, 1),
        (2020, 54, 1),
        (2020, 1, 0),
        (2020, 1, 8),
        (1_000_000_001, 1, 1),
        (-1_000_000_001, 52, 1),
        # one day past Date.MAX, in a week-based year past the last
        # calendar year
        (1_000_000_000, 1, 7),
    ],
)
def test_from_week_date_invalid(year, week, day):
    settings = (
        WeekSettings.SUNDAY_START if year == 1_000_000_000 else WeekSettings.ISO
    )
    with pytest.raises(ValueError):
        Date.from_week_date(year, week, day, settings)


@pytest.mark.parametrize("settings", SETTINGS)
@pytest.mark.parametrize("d", [Date.MIN, Date.MAX])
def test_week_date_inverse_at_limits(d, settings):
    assert Date.from_week_date(*d.week_date(settings), settings) == d


def test_week_based_year_beyond_calendar_years():
    assert Date.MAX.week_date(WeekSettings.SUNDAY_START) == (1_000_000_000, 1, 6)
    assert Date.MIN.week_date(WeekSettings(Weekday.SATURDAY, 7)) == (
        -1_000_000_000,
        53,
        3,
    )


def test_long_years():
    long_years = [
        y for y in range(2000, 2030) if Date(y, 12, 28).week_date()[1] == 53
    ]
    assert long_years == [2004, 2009, 2015, 2020, 2026]


@given(
    integers(Date.MIN.epoch_day, Date.MAX.epoch_day),
    sampled_from(SETTINGS),
)
def test_week_date_inverse(epoch_day, settings):
    d = Date.from_epoch_day(epoch_day)
    year, week, day = d.week_date(settings)
    assert 1 <= week <= 53
    assert 1 <= day <= 7
    assert day == d.day_of_week().number(settings)
    assert abs(year - d.year) <= 1
    assert Date.from_week_date(year, week, day, settings) == d


@given(
    integers(Date.MIN.epoch_day, Date.MAX.epoch_day - 1),
    sampled_from(SETTINGS),
)
def test_consecutive_days_share_or_advance_week(epoch_day, settings):
    d = Date.from_epoch_day(epoch_day)
    nxt = Date.from_epoch_day(epoch_day + 1)
    year, week, day = d.week_date(settings)
    if day < 7:
        assert nxt.week_date(settings) == (year, week, day + 1)
    else:
        assert nxt.week_date(settings) in [(year, week + 1, 1), (year + 1, 1, 1)]
