import pickle
from copy import copy, deepcopy

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from civiltime import (
    Date,
    DateRange,
    DateTimeOverflow,
    FixedClock,
    Instant,
    InvalidFormat,
    Month,
    TimeZone,
    UtcOffset,
    Year,
    YearMonth,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

MIN_YEAR = -999_999_999
MAX_YEAR = 999_999_999


class TestMonth:

    @pytest.mark.parametrize(
        "month, common, leap",
        [
            (Month.JANUARY, 31, 31),
            (Month.FEBRUARY, 28, 29),
            (Month.APRIL, 30, 30),
            (Month.DECEMBER, 31, 31),
        ],
    )
    def test_length(self, month, common, leap):
        assert month.length_in(2021) == common
        assert month.length_in(2020) == leap
        assert month.last_day_in(2020) == leap

    def test_day_of_year_bounds(self):
        assert Month.JANUARY.first_day_of_year_in(2020) == 1
        assert Month.MARCH.first_day_of_year_in(2021) == 60
        assert Month.MARCH.first_day_of_year_in(2020) == 61
        assert Month.FEBRUARY.last_day_of_year_in(2020) == 60
        assert Month.DECEMBER.last_day_of_year_in(2021) == 365
        assert Month.DECEMBER.last_day_of_year_in(2020) == 366

    def test_arithmetic_wraps(self):
        assert Month.NOVEMBER + 3 is Month.FEBRUARY
        assert Month.JANUARY - 1 is Month.DECEMBER
        assert Month.MAY + 24 is Month.MAY
        assert Month.MAY - 25 is Month.APRIL
        with pytest.raises(TypeError):
            Month.MAY + Month.JUNE  # type: ignore[operator]

    def test_repr(self):
        assert repr(Month.MARCH) == "<Month.MARCH: 3>"


class TestYear:

    def test_init(self):
        y = Year(2020)
        assert y.value == 2020
        assert y.is_leap
        assert y.length == 366
        assert not Year(2021).is_leap
        assert Year(2021).length == 365
        with pytest.raises(ValueError):
            Year(MAX_YEAR + 1)
        with pytest.raises(ValueError):
            Year(MIN_YEAR - 1)

    def test_constants(self):
        assert Year.MIN == Year(MIN_YEAR)
        assert Year.MAX == Year(MAX_YEAR)

    def test_dates(self):
        y = Year(2020)
        assert y.start_date() == Date(2020, 1, 1)
        assert y.end_date() == Date(2020, 12, 31)
        assert y.date_range() == DateRange(Date(2020, 1, 1), Date(2020, 12, 31))
        assert len(y.date_range()) == 366
        assert y.at_day(60) == Date(2020, 2, 29)
        assert y.at_month(Month.MARCH) == YearMonth(2020, 3)
        assert y.at_month(3) == YearMonth(2020, 3)
        with pytest.raises(ValueError):
            y.at_day(367)

    def test_contains(self):
        y = Year(2020)
        assert Date(2020, 6, 1) in y
        assert Date(2021, 1, 1) not in y
        assert YearMonth(2020, 12) in y
        assert YearMonth(2019, 12) not in y
        assert 2020 not in y

    def test_arithmetic(self):
        assert Year(2020) + 5 == Year(2025)
        assert Year(2020) - 2021 == Year(-1)
        with pytest.raises(DateTimeOverflow):
            Year.MAX + 1
        with pytest.raises(DateTimeOverflow):
            Year.MIN - 1
        with pytest.raises(TypeError):
            Year(2020) + Year(1)  # type: ignore[operator]

    def test_now(self):
        clock = FixedClock(
            Instant.from_canonical_format("2020-12-31T23:30:00Z"),
            TimeZone.fixed(UtcOffset(hours=1)),
        )
        assert Year.now(clock) == Year(2021)

    def test_equality(self):
        y = Year(2020)
        assert y == Year(2020)
        assert hash(y) == hash(Year(2020))
        assert y != Year(2021)
        assert y != 2020  # type: ignore[comparison-overlap]
        assert y == AlwaysEqual()
        assert y != NeverEqual()

    def test_comparison(self):
        y = Year(2020)
        assert y < Year(2021)
        assert y <= Year(2020)
        assert y > Year(-2020)
        assert y >= Year(2020)
        assert not y > Year(2020)
        assert y < AlwaysLarger()
        assert y > AlwaysSmaller()
        with pytest.raises(TypeError):
            y < 2021  # type: ignore[operator]

    @pytest.mark.parametrize(
        "y, s",
        [
            (Year(2020), "2020"),
            (Year(33), "0033"),
            (Year(-1), "-0001"),
            (Year(12_345), "+12345"),
            (Year.MIN, "-999999999"),
        ],
    )
    def test_canonical_format(self, y, s):
        assert y.canonical_format() == s
        assert str(y) == s
        assert Year.from_canonical_format(s) == y

    @pytest.mark.parametrize("s", ["20", "2020-01", "+1000000001", "２０２０", ""])
    def test_from_canonical_format_invalid(self, s):
        with pytest.raises(InvalidFormat):
            Year.from_canonical_format(s)

    def test_repr(self):
        assert repr(Year(2020)) == "Year(2020)"

    def test_copy_and_pickle(self):
        y = Year(2020)
        assert copy(y) == y
        assert deepcopy(y) == y
        assert pickle.loads(pickle.dumps(y)) == y


class TestYearMonth:

    def test_init(self):
        ym = YearMonth(2020, 2)
        assert ym.year == 2020
        assert ym.month == 2
        assert ym.month_of_year is Month.FEBRUARY
        assert ym.days_in_month() == 29
        assert ym.is_leap_year()
        assert YearMonth.from_date(Date(2021, 2, 14)) == YearMonth(2021, 2)

    @pytest.mark.parametrize(
        "args", [(2020, 0), (2020, 13), (MAX_YEAR + 1, 1), (MIN_YEAR - 1, 12)]
    )
    def test_invalid(self, args):
        with pytest.raises(ValueError):
            YearMonth(*args)

    def test_constants(self):
        assert YearMonth.MIN == YearMonth(MIN_YEAR, 1)
        assert YearMonth.MAX == YearMonth(MAX_YEAR, 12)
        assert YearMonth.MIN.start_date() == Date.MIN
        assert YearMonth.MAX.end_date() == Date.MAX

    def test_dates(self):
        ym = YearMonth(2021, 2)
        assert ym.start_date() == Date(2021, 2, 1)
        assert ym.end_date() == Date(2021, 2, 28)
        assert ym.at_day(14) == Date(2021, 2, 14)
        assert list(ym.date_range())[-1] == Date(2021, 2, 28)
        assert len(ym.date_range()) == 28
        with pytest.raises(ValueError):
            ym.at_day(29)

    def test_contains(self):
        ym = YearMonth(2021, 2)
        assert Date(2021, 2, 28) in ym
        assert Date(2021, 3, 1) not in ym
        assert Date(2020, 2, 1) not in ym
        assert "2021-02" not in ym

    @pytest.mark.parametrize(
        "ym, kwargs, expect",
        [
            (YearMonth(2020, 11), dict(months=3), YearMonth(2021, 2)),
            (YearMonth(2020, 1), dict(months=-1), YearMonth(2019, 12)),
            (YearMonth(2020, 11), dict(years=1, months=3), YearMonth(2022, 2)),
            (YearMonth(2020, 5), dict(years=-2021), YearMonth(-1, 5)),
            (YearMonth(2020, 5), dict(), YearMonth(2020, 5)),
        ],
    )
    def test_add(self, ym, kwargs, expect):
        assert ym.add(**kwargs) == expect

    def test_add_out_of_range(self):
        with pytest.raises(DateTimeOverflow):
            YearMonth.MAX.add(months=1)
        with pytest.raises(DateTimeOverflow):
            YearMonth.MIN.add(years=-1)

    def test_months_until(self):
        assert YearMonth(2020, 11).months_until(YearMonth(2022, 2)) == 15
        assert YearMonth(2022, 2).months_until(YearMonth(2020, 11)) == -15

    def test_now(self):
        clock = FixedClock(
            Instant.from_canonical_format("2020-12-31T23:30:00Z"),
            TimeZone.fixed(UtcOffset(hours=1)),
        )
        assert YearMonth.now(clock) == YearMonth(2021, 1)

    def test_equality(self):
        ym = YearMonth(2020, 2)
        assert ym == YearMonth(2020, 2)
        assert hash(ym) == hash(YearMonth(2020, 2))
        assert ym != YearMonth(2020, 3)
        assert ym != Date(2020, 2, 1)  # type: ignore[comparison-overlap]
        assert ym == AlwaysEqual()
        assert ym != NeverEqual()

    def test_comparison(self):
        ym = YearMonth(2020, 2)
        assert ym < YearMonth(2020, 3)
        assert ym < YearMonth(2021, 1)
        assert ym <= YearMonth(2020, 2)
        assert ym > YearMonth(2019, 12)
        assert ym >= YearMonth(2020, 2)
        assert ym < AlwaysLarger()
        assert ym > AlwaysSmaller()
        with pytest.raises(TypeError):
            ym < Date(2020, 3, 1)  # type: ignore[operator]

    @pytest.mark.parametrize(
        "ym, s",
        [
            (YearMonth(2020, 2), "2020-02"),
            (YearMonth(-1, 12), "-0001-12"),
            (YearMonth(10_000, 1), "+10000-01"),
        ],
    )
    def test_canonical_format(self, ym, s):
        assert ym.canonical_format() == s
        assert str(ym) == s
        assert YearMonth.from_canonical_format(s) == ym

    @pytest.mark.parametrize(
        "s", ["2020-2", "2020-13", "2020-00", "2020-02-01", "202002", "2020-02 "]
    )
    def test_from_canonical_format_invalid(self, s):
        with pytest.raises(InvalidFormat):
            YearMonth.from_canonical_format(s)

    def test_repr(self):
        assert repr(YearMonth(2020, 2)) == "YearMonth(2020-02)"

    def test_copy_and_pickle(self):
        ym = YearMonth(2020, 2)
        assert copy(ym) == ym
        assert deepcopy(ym) == ym
        assert pickle.loads(pickle.dumps(ym)) == ym

    @given(integers(MIN_YEAR * 12, MAX_YEAR * 12 + 11))
    def test_canonical_format_round_trip(self, months):
        ym = YearMonth(months // 12, months % 12 + 1)
        assert YearMonth.from_canonical_format(ym.canonical_format()) == ym
