import pickle

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from civiltime import Date, DateTime, Duration, InvalidFormat, Time

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


class TestInit:

    def test_all_args(self):
        t = Time(1, 2, 3, 4_000)
        assert t.hour == 1
        assert t.minute == 2
        assert t.second == 3
        assert t.nanosecond == 4_000

    def test_defaults(self):
        assert Time() == Time(0, 0, 0, 0)

    @pytest.mark.parametrize(
        "args",
        [
            (24,),
            (-1,),
            (0, 60),
            (0, 0, 60),
            (0, 0, 0, 1_000_000_000),
            (0, 0, 0, -1),
        ],
    )
    def test_invalid(self, args):
        with pytest.raises(ValueError):
            Time(*args)


def test_constants():
    assert Time.MIDNIGHT == Time.MIN == Time()
    assert Time.NOON == Time(12)
    assert Time.MAX == Time(23, 59, 59, 999_999_999)


def test_of_day():
    t = Time(1, 2, 3, 4)
    assert t.second_of_day == 3_723
    assert t.nanosecond_of_day == 3_723_000_000_004
    assert Time.from_nanosecond_of_day(3_723_000_000_004) == t
    with pytest.raises(ValueError):
        Time.from_nanosecond_of_day(86_400 * 1_000_000_000)
    with pytest.raises(ValueError):
        Time.from_nanosecond_of_day(-1)


def test_add_wraps():
    assert Time(23, 30).add(hours=1) == Time(0, 30)
    assert Time(0, 30).add(minutes=-45) == Time(23, 45)
    assert Time(12).add(hours=48, nanoseconds=1) == Time(12, 0, 0, 1)
    assert Time(12).add(milliseconds=1, microseconds=1) == Time(12, 0, 0, 1_001_000)
    assert Time(23) + Duration(hours=2) == Time(1)
    assert Time(1) - Duration(hours=2) == Time(23)


def test_add_unsupported():
    with pytest.raises(TypeError):
        Time() + 1  # type: ignore[operator]


def test_on():
    assert Time(3, 4).on(Date(2021, 1, 2)) == DateTime(2021, 1, 2, 3, 4)


def test_replace():
    t = Time(1, 2, 3, 4)
    assert t.replace(hour=5) == Time(5, 2, 3, 4)
    assert t.replace(minute=0, nanosecond=0) == Time(1, 0, 3)
    with pytest.raises(ValueError):
        t.replace(second=60)


def test_equality():
    t = Time(1, 2, 3, 4)
    same = Time(1, 2, 3, 4)
    different = Time(1, 2, 3, 5)
    assert t == same
    assert not t == different
    assert not t == NeverEqual()
    assert t == AlwaysEqual()
    assert t != different
    assert hash(t) == hash(same)
    assert hash(t) != hash(different)


def test_comparison():
    t = Time(12)
    assert t < Time(12, 0, 0, 1)
    assert t <= Time(12)
    assert t > Time(11, 59)
    assert t >= Time(12)
    assert t < AlwaysLarger()
    assert t > AlwaysSmaller()
    assert not t >= AlwaysLarger()
    assert not t <= AlwaysSmaller()


@pytest.mark.parametrize(
    "t, expect",
    [
        (Time(), "00:00:00"),
        (Time(12, 30), "12:30:00"),
        (Time(1, 2, 3, 400_000_000), "01:02:03.400"),
        (Time(1, 2, 3, 1_500_000), "01:02:03.001500"),
        (Time(1, 2, 3, 5_000), "01:02:03.000005"),
        (Time(1, 2, 3, 1), "01:02:03.000000001"),
        (Time(1, 2, 3, 123_456_789), "01:02:03.123456789"),
        (Time.MAX, "23:59:59.999999999"),
    ],
)
def test_canonical_format(t, expect):
    assert t.canonical_format() == expect
    assert str(t) == expect
    assert Time.from_canonical_format(expect) == t


@pytest.mark.parametrize(
    "s, expect",
    [
        ("12:30", Time(12, 30)),
        ("12:30:05.5", Time(12, 30, 5, 500_000_000)),
        ("12:30:05.12345", Time(12, 30, 5, 123_450_000)),
    ],
)
def test_from_canonical_format_lenient(s, expect):
    assert Time.from_canonical_format(s) == expect


@pytest.mark.parametrize(
    "s",
    [
        "24:00:00",
        "12:60:00",
        "12:30:60",
        "1:02:03",
        "12:30:05.",
        "12:30:05.1234567890",
        "12:30:05Z",
        "",
    ],
)
def test_from_canonical_format_invalid(s):
    with pytest.raises(InvalidFormat):
        Time.from_canonical_format(s)


def test_repr():
    assert repr(Time(12, 30)) == "Time(12:30:00)"


def test_pickle():
    t = Time(1, 2, 3, 4)
    assert pickle.loads(pickle.dumps(t)) == t


@given(integers(0, Time.MAX.nanosecond_of_day))
def test_canonical_format_round_trip(nanos):
    t = Time.from_nanosecond_of_day(nanos)
    assert Time.from_canonical_format(t.canonical_format()) == t
