import pytest

from civiltime import (
    Clock,
    Date,
    Duration,
    FixedClock,
    Instant,
    SystemClock,
    TimeZone,
    UtcOffset,
    ZonedDateTime,
)

from .common import NEW_YORK


def test_clock_is_abstract():
    with pytest.raises(TypeError):
        Clock()  # type: ignore[abstract]


class TestSystemClock:

    def test_defaults_to_utc(self):
        assert SystemClock().zone is TimeZone.UTC

    def test_reads_current_time(self):
        clock = SystemClock(NEW_YORK)
        assert clock.zone is NEW_YORK
        first = clock.read_instant()
        assert first > Instant.from_rfc3339("2020-01-01T00:00:00Z")
        assert clock.read_instant() >= first

    def test_repr(self):
        assert repr(SystemClock()) == "SystemClock(Z)"


class TestFixedClock:

    def test_defaults(self):
        clock = FixedClock()
        assert clock.read_instant() == Instant.EPOCH
        assert clock.zone is TimeZone.UTC

    def test_stays_put(self):
        clock = FixedClock(Instant.from_epoch_second(1_000))
        assert clock.read_instant() == clock.read_instant()

    def test_set_and_advance(self):
        clock = FixedClock(Instant.from_epoch_second(1_000), NEW_YORK)
        clock += Duration(seconds=5)
        assert clock.read_instant() == Instant.from_epoch_second(1_005)
        clock -= Duration(seconds=10)
        assert clock.read_instant() == Instant.from_epoch_second(995)
        clock.set(Instant.EPOCH)
        assert clock.read_instant() == Instant.EPOCH

    def test_advance_unsupported(self):
        clock = FixedClock()
        with pytest.raises(TypeError):
            clock += 5  # type: ignore[arg-type]

    def test_drives_now(self):
        clock = FixedClock(Instant.from_rfc3339("2020-03-08T06:59:59Z"), NEW_YORK)
        assert ZonedDateTime.now(clock).offset == UtcOffset(hours=-5)
        clock += Duration(seconds=1)
        now = ZonedDateTime.now(clock)
        assert now.offset == UtcOffset(hours=-4)
        assert now.hour == 3
        assert Date.today(clock) == Date(2020, 3, 8)

    def test_repr(self):
        clock = FixedClock(Instant.EPOCH, NEW_YORK)
        assert repr(clock) == "FixedClock(1970-01-01T00:00:00Z, America/New_York)"
