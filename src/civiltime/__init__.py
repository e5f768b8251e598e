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
# - The modules are layered. Each only imports from the ones above it:
#   _common, _calendar, _zone, _zoned, _clock, _ranges, tzdb
# - The calendar types live in one module since they all 'know' about
#   each other (a Date can be subtracted into a Period, a Period added to
#   a DateTime, etc.)
# - Everything public is re-exported here. Import from `civiltime`,
#   not from the private modules.
from __future__ import annotations

__version__ = "0.1.0"

from . import tzdb
from ._calendar import (
    Date,
    DateTime,
    DateTimeField,
    Duration,
    Instant,
    Month,
    Period,
    Time,
    TimeUnit,
    UtcOffset,
    WeekSettings,
    Weekday,
    days_in_month,
    days_in_year,
    derive,
    is_leap,
)
from ._clock import Clock, FixedClock, SystemClock
from ._common import (
    Ambiguous,
    DateTimeOverflow,
    DoesntExistInZone,
    EmptyInterval,
    InvalidFormat,
    InvalidOffsetForZone,
    TimeZoneRulesError,
    UnboundedInterval,
)
from ._ranges import (
    DateProgression,
    DateRange,
    DateTimeInterval,
    InstantInterval,
    OffsetDateTimeInterval,
    ZonedDateTimeInterval,
)
from ._zone import (
    FixedOffsetRules,
    TimeZone,
    TimeZoneOffsetTransition,
    TimeZoneRules,
    TimeZoneRulesProvider,
    TransitionRules,
)
from ._year_month import Year, YearMonth
from ._zoned import (
    AwareDateTime,
    Disambiguate,
    OffsetDateTime,
    OffsetTime,
    ZonedDateTime,
)

__all__ = [
    # calendar
    "Date",
    "Time",
    "DateTime",
    "UtcOffset",
    "Instant",
    "Duration",
    "Period",
    "Weekday",
    "Month",
    "Year",
    "YearMonth",
    "WeekSettings",
    "DateTimeField",
    "TimeUnit",
    "derive",
    "is_leap",
    "days_in_year",
    "days_in_month",
    # zones
    "TimeZone",
    "TimeZoneRules",
    "FixedOffsetRules",
    "TransitionRules",
    "TimeZoneOffsetTransition",
    "TimeZoneRulesProvider",
    "tzdb",
    # aware date-times
    "AwareDateTime",
    "OffsetDateTime",
    "OffsetTime",
    "ZonedDateTime",
    "Disambiguate",
    # clocks
    "Clock",
    "SystemClock",
    "FixedClock",
    # ranges
    "DateRange",
    "DateProgression",
    "DateTimeInterval",
    "InstantInterval",
    "OffsetDateTimeInterval",
    "ZonedDateTimeInterval",
    # errors
    "InvalidFormat",
    "DateTimeOverflow",
    "UnboundedInterval",
    "EmptyInterval",
    "TimeZoneRulesError",
    "DoesntExistInZone",
    "Ambiguous",
    "InvalidOffsetForZone",
]
