"""CCYYMMDD calendar dates and HHMMSS times.

Validation is done here with the Gregorian rule rather than delegated to the
platform date library, and an invalid date is always an error; nothing is
clamped to a nearby valid day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from cobcodec.errors import InvalidDateFormat, InvalidDateRange, InvalidTimeFormat, InvalidTimeRange

MIN_YEAR = 1601
MAX_YEAR = 3999
DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
ASCII_DIGITS = frozenset("0123456789")


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDateRange(f"Month {month} outside 1-12", month)
    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month - 1]


@dataclass(frozen=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise InvalidDateRange(f"Year {self.year} outside {MIN_YEAR}-{MAX_YEAR}", self.year)
        limit = days_in_month(self.year, self.month)
        if not 1 <= self.day <= limit:
            raise InvalidDateRange(
                f"Day {self.day} outside 1-{limit} for {self.year:04d}-{self.month:02d}", self.day
            )

    @staticmethod
    def from_date(value: date) -> CalendarDate:
        return CalendarDate(value.year, value.month, value.day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def parse_ccyymmdd(text: str) -> CalendarDate:
    if len(text) != 8 or not set(text) <= ASCII_DIGITS:
        raise InvalidDateFormat(f"Expected 8 ASCII digits (CCYYMMDD), got {text!r}", text)
    return CalendarDate(int(text[:4]), int(text[4:6]), int(text[6:]))


def format_ccyymmdd(value: CalendarDate | date) -> str:
    if not isinstance(value, CalendarDate):
        value = CalendarDate.from_date(value)
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def parse_hhmmss(text: str) -> time:
    if len(text) != 6 or not set(text) <= ASCII_DIGITS:
        raise InvalidTimeFormat(f"Expected 6 ASCII digits (HHMMSS), got {text!r}", text)
    hour, minute, second = int(text[:2]), int(text[2:4]), int(text[4:])
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeRange(f"Time {text} outside 000000-235959", text)
    return time(hour, minute, second)


def format_hhmmss(value: time) -> str:
    # microseconds are dropped
    return f"{value.hour:02d}{value.minute:02d}{value.second:02d}"
