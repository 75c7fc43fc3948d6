from datetime import date, time

import pytest

from cobcodec.dates import (
    CalendarDate,
    days_in_month,
    format_ccyymmdd,
    format_hhmmss,
    is_leap_year,
    parse_ccyymmdd,
    parse_hhmmss,
)
from cobcodec.errors import InvalidDateFormat, InvalidDateRange, InvalidTimeFormat, InvalidTimeRange


def test_leap_year_rule():
    assert parse_ccyymmdd("20240229") == CalendarDate(2024, 2, 29)
    assert parse_ccyymmdd("20000229") == CalendarDate(2000, 2, 29)
    with pytest.raises(InvalidDateRange):
        parse_ccyymmdd("20230229")
    with pytest.raises(InvalidDateRange):
        parse_ccyymmdd("19000229")
    assert is_leap_year(1600) and not is_leap_year(2100)


def test_days_in_month_table():
    assert [days_in_month(2023, m) for m in range(1, 13)] == [
        31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31,
    ]
    assert days_in_month(2024, 2) == 29
    with pytest.raises(InvalidDateRange):
        days_in_month(2024, 13)


@pytest.mark.parametrize("text", ["2024022", "202402290", "2024-2-29", "2024O229", "２０２４０２２９", ""])
def test_format_errors(text):
    with pytest.raises(InvalidDateFormat):
        parse_ccyymmdd(text)


@pytest.mark.parametrize(
    "text", ["16001231", "40000101", "20241301", "20240001", "20240100", "20240431", "00000000"]
)
def test_range_errors(text):
    with pytest.raises(InvalidDateRange):
        parse_ccyymmdd(text)


def test_window_edges_are_valid():
    assert parse_ccyymmdd("16010101").year == 1601
    assert parse_ccyymmdd("39991231").year == 3999


@pytest.mark.parametrize("text", ["16010101", "19991231", "20240229", "20000301", "39991231"])
def test_round_trip(text):
    assert format_ccyymmdd(parse_ccyymmdd(text)) == text


def test_every_day_of_a_leap_year_round_trips():
    current = date(2024, 1, 1)
    while current.year == 2024:
        text = current.strftime("%Y%m%d")
        assert format_ccyymmdd(parse_ccyymmdd(text)) == text
        current = date.fromordinal(current.toordinal() + 1)


def test_interop_with_datetime_date():
    assert format_ccyymmdd(date(2024, 7, 4)) == "20240704"
    assert parse_ccyymmdd("20240704").to_date() == date(2024, 7, 4)
    assert parse_ccyymmdd("20240704").isoformat() == "2024-07-04"
    with pytest.raises(InvalidDateRange):
        format_ccyymmdd(date(1500, 1, 1))


def test_hhmmss():
    assert parse_hhmmss("235959") == time(23, 59, 59)
    assert format_hhmmss(time(7, 5, 3, 999)) == "070503"
    assert format_hhmmss(parse_hhmmss("000000")) == "000000"
    with pytest.raises(InvalidTimeFormat):
        parse_hhmmss("12:00:00")
    with pytest.raises(InvalidTimeRange):
        parse_hhmmss("240000")
    with pytest.raises(InvalidTimeRange):
        parse_hhmmss("126000")
