"""
Date/time encoding tests for the Recording Service formats.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from dvbviewer_tv.schemas import DayOfWeek
from dvbviewer_tv.services.response_parser import format_days, parse_days
from dvbviewer_tv.utils.timezone import (
    DateFormatError,
    datetime_to_ole,
    minutes_since_midnight,
    ole_to_datetime,
    parse_compact_duration,
    parse_compact_timestamp,
    parse_timer_window,
)

BERLIN = ZoneInfo("Europe/Berlin")


def test_ole_date_of_known_day():
    assert datetime_to_ole(datetime(2024, 1, 1, tzinfo=timezone.utc), ZoneInfo("UTC")) == 45292.0


def test_ole_date_uses_local_time():
    value = datetime(2024, 6, 30, 22, 0, tzinfo=timezone.utc)
    # Summer time: 22:00 UTC is midnight in Berlin
    assert datetime_to_ole(value, BERLIN) == 45474.0
    assert ole_to_datetime(45474.0, BERLIN) == value


def test_compact_timestamp_with_and_without_offset():
    assert parse_compact_timestamp("20240305201500 +0100", BERLIN) == datetime(2024, 3, 5, 19, 15, tzinfo=timezone.utc)
    assert parse_compact_timestamp("20240305201500", BERLIN) == datetime(2024, 3, 5, 19, 15, tzinfo=timezone.utc)

    with pytest.raises(DateFormatError):
        parse_compact_timestamp("2024-03-05", BERLIN)


def test_compact_duration():
    assert parse_compact_duration("013005") == timedelta(hours=1, minutes=30, seconds=5)
    with pytest.raises(DateFormatError):
        parse_compact_duration("90")


def test_timer_window_crossing_midnight():
    start, end = parse_timer_window("31.12.2024", "23:30:00", "00:30:00", BERLIN)
    assert start == datetime(2024, 12, 31, 22, 30, tzinfo=timezone.utc)
    assert end == datetime(2024, 12, 31, 23, 30, tzinfo=timezone.utc)

    with pytest.raises(DateFormatError):
        parse_timer_window("31/12/2024", "23:30:00", "00:30:00", BERLIN)


def test_minutes_since_midnight():
    assert minutes_since_midnight(datetime(2024, 3, 5, 19, 15, tzinfo=timezone.utc), BERLIN) == 20 * 60 + 15


def test_day_of_week_from_date():
    assert DayOfWeek.from_date(datetime(2024, 3, 5)) == DayOfWeek.TUESDAY
    assert DayOfWeek.from_date(datetime(2024, 3, 10)) == DayOfWeek.SUNDAY


def test_day_strings():
    assert parse_days("T-T---T") == [DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY, DayOfWeek.SUNDAY]
    assert format_days([DayOfWeek.SUNDAY, DayOfWeek.MONDAY]) == "T-----T"
    assert parse_days("") == []
