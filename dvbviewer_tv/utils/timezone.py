"""
Date and Time utilities

This module handles the date/time encodings used by the Recording Service and
the conversions between backend local time and the UTC values the host uses.
Centralizes all date parsing logic to maintain consistency across the application.
"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo
import logging


logger = logging.getLogger(__name__)

# Origin of OLE automation dates (days since this midnight, local time)
OLE_EPOCH = datetime(1899, 12, 30)


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def _ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime, zone: ZoneInfo) -> datetime:
    """
    Convert a UTC timestamp to the given local timezone

    Args:
        value: Datetime in UTC (naive values are assumed to be UTC)
        zone: Target timezone

    Returns:
        Timezone-aware datetime in the target zone
    """
    return _ensure_utc(value).astimezone(zone)


def datetime_to_ole(value: datetime, zone: ZoneInfo) -> float:
    """
    Encode a UTC datetime as an OLE date in backend local time

    Args:
        value: Datetime in UTC
        zone: Recording Service local timezone

    Returns:
        Days (with fraction) since 1899-12-30 local time
    """
    local = to_local(value, zone).replace(tzinfo=None)
    return (local - OLE_EPOCH) / timedelta(days=1)


def ole_to_datetime(value: float, zone: ZoneInfo) -> datetime:
    """Decode an OLE date in backend local time to a UTC datetime"""
    local = OLE_EPOCH + timedelta(days=value)
    return local.replace(tzinfo=zone).astimezone(timezone.utc)


def parse_compact_timestamp(value: str, zone: ZoneInfo) -> datetime:
    """
    Parse 'YYYYMMDDHHMMSS' with an optional ' +HHMM' offset into UTC

    Timestamps without an offset are interpreted in the backend local zone.

    Raises:
        DateFormatError: If the string is not a compact timestamp
    """
    text = (value or "").strip()
    try:
        if " " in text:
            return datetime.strptime(text, "%Y%m%d%H%M%S %z").astimezone(timezone.utc)
        local = datetime.strptime(text, "%Y%m%d%H%M%S")
    except ValueError as e:
        raise DateFormatError(f"Invalid compact timestamp: '{value}'") from e
    return local.replace(tzinfo=zone).astimezone(timezone.utc)


def parse_compact_duration(value: str) -> timedelta:
    """
    Parse a 'HHMMSS' duration

    Raises:
        DateFormatError: If the string is not a duration
    """
    text = (value or "").strip()
    if len(text) != 6 or not text.isdigit():
        raise DateFormatError(f"Invalid duration: '{value}'")
    return timedelta(hours=int(text[0:2]), minutes=int(text[2:4]), seconds=int(text[4:6]))


def parse_timer_window(date_str: str, start_str: str, end_str: str, zone: ZoneInfo) -> tuple[datetime, datetime]:
    """
    Parse a timer's 'DD.MM.YYYY' date and 'HH:MM:SS' start/end into UTC

    An end time earlier than the start time belongs to the following day.

    Returns:
        Tuple of (start, end) in UTC

    Raises:
        DateFormatError: If any part cannot be parsed
    """
    try:
        start_local = datetime.strptime(f"{date_str} {start_str}", "%d.%m.%Y %H:%M:%S")
        end_local = datetime.strptime(f"{date_str} {end_str}", "%d.%m.%Y %H:%M:%S")
    except ValueError as e:
        raise DateFormatError(f"Invalid timer date/time: '{date_str} {start_str}-{end_str}'") from e

    if end_local <= start_local:
        end_local += timedelta(days=1)

    return (
        start_local.replace(tzinfo=zone).astimezone(timezone.utc),
        end_local.replace(tzinfo=zone).astimezone(timezone.utc),
    )


def minutes_since_midnight(value: datetime, zone: ZoneInfo) -> int:
    """Local minutes past midnight, the unit the timer API uses for start/stop"""
    local = to_local(value, zone)
    return local.hour * 60 + local.minute
