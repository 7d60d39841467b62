"""
Recording Service response parsing

Converts the XML documents returned by the Recording Service web API into the
host data shapes. Elements missing required fields are skipped.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo
import logging

from lxml import etree  # type: ignore

from dvbviewer_tv.errors import RecordingServiceResponseError
from dvbviewer_tv.schemas import (
    BackendStatus,
    ChannelInfo,
    ChannelType,
    DayOfWeek,
    ProgramInfo,
    RecordingInfo,
    RecordingStatus,
    ScheduleDefaults,
    SeriesTimerInfo,
    TimerInfo,
)
from dvbviewer_tv.utils.timezone import (
    DateFormatError,
    parse_compact_duration,
    parse_compact_timestamp,
    parse_timer_window,
)


logger = logging.getLogger(__name__)

# Channel flag bit set for channels carrying video
VIDEO_CHANNEL_FLAG = 0x08

# Day strings are seven characters, Monday first, '-' for an unset day
DAY_STRING_ORDER = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]


@dataclass(frozen=True, slots=True)
class ChannelReference:
    """Backend identifiers of a channel needed by EPG, logo and stream calls."""
    channel_id: str
    number: str
    epg_id: str
    name: str
    channel_type: ChannelType = ChannelType.TV
    logo_path: str | None = None

    def to_channel_info(self) -> ChannelInfo:
        return ChannelInfo(
            id=self.channel_id,
            name=self.name,
            number=self.number or None,
            channel_type=self.channel_type,
            has_image=bool(self.logo_path),
        )


def parse_document(content: bytes) -> etree._Element:
    """
    Parse an XML response body

    Raises:
        RecordingServiceResponseError: If the body is not well-formed XML
    """
    try:
        return etree.fromstring(content)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise RecordingServiceResponseError(f"Malformed XML from Recording Service: {e}") from e


def parse_version(root: etree._Element) -> BackendStatus:
    version = (root.text or "").strip()
    if not version:
        raise RecordingServiceResponseError("Recording Service returned an empty version")
    return BackendStatus(version=version)


def parse_schedule_defaults(root: etree._Element) -> ScheduleDefaults:
    """Read the default EPG pre/post record intervals (minutes) from status2"""
    try:
        before = int(_get_text(root, "epgbefore", default="0"))
        after = int(_get_text(root, "epgafter", default="0"))
    except ValueError as e:
        raise RecordingServiceResponseError(f"Invalid schedule defaults: {e}") from e

    return ScheduleDefaults(
        pre_record_interval=timedelta(minutes=before),
        post_record_interval=timedelta(minutes=after),
    )


def parse_channels(root: etree._Element) -> list[ChannelReference]:
    """Extract every channel in the channel tree, first occurrence wins"""
    channels: dict[str, ChannelReference] = {}

    for channel in root.iter("channel"):
        channel_id = channel.get("ID")
        name = channel.get("name")
        if not channel_id or not name or channel_id in channels:
            continue

        channels[channel_id] = ChannelReference(
            channel_id=channel_id,
            number=channel.get("nr", ""),
            epg_id=channel.get("EPGID", ""),
            name=name.strip(),
            channel_type=ChannelType.TV if _get_int_attr(channel, "flags", 0) & VIDEO_CHANNEL_FLAG else ChannelType.RADIO,
            logo_path=_get_text(channel, "logo"),
        )

    return list(channels.values())


def parse_programs(root: etree._Element, channel_id: str, zone: ZoneInfo) -> list[ProgramInfo]:
    """Extract EPG entries for one channel"""
    programs = []

    for programme in root.findall("programme"):
        program = _parse_single_program(programme, channel_id, zone)
        if program:
            programs.append(program)

    programs.sort(key=lambda p: p.start_date)
    return programs


def _parse_single_program(programme: etree._Element, channel_id: str, zone: ZoneInfo) -> Optional[ProgramInfo]:
    start_str = programme.get("start")
    stop_str = programme.get("stop")
    title = _get_text(programme, "titles/title")

    if not all([start_str, stop_str, title]):
        return None

    try:
        start = parse_compact_timestamp(start_str, zone)
        stop = parse_compact_timestamp(stop_str, zone)
    except DateFormatError:
        logger.debug("Skipping programme with invalid times: %s - %s", start_str, stop_str)
        return None

    event_id = _get_text(programme, "eventid") or start.strftime("%Y%m%d%H%M%S")
    episode_title = _get_text(programme, "events/event")

    return ProgramInfo(
        id=f"{channel_id}|{event_id}",
        channel_id=channel_id,
        name=title,
        start_date=start,
        end_date=stop,
        overview=_get_text(programme, "descriptions/description"),
        episode_title=episode_title,
        is_series=episode_title is not None,
    )


def parse_recordings(root: etree._Element, zone: ZoneInfo, now: datetime | None = None) -> list[RecordingInfo]:
    now = now or datetime.now(timezone.utc)
    recordings = []

    for element in root.findall("recording"):
        recording_id = element.get("id")
        title = _get_text(element, "title")
        if not recording_id or not title:
            continue

        try:
            start = parse_compact_timestamp(element.get("start", ""), zone)
            duration = parse_compact_duration(element.get("duration", ""))
        except DateFormatError:
            logger.debug("Skipping recording %s with invalid times", recording_id)
            continue

        end = start + duration
        image = _get_text(element, "image")
        recordings.append(
            RecordingInfo(
                id=recording_id,
                name=title,
                channel_name=_get_text(element, "channel"),
                start_date=start,
                end_date=end,
                overview=_get_text(element, "desc"),
                episode_title=_get_text(element, "info"),
                path=_get_text(element, "file"),
                status=RecordingStatus.IN_PROGRESS if end > now else RecordingStatus.COMPLETED,
                has_image=image is not None,
            )
        )

    return recordings


def parse_timers(root: etree._Element, zone: ZoneInfo) -> list[TimerInfo]:
    timers = []

    for element in root.findall("Timer"):
        timer = _parse_single_timer(element, zone)
        if timer:
            timers.append(timer)

    return timers


def _parse_single_timer(element: etree._Element, zone: ZoneInfo) -> Optional[TimerInfo]:
    timer_id = _get_text(element, "ID")
    channel = element.find("Channel")
    channel_ref = channel.get("ID") if channel is not None else None

    if not timer_id or not channel_ref:
        return None

    try:
        start, end = parse_timer_window(
            element.get("Date", ""), element.get("Start", ""), element.get("End", ""), zone
        )
    except DateFormatError:
        logger.debug("Skipping timer %s with invalid date/time", timer_id)
        return None

    if _get_text(element, "Recording") == "-1":
        status = RecordingStatus.IN_PROGRESS
    elif element.get("Enabled") == "0":
        status = RecordingStatus.CANCELLED
    else:
        status = RecordingStatus.NEW

    pre_minutes = _get_int_attr(element, "PreEPG", 0)
    post_minutes = _get_int_attr(element, "PostEPG", 0)

    return TimerInfo(
        id=timer_id,
        channel_id=channel_ref.split("|", 1)[0],
        name=_get_text(element, "Descr", default=""),
        start_date=start,
        end_date=end,
        program_id=_get_text(element, "EPGEventID"),
        status=status,
        priority=_get_int_attr(element, "Priority", 50),
        pre_padding_seconds=pre_minutes * 60,
        post_padding_seconds=post_minutes * 60,
        is_pre_padding_required=pre_minutes > 0,
        is_post_padding_required=post_minutes > 0,
    )


def parse_series_timers(root: etree._Element) -> list[SeriesTimerInfo]:
    """Extract EPG searches, the Recording Service's recurring schedules"""
    series = []

    for element in root.findall("Search"):
        name = element.get("Name")
        if not name:
            continue

        channel = _get_text(element, "Channels/Channel")
        pre_minutes = _get_int_attr(element, "EPGBefore", 0)
        post_minutes = _get_int_attr(element, "EPGAfter", 0)
        days = parse_days(element.get("Days", ""))

        series.append(
            SeriesTimerInfo(
                id=name,
                name=_get_text(element, "SearchPhrase", default=name),
                channel_id=channel.split("|", 1)[0] if channel else None,
                days=days,
                priority=_get_int_attr(element, "Priority", 50),
                pre_padding_seconds=pre_minutes * 60,
                post_padding_seconds=post_minutes * 60,
                is_pre_padding_required=pre_minutes > 0,
                is_post_padding_required=post_minutes > 0,
                record_any_channel=channel is None,
                record_any_time=not days,
            )
        )

    return series


def parse_days(value: str) -> list[DayOfWeek]:
    """Decode a Monday-first day string like 'T-T----'"""
    return [day for day, flag in zip(DAY_STRING_ORDER, value or "") if flag not in ("-", " ")]


def format_days(days: list[DayOfWeek]) -> str:
    """Encode days as a Monday-first day string"""
    selected = set(days)
    return "".join("T" if day in selected else "-" for day in DAY_STRING_ORDER)


def _get_int_attr(element: Optional[etree._Element], name: str, default: int) -> int:
    if element is None:
        return default
    try:
        return int(element.get(name, default))
    except (TypeError, ValueError):
        return default


def _get_text(
    element: etree._Element,
    tag: str,
    default: Optional[str] = None
) -> Optional[str]:
    """Safely extract text from XML element"""
    child = element.find(tag)
    if child is None or not child.text or not child.text.strip():
        return default
    return child.text.strip()
