"""
DVBViewer Live TV Service

Implements the host live TV contract on top of the Recording Service proxy.
Most operations forward to the backend unchanged; timers go through the timer
cache and opened streams are tracked as the current session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from dvbviewer_tv.config import PLUGIN_VERSION, Settings
from dvbviewer_tv.schemas import (
    ChannelInfo,
    DayOfWeek,
    ImageStream,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    SeriesTimerInfo,
    ServiceStatus,
    StreamOrigin,
    TimerInfo,
)
from dvbviewer_tv.services.backend_proxy import BackendProxy
from dvbviewer_tv.services.live_tv_service import LiveTvService
from dvbviewer_tv.services.status_reporter import StatusReporter
from dvbviewer_tv.services.stream_sessions import StreamSession, StreamSessionTracker
from dvbviewer_tv.services.timer_cache import TimerCache
from dvbviewer_tv.utils.timezone import to_local


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NewTimerPolicy:
    """Fixed recording policy applied to every new timer's defaults."""
    record_new_only: bool = True
    record_any_channel: bool = False
    record_any_time: bool = False
    skip_episodes_in_library: bool = False


DEFAULT_NEW_TIMER_POLICY = NewTimerPolicy()


class DVBViewerTvService(LiveTvService):
    """Provides DVBViewer Recording Service integration for the host"""

    name = "DVBViewer (Recording Service)"
    home_page_url = "http://www.dvbviewer.tv"

    def __init__(
        self,
        settings: Settings,
        proxy: BackendProxy,
        *,
        timer_cache: TimerCache | None = None,
        stream_sessions: StreamSessionTracker | None = None,
        policy: NewTimerPolicy = DEFAULT_NEW_TIMER_POLICY,
        plugin_version: str = PLUGIN_VERSION,
    ):
        super().__init__()
        self._settings = settings
        self._proxy = proxy
        self._timer_cache = timer_cache or TimerCache(ttl=timedelta(seconds=settings.timer_cache_ttl_sec))
        self._stream_sessions = stream_sessions or StreamSessionTracker()
        self._status_reporter = StatusReporter(settings, proxy, plugin_version=plugin_version)
        self.policy = policy

    @property
    def current_stream(self) -> StreamSession | None:
        return self._stream_sessions.current

    @property
    def timer_cache(self) -> TimerCache:
        return self._timer_cache

    # General

    async def get_status(self) -> ServiceStatus:
        return await self._status_reporter.get_status()

    async def reset_tuner(self, tuner_id: str) -> None:
        raise NotImplementedError("Resetting tuners is not supported by the Recording Service")

    # Channels

    async def get_channels(self) -> list[ChannelInfo]:
        return await self._proxy.get_channels()

    async def get_channel_image(self, channel_id: str) -> ImageStream:
        # A missing logo surfaces as ChannelLogoNotFoundError; no placeholder image
        return await self._proxy.get_channel_logo(channel_id)

    async def get_programs(self, channel_id: str, start_utc: datetime, end_utc: datetime) -> list[ProgramInfo]:
        return await self._proxy.get_programs(channel_id, start_utc, end_utc)

    async def get_program_image(self, program_id: str, channel_id: str) -> ImageStream:
        raise NotImplementedError("Program images are not supported")

    # Recordings

    async def get_recordings(self) -> list[RecordingInfo]:
        return await self._proxy.get_recordings()

    async def get_recording_image(self, recording_id: str) -> ImageStream:
        raise NotImplementedError("Recording images are not supported")

    async def delete_recording(self, recording_id: str) -> None:
        await self._proxy.delete_recording(recording_id)

    # Timers

    async def get_new_timer_defaults(self, program: ProgramInfo | None = None) -> SeriesTimerInfo:
        """
        Build the defaults for a new timer.

        Padding comes from the backend schedule defaults. When a program is
        given, the day list holds the weekday of its start in local time.

        Args:
            program: Program the timer is being created for, if any

        Returns:
            Defaults in the series timer shape
        """
        defaults = await self._proxy.get_schedule_defaults()

        days: list[DayOfWeek] = []
        if program is not None:
            days.append(DayOfWeek.from_date(to_local(program.start_date, self._zone)))

        return SeriesTimerInfo(
            is_post_padding_required=defaults.post_record_interval > timedelta(0),
            is_pre_padding_required=defaults.pre_record_interval > timedelta(0),
            post_padding_seconds=int(defaults.post_record_interval.total_seconds()),
            pre_padding_seconds=int(defaults.pre_record_interval.total_seconds()),
            record_new_only=self.policy.record_new_only,
            record_any_channel=self.policy.record_any_channel,
            record_any_time=self.policy.record_any_time,
            skip_episodes_in_library=self.policy.skip_episodes_in_library,
            days=days,
        )

    async def get_timers(self) -> list[TimerInfo]:
        if not self._settings.enable_timer_cache:
            return await self._proxy.get_schedules()
        return await self._timer_cache.get_or_fetch(self._proxy.get_schedules)

    async def create_timer(self, info: TimerInfo) -> None:
        self._timer_cache.invalidate()
        await self._proxy.create_schedule(info)

    async def update_timer(self, info: TimerInfo) -> None:
        self._timer_cache.invalidate()
        await self._proxy.change_schedule(info)

    async def cancel_timer(self, timer_id: str) -> None:
        self._timer_cache.invalidate()
        await self._proxy.delete_schedule(timer_id)

    async def get_series_timers(self) -> list[SeriesTimerInfo]:
        return await self._proxy.get_series_schedules()

    async def create_series_timer(self, info: SeriesTimerInfo) -> None:
        await self._proxy.create_series_schedule(info)

    async def update_series_timer(self, info: SeriesTimerInfo) -> None:
        await self._proxy.change_series_schedule(info)

    async def cancel_series_timer(self, timer_id: str) -> None:
        await self._proxy.delete_series_schedule(timer_id)

    # Streaming

    async def get_channel_stream(self, channel_id: str, stream_id: str | None = None) -> MediaSourceInfo:
        details = await self._proxy.get_live_tv_stream(channel_id)
        session = StreamSession(details=details, origin_kind=StreamOrigin.CHANNEL, origin_id=channel_id)
        self._stream_sessions.replace(session)
        return session.media_source

    async def get_channel_stream_media_sources(self, channel_id: str) -> list[MediaSourceInfo]:
        raise NotImplementedError("Listing channel media sources is not supported")

    async def get_recording_stream(self, recording_id: str, stream_id: str | None = None) -> MediaSourceInfo:
        details = await self._proxy.get_recording_stream(recording_id, timedelta(0))
        session = StreamSession(details=details, origin_kind=StreamOrigin.RECORDING, origin_id=recording_id)
        self._stream_sessions.replace(session)
        return session.media_source

    async def get_recording_stream_media_sources(self, recording_id: str) -> list[MediaSourceInfo]:
        raise NotImplementedError("Listing recording media sources is not supported")

    async def record_live_stream(self, stream_id: str) -> None:
        raise NotImplementedError("Recording a live stream is not supported")

    async def close_live_stream(self, stream_id: str) -> None:
        raise NotImplementedError("Closing a live stream is not supported")

    @property
    def _zone(self) -> ZoneInfo:
        return self._settings.zone
