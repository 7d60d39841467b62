"""
Shared fixtures: settings and an in-memory Recording Service stand-in.
"""
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from dvbviewer_tv.config import Settings
from dvbviewer_tv.errors import ChannelLogoNotFoundError, RecordingServiceUnavailableError
from dvbviewer_tv.schemas import (
    BackendStatus,
    ChannelInfo,
    ImageStream,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    ScheduleDefaults,
    SeriesTimerInfo,
    StreamingDetails,
    TimerInfo,
)
from dvbviewer_tv.services.backend_proxy import BackendProxy


def make_timer(timer_id: str, hour: int = 20) -> TimerInfo:
    start = datetime(2024, 3, 5, hour, 0, tzinfo=timezone.utc)
    return TimerInfo(
        id=timer_id,
        channel_id="ch-1",
        name=f"Timer {timer_id}",
        start_date=start,
        end_date=start + timedelta(hours=1),
    )


class FakeBackendProxy(BackendProxy):
    """BackendProxy keeping state in memory and counting calls per operation."""

    def __init__(self):
        self.calls: Counter = Counter()
        self.version = "2.1.6.0"
        self.status_error: Exception | None = None
        self.channels = [
            ChannelInfo(id="ch-1", name="Das Erste HD", number="1", has_image=True),
            ChannelInfo(id="ch-2", name="Radio Eins", number="2", has_image=False),
        ]
        self.logos = {"ch-1": ImageStream(content=b"\x89PNG", content_type="image/png")}
        self.programs: list[ProgramInfo] = []
        self.recordings = [
            RecordingInfo(
                id="rec-1",
                name="Tatort",
                start_date=datetime(2024, 3, 3, 19, 15, tzinfo=timezone.utc),
                end_date=datetime(2024, 3, 3, 20, 45, tzinfo=timezone.utc),
            )
        ]
        self.schedule_defaults = ScheduleDefaults(
            pre_record_interval=timedelta(minutes=5),
            post_record_interval=timedelta(minutes=10),
        )
        self.timers: list[TimerInfo] = [make_timer("1"), make_timer("2", hour=21)]
        self.series_timers: list[SeriesTimerInfo] = [SeriesTimerInfo(id="Tatort", name="Tatort")]
        self.program_window: tuple | None = None
        self.recording_offset: timedelta | None = None
        self._stream_counter = 0

    async def get_status_info(self) -> BackendStatus:
        self.calls["get_status_info"] += 1
        if self.status_error is not None:
            raise self.status_error
        return BackendStatus(version=self.version)

    async def get_channels(self) -> list[ChannelInfo]:
        self.calls["get_channels"] += 1
        return list(self.channels)

    async def get_channel_logo(self, channel_id: str) -> ImageStream:
        self.calls["get_channel_logo"] += 1
        if channel_id not in self.logos:
            raise ChannelLogoNotFoundError(channel_id)
        return self.logos[channel_id]

    async def get_programs(self, channel_id, start, end) -> list[ProgramInfo]:
        self.calls["get_programs"] += 1
        self.program_window = (channel_id, start, end)
        return list(self.programs)

    async def get_recordings(self) -> list[RecordingInfo]:
        self.calls["get_recordings"] += 1
        return list(self.recordings)

    async def delete_recording(self, recording_id: str) -> None:
        self.calls["delete_recording"] += 1
        self.recordings = [r for r in self.recordings if r.id != recording_id]

    async def get_schedule_defaults(self) -> ScheduleDefaults:
        self.calls["get_schedule_defaults"] += 1
        return self.schedule_defaults

    async def get_schedules(self) -> list[TimerInfo]:
        self.calls["get_schedules"] += 1
        return list(self.timers)

    async def create_schedule(self, info: TimerInfo) -> None:
        self.calls["create_schedule"] += 1
        self.timers.append(info.model_copy(update={"id": str(len(self.timers) + 1)}))

    async def change_schedule(self, info: TimerInfo) -> None:
        self.calls["change_schedule"] += 1
        self.timers = [info if t.id == info.id else t for t in self.timers]

    async def delete_schedule(self, timer_id: str) -> None:
        self.calls["delete_schedule"] += 1
        self.timers = [t for t in self.timers if t.id != timer_id]

    async def get_series_schedules(self) -> list[SeriesTimerInfo]:
        self.calls["get_series_schedules"] += 1
        return list(self.series_timers)

    async def create_series_schedule(self, info: SeriesTimerInfo) -> None:
        self.calls["create_series_schedule"] += 1
        self.series_timers.append(info)

    async def change_series_schedule(self, info: SeriesTimerInfo) -> None:
        self.calls["change_series_schedule"] += 1

    async def delete_series_schedule(self, timer_id: str) -> None:
        self.calls["delete_series_schedule"] += 1
        self.series_timers = [s for s in self.series_timers if s.id != timer_id]

    def _details(self, path: str, live: bool) -> StreamingDetails:
        self._stream_counter += 1
        stream_id = f"stream-{self._stream_counter}"
        return StreamingDetails(
            stream_id=stream_id,
            source_info=MediaSourceInfo(id=stream_id, path=path, is_infinite_stream=live),
        )

    async def get_live_tv_stream(self, channel_id: str) -> StreamingDetails:
        self.calls["get_live_tv_stream"] += 1
        return self._details(f"http://dvbviewer.local:7522/upnp/channelstream/{channel_id}.ts", live=True)

    async def get_recording_stream(self, recording_id: str, offset: timedelta) -> StreamingDetails:
        self.calls["get_recording_stream"] += 1
        self.recording_offset = offset
        return self._details(f"http://dvbviewer.local:7522/upnp/recordings/{recording_id}.ts", live=False)


class UnreachableBackendProxy(FakeBackendProxy):
    async def get_schedules(self) -> list[TimerInfo]:
        self.calls["get_schedules"] += 1
        raise RecordingServiceUnavailableError("Cannot reach Recording Service (ConnectError)")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_host="dvbviewer.local",
        local_timezone="Europe/Berlin",
        enable_timer_cache=True,
    )


@pytest.fixture
def fake_proxy() -> FakeBackendProxy:
    return FakeBackendProxy()
