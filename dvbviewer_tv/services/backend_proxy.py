"""
Backend Proxy Interface

Abstract capability the adapter consumes to talk to the Recording Service.
Implementations raise RecordingServiceError subclasses when the backend is
unreachable or returns malformed data.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from dvbviewer_tv.schemas import (
    BackendStatus,
    ChannelInfo,
    ImageStream,
    ProgramInfo,
    RecordingInfo,
    ScheduleDefaults,
    SeriesTimerInfo,
    StreamingDetails,
    TimerInfo,
)


class BackendProxy(ABC):
    """Remote operations against a PVR backend"""

    @abstractmethod
    async def get_status_info(self) -> BackendStatus:
        ...

    @abstractmethod
    async def get_channels(self) -> list[ChannelInfo]:
        ...

    @abstractmethod
    async def get_channel_logo(self, channel_id: str) -> ImageStream:
        """Raises ChannelLogoNotFoundError when the channel has no logo"""

    @abstractmethod
    async def get_programs(self, channel_id: str, start: datetime, end: datetime) -> list[ProgramInfo]:
        ...

    @abstractmethod
    async def get_recordings(self) -> list[RecordingInfo]:
        ...

    @abstractmethod
    async def delete_recording(self, recording_id: str) -> None:
        ...

    @abstractmethod
    async def get_schedule_defaults(self) -> ScheduleDefaults:
        ...

    @abstractmethod
    async def get_schedules(self) -> list[TimerInfo]:
        ...

    @abstractmethod
    async def create_schedule(self, info: TimerInfo) -> None:
        ...

    @abstractmethod
    async def change_schedule(self, info: TimerInfo) -> None:
        ...

    @abstractmethod
    async def delete_schedule(self, timer_id: str) -> None:
        ...

    @abstractmethod
    async def get_series_schedules(self) -> list[SeriesTimerInfo]:
        ...

    @abstractmethod
    async def create_series_schedule(self, info: SeriesTimerInfo) -> None:
        ...

    @abstractmethod
    async def change_series_schedule(self, info: SeriesTimerInfo) -> None:
        ...

    @abstractmethod
    async def delete_series_schedule(self, timer_id: str) -> None:
        ...

    @abstractmethod
    async def get_live_tv_stream(self, channel_id: str) -> StreamingDetails:
        ...

    @abstractmethod
    async def get_recording_stream(self, recording_id: str, offset: timedelta) -> StreamingDetails:
        ...

    async def aclose(self) -> None:
        """Release transport resources; no-op unless overridden"""
        return None
