"""
Live TV service contract

The operations and notification hooks a host media application expects from a
live TV provider.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from threading import Lock
from typing import Callable, Generic, TypeVar

from dvbviewer_tv.schemas import (
    ChannelInfo,
    ImageStream,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    RecordingStatusChangedEvent,
    SeriesTimerInfo,
    ServiceStatus,
    TimerInfo,
)


logger = logging.getLogger(__name__)

E = TypeVar("E")


class EventHook(Generic[E]):
    """Observer list for one notification channel."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: list[Callable[[E | None], None]] = []
        self._lock = Lock()

    def subscribe(self, handler: Callable[[E | None], None]) -> None:
        with self._lock:
            self._handlers.append(handler)

    def unsubscribe(self, handler: Callable[[E | None], None]) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def fire(self, payload: E | None = None) -> None:
        """Call every subscriber in registration order"""
        with self._lock:
            handlers = list(self._handlers)
        logger.debug("Firing %s to %s subscribers", self.name, len(handlers))
        for handler in handlers:
            handler(payload)


class LiveTvService(ABC):
    """Host-facing live TV provider"""

    name: str
    home_page_url: str

    def __init__(self):
        self.recording_status_changed: EventHook[RecordingStatusChangedEvent] = EventHook("recording_status_changed")
        self.data_source_changed: EventHook[None] = EventHook("data_source_changed")

    # General

    @abstractmethod
    async def get_status(self) -> ServiceStatus: ...

    @abstractmethod
    async def reset_tuner(self, tuner_id: str) -> None: ...

    # Channels

    @abstractmethod
    async def get_channels(self) -> list[ChannelInfo]: ...

    @abstractmethod
    async def get_channel_image(self, channel_id: str) -> ImageStream: ...

    @abstractmethod
    async def get_programs(self, channel_id: str, start_utc: datetime, end_utc: datetime) -> list[ProgramInfo]: ...

    @abstractmethod
    async def get_program_image(self, program_id: str, channel_id: str) -> ImageStream: ...

    # Recordings

    @abstractmethod
    async def get_recordings(self) -> list[RecordingInfo]: ...

    @abstractmethod
    async def get_recording_image(self, recording_id: str) -> ImageStream: ...

    @abstractmethod
    async def delete_recording(self, recording_id: str) -> None: ...

    # Timers

    @abstractmethod
    async def get_new_timer_defaults(self, program: ProgramInfo | None = None) -> SeriesTimerInfo: ...

    @abstractmethod
    async def get_timers(self) -> list[TimerInfo]: ...

    @abstractmethod
    async def create_timer(self, info: TimerInfo) -> None: ...

    @abstractmethod
    async def update_timer(self, info: TimerInfo) -> None: ...

    @abstractmethod
    async def cancel_timer(self, timer_id: str) -> None: ...

    @abstractmethod
    async def get_series_timers(self) -> list[SeriesTimerInfo]: ...

    @abstractmethod
    async def create_series_timer(self, info: SeriesTimerInfo) -> None: ...

    @abstractmethod
    async def update_series_timer(self, info: SeriesTimerInfo) -> None: ...

    @abstractmethod
    async def cancel_series_timer(self, timer_id: str) -> None: ...

    # Streaming

    @abstractmethod
    async def get_channel_stream(self, channel_id: str, stream_id: str | None = None) -> MediaSourceInfo: ...

    @abstractmethod
    async def get_channel_stream_media_sources(self, channel_id: str) -> list[MediaSourceInfo]: ...

    @abstractmethod
    async def get_recording_stream(self, recording_id: str, stream_id: str | None = None) -> MediaSourceInfo: ...

    @abstractmethod
    async def get_recording_stream_media_sources(self, recording_id: str) -> list[MediaSourceInfo]: ...

    @abstractmethod
    async def record_live_stream(self, stream_id: str) -> None: ...

    @abstractmethod
    async def close_live_stream(self, stream_id: str) -> None: ...
