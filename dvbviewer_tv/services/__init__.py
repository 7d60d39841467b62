"""
Services package for the DVBViewer Live TV Service

This package contains the live TV adapter and the components it coordinates.
"""
from dvbviewer_tv.services.backend_proxy import BackendProxy
from dvbviewer_tv.services.dvbviewer_tv_service import DVBViewerTvService, NewTimerPolicy
from dvbviewer_tv.services.live_tv_service import EventHook, LiveTvService
from dvbviewer_tv.services.recording_service_proxy import RecordingServiceProxy
from dvbviewer_tv.services.status_reporter import StatusReporter
from dvbviewer_tv.services.stream_sessions import StreamSession, StreamSessionTracker
from dvbviewer_tv.services.timer_cache import TimerCache, TTLCache

__all__ = [
    'BackendProxy',
    'DVBViewerTvService',
    'EventHook',
    'LiveTvService',
    'NewTimerPolicy',
    'RecordingServiceProxy',
    'StatusReporter',
    'StreamSession',
    'StreamSessionTracker',
    'TimerCache',
    'TTLCache',
]
