"""
Recording Service Proxy

HTTP client for the DVBViewer Recording Service web API. Issues one request per
operation and maps transport failures and malformed payloads to
RecordingServiceError subclasses. Retries are left to the caller.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from urllib.parse import quote

import httpx

from dvbviewer_tv.config import Settings
from dvbviewer_tv.errors import (
    ChannelLogoNotFoundError,
    RecordingServiceResponseError,
    RecordingServiceUnavailableError,
    ResourceNotFoundError,
)
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
from dvbviewer_tv.services.response_parser import (
    ChannelReference,
    format_days,
    parse_channels,
    parse_document,
    parse_programs,
    parse_recordings,
    parse_schedule_defaults,
    parse_series_timers,
    parse_timers,
    parse_version,
)
from dvbviewer_tv.utils.timezone import datetime_to_ole, minutes_since_midnight, to_local


logger = logging.getLogger(__name__)


class RecordingServiceProxy(BackendProxy):
    """
    BackendProxy backed by the Recording Service HTTP API.

    Channel identifiers exposed to the host are the backend channel IDs. The
    EPG ID, channel number and logo path each call needs are resolved from the
    last channel list, which is loaded on demand.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._zone = settings.zone
        self._channels: dict[str, ChannelReference] = {}

        if client is None:
            auth = httpx.BasicAuth(settings.username, settings.password) if settings.username else None
            client = httpx.AsyncClient(
                base_url=settings.api_base_url,
                timeout=settings.request_timeout_sec,
                auth=auth,
            )
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str, params: dict | None = None) -> httpx.Response:
        """
        Issue a GET against the web API

        Raises:
            RecordingServiceUnavailableError: On timeouts, connection errors and 5xx
            ResourceNotFoundError: On 404
            RecordingServiceResponseError: On any other non-success status
        """
        logger.debug("Recording Service request: %s %s", path, params or {})
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code >= 500:
                raise RecordingServiceUnavailableError(
                    f"Recording Service error HTTP {status_code} for {path}"
                ) from e
            if status_code == 404:
                raise ResourceNotFoundError(f"Recording Service resource not found: {path}") from e
            raise RecordingServiceResponseError(
                f"Unexpected HTTP {status_code} from Recording Service for {path}"
            ) from e

        except httpx.TransportError as e:
            raise RecordingServiceUnavailableError(
                f"Cannot reach Recording Service ({type(e).__name__}): {e}"
            ) from e

    async def _get_xml(self, path: str, params: dict | None = None):
        response = await self._request(path, params)
        return parse_document(response.content)

    # General

    async def get_status_info(self) -> BackendStatus:
        return parse_version(await self._get_xml("api/version.html"))

    async def get_schedule_defaults(self) -> ScheduleDefaults:
        return parse_schedule_defaults(await self._get_xml("api/status2.html"))

    # Channels

    async def _load_channels(self) -> list[ChannelReference]:
        references = parse_channels(await self._get_xml("api/getchannelsxml.html", {"logo": 1}))
        self._channels = {ref.channel_id: ref for ref in references}
        logger.debug("Loaded %s channels from Recording Service", len(references))
        return references

    async def _resolve_channel(self, channel_id: str) -> ChannelReference:
        reference = self._channels.get(channel_id)
        if reference is None:
            await self._load_channels()
            reference = self._channels.get(channel_id)
        if reference is None:
            raise ResourceNotFoundError(f"Unknown channel '{channel_id}'")
        return reference

    async def get_channels(self) -> list[ChannelInfo]:
        return [ref.to_channel_info() for ref in await self._load_channels()]

    async def get_channel_logo(self, channel_id: str) -> ImageStream:
        reference = await self._resolve_channel(channel_id)
        if not reference.logo_path:
            raise ChannelLogoNotFoundError(channel_id)

        try:
            response = await self._request(quote(reference.logo_path.replace("\\", "/")))
        except ResourceNotFoundError as e:
            raise ChannelLogoNotFoundError(channel_id) from e

        return ImageStream(
            content=response.content,
            content_type=response.headers.get("content-type", "image/png"),
        )

    async def get_programs(self, channel_id: str, start: datetime, end: datetime) -> list[ProgramInfo]:
        reference = await self._resolve_channel(channel_id)
        params = {
            "lvl": 2,
            "channel": reference.epg_id,
            "start": datetime_to_ole(start, self._zone),
            "end": datetime_to_ole(end, self._zone),
        }
        return parse_programs(await self._get_xml("api/epg.html", params), channel_id, self._zone)

    # Recordings

    async def get_recordings(self) -> list[RecordingInfo]:
        return parse_recordings(await self._get_xml("api/recordings.html", {"utf8": 1}), self._zone)

    async def delete_recording(self, recording_id: str) -> None:
        await self._request("api/recdelete.html", {"recid": recording_id, "delfile": 1})

    # Timers

    async def get_schedules(self) -> list[TimerInfo]:
        return parse_timers(await self._get_xml("api/timerlist.html", {"utf8": 1}), self._zone)

    def _timer_params(self, info: TimerInfo) -> dict:
        local_start = to_local(info.start_date, self._zone)
        return {
            "ch": info.channel_id,
            "dor": int(datetime_to_ole(local_start.replace(hour=0, minute=0, second=0, microsecond=0), self._zone)),
            "enable": 1,
            "start": minutes_since_midnight(info.start_date, self._zone),
            "stop": minutes_since_midnight(info.end_date, self._zone),
            "prio": info.priority,
            "title": info.name,
            "pre": info.pre_padding_seconds // 60,
            "post": info.post_padding_seconds // 60,
            "encoding": 255,
        }

    async def create_schedule(self, info: TimerInfo) -> None:
        await self._request("api/timeradd.html", self._timer_params(info))

    async def change_schedule(self, info: TimerInfo) -> None:
        if not info.id:
            raise ValueError("Timer ID is required to change a schedule")
        await self._request("api/timeredit.html", {"id": info.id, **self._timer_params(info)})

    async def delete_schedule(self, timer_id: str) -> None:
        await self._request("api/timerdelete.html", {"id": timer_id})

    # Series timers (EPG searches)

    async def get_series_schedules(self) -> list[SeriesTimerInfo]:
        return parse_series_timers(await self._get_xml("api/searchlist.html"))

    def _search_params(self, info: SeriesTimerInfo) -> dict:
        params = {
            "name": info.id or info.name,
            "searchphrase": info.name,
            "days": format_days(info.days),
            "epgbefore": info.pre_padding_seconds // 60,
            "epgafter": info.post_padding_seconds // 60,
            "prio": info.priority,
        }
        if info.channel_id and not info.record_any_channel:
            params["channel"] = info.channel_id
        return params

    async def create_series_schedule(self, info: SeriesTimerInfo) -> None:
        await self._request("api/searchadd.html", self._search_params(info))

    async def change_series_schedule(self, info: SeriesTimerInfo) -> None:
        if not info.id:
            raise ValueError("Series timer ID is required to change a series schedule")
        await self._request("api/searchedit.html", self._search_params(info))

    async def delete_series_schedule(self, timer_id: str) -> None:
        await self._request("api/searchdelete.html", {"name": timer_id})

    # Streaming

    async def get_live_tv_stream(self, channel_id: str) -> StreamingDetails:
        reference = await self._resolve_channel(channel_id)
        stream_id = uuid.uuid4().hex
        path = f"{self._settings.streaming_base_url}/upnp/channelstream/{reference.number}.ts"
        logger.info("Opening live stream %s for channel %s", stream_id, reference.name)
        return StreamingDetails(
            stream_id=stream_id,
            source_info=MediaSourceInfo(id=stream_id, path=path, is_infinite_stream=True),
        )

    async def get_recording_stream(self, recording_id: str, offset: timedelta) -> StreamingDetails:
        stream_id = uuid.uuid4().hex
        path = f"{self._settings.streaming_base_url}/upnp/recordings/{recording_id}.ts"
        seconds = int(offset.total_seconds())
        if seconds > 0:
            path = f"{path}?start={seconds}"
        logger.info("Opening recording stream %s for recording %s", stream_id, recording_id)
        return StreamingDetails(
            stream_id=stream_id,
            source_info=MediaSourceInfo(id=stream_id, path=path),
        )
