from datetime import datetime
from typing import Annotated
import logging

from fastapi import APIRouter, Body, Depends, Query, Response, status

from dvbviewer_tv.dependencies import get_tv_service
from dvbviewer_tv.schemas import (
    ChannelInfo,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    SeriesTimerInfo,
    ServiceStatus,
    TimerInfo,
)
from dvbviewer_tv.services.live_tv_service import LiveTvService


logger = logging.getLogger(__name__)

main_router = APIRouter()

TvService = Annotated[LiveTvService, Depends(get_tv_service)]


def _image_response(image) -> Response:
    return Response(content=image.content, media_type=image.content_type)


@main_router.get("/")
async def root(service: TvService) -> dict:
    """Root endpoint with service information"""
    current = getattr(service, "current_stream", None)

    return {
        "service": service.name,
        "home_page": service.home_page_url,
        "version": "1.0.0",
        "current_stream": current.details.stream_id if current else None,
        "endpoints": {
            "status": "/status - Recording Service status",
            "channels": "/channels - Channel list",
            "recordings": "/recordings - Recording list",
            "timers": "/timers - Scheduled recordings",
            "series_timers": "/series-timers - Recurring schedules",
            "streams": "/streams - Open channel and recording streams",
        }
    }


@main_router.get("/health")
async def health_check() -> dict:
    """Health check endpoint"""
    return {"status": "ok"}


@main_router.get("/status", response_model=ServiceStatus)
async def get_status(service: TvService) -> ServiceStatus:
    """Recording Service availability; never fails on backend faults"""
    return await service.get_status()


@main_router.post("/tuners/{tuner_id}/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_tuner(tuner_id: str, service: TvService) -> None:
    await service.reset_tuner(tuner_id)


# Channels & EPG

@main_router.get("/channels", response_model=list[ChannelInfo])
async def get_channels(service: TvService) -> list[ChannelInfo]:
    return await service.get_channels()


@main_router.get("/channels/{channel_id}/image")
async def get_channel_image(channel_id: str, service: TvService) -> Response:
    return _image_response(await service.get_channel_image(channel_id))


@main_router.get("/channels/{channel_id}/programs", response_model=list[ProgramInfo])
async def get_programs(
    channel_id: str,
    service: TvService,
    start: Annotated[datetime, Query(description="UTC start of the EPG window (inclusive)")],
    end: Annotated[datetime, Query(description="UTC end of the EPG window (exclusive)")],
) -> list[ProgramInfo]:
    """
    Get EPG entries for a channel

    The window is forwarded to the Recording Service unchanged.
    """
    return await service.get_programs(channel_id, start, end)


@main_router.get("/programs/{program_id}/image")
async def get_program_image(program_id: str, service: TvService, channel_id: str = "") -> Response:
    return _image_response(await service.get_program_image(program_id, channel_id))


# Recordings

@main_router.get("/recordings", response_model=list[RecordingInfo])
async def get_recordings(service: TvService) -> list[RecordingInfo]:
    return await service.get_recordings()


@main_router.get("/recordings/{recording_id}/image")
async def get_recording_image(recording_id: str, service: TvService) -> Response:
    return _image_response(await service.get_recording_image(recording_id))


@main_router.delete("/recordings/{recording_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recording(recording_id: str, service: TvService) -> None:
    logger.info(f"Deleting recording {recording_id}")
    await service.delete_recording(recording_id)


# Timers

@main_router.post("/timers/defaults", response_model=SeriesTimerInfo)
async def get_new_timer_defaults(
    service: TvService,
    program: Annotated[ProgramInfo | None, Body()] = None,
) -> SeriesTimerInfo:
    """Defaults for a new timer, optionally for a specific program"""
    return await service.get_new_timer_defaults(program)


@main_router.get("/timers", response_model=list[TimerInfo])
async def get_timers(service: TvService) -> list[TimerInfo]:
    return await service.get_timers()


@main_router.post("/timers", status_code=status.HTTP_202_ACCEPTED)
async def create_timer(info: TimerInfo, service: TvService) -> dict:
    logger.info(f"Creating timer '{info.name}' on channel {info.channel_id}")
    await service.create_timer(info)
    return {"status": "accepted"}


@main_router.put("/timers/{timer_id}", status_code=status.HTTP_202_ACCEPTED)
async def update_timer(timer_id: str, info: TimerInfo, service: TvService) -> dict:
    await service.update_timer(info.model_copy(update={"id": timer_id}))
    return {"status": "accepted"}


@main_router.delete("/timers/{timer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_timer(timer_id: str, service: TvService) -> None:
    await service.cancel_timer(timer_id)


# Series timers

@main_router.get("/series-timers", response_model=list[SeriesTimerInfo])
async def get_series_timers(service: TvService) -> list[SeriesTimerInfo]:
    return await service.get_series_timers()


@main_router.post("/series-timers", status_code=status.HTTP_202_ACCEPTED)
async def create_series_timer(info: SeriesTimerInfo, service: TvService) -> dict:
    await service.create_series_timer(info)
    return {"status": "accepted"}


@main_router.put("/series-timers/{timer_id}", status_code=status.HTTP_202_ACCEPTED)
async def update_series_timer(timer_id: str, info: SeriesTimerInfo, service: TvService) -> dict:
    await service.update_series_timer(info.model_copy(update={"id": timer_id}))
    return {"status": "accepted"}


@main_router.delete("/series-timers/{timer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_series_timer(timer_id: str, service: TvService) -> None:
    await service.cancel_series_timer(timer_id)


# Streaming

@main_router.post("/streams/channels/{channel_id}", response_model=MediaSourceInfo)
async def open_channel_stream(channel_id: str, service: TvService, stream_id: str | None = None) -> MediaSourceInfo:
    return await service.get_channel_stream(channel_id, stream_id)


@main_router.get("/streams/channels/{channel_id}/sources", response_model=list[MediaSourceInfo])
async def get_channel_stream_media_sources(channel_id: str, service: TvService) -> list[MediaSourceInfo]:
    return await service.get_channel_stream_media_sources(channel_id)


@main_router.post("/streams/recordings/{recording_id}", response_model=MediaSourceInfo)
async def open_recording_stream(recording_id: str, service: TvService, stream_id: str | None = None) -> MediaSourceInfo:
    return await service.get_recording_stream(recording_id, stream_id)


@main_router.get("/streams/recordings/{recording_id}/sources", response_model=list[MediaSourceInfo])
async def get_recording_stream_media_sources(recording_id: str, service: TvService) -> list[MediaSourceInfo]:
    return await service.get_recording_stream_media_sources(recording_id)


@main_router.get("/streams/current")
async def get_current_stream(service: TvService) -> dict:
    """The most recently opened stream, if any"""
    current = getattr(service, "current_stream", None)
    if current is None:
        return {"stream": None}

    return {
        "stream": {
            "stream_id": current.details.stream_id,
            "origin_kind": current.origin_kind.value,
            "origin_id": current.origin_id,
            "opened_at": current.opened_at.isoformat(),
            "media_source": current.media_source.model_dump(),
        }
    }


@main_router.post("/streams/{stream_id}/record", status_code=status.HTTP_204_NO_CONTENT)
async def record_live_stream(stream_id: str, service: TvService) -> None:
    await service.record_live_stream(stream_id)


@main_router.post("/streams/{stream_id}/close", status_code=status.HTTP_204_NO_CONTENT)
async def close_live_stream(stream_id: str, service: TvService) -> None:
    await service.close_live_stream(stream_id)
