from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LiveTvServiceStatus(str, Enum):
    OK = "Ok"
    UNAVAILABLE = "Unavailable"


class ChannelType(str, Enum):
    TV = "TV"
    RADIO = "Radio"


class RecordingStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    ERROR = "Error"


class DayOfWeek(str, Enum):
    """Day of week in the host's Sunday-first order"""
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def from_date(cls, value: datetime) -> "DayOfWeek":
        """Map a date to its day, using Python's Monday-first weekday()"""
        return _MONDAY_FIRST[value.weekday()]


_MONDAY_FIRST = [
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
    DayOfWeek.SUNDAY,
]


class StreamOrigin(str, Enum):
    CHANNEL = "Channel"
    RECORDING = "Recording"


class ServiceStatus(BaseModel):
    """Live TV service status reported to the host"""
    model_config = ConfigDict(frozen=True)

    status: LiveTvServiceStatus
    status_message: str
    version: str
    has_update_available: bool = False


class ChannelInfo(BaseModel):
    """Channel as seen by the host"""
    id: str = Field(..., description="Backend channel ID")
    name: str
    number: str | None = None
    channel_type: ChannelType = ChannelType.TV
    has_image: bool = False
    image_url: str | None = None


class ProgramInfo(BaseModel):
    """Single EPG entry"""
    id: str
    channel_id: str
    name: str
    start_date: datetime = Field(..., description="UTC start time")
    end_date: datetime = Field(..., description="UTC end time")
    overview: str | None = None
    episode_title: str | None = None
    genres: list[str] = Field(default_factory=list)
    is_series: bool = False


class RecordingInfo(BaseModel):
    """Finished or running recording"""
    id: str
    name: str
    channel_id: str | None = None
    channel_name: str | None = None
    start_date: datetime
    end_date: datetime
    overview: str | None = None
    episode_title: str | None = None
    path: str | None = None
    status: RecordingStatus = RecordingStatus.COMPLETED
    has_image: bool = False
    image_url: str | None = None


class TimerInfo(BaseModel):
    """Single scheduled recording"""
    id: str = ""
    channel_id: str
    name: str
    start_date: datetime
    end_date: datetime
    program_id: str | None = None
    series_timer_id: str | None = None
    overview: str | None = None
    status: RecordingStatus = RecordingStatus.NEW
    priority: int = 50
    pre_padding_seconds: int = 0
    post_padding_seconds: int = 0
    is_pre_padding_required: bool = False
    is_post_padding_required: bool = False

    @model_validator(mode="after")
    def validate_time_range(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"start_date ({self.start_date}) must be before end_date ({self.end_date})")
        return self


class SeriesTimerInfo(BaseModel):
    """Recurring schedule; also used as the new-timer defaults shape"""
    id: str = ""
    name: str = ""
    channel_id: str | None = None
    program_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    days: list[DayOfWeek] = Field(default_factory=list)
    priority: int = 50
    pre_padding_seconds: int = 0
    post_padding_seconds: int = 0
    is_pre_padding_required: bool = False
    is_post_padding_required: bool = False
    record_new_only: bool = False
    record_any_channel: bool = False
    record_any_time: bool = False
    skip_episodes_in_library: bool = False


class ScheduleDefaults(BaseModel):
    """Backend-wide defaults applied to new schedules"""
    pre_record_interval: timedelta = timedelta(0)
    post_record_interval: timedelta = timedelta(0)


class BackendStatus(BaseModel):
    """Result of probing the Recording Service"""
    version: str


class MediaSourceInfo(BaseModel):
    """Stream descriptor handed to the host player"""
    id: str
    path: str
    protocol: str = "Http"
    container: str = "ts"
    is_infinite_stream: bool = False
    requires_opening: bool = False
    requires_closing: bool = False
    supports_direct_play: bool = True
    supports_transcoding: bool = True


class StreamingDetails(BaseModel):
    """Backend stream session: the session identifier and its media source"""
    stream_id: str
    source_info: MediaSourceInfo


class ImageStream(BaseModel):
    content: bytes
    content_type: str = "image/png"


class RecordingStatusChangedEvent(BaseModel):
    recording_id: str
    new_status: RecordingStatus


class ErrorDetail(BaseModel):
    """Standard error detail"""
    code: str = Field(..., description="Error code (e.g., 'NOT_IMPLEMENTED', 'BACKEND_UNAVAILABLE')")
    message: str = Field(..., description="Human-readable error message")
    context: dict | None = Field(None, description="Additional context about the error")


class StandardErrorResponse(BaseModel):
    """Standardized error response for all endpoints"""
    status: str = Field("error", description="Status indicator")
    timestamp: str = Field(..., description="ISO8601 timestamp of error")
    error: ErrorDetail = Field(..., description="Error details")
