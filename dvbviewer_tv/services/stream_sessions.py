"""
Stream Session Tracking

Keeps the descriptor of the most recently opened stream. Sessions are managed
by the Recording Service itself; the tracker only records the latest one and
never releases backend resources when a session is superseded.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock

from dvbviewer_tv.schemas import MediaSourceInfo, StreamingDetails, StreamOrigin


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StreamSession:
    """A stream opened on behalf of the host."""
    details: StreamingDetails
    origin_kind: StreamOrigin
    origin_id: str
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def media_source(self) -> MediaSourceInfo:
        return self.details.source_info


class StreamSessionTracker:
    """Holds the current stream session; the last writer wins."""

    def __init__(self):
        self._current: StreamSession | None = None
        self._lock = Lock()

    @property
    def current(self) -> StreamSession | None:
        return self._current

    def replace(self, session: StreamSession) -> StreamSession | None:
        """
        Make session the current one.

        Returns:
            The superseded session, if any
        """
        with self._lock:
            previous = self._current
            self._current = session

        if previous is not None:
            logger.info(
                "Stream %s (%s %s) superseded by %s (%s %s)",
                previous.details.stream_id,
                previous.origin_kind.value,
                previous.origin_id,
                session.details.stream_id,
                session.origin_kind.value,
                session.origin_id,
            )
        return previous
