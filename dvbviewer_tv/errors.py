"""
Recording Service error types

Backend faults raised by the proxy and propagated unchanged through every
adapter operation except the status query.
"""


class RecordingServiceError(Exception):
    """Base class for faults reported by or about the Recording Service"""
    pass


class RecordingServiceUnavailableError(RecordingServiceError):
    """Raised when the Recording Service cannot be reached or times out"""
    pass


class RecordingServiceResponseError(RecordingServiceError):
    """Raised when the Recording Service returns a malformed or unexpected response"""
    pass


class ResourceNotFoundError(RecordingServiceError, LookupError):
    """Raised when a requested backend resource does not exist"""
    pass


class ChannelLogoNotFoundError(ResourceNotFoundError):
    """Raised when a channel has no logo on the Recording Service"""

    def __init__(self, channel_id: str):
        super().__init__(f"No logo available for channel '{channel_id}'")
        self.channel_id = channel_id
