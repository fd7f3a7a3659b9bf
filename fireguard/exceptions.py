"""
Alarm audio error taxonomy.

Platform-layer failures are raised as these exceptions and only converted into
result objects at the method channel boundary.
"""

from typing import Optional


class AlarmAudioError(Exception):
    """Base class for alarm audio failures."""

    def __init__(self, message: str, platform_message: Optional[str] = None):
        super().__init__(message)
        self.platform_message = platform_message if platform_message is not None else message


class PlatformAudioError(AlarmAudioError):
    """The alarm-category volume adjust call failed."""


class PlaybackError(AlarmAudioError):
    """Loading, starting, stopping or releasing a tone failed."""


class ControllerClosedError(AlarmAudioError):
    """The controller was used after teardown."""
