"""
Protocol Interfaces for Fireguard modules

Defines contracts for the platform collaborators the alarm controller uses,
enabling:
- Swapping the Linux implementations for fakes in tests
- Clear documentation of module responsibilities
- Dependency injection through the factory

Following KISS principle: Simple interfaces, no complex abstractions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol


class ToneCategory(str, Enum):
    """Default tone categories known to the platform"""
    ALARM = "alarm"
    NOTIFICATION = "notification"


AUDIO_CATEGORY_ALARM = "alarm"


@dataclass(frozen=True)
class ToneSource:
    """A platform-resolved default tone"""
    category: ToneCategory
    uri: str  # Filesystem path of the sound file

    def __repr__(self) -> str:
        return f"ToneSource({self.category.value}, {self.uri!r})"


class VolumeControl(Protocol):
    """Alarm-category volume interface"""

    def ensure_alarm_volume(self) -> bool:
        """
        Nudge the alarm output level to its current value.

        Returns:
            True if the nudge ran, False if skipped by capability

        Raises:
            PlatformAudioError: If the platform call failed
        """
        ...


class ToneLookup(Protocol):
    """Default-tone-by-category interface"""

    def default_tone(self, category: ToneCategory) -> Optional[ToneSource]:
        """Resolve the default tone for a category, or None when unavailable"""
        ...


class AlarmPlaybackEngine(Protocol):
    """
    Playback engine interface.

    Every method raises PlaybackError on platform failure.
    """

    def set_data_source(self, tone: ToneSource) -> None:
        ...

    def set_audio_category(self, category: str) -> None:
        ...

    def set_looping(self, looping: bool) -> None:
        ...

    def prepare(self) -> None:
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def release(self) -> None:
        ...

    def is_playing(self) -> bool:
        ...


PlayerFactory = Callable[[], AlarmPlaybackEngine]


@dataclass
class PlaybackHandle:
    """
    The one live alarm sound owned by the controller.

    Looping is fixed for the handle's lifetime; alarms loop until stopped.
    """
    source: ToneSource
    player: AlarmPlaybackEngine
    looping: bool = True
    released: bool = False

    @property
    def is_playing(self) -> bool:
        if self.released:
            return False
        return self.player.is_playing()

    def __repr__(self) -> str:
        return f"PlaybackHandle(source={self.source!r}, released={self.released})"
