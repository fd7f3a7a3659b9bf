"""
Factory Module - Dependency Injection for Fireguard

Provides factory functions to create properly configured instances:
- Production setup (pactl, freedesktop tones, PyAudio playback)
- Custom configurations (explicit collaborators for tests and embedding)

Following KISS principle: Simple factory functions, no complex frameworks.
"""

from typing import Optional

import config
from fireguard.alarm_sound_controller import AlarmSoundController
from fireguard.audio_player import AlarmPlayer
from fireguard.interfaces import PlayerFactory, ToneLookup, VolumeControl
from fireguard.method_channel import AlarmAudioChannel
from fireguard.platform_caps import PlatformCapabilities, detect_capabilities
from fireguard.tone_resolver import ToneResolver
from fireguard.volume_manager import VolumeManager


def create_volume_manager(
    capabilities: Optional[PlatformCapabilities] = None,
    sink: str = None
) -> VolumeManager:
    """
    Create VolumeManager with config defaults.

    Args:
        capabilities: Startup capabilities (None = detect now)
        sink: pactl sink name (None for config default)

    Returns:
        Configured VolumeManager instance
    """
    if capabilities is None:
        capabilities = detect_capabilities()
    return VolumeManager(capabilities=capabilities, sink=sink or config.ALARM_SINK)


def create_tone_resolver() -> ToneResolver:
    """Create ToneResolver from config (override paths + sound theme dirs)"""
    return ToneResolver()


def create_player_factory(frames_per_buffer: int = None) -> PlayerFactory:
    """Return a callable creating a fresh AlarmPlayer per playback"""
    frames_per_buffer = frames_per_buffer or config.PLAYBACK_FRAMES_PER_BUFFER

    def factory():
        return AlarmPlayer(frames_per_buffer=frames_per_buffer)

    return factory


def create_alarm_sound_controller(
    volume_control: Optional[VolumeControl] = None,
    tone_lookup: Optional[ToneLookup] = None,
    player_factory: Optional[PlayerFactory] = None,
    debug: bool = False
) -> AlarmSoundController:
    """
    Create AlarmSoundController, filling missing collaborators with production ones.

    Args:
        volume_control: Alarm volume nudge (None = VolumeManager)
        tone_lookup: Default tone lookup (None = ToneResolver)
        player_factory: Playback engine factory (None = AlarmPlayer)
        debug: Enable debug logging

    Returns:
        Configured AlarmSoundController instance
    """
    return AlarmSoundController(
        volume_control=volume_control or create_volume_manager(),
        tone_lookup=tone_lookup or create_tone_resolver(),
        player_factory=player_factory or create_player_factory(),
        debug=debug
    )


def create_alarm_channel(
    controller: Optional[AlarmSoundController] = None,
    name: str = None,
    debug: bool = False
) -> AlarmAudioChannel:
    """Create the method channel bound to a controller (None = production controller)"""
    controller = controller or create_alarm_sound_controller(debug=debug)
    return AlarmAudioChannel(controller, name=name or config.ALARM_CHANNEL, debug=debug)
