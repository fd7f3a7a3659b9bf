"""
Alarm Sound Controller - looping alarm tone lifecycle

Owns at most one PlaybackHandle and exposes:
- ensure_alarm_volume(): nudge the alarm sink (capability gated)
- play_alarm_loop():     (re)start the default alarm tone, looping
- stop_alarm_loop():     stop and release the tone, idempotent
- teardown():            final stop; the controller is unusable afterwards

State machine:
    IDLE    --play (tone found)--> PLAYING
    IDLE    --play (no tone)-----> IDLE
    PLAYING --play---------------> PLAYING  (old handle stopped first)
    PLAYING --stop---------------> IDLE
    any     --teardown-----------> IDLE (terminal)

Tone fallback: default alarm tone, then default notification tone, then
nothing. A missing tone is not an error.

Example Usage:
    controller = create_alarm_sound_controller()
    controller.ensure_alarm_volume()
    controller.play_alarm_loop()
    ...
    controller.stop_alarm_loop()
"""

import threading
from enum import Enum
from typing import Optional

from fireguard.base_module import BaseModule
from fireguard.exceptions import ControllerClosedError, PlaybackError
from fireguard.interfaces import (
    AUDIO_CATEGORY_ALARM,
    PlaybackHandle,
    PlayerFactory,
    ToneCategory,
    ToneLookup,
    ToneSource,
    VolumeControl,
)
from fireguard.logging_utils import log_alarm, log_debug, log_error, log_success, log_warning

TONE_PRIORITY = (ToneCategory.ALARM, ToneCategory.NOTIFICATION)


class ControllerState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"


class AlarmSoundController(BaseModule):
    """Single-handle alarm playback with fallback and idempotent start/stop"""

    def __init__(
        self,
        volume_control: VolumeControl,
        tone_lookup: ToneLookup,
        player_factory: PlayerFactory,
        debug: bool = False,
    ):
        """
        Initialize the controller.

        Args:
            volume_control: Alarm volume nudge implementation
            tone_lookup: Default tone resolver
            player_factory: Zero-argument callable creating a fresh playback engine
            debug: Enable debug logging
        """
        super().__init__(__name__, debug=debug)
        self.volume_control = volume_control
        self.tone_lookup = tone_lookup
        self.player_factory = player_factory

        self._handle: Optional[PlaybackHandle] = None
        self._lock = threading.RLock()
        self._closed = False

    @property
    def state(self) -> ControllerState:
        return ControllerState.PLAYING if self._handle is not None else ControllerState.IDLE

    @property
    def handle(self) -> Optional[PlaybackHandle]:
        return self._handle

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_alarm_volume(self) -> bool:
        """
        Nudge the alarm output level to its current value.

        Independent of playback: a failure here never affects play_alarm_loop().

        Returns:
            True if the nudge ran, False if the platform does not need it

        Raises:
            PlatformAudioError: If the platform volume call failed
        """
        with self._lock:
            self._check_open()
            return self.volume_control.ensure_alarm_volume()

    def play_alarm_loop(self) -> Optional[PlaybackHandle]:
        """
        Start the default alarm tone on a loop, replacing any current one.

        Returns:
            The new PlaybackHandle, or None when no tone source exists

        Raises:
            PlaybackError: If the resolved tone failed to load or start
        """
        with self._lock:
            self._check_open()
            self._replace_handle(None)

            tone = self.resolve_tone()
            if tone is None:
                log_warning(self.logger, "No alarm or notification tone available - nothing to play")
                return None

            handle = self._start_handle(tone)
            self._replace_handle(handle)
            log_alarm(self.logger, f"Alarm loop playing: {tone.uri}")
            return handle

    def stop_alarm_loop(self):
        """
        Stop and release the current tone. No-op when nothing is playing.

        The handle reference is cleared even when stopping fails.

        Raises:
            PlaybackError: If stop/release failed (after the handle was cleared)
        """
        with self._lock:
            self._replace_handle(None, strict=True)

    def teardown(self):
        """Stop everything and mark the controller unusable. Never raises."""
        with self._lock:
            if self._closed:
                return
            self._replace_handle(None)
            self._closed = True
            log_debug(self.logger, "AlarmSoundController torn down")

    def resolve_tone(self) -> Optional[ToneSource]:
        """First available default tone in priority order (alarm, then notification)"""
        for category in TONE_PRIORITY:
            tone = self.tone_lookup.default_tone(category)
            if tone is not None:
                if category != ToneCategory.ALARM:
                    log_warning(self.logger, f"No default alarm tone, falling back to {category.value} tone")
                return tone
        return None

    def _check_open(self):
        if self._closed:
            raise ControllerClosedError("Alarm controller already torn down")

    def _replace_handle(self, new_handle: Optional[PlaybackHandle], strict: bool = False):
        """
        The only place self._handle changes.

        The old handle is stopped and released before new_handle is stored.
        With strict=True a cleanup failure is re-raised after the reference is
        cleared; otherwise it is logged and dropped.
        """
        old = self._handle
        self._handle = None
        if old is not None:
            try:
                self._stop_handle(old)
            except PlaybackError as e:
                if strict:
                    raise
                log_warning(self.logger, f"Ignoring alarm cleanup error: {e.platform_message}")
        self._handle = new_handle

    def _start_handle(self, tone: ToneSource) -> PlaybackHandle:
        player = self.player_factory()
        try:
            player.set_data_source(tone)
            player.set_audio_category(AUDIO_CATEGORY_ALARM)
            player.set_looping(True)
            player.prepare()
            player.start()
        except Exception as e:
            self._release_quietly(player)
            if isinstance(e, PlaybackError):
                raise
            raise PlaybackError(f"Failed to play {tone.uri}", str(e)) from e
        return PlaybackHandle(source=tone, player=player, looping=True)

    def _stop_handle(self, handle: PlaybackHandle):
        error = None
        try:
            if handle.is_playing:
                handle.player.stop()
        except Exception as e:
            error = e
        try:
            handle.player.release()
        except Exception as e:
            error = error or e
        handle.released = True

        if error is not None:
            message = getattr(error, "platform_message", None) or str(error)
            log_error(self.logger, f"Failed to stop alarm cleanly: {message}")
            raise PlaybackError("Failed to stop alarm", message) from error
        log_success(self.logger, f"Alarm loop stopped: {handle.source.uri}")

    def _release_quietly(self, player):
        try:
            player.release()
        except Exception as e:
            log_debug(self.logger, f"Release after failed start also failed: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
        return False  # Don't suppress exceptions

    def __del__(self):
        """Destructor - last resort cleanup"""
        if getattr(self, "_handle", None) is not None and not getattr(self, "_closed", True):
            self.teardown()
