"""
Alarm Player - looping tone playback engine

Lifecycle (mirrors a media player):
    idle --set_data_source--> initialized --prepare--> prepared --start--> started
    started --stop--> stopped --prepare--> prepared
    any --release--> released

prepare() decodes the whole tone with soundfile into int16 frames. start()
opens a callback-mode PyAudio output stream; the callback wraps to frame 0
while looping is set. Alarm tones are a few seconds long, so decoding them
up front keeps the callback allocation-light.

Every PyAudio/soundfile failure surfaces as PlaybackError.
"""

import os
from typing import Optional

import numpy as np
import pyaudio
import soundfile as sf

import config
from fireguard.audio_devices import find_output_device_index
from fireguard.exceptions import PlaybackError
from fireguard.interfaces import AUDIO_CATEGORY_ALARM, ToneSource
from fireguard.logging_utils import setup_logger, log_audio

logger = setup_logger(__name__)

STATE_IDLE = "idle"
STATE_INITIALIZED = "initialized"
STATE_PREPARED = "prepared"
STATE_STARTED = "started"
STATE_STOPPED = "stopped"
STATE_RELEASED = "released"

MEDIA_ROLE_ENV = "PULSE_PROP_media.role"


def _restore_env(key: str, value: Optional[str]):
    if value is None:
        os.environ.pop(key, None)
    else:
        os.environ[key] = value


class AlarmPlayer:
    """Single-tone PyAudio player with looping and alarm routing"""

    def __init__(self, frames_per_buffer: int = None):
        self.frames_per_buffer = frames_per_buffer or config.PLAYBACK_FRAMES_PER_BUFFER
        self.state = STATE_IDLE
        self.tone: Optional[ToneSource] = None
        self.category: Optional[str] = None
        self.looping = False

        self._frames: Optional[np.ndarray] = None
        self._sample_rate = 0
        self._pos = 0
        self._pa = None
        self._stream = None

    def _require(self, *states):
        if self.state not in states:
            raise PlaybackError(f"Invalid player state '{self.state}' (expected {', '.join(states)})")

    def set_data_source(self, tone: ToneSource):
        self._require(STATE_IDLE)
        if not os.path.isfile(tone.uri):
            raise PlaybackError("Tone source unavailable", f"No such file: {tone.uri}")
        self.tone = tone
        self.state = STATE_INITIALIZED

    def set_audio_category(self, category: str):
        self._require(STATE_IDLE, STATE_INITIALIZED)
        self.category = category

    def set_looping(self, looping: bool):
        if self.state == STATE_RELEASED:
            raise PlaybackError("Player already released")
        self.looping = bool(looping)

    def prepare(self):
        """Decode the tone into memory"""
        self._require(STATE_INITIALIZED, STATE_STOPPED)
        try:
            frames, sample_rate = sf.read(self.tone.uri, dtype='int16', always_2d=True)
        except (RuntimeError, OSError) as e:
            raise PlaybackError(f"Failed to decode {self.tone.uri}", str(e)) from e

        if frames.shape[0] == 0:
            raise PlaybackError(f"Failed to decode {self.tone.uri}", "Tone contains no audio frames")

        self._frames = np.ascontiguousarray(frames)
        self._sample_rate = int(sample_rate)
        self._pos = 0
        self.state = STATE_PREPARED
        logger.debug(
            f"Prepared {self.tone.uri}: {frames.shape[0]} frames, "
            f"{frames.shape[1]} ch @ {sample_rate} Hz"
        )

    def start(self):
        """Open the output stream and begin playback"""
        if self.state == STATE_STARTED:
            return
        self._require(STATE_PREPARED)

        alarm = self.category == AUDIO_CATEGORY_ALARM
        previous_role = os.environ.get(MEDIA_ROLE_ENV)
        try:
            if alarm:
                # libpulse reads stream properties from the environment at connect time
                os.environ[MEDIA_ROLE_ENV] = config.ALARM_MEDIA_ROLE
            try:
                if self._pa is None:
                    self._pa = pyaudio.PyAudio()

                device_index = None
                if alarm:
                    device_index = find_output_device_index(config.ALARM_OUTPUT_DEVICE, pa=self._pa)

                self._stream = self._pa.open(
                    format=pyaudio.paInt16,
                    channels=int(self._frames.shape[1]),
                    rate=self._sample_rate,
                    output=True,
                    output_device_index=device_index,
                    frames_per_buffer=self.frames_per_buffer,
                    stream_callback=self._callback
                )
            finally:
                if alarm:
                    _restore_env(MEDIA_ROLE_ENV, previous_role)
            self._stream.start_stream()
        except (OSError, ValueError, RuntimeError) as e:
            self._close_stream_quietly()
            raise PlaybackError("Failed to start playback", str(e)) from e

        self.state = STATE_STARTED
        log_audio(logger, f"Playback started: {self.tone.uri} (looping={self.looping}, category={self.category})")

    def _callback(self, in_data, frame_count, time_info, status):
        frames = self._frames
        total = frames.shape[0]
        chunks = []
        needed = frame_count

        while needed > 0:
            end = min(self._pos + needed, total)
            chunks.append(frames[self._pos:end])
            needed -= end - self._pos
            self._pos = end
            if self._pos >= total:
                if self.looping:
                    self._pos = 0
                else:
                    break

        block = np.concatenate(chunks) if len(chunks) > 1 else chunks[0]
        if block.shape[0] < frame_count:
            return (block.tobytes(), pyaudio.paComplete)
        return (block.tobytes(), pyaudio.paContinue)

    def is_playing(self) -> bool:
        if self.state != STATE_STARTED or self._stream is None:
            return False
        try:
            return bool(self._stream.is_active())
        except OSError as e:
            raise PlaybackError("Failed to query playback state", str(e)) from e

    def stop(self):
        """Stop playback; prepare() is required before starting again"""
        if self.state in (STATE_STOPPED, STATE_IDLE, STATE_INITIALIZED):
            return
        self._require(STATE_PREPARED, STATE_STARTED)
        try:
            if self._stream is not None:
                self._stream.stop_stream()
                self._stream.close()
        except OSError as e:
            raise PlaybackError("Failed to stop playback", str(e)) from e
        finally:
            self._stream = None
            self.state = STATE_STOPPED

    def release(self):
        """Free the stream and the PortAudio instance. Safe to call twice."""
        if self.state == STATE_RELEASED:
            return
        error = None
        try:
            if self._stream is not None:
                self._stream.close()
        except OSError as e:
            error = e
        finally:
            self._stream = None
            if self._pa is not None:
                self._pa.terminate()
                self._pa = None
            self._frames = None
            self.state = STATE_RELEASED

        if error is not None:
            raise PlaybackError("Failed to release player", str(error)) from error

    def _close_stream_quietly(self):
        if self._stream is not None:
            try:
                self._stream.close()
            except OSError as e:
                logger.debug(f"Ignoring stream close error after failed start: {e}")
            self._stream = None
