"""
Volume Manager - alarm sink volume nudge

Handles:
- Reading the alarm sink volume via PulseAudio/PipeWire (pactl)
- Writing the same level back, which forces the sound server to route and
  unmute the alarm sink without changing how loud it is

The nudge is gated by a capability flag resolved once at startup
(see fireguard.platform_caps). Below the minimum server version the nudge is
skipped silently.
"""
import subprocess
from typing import Optional

import config
from fireguard.exceptions import PlatformAudioError
from fireguard.logging_utils import setup_logger
from fireguard.platform_caps import PlatformCapabilities

logger = setup_logger(__name__)


class VolumeManager:
    """
    Alarm-category volume control using a PulseAudio/PipeWire sink.

    Never computes a new level; it only re-applies the current one.
    """

    def __init__(self, capabilities: PlatformCapabilities, sink: str = None):
        """
        Initialize volume manager.

        Args:
            capabilities: Startup capabilities (volume_nudge_supported gate)
            sink: pactl sink name (default: config.ALARM_SINK)
        """
        self.capabilities = capabilities
        self.sink = sink or config.ALARM_SINK
        self.timeout = getattr(config, "PACTL_TIMEOUT", 1.0)

        logger.info(
            f"VolumeManager initialized - sink: {self.sink}, "
            f"nudge: {self.capabilities.volume_nudge_supported}"
        )

    def ensure_alarm_volume(self) -> bool:
        """
        Nudge the alarm sink to its current volume.

        Returns:
            True if the nudge ran, False if skipped by capability

        Raises:
            PlatformAudioError: If pactl failed or its output was unreadable
        """
        if not self.capabilities.volume_nudge_supported:
            logger.debug("Volume nudge unsupported on this platform - skipped")
            return False

        current = self.get_alarm_volume()
        self._set_pulse_volume(current)
        logger.info(f"🔊 Alarm sink {self.sink} nudged at {current}%")
        return True

    def get_alarm_volume(self) -> int:
        """
        Get current alarm sink volume (0-100+).

        Raises:
            PlatformAudioError: If the volume could not be read
        """
        result = self._run_pactl(['pactl', 'get-sink-volume', self.sink])
        volume = self._parse_volume(result.stdout)
        if volume is None:
            raise PlatformAudioError(
                "Failed to read alarm volume",
                f"Unrecognized pactl output: {result.stdout.strip()!r}"
            )
        return volume

    @staticmethod
    def _parse_volume(output: str) -> Optional[int]:
        # Parse output like: "Volume: front-left: 32768 /  50% / -18.06 dB,   front-right: 32768 /  50% / -18.06 dB"
        for line in (output or '').split('\n'):
            if 'Volume:' in line and '%' in line:
                # Extract first percentage value
                parts = line.split('/')
                for part in parts:
                    if '%' in part:
                        pct_str = part.strip().replace('%', '').strip()
                        try:
                            return int(pct_str)
                        except ValueError:
                            continue
        return None

    def _set_pulse_volume(self, volume: int):
        """Set PulseAudio/PipeWire sink volume percentage"""
        self._run_pactl(['pactl', 'set-sink-volume', self.sink, f'{volume}%'])

    def _run_pactl(self, cmd) -> subprocess.CompletedProcess:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            # ValueError covers UnicodeDecodeError on non-UTF-8 pactl output
            raise PlatformAudioError(f"{cmd[1]} failed", str(e)) from e

        if result.returncode != 0:
            message = (result.stderr or '').strip() or f"pactl exited with status {result.returncode}"
            raise PlatformAudioError(f"{cmd[1]} failed", message)
        return result
