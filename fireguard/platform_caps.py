"""
Platform capability detection.

The alarm volume nudge only behaves on sound servers at or above
config.MIN_PULSE_VERSION. The check runs once at startup and the result is
carried as a flag instead of re-probing the server on every call.
"""

import re
import subprocess
from dataclasses import dataclass
from typing import Optional, Tuple

import config
from fireguard.logging_utils import setup_logger

logger = setup_logger(__name__)

_VERSION_RE = re.compile(r"(\d+(?:\.\d+)*)")


@dataclass(frozen=True)
class PlatformCapabilities:
    """Capabilities resolved once at startup"""
    volume_nudge_supported: bool
    server_version: Optional[Tuple[int, ...]] = None


def parse_version(text: str) -> Optional[Tuple[int, ...]]:
    """
    Parse the first dotted version number in text.

    Example:
        >>> parse_version("Server Version: 15.0.0")
        (15, 0, 0)
    """
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def version_at_least(version: Tuple[int, ...], minimum: Tuple[int, ...]) -> bool:
    # Pad so that (15,) compares equal to (15, 0, 0)
    width = max(len(version), len(minimum))
    padded = tuple(version) + (0,) * (width - len(version))
    padded_min = tuple(minimum) + (0,) * (width - len(minimum))
    return padded >= padded_min


def get_server_version() -> Optional[Tuple[int, ...]]:
    """Read the sound server version from `pactl info`"""
    try:
        result = subprocess.run(
            ['pactl', 'info'],
            capture_output=True,
            text=True,
            timeout=getattr(config, "PACTL_TIMEOUT", 1.0)
        )
    except Exception as e:
        logger.debug(f"pactl info failed: {e}")
        return None

    if result.returncode != 0:
        return None

    for line in result.stdout.split('\n'):
        if line.strip().lower().startswith('server version:'):
            return parse_version(line.split(':', 1)[1])
    return None


def detect_capabilities() -> PlatformCapabilities:
    """
    Resolve platform capabilities.

    config.FORCE_VOLUME_NUDGE ('true'/'false') overrides the version check.
    """
    forced = str(getattr(config, "FORCE_VOLUME_NUDGE", "") or "").lower()
    if forced in ("true", "false"):
        supported = forced == "true"
        logger.info(f"Volume nudge forced by config: {supported}")
        return PlatformCapabilities(volume_nudge_supported=supported)

    version = get_server_version()
    minimum = parse_version(str(config.MIN_PULSE_VERSION)) or (0,)
    if version is None:
        logger.info("Sound server version unknown - volume nudge disabled")
        return PlatformCapabilities(volume_nudge_supported=False)

    supported = version_at_least(version, minimum)
    version_str = ".".join(str(v) for v in version)
    logger.info(f"Sound server {version_str} - volume nudge {'enabled' if supported else 'disabled'}")
    return PlatformCapabilities(volume_nudge_supported=supported, server_version=version)
