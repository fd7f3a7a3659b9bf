"""
Default tone lookup by category.

Candidates, in order:
1. Explicit override path from config (ALARM_SOUND_PATH / NOTIFICATION_SOUND_PATH)
2. freedesktop sound theme files under config.SOUND_THEME_DIRS

Missing tones are not an error: default_tone() returns None.
"""

import os
from typing import Iterable, List, Optional

import config
from fireguard.interfaces import ToneCategory, ToneSource
from fireguard.logging_utils import setup_logger

logger = setup_logger(__name__)


class ToneResolver:
    """Resolve platform default tones to sound files"""

    def __init__(
        self,
        theme_dirs: Optional[Iterable[str]] = None,
        alarm_path: Optional[str] = None,
        notification_path: Optional[str] = None,
    ):
        self.theme_dirs = list(theme_dirs) if theme_dirs is not None else list(config.SOUND_THEME_DIRS)
        self.overrides = {
            ToneCategory.ALARM: alarm_path if alarm_path is not None else config.ALARM_SOUND_PATH,
            ToneCategory.NOTIFICATION: (
                notification_path if notification_path is not None else config.NOTIFICATION_SOUND_PATH
            ),
        }
        self.tone_names = {
            ToneCategory.ALARM: list(config.ALARM_TONE_NAMES),
            ToneCategory.NOTIFICATION: list(config.NOTIFICATION_TONE_NAMES),
        }

    def candidates(self, category: ToneCategory) -> List[str]:
        """All candidate paths for a category, in preference order"""
        paths = []
        override = self.overrides.get(category)
        if override:
            paths.append(os.path.expanduser(override))
        for directory in self.theme_dirs:
            for name in self.tone_names.get(category, []):
                paths.append(os.path.join(os.path.expanduser(directory), name))
        return paths

    def default_tone(self, category: ToneCategory) -> Optional[ToneSource]:
        """
        Resolve the default tone for a category.

        Args:
            category: ToneCategory.ALARM or ToneCategory.NOTIFICATION

        Returns:
            ToneSource for the first existing candidate, or None
        """
        for path in self.candidates(category):
            if os.path.isfile(path):
                logger.debug(f"Default {category.value} tone: {path}")
                return ToneSource(category=category, uri=path)
        logger.debug(f"No default {category.value} tone found")
        return None
