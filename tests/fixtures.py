"""Shared test fixtures for Fireguard tests

Provides fake platform collaborators so controller and channel tests never
touch pactl, the sound theme or real audio hardware.

Usage:
    from tests.fixtures import FakePlayerFactory, FakeToneLookup, create_test_controller

    def setUp(self):
        self.players = FakePlayerFactory()
        self.controller = create_test_controller(players=self.players)
"""

from typing import List, Optional
from unittest.mock import Mock

from fireguard.alarm_sound_controller import AlarmSoundController
from fireguard.exceptions import PlaybackError
from fireguard.interfaces import ToneCategory, ToneSource

ALARM_TONE = ToneSource(ToneCategory.ALARM, "/sounds/alarm-clock-elapsed.oga")
NOTIFICATION_TONE = ToneSource(ToneCategory.NOTIFICATION, "/sounds/message.oga")


class FakePlayer:
    """Records every lifecycle call; fail_on names a method that should raise"""

    def __init__(self, fail_on: Optional[str] = None, error: Exception = None):
        self.fail_on = fail_on
        self.error = error or PlaybackError("boom", "platform says no")
        self.calls: List[str] = []
        self.tone = None
        self.category = None
        self.looping = False
        self.playing = False
        self.released = False

    def _call(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise self.error

    def set_data_source(self, tone):
        self._call("set_data_source")
        self.tone = tone

    def set_audio_category(self, category):
        self._call("set_audio_category")
        self.category = category

    def set_looping(self, looping):
        self._call("set_looping")
        self.looping = looping

    def prepare(self):
        self._call("prepare")

    def start(self):
        self._call("start")
        self.playing = True

    def stop(self):
        self._call("stop")
        self.playing = False

    def release(self):
        self._call("release")
        self.playing = False
        self.released = True

    def is_playing(self):
        return self.playing


class FakePlayerFactory:
    """Callable player factory keeping every player it created"""

    def __init__(self, fail_on: Optional[str] = None, error: Exception = None):
        self.fail_on = fail_on
        self.error = error
        self.players: List[FakePlayer] = []

    def __call__(self):
        player = FakePlayer(fail_on=self.fail_on, error=self.error)
        self.players.append(player)
        return player

    @property
    def alive(self) -> List[FakePlayer]:
        return [p for p in self.players if not p.released]


class FakeToneLookup:
    """Tone lookup returning configured tones per category"""

    def __init__(self, alarm: Optional[ToneSource] = ALARM_TONE,
                 notification: Optional[ToneSource] = NOTIFICATION_TONE):
        self.tones = {
            ToneCategory.ALARM: alarm,
            ToneCategory.NOTIFICATION: notification,
        }
        self.lookups: List[ToneCategory] = []

    def default_tone(self, category):
        self.lookups.append(category)
        return self.tones.get(category)


def create_mock_volume_control(nudged: bool = True):
    """Mock VolumeControl whose ensure_alarm_volume returns nudged"""
    volume = Mock()
    volume.ensure_alarm_volume.return_value = nudged
    return volume


def create_test_controller(players=None, tones=None, volume=None) -> AlarmSoundController:
    """Controller wired with fakes (defaults: both tones available, nudge succeeds)"""
    return AlarmSoundController(
        volume_control=volume or create_mock_volume_control(),
        tone_lookup=tones or FakeToneLookup(),
        player_factory=players or FakePlayerFactory(),
    )
