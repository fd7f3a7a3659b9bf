"""
Test AlarmSoundController - playback lifecycle, fallback and idempotence

All platform collaborators are fakes from tests.fixtures.
"""

import unittest

from fireguard.alarm_sound_controller import AlarmSoundController, ControllerState
from fireguard.exceptions import ControllerClosedError, PlatformAudioError, PlaybackError
from fireguard.interfaces import AUDIO_CATEGORY_ALARM, ToneCategory
from tests.fixtures import (
    ALARM_TONE,
    NOTIFICATION_TONE,
    FakePlayerFactory,
    FakeToneLookup,
    create_mock_volume_control,
    create_test_controller,
)


class TestPlayAlarmLoop(unittest.TestCase):
    """Test play_alarm_loop() state transitions"""

    def setUp(self):
        self.players = FakePlayerFactory()
        self.controller = create_test_controller(players=self.players)

    def test_initial_state_idle(self):
        """Test: New controller starts IDLE with no handle"""
        self.assertEqual(self.controller.state, ControllerState.IDLE)
        self.assertIsNone(self.controller.handle)

    def test_play_starts_looping_alarm_category(self):
        """Test: Player is loaded, routed to alarm, looped and started in order"""
        handle = self.controller.play_alarm_loop()

        self.assertEqual(self.controller.state, ControllerState.PLAYING)
        self.assertIs(handle, self.controller.handle)
        self.assertTrue(handle.looping)
        self.assertTrue(handle.is_playing)

        player = self.players.players[0]
        self.assertEqual(
            player.calls,
            ["set_data_source", "set_audio_category", "set_looping", "prepare", "start"]
        )
        self.assertEqual(player.category, AUDIO_CATEGORY_ALARM)
        self.assertTrue(player.looping)

    def test_alarm_tone_has_priority(self):
        """Test: Alarm tone wins when both tones exist"""
        handle = self.controller.play_alarm_loop()
        self.assertEqual(handle.source, ALARM_TONE)

    def test_notification_fallback(self):
        """Test: Notification tone is used when no alarm tone exists"""
        tones = FakeToneLookup(alarm=None)
        controller = create_test_controller(players=self.players, tones=tones)

        handle = controller.play_alarm_loop()

        self.assertEqual(handle.source, NOTIFICATION_TONE)
        self.assertEqual(tones.lookups, [ToneCategory.ALARM, ToneCategory.NOTIFICATION])

    def test_no_tone_is_silent_success(self):
        """Test: No tone at all returns None and stays IDLE without creating a player"""
        controller = create_test_controller(
            players=self.players,
            tones=FakeToneLookup(alarm=None, notification=None)
        )

        result = controller.play_alarm_loop()

        self.assertIsNone(result)
        self.assertEqual(controller.state, ControllerState.IDLE)
        self.assertEqual(self.players.players, [])

    def test_no_tone_still_stops_previous_handle(self):
        """Test: Restart stops the old handle even if the new lookup finds nothing"""
        tones = FakeToneLookup()
        controller = create_test_controller(players=self.players, tones=tones)
        controller.play_alarm_loop()

        tones.tones[ToneCategory.ALARM] = None
        tones.tones[ToneCategory.NOTIFICATION] = None
        controller.play_alarm_loop()

        self.assertEqual(controller.state, ControllerState.IDLE)
        self.assertTrue(self.players.players[0].released)

    def test_play_twice_replaces_handle(self):
        """Test: Second play stops+releases the first handle before starting"""
        first = self.controller.play_alarm_loop()
        second = self.controller.play_alarm_loop()

        self.assertIsNot(first, second)
        first_player, second_player = self.players.players
        self.assertEqual(first_player.calls[-2:], ["stop", "release"])
        self.assertTrue(first.released)
        self.assertEqual(self.players.alive, [second_player])
        self.assertIs(self.controller.handle, second)

    def test_at_most_one_handle_over_sequence(self):
        """Test: Any play/stop sequence leaves at most one live player"""
        sequence = ["play", "play", "stop", "play", "stop", "stop", "play", "play"]
        for op in sequence:
            if op == "play":
                self.controller.play_alarm_loop()
            else:
                self.controller.stop_alarm_loop()
            self.assertLessEqual(len(self.players.alive), 1)
            expected = 1 if self.controller.state == ControllerState.PLAYING else 0
            self.assertEqual(len(self.players.alive), expected)

    def test_start_failure_raises_and_releases(self):
        """Test: PlaybackError from start() propagates; the player is released"""
        players = FakePlayerFactory(fail_on="start")
        controller = create_test_controller(players=players)

        with self.assertRaises(PlaybackError) as ctx:
            controller.play_alarm_loop()

        self.assertEqual(ctx.exception.platform_message, "platform says no")
        self.assertEqual(controller.state, ControllerState.IDLE)
        self.assertTrue(players.players[0].released)

    def test_unexpected_platform_exception_wrapped(self):
        """Test: Non-PlaybackError failures during load become PlaybackError"""
        players = FakePlayerFactory(fail_on="prepare", error=OSError("codec missing"))
        controller = create_test_controller(players=players)

        with self.assertRaises(PlaybackError) as ctx:
            controller.play_alarm_loop()

        self.assertIn("codec missing", ctx.exception.platform_message)
        self.assertEqual(players.alive, [])

    def test_restart_cleanup_error_is_swallowed(self):
        """Test: A failing stop of the old handle does not block the restart"""
        players = FakePlayerFactory()
        controller = create_test_controller(players=players)
        controller.play_alarm_loop()
        players.players[0].fail_on = "stop"

        handle = controller.play_alarm_loop()

        self.assertIsNotNone(handle)
        self.assertEqual(controller.state, ControllerState.PLAYING)
        self.assertTrue(players.players[0].released)


class TestStopAlarmLoop(unittest.TestCase):
    """Test stop_alarm_loop() idempotence and best-effort cleanup"""

    def setUp(self):
        self.players = FakePlayerFactory()
        self.controller = create_test_controller(players=self.players)

    def test_stop_when_idle_is_noop(self):
        """Test: Stop with no handle succeeds"""
        self.controller.stop_alarm_loop()
        self.assertEqual(self.controller.state, ControllerState.IDLE)

    def test_stop_twice(self):
        """Test: Second stop is a no-op"""
        self.controller.play_alarm_loop()
        self.controller.stop_alarm_loop()
        self.controller.stop_alarm_loop()

        player = self.players.players[0]
        self.assertEqual(player.calls.count("stop"), 1)
        self.assertEqual(player.calls.count("release"), 1)
        self.assertEqual(self.controller.state, ControllerState.IDLE)

    def test_stop_skips_stop_call_when_not_playing(self):
        """Test: A handle that is no longer playing is only released"""
        self.controller.play_alarm_loop()
        player = self.players.players[0]
        player.playing = False

        self.controller.stop_alarm_loop()

        self.assertNotIn("stop", player.calls)
        self.assertTrue(player.released)

    def test_stop_failure_clears_handle_and_raises(self):
        """Test: Stop failure raises PlaybackError but the handle is gone and released"""
        self.controller.play_alarm_loop()
        player = self.players.players[0]
        player.fail_on = "stop"

        with self.assertRaises(PlaybackError):
            self.controller.stop_alarm_loop()

        self.assertIsNone(self.controller.handle)
        self.assertTrue(player.released)

        # Next stop is a clean no-op
        self.controller.stop_alarm_loop()

    def test_release_failure_clears_handle(self):
        """Test: Release failure still clears the reference"""
        self.controller.play_alarm_loop()
        self.players.players[0].fail_on = "release"

        with self.assertRaises(PlaybackError):
            self.controller.stop_alarm_loop()

        self.assertEqual(self.controller.state, ControllerState.IDLE)


class TestEnsureAlarmVolume(unittest.TestCase):
    """Test ensure_alarm_volume() delegation"""

    def test_delegates_to_volume_control(self):
        volume = create_mock_volume_control(nudged=True)
        controller = create_test_controller(volume=volume)

        self.assertTrue(controller.ensure_alarm_volume())
        volume.ensure_alarm_volume.assert_called_once_with()

    def test_skipped_nudge_returns_false(self):
        controller = create_test_controller(volume=create_mock_volume_control(nudged=False))
        self.assertFalse(controller.ensure_alarm_volume())

    def test_failure_propagates(self):
        volume = create_mock_volume_control()
        volume.ensure_alarm_volume.side_effect = PlatformAudioError("set-sink-volume failed", "No such entity")
        controller = create_test_controller(volume=volume)

        with self.assertRaises(PlatformAudioError):
            controller.ensure_alarm_volume()

    def test_volume_failure_does_not_block_playback(self):
        """Test: Volume and playback are independent operations"""
        volume = create_mock_volume_control()
        volume.ensure_alarm_volume.side_effect = PlatformAudioError("failed", "denied")
        controller = create_test_controller(volume=volume)

        with self.assertRaises(PlatformAudioError):
            controller.ensure_alarm_volume()
        self.assertIsNotNone(controller.play_alarm_loop())


class TestTeardown(unittest.TestCase):
    """Test teardown() terminal state"""

    def setUp(self):
        self.players = FakePlayerFactory()
        self.controller = create_test_controller(players=self.players)

    def test_teardown_while_playing_releases(self):
        self.controller.play_alarm_loop()
        self.controller.teardown()

        self.assertEqual(self.controller.state, ControllerState.IDLE)
        self.assertTrue(self.controller.closed)
        self.assertTrue(self.players.players[0].released)

    def test_teardown_swallows_cleanup_errors(self):
        self.controller.play_alarm_loop()
        self.players.players[0].fail_on = "stop"

        self.controller.teardown()

        self.assertIsNone(self.controller.handle)
        self.assertTrue(self.controller.closed)

    def test_use_after_teardown(self):
        self.controller.teardown()

        with self.assertRaises(ControllerClosedError):
            self.controller.play_alarm_loop()
        with self.assertRaises(ControllerClosedError):
            self.controller.ensure_alarm_volume()
        # Stop and teardown stay harmless
        self.controller.stop_alarm_loop()
        self.controller.teardown()

    def test_context_manager_tears_down(self):
        with AlarmSoundController(
            volume_control=create_mock_volume_control(),
            tone_lookup=FakeToneLookup(),
            player_factory=self.players,
        ) as controller:
            controller.play_alarm_loop()

        self.assertTrue(controller.closed)
        self.assertEqual(self.players.alive, [])


if __name__ == '__main__':
    unittest.main()
