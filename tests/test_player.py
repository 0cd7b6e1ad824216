"""
Tests for the motion player

Pacing is checked on a virtual clock; commands land on the simulated arm.
"""

import tempfile
import threading
import unittest
from pathlib import Path

from mycobot_pro.config import COMMAND_IDS
from mycobot_pro.control import (MotionActivity, MotionPlayer, MovementFrame, Recording,
                                 RecordingMode, RecordingStore)
from mycobot_pro.exceptions import RecordingNotFoundError, StateError, ValidationError
from mycobot_pro.hardware import SimulatedArm

from tests.helpers import FakeClock, make_controller

C = COMMAND_IDS


def make_recording(positions, step_ms=100.0, mode=RecordingMode.ANGLES):
    frames = [MovementFrame(timestamp_ms=i * step_ms, position=tuple(p), mode=mode)
              for i, p in enumerate(positions)]
    return Recording.from_frames(frames, sample_rate_hz=10, mode=mode)


THREE_FRAMES = make_recording([[0] * 6, [10] * 6, [20] * 6])


class StopAfterSleeps(FakeClock):
    """Calls stop_playback() once the given number of sleeps happened"""

    def __init__(self, limit):
        super().__init__()
        self.limit = limit
        self.player = None

    def sleep(self, seconds):
        super().sleep(seconds)
        if len(self.sleeps) == self.limit:
            self.player.stop_playback()


class PlayerTestCase(unittest.TestCase):

    def setUp(self):
        self.arm = SimulatedArm()
        self.robot = make_controller(self.arm)
        self.robot.connect()
        self.clock = FakeClock()
        self.player = MotionPlayer(self.robot, clock=self.clock, power_settle_time=1.0,
                                   loop_pause=0.5, error_pause=0.05)

    def tearDown(self):
        self.robot.disconnect()

    def sent(self, command_id):
        return [f for f in self.arm.command_log if f.command_id == command_id]


class TestPacing(PlayerTestCase):

    def test_double_speed_halves_delays(self):
        result = self.player.play_recording(THREE_FRAMES, speed=2.0)
        self.assertEqual(self.clock.sleeps[0], 1.0)
        self.assertEqual(len(self.clock.sleeps), 3)
        for delay in self.clock.sleeps[1:]:
            self.assertAlmostEqual(delay, 0.05)
        self.assertEqual(result.passes, 1)
        self.assertEqual(result.frames_sent, 3)
        self.assertFalse(result.stopped)

    def test_half_speed_doubles_delays(self):
        self.player.play_recording(THREE_FRAMES, speed=0.5)
        for delay in self.clock.sleeps[1:]:
            self.assertAlmostEqual(delay, 0.2)

    def test_powers_on_then_sends_frames(self):
        self.player.play_recording(THREE_FRAMES, move_speed=60)
        ids = [f.command_id for f in self.arm.command_log]
        self.assertEqual(ids, [C["POWER_ON"]] + [C["SEND_ANGLES"]] * 3)
        self.assertEqual(self.sent(C["SEND_ANGLES"])[0].payload[-1], 60)
        self.assertEqual(self.arm.state.angles, [20.0] * 6)

    def test_coords_use_linear_moves(self):
        recording = make_recording([[150, 0, 200, 0, 0, 0], [160, 0, 200, 0, 0, 0]],
                                   mode=RecordingMode.COORDS)
        self.player.play_recording(recording, move_speed=30)
        moves = self.sent(C["SEND_COORDS"])
        self.assertEqual(len(moves), 2)
        self.assertEqual(moves[0].payload[-2:], bytes([30, 1]))

    def test_duplicate_timestamps_do_not_sleep(self):
        recording = make_recording([[0] * 6, [1] * 6], step_ms=0.0)
        self.player.play_recording(recording)
        self.assertEqual(self.clock.sleeps, [1.0])


class TestErrorsAndStopping(PlayerTestCase):

    def test_bad_frame_is_skipped(self):
        recording = make_recording([[0] * 6, [400] * 6, [20] * 6])
        result = self.player.play_recording(recording)
        self.assertEqual(result.frames_sent, 2)
        self.assertEqual(result.frame_errors, 1)
        self.assertEqual(len(self.sent(C["SEND_ANGLES"])), 2)
        self.assertIn(0.05, self.clock.sleeps)

    def test_loop_until_stopped(self):
        clock = StopAfterSleeps(limit=5)
        player = MotionPlayer(self.robot, clock=clock, power_settle_time=1.0, loop_pause=0.5)
        clock.player = player

        result = player.play_recording(THREE_FRAMES, loop=True)
        self.assertTrue(result.stopped)
        self.assertEqual(result.passes, 2)
        self.assertEqual(result.frames_sent, 4)
        self.assertIn(0.5, clock.sleeps)
        self.assertFalse(player.is_playing)

    def test_stop_when_idle(self):
        self.assertFalse(self.player.stop_playback())

    def test_releases_arm_afterwards(self):
        self.player.play_recording(THREE_FRAMES)
        self.assertEqual(self.robot.activity, MotionActivity.IDLE)
        self.assertFalse(self.player.is_playing)


class TestPlaybackGuards(PlayerTestCase):

    def test_rejected_while_recording(self):
        self.robot.claim_motion(MotionActivity.RECORDING)
        with self.assertRaisesRegex(StateError, "Cannot play while recording"):
            self.player.play_recording(THREE_FRAMES)
        self.assertEqual(self.arm.command_log, [])

    def test_rejected_while_playing(self):
        self.robot.claim_motion(MotionActivity.PLAYING)
        with self.assertRaisesRegex(StateError, "Playback already in progress"):
            self.player.play_recording(THREE_FRAMES)

    def test_invalid_arguments(self):
        for speed in (0, -1, float("nan"), "fast"):
            with self.assertRaises(ValidationError):
                self.player.play_recording(THREE_FRAMES, speed=speed)
        with self.assertRaises(ValidationError):
            self.player.play_recording(THREE_FRAMES, move_speed=150)
        with self.assertRaises(ValidationError):
            self.player.play_recording(42)
        self.assertEqual(self.arm.command_log, [])

    def test_concurrent_second_playback_rejected(self):
        started = threading.Event()
        release = threading.Event()

        class BlockingClock(FakeClock):
            def sleep(self, seconds):
                started.set()
                release.wait(2.0)

        player = MotionPlayer(self.robot, clock=BlockingClock())
        worker = threading.Thread(target=player.play_recording, args=(THREE_FRAMES,))
        worker.start()
        try:
            self.assertTrue(started.wait(2.0))
            self.assertTrue(player.is_playing)
            with self.assertRaises(StateError):
                self.player.play_recording(THREE_FRAMES)
        finally:
            release.set()
            worker.join(2.0)


class TestPlaybackFromFile(PlayerTestCase):

    def test_play_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = RecordingStore(tmp)
            store.save(THREE_FRAMES, "three.json")
            player = MotionPlayer(self.robot, store=store, clock=self.clock)
            result = player.play_recording("three.json")
        self.assertEqual(result.frames_sent, 3)

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RecordingNotFoundError):
                self.player.play_recording(Path(tmp) / "missing.json")
        self.assertEqual(self.robot.activity, MotionActivity.IDLE)


if __name__ == '__main__':
    unittest.main()
