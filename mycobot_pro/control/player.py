"""
Motion player
Replays recorded frames as move commands with their recorded timing
"""

import math
import threading
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from ..config import PLAYBACK_DEFAULTS
from ..exceptions import MyCobotError, ValidationError
from ..hardware.commands import check_speed
from ..utils.clock import Clock
from .controller import MotionActivity, MyCobotController
from .recording import PlaybackSummary, Recording, RecordingMode
from .storage import RecordingStore

logger = logging.getLogger(__name__)

# Interpolation mode used for cartesian frames
LINEAR = 1


class MotionPlayer:
    """Best-effort playback: a failed frame is logged and skipped"""

    def __init__(self, controller: MyCobotController,
                 store: Optional[RecordingStore] = None,
                 clock: Optional[Clock] = None,
                 power_settle_time: float = PLAYBACK_DEFAULTS["power_settle_time"],
                 loop_pause: float = PLAYBACK_DEFAULTS["loop_pause"],
                 error_pause: float = PLAYBACK_DEFAULTS["error_pause"]):
        self.controller = controller
        self.store = store or RecordingStore()
        self.clock = clock or controller.clock
        self.power_settle_time = power_settle_time
        self.loop_pause = loop_pause
        self.error_pause = error_pause

        self._playing = False
        self._stop = threading.Event()

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play_recording(self, recording: Union[str, Path, Recording],
                       speed: float = PLAYBACK_DEFAULTS["speed"],
                       move_speed: int = PLAYBACK_DEFAULTS["move_speed"],
                       loop: bool = PLAYBACK_DEFAULTS["loop"]) -> PlaybackSummary:
        """
        Play back a recorded movement; blocks until done or stopped

        Args:
            recording: Recording, or path of a recording file
            speed: Time scale (2.0 plays twice as fast)
            move_speed: Servo speed 0-100 for each frame
            loop: Repeat until stop_playback()
        """
        if isinstance(speed, bool) or not isinstance(speed, (int, float)) \
                or not math.isfinite(speed) or speed <= 0:
            raise ValidationError(f"Playback speed must be a positive number, got {speed!r}")
        move_speed = check_speed(move_speed)
        if not isinstance(recording, (str, Path, Recording)):
            raise ValidationError("Invalid recording parameter: must be a path or a Recording")

        self.controller.claim_motion(MotionActivity.PLAYING)
        self._stop.clear()
        self._playing = True

        passes = sent = errors = 0
        try:
            if not isinstance(recording, Recording):
                recording = self.store.load(recording)

            logger.info(f"Starting playback: {len(recording)} frames, speed {speed}x, "
                        f"move speed {move_speed}, loop {loop}")

            # Power on servos for movement
            self.controller.power_on()
            self.clock.sleep(self.power_settle_time)

            while True:
                pass_sent, pass_errors = self._play_once(recording, speed, move_speed)
                passes += 1
                sent += pass_sent
                errors += pass_errors

                if not loop or self._stop.is_set():
                    break
                logger.info("Looping playback...")
                self.clock.sleep(self.loop_pause)
        finally:
            self._playing = False
            self.controller.release_motion(MotionActivity.PLAYING)

        stopped = self._stop.is_set()
        logger.info("Playback stopped." if stopped else "Playback completed.")
        return PlaybackSummary(passes=passes, frames_sent=sent,
                               frame_errors=errors, stopped=stopped)

    def stop_playback(self) -> bool:
        """
        Ask the playback loop to stop at the next frame boundary
        Returns False when nothing is playing.
        """
        if not self._playing:
            logger.info("No playback in progress")
            return False

        logger.info("Stopping playback...")
        self._stop.set()
        return True

    # ============== PRIVATE METHODS ==============

    def _play_once(self, recording: Recording, speed: float, move_speed: int) -> Tuple[int, int]:
        frames = recording.frames
        sent = errors = 0

        for i, frame in enumerate(frames):
            if self._stop.is_set():
                break

            try:
                if recording.mode == RecordingMode.COORDS:
                    self.controller.send_coords(frame.position, move_speed, LINEAR)
                else:
                    self.controller.send_angles(frame.position, move_speed)
            except MyCobotError as e:
                logger.error(f"Error playing frame {i}: {e}")
                errors += 1
                self.clock.sleep(self.error_pause)
                continue

            sent += 1
            if i < len(frames) - 1:
                delay = (frames[i + 1].timestamp_ms - frame.timestamp_ms) / speed / 1000.0
                if delay > 0:
                    self.clock.sleep(delay)

        return sent, errors
