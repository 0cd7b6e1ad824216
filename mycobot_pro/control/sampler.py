"""
Motion sampler - teach by demonstration
Releases the servos and samples the arm's position at a fixed rate
"""

import threading
import logging
from typing import Any, Dict, List, Optional

from ..config import RECORDER_DEFAULTS
from ..exceptions import MyCobotError, StateError, ValidationError
from ..utils.clock import Clock, SYSTEM_CLOCK
from .controller import MotionActivity, MyCobotController
from .recording import MovementFrame, Recording, RecordingMode, RecordingSummary

logger = logging.getLogger(__name__)


class MotionSampler:
    """
    Periodic poll loop accumulating timestamped frames

    The accumulator belongs to the sampler until stop_recording(); frame
    timestamps are milliseconds since the first captured sample.
    """

    def __init__(self, controller: MyCobotController,
                 sample_rate: float = RECORDER_DEFAULTS["sample_rate"],
                 mode: str = RECORDER_DEFAULTS["mode"],
                 clock: Optional[Clock] = None):
        if isinstance(sample_rate, bool) or not isinstance(sample_rate, (int, float)) \
                or not sample_rate > 0:
            raise ValidationError(f"Sample rate must be positive, got {sample_rate!r}")
        try:
            self.mode = RecordingMode(mode)
        except ValueError:
            raise ValidationError(f"Invalid recording mode: {mode!r}") from None

        self.controller = controller
        self.sample_rate = sample_rate
        self.interval = 1.0 / sample_rate
        self.clock = clock or controller.clock

        self._frames: List[MovementFrame] = []
        self._frames_lock = threading.Lock()
        self._origin: Optional[float] = None
        self._started_at = 0.0

        self._recording = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_recording(self) -> bool:
        return self._recording

    @property
    def frame_count(self) -> int:
        with self._frames_lock:
            return len(self._frames)

    @property
    def elapsed_ms(self) -> float:
        """Time since start_recording, 0 when idle"""
        if not self._recording:
            return 0.0
        return (self.clock.monotonic() - self._started_at) * 1000.0

    def get_frames(self) -> List[MovementFrame]:
        """Copy of the frames captured so far"""
        with self._frames_lock:
            return list(self._frames)

    # ==================== Recording ====================

    def start_recording(self):
        """Release the servos and start sampling"""
        self.controller.claim_motion(MotionActivity.RECORDING)

        logger.info(f"Starting movement recording in {self.mode.value} mode "
                    f"({self.sample_rate} Hz, {self.interval * 1000:.0f}ms interval)")
        with self._frames_lock:
            self._frames = []
            self._origin = None

        try:
            self.controller.release_all_servos()
        except MyCobotError:
            self.controller.release_motion(MotionActivity.RECORDING)
            raise

        self._stop.clear()
        self._recording = True
        self._started_at = self.clock.monotonic()
        self._thread = threading.Thread(
            target=self._recording_loop,
            name="mycobot-sampler",
            daemon=True
        )
        self._thread.start()
        logger.info("Recording started. Move the robot manually to teach the movement.")

    def stop_recording(self) -> RecordingSummary:
        """Stop sampling, re-power the arm and summarize"""
        if not self._recording:
            raise StateError("No recording in progress")

        self._stop.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        self._recording = False
        self.controller.release_motion(MotionActivity.RECORDING)

        frames = self.get_frames()
        duration_ms = frames[-1].timestamp_ms if frames else 0.0
        average = len(frames) / (duration_ms / 1000.0) if duration_ms > 0 else 0.0
        logger.info(f"Recording stopped. Captured {len(frames)} frames "
                    f"in {duration_ms / 1000:.2f}s")

        self.controller.power_on()

        return RecordingSummary(
            duration_ms=duration_ms,
            frame_count=len(frames),
            sample_rate_hz=self.sample_rate,
            mode=self.mode,
            average_frame_rate=average
        )

    def clear(self):
        if self._recording:
            raise StateError("Cannot clear recording while recording is in progress")
        with self._frames_lock:
            self._frames = []
            self._origin = None
        logger.info("Current recording cleared")

    def to_recording(self, extra: Optional[Dict[str, Any]] = None) -> Recording:
        """Freeze the captured frames into a Recording"""
        frames = self.get_frames()
        if not frames:
            raise StateError("No recording to save. Record a movement first.")
        return Recording.from_frames(frames, self.sample_rate, self.mode, extra=extra)

    # ============== PRIVATE METHODS ==============

    def _recording_loop(self):
        """Sampling thread; the stop flag is checked only between ticks"""
        next_tick = self.clock.monotonic()
        while not self._stop.is_set():
            self._capture_frame()
            next_tick += self.interval
            now = self.clock.monotonic()
            if next_tick < now:
                # Fell behind (slow read); restart the schedule from here
                next_tick = now
            self.clock.sleep(next_tick - now)

    def _capture_frame(self):
        sampled_at = self.clock.monotonic()
        try:
            if self.mode == RecordingMode.ANGLES:
                position = self.controller.get_angles()
            else:
                position = self.controller.get_coords()
        except MyCobotError as e:
            logger.error(f"Error during recording frame capture: {e}")
            return

        if not isinstance(position, tuple) or len(position) != 6:
            logger.warning(f"Skipping sample with unexpected position {position!r}")
            return

        with self._frames_lock:
            if self._origin is None:
                self._origin = sampled_at
            self._frames.append(MovementFrame(
                timestamp_ms=(sampled_at - self._origin) * 1000.0,
                position=position,
                mode=self.mode
            ))
