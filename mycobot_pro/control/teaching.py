"""
Teaching mode - record a movement by hand and replay it
Combines sampler, player and recording store behind one object
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config import RECORDER_DEFAULTS, PLAYBACK_DEFAULTS, Settings
from ..utils.clock import Clock
from .controller import MyCobotController
from .player import MotionPlayer
from .recording import (MovementFrame, PlaybackSummary, RecorderStatus,
                        Recording, RecordingSummary)
from .sampler import MotionSampler
from .storage import RecordingFileInfo, RecordingStore

logger = logging.getLogger(__name__)


class MovementRecorder:
    """Teach-by-demonstration front end for one controller"""

    def __init__(self, controller: MyCobotController,
                 sample_rate: float = RECORDER_DEFAULTS["sample_rate"],
                 mode: str = RECORDER_DEFAULTS["mode"],
                 directory: Union[str, Path] = ".",
                 clock: Optional[Clock] = None,
                 power_settle_time: float = PLAYBACK_DEFAULTS["power_settle_time"]):
        self.controller = controller
        self.store = RecordingStore(directory)
        self.sampler = MotionSampler(controller, sample_rate, mode, clock=clock)
        self.player = MotionPlayer(controller, self.store, clock=clock,
                                   power_settle_time=power_settle_time)

    @classmethod
    def from_settings(cls, controller: MyCobotController,
                      settings: Optional[Settings] = None) -> "MovementRecorder":
        settings = settings or controller.settings
        return cls(controller,
                   sample_rate=settings.sample_rate,
                   mode=settings.recording_mode,
                   directory=settings.recordings_dir)

    # ==================== Recording ====================

    def start_recording(self):
        self.sampler.start_recording()

    def stop_recording(self) -> RecordingSummary:
        return self.sampler.stop_recording()

    def get_current_recording(self) -> List[MovementFrame]:
        return self.sampler.get_frames()

    def clear_recording(self):
        self.sampler.clear()

    # ==================== Files ====================

    def save_recording(self, path: Union[str, Path], **metadata) -> Path:
        """Save the last recording; extra keyword arguments go into its metadata"""
        return self.store.save(self.sampler.to_recording(metadata), path)

    def load_recording(self, path: Union[str, Path]) -> Recording:
        return self.store.load(path)

    def list_recordings(self, directory: Union[str, Path] = None) -> List[RecordingFileInfo]:
        return self.store.list(directory)

    # ==================== Playback ====================

    def play_recording(self, recording: Union[str, Path, Recording],
                       speed: float = PLAYBACK_DEFAULTS["speed"],
                       move_speed: int = PLAYBACK_DEFAULTS["move_speed"],
                       loop: bool = PLAYBACK_DEFAULTS["loop"]) -> PlaybackSummary:
        return self.player.play_recording(recording, speed=speed,
                                          move_speed=move_speed, loop=loop)

    def stop_playback(self) -> bool:
        return self.player.stop_playback()

    def get_status(self) -> RecorderStatus:
        return RecorderStatus(
            is_recording=self.sampler.is_recording,
            is_playing=self.player.is_playing,
            sample_rate_hz=self.sampler.sample_rate,
            mode=self.sampler.mode,
            current_frame_count=self.sampler.frame_count,
            recording_duration_ms=self.sampler.elapsed_ms
        )
