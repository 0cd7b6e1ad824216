"""Control module for high-level robot control"""

from .controller import MyCobotController, MotionActivity
from .recording import (MovementFrame, PlaybackSummary, RecorderStatus, Recording,
                        RecordingMetadata, RecordingMode, RecordingSummary)
from .storage import RecordingFileInfo, RecordingStore
from .sampler import MotionSampler
from .player import MotionPlayer
from .teaching import MovementRecorder

__all__ = [
    'MyCobotController', 'MotionActivity',
    'MovementFrame', 'PlaybackSummary', 'RecorderStatus', 'Recording',
    'RecordingMetadata', 'RecordingMode', 'RecordingSummary',
    'RecordingFileInfo', 'RecordingStore',
    'MotionSampler', 'MotionPlayer', 'MovementRecorder'
]
