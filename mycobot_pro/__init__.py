"""
myCobot Pro - Serial driver for the myCobot 280 arm
==================================================

Binary protocol engine plus teach-by-demonstration recording and playback.
"""

__version__ = "1.0.0"
__author__ = "myCobot Pro Team"

# Convenience imports
from .control import MyCobotController, MovementRecorder, Recording, RecordingMode
from .exceptions import (MyCobotError, ValidationError, StateError,
                         CobotConnectionError, ProtocolTimeoutError,
                         RecordingFormatError, RecordingNotFoundError)

__all__ = [
    'MyCobotController', 'MovementRecorder', 'Recording', 'RecordingMode',
    'MyCobotError', 'ValidationError', 'StateError', 'CobotConnectionError',
    'ProtocolTimeoutError', 'RecordingFormatError', 'RecordingNotFoundError'
]
