"""Configuration module for myCobot Pro"""

from .defaults import *
from .settings import Settings

__all__ = [
    'PROTOCOL', 'COMMAND_IDS', 'COMMAND_TIMEOUTS', 'DEFAULT_COMMAND_TIMEOUT',
    'SERIAL_DEFAULTS', 'RECORDER_DEFAULTS', 'PLAYBACK_DEFAULTS',
    'RECORDINGS_DIR', 'SERVO_ID_RANGE', 'SPEED_RANGE', 'GRIPPER_VALUE_RANGE',
    'INT16_RANGE', 'Settings'
]
