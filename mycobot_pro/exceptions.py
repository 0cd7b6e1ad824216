"""
Exception hierarchy for myCobot Pro
"""

from typing import Optional


class MyCobotError(Exception):
    """Base class for all driver errors"""


class ValidationError(MyCobotError, ValueError):
    """Argument outside its allowed range; raised before any byte is sent"""


class StateError(MyCobotError, RuntimeError):
    """Operation not allowed in the current recording/playback state"""


class CobotConnectionError(MyCobotError, ConnectionError):
    """Transport not open, or open/close/write failed"""


class ProtocolTimeoutError(MyCobotError, TimeoutError):
    """No matching response arrived before the command deadline"""

    def __init__(self, command_id: int, timeout: Optional[float] = None):
        self.command_id = command_id
        self.timeout = timeout
        message = f"Command timeout: 0x{command_id:02X}"
        if timeout is not None:
            message += f" after {timeout:.3f}s"
        super().__init__(message)


class RecordingFormatError(MyCobotError, ValueError):
    """Recording document is malformed"""


class RecordingNotFoundError(RecordingFormatError, FileNotFoundError):
    """Recording file does not exist"""
