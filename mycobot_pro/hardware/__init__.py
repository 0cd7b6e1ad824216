"""Hardware communication module"""

from .protocol import Frame, encode_frame, decode_frame, encode_payload, decode_response
from .framing import FrameBuffer, extract_frames
from .commands import Command, CommandBuilder
from .serial_comm import Transport, SerialTransport
from .mock_serial import SimulatedArm
from .dispatcher import CommandDispatcher, ConnectionState, PendingCommand
from .port_utils import get_default_port, list_available_ports, find_mycobot_port

__all__ = [
    'Frame', 'encode_frame', 'decode_frame', 'encode_payload', 'decode_response',
    'FrameBuffer', 'extract_frames',
    'Command', 'CommandBuilder',
    'Transport', 'SerialTransport', 'SimulatedArm',
    'CommandDispatcher', 'ConnectionState', 'PendingCommand',
    'get_default_port', 'list_available_ports', 'find_mycobot_port'
]
