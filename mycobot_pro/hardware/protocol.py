"""
myCobot binary protocol codec
Pure functions mapping command ids and arguments to frames and back
"""

import math
import struct
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

from ..config import PROTOCOL, COMMAND_IDS

HEADER = PROTOCOL["HEADER"]
FOOTER = PROTOCOL["FOOTER"]
SCALE = PROTOCOL["SCALE"]

# Bytes before the payload: two headers, length, command id
PREFIX_SIZE = PROTOCOL["HEADER_SIZE"] + PROTOCOL["LENGTH_SIZE"] + PROTOCOL["COMMAND_ID_SIZE"]

_INT16 = struct.Struct(">h")

_VECTOR_RESPONSES = {
    COMMAND_IDS["GET_ANGLES"],
    COMMAND_IDS["GET_COORDS"],
    COMMAND_IDS["GET_ENCODERS"],
}

_BOOLEAN_RESPONSES = {
    COMMAND_IDS["IS_POWER_ON"],
    COMMAND_IDS["IS_MOVING"],
    COMMAND_IDS["IS_IN_POSITION"],
    COMMAND_IDS["IS_SERVO_ENABLE"],
    COMMAND_IDS["IS_GRIPPER_MOVING"],
}

_BYTE_RESPONSES = {
    COMMAND_IDS["SOFTWARE_VERSION"],
    COMMAND_IDS["GET_SPEED"],
    COMMAND_IDS["GET_GRIPPER_VALUE"],
}

Decoded = Union[int, float, bool, bytes, Tuple[float, ...], List[float]]


@dataclass(frozen=True)
class Frame:
    """One header/length/command/payload/footer unit"""
    command_id: int
    payload: bytes = b""

    @property
    def length(self) -> int:
        """Length byte value: payload plus command id and footer"""
        return len(self.payload) + 2

    def to_bytes(self) -> bytes:
        return encode_frame(self.command_id, self.payload)


def command_name(command_id: int) -> str:
    """Human readable name for logging"""
    for name, value in COMMAND_IDS.items():
        if value == command_id:
            return name
    return f"0x{command_id:02X}"


# ==================== Framing ====================

def encode_frame(command_id: int, payload: bytes = b"") -> bytes:
    """Wrap a payload into a complete wire frame"""
    payload = bytes(payload)
    if len(payload) + 2 > 0xFF:
        raise ValueError(f"Payload too long: {len(payload)} bytes")
    return bytes([HEADER, HEADER, len(payload) + 2, command_id & 0xFF]) + payload + bytes([FOOTER])


def decode_frame(data: bytes) -> Frame:
    """
    Parse one complete frame

    The caller (see framing.extract_frames) has already located the frame
    boundaries; this checks the sentinels and the length byte.
    """
    if len(data) < PROTOCOL["MIN_PACKET_SIZE"]:
        raise ValueError(f"Frame too short: {len(data)} bytes")
    if data[0] != HEADER or data[1] != HEADER:
        raise ValueError("Missing frame header")
    if data[-1] != FOOTER:
        raise ValueError("Missing frame footer")
    if data[2] != len(data) - 3:
        raise ValueError(f"Length byte {data[2]} does not match frame size {len(data)}")
    return Frame(command_id=data[3], payload=bytes(data[PREFIX_SIZE:-1]))


# ==================== Value encoding ====================

def to_fixed(value: float) -> int:
    """Scale a degree/millimetre value to the protocol's fixed point (round half up)"""
    return int(math.floor(value * SCALE + 0.5))


def from_fixed(raw: int) -> float:
    return raw / SCALE


def pack_int16(value: int) -> bytes:
    return _INT16.pack(value)


def unpack_int16_list(data: bytes) -> List[int]:
    """Read consecutive big-endian int16 values; a trailing odd byte is ignored"""
    count = len(data) // 2
    return list(struct.unpack(f">{count}h", bytes(data[:count * 2])))


def encode_payload(command_id: int, args: Sequence[float] = ()) -> bytes:
    """
    Encode already validated arguments for a command

    Multi-axis moves:   6 x int16 (value*100) + speed [+ mode]
    Single-axis moves:  id + int16 (value*100) + speed
    Gripper:            two unsigned bytes
    Encoders:           raw int16 counts (id first for SET_ENCODER)
    Everything else:    one byte per integer argument
    """
    if not args:
        return b""

    if command_id in (COMMAND_IDS["SEND_ANGLES"], COMMAND_IDS["SEND_COORDS"]):
        values, tail = args[:6], args[6:]
        body = b"".join(pack_int16(to_fixed(v)) for v in values)
        return body + bytes(int(b) for b in tail)

    if command_id in (COMMAND_IDS["SEND_ANGLE"], COMMAND_IDS["SEND_COORD"]):
        axis, value, speed = args
        return bytes([int(axis)]) + pack_int16(to_fixed(value)) + bytes([int(speed)])

    if command_id in (COMMAND_IDS["SET_GRIPPER_STATE"], COMMAND_IDS["SET_GRIPPER_VALUE"]):
        flag_or_value, speed = args
        return bytes([int(flag_or_value), int(speed)])

    if command_id == COMMAND_IDS["SET_ENCODER"]:
        joint, value = args
        return bytes([int(joint)]) + pack_int16(int(value))

    if command_id == COMMAND_IDS["SET_ENCODERS"]:
        return b"".join(pack_int16(int(v)) for v in args)

    return bytes(int(a) for a in args)


# ==================== Response decoding ====================

def decode_response(command_id: int, payload: bytes) -> Decoded:
    """Decode a response payload according to the command that produced it"""
    payload = bytes(payload)

    if command_id in _VECTOR_RESPONSES:
        values = [from_fixed(v) for v in unpack_int16_list(payload)]
        if len(values) == 6:
            return tuple(values)
        return values

    if command_id in _BOOLEAN_RESPONSES:
        return len(payload) > 0 and payload[0] == 1

    if command_id == COMMAND_IDS["GET_ENCODER"]:
        if len(payload) < 2:
            return 0.0
        return from_fixed(_INT16.unpack(payload[:2])[0])

    if command_id in _BYTE_RESPONSES:
        return payload[0] if payload else 0

    return payload
