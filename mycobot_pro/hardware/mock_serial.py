"""
Simulated myCobot transport
Answers protocol frames from an in-memory arm model, for running without hardware
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import List

from ..config import COMMAND_IDS
from .framing import FrameBuffer
from .protocol import Frame, encode_frame, from_fixed, pack_int16, to_fixed, unpack_int16_list
from .serial_comm import Transport

logger = logging.getLogger(__name__)

C = COMMAND_IDS


@dataclass
class MockArmState:
    """Simulated arm state"""
    angles: List[float] = field(default_factory=lambda: [0.0] * 6)
    coords: List[float] = field(default_factory=lambda: [150.0, -60.0, 250.0, -90.0, 0.0, -90.0])
    encoders: List[int] = field(default_factory=lambda: [2048] * 6)
    servos_enabled: List[bool] = field(default_factory=lambda: [True] * 6)
    powered: bool = True
    paused: bool = False
    speed: int = 50
    gripper_value: int = 0
    version: int = 1


class SimulatedArm(Transport):
    """
    Mock transport - decodes written frames and replies like the firmware

    ``command_log`` keeps every received frame for inspection.
    """

    def __init__(self, port: str = "MOCK"):
        self.port = port
        self.state = MockArmState()
        self.command_log: List[Frame] = []
        self._open = False
        self._rx = FrameBuffer()
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self):
        self._open = True
        logger.info(f"🤖 Simulated arm on {self.port}")

    def close(self):
        self._open = False
        logger.info("Simulated arm closed")

    def write(self, data: bytes):
        with self._lock:
            frames = self._rx.feed(data)
            replies = [self._handle(frame) for frame in frames]
        for reply in replies:
            if reply is not None and self.on_data:
                self.on_data(reply)

    def move_by_hand(self, angles: List[float]):
        """Reposition the arm as a person would in free-move mode"""
        with self._lock:
            self.state.angles = list(angles)

    # ==================== Command handling ====================

    def _handle(self, frame: Frame):
        self.command_log.append(frame)
        cmd, payload, state = frame.command_id, frame.payload, self.state

        if cmd == C["SOFTWARE_VERSION"]:
            return self._reply(cmd, bytes([state.version]))
        if cmd == C["POWER_ON"]:
            state.powered = True
            state.servos_enabled = [True] * 6
        elif cmd == C["POWER_OFF"]:
            state.powered = False
        elif cmd == C["IS_POWER_ON"]:
            return self._reply(cmd, bytes([int(state.powered)]))
        elif cmd == C["RELEASE_ALL_SERVOS"]:
            state.servos_enabled = [False] * 6
        elif cmd == C["IS_SERVO_ENABLE"]:
            return self._reply(cmd, bytes([int(state.servos_enabled[payload[0] - 1])]))
        elif cmd == C["RELEASE_SERVO"]:
            state.servos_enabled[payload[0] - 1] = False
        elif cmd == C["FOCUS_SERVO"]:
            state.servos_enabled[payload[0] - 1] = True
        elif cmd == C["GET_ANGLES"]:
            return self._reply(cmd, self._vector(state.angles))
        elif cmd == C["SEND_ANGLES"]:
            state.angles = [from_fixed(v) for v in unpack_int16_list(payload[:12])]
        elif cmd == C["SEND_ANGLE"]:
            state.angles[payload[0] - 1] = from_fixed(unpack_int16_list(payload[1:3])[0])
        elif cmd == C["GET_COORDS"]:
            return self._reply(cmd, self._vector(state.coords))
        elif cmd == C["SEND_COORDS"]:
            state.coords = [from_fixed(v) for v in unpack_int16_list(payload[:12])]
        elif cmd == C["SEND_COORD"]:
            state.coords[payload[0] - 1] = from_fixed(unpack_int16_list(payload[1:3])[0])
        elif cmd == C["PAUSE"]:
            state.paused = True
        elif cmd in (C["RESUME"], C["STOP"]):
            state.paused = False
        elif cmd in (C["IS_MOVING"], C["IS_GRIPPER_MOVING"]):
            return self._reply(cmd, b"\x00")
        elif cmd == C["IS_IN_POSITION"]:
            return self._reply(cmd, b"\x01")
        elif cmd == C["GET_SPEED"]:
            return self._reply(cmd, bytes([state.speed]))
        elif cmd == C["SET_SPEED"]:
            state.speed = payload[0]
        elif cmd == C["GET_GRIPPER_VALUE"]:
            return self._reply(cmd, bytes([state.gripper_value]))
        elif cmd == C["SET_GRIPPER_STATE"]:
            state.gripper_value = 100 if payload[0] == 1 else 0
        elif cmd == C["SET_GRIPPER_VALUE"]:
            state.gripper_value = payload[0]
        elif cmd == C["GET_ENCODER"]:
            return self._reply(cmd, pack_int16(state.encoders[payload[0] - 1]))
        elif cmd == C["GET_ENCODERS"]:
            return self._reply(cmd, b"".join(pack_int16(v) for v in state.encoders))
        elif cmd == C["SET_ENCODER"]:
            state.encoders[payload[0] - 1] = unpack_int16_list(payload[1:3])[0]
        elif cmd == C["SET_ENCODERS"]:
            state.encoders = unpack_int16_list(payload)
        else:
            logger.debug(f"Simulator ignoring command 0x{cmd:02X}")
        return None

    @staticmethod
    def _vector(values) -> bytes:
        return b"".join(pack_int16(to_fixed(v)) for v in values)

    @staticmethod
    def _reply(command_id: int, payload: bytes) -> bytes:
        return encode_frame(command_id, payload)
