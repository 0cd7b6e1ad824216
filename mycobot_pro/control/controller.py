"""
Main myCobot controller
Public operation surface on top of the command dispatcher
"""

import threading
import logging
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from ..config import Settings
from ..exceptions import StateError
from ..hardware import (CommandBuilder, CommandDispatcher, ConnectionState,
                        SerialTransport, Transport, get_default_port)
from ..utils.clock import Clock, SYSTEM_CLOCK

logger = logging.getLogger(__name__)

Vector = Tuple[float, float, float, float, float, float]


class MotionActivity(Enum):
    """Which long-running motion session owns the arm"""
    IDLE = "idle"
    RECORDING = "recording"
    PLAYING = "playing"


class MyCobotController:
    """Main controller for the myCobot arm"""

    def __init__(self, port: Optional[str] = None,
                 baudrate: Optional[int] = None,
                 transport: Optional[Transport] = None,
                 clock: Clock = SYSTEM_CLOCK,
                 settings: Optional[Settings] = None):
        """
        Initialize controller

        Args:
            port: Serial port (auto-detect if None and no transport given)
            baudrate: Serial baud rate (settings value if None)
            transport: Ready-made transport, e.g. a SimulatedArm
            clock: Time source for deadlines and settle delays
            settings: Runtime settings (defaults if None)
        """
        self.settings = settings or Settings()
        self.clock = clock

        if transport is None:
            port = port or self.settings.port or get_default_port()
            transport = SerialTransport(port, baudrate or self.settings.baudrate)
        self.transport = transport

        self.dispatcher = CommandDispatcher(
            transport,
            clock=clock,
            timeouts=self.settings.command_timeouts,
            default_timeout=self.settings.default_timeout,
            settle_time=self.settings.settle_time
        )
        self.cmd = CommandBuilder()

        self._activity = MotionActivity.IDLE
        self._motion_lock = threading.Lock()

    # ==================== Connection Management ====================

    def connect(self):
        """Connect to robot"""
        self.dispatcher.connect()

    def disconnect(self):
        """Disconnect from robot"""
        self.dispatcher.disconnect()

    @property
    def connected(self) -> bool:
        return self.dispatcher.connected

    @property
    def state(self) -> ConnectionState:
        return self.dispatcher.state

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    # ==================== Motion Sessions ====================

    @property
    def activity(self) -> MotionActivity:
        return self._activity

    def claim_motion(self, activity: MotionActivity):
        """Reserve the arm for a recording or playback session"""
        with self._motion_lock:
            if self._activity == MotionActivity.RECORDING:
                if activity == MotionActivity.RECORDING:
                    raise StateError("Recording already in progress")
                raise StateError("Cannot play while recording")
            if self._activity == MotionActivity.PLAYING:
                if activity == MotionActivity.PLAYING:
                    raise StateError("Playback already in progress")
                raise StateError("Cannot record while playing back a movement")
            self._activity = activity

    def release_motion(self, activity: MotionActivity):
        with self._motion_lock:
            if self._activity == activity:
                self._activity = MotionActivity.IDLE

    # ==================== System / Power ====================

    def get_system_version(self) -> int:
        return self.dispatcher.send_command(self.cmd.software_version())

    def power_on(self):
        """Power on all servo motors"""
        self.dispatcher.send_command(self.cmd.power_on())

    def power_off(self):
        self.dispatcher.send_command(self.cmd.power_off())

    def is_power_on(self) -> bool:
        return self.dispatcher.send_command(self.cmd.is_power_on())

    def release_all_servos(self):
        """Release all servos (free-move mode) - the arm may drop under gravity"""
        self.dispatcher.send_command(self.cmd.release_all_servos())

    # ==================== Servos ====================

    def is_servo_enable(self, servo_id: int) -> bool:
        return self.dispatcher.send_command(self.cmd.is_servo_enable(servo_id))

    def release_servo(self, servo_id: int):
        self.dispatcher.send_command(self.cmd.release_servo(servo_id))

    def focus_servo(self, servo_id: int):
        self.dispatcher.send_command(self.cmd.focus_servo(servo_id))

    # ==================== Speed ====================

    def get_speed(self) -> int:
        return self.dispatcher.send_command(self.cmd.get_speed())

    def set_speed(self, speed: int):
        self.dispatcher.send_command(self.cmd.set_speed(speed))

    # ==================== Joints ====================

    def get_angles(self) -> Union[Vector, list]:
        """Current angles of all six joints in degrees"""
        return self.dispatcher.send_command(self.cmd.get_angles())

    def send_angles(self, angles: Sequence[float], speed: int):
        """Move all six joints (degrees) at speed 0-100"""
        self.dispatcher.send_command(self.cmd.send_angles(angles, speed))

    def send_angle(self, joint_id: int, angle: float, speed: int):
        self.dispatcher.send_command(self.cmd.send_angle(joint_id, angle, speed))

    # ==================== Cartesian ====================

    def get_coords(self) -> Union[Vector, list]:
        """Current end-effector pose [x, y, z, rx, ry, rz]"""
        return self.dispatcher.send_command(self.cmd.get_coords())

    def send_coords(self, coords: Sequence[float], speed: int, mode: int = 0):
        """
        Move end-effector to cartesian coordinates

        Args:
            coords: [x, y, z, rx, ry, rz]
            speed: 0-100
            mode: 0 angular, 1 linear interpolation
        """
        self.dispatcher.send_command(self.cmd.send_coords(coords, speed, mode))

    def send_coord(self, coord_id: int, value: float, speed: int):
        self.dispatcher.send_command(self.cmd.send_coord(coord_id, value, speed))

    # ==================== Motion Control ====================

    def pause(self):
        self.dispatcher.send_command(self.cmd.pause())

    def resume(self):
        self.dispatcher.send_command(self.cmd.resume())

    def stop(self):
        self.dispatcher.send_command(self.cmd.stop())

    def is_moving(self) -> bool:
        return self.dispatcher.send_command(self.cmd.is_moving())

    def is_in_position(self) -> bool:
        return self.dispatcher.send_command(self.cmd.is_in_position())

    # ==================== Gripper Control ====================

    def set_gripper_state(self, state: int, speed: int):
        """state: 0 open, 1 close"""
        self.dispatcher.send_command(self.cmd.set_gripper_state(state, speed))

    def set_gripper_value(self, value: int, speed: int):
        self.dispatcher.send_command(self.cmd.set_gripper_value(value, speed))

    def set_gripper_ini(self):
        self.dispatcher.send_command(self.cmd.set_gripper_ini())

    def get_gripper_value(self) -> int:
        return self.dispatcher.send_command(self.cmd.get_gripper_value())

    def is_gripper_moving(self) -> bool:
        return self.dispatcher.send_command(self.cmd.is_gripper_moving())

    # ==================== Encoders ====================

    def get_encoder(self, joint_id: int) -> float:
        return self.dispatcher.send_command(self.cmd.get_encoder(joint_id))

    def get_encoders(self) -> Union[Vector, list]:
        return self.dispatcher.send_command(self.cmd.get_encoders())

    def set_encoder(self, joint_id: int, value: int):
        self.dispatcher.send_command(self.cmd.set_encoder(joint_id, value))

    def set_encoders(self, values: Sequence[int]):
        self.dispatcher.send_command(self.cmd.set_encoders(values))
