"""
Command builder for the myCobot serial protocol
Validates arguments and produces encoded payloads
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Sequence

from ..config import (COMMAND_IDS, SERVO_ID_RANGE, SPEED_RANGE,
                      GRIPPER_VALUE_RANGE, INT16_RANGE)
from ..exceptions import ValidationError
from .protocol import encode_payload, to_fixed


@dataclass(frozen=True)
class Command:
    """A ready-to-send command"""
    command_id: int
    payload: bytes = b""
    expect_response: bool = False


def _query(name: str, *args) -> Command:
    command_id = COMMAND_IDS[name]
    return Command(command_id, encode_payload(command_id, args), expect_response=True)


def _action(name: str, *args) -> Command:
    command_id = COMMAND_IDS[name]
    return Command(command_id, encode_payload(command_id, args))


# ==================== Validation ====================

def _check_number(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ValidationError(f"{what} must be a finite number, got {value!r}")
    return value


def _check_int(value, low: int, high: int, what: str) -> int:
    _check_number(value, what)
    if int(value) != value or not low <= value <= high:
        raise ValidationError(f"{what} must be an integer between {low} and {high}, got {value!r}")
    return int(value)


def check_servo_id(servo_id, what: str = "Servo ID") -> int:
    return _check_int(servo_id, *SERVO_ID_RANGE, what)


def check_speed(speed) -> int:
    return _check_int(speed, *SPEED_RANGE, "Speed")


def check_scaled(value, what: str) -> float:
    """Value must survive the x100 fixed-point conversion into int16"""
    _check_number(value, what)
    low, high = INT16_RANGE
    if not low <= to_fixed(value) <= high:
        raise ValidationError(f"{what} {value!r} is outside the encodable range "
                              f"[{low / 100:.2f}, {high / 100:.2f}]")
    return float(value)


def check_vector(values: Sequence[float], what: str) -> tuple:
    try:
        values = tuple(values)
    except TypeError:
        raise ValidationError(f"{what} must be a sequence of 6 numbers") from None
    if len(values) != 6:
        raise ValidationError(f"{what} must be exactly 6 numbers, got {len(values)}")
    return tuple(check_scaled(v, f"{what}[{i}]") for i, v in enumerate(values))


class CommandBuilder:
    """Build myCobot commands with validation"""

    # ---------- system / power ----------

    @staticmethod
    def software_version() -> Command:
        return _query("SOFTWARE_VERSION")

    @staticmethod
    def power_on() -> Command:
        return _action("POWER_ON")

    @staticmethod
    def power_off() -> Command:
        return _action("POWER_OFF")

    @staticmethod
    def is_power_on() -> Command:
        return _query("IS_POWER_ON")

    @staticmethod
    def release_all_servos() -> Command:
        return _action("RELEASE_ALL_SERVOS")

    # ---------- single servos ----------

    @staticmethod
    def is_servo_enable(servo_id: int) -> Command:
        return _query("IS_SERVO_ENABLE", check_servo_id(servo_id))

    @staticmethod
    def release_servo(servo_id: int) -> Command:
        return _action("RELEASE_SERVO", check_servo_id(servo_id))

    @staticmethod
    def focus_servo(servo_id: int) -> Command:
        return _action("FOCUS_SERVO", check_servo_id(servo_id))

    # ---------- speed ----------

    @staticmethod
    def get_speed() -> Command:
        return _query("GET_SPEED")

    @staticmethod
    def set_speed(speed: int) -> Command:
        return _action("SET_SPEED", check_speed(speed))

    # ---------- joints ----------

    @staticmethod
    def get_angles() -> Command:
        return _query("GET_ANGLES")

    @staticmethod
    def send_angles(angles: Sequence[float], speed: int) -> Command:
        angles = check_vector(angles, "Angles")
        return _action("SEND_ANGLES", *angles, check_speed(speed))

    @staticmethod
    def send_angle(joint_id: int, angle: float, speed: int) -> Command:
        joint_id = check_servo_id(joint_id, "Joint ID")
        angle = check_scaled(angle, "Angle")
        return _action("SEND_ANGLE", joint_id, angle, check_speed(speed))

    # ---------- cartesian ----------

    @staticmethod
    def get_coords() -> Command:
        return _query("GET_COORDS")

    @staticmethod
    def send_coords(coords: Sequence[float], speed: int, mode: int = 0) -> Command:
        """mode: 0 angular interpolation, 1 linear interpolation"""
        coords = check_vector(coords, "Coordinates")
        speed = check_speed(speed)
        mode = _check_int(mode, 0, 1, "Mode")
        return _action("SEND_COORDS", *coords, speed, mode)

    @staticmethod
    def send_coord(coord_id: int, value: float, speed: int) -> Command:
        coord_id = check_servo_id(coord_id, "Coordinate index")
        value = check_scaled(value, "Coordinate value")
        return _action("SEND_COORD", coord_id, value, check_speed(speed))

    # ---------- motion control ----------

    @staticmethod
    def pause() -> Command:
        return _action("PAUSE")

    @staticmethod
    def resume() -> Command:
        return _action("RESUME")

    @staticmethod
    def stop() -> Command:
        return _action("STOP")

    @staticmethod
    def is_moving() -> Command:
        return _query("IS_MOVING")

    @staticmethod
    def is_in_position() -> Command:
        return _query("IS_IN_POSITION")

    # ---------- gripper ----------

    @staticmethod
    def set_gripper_state(state: int, speed: int) -> Command:
        """state: 0 open, 1 close"""
        state = _check_int(state, 0, 1, "Gripper state")
        return _action("SET_GRIPPER_STATE", state, check_speed(speed))

    @staticmethod
    def set_gripper_value(value: int, speed: int) -> Command:
        value = _check_int(value, *GRIPPER_VALUE_RANGE, "Gripper value")
        return _action("SET_GRIPPER_VALUE", value, check_speed(speed))

    @staticmethod
    def set_gripper_ini() -> Command:
        return _action("SET_GRIPPER_INI")

    @staticmethod
    def get_gripper_value() -> Command:
        return _query("GET_GRIPPER_VALUE")

    @staticmethod
    def is_gripper_moving() -> Command:
        return _query("IS_GRIPPER_MOVING")

    # ---------- encoders ----------

    @staticmethod
    def get_encoder(joint_id: int) -> Command:
        return _query("GET_ENCODER", check_servo_id(joint_id, "Joint ID"))

    @staticmethod
    def get_encoders() -> Command:
        return _query("GET_ENCODERS")

    @staticmethod
    def set_encoder(joint_id: int, value: int) -> Command:
        joint_id = check_servo_id(joint_id, "Joint ID")
        value = _check_int(value, *INT16_RANGE, "Encoder value")
        return _action("SET_ENCODER", joint_id, value)

    @staticmethod
    def set_encoders(values: Sequence[int]) -> Command:
        values = tuple(values)
        if len(values) != 6:
            raise ValidationError(f"Encoders must be exactly 6 numbers, got {len(values)}")
        values = [_check_int(v, *INT16_RANGE, f"Encoders[{i}]") for i, v in enumerate(values)]
        return _action("SET_ENCODERS", *values)
