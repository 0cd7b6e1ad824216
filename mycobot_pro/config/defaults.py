"""
Default configuration values for myCobot Pro
Protocol constants, command ids, timeouts and motion parameters
"""

# ==================== PROTOCOL ====================

# Frame layout: [HEADER][HEADER][LEN][CMD][PAYLOAD...][FOOTER]
PROTOCOL = {
    "HEADER": 0xFE,
    "FOOTER": 0xFA,
    "HEADER_SIZE": 2,
    "LENGTH_SIZE": 1,
    "COMMAND_ID_SIZE": 1,
    "FOOTER_SIZE": 1,
    "MIN_PACKET_SIZE": 5,
    "SCALE": 100,               # fixed-point factor for angles/coords
}

# ==================== COMMANDS ====================

# myCobot serial command ids ("genre")
COMMAND_IDS = {
    "SOFTWARE_VERSION": 0x02,
    "POWER_ON": 0x10,
    "POWER_OFF": 0x11,
    "IS_POWER_ON": 0x12,
    "RELEASE_ALL_SERVOS": 0x13,
    "GET_ANGLES": 0x20,
    "SEND_ANGLE": 0x21,
    "SEND_ANGLES": 0x22,
    "GET_COORDS": 0x23,
    "SEND_COORD": 0x24,
    "SEND_COORDS": 0x25,
    "PAUSE": 0x26,
    "RESUME": 0x28,
    "STOP": 0x29,
    "IS_IN_POSITION": 0x2A,
    "IS_MOVING": 0x2B,
    "SET_ENCODER": 0x3A,
    "GET_ENCODER": 0x3B,
    "SET_ENCODERS": 0x3C,
    "GET_ENCODERS": 0x3D,
    "GET_SPEED": 0x40,
    "SET_SPEED": 0x41,
    "IS_SERVO_ENABLE": 0x50,
    "RELEASE_SERVO": 0x56,
    "FOCUS_SERVO": 0x57,
    "GET_GRIPPER_VALUE": 0x65,
    "SET_GRIPPER_STATE": 0x66,
    "SET_GRIPPER_VALUE": 0x67,
    "SET_GRIPPER_INI": 0x68,
    "IS_GRIPPER_MOVING": 0x69,
}

# ==================== LIMITS ====================

SERVO_ID_RANGE = (1, 6)
SPEED_RANGE = (0, 100)
GRIPPER_VALUE_RANGE = (0, 100)
INT16_RANGE = (-32768, 32767)

# ==================== TIMEOUTS ====================

# Response timeouts per command family (seconds)
COMMAND_TIMEOUTS = {
    "POWER_ON": 8.0,
    "POWER_OFF": 3.0,
    "RELEASE_ALL_SERVOS": 3.0,
    "SEND_ANGLE": 0.3,
    "SEND_ANGLES": 0.3,
    "SEND_COORD": 0.3,
    "SEND_COORDS": 0.3,
}

DEFAULT_COMMAND_TIMEOUT = 0.5

# ==================== COMMUNICATION ====================

SERIAL_DEFAULTS = {
    "baudrate": 115200,
    "read_timeout": 0.1,        # reader thread poll interval
    "write_timeout": 1.0,
    "settle_time": 1.5,         # board reset after the port opens
}

# ==================== RECORDING ====================

RECORDER_DEFAULTS = {
    "sample_rate": 20,          # Hz
    "mode": "angles",
}

PLAYBACK_DEFAULTS = {
    "speed": 1.0,               # time scale factor
    "move_speed": 100,          # servo speed for each frame
    "loop": False,
    "power_settle_time": 1.0,
    "loop_pause": 0.5,
    "error_pause": 0.05,
}

RECORDINGS_DIR = "recordings"
