"""
Serial port detection utilities
"""

import sys
import serial
import serial.tools.list_ports
from typing import List, Optional

# USB-serial bridges found on myCobot 280 M5 boards and common adapters
_ARM_PATTERNS = [
    'usbserial',    # macOS
    'CH9102',       # M5 Basic / M5Stack bridge
    'CH340',
    'CP210',
    'wchusbserial',
    'ttyUSB',
    'ttyACM',
]

def list_available_ports() -> List[dict]:
    """
    List all available serial ports with details
    Returns list of dicts with device, description, and hwid
    """
    ports = []

    for port in serial.tools.list_ports.comports():
        description = port.description or 'Unknown'
        hwid = port.hwid or 'Unknown'
        ports.append({
            'device': port.device,
            'description': description,
            'hwid': hwid,
            'is_usb': 'USB' in description or 'USB' in hwid
        })

    # Sort by device name
    ports.sort(key=lambda x: x['device'])

    return ports

def find_mycobot_port() -> Optional[str]:
    """
    Try to find a port that likely has the arm connected
    Heuristic: first port whose device or description matches a known bridge
    """
    for port in list_available_ports():
        device_lower = port['device'].lower()
        desc_lower = port['description'].lower()

        for pattern in _ARM_PATTERNS:
            if pattern.lower() in device_lower or pattern.lower() in desc_lower:
                return port['device']

    return None

def get_default_port() -> str:
    """Detected port, or a platform-specific guess when nothing matches"""
    port = find_mycobot_port()
    if port:
        return port

    ports = list_available_ports()
    if ports:
        return ports[0]['device']

    if sys.platform == "darwin":
        return "/dev/cu.usbserial-0001"
    elif sys.platform.startswith("linux"):
        return "/dev/ttyUSB0"
    return "COM3"
