"""
Tests for serial port detection with a mocked port list
"""

import unittest
from types import SimpleNamespace
from unittest import mock

from mycobot_pro.hardware import find_mycobot_port, get_default_port, list_available_ports


def port(device, description="n/a", hwid="n/a"):
    return SimpleNamespace(device=device, description=description, hwid=hwid)


class TestPortDetection(unittest.TestCase):

    def patch_ports(self, ports):
        patcher = mock.patch("serial.tools.list_ports.comports", return_value=ports)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_list_sorted_with_usb_flag(self):
        self.patch_ports([port("/dev/ttyUSB1", "CP2104 USB to UART"), port("/dev/ttyS0")])
        ports = list_available_ports()
        self.assertEqual([p["device"] for p in ports], ["/dev/ttyS0", "/dev/ttyUSB1"])
        self.assertFalse(ports[0]["is_usb"])
        self.assertTrue(ports[1]["is_usb"])

    def test_find_by_bridge_name(self):
        self.patch_ports([port("/dev/ttyS0"), port("COM7", "USB-Enhanced-SERIAL CH9102")])
        self.assertEqual(find_mycobot_port(), "COM7")

    def test_default_falls_back_to_first_port(self):
        self.patch_ports([port("/dev/ttyS3"), port("/dev/ttyS1")])
        self.assertIsNone(find_mycobot_port())
        self.assertEqual(get_default_port(), "/dev/ttyS1")

    def test_default_without_ports(self):
        self.patch_ports([])
        self.assertTrue(get_default_port())


if __name__ == '__main__':
    unittest.main()
