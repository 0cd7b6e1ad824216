"""
Tests for YAML settings
"""

import os
import tempfile
import unittest

import yaml

from mycobot_pro.config import COMMAND_TIMEOUTS, Settings


class TestSettings(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "conf", "settings.yaml")

    def tearDown(self):
        self._tmp.cleanup()

    def test_defaults(self):
        settings = Settings()
        self.assertIsNone(settings.port)
        self.assertEqual(settings.baudrate, 115200)
        self.assertEqual(settings.sample_rate, 20)
        self.assertEqual(settings.recording_mode, "angles")
        self.assertEqual(settings.command_timeouts, COMMAND_TIMEOUTS)

    def test_missing_file_gives_defaults(self):
        self.assertEqual(Settings.load(self.path), Settings())

    def test_save_and_load(self):
        settings = Settings(port="/dev/ttyUSB0", sample_rate=50, loop_playback=True)
        settings.command_timeouts["GET_ANGLES"] = 1.0
        settings.save(self.path)

        loaded = Settings.load(self.path)
        self.assertEqual(loaded, settings)
        self.assertEqual(loaded.command_timeouts["GET_ANGLES"], 1.0)

    def test_partial_file_and_unknown_keys(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            yaml.safe_dump({"move_speed": 40, "colour": "blue"}, f)

        with self.assertLogs("mycobot_pro.config.settings", level="WARNING"):
            settings = Settings.load(self.path)
        self.assertEqual(settings.move_speed, 40)
        self.assertEqual(settings.baudrate, 115200)

    def test_broken_yaml_gives_defaults(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write("port: [unclosed\n")
        self.assertEqual(Settings.load(self.path), Settings())

    def test_non_mapping_file_gives_defaults(self):
        os.makedirs(os.path.dirname(self.path))
        for content in ("- a\n- b\n", "42\n"):
            with open(self.path, "w") as f:
                f.write(content)
            with self.assertLogs("mycobot_pro.config.settings", level="WARNING"):
                self.assertEqual(Settings.load(self.path), Settings())

    def test_reset_to_defaults(self):
        settings = Settings(port="COM3", playback_speed=2.0)
        settings.reset_to_defaults()
        self.assertEqual(settings, Settings())


if __name__ == '__main__':
    unittest.main()
