"""
Unit tests for incremental frame extraction
"""

import unittest

from mycobot_pro.hardware import FrameBuffer, encode_frame, extract_frames

ANGLES_REPLY = encode_frame(0x20, bytes(range(12)))
POWER_REPLY = encode_frame(0x12, b"\x01")


class TestExtractFrames(unittest.TestCase):

    def test_single_complete_frame(self):
        buffer = bytearray(POWER_REPLY)
        frames = extract_frames(buffer)
        self.assertEqual(len(frames), 1)
        self.assertEqual(frames[0].command_id, 0x12)
        self.assertEqual(frames[0].payload, b"\x01")
        self.assertEqual(len(buffer), 0)

    def test_partial_frame_is_kept(self):
        buffer = bytearray(ANGLES_REPLY[:7])
        self.assertEqual(extract_frames(buffer), [])
        self.assertEqual(bytes(buffer), ANGLES_REPLY[:7])

    def test_header_only_waits_for_length(self):
        buffer = bytearray(b"\xFE\xFE")
        self.assertEqual(extract_frames(buffer), [])
        self.assertEqual(len(buffer), 2)

    def test_garbage_before_header_is_skipped(self):
        stats = {}
        buffer = bytearray(b"\x00\x13\xFA\x42" + POWER_REPLY)
        frames = extract_frames(buffer, stats)
        self.assertEqual([f.command_id for f in frames], [0x12])
        self.assertEqual(stats["discarded_bytes"], 4)

    def test_no_header_pair_discards_buffer(self):
        buffer = bytearray(b"\x01\x02\x03\xFA")
        self.assertEqual(extract_frames(buffer), [])
        self.assertEqual(len(buffer), 0)

    def test_trailing_header_byte_is_kept(self):
        """A frame split between its two header bytes is not lost"""
        buffer = bytearray(b"\x01\x02" + POWER_REPLY[:1])
        self.assertEqual(extract_frames(buffer), [])
        self.assertEqual(bytes(buffer), b"\xFE")

        buffer.extend(POWER_REPLY[1:])
        frames = extract_frames(buffer)
        self.assertEqual([f.command_id for f in frames], [0x12])

    def test_bad_footer_is_dropped_and_counted(self):
        stats = {}
        bad = bytes([0xFE, 0xFE, 0x03, 0x12, 0x01, 0x00])
        buffer = bytearray(bad + POWER_REPLY)
        frames = extract_frames(buffer, stats)
        self.assertEqual(len(frames), 1)
        self.assertEqual(frames[0].payload, b"\x01")
        self.assertEqual(stats["dropped_frames"], 1)
        self.assertEqual(len(buffer), 0)

    def test_too_short_length_is_dropped(self):
        stats = {}
        buffer = bytearray(b"\xFE\xFE\x01\x20" + POWER_REPLY)
        frames = extract_frames(buffer, stats)
        self.assertEqual([f.command_id for f in frames], [0x12])
        self.assertEqual(stats["dropped_frames"], 1)

    def test_back_to_back_frames(self):
        buffer = bytearray(ANGLES_REPLY + POWER_REPLY + ANGLES_REPLY)
        frames = extract_frames(buffer)
        self.assertEqual([f.command_id for f in frames], [0x20, 0x12, 0x20])


class TestFrameBuffer(unittest.TestCase):

    def test_every_split_point_yields_same_frames(self):
        """Chunk boundaries never change what gets decoded"""
        stream = b"\x55" + ANGLES_REPLY + POWER_REPLY
        expected = extract_frames(bytearray(stream))
        self.assertEqual(len(expected), 2)

        for split in range(len(stream) + 1):
            fb = FrameBuffer()
            frames = fb.feed(stream[:split]) + fb.feed(stream[split:])
            self.assertEqual(frames, expected, f"split at {split}")
            self.assertEqual(len(fb), 0)

    def test_byte_by_byte(self):
        fb = FrameBuffer()
        frames = []
        for b in ANGLES_REPLY + POWER_REPLY:
            frames.extend(fb.feed(bytes([b])))
        self.assertEqual([f.command_id for f in frames], [0x20, 0x12])

    def test_stats_accumulate(self):
        fb = FrameBuffer()
        fb.feed(b"\xFE\xFE\x02\x20\x00")
        fb.feed(b"\x10\x11")
        self.assertEqual(fb.dropped_frames, 1)
        self.assertEqual(fb.discarded_bytes, 2)

    def test_clear(self):
        fb = FrameBuffer()
        fb.feed(ANGLES_REPLY[:5])
        fb.clear()
        self.assertEqual(len(fb), 0)
        self.assertEqual(fb.feed(POWER_REPLY)[0].command_id, 0x12)


if __name__ == '__main__':
    unittest.main()
