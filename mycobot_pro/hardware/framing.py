"""
Incremental frame extraction from a fragmented byte stream
"""

import logging
from typing import List

from .protocol import Frame, HEADER, FOOTER, PREFIX_SIZE

logger = logging.getLogger(__name__)

_HEADER_PAIR = bytes([HEADER, HEADER])
# Two header bytes plus the length byte
_LENGTH_OFFSET = 2


def extract_frames(buffer: bytearray, stats: dict = None) -> List[Frame]:
    """
    Consume every complete frame from the front of ``buffer``

    The buffer is modified in place: garbage before a header pair and every
    complete frame are removed, a trailing partial frame is left for the next
    call. A frame whose last byte is not the footer is consumed but not
    returned. If no header pair exists, the whole buffer is discarded except
    a final header byte.

    ``stats`` (optional) receives ``dropped_frames`` and ``discarded_bytes``
    increments.
    """
    frames = []

    while buffer:
        start = buffer.find(_HEADER_PAIR)
        if start == -1:
            # A lone trailing header byte may be the first half of the next pair
            keep = 1 if buffer[-1] == HEADER else 0
            _count(stats, "discarded_bytes", len(buffer) - keep)
            del buffer[:len(buffer) - keep]
            break

        if start > 0:
            _count(stats, "discarded_bytes", start)
            del buffer[:start]

        if len(buffer) <= _LENGTH_OFFSET:
            break

        total = _LENGTH_OFFSET + 1 + buffer[_LENGTH_OFFSET]
        if len(buffer) < total:
            break

        if total >= PREFIX_SIZE + 1 and buffer[total - 1] == FOOTER:
            frames.append(Frame(command_id=buffer[PREFIX_SIZE - 1],
                                payload=bytes(buffer[PREFIX_SIZE:total - 1])))
        else:
            _count(stats, "dropped_frames", 1)

        del buffer[:total]

    return frames


def _count(stats, key, amount):
    if stats is not None:
        stats[key] = stats.get(key, 0) + amount


class FrameBuffer:
    """Growable receive buffer fed by transport chunks"""

    def __init__(self):
        self._buffer = bytearray()
        self.stats = {"dropped_frames": 0, "discarded_bytes": 0}

    def feed(self, chunk: bytes) -> List[Frame]:
        """Append a chunk and return the frames it completed"""
        self._buffer.extend(chunk)
        dropped = self.stats["dropped_frames"]
        frames = extract_frames(self._buffer, self.stats)
        if self.stats["dropped_frames"] != dropped:
            logger.debug(f"Dropped {self.stats['dropped_frames'] - dropped} malformed frame(s)")
        return frames

    def clear(self):
        self._buffer.clear()

    @property
    def dropped_frames(self) -> int:
        return self.stats["dropped_frames"]

    @property
    def discarded_bytes(self) -> int:
        return self.stats["discarded_bytes"]

    def __len__(self):
        return len(self._buffer)
