"""
Shared test doubles: a scripted transport and a virtual clock
"""

import threading
import time
from typing import Callable, List, Optional

from mycobot_pro.config import Settings
from mycobot_pro.control import MyCobotController
from mycobot_pro.hardware import Frame, Transport, decode_frame
from mycobot_pro.utils import Clock


class FakeTransport(Transport):
    """
    Records every written frame; replies come from ``responder`` or ``inject``

    ``responder(frame)`` runs on the writer thread and may return reply bytes.
    """

    def __init__(self, responder: Optional[Callable[[Frame], Optional[bytes]]] = None):
        self.responder = responder
        self.writes: List[bytes] = []
        self.write_error: Optional[Exception] = None
        self.open_count = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self):
        self._open = True
        self.open_count += 1

    def close(self):
        self._open = False

    def write(self, data: bytes):
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(bytes(data))
        if self.responder is not None:
            reply = self.responder(decode_frame(bytes(data)))
            if reply is not None:
                self.inject(reply)

    def inject(self, data: bytes):
        """Deliver bytes as if read from the port"""
        self.on_data(bytes(data))

    def lose(self, error: Exception = None):
        """Simulate the cable being pulled"""
        self._open = False
        self.on_closed(error)

    @property
    def written_ids(self) -> List[int]:
        return [w[3] for w in self.writes]


class FakeClock(Clock):
    """Virtual time: sleep() returns at once and advances the clock"""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []
        self._lock = threading.Lock()

    def monotonic(self) -> float:
        with self._lock:
            return self.now

    def sleep(self, seconds: float):
        with self._lock:
            self.sleeps.append(seconds)
            self.now += max(seconds, 0.0)


def wait_until(condition: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll ``condition`` on the real clock"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.005)
    return condition()


def make_controller(transport: Transport, **settings) -> MyCobotController:
    """Controller with no board settle delay"""
    settings.setdefault("settle_time", 0.0)
    return MyCobotController(transport=transport, settings=Settings(**settings))
