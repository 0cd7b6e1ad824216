"""
Time source for loops and deadlines

Every timer-driven part of the driver (sampler ticks, playback pacing,
command deadlines) asks a Clock instead of calling the time module directly,
so tests can substitute a virtual one.
"""

import time


class Clock:
    """Monotonic time in seconds plus a blocking sleep"""

    def monotonic(self) -> float:
        raise NotImplementedError

    def sleep(self, seconds: float):
        raise NotImplementedError


class SystemClock(Clock):
    """Wall clock backed by time.monotonic/time.sleep"""

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float):
        if seconds > 0:
            time.sleep(seconds)


SYSTEM_CLOCK = SystemClock()
