"""Shared utilities"""

from .clock import Clock, SystemClock, SYSTEM_CLOCK

__all__ = ['Clock', 'SystemClock', 'SYSTEM_CLOCK']
