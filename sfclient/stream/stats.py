# sfclient/stream/stats.py
"""
Rate and volume counters for the streaming session.

Counters keep a lifetime total plus a sliding-window rate. Block and byte
counters use a one second window, the reconnect counter a one minute one.
"""

import time
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

Clock = Callable[[], float]


class RateCounter:
    """Sum of the increments seen during the last `window` seconds."""

    def __init__(self, window: float, clock: Clock = time.monotonic):
        self.window = window
        self._clock = clock
        self._events: Deque[Tuple[float, int]] = deque()
        self._sum = 0

    def incr(self, value: int) -> None:
        self._events.append((self._clock(), value))
        self._sum += value

    def rate(self) -> int:
        cutoff = self._clock() - self.window
        while self._events and self._events[0][0] <= cutoff:
            _, value = self._events.popleft()
            self._sum -= value
        return self._sum


class Counter:
    def __init__(self, unit: str, time_unit: str, window: float, clock: Clock = time.monotonic):
        self.unit = unit
        self.time_unit = time_unit
        self.total = 0
        self._rate = RateCounter(window, clock)

    def inc_by(self, value: int) -> None:
        if value <= 0:
            return
        self._rate.incr(value)
        self.total += value

    def rate(self) -> int:
        return self._rate.rate()

    def overall(self, elapsed: float) -> str:
        rate = float(self.total)
        minutes = elapsed / 60.0
        if minutes > 1:
            rate = rate / minutes
        return f"{int(rate)} {self.unit}/min ({self.total} {self.unit} total)"

    def __str__(self) -> str:
        return f"{self.rate()} {self.unit}/{self.time_unit} ({self.total} total)"


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "n/a"
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    if hours:
        return f"{hours}h{minutes}m{secs:.3f}s"
    if minutes:
        return f"{minutes}m{secs:.3f}s"
    return f"{secs:.3f}s"


class SessionStats:
    """Cumulative counters of one streaming session, mutated by the session controller only."""

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self.start_time = clock()
        self.time_to_first_block: Optional[float] = None
        self.block_received = Counter("block", "s", window=1.0, clock=clock)
        self.bytes_received = Counter("byte", "s", window=1.0, clock=clock)
        self.restart_count = Counter("restart", "m", window=60.0, clock=clock)

    def duration(self) -> float:
        return self._clock() - self.start_time

    def record_block(self, payload_size: int) -> None:
        if self.time_to_first_block is None:
            self.time_to_first_block = self._clock() - self.start_time

        self.block_received.inc_by(1)
        self.bytes_received.inc_by(payload_size)

    def record_restart(self) -> None:
        self.restart_count.inc_by(1)

    def __str__(self) -> str:
        return f"block={self.block_received} bytes={self.bytes_received}"

    def summary_lines(self, elapsed: Optional[float] = None) -> List[str]:
        """Human readable completion report."""
        elapsed = self.duration() if elapsed is None else elapsed

        lines = [
            "",
            "Completed streaming",
            f"Duration: {format_duration(elapsed)}",
            f"Time to first block: {format_duration(self.time_to_first_block)}",
        ]
        if self.restart_count.total > 0:
            lines.append(f"Restart count: {self.restart_count.overall(elapsed)}")

        lines.extend([
            "",
            f"Block received: {self.block_received.overall(elapsed)}",
            f"Bytes received: {self.bytes_received.overall(elapsed)}",
        ])
        return lines
