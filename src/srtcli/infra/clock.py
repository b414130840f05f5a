from __future__ import annotations

from time import monotonic_ns

from srtcli.core.timecode import format_clock


class Stopwatch:
    """Monotonic elapsed-time counter with millisecond resolution."""

    def __init__(self) -> None:
        self._started_ns: int | None = None

    @classmethod
    def start_new(cls) -> "Stopwatch":
        stopwatch = cls()
        stopwatch.start()
        return stopwatch

    def start(self) -> None:
        self._started_ns = monotonic_ns()

    def elapsed_ms(self) -> int:
        if self._started_ns is None:
            return 0
        return (monotonic_ns() - self._started_ns) // 1_000_000


class PlaybackClock:
    def __init__(self, time_ms: int = 0) -> None:
        self.time_ms = time_ms

    def set_time_ms(self, time_ms: int) -> None:
        self.time_ms = time_ms

    def get_time(self) -> str:
        return format_clock(self.time_ms)
