"""
Wall-clock timing of a pipeline run, reported in the final summary.
"""

import time
from typing import Optional


class TimeTracker:
    """Monotonic stopwatch started and stopped by the RootOrchestrator."""

    def __init__(self) -> None:
        self._started: Optional[float] = None
        self._stopped: Optional[float] = None

    def start(self) -> None:
        self._started = time.monotonic()
        self._stopped = None

    def stop(self) -> float:
        self._stopped = time.monotonic()
        return self.elapsed_seconds

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since start (up to stop, if stopped); 0.0 before start."""
        if self._started is None:
            return 0.0
        end = time.monotonic() if self._stopped is None else self._stopped
        return end - self._started

    @property
    def elapsed_formatted(self) -> str:
        """``H:MM:SS`` for long runs, seconds with one decimal under a minute."""
        seconds = self.elapsed_seconds
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes, secs = divmod(int(seconds), 60)
        hours, minutes = divmod(minutes, 60)
        return f"{hours}:{minutes:02d}:{secs:02d}"
