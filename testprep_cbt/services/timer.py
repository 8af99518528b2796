"""
services/timer.py

Countdown timer for one attempt.

State machine: idle -> running -> {expired | stopped}
Single-threaded: the host owns the 1-second wake-up and calls tick() (or
sync() when it only wakes up on user interaction). The expiry callback runs
synchronously inside the tick that reaches zero.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from config import TIMER_WARNING_SECONDS
from testprep_cbt.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"
    STOPPED = "stopped"


class CountdownTimer:
    """
    Counts whole seconds down from the configured duration to zero.

    Args:
        on_expire: Called once when the remaining time reaches zero while running.
        clock:     Monotonic seconds source used by sync().
    """

    def __init__(
        self,
        on_expire: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_expire = on_expire
        self._clock = clock
        self.state = TimerState.IDLE
        self.duration_seconds = 0
        self.seconds_remaining = 0
        self._last_tick = 0.0

    # ── control ──────────────────────────────────────────────────────────────

    def start(self, duration_seconds: int) -> None:
        """(Re)start from the full duration. Replaces any running countdown."""
        if duration_seconds <= 0:
            raise InvalidConfiguration(f"duration must be positive, got {duration_seconds}s")
        self.duration_seconds = int(duration_seconds)
        self.seconds_remaining = self.duration_seconds
        self.state = TimerState.RUNNING
        self._last_tick = self._clock()

    def stop(self) -> None:
        if self.state == TimerState.RUNNING:
            self.state = TimerState.STOPPED

    def tick(self) -> None:
        """One elapsed second."""
        if self.state != TimerState.RUNNING:
            return
        if self.seconds_remaining > 0:
            self.seconds_remaining -= 1
        if self.seconds_remaining == 0:
            self.state = TimerState.EXPIRED
            logger.info(f"Timer expired after {self.duration_seconds}s")
            if self.on_expire:
                self.on_expire()

    def sync(self) -> int:
        """
        Apply every whole second elapsed on the clock since the last tick.

        Returns:
            Number of ticks applied.
        """
        if self.state != TimerState.RUNNING:
            return 0
        due = int(self._clock() - self._last_tick)
        applied = 0
        while applied < due and self.state == TimerState.RUNNING:
            self.tick()
            applied += 1
        self._last_tick += applied
        return applied

    # ── derived values ───────────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        return self.state == TimerState.RUNNING

    @property
    def is_expired(self) -> bool:
        return self.state == TimerState.EXPIRED

    @property
    def elapsed_seconds(self) -> int:
        """Same formula for manual submit and expiry: duration - remaining."""
        return self.duration_seconds - self.seconds_remaining

    @property
    def total_minutes(self) -> int:
        return self.seconds_remaining // 60

    @property
    def hours(self) -> int:
        return self.seconds_remaining // 3600

    @property
    def minutes(self) -> int:
        return (self.seconds_remaining % 3600) // 60

    @property
    def seconds(self) -> int:
        return self.seconds_remaining % 60

    @property
    def is_warning(self) -> bool:
        return self.is_active and 0 < self.seconds_remaining <= TIMER_WARNING_SECONDS

    def format_clock(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def format_duration(seconds: Optional[float]) -> str:
    """
    Time taken as shown in reports.

    ``MM:SS`` below an hour, ``HH:MM:SS`` above, ``N/A`` when unknown.
    """
    if seconds is None or seconds < 0:
        return "N/A"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"
