"""Countdown timer state machine."""

import logging
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Hashable

from .scheduler import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 25 * 60


class TimerPhase(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Preset:
    label: str
    minutes: int
    description: str

    @property
    def seconds(self) -> int:
        return self.minutes * 60


TIMER_PRESETS = (
    Preset("Pomodoro", 25, "Classic 25-minute focus session"),
    Preset("Short Break", 5, "Quick 5-minute break"),
    Preset("Long Break", 15, "Extended 15-minute break"),
    Preset("Focus Block", 45, "Deep focus 45-minute session"),
    Preset("Study Hour", 60, "Full hour study session"),
    Preset("Quick Review", 10, "10-minute review session"),
)


def find_preset(name: str) -> Preset | None:
    """Look up a preset by label, ignoring case, spaces and dashes."""
    wanted = name.replace("-", "").replace(" ", "").lower()
    for preset in TIMER_PRESETS:
        if preset.label.replace(" ", "").lower() == wanted:
            return preset
    return None


def format_duration(seconds: int) -> str:
    """Render seconds as MM:SS, or HH:MM:SS above one hour."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if seconds > 3600:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{seconds // 60:02d}:{secs:02d}"


class CountdownTimer:
    """In-memory countdown driven by a scheduler.

    At most one tick source is live at any time. Every transition out of
    RUNNING cancels it, and ticks from a cancelled source are ignored.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        total_seconds: int = DEFAULT_DURATION_SECONDS,
        on_tick: Callable[["CountdownTimer"], None] | None = None,
        on_expire: Callable[["CountdownTimer"], None] | None = None,
    ):
        total_seconds = int(total_seconds)
        if total_seconds <= 0:
            raise ValueError("total_seconds must be positive")
        self._scheduler = scheduler
        self._total_seconds = total_seconds
        self._remaining_seconds = total_seconds
        self._phase = TimerPhase.IDLE
        self._handle: Hashable | None = None
        self._generation = 0
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._lock = threading.RLock()

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._total_seconds

    @property
    def elapsed_seconds(self) -> int:
        return self._total_seconds - self._remaining_seconds

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._phase == TimerPhase.RUNNING

    @property
    def paused(self) -> bool:
        return self._phase == TimerPhase.PAUSED

    @property
    def progress_fraction(self) -> float:
        fraction = self.elapsed_seconds / self._total_seconds
        return min(1.0, max(0.0, fraction))

    @property
    def formatted_time(self) -> str:
        return format_duration(self._remaining_seconds)

    def start(self) -> None:
        """Start or resume the countdown. No-op if running or at zero."""
        with self._lock:
            if self._phase == TimerPhase.RUNNING:
                logger.debug("Timer already running, ignoring start")
                return
            if self._remaining_seconds <= 0:
                logger.debug("Timer has no time left, ignoring start")
                return
            self._generation += 1
            generation = self._generation
            self._phase = TimerPhase.RUNNING
            self._handle = self._scheduler.schedule_tick(lambda: self._tick(generation))
            logger.debug("Timer started with %d seconds left", self._remaining_seconds)

    def pause(self) -> None:
        with self._lock:
            if self._phase != TimerPhase.RUNNING:
                return
            self._cancel_ticks()
            self._phase = TimerPhase.PAUSED
            logger.debug("Timer paused with %d seconds left", self._remaining_seconds)

    def reset(self) -> None:
        """Stop ticking and restore the full duration."""
        with self._lock:
            self._cancel_ticks()
            self._remaining_seconds = self._total_seconds
            self._phase = TimerPhase.IDLE

    def set_duration(self, seconds: int) -> bool:
        """Select a new duration. Only allowed while not running.

        Returns True if the duration was applied.
        """
        with self._lock:
            seconds = int(seconds)
            if seconds <= 0:
                logger.warning("Ignoring non-positive timer duration: %s", seconds)
                return False
            if self._phase == TimerPhase.RUNNING:
                logger.warning("Cannot change duration while the timer is running")
                return False
            self._cancel_ticks()
            self._total_seconds = seconds
            self._remaining_seconds = seconds
            self._phase = TimerPhase.IDLE
            return True

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        self._generation += 1

    def _tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._phase != TimerPhase.RUNNING:
                return
            self._remaining_seconds = max(0, self._remaining_seconds - 1)
            expired = self._remaining_seconds == 0
            if expired:
                self._cancel_ticks()
                self._phase = TimerPhase.EXPIRED
                logger.info("Timer expired after %d seconds", self._total_seconds)

        if self._on_tick:
            self._on_tick(self)
        if expired and self._on_expire:
            self._on_expire(self)
