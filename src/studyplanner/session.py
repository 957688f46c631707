"""Connects the countdown timer to session recording."""

import logging
from datetime import datetime
from typing import Callable

from .models import StudySession, Subject
from .stats import StudyStats
from .timer import CountdownTimer

logger = logging.getLogger(__name__)


def seconds_to_minutes(seconds: int) -> int:
    """Whole minutes, half a minute rounding up."""
    return int(seconds / 60 + 0.5)


class SessionController:
    """Drives one timer and records a session each time a run is stopped."""

    def __init__(
        self,
        timer: CountdownTimer,
        stats: StudyStats,
        subject: Subject = Subject.PHYSICS,
        label: str = "study",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._timer = timer
        self._stats = stats
        self._subject = subject
        self._label = label
        self._clock = clock
        self._started_at: datetime | None = None

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    @property
    def subject(self) -> Subject:
        return self._subject

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    def today_minutes(self) -> int:
        return self._stats.today_minutes()

    def select_subject(self, subject: Subject) -> bool:
        if self._timer.running:
            logger.warning("Cannot change subject while the timer is running")
            return False
        self._subject = subject
        return True

    def start(self) -> None:
        if self._started_at is None and not self._timer.running:
            self._started_at = self._clock()
        self._timer.start()

    def pause(self) -> None:
        self._timer.pause()

    def toggle(self) -> None:
        if self._timer.running:
            self.pause()
        else:
            self.start()

    def stop(self) -> StudySession | None:
        """End the current run, recording it if at least a minute was studied."""
        session = None
        if self._started_at is not None:
            minutes = seconds_to_minutes(self._timer.elapsed_seconds)
            session = self._stats.record_session(
                self._subject,
                minutes,
                start_time=self._started_at,
                end_time=self._clock(),
                notes=f"{minutes} minute {self._label} session",
            )
            if session is None:
                logger.info("Run shorter than a minute, nothing recorded")
        self.reset()
        return session

    def reset(self) -> None:
        """Discard the current run without recording it."""
        self._timer.reset()
        self._started_at = None
