"""Study statistics: session log, totals, streaks and subject progress."""

import logging
import uuid
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Callable

from pydantic import ValidationError

from .activity import ActivityLog
from .models import (
    ActivityKind,
    DailyTotal,
    StudySession,
    Subject,
    Task,
    TaskStatus,
    UserStats,
)
from .serialization import document_to_dict, model_to_document
from .storage import SESSIONS_KEY, TASKS_KEY, USER_STATS_KEY, Store, safe_load, safe_save

logger = logging.getLogger(__name__)


def next_streak(current: int, last_study_date: date | None, today: date) -> int:
    """Compute the streak after studying on `today`.

    Only the last study date is consulted; sessions recorded out of
    chronological order do not repair or extend an earlier streak.
    """
    if last_study_date == today:
        return current
    if last_study_date == today - timedelta(days=1):
        return current + 1
    return 1


def progress_percent(completed: int, total: int) -> int:
    """Percentage of completed items, half rounding up. 0 when total is 0."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


def load_sessions(store: Store) -> list[StudySession]:
    """Load the session log, skipping records that fail validation."""
    raw = safe_load(store, SESSIONS_KEY, [])
    if not isinstance(raw, list):
        logger.warning("Session log is malformed, starting empty")
        return []
    sessions: list[StudySession] = []
    for item in raw:
        try:
            sessions.append(StudySession.model_validate(document_to_dict(item)))
        except (ValidationError, AttributeError):
            logger.warning("Skipping malformed session record: %r", item)
    return sessions


def load_tasks(store: Store) -> list[Task]:
    """Load the task collection, skipping records that fail validation."""
    raw = safe_load(store, TASKS_KEY, [])
    if not isinstance(raw, list):
        logger.warning("Task collection is malformed, starting empty")
        return []
    tasks: list[Task] = []
    for item in raw:
        try:
            tasks.append(Task.model_validate(document_to_dict(item)))
        except (ValidationError, AttributeError):
            logger.warning("Skipping malformed task record: %r", item)
    return tasks


def _subject_percent(tasks: list[Task], subject: Subject) -> int:
    subject_tasks = [t for t in tasks if t.subject == subject]
    completed = sum(1 for t in subject_tasks if t.status == TaskStatus.COMPLETED)
    return progress_percent(completed, len(subject_tasks))


class DailyTotals:
    """Minutes studied per day over the last N days, oldest first.

    Each iteration re-reads the session log, so the same object can be
    iterated again after new sessions are recorded.
    """

    def __init__(self, store: Store, last_n_days: int, today: Callable[[], date]):
        self._store = store
        self._last_n_days = max(0, last_n_days)
        self._today = today

    def __len__(self) -> int:
        return self._last_n_days

    def __iter__(self) -> Iterator[DailyTotal]:
        if self._last_n_days == 0:
            return
        today = self._today()
        first_day = today - timedelta(days=self._last_n_days - 1)
        minutes: dict[date, int] = {}
        for session in load_sessions(self._store):
            day = session.start_time.date()
            if first_day <= day <= today:
                minutes[day] = minutes.get(day, 0) + session.duration_minutes
        for offset in range(self._last_n_days):
            day = first_day + timedelta(days=offset)
            yield DailyTotal(day=day, total_minutes=minutes.get(day, 0))


class StudyStats:
    """Records study sessions and maintains the aggregate UserStats."""

    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = datetime.now,
        activity: ActivityLog | None = None,
    ):
        self._store = store
        self._clock = clock
        self._activity = activity or ActivityLog(store, clock=clock)

    @property
    def activity(self) -> ActivityLog:
        return self._activity

    def today(self) -> date:
        return self._clock().date()

    @property
    def user_stats(self) -> UserStats:
        """Current aggregate stats, zeroed if the stored record is unusable."""
        raw = safe_load(self._store, USER_STATS_KEY, None)
        if raw is None:
            return UserStats()
        try:
            return UserStats.model_validate(document_to_dict(raw))
        except (ValidationError, AttributeError):
            logger.warning("Stored user stats are malformed, using defaults")
            return UserStats()

    def _save_stats(self, stats: UserStats) -> None:
        safe_save(self._store, USER_STATS_KEY, model_to_document(stats))

    def record_session(
        self,
        subject: Subject,
        duration_minutes: int,
        start_time: datetime,
        end_time: datetime,
        notes: str | None = None,
    ) -> StudySession | None:
        """Append a session and update totals and streak.

        Sessions shorter than one minute, or ones the store fails to
        persist, are discarded and return None.
        """
        if duration_minutes < 1:
            logger.debug("Discarding %s session under one minute", subject)
            return None

        session = StudySession(
            id=uuid.uuid4().hex,
            subject=Subject(subject),
            duration_minutes=duration_minutes,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
        )
        documents = safe_load(self._store, SESSIONS_KEY, [])
        if not isinstance(documents, list):
            documents = []
        documents.append(model_to_document(session))
        if not safe_save(self._store, SESSIONS_KEY, documents):
            # Totals must keep matching the session log
            logger.warning("Session log not saved, %s session dropped", session.subject)
            return None

        today = self.today()
        stats = self.user_stats
        stats.total_study_time_minutes += duration_minutes
        stats.current_streak_days = next_streak(
            stats.current_streak_days, stats.last_study_date, today
        )
        stats.last_study_date = today
        self._save_stats(stats)

        self._activity.add(
            ActivityKind.STUDY_SESSION,
            f"Studied {session.subject} for {duration_minutes} minutes",
            subject=session.subject,
        )
        logger.info(
            "Recorded %d minute %s session (total=%d, streak=%d)",
            duration_minutes,
            session.subject,
            stats.total_study_time_minutes,
            stats.current_streak_days,
        )
        return session

    def get_subject_progress(self, subject: Subject) -> int:
        """Percentage of the subject's tasks that are completed."""
        return _subject_percent(load_tasks(self._store), subject)

    def refresh_task_progress(self) -> UserStats:
        """Recompute task counts and per-subject progress from the task store."""
        tasks = load_tasks(self._store)
        stats = self.user_stats
        stats.total_tasks = len(tasks)
        stats.completed_tasks = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
        stats.subject_progress_percent = {
            subject: _subject_percent(tasks, subject) for subject in Subject
        }
        self._save_stats(stats)
        return stats

    def get_daily_totals(self, last_n_days: int) -> DailyTotals:
        return DailyTotals(self._store, last_n_days, self.today)

    def sessions(self) -> list[StudySession]:
        return load_sessions(self._store)

    def sessions_for(self, subject: Subject) -> list[StudySession]:
        return [s for s in self.sessions() if s.subject == subject]

    def todays_sessions(self) -> list[StudySession]:
        today = self.today()
        return [s for s in self.sessions() if s.start_time.date() == today]

    def today_minutes(self) -> int:
        return sum(s.duration_minutes for s in self.todays_sessions())
