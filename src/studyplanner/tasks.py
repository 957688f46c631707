"""Task collection backing the subject progress figures."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .models import ActivityKind, Subject, Task, TaskPriority, TaskStatus
from .serialization import model_to_document
from .stats import StudyStats, load_tasks
from .storage import TASKS_KEY, Store, safe_save

logger = logging.getLogger(__name__)


@dataclass
class TaskCounts:
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0


class TaskStore:
    """CRUD over stored tasks. Status changes refresh the subject progress."""

    def __init__(
        self,
        store: Store,
        stats: StudyStats,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._stats = stats
        self._clock = clock

    def _save(self, tasks: list[Task]) -> None:
        safe_save(self._store, TASKS_KEY, [model_to_document(t) for t in tasks])

    def all_tasks(self) -> list[Task]:
        return load_tasks(self._store)

    def get(self, task_id: str) -> Task | None:
        return next((t for t in self.all_tasks() if t.id == task_id), None)

    def resolve_id(self, prefix: str) -> str | None:
        """Expand an id prefix to a full task id if exactly one task matches."""
        matches = [t.id for t in self.all_tasks() if t.id.startswith(prefix)]
        return matches[0] if len(matches) == 1 else None

    def by_subject(self, subject: Subject) -> list[Task]:
        return [t for t in self.all_tasks() if t.subject == subject]

    def create(
        self,
        title: str,
        subject: Subject,
        priority: TaskPriority = TaskPriority.MEDIUM,
        description: str | None = None,
        due_date: datetime | None = None,
    ) -> Task:
        task = Task(
            id=uuid.uuid4().hex,
            title=title.strip(),
            description=description,
            subject=subject,
            priority=priority,
            due_date=due_date,
            created_at=self._clock(),
        )
        tasks = self.all_tasks()
        tasks.append(task)
        self._save(tasks)
        self._stats.activity.add(
            ActivityKind.TASK_CREATED, f'Created task "{task.title}"', subject=task.subject
        )
        self._stats.refresh_task_progress()
        logger.debug("Created task %s (%s)", task.id, task.subject)
        return task

    def set_status(self, task_id: str, status: TaskStatus) -> Task | None:
        """Change a task's status. Returns None if the task does not exist."""
        tasks = self.all_tasks()
        for index, task in enumerate(tasks):
            if task.id != task_id:
                continue
            updates: dict = {"status": status}
            newly_completed = (
                status == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED
            )
            if newly_completed:
                updates["completed_at"] = self._clock()
            updated = task.model_copy(update=updates)
            tasks[index] = updated
            self._save(tasks)
            if newly_completed:
                self._stats.activity.add(
                    ActivityKind.TASK_COMPLETED,
                    f'Completed task "{updated.title}"',
                    subject=updated.subject,
                )
            self._stats.refresh_task_progress()
            return updated
        logger.warning("Task %s not found", task_id)
        return None

    def complete(self, task_id: str) -> Task | None:
        return self.set_status(task_id, TaskStatus.COMPLETED)

    def delete(self, task_id: str) -> bool:
        tasks = self.all_tasks()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._save(remaining)
        self._stats.refresh_task_progress()
        return True

    def counts(self) -> TaskCounts:
        now = self._clock()
        counts = TaskCounts()
        for task in self.all_tasks():
            counts.total += 1
            if task.status == TaskStatus.COMPLETED:
                counts.completed += 1
                continue
            if task.status == TaskStatus.PENDING:
                counts.pending += 1
            else:
                counts.in_progress += 1
            if task.due_date is not None and task.due_date < now:
                counts.overdue += 1
        return counts
