"""Data models for the study planner.

These models define the schema of every record kept in the local store.
Records are persisted as camelCase JSON documents (see serialization.py).
"""

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class Subject(StrEnum):
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    MATHEMATICS = "Mathematics"


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActivityKind(StrEnum):
    STUDY_SESSION = "study_session"
    TASK_CREATED = "task_created"
    TASK_COMPLETED = "task_completed"
    RESOURCE_ADDED = "resource_added"


class ResourceSubject(StrEnum):
    """Subjects a resource can be filed under. General covers all three."""

    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"
    MATHEMATICS = "Mathematics"
    GENERAL = "General"


class ResourceCategory(StrEnum):
    BOOK = "book"
    VIDEO = "video"
    TOOL = "tool"
    PDF = "pdf"
    WEBSITE = "website"


def _empty_progress() -> dict[Subject, int]:
    return {subject: 0 for subject in Subject}


class Task(BaseModel):
    """Store: tasks[]"""

    id: str
    title: str
    description: str | None = None
    subject: Subject
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    due_date: datetime | None = None
    created_at: datetime
    completed_at: datetime | None = None


class StudySession(BaseModel):
    """Store: sessions[]

    Immutable once recorded.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    subject: Subject
    duration_minutes: Annotated[int, Field(ge=1)]
    start_time: datetime
    end_time: datetime
    notes: str | None = None


class UserStats(BaseModel):
    """Store: userStats

    Single aggregate instance, mutated only by the statistics engine.
    """

    total_study_time_minutes: Annotated[int, Field(ge=0)] = 0
    current_streak_days: Annotated[int, Field(ge=0)] = 0
    last_study_date: date | None = None
    subject_progress_percent: dict[Subject, Annotated[int, Field(ge=0, le=100)]] = Field(
        default_factory=_empty_progress
    )
    total_tasks: Annotated[int, Field(ge=0)] = 0
    completed_tasks: Annotated[int, Field(ge=0)] = 0


class Resource(BaseModel):
    """Store: resources[]"""

    id: str
    title: Annotated[str, Field(min_length=1)]
    url: Annotated[str, Field(pattern=r"^https?://\S+$")]
    description: str | None = None
    subject: ResourceSubject = ResourceSubject.GENERAL
    category: ResourceCategory = ResourceCategory.WEBSITE
    created_at: datetime


class Activity(BaseModel):
    """Store: activities[]"""

    id: str
    kind: ActivityKind
    description: str
    subject: Subject | None = None
    timestamp: datetime


class DailyTotal(BaseModel):
    """Minutes studied on one calendar day. Derived, never stored."""

    day: date
    total_minutes: Annotated[int, Field(ge=0)] = 0
