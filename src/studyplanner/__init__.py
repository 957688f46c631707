from .models import (
    Activity,
    ActivityKind,
    DailyTotal,
    Resource,
    ResourceCategory,
    ResourceSubject,
    StudySession,
    Subject,
    Task,
    TaskPriority,
    TaskStatus,
    UserStats,
)

__all__ = [
    "Activity",
    "ActivityKind",
    "DailyTotal",
    "Resource",
    "ResourceCategory",
    "ResourceSubject",
    "StudySession",
    "Subject",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "UserStats",
]
