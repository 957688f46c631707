"""Recent activity feed shown on the dashboard."""

import logging
import uuid
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from .models import Activity, ActivityKind, Subject
from .serialization import document_to_dict, model_to_document
from .storage import ACTIVITIES_KEY, Store, safe_load, safe_save

logger = logging.getLogger(__name__)

MAX_ACTIVITIES = 100


class ActivityLog:
    """Append-only activity feed capped at the most recent entries."""

    def __init__(self, store: Store, clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self._clock = clock

    def _load(self) -> list[Activity]:
        raw = safe_load(self._store, ACTIVITIES_KEY, [])
        if not isinstance(raw, list):
            return []
        activities = []
        for item in raw:
            try:
                activities.append(Activity.model_validate(document_to_dict(item)))
            except (ValidationError, AttributeError):
                logger.debug("Skipping malformed activity record")
        return activities

    def add(
        self,
        kind: ActivityKind,
        description: str,
        subject: Subject | None = None,
    ) -> Activity:
        activity = Activity(
            id=uuid.uuid4().hex,
            kind=kind,
            description=description,
            subject=subject,
            timestamp=self._clock(),
        )
        activities = self._load()
        activities.append(activity)
        activities = activities[-MAX_ACTIVITIES:]
        safe_save(self._store, ACTIVITIES_KEY, [model_to_document(a) for a in activities])
        return activity

    def recent(self, limit: int = 10) -> list[Activity]:
        """Most recent activities, newest first."""
        activities = sorted(self._load(), key=lambda a: a.timestamp, reverse=True)
        return activities[:limit]
