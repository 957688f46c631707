"""Saved study resource links."""

import logging
import uuid
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from .activity import ActivityLog
from .models import ActivityKind, Resource, ResourceCategory, ResourceSubject, Subject
from .serialization import document_to_dict, model_to_document
from .storage import RESOURCES_KEY, Store, safe_load, safe_save

logger = logging.getLogger(__name__)


class ResourceStore:
    """Create, list, filter and delete stored resource links."""

    def __init__(
        self,
        store: Store,
        activity: ActivityLog,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._activity = activity
        self._clock = clock

    def all_resources(self) -> list[Resource]:
        raw = safe_load(self._store, RESOURCES_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Resource collection is malformed, starting empty")
            return []
        resources: list[Resource] = []
        for item in raw:
            try:
                resources.append(Resource.model_validate(document_to_dict(item)))
            except (ValidationError, AttributeError):
                logger.warning("Skipping malformed resource record: %r", item)
        return resources

    def _save(self, resources: list[Resource]) -> bool:
        return safe_save(self._store, RESOURCES_KEY, [model_to_document(r) for r in resources])

    def get(self, resource_id: str) -> Resource | None:
        return next((r for r in self.all_resources() if r.id == resource_id), None)

    def resolve_id(self, prefix: str) -> str | None:
        """Expand an id prefix to a full resource id if exactly one matches."""
        matches = [r.id for r in self.all_resources() if r.id.startswith(prefix)]
        return matches[0] if len(matches) == 1 else None

    def by_subject(self, subject: ResourceSubject | Subject) -> list[Resource]:
        return [r for r in self.all_resources() if r.subject == subject]

    def by_category(self, category: ResourceCategory) -> list[Resource]:
        return [r for r in self.all_resources() if r.category == category]

    def search(
        self,
        query: str | None = None,
        subject: ResourceSubject | Subject | None = None,
        category: ResourceCategory | None = None,
    ) -> list[Resource]:
        """Filter resources. The query matches title, description or URL,
        ignoring case. Omitted filters match everything."""
        needle = (query or "").strip().lower()
        results = []
        for resource in self.all_resources():
            if subject is not None and resource.subject != subject:
                continue
            if category is not None and resource.category != category:
                continue
            if needle and not any(
                needle in (text or "").lower()
                for text in (resource.title, resource.description, resource.url)
            ):
                continue
            results.append(resource)
        return results

    def create(
        self,
        title: str,
        url: str,
        subject: ResourceSubject | Subject = ResourceSubject.GENERAL,
        category: ResourceCategory = ResourceCategory.WEBSITE,
        description: str | None = None,
    ) -> Resource:
        """Add a resource and log it to the activity feed.

        Raises pydantic.ValidationError for an empty title or a URL that
        is not http(s).
        """
        resource = Resource(
            id=uuid.uuid4().hex,
            title=title.strip(),
            url=url.strip(),
            description=description,
            subject=ResourceSubject(subject),
            category=ResourceCategory(category),
            created_at=self._clock(),
        )
        resources = self.all_resources()
        resources.append(resource)
        if not self._save(resources):
            logger.warning("Resource %s was not saved", resource.title)
            return resource
        # General resources are not tied to a subject in the feed
        feed_subject = (
            None if resource.subject == ResourceSubject.GENERAL else Subject(resource.subject)
        )
        self._activity.add(
            ActivityKind.RESOURCE_ADDED, f'Added resource "{resource.title}"', subject=feed_subject
        )
        logger.debug("Created resource %s (%s)", resource.id, resource.category)
        return resource

    def delete(self, resource_id: str) -> bool:
        resources = self.all_resources()
        remaining = [r for r in resources if r.id != resource_id]
        if len(remaining) == len(resources):
            return False
        return self._save(remaining)
