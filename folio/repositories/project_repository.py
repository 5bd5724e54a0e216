# folio/repositories/project_repository.py
import logging
from typing import Optional, List, Any, Iterable

from folio.models.schemas import Project, ProjectStatus
from folio.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProjectRepository(BaseRepository[Project]):
    """Repository for portfolio projects over an in-memory collection."""

    def __init__(self, projects: Iterable[Project]):
        self._projects: List[Project] = list(projects)
        slugs = [project.slug for project in self._projects]
        if len(slugs) != len(set(slugs)):
            raise ValueError("Duplicate project slugs")

    async def get_by_slug(self, slug: str) -> Optional[Project]:
        for project in self._projects:
            if project.slug == slug:
                return project
        return None

    async def get_all(self, **filters: Any) -> List[Project]:
        """Fetch projects, optionally by status and featured flag."""
        status = filters.get("status")
        featured = filters.get("featured")
        if status is not None and not isinstance(status, ProjectStatus):
            status = ProjectStatus(status)

        return [
            project for project in self._projects
            if (status is None or project.status == status)
            and (featured is None or project.featured == featured)
        ]

    async def count(self, **filters: Any) -> int:
        return len(await self.get_all(**filters))
