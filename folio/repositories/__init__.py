# folio/repositories/__init__.py
from folio.repositories.post_repository import PostRepository
from folio.repositories.project_repository import ProjectRepository

__all__ = ["PostRepository", "ProjectRepository"]
