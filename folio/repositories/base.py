# folio/repositories/base.py
from abc import ABC, abstractmethod
from typing import Optional, List, Any, Generic, TypeVar

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract read-only repository over site content, addressed by slug."""

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[T]:
        """Retrieve a single entity by its slug."""
        pass

    @abstractmethod
    async def get_all(self, **filters: Any) -> List[T]:
        """Retrieve entities matching the given filters, in source order."""
        pass

    @abstractmethod
    async def count(self, **filters: Any) -> int:
        """Count entities matching the given filters."""
        pass
