# folio/repositories/post_repository.py
import logging
from typing import Optional, List, Dict, Any, Iterable

from folio.blog_filter import filter_posts
from folio.constants import ALL_CATEGORIES
from folio.models.schemas import BlogCategory, BlogPost
from folio.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PostRepository(BaseRepository[BlogPost]):
    """Repository for BlogPost over an in-memory collection. Only published posts are visible."""

    def __init__(self, posts: Iterable[BlogPost]):
        self._posts: List[BlogPost] = list(posts)
        slugs = [post.slug for post in self._posts]
        duplicates = sorted({slug for slug in slugs if slugs.count(slug) > 1})
        if duplicates:
            raise ValueError(f"Duplicate blog post slugs: {', '.join(duplicates)}")
        logger.info(f"Post repository loaded with {len(self._posts)} posts")

    def _published(self) -> List[BlogPost]:
        return [post for post in self._posts if post.published]

    async def get_by_slug(self, slug: str) -> Optional[BlogPost]:
        """Fetch single published post by slug."""
        for post in self._published():
            if post.slug == slug:
                return post
        return None

    async def get_all(self, **filters: Any) -> List[BlogPost]:
        """Fetch published posts filtered by category, search, featured and tags."""
        return filter_posts(
            self._published(),
            selected_category=filters.get("category") or ALL_CATEGORIES,
            search_term=filters.get("search") or "",
            featured=filters.get("featured"),
            tags=filters.get("tags"),
        )

    async def get_featured(self, limit: int = 3) -> List[BlogPost]:
        return (await self.get_all(featured=True))[:limit]

    async def get_recent(self, limit: int = 3) -> List[BlogPost]:
        return self._published()[:limit]

    async def count(self, **filters: Any) -> int:
        """Get number of published posts matching the filters."""
        return len(await self.get_all(**filters))

    async def count_by_category(self) -> Dict[BlogCategory, int]:
        """Post count for every category, including empty ones."""
        counts = {category: 0 for category in BlogCategory}
        for post in self._published():
            counts[post.category] += 1
        return counts
