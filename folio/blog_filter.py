# folio/blog_filter.py
"""Category and free-text filtering over a collection of blog posts.

The filter keeps the order of the source collection; it never ranks or
paginates. ``selected_category`` is either a :class:`BlogCategory` value or
the ``"all"`` sentinel.
"""
from typing import Iterable, List, Optional, Sequence, Union

from folio.constants import ALL_CATEGORIES
from folio.models.schemas import BlogCategory, BlogPost

CategorySelection = Union[BlogCategory, str]


def parse_category(value: Optional[CategorySelection]) -> Optional[BlogCategory]:
    """Return the selected category, or None for "all". Raises ValueError for unknown names."""
    if isinstance(value, BlogCategory):
        return value
    name = (value or '').strip().lower()
    if name in ('', ALL_CATEGORIES):
        return None
    try:
        return BlogCategory(name)
    except ValueError:
        raise ValueError(f"Unknown blog category: {value!r}") from None


def matches_category(post: BlogPost, category: Optional[BlogCategory]) -> bool:
    return category is None or post.category == category


def matches_search(post: BlogPost, search_term: str) -> bool:
    """Case-insensitive substring match over title, excerpt and tags."""
    if not search_term:
        return True
    needle = search_term.lower()
    return (
        needle in post.title.lower()
        or needle in post.excerpt.lower()
        or any(needle in tag.lower() for tag in post.tags)
    )


def matches_tags(post: BlogPost, tags: Sequence[str]) -> bool:
    # Every requested tag must be present on the post
    if not tags:
        return True
    post_tags = {tag.lower() for tag in post.tags}
    return all(tag.lower() in post_tags for tag in tags)


def filter_posts(
    posts: Iterable[BlogPost],
    selected_category: Optional[CategorySelection] = ALL_CATEGORIES,
    search_term: str = '',
    featured: Optional[bool] = None,
    tags: Optional[Sequence[str]] = None,
) -> List[BlogPost]:
    """Return the posts matching the category AND the search term, in source order."""
    category = parse_category(selected_category)
    search_term = search_term or ''
    tags = [tag for tag in (tags or []) if tag]

    return [
        post for post in posts
        if matches_category(post, category)
        and matches_search(post, search_term)
        and (featured is None or post.featured == featured)
        and matches_tags(post, tags)
    ]
