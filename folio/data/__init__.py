# folio/data/__init__.py
from folio.data.blog_posts import SAMPLE_POSTS
from folio.data.projects import SAMPLE_PROJECTS

__all__ = ["SAMPLE_POSTS", "SAMPLE_PROJECTS"]
