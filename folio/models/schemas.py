# folio/models/schemas.py
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from folio.utils import calculate_reading_time, generate_slug

SLUG_PATTERN = r'^[a-z0-9]+(?:-[a-z0-9]+)*$'


class BlogCategory(str, Enum):
    TECHNOLOGY = 'technology'
    HEALTH = 'health'
    CALISTHENICS = 'calisthenics'
    GUITAR = 'guitar'
    LIFESTYLE = 'lifestyle'
    OTHER = 'other'


class ProjectStatus(str, Enum):
    COMPLETED = 'completed'
    IN_PROGRESS = 'in-progress'
    PLANNED = 'planned'


class SocialLinks(BaseModel):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    youtube: Optional[str] = None


class Author(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    avatar: str = ''
    bio: str = ''
    email: EmailStr
    social_links: SocialLinks = Field(default_factory=SocialLinks)


class BlogPost(BaseModel):
    id: str
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., pattern=SLUG_PATTERN, max_length=200)
    excerpt: str = Field(..., max_length=500)
    content: str = ''
    category: BlogCategory
    tags: List[str] = Field(default_factory=list)
    author: Author
    cover_image: str = ''
    published_at: datetime
    updated_at: datetime
    reading_time: Optional[int] = Field(None, ge=1)
    featured: bool = False
    published: bool = True

    @model_validator(mode='before')
    @classmethod
    def derive_slug(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get('slug') and data.get('title'):
            slug = generate_slug(data['title'])
            if not slug:
                raise ValueError(f"Cannot derive a slug from title {data['title']!r}; set slug explicitly")
            data = {**data, 'slug': slug}
        return data

    @field_validator('tags')
    @classmethod
    def collapse_duplicate_tags(cls, v: List[str]) -> List[str]:
        seen = set()
        tags = []
        for tag in v:
            key = tag.strip().lower()
            if key and key not in seen:
                seen.add(key)
                tags.append(tag.strip())
        return tags

    @model_validator(mode='after')
    def fill_reading_time(self) -> 'BlogPost':
        if self.reading_time is None:
            self.reading_time = calculate_reading_time(self.content)
        if self.updated_at < self.published_at:
            raise ValueError('updated_at must not be earlier than published_at')
        return self


class Project(BaseModel):
    id: str
    slug: str = Field(..., pattern=SLUG_PATTERN, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    short_description: str = Field(..., max_length=300)
    description: str = ''
    features: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    image_url: str = ''
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False
    status: ProjectStatus
    start_date: date
    end_date: Optional[date] = None

    @model_validator(mode='after')
    def check_date_range(self) -> 'Project':
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError('end_date must not be earlier than start_date')
        return self


class ContactFormData(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
