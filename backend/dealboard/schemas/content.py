"""Blog post and static page Pydantic schemas."""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class BlogPostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    title: str
    summary: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    featured_image: Optional[str] = None
    read_time: Optional[int] = None
    status: str
    author_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class BlogPostCreateRequest(BaseModel):
    slug: str = Field(min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title: str = Field(min_length=1, max_length=300)
    summary: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = []
    featured_image: Optional[str] = Field(default=None, max_length=1000)
    read_time: Optional[int] = Field(default=None, ge=0)
    status: Literal["draft", "published"] = "draft"


class BlogPostUpdateRequest(BaseModel):
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    summary: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[List[str]] = None
    featured_image: Optional[str] = Field(default=None, max_length=1000)
    read_time: Optional[int] = Field(default=None, ge=0)
    status: Optional[Literal["draft", "published"]] = None


class StaticPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    title: str
    content: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: bool
    updated_at: datetime


class StaticPageCreateRequest(BaseModel):
    slug: str = Field(min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title: str = Field(min_length=1, max_length=300)
    content: Optional[str] = None
    meta_description: Optional[str] = Field(default=None, max_length=500)
    is_published: bool = True


class StaticPageUpdateRequest(BaseModel):
    slug: Optional[str] = Field(default=None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = None
    meta_description: Optional[str] = Field(default=None, max_length=500)
    is_published: Optional[bool] = None
