"""BlogPost model for editorial content."""

import uuid
from typing import Optional

from sqlalchemy import String, Text, ForeignKey, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

POST_DRAFT = "draft"
POST_PUBLISHED = "published"


class BlogPost(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A blog article. Only ``published`` posts are public."""

    __tablename__ = "blog_posts"

    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    featured_image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    read_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Minutes")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=POST_DRAFT, index=True)

    def __repr__(self) -> str:
        return f"<BlogPost(slug='{self.slug}', status={self.status})>"
