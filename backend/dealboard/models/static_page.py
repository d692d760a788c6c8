"""StaticPage model for CMS pages such as /about or /privacy."""

from typing import Optional

from sqlalchemy import String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class StaticPage(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Root-managed content page served by slug."""

    __tablename__ = "static_pages"

    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<StaticPage(slug='{self.slug}')>"
