"""Category model for deal classification."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.deal import Deal


class Category(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Deal category (e.g. 'Electronics', 'Groceries')."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False, comment="URL-friendly identifier")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, comment="Icon identifier (e.g., 'laptop', 'cpu')")

    deals: Mapped[list["Deal"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, slug='{self.slug}', name='{self.name}')>"
