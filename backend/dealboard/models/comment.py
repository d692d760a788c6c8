"""Threaded comments on deals."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.deal import Deal
    from dealboard.models.user import User


class Comment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A comment, or a reply when ``parent_id`` is set.

    Replies are loaded flat with the rest of the deal's comments and nested
    in memory, so there is no ORM relationship between parent and child.
    Deleting a comment blanks it instead of removing the row so its replies
    keep their place in the thread.
    """

    __tablename__ = "comments"

    deal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    edited_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_comments_deal_created", "deal_id", "created_at"),
        Index("idx_comments_parent", "parent_id"),
    )

    user: Mapped["User"] = relationship(back_populates="comments")
    deal: Mapped["Deal"] = relationship(back_populates="comments")

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, deal_id={self.deal_id}, parent_id={self.parent_id})>"
