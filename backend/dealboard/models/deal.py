"""Deal model representing user-posted offers."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, ForeignKey, Numeric, DateTime, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.shop import Shop
    from dealboard.models.category import Category
    from dealboard.models.comment import Comment
    from dealboard.models.deal_vote import DealVote
    from dealboard.models.user import User

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
DEAL_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)


class Deal(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A discount or offer posted by a user.

    New deals wait in ``pending`` until a moderator approves them; only
    approved deals are public. The vote counters and heat score are
    denormalized aggregates of ``deal_votes``.
    """

    __tablename__ = "deals"

    # References
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Poster"
    )
    shop_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("shops.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Content
    title: Mapped[str] = mapped_column(String(500), nullable=False, comment="Deal title")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    affiliate_link: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True, comment="Link to deal")

    # Pricing
    original_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Original/regular price"
    )
    discounted_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Price with the deal applied"
    )
    discount_percentage: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Discount as percentage (0-100)"
    )

    # Moderation
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_PENDING,
        index=True,
        comment="'pending', 'approved' or 'rejected'"
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When deal expires"
    )

    # Engagement aggregates
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    heat_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_deals_status_created", "status", "created_at"),
        Index("idx_deals_status_heat", "status", "heat_score"),
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship(back_populates="deals")
    shop: Mapped[Optional["Shop"]] = relationship(back_populates="deals")
    category: Mapped[Optional["Category"]] = relationship(back_populates="deals")
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )
    votes: Mapped[list["DealVote"]] = relationship(
        back_populates="deal", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Deal(id={self.id}, title='{self.title[:50]}', status={self.status}, heat={self.heat_score})>"
