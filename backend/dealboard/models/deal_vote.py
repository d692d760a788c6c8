"""DealVote model: one row per (deal, user) holding that user's stance."""

import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dealboard.models.user import User
    from dealboard.models.deal import Deal


class DealVote(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tracks which user voted which way on which deal."""

    __tablename__ = "deal_votes"

    deal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    vote_type: Mapped[str] = mapped_column(
        String(4), nullable=False,
        comment="'up' or 'down'"
    )

    __table_args__ = (
        UniqueConstraint("deal_id", "user_id", name="uq_deal_votes_deal_user"),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="votes")
    deal: Mapped["Deal"] = relationship(back_populates="votes")

    def __repr__(self) -> str:
        return f"<DealVote(deal={self.deal_id}, user={self.user_id}, type={self.vote_type})>"
