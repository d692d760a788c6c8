"""FeaturedDeal model: curated deals pinned to the front page."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.deal import Deal


class FeaturedDeal(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A deal pinned by an admin. Lowest display_order is the deal of the day."""

    __tablename__ = "featured_deals"

    deal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("deals.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    deal: Mapped["Deal"] = relationship()

    def __repr__(self) -> str:
        return f"<FeaturedDeal(deal={self.deal_id}, order={self.display_order})>"
