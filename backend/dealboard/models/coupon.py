"""Coupon model: discount codes published for a shop."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, ForeignKey, Boolean, Numeric, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.shop import Shop


class Coupon(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A coupon code for a shop."""

    __tablename__ = "coupons"

    shop_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    discount_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    discount_percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    shop: Mapped[Optional["Shop"]] = relationship(back_populates="coupons")

    def __repr__(self) -> str:
        return f"<Coupon(id={self.id}, code='{self.code}', shop_id={self.shop_id})>"
