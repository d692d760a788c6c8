"""Shop model representing the stores deals point at."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from dealboard.models.coupon import Coupon
    from dealboard.models.deal import Deal


class Shop(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Retailer or online store."""

    __tablename__ = "shops"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False, comment="URL-friendly identifier")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    website_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Free-form shop category label")

    deals: Mapped[list["Deal"]] = relationship(back_populates="shop")
    coupons: Mapped[list["Coupon"]] = relationship(back_populates="shop", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Shop(id={self.id}, slug='{self.slug}', name='{self.name}')>"
