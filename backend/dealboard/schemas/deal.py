"""Deal Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from dealboard.schemas.auth import UserBrief
from dealboard.voting.heat import heat_tier


class ShopBrief(BaseModel):
    """Brief shop information for deal responses."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str
    logo_url: Optional[str] = None


class CategoryBrief(BaseModel):
    """Brief category information for deal responses."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str


class HeatBadge(BaseModel):
    """Display tier of a heat score."""

    tier: str
    emoji: str
    color: str

    @classmethod
    def for_score(cls, score: Optional[int]) -> "HeatBadge":
        tier = heat_tier(score)
        return cls(tier=tier.value, emoji=tier.emoji, color=tier.color)


class DealResponse(BaseModel):
    """Standard deal response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    original_price: Optional[Decimal] = None
    discounted_price: Optional[Decimal] = None
    discount_percentage: Optional[int] = None
    affiliate_link: Optional[str] = None
    image_url: Optional[str] = None
    status: str
    expires_at: Optional[datetime] = None
    created_at: datetime
    upvotes: int = 0
    downvotes: int = 0
    heat_score: int = 0
    views: int = 0
    shop: Optional[ShopBrief] = None
    category: Optional[CategoryBrief] = None

    @computed_field
    @property
    def heat(self) -> HeatBadge:
        return HeatBadge.for_score(self.heat_score)


class DealDetailResponse(DealResponse):
    """Deal with its poster, assembled from separate lookups."""

    poster: Optional[UserBrief] = None

    @classmethod
    def from_parts(cls, deal, category=None, shop=None, poster=None) -> "DealDetailResponse":
        """Build a detail response from separately fetched rows."""
        data = {
            name: getattr(deal, name)
            for name in DealResponse.model_fields
            if name not in ("shop", "category")
        }
        return cls(
            **data,
            category=CategoryBrief.model_validate(category) if category else None,
            shop=ShopBrief.model_validate(shop) if shop else None,
            poster=UserBrief.model_validate(poster) if poster else None,
        )


class DealCreateRequest(BaseModel):
    """Request to post a new deal. Posted deals wait for moderation."""

    title: str = Field(min_length=3, max_length=500)
    description: Optional[str] = Field(default=None, max_length=10000)
    original_price: Optional[Decimal] = Field(default=None, ge=0)
    discounted_price: Optional[Decimal] = Field(default=None, ge=0)
    affiliate_link: Optional[str] = Field(default=None, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=1000)
    expires_at: Optional[datetime] = None
    category_id: Optional[UUID] = None
    shop_id: Optional[UUID] = None


class DealStatusUpdate(BaseModel):
    """Moderator decision on a deal."""

    status: Literal["pending", "approved", "rejected"]
