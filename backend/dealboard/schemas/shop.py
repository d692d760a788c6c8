"""Shop and coupon Pydantic schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CouponResponse(BaseModel):
    """Coupon code for a shop."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    title: str
    description: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    discount_percentage: Optional[int] = None
    verified: bool
    expires_at: Optional[datetime] = None


class ShopResponse(BaseModel):
    """Shop response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    category: Optional[str] = None
    deal_count: int = 0  # Computed field


class ShopDetailResponse(ShopResponse):
    """Shop with its current coupons."""

    coupons: List[CouponResponse] = []


class ShopCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, max_length=1000)
    website_url: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, max_length=100)


class ShopUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, max_length=1000)
    website_url: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = Field(default=None, max_length=100)
