"""Featured deal Pydantic schemas."""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dealboard.schemas.deal import DealResponse


class FeaturedDealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_order: int
    deal: DealResponse


class FeaturedDealCreateRequest(BaseModel):
    deal_id: UUID
    display_order: Optional[int] = Field(default=None, ge=0)


class FeaturedDealReorderRequest(BaseModel):
    """Featured entry IDs in their new display order."""

    ordered_ids: List[UUID] = Field(min_length=1)
