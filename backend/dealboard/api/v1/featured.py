"""Featured deals API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db
from dealboard.schemas import ApiResponse, FeaturedDealResponse
from dealboard.services.featured_service import FeaturedService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def list_featured(db: AsyncSession = Depends(get_db)):
    """Approved featured deals in display order."""
    featured = await FeaturedService(db).list_featured()
    return ApiResponse(
        status="success",
        data=[FeaturedDealResponse.model_validate(f) for f in featured],
    )


@router.get("/deal-of-the-day", response_model=ApiResponse)
async def deal_of_the_day(db: AsyncSession = Depends(get_db)):
    """The first featured deal, or null when nothing is featured."""
    entry = await FeaturedService(db).get_deal_of_the_day()
    return ApiResponse(
        status="success",
        data=FeaturedDealResponse.model_validate(entry) if entry else None,
    )
