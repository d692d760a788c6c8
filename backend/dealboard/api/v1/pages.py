"""Static page API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db
from dealboard.schemas import ApiResponse, StaticPageResponse
from dealboard.services.content_service import ContentService

router = APIRouter()


@router.get("/{slug}", response_model=ApiResponse)
async def get_page(slug: str, db: AsyncSession = Depends(get_db)):
    """A published static page such as ``about`` or ``privacy``."""
    page = await ContentService(db).get_page_by_slug(slug)
    if not page:
        raise HTTPException(status_code=404, detail=f"Page '{slug}' not found")
    return ApiResponse(status="success", data=StaticPageResponse.model_validate(page))
