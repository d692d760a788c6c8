"""Blog API endpoints. Only published posts are visible here."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db
from dealboard.schemas import ApiResponse, BlogPostResponse, PaginationMeta
from dealboard.services.content_service import ContentService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    category: Optional[str] = Query(None, description="Filter by post category"),
    db: AsyncSession = Depends(get_db),
):
    """Published blog posts, newest first."""
    posts, total = await ContentService(db).list_posts(page=page, limit=limit, category=category)
    return ApiResponse(
        status="success",
        data=[BlogPostResponse.model_validate(p) for p in posts],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.get("/{slug}", response_model=ApiResponse)
async def get_post(slug: str, db: AsyncSession = Depends(get_db)):
    post = await ContentService(db).get_post_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail=f"Post '{slug}' not found")
    return ApiResponse(status="success", data=BlogPostResponse.model_validate(post))
