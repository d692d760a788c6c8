"""Shops API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.dependencies import get_db
from dealboard.schemas import ApiResponse, DealResponse, PaginationMeta, ShopDetailResponse, ShopResponse
from dealboard.services.cache_service import CATALOG_PREFIX, get_cache
from dealboard.services.catalog_service import CatalogService
from dealboard.services.deal_service import DealService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def list_shops(db: AsyncSession = Depends(get_db)):
    """List all shops with their approved deal counts.

    This endpoint is cached for 5 minutes.
    """
    cache = await get_cache()
    cache_key = f"{CATALOG_PREFIX}:shops"

    cached = await cache.get(cache_key)
    if cached:
        return ApiResponse.model_validate_json(cached)

    shops = await CatalogService(db).list_shops()

    data = []
    for shop, deal_count in shops:
        item = ShopResponse.model_validate(shop)
        item.deal_count = deal_count
        data.append(item)

    response = ApiResponse(status="success", data=data)
    await cache.set(cache_key, response.model_dump_json(), ttl=settings.CATALOG_CACHE_TTL_SECONDS)
    return response


@router.get("/{slug}", response_model=ApiResponse)
async def get_shop(slug: str, db: AsyncSession = Depends(get_db)):
    """Shop details with its coupons and approved deal count."""
    found = await CatalogService(db).get_shop_by_slug(slug)
    if not found:
        raise HTTPException(status_code=404, detail=f"Shop '{slug}' not found")

    shop, deal_count = found
    shop_data = ShopDetailResponse.model_validate(shop)
    shop_data.deal_count = deal_count
    return ApiResponse(status="success", data=shop_data)


@router.get("/{slug}/deals", response_model=ApiResponse)
async def get_shop_deals(
    slug: str,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(settings.DEALS_PAGE_SIZE, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("hot", pattern="^(hot|newest|discount|price_low|price_high)$"),
    db: AsyncSession = Depends(get_db),
):
    """Approved deals from one shop."""
    if not await CatalogService(db).get_shop_by_slug(slug):
        raise HTTPException(status_code=404, detail=f"Shop '{slug}' not found")

    deals, total = await DealService(db).get_deals(
        page=page,
        limit=limit,
        shop_slug=slug,
        sort_by=sort_by,
    )

    return ApiResponse(
        status="success",
        data=[DealResponse.model_validate(d) for d in deals],
        meta=PaginationMeta.build(page, limit, total),
    )
