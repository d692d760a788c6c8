"""Admin API endpoints: moderation, catalog, featured deals and settings.

Every route requires the ``admin`` or ``root_admin`` role.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db, require_admin
from dealboard.schemas import (
    ApiResponse,
    CategoryCreateRequest,
    CategoryResponse,
    CategoryUpdateRequest,
    DealResponse,
    DealStatusUpdate,
    FeaturedDealCreateRequest,
    FeaturedDealReorderRequest,
    FeaturedDealResponse,
    PaginationMeta,
    SettingsResponse,
    SettingsUpdateRequest,
    ShopCreateRequest,
    ShopResponse,
    ShopUpdateRequest,
)
from dealboard.services.cache_service import invalidate_catalog_cache, invalidate_deals_cache
from dealboard.services.catalog_service import CatalogService
from dealboard.services.deal_service import DealService
from dealboard.services.featured_service import FeaturedService
from dealboard.services.settings_service import SettingsService

router = APIRouter(dependencies=[Depends(require_admin)])


# ----------------------------------------------------------------------
# Deal moderation
# ----------------------------------------------------------------------


@router.get("/deals", response_model=ApiResponse)
async def list_all_deals(
    status: Optional[str] = Query(None, pattern="^(pending|approved|rejected)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Deals in every status, newest first."""
    deals, total = await DealService(db).list_all_deals(status=status, page=page, limit=limit)
    return ApiResponse(
        status="success",
        data=[DealResponse.model_validate(d) for d in deals],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.patch("/deals/{deal_id}/status", response_model=ApiResponse)
async def set_deal_status(
    deal_id: UUID,
    body: DealStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a deal."""
    deal = await DealService(db).set_status(deal_id, body.status)
    await invalidate_deals_cache()
    await invalidate_catalog_cache()
    return ApiResponse(status="success", data=DealResponse.model_validate(deal))


@router.delete("/deals/{deal_id}", status_code=204)
async def delete_deal(deal_id: UUID, db: AsyncSession = Depends(get_db)):
    await DealService(db).delete_deal(deal_id)
    await invalidate_deals_cache()
    await invalidate_catalog_cache()


# ----------------------------------------------------------------------
# Categories
# ----------------------------------------------------------------------


@router.post("/categories", response_model=ApiResponse, status_code=201)
async def create_category(body: CategoryCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        category = await CatalogService(db).create_category(**body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await invalidate_catalog_cache()
    return ApiResponse(status="success", data=CategoryResponse.model_validate(category))


@router.patch("/categories/{category_id}", response_model=ApiResponse)
async def update_category(
    category_id: UUID,
    body: CategoryUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    try:
        category = await CatalogService(db).update_category(
            category_id, **body.model_dump(exclude_unset=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await invalidate_catalog_cache()
    await invalidate_deals_cache()
    return ApiResponse(status="success", data=CategoryResponse.model_validate(category))


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(category_id: UUID, db: AsyncSession = Depends(get_db)):
    await CatalogService(db).delete_category(category_id)
    await invalidate_catalog_cache()
    await invalidate_deals_cache()


# ----------------------------------------------------------------------
# Shops
# ----------------------------------------------------------------------


@router.post("/shops", response_model=ApiResponse, status_code=201)
async def create_shop(body: ShopCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        shop = await CatalogService(db).create_shop(**body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await invalidate_catalog_cache()
    return ApiResponse(status="success", data=ShopResponse.model_validate(shop))


@router.patch("/shops/{shop_id}", response_model=ApiResponse)
async def update_shop(shop_id: UUID, body: ShopUpdateRequest, db: AsyncSession = Depends(get_db)):
    try:
        shop = await CatalogService(db).update_shop(shop_id, **body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    await invalidate_catalog_cache()
    await invalidate_deals_cache()
    return ApiResponse(status="success", data=ShopResponse.model_validate(shop))


@router.delete("/shops/{shop_id}", status_code=204)
async def delete_shop(shop_id: UUID, db: AsyncSession = Depends(get_db)):
    await CatalogService(db).delete_shop(shop_id)
    await invalidate_catalog_cache()
    await invalidate_deals_cache()


# ----------------------------------------------------------------------
# Featured deals
# ----------------------------------------------------------------------


@router.get("/featured", response_model=ApiResponse)
async def list_featured(db: AsyncSession = Depends(get_db)):
    """All featured entries, including ones whose deal is not approved."""
    featured = await FeaturedService(db).list_featured(include_unapproved=True)
    return ApiResponse(
        status="success",
        data=[FeaturedDealResponse.model_validate(f) for f in featured],
    )


@router.post("/featured", response_model=ApiResponse, status_code=201)
async def add_featured(body: FeaturedDealCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        entry = await FeaturedService(db).add(body.deal_id, body.display_order)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ApiResponse(status="success", data=FeaturedDealResponse.model_validate(entry))


@router.put("/featured/order", response_model=ApiResponse)
async def reorder_featured(body: FeaturedDealReorderRequest, db: AsyncSession = Depends(get_db)):
    """Rewrite display order; the first ID becomes the deal of the day."""
    entries = await FeaturedService(db).reorder(body.ordered_ids)
    return ApiResponse(
        status="success",
        data=[FeaturedDealResponse.model_validate(e) for e in entries],
    )


@router.delete("/featured/{featured_id}", status_code=204)
async def remove_featured(featured_id: UUID, db: AsyncSession = Depends(get_db)):
    await FeaturedService(db).remove(featured_id)


# ----------------------------------------------------------------------
# Settings
# ----------------------------------------------------------------------


@router.get("/settings", response_model=ApiResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    values = await SettingsService(db).get_all()
    return ApiResponse(status="success", data=SettingsResponse(settings=values))


@router.put("/settings", response_model=ApiResponse)
async def update_settings(body: SettingsUpdateRequest, db: AsyncSession = Depends(get_db)):
    """Upsert settings. Changing ``site_currency`` takes effect immediately."""
    values = await SettingsService(db).update(body.settings)
    return ApiResponse(status="success", data=SettingsResponse(settings=values))
