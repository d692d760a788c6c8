"""Root dashboard API endpoints, restricted to ``root_admin``.

Full management of shops, blog posts, static pages and user profiles.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db, require_root_admin
from dealboard.models.user import User
from dealboard.schemas import (
    ApiResponse,
    BlogPostCreateRequest,
    BlogPostResponse,
    BlogPostUpdateRequest,
    PaginationMeta,
    ShopCreateRequest,
    ShopResponse,
    ShopUpdateRequest,
    StaticPageCreateRequest,
    StaticPageResponse,
    StaticPageUpdateRequest,
    UserAdminUpdate,
    UserResponse,
)
from dealboard.services.auth_service import AuthService
from dealboard.services.cache_service import invalidate_catalog_cache, invalidate_deals_cache
from dealboard.services.catalog_service import CatalogService
from dealboard.services.content_service import ContentService

router = APIRouter(dependencies=[Depends(require_root_admin)])


# Shops


@router.get("/shops", response_model=ApiResponse)
async def list_shops(db: AsyncSession = Depends(get_db)):
    shops = await CatalogService(db).list_shops()
    data = []
    for shop, deal_count in shops:
        item = ShopResponse.model_validate(shop)
        item.deal_count = deal_count
        data.append(item)
    return ApiResponse(status="success", data=data)


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


# Blog posts


@router.get("/blog", response_model=ApiResponse)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """All posts including drafts."""
    posts, total = await ContentService(db).list_posts(page=page, limit=limit, published_only=False)
    return ApiResponse(
        status="success",
        data=[BlogPostResponse.model_validate(p) for p in posts],
        meta=PaginationMeta.build(page, limit, total),
    )


@router.post("/blog", response_model=ApiResponse, status_code=201)
async def create_post(
    body: BlogPostCreateRequest,
    current_user: User = Depends(require_root_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        post = await ContentService(db).create_post(current_user.id, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ApiResponse(status="success", data=BlogPostResponse.model_validate(post))


@router.patch("/blog/{post_id}", response_model=ApiResponse)
async def update_post(post_id: UUID, body: BlogPostUpdateRequest, db: AsyncSession = Depends(get_db)):
    try:
        post = await ContentService(db).update_post(post_id, **body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ApiResponse(status="success", data=BlogPostResponse.model_validate(post))


@router.delete("/blog/{post_id}", status_code=204)
async def delete_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    await ContentService(db).delete_post(post_id)


# Static pages


@router.get("/pages", response_model=ApiResponse)
async def list_pages(db: AsyncSession = Depends(get_db)):
    pages = await ContentService(db).list_pages(published_only=False)
    return ApiResponse(status="success", data=[StaticPageResponse.model_validate(p) for p in pages])


@router.post("/pages", response_model=ApiResponse, status_code=201)
async def create_page(body: StaticPageCreateRequest, db: AsyncSession = Depends(get_db)):
    try:
        page = await ContentService(db).create_page(**body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ApiResponse(status="success", data=StaticPageResponse.model_validate(page))


@router.patch("/pages/{page_id}", response_model=ApiResponse)
async def update_page(page_id: UUID, body: StaticPageUpdateRequest, db: AsyncSession = Depends(get_db)):
    try:
        page = await ContentService(db).update_page(page_id, **body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ApiResponse(status="success", data=StaticPageResponse.model_validate(page))


@router.delete("/pages/{page_id}", status_code=204)
async def delete_page(page_id: UUID, db: AsyncSession = Depends(get_db)):
    await ContentService(db).delete_page(page_id)


# Profiles


@router.get("/users", response_model=ApiResponse)
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await AuthService(db).list_users()
    return ApiResponse(
        status="success",
        data=[UserResponse.model_validate(u).model_dump(mode="json") for u in users],
    )


@router.patch("/users/{user_id}", response_model=ApiResponse)
async def update_user(user_id: UUID, body: UserAdminUpdate, db: AsyncSession = Depends(get_db)):
    """Change a user's role, active flag or display name."""
    user = await AuthService(db).update_user(user_id, **body.model_dump(exclude_unset=True))
    return ApiResponse(
        status="success",
        data=UserResponse.model_validate(user).model_dump(mode="json"),
    )
