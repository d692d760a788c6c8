"""Deals API endpoints: listing, detail, posting and voting."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.dependencies import get_auth_context, get_current_user, get_db
from dealboard.models.user import User
from dealboard.schemas import (
    ApiResponse,
    DealCreateRequest,
    DealDetailResponse,
    DealResponse,
    ErrorResponse,
    PaginationMeta,
    VoteRequest,
    VoteResultResponse,
    VoteStatusResponse,
)
from dealboard.services.cache_service import cache_key_for_deals, get_cache, invalidate_deals_cache
from dealboard.services.deal_service import DealService
from dealboard.services.vote_service import VoteService
from dealboard.voting import AuthContext, OutcomeStatus, VoteLockRegistry, get_vote_locks

router = APIRouter()

SORT_PATTERN = "^(hot|newest|discount|price_low|price_high)$"


@router.get("", response_model=ApiResponse)
async def list_deals(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(settings.DEALS_PAGE_SIZE, ge=1, le=100, description="Items per page"),
    category: Optional[str] = Query(None, description="Filter by category slug"),
    shop: Optional[str] = Query(None, description="Filter by shop slug"),
    q: Optional[str] = Query(None, max_length=200, description="Search title and description"),
    sort_by: str = Query("hot", pattern=SORT_PATTERN, description="Sort method"),
    db: AsyncSession = Depends(get_db),
):
    """List approved deals with pagination and filtering.

    Sort options:
    - hot: Highest heat score first (default)
    - newest: Most recently posted first
    - discount: Highest discount percentage first
    - price_low / price_high: By discounted price

    This endpoint is cached briefly; votes and moderation invalidate it.
    """
    cache = await get_cache()
    cache_key = cache_key_for_deals(
        page=page,
        limit=limit,
        category_slug=category,
        shop_slug=shop,
        search=q,
        sort_by=sort_by,
    )

    cached = await cache.get(cache_key)
    if cached:
        return ApiResponse.model_validate_json(cached)

    service = DealService(db)
    deals, total = await service.get_deals(
        page=page,
        limit=limit,
        category_slug=category,
        shop_slug=shop,
        search=q,
        sort_by=sort_by,
    )

    response = ApiResponse(
        status="success",
        data=[DealResponse.model_validate(d) for d in deals],
        meta=PaginationMeta.build(page, limit, total),
    )

    await cache.set(cache_key, response.model_dump_json(), ttl=settings.DEALS_CACHE_TTL_SECONDS)
    return response


@router.post("", response_model=ApiResponse, status_code=201)
async def create_deal(
    body: DealCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Post a new deal. It is not listed until a moderator approves it."""
    service = DealService(db)
    deal = await service.create_deal(user_id=current_user.id, **body.model_dump())
    return ApiResponse(status="success", data=DealResponse.model_validate(deal))


@router.get("/{deal_id}", response_model=ApiResponse)
async def get_deal(
    deal_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get an approved deal with its category, shop and poster.

    Also increments the view count for this deal.
    """
    service = DealService(db)
    detail = await service.get_deal_detail(deal_id)

    if not detail:
        raise HTTPException(status_code=404, detail="Deal not found")

    return ApiResponse(
        status="success",
        data=DealDetailResponse.from_parts(
            detail.deal,
            category=detail.category,
            shop=detail.shop,
            poster=detail.poster,
        ),
    )


@router.get("/{deal_id}/vote", response_model=ApiResponse)
async def get_user_vote(
    deal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's vote on a deal."""
    service = VoteService(db)
    auth = AuthContext(user_id=current_user.id, role=current_user.role)
    state = await service.get_user_vote(deal_id, auth)
    return ApiResponse(
        status="success",
        data=VoteStatusResponse(deal_id=deal_id, user_vote=state.vote_type),
    )


@router.post("/{deal_id}/vote", response_model=ApiResponse)
async def vote_deal(
    deal_id: UUID,
    body: VoteRequest,
    auth: AuthContext = Depends(get_auth_context),
    locks: VoteLockRegistry = Depends(get_vote_locks),
    db: AsyncSession = Depends(get_db),
):
    """Vote on a deal.

    Voting the same way again removes the vote; voting the other way
    switches it. Signed-out callers get 401 and nothing is written; a
    storage failure gets 503 with a retryable notification.
    """
    service = VoteService(db, locks=locks)
    outcome = await service.vote(deal_id, body.vote_type, auth)

    if outcome.status is OutcomeStatus.APPLIED:
        await invalidate_deals_cache()
        return ApiResponse(
            status="success",
            data=VoteResultResponse.from_outcome(deal_id, outcome),
        )

    status_code = 401 if outcome.status is OutcomeStatus.REJECTED else 503
    error = ErrorResponse.build(
        code=outcome.error.code if outcome.error else "vote_failed",
        message=outcome.notification.message,
        data=VoteResultResponse.from_outcome(deal_id, outcome),
    )
    return JSONResponse(status_code=status_code, content=error.to_content())
