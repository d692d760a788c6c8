"""Deal service: listing, detail assembly, posting and moderation.

Public reads only ever see approved deals. Deal detail is assembled from
separate category, shop and poster lookups rather than a single joined
query, so each part may be missing independently.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

import structlog
from sqlalchemy import delete, select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealboard.core.exceptions import NotFoundError
from dealboard.models.category import Category
from dealboard.models.deal import DEAL_STATUSES, STATUS_APPROVED, STATUS_PENDING, Deal
from dealboard.models.featured_deal import FeaturedDeal
from dealboard.models.shop import Shop
from dealboard.models.user import User
from dealboard.voting.state import DealCounters

logger = structlog.get_logger(__name__)

SORT_OPTIONS = ("hot", "newest", "discount", "price_low", "price_high")


@dataclass
class DealDetail:
    """A deal together with the rows it references."""

    deal: Deal
    category: Optional[Category] = None
    shop: Optional[Shop] = None
    poster: Optional[User] = None


def compute_discount_percentage(
    original_price: Optional[Decimal], discounted_price: Optional[Decimal]
) -> Optional[int]:
    """Whole-number percentage saved, or None when it cannot be derived."""
    if original_price is None or discounted_price is None:
        return None
    if original_price <= 0 or discounted_price > original_price:
        return None
    pct = (original_price - discounted_price) / original_price * 100
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class DealService:
    """Service for reading, posting and moderating deals."""

    def __init__(self, db: AsyncSession):
        """Initialize deal service.

        Args:
            db: Async database session
        """
        self.db = db
        self.logger = logger.bind(service="deal_service")

    async def get_deals(
        self,
        page: int = 1,
        limit: int = 12,
        category_slug: Optional[str] = None,
        shop_slug: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "hot",
    ) -> Tuple[List[Deal], int]:
        """Get paginated approved deals with filters.

        A category or shop slug that matches nothing is ignored rather than
        producing an empty page.

        Args:
            page: Page number (1-indexed)
            limit: Results per page
            category_slug: Filter by category
            shop_slug: Filter by shop
            search: Case-insensitive substring of title or description
            sort_by: One of SORT_OPTIONS

        Returns:
            Tuple of (deals list, total count)
        """
        self.logger.info(
            "fetching_deals",
            page=page,
            limit=limit,
            category=category_slug,
            shop=shop_slug,
            sort=sort_by,
        )

        filters = [Deal.status == STATUS_APPROVED]

        if category_slug and category_slug != "all":
            category_id = await self._id_for_slug(Category, category_slug)
            if category_id:
                filters.append(Deal.category_id == category_id)

        if shop_slug and shop_slug != "all":
            shop_id = await self._id_for_slug(Shop, shop_slug)
            if shop_id:
                filters.append(Deal.shop_id == shop_id)

        if search:
            pattern = f"%{search}%"
            filters.append(or_(Deal.title.ilike(pattern), Deal.description.ilike(pattern)))

        sort_map = {
            "hot": Deal.heat_score.desc(),
            "newest": Deal.created_at.desc(),
            "discount": Deal.discount_percentage.desc().nullslast(),
            "price_low": Deal.discounted_price.asc().nullslast(),
            "price_high": Deal.discounted_price.desc().nullslast(),
        }
        order = sort_map.get(sort_by, Deal.created_at.desc())

        query = (
            select(Deal)
            .options(
                selectinload(Deal.shop),
                selectinload(Deal.category),
            )
            .where(*filters)
            .order_by(order, Deal.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(query)
        deals = list(result.scalars().all())

        total_result = await self.db.execute(select(func.count(Deal.id)).where(*filters))
        total = total_result.scalar() or 0

        self.logger.info("deals_fetched", count=len(deals), total=total, page=page)
        return deals, total

    async def get_deal_detail(self, deal_id: uuid.UUID) -> Optional[DealDetail]:
        """Get an approved deal with its category, shop and poster.

        Also increments the view count for the deal.

        Returns:
            DealDetail or None if no approved deal has this ID
        """
        result = await self.db.execute(
            select(Deal).where(Deal.id == deal_id, Deal.status == STATUS_APPROVED)
        )
        deal = result.scalar_one_or_none()
        if not deal:
            return None

        detail = DealDetail(
            deal=deal,
            category=await self._get(Category, deal.category_id),
            shop=await self._get(Shop, deal.shop_id),
            poster=await self._get(User, deal.user_id),
        )

        deal.views = (deal.views or 0) + 1
        await self.db.flush()

        self.logger.info("deal_viewed", deal_id=str(deal_id), views=deal.views)
        return detail

    async def get_counters(self, deal_id: uuid.UUID) -> Optional[DealCounters]:
        """Aggregate counters of an approved deal.

        Returns None when no approved deal has this ID; pending and rejected
        deals take no votes.
        """
        result = await self.db.execute(
            select(Deal.upvotes, Deal.downvotes, Deal.heat_score).where(
                Deal.id == deal_id, Deal.status == STATUS_APPROVED
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return DealCounters(upvotes=row.upvotes, downvotes=row.downvotes, heat_score=row.heat_score)

    async def create_deal(
        self,
        user_id: uuid.UUID,
        title: str,
        description: Optional[str] = None,
        original_price: Optional[Decimal] = None,
        discounted_price: Optional[Decimal] = None,
        affiliate_link: Optional[str] = None,
        image_url: Optional[str] = None,
        expires_at=None,
        category_id: Optional[uuid.UUID] = None,
        shop_id: Optional[uuid.UUID] = None,
    ) -> Deal:
        """Post a new deal. It starts as pending until a moderator approves it.

        Raises:
            NotFoundError: If category_id or shop_id do not exist
        """
        if category_id and not await self._get(Category, category_id):
            raise NotFoundError("Category", str(category_id))
        if shop_id and not await self._get(Shop, shop_id):
            raise NotFoundError("Shop", str(shop_id))

        deal = Deal(
            user_id=user_id,
            title=title,
            description=description,
            original_price=original_price,
            discounted_price=discounted_price,
            discount_percentage=compute_discount_percentage(original_price, discounted_price),
            affiliate_link=affiliate_link,
            image_url=image_url,
            expires_at=expires_at,
            category_id=category_id,
            shop_id=shop_id,
            status=STATUS_PENDING,
            upvotes=0,
            downvotes=0,
            heat_score=0,
            views=0,
        )
        self.db.add(deal)
        await self.db.flush()

        self.logger.info("deal_posted", deal_id=str(deal.id), user_id=str(user_id))
        return await self._get_with_relations(deal.id)

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    async def list_all_deals(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Deal], int]:
        """All deals regardless of status, newest first (admin)."""
        filters = []
        if status:
            filters.append(Deal.status == status)

        result = await self.db.execute(
            select(Deal)
            .options(selectinload(Deal.shop), selectinload(Deal.category))
            .where(*filters)
            .order_by(Deal.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        deals = list(result.scalars().all())

        total_result = await self.db.execute(select(func.count(Deal.id)).where(*filters))
        return deals, total_result.scalar() or 0

    async def set_status(self, deal_id: uuid.UUID, status: str) -> Deal:
        """Approve, reject or re-queue a deal.

        Raises:
            ValueError: If status is not a known deal status
            NotFoundError: If the deal does not exist
        """
        if status not in DEAL_STATUSES:
            raise ValueError(f"status must be one of {', '.join(DEAL_STATUSES)}")

        deal = await self._get_with_relations(deal_id)
        if not deal:
            raise NotFoundError("Deal", str(deal_id))

        previous = deal.status
        deal.status = status
        await self.db.flush()

        self.logger.info("deal_moderated", deal_id=str(deal_id), previous=previous, status=status)
        return deal

    async def delete_deal(self, deal_id: uuid.UUID) -> None:
        """Delete a deal with its votes and comments.

        Raises:
            NotFoundError: If the deal does not exist
        """
        deal = await self._get(Deal, deal_id)
        if not deal:
            raise NotFoundError("Deal", str(deal_id))

        await self.db.execute(delete(FeaturedDeal).where(FeaturedDeal.deal_id == deal_id))
        await self.db.delete(deal)
        await self.db.flush()
        self.logger.info("deal_deleted", deal_id=str(deal_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get(self, model, row_id: Optional[uuid.UUID]):
        if row_id is None:
            return None
        result = await self.db.execute(select(model).where(model.id == row_id))
        return result.scalar_one_or_none()

    async def _get_with_relations(self, deal_id: uuid.UUID) -> Optional[Deal]:
        result = await self.db.execute(
            select(Deal)
            .options(selectinload(Deal.shop), selectinload(Deal.category))
            .where(Deal.id == deal_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _id_for_slug(self, model, slug: str) -> Optional[uuid.UUID]:
        result = await self.db.execute(select(model.id).where(model.slug == slug))
        return result.scalar_one_or_none()
