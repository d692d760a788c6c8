"""Featured deal service: the curated front-page list and the deal of the day."""

import uuid
from typing import List, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealboard.core.exceptions import NotFoundError
from dealboard.models.deal import STATUS_APPROVED, Deal
from dealboard.models.featured_deal import FeaturedDeal

logger = structlog.get_logger(__name__)


class FeaturedService:
    """Manages featured deals ordered by ``display_order``."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="featured_service")

    def _query(self):
        return (
            select(FeaturedDeal)
            .options(
                selectinload(FeaturedDeal.deal).selectinload(Deal.shop),
                selectinload(FeaturedDeal.deal).selectinload(Deal.category),
            )
            .order_by(FeaturedDeal.display_order.asc(), FeaturedDeal.created_at.asc())
        )

    async def list_featured(self, include_unapproved: bool = False) -> List[FeaturedDeal]:
        """Featured entries in display order.

        Public callers only see entries whose deal is approved.
        """
        query = self._query()
        if not include_unapproved:
            query = query.join(FeaturedDeal.deal).where(Deal.status == STATUS_APPROVED)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_deal_of_the_day(self) -> Optional[FeaturedDeal]:
        """The first approved featured entry, if any."""
        featured = await self.list_featured()
        return featured[0] if featured else None

    async def add(self, deal_id: uuid.UUID, display_order: Optional[int] = None) -> FeaturedDeal:
        """Feature a deal. Without an explicit order it goes to the end.

        Raises:
            NotFoundError: If the deal does not exist
            ValueError: If the deal is already featured
        """
        exists = await self.db.execute(select(Deal.id).where(Deal.id == deal_id))
        if exists.scalar_one_or_none() is None:
            raise NotFoundError("Deal", str(deal_id))

        if display_order is None:
            max_result = await self.db.execute(select(func.max(FeaturedDeal.display_order)))
            current_max = max_result.scalar()
            display_order = 0 if current_max is None else current_max + 1

        entry = FeaturedDeal(deal_id=deal_id, display_order=display_order)
        self.db.add(entry)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError("Deal is already featured")

        self.logger.info("deal_featured", deal_id=str(deal_id), display_order=display_order)
        return await self._get(entry.id)

    async def remove(self, featured_id: uuid.UUID) -> None:
        """Raises NotFoundError if the entry does not exist."""
        entry = await self.db.get(FeaturedDeal, featured_id)
        if not entry:
            raise NotFoundError("FeaturedDeal", str(featured_id))
        await self.db.delete(entry)
        await self.db.flush()
        self.logger.info("deal_unfeatured", featured_id=str(featured_id))

    async def reorder(self, ordered_ids: List[uuid.UUID]) -> List[FeaturedDeal]:
        """Assign display_order 0..n-1 following ``ordered_ids``.

        Entries not named keep their relative order after the named ones.

        Raises:
            NotFoundError: If an ID is not a featured entry
        """
        result = await self.db.execute(self._query())
        entries = list(result.scalars().all())
        by_id = {entry.id: entry for entry in entries}

        for featured_id in ordered_ids:
            if featured_id not in by_id:
                raise NotFoundError("FeaturedDeal", str(featured_id))

        named = set(ordered_ids)
        sequence = [by_id[i] for i in ordered_ids] + [e for e in entries if e.id not in named]
        for position, entry in enumerate(sequence):
            entry.display_order = position
        await self.db.flush()

        self.logger.info("featured_reordered", count=len(sequence))
        return sequence

    async def _get(self, featured_id: uuid.UUID) -> FeaturedDeal:
        result = await self.db.execute(
            self._query()
            .where(FeaturedDeal.id == featured_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
