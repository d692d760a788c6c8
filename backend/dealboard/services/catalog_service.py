"""Catalog service: categories, shops and shop coupons."""

import uuid
from typing import Any, Dict, List, Optional, Tuple

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealboard.core.exceptions import NotFoundError
from dealboard.models.category import Category
from dealboard.models.deal import STATUS_APPROVED, Deal
from dealboard.models.shop import Shop

logger = structlog.get_logger(__name__)


class CatalogService:
    """Reads and manages the categories and shops deals are filed under."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="catalog_service")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_categories(self) -> List[Tuple[Category, int]]:
        """All categories by name, each with its approved deal count."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        categories = list(result.scalars().all())
        counts = await self._approved_counts(Deal.category_id)
        return [(cat, counts.get(cat.id, 0)) for cat in categories]

    async def list_shops(self) -> List[Tuple[Shop, int]]:
        """All shops by name, each with its approved deal count."""
        result = await self.db.execute(select(Shop).order_by(Shop.name))
        shops = list(result.scalars().all())
        counts = await self._approved_counts(Deal.shop_id)
        return [(shop, counts.get(shop.id, 0)) for shop in shops]

    async def get_category_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def get_shop_by_slug(self, slug: str) -> Optional[Tuple[Shop, int]]:
        """Shop with its coupons loaded and its approved deal count."""
        result = await self.db.execute(
            select(Shop).options(selectinload(Shop.coupons)).where(Shop.slug == slug)
        )
        shop = result.scalar_one_or_none()
        if not shop:
            return None

        count_result = await self.db.execute(
            select(func.count(Deal.id)).where(
                Deal.shop_id == shop.id, Deal.status == STATUS_APPROVED
            )
        )
        return shop, count_result.scalar() or 0

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    async def create_category(self, **fields: Any) -> Category:
        """Raises ValueError if the slug is taken."""
        category = Category(**fields)
        await self._add(category, "category")
        return category

    async def update_category(self, category_id: uuid.UUID, **fields: Any) -> Category:
        category = await self._get(Category, category_id)
        await self._apply(category, fields, "category")
        return category

    async def delete_category(self, category_id: uuid.UUID) -> None:
        """Delete a category. Its deals become uncategorized."""
        category = await self._get(Category, category_id)
        await self.db.execute(
            update(Deal).where(Deal.category_id == category_id).values(category_id=None)
        )
        await self.db.delete(category)
        await self.db.flush()
        self.logger.info("category_deleted", category_id=str(category_id))

    async def create_shop(self, **fields: Any) -> Shop:
        """Raises ValueError if the slug is taken."""
        shop = Shop(**fields)
        await self._add(shop, "shop")
        return shop

    async def update_shop(self, shop_id: uuid.UUID, **fields: Any) -> Shop:
        shop = await self._get(Shop, shop_id)
        await self._apply(shop, fields, "shop")
        return shop

    async def delete_shop(self, shop_id: uuid.UUID) -> None:
        """Delete a shop and its coupons. Its deals lose their shop."""
        result = await self.db.execute(
            select(Shop).options(selectinload(Shop.coupons)).where(Shop.id == shop_id)
        )
        shop = result.scalar_one_or_none()
        if not shop:
            raise NotFoundError("Shop", str(shop_id))

        await self.db.execute(update(Deal).where(Deal.shop_id == shop_id).values(shop_id=None))
        await self.db.delete(shop)
        await self.db.flush()
        self.logger.info("shop_deleted", shop_id=str(shop_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _approved_counts(self, column) -> Dict[uuid.UUID, int]:
        result = await self.db.execute(
            select(column, func.count(Deal.id))
            .where(Deal.status == STATUS_APPROVED, column.is_not(None))
            .group_by(column)
        )
        return {row[0]: row[1] for row in result.all()}

    async def _get(self, model, row_id: uuid.UUID):
        result = await self.db.execute(select(model).where(model.id == row_id))
        row = result.scalar_one_or_none()
        if not row:
            raise NotFoundError(model.__name__, str(row_id))
        return row

    async def _add(self, row, kind: str) -> None:
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError(f"A {kind} with slug '{row.slug}' already exists")
        self.logger.info(f"{kind}_created", slug=row.slug)

    async def _apply(self, row, fields: Dict[str, Any], kind: str) -> None:
        for name, value in fields.items():
            setattr(row, name, value)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError(f"A {kind} with slug '{fields.get('slug')}' already exists")
        self.logger.info(f"{kind}_updated", id=str(row.id), fields=sorted(fields))
