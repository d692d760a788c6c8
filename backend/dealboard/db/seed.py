"""Database seeding for development and fresh deployments.

Populates the database with starter categories, shops and the default
site currency. Each step is skipped when its table already has rows.
Run with: python -m dealboard.db.seed
"""

import asyncio

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.db.session import async_session_factory
from dealboard.models import Category, Shop, SystemSetting
from dealboard.models.system_setting import SITE_CURRENCY_KEY

logger = structlog.get_logger(__name__)

CATEGORIES = [
    {"name": "Electronics", "slug": "electronics", "icon": "laptop"},
    {"name": "Fashion", "slug": "fashion", "icon": "shirt"},
    {"name": "Home & Garden", "slug": "home-garden", "icon": "home"},
    {"name": "Groceries", "slug": "groceries", "icon": "shopping-cart"},
    {"name": "Gaming", "slug": "gaming", "icon": "gamepad"},
    {"name": "Travel", "slug": "travel", "icon": "plane"},
]

SHOPS = [
    {
        "name": "Amazon",
        "slug": "amazon",
        "website_url": "https://www.amazon.com",
        "category": "Marketplace",
    },
    {
        "name": "Best Buy",
        "slug": "best-buy",
        "website_url": "https://www.bestbuy.com",
        "category": "Electronics",
    },
    {
        "name": "Walmart",
        "slug": "walmart",
        "website_url": "https://www.walmart.com",
        "category": "Marketplace",
    },
    {
        "name": "Steam",
        "slug": "steam",
        "website_url": "https://store.steampowered.com",
        "category": "Gaming",
    },
]


async def seed_defaults(session: AsyncSession) -> None:
    """Insert starter rows into empty tables and commit."""
    result = await session.execute(select(Category.id).limit(1))
    if result.scalar_one_or_none() is None:
        session.add_all(Category(**data) for data in CATEGORIES)
        logger.info("categories_seeded", count=len(CATEGORIES))

    result = await session.execute(select(Shop.id).limit(1))
    if result.scalar_one_or_none() is None:
        session.add_all(Shop(**data) for data in SHOPS)
        logger.info("shops_seeded", count=len(SHOPS))

    if await session.get(SystemSetting, SITE_CURRENCY_KEY) is None:
        session.add(SystemSetting(key=SITE_CURRENCY_KEY, value=settings.DEFAULT_CURRENCY))
        logger.info("site_currency_seeded", currency=settings.DEFAULT_CURRENCY)

    await session.commit()


async def _run():
    async with async_session_factory() as session:
        await seed_defaults(session)


def main():
    asyncio.run(_run())


if __name__ == "__main__":
    main()
