"""System settings service, including the site display currency."""

import json
from dataclasses import asdict
from typing import Dict, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.config import settings
from dealboard.data.currencies import Currency, get_currency_by_code
from dealboard.models.system_setting import SITE_CURRENCY_KEY, SystemSetting
from dealboard.services.cache_service import CURRENCY_KEY, get_cache_service

logger = structlog.get_logger(__name__)


def resolve_currency(code: Optional[str]) -> Currency:
    """Currency for ``code``, falling back to the default when unknown or unset."""
    currency = get_currency_by_code(code)
    if currency is None:
        if code:
            logger.warning("unknown_site_currency", code=code)
        currency = get_currency_by_code(settings.DEFAULT_CURRENCY)
    return currency


class SettingsService:
    """Reads and upserts key/value site settings."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="settings_service")

    async def get_all(self) -> Dict[str, Optional[str]]:
        result = await self.db.execute(select(SystemSetting).order_by(SystemSetting.key))
        return {row.key: row.value for row in result.scalars().all()}

    async def get(self, key: str) -> Optional[str]:
        row = await self.db.get(SystemSetting, key)
        return row.value if row else None

    async def update(self, values: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        """Upsert settings and drop the cached currency."""
        for key, value in values.items():
            row = await self.db.get(SystemSetting, key)
            if row is None:
                self.db.add(SystemSetting(key=key, value=value))
            else:
                row.value = value
        await self.db.flush()

        await get_cache_service().delete(CURRENCY_KEY)
        self.logger.info("settings_updated", keys=sorted(values))
        return await self.get_all()

    async def get_site_currency(self) -> Currency:
        """The configured display currency, cached for a few minutes."""
        cache = get_cache_service()
        cached = await cache.get(CURRENCY_KEY)
        if cached:
            return Currency(**json.loads(cached))

        currency = resolve_currency(await self.get(SITE_CURRENCY_KEY))
        await cache.set(
            CURRENCY_KEY,
            json.dumps(asdict(currency)),
            ttl=settings.SETTINGS_CACHE_TTL_SECONDS,
        )
        return currency
