"""Public site settings endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db
from dealboard.schemas import ApiResponse, CurrencyResponse
from dealboard.services.settings_service import SettingsService

router = APIRouter()


@router.get("/currency", response_model=ApiResponse)
async def get_site_currency(db: AsyncSession = Depends(get_db)):
    """The currency prices are displayed in. Cached for a few minutes."""
    currency = await SettingsService(db).get_site_currency()
    return ApiResponse(status="success", data=CurrencyResponse(**asdict(currency)))
