"""System settings Pydantic schemas."""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class CurrencyResponse(BaseModel):
    code: str
    symbol: str
    name: str
    country: str


class SettingsResponse(BaseModel):
    settings: Dict[str, Optional[str]]


class SettingsUpdateRequest(BaseModel):
    """Key/value pairs to upsert."""

    settings: Dict[str, Optional[str]] = Field(min_length=1)
