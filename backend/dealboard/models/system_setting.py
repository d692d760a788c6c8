"""SystemSetting model: site-wide key/value configuration."""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dealboard.models.base import Base, TimestampMixin

SITE_CURRENCY_KEY = "site_currency"


class SystemSetting(TimestampMixin, Base):
    """A single setting keyed by name (e.g. ``site_currency``)."""

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SystemSetting(key='{self.key}', value='{self.value}')>"
