"""SQLAlchemy models for Dealboard.

All models are imported here so metadata.create_all and Alembic can discover them.
"""

from dealboard.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from dealboard.models.user import User
from dealboard.models.category import Category
from dealboard.models.shop import Shop
from dealboard.models.coupon import Coupon
from dealboard.models.deal import Deal
from dealboard.models.deal_vote import DealVote
from dealboard.models.comment import Comment
from dealboard.models.featured_deal import FeaturedDeal
from dealboard.models.blog_post import BlogPost
from dealboard.models.static_page import StaticPage
from dealboard.models.system_setting import SystemSetting

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
    "Category",
    "Shop",
    "Coupon",
    "Deal",
    "DealVote",
    "Comment",
    "FeaturedDeal",
    "BlogPost",
    "StaticPage",
    "SystemSetting",
]
