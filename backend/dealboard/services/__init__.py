"""Services module for business logic and data operations.

Service classes take a request-scoped AsyncSession and implement the deal
board's reads, writes and moderation on top of the ORM models.
"""

from dealboard.services.auth_service import AuthService
from dealboard.services.catalog_service import CatalogService
from dealboard.services.comment_service import CommentService
from dealboard.services.content_service import ContentService
from dealboard.services.deal_service import DealService
from dealboard.services.featured_service import FeaturedService
from dealboard.services.settings_service import SettingsService
from dealboard.services.vote_service import VoteService

__all__ = [
    "AuthService",
    "CatalogService",
    "CommentService",
    "ContentService",
    "DealService",
    "FeaturedService",
    "SettingsService",
    "VoteService",
]
