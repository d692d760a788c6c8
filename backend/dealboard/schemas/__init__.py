"""Pydantic schemas for the Dealboard API.

All request/response models are defined here for easy import.
"""

from dealboard.schemas.common import ApiResponse, ErrorDetail, ErrorResponse, PaginationMeta
from dealboard.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserAdminUpdate,
    UserBrief,
    UserResponse,
)
from dealboard.schemas.deal import (
    CategoryBrief,
    DealCreateRequest,
    DealDetailResponse,
    DealResponse,
    DealStatusUpdate,
    HeatBadge,
    ShopBrief,
)
from dealboard.schemas.vote import NotificationResponse, VoteRequest, VoteResultResponse, VoteStatusResponse
from dealboard.schemas.category import CategoryCreateRequest, CategoryResponse, CategoryUpdateRequest
from dealboard.schemas.shop import (
    CouponResponse,
    ShopCreateRequest,
    ShopDetailResponse,
    ShopResponse,
    ShopUpdateRequest,
)
from dealboard.schemas.comment import CommentCreateRequest, CommentResponse, CommentUpdateRequest
from dealboard.schemas.featured import (
    FeaturedDealCreateRequest,
    FeaturedDealReorderRequest,
    FeaturedDealResponse,
)
from dealboard.schemas.content import (
    BlogPostCreateRequest,
    BlogPostResponse,
    BlogPostUpdateRequest,
    StaticPageCreateRequest,
    StaticPageResponse,
    StaticPageUpdateRequest,
)
from dealboard.schemas.settings import CurrencyResponse, SettingsResponse, SettingsUpdateRequest
from dealboard.schemas.health import HealthCheckResponse

__all__ = [
    # Common
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "PaginationMeta",
    # Auth
    "LoginRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserAdminUpdate",
    "UserBrief",
    "UserResponse",
    # Deal
    "CategoryBrief",
    "DealCreateRequest",
    "DealDetailResponse",
    "DealResponse",
    "DealStatusUpdate",
    "HeatBadge",
    "ShopBrief",
    # Vote
    "NotificationResponse",
    "VoteRequest",
    "VoteResultResponse",
    "VoteStatusResponse",
    # Category
    "CategoryCreateRequest",
    "CategoryResponse",
    "CategoryUpdateRequest",
    # Shop
    "CouponResponse",
    "ShopCreateRequest",
    "ShopDetailResponse",
    "ShopResponse",
    "ShopUpdateRequest",
    # Comment
    "CommentCreateRequest",
    "CommentResponse",
    "CommentUpdateRequest",
    # Featured
    "FeaturedDealCreateRequest",
    "FeaturedDealReorderRequest",
    "FeaturedDealResponse",
    # Content
    "BlogPostCreateRequest",
    "BlogPostResponse",
    "BlogPostUpdateRequest",
    "StaticPageCreateRequest",
    "StaticPageResponse",
    "StaticPageUpdateRequest",
    # Settings
    "CurrencyResponse",
    "SettingsResponse",
    "SettingsUpdateRequest",
    # Health
    "HealthCheckResponse",
]
