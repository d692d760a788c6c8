"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from dealboard.api.v1 import (
    admin,
    auth,
    blog,
    categories,
    comments,
    deals,
    featured,
    health,
    pages,
    root,
    settings,
    shops,
)

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["health"])
api_v1_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_v1_router.include_router(deals.router, prefix="/deals", tags=["deals"])
api_v1_router.include_router(comments.router, prefix="/deals", tags=["comments"])
api_v1_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_v1_router.include_router(shops.router, prefix="/shops", tags=["shops"])
api_v1_router.include_router(featured.router, prefix="/featured", tags=["featured"])
api_v1_router.include_router(blog.router, prefix="/blog", tags=["blog"])
api_v1_router.include_router(pages.router, prefix="/pages", tags=["pages"])
api_v1_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_v1_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_v1_router.include_router(root.router, prefix="/root", tags=["root"])
