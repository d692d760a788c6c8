"""Content service: blog posts and static pages."""

import uuid
from typing import Any, Dict, List, Optional, Tuple

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.core.exceptions import NotFoundError
from dealboard.models.blog_post import POST_PUBLISHED, BlogPost
from dealboard.models.static_page import StaticPage

logger = structlog.get_logger(__name__)


class ContentService:
    """CRUD for editorial content. Public reads see published items only."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="content_service")

    # Blog posts

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 12,
        category: Optional[str] = None,
        published_only: bool = True,
    ) -> Tuple[List[BlogPost], int]:
        filters = []
        if published_only:
            filters.append(BlogPost.status == POST_PUBLISHED)
        if category:
            filters.append(BlogPost.category == category)

        result = await self.db.execute(
            select(BlogPost)
            .where(*filters)
            .order_by(BlogPost.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        posts = list(result.scalars().all())
        total_result = await self.db.execute(select(func.count(BlogPost.id)).where(*filters))
        return posts, total_result.scalar() or 0

    async def get_post_by_slug(self, slug: str, published_only: bool = True) -> Optional[BlogPost]:
        query = select(BlogPost).where(BlogPost.slug == slug)
        if published_only:
            query = query.where(BlogPost.status == POST_PUBLISHED)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_post(self, author_id: Optional[uuid.UUID], **fields: Any) -> BlogPost:
        post = BlogPost(author_id=author_id, **fields)
        await self._add(post)
        self.logger.info("blog_post_created", slug=post.slug, status=post.status)
        return post

    async def update_post(self, post_id: uuid.UUID, **fields: Any) -> BlogPost:
        post = await self._get(BlogPost, post_id)
        await self._apply(post, fields)
        self.logger.info("blog_post_updated", post_id=str(post_id), fields=sorted(fields))
        return post

    async def delete_post(self, post_id: uuid.UUID) -> None:
        await self._delete(BlogPost, post_id)

    # Static pages

    async def list_pages(self, published_only: bool = True) -> List[StaticPage]:
        query = select(StaticPage).order_by(StaticPage.title)
        if published_only:
            query = query.where(StaticPage.is_published.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_page_by_slug(self, slug: str, published_only: bool = True) -> Optional[StaticPage]:
        query = select(StaticPage).where(StaticPage.slug == slug)
        if published_only:
            query = query.where(StaticPage.is_published.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create_page(self, **fields: Any) -> StaticPage:
        page = StaticPage(**fields)
        await self._add(page)
        self.logger.info("static_page_created", slug=page.slug)
        return page

    async def update_page(self, page_id: uuid.UUID, **fields: Any) -> StaticPage:
        page = await self._get(StaticPage, page_id)
        await self._apply(page, fields)
        self.logger.info("static_page_updated", page_id=str(page_id), fields=sorted(fields))
        return page

    async def delete_page(self, page_id: uuid.UUID) -> None:
        await self._delete(StaticPage, page_id)

    # Helpers

    async def _get(self, model, row_id: uuid.UUID):
        row = await self.db.get(model, row_id)
        if not row:
            raise NotFoundError(model.__name__, str(row_id))
        return row

    async def _add(self, row) -> None:
        slug = row.slug
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError(f"Slug '{slug}' is already in use")
        await self.db.refresh(row)

    async def _apply(self, row, fields: Dict[str, Any]) -> None:
        for name, value in fields.items():
            setattr(row, name, value)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ValueError(f"Slug '{fields.get('slug')}' is already in use")
        await self.db.refresh(row)

    async def _delete(self, model, row_id: uuid.UUID) -> None:
        row = await self._get(model, row_id)
        await self.db.delete(row)
        await self.db.flush()
        self.logger.info(f"{model.__tablename__}_deleted", id=str(row_id))
