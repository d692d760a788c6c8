"""Comment service for deal discussions."""

import uuid
from typing import List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealboard.core.exceptions import NotFoundError, PermissionDenied
from dealboard.models.base import utcnow
from dealboard.models.comment import Comment
from dealboard.models.deal import Deal

logger = structlog.get_logger(__name__)

DELETED_COMMENT_TEXT = "This comment has been deleted"


class CommentService:
    """Handles CRUD operations for deal comments."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="comment_service")

    async def get_comments_for_deal(self, deal_id: uuid.UUID) -> List[Comment]:
        """All comments on a deal, oldest first, with their authors loaded.

        The list is flat; nesting is done by the caller from ``parent_id``.
        """
        stmt = (
            select(Comment)
            .where(Comment.deal_id == deal_id)
            .options(selectinload(Comment.user))
            .order_by(Comment.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_comment(
        self,
        deal_id: uuid.UUID,
        user_id: uuid.UUID,
        content: str,
        parent_id: Optional[uuid.UUID] = None,
    ) -> Comment:
        """Create a comment or a reply on a deal.

        Raises:
            NotFoundError: If the deal, or the parent comment on that deal, is missing
        """
        deal_check = await self.db.execute(select(Deal.id).where(Deal.id == deal_id))
        if deal_check.scalar_one_or_none() is None:
            raise NotFoundError("Deal", str(deal_id))

        if parent_id:
            parent_check = await self.db.execute(
                select(Comment.id).where(
                    Comment.id == parent_id,
                    Comment.deal_id == deal_id,
                    Comment.is_deleted.is_(False),
                )
            )
            if parent_check.scalar_one_or_none() is None:
                raise NotFoundError("Comment", str(parent_id))

        comment = Comment(
            deal_id=deal_id,
            user_id=user_id,
            content=content,
            parent_id=parent_id,
            is_deleted=False,
        )
        self.db.add(comment)
        await self.db.flush()

        self.logger.info(
            "comment_created",
            comment_id=str(comment.id),
            deal_id=str(deal_id),
            is_reply=comment.is_reply,
        )
        return await self._get_with_user(comment.id)

    async def update_comment(
        self,
        comment_id: uuid.UUID,
        user_id: uuid.UUID,
        content: str,
    ) -> Comment:
        """Update a comment's content. Only the author can edit."""
        comment = await self._get_own(comment_id, user_id)
        comment.content = content
        comment.edited_at = utcnow()
        await self.db.flush()
        return await self._get_with_user(comment.id)

    async def delete_comment(self, comment_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Soft-delete a comment so its replies stay threaded. Only the author can delete."""
        comment = await self._get_own(comment_id, user_id)
        comment.is_deleted = True
        comment.content = DELETED_COMMENT_TEXT
        await self.db.flush()
        self.logger.info("comment_deleted", comment_id=str(comment_id))

    async def _get_own(self, comment_id: uuid.UUID, user_id: uuid.UUID) -> Comment:
        result = await self.db.execute(
            select(Comment).where(Comment.id == comment_id, Comment.is_deleted.is_(False))
        )
        comment = result.scalar_one_or_none()
        if not comment:
            raise NotFoundError("Comment", str(comment_id))
        if comment.user_id != user_id:
            raise PermissionDenied("comment author")
        return comment

    async def _get_with_user(self, comment_id: uuid.UUID) -> Comment:
        result = await self.db.execute(
            select(Comment)
            .options(selectinload(Comment.user))
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
