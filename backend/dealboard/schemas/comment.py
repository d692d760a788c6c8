"""Comment Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict

from dealboard.schemas.auth import UserBrief


class CommentCreateRequest(BaseModel):
    """Request to create a new comment."""
    content: str = Field(min_length=1, max_length=2000)
    parent_id: Optional[UUID] = None


class CommentUpdateRequest(BaseModel):
    """Request to update an existing comment."""
    content: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Single comment with its replies."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    deal_id: UUID
    user: UserBrief
    parent_id: Optional[UUID] = None
    content: str
    is_deleted: bool
    edited_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    replies: List["CommentResponse"] = []

    @classmethod
    def from_comment(cls, comment, replies: Optional[List["CommentResponse"]] = None) -> "CommentResponse":
        """Build from a comment row whose ``user`` is loaded, without touching ``replies``."""
        return cls(
            id=comment.id,
            deal_id=comment.deal_id,
            user=UserBrief.model_validate(comment.user),
            parent_id=comment.parent_id,
            content=comment.content,
            is_deleted=comment.is_deleted,
            edited_at=comment.edited_at,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            replies=replies or [],
        )


def build_comment_tree(comments) -> List[CommentResponse]:
    """Nest a flat, chronologically ordered list of comments under their parents.

    Deleted comments are kept only as placeholders for surviving replies.
    """
    children: dict = {}
    for comment in comments:
        children.setdefault(comment.parent_id, []).append(comment)

    def _build(comment) -> Optional[CommentResponse]:
        replies = [r for r in (_build(child) for child in children.get(comment.id, [])) if r]
        if comment.is_deleted and not replies:
            return None
        return CommentResponse.from_comment(comment, replies)

    return [node for node in (_build(c) for c in children.get(None, [])) if node]
