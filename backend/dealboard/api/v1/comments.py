"""Comments API endpoints (nested under /deals/{deal_id}/comments)."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.dependencies import get_db, get_current_user
from dealboard.models.user import User
from dealboard.schemas.comment import (
    CommentCreateRequest,
    CommentResponse,
    CommentUpdateRequest,
    build_comment_tree,
)
from dealboard.schemas.common import ApiResponse
from dealboard.services.comment_service import CommentService

router = APIRouter()


@router.get("/{deal_id}/comments", response_model=ApiResponse)
async def list_comments(deal_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get all comments for a deal as a reply tree."""
    service = CommentService(db)
    comments = await service.get_comments_for_deal(deal_id)

    return ApiResponse(
        status="success",
        data=[node.model_dump(mode="json") for node in build_comment_tree(comments)],
    )


@router.post("/{deal_id}/comments", response_model=ApiResponse, status_code=201)
async def create_comment(
    deal_id: UUID,
    body: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new comment or reply on a deal. Requires authentication."""
    service = CommentService(db)
    comment = await service.create_comment(
        deal_id=deal_id,
        user_id=current_user.id,
        content=body.content,
        parent_id=body.parent_id,
    )

    return ApiResponse(
        status="success",
        data=CommentResponse.from_comment(comment).model_dump(mode="json"),
    )


@router.put("/{deal_id}/comments/{comment_id}", response_model=ApiResponse)
async def update_comment(
    deal_id: UUID,
    comment_id: UUID,
    body: CommentUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit a comment. Only the author can edit."""
    service = CommentService(db)
    comment = await service.update_comment(comment_id, current_user.id, body.content)

    return ApiResponse(
        status="success",
        data=CommentResponse.from_comment(comment).model_dump(mode="json"),
    )


@router.delete("/{deal_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    deal_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft-delete a comment. Only the author can delete."""
    service = CommentService(db)
    await service.delete_comment(comment_id, current_user.id)
