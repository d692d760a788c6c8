"""Vote Pydantic schemas for request/response validation."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from dealboard.schemas.deal import HeatBadge
from dealboard.voting import VoteOutcome, VoteType


class VoteRequest(BaseModel):
    """Request schema for voting on a deal."""

    vote_type: VoteType


class NotificationResponse(BaseModel):
    level: str
    message: str
    retryable: bool = False


class VoteStatusResponse(BaseModel):
    """The caller's current vote on a deal."""

    deal_id: UUID
    user_vote: Optional[VoteType] = None


class VoteResultResponse(BaseModel):
    """Result of a vote action with the locally updated counters."""

    deal_id: UUID
    user_vote: Optional[VoteType] = None
    operation: Optional[str] = None
    upvotes: int
    downvotes: int
    heat_score: int
    heat: HeatBadge
    notification: Optional[NotificationResponse] = None

    @classmethod
    def from_outcome(cls, deal_id: UUID, outcome: VoteOutcome) -> "VoteResultResponse":
        notification = None
        if outcome.notification:
            notification = NotificationResponse(
                level=outcome.notification.level.value,
                message=outcome.notification.message,
                retryable=outcome.notification.retryable,
            )
        return cls(
            deal_id=deal_id,
            user_vote=outcome.state.vote_type,
            operation=outcome.operation.value if outcome.operation else None,
            upvotes=outcome.counters.upvotes,
            downvotes=outcome.counters.downvotes,
            heat_score=outcome.counters.heat_score,
            heat=HeatBadge.for_score(outcome.counters.heat_score),
            notification=notification,
        )
