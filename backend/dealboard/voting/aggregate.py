"""Deal aggregate maintenance.

Plays the part of the database trigger that keeps ``deals.upvotes``,
``deals.downvotes`` and ``deals.heat_score`` in step with ``deal_votes``.
It runs inside the same transaction as the vote write.
"""

import uuid

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.models.deal import Deal
from dealboard.models.deal_vote import DealVote
from dealboard.voting.state import DealCounters, VoteType

logger = structlog.get_logger(__name__)

UPVOTE_WEIGHT = 2
DOWNVOTE_WEIGHT = 1


def compute_heat_score(upvotes: int, downvotes: int) -> int:
    return upvotes * UPVOTE_WEIGHT - downvotes * DOWNVOTE_WEIGHT


async def refresh_deal_aggregate(db: AsyncSession, deal_id: uuid.UUID) -> DealCounters:
    """Recount the votes of a deal and store the result on the deal row.

    Args:
        db: Session holding the pending vote write
        deal_id: Deal to recount

    Returns:
        The counters now stored on the deal
    """
    result = await db.execute(
        select(DealVote.vote_type, func.count(DealVote.id))
        .where(DealVote.deal_id == deal_id)
        .group_by(DealVote.vote_type)
    )
    counts = {vote_type: count for vote_type, count in result.all()}

    upvotes = counts.get(VoteType.UP.value, 0)
    downvotes = counts.get(VoteType.DOWN.value, 0)
    counters = DealCounters(
        upvotes=upvotes,
        downvotes=downvotes,
        heat_score=compute_heat_score(upvotes, downvotes),
    )

    await db.execute(
        update(Deal)
        .where(Deal.id == deal_id)
        .values(
            upvotes=counters.upvotes,
            downvotes=counters.downvotes,
            heat_score=counters.heat_score,
        )
    )

    logger.debug(
        "deal_aggregate_refreshed",
        deal_id=str(deal_id),
        upvotes=counters.upvotes,
        downvotes=counters.downvotes,
        heat_score=counters.heat_score,
    )
    return counters
