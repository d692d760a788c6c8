"""Vote service: wires the voting reconciler to the database for one request."""

import uuid
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.core.exceptions import NotFoundError
from dealboard.services.deal_service import DealService
from dealboard.voting import (
    AuthContext,
    SqlVoteStore,
    VoteLockRegistry,
    VoteOutcome,
    VoteState,
    VoteType,
    VotingReconciler,
)

logger = structlog.get_logger(__name__)


class VoteService:
    """Handles deal voting with per-user tracking."""

    def __init__(self, db: AsyncSession, locks: Optional[VoteLockRegistry] = None):
        self.db = db
        self.locks = locks
        self.store = SqlVoteStore(db)
        self.logger = logger.bind(service="vote_service")

    async def _reconciler(self, deal_id: uuid.UUID) -> VotingReconciler:
        counters = await DealService(self.db).get_counters(deal_id)
        if counters is None:
            raise NotFoundError("Deal", str(deal_id))
        return VotingReconciler(self.store, deal_id, counters, locks=self.locks)

    async def vote(
        self,
        deal_id: uuid.UUID,
        vote_type: VoteType,
        auth: AuthContext,
    ) -> VoteOutcome:
        """Cast or change a vote on a deal.

        Voting the same way twice removes the vote; voting the other way
        switches it. The returned outcome carries the updated counters or,
        on failure, the unchanged ones and a notification.

        Raises:
            NotFoundError: If no approved deal has this ID
        """
        reconciler = await self._reconciler(deal_id)
        outcome = await reconciler.cast(vote_type, auth)

        self.logger.info(
            "vote_processed",
            deal_id=str(deal_id),
            status=outcome.status.value,
            user_vote=outcome.state.value,
        )
        return outcome

    async def get_user_vote(self, deal_id: uuid.UUID, auth: AuthContext) -> VoteState:
        """Get the caller's current vote state for a deal.

        Raises:
            NotFoundError: If no approved deal has this ID
            PersistenceError: If the vote lookup fails
        """
        reconciler = await self._reconciler(deal_id)
        return await reconciler.load(auth)
