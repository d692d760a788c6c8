"""Voting reconciler: turns a vote click into one vote-store write.

The reconciler tracks one viewer's vote state on one deal together with the
locally displayed counters. A cast applies the optimistic counter change
immediately, performs exactly one write, and rolls the change back if the
write fails. Requests for the same (deal, user) pair are serialized, and the
vote state and the stored counters are re-read inside the lock, so a second
click always builds on the confirmed result of the first.

Backend failures never escape ``cast``; they come back as a failed
``VoteOutcome`` carrying a transient notification for the user.
"""

import enum
import uuid
from dataclasses import dataclass
from typing import Optional

import structlog

from dealboard.core.exceptions import DealboardException, PersistenceError, Unauthenticated
from dealboard.voting.locks import VoteLockRegistry
from dealboard.voting.state import (
    DealCounters,
    Transition,
    VoteOperation,
    VoteState,
    VoteType,
    plan_transition,
)
from dealboard.voting.store import VoteRecord, VoteStore

logger = structlog.get_logger(__name__)

SIGN_IN_MESSAGE = "Please sign in to vote"
VOTE_FAILED_MESSAGE = "Failed to vote, please try again"


@dataclass(frozen=True)
class AuthContext:
    """Who is acting. Passed in on every call rather than read from a session global."""

    user_id: Optional[uuid.UUID] = None
    role: str = "user"

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls()


class NotificationLevel(str, enum.Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A transient, non-fatal message for the user (a toast)."""

    level: NotificationLevel
    message: str
    retryable: bool = False


class OutcomeStatus(str, enum.Enum):
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class VoteOutcome:
    status: OutcomeStatus
    state: VoteState
    counters: DealCounters
    operation: Optional[VoteOperation] = None
    notification: Optional[Notification] = None
    error: Optional[DealboardException] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.APPLIED


class VotingReconciler:
    """Vote state and displayed counters for one deal as seen by one viewer."""

    def __init__(
        self,
        store: VoteStore,
        deal_id: uuid.UUID,
        counters: DealCounters,
        locks: Optional[VoteLockRegistry] = None,
    ):
        self.store = store
        self.deal_id = deal_id
        self.locks = locks if locks is not None else VoteLockRegistry()
        self._counters = counters
        self._state = VoteState.NO_VOTE
        self.logger = logger.bind(component="voting_reconciler", deal_id=str(deal_id))

    @property
    def state(self) -> VoteState:
        return self._state

    @property
    def counters(self) -> DealCounters:
        return self._counters

    async def load(self, auth: AuthContext) -> VoteState:
        """Read the viewer's current vote from the store.

        No row means ``NO_VOTE``. Signed-out viewers are always ``NO_VOTE``
        and cause no read.

        Raises:
            PersistenceError: If the store read fails
        """
        if not auth.is_authenticated:
            self._state = VoteState.NO_VOTE
            return self._state

        record = await self.store.fetch(self.deal_id, auth.user_id)
        self._state = VoteState.from_vote_type(record.vote_type if record else None)
        return self._state

    async def cast(self, vote_type: VoteType, auth: AuthContext) -> VoteOutcome:
        """Cast an up or down vote on behalf of ``auth``."""
        vote_type = VoteType(vote_type)

        if not auth.is_authenticated:
            self.logger.info("vote_rejected_unauthenticated", vote_type=vote_type.value)
            return VoteOutcome(
                status=OutcomeStatus.REJECTED,
                state=self._state,
                counters=self._counters,
                notification=Notification(NotificationLevel.INFO, SIGN_IN_MESSAGE),
                error=Unauthenticated(SIGN_IN_MESSAGE),
            )

        async with self.locks.lock_for(self.deal_id, auth.user_id):
            try:
                await self.load(auth)
                await self._refresh_counters()
            except PersistenceError as e:
                return self._failed(e, operation=None)

            transition = plan_transition(self._state, vote_type)
            previous_state, previous_counters = self._state, self._counters

            # Optimistic: show the result first, undo it if the write fails
            self._state = transition.next_state
            self._counters = previous_counters.apply(transition)

            try:
                await self._execute(transition, auth.user_id, vote_type)
            except PersistenceError as e:
                self._state, self._counters = previous_state, previous_counters
                return self._failed(e, operation=transition.operation)

        self.logger.info(
            "vote_cast",
            user_id=str(auth.user_id),
            vote_type=vote_type.value,
            operation=transition.operation.value,
            state=self._state.value,
            upvotes=self._counters.upvotes,
            downvotes=self._counters.downvotes,
        )
        return VoteOutcome(
            status=OutcomeStatus.APPLIED,
            state=self._state,
            counters=self._counters,
            operation=transition.operation,
        )

    async def _refresh_counters(self) -> None:
        """Replace the snapshot with stored counters, when the store keeps them."""
        stored = await self.store.fetch_counters(self.deal_id)
        if stored is not None:
            self._counters = stored

    async def _execute(self, transition: Transition, user_id: uuid.UUID, vote_type: VoteType) -> None:
        if transition.operation is VoteOperation.DELETE:
            await self.store.delete(self.deal_id, user_id)
            return

        record = VoteRecord(deal_id=self.deal_id, user_id=user_id, vote_type=vote_type)
        if transition.operation is VoteOperation.INSERT:
            await self.store.insert(record)
        else:
            await self.store.upsert(record)

    def _failed(self, error: PersistenceError, operation: Optional[VoteOperation]) -> VoteOutcome:
        self.logger.warning(
            "vote_failed",
            operation=operation.value if operation else None,
            error=error.message,
        )
        return VoteOutcome(
            status=OutcomeStatus.FAILED,
            state=self._state,
            counters=self._counters,
            operation=operation,
            notification=Notification(NotificationLevel.ERROR, VOTE_FAILED_MESSAGE, retryable=True),
            error=error,
        )
