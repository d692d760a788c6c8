"""Vote state machine for one viewer on one deal.

Three states (no vote, voted up, voted down) and two actions (cast up,
cast down). Every (state, action) pair maps to exactly one write against
the vote store and a fixed pair of counter deltas.
"""

import enum
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple


class VoteType(str, enum.Enum):
    UP = "up"
    DOWN = "down"


class VoteState(str, enum.Enum):
    NO_VOTE = "none"
    VOTED_UP = "up"
    VOTED_DOWN = "down"

    @classmethod
    def from_vote_type(cls, vote_type: Optional[VoteType]) -> "VoteState":
        if vote_type is None:
            return cls.NO_VOTE
        return cls.VOTED_UP if VoteType(vote_type) is VoteType.UP else cls.VOTED_DOWN

    @property
    def vote_type(self) -> Optional[VoteType]:
        if self is VoteState.NO_VOTE:
            return None
        return VoteType(self.value)


class VoteOperation(str, enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Transition:
    """The write and counter change that one action causes."""

    operation: VoteOperation
    next_state: VoteState
    upvote_delta: int = 0
    downvote_delta: int = 0


_TRANSITIONS: Dict[Tuple[VoteState, VoteType], Transition] = {
    (VoteState.NO_VOTE, VoteType.UP): Transition(VoteOperation.INSERT, VoteState.VOTED_UP, upvote_delta=1),
    (VoteState.NO_VOTE, VoteType.DOWN): Transition(VoteOperation.INSERT, VoteState.VOTED_DOWN, downvote_delta=1),
    # Same direction twice retracts the vote
    (VoteState.VOTED_UP, VoteType.UP): Transition(VoteOperation.DELETE, VoteState.NO_VOTE, upvote_delta=-1),
    (VoteState.VOTED_DOWN, VoteType.DOWN): Transition(VoteOperation.DELETE, VoteState.NO_VOTE, downvote_delta=-1),
    # Change of mind flips the existing row
    (VoteState.VOTED_UP, VoteType.DOWN): Transition(
        VoteOperation.UPDATE, VoteState.VOTED_DOWN, upvote_delta=-1, downvote_delta=1
    ),
    (VoteState.VOTED_DOWN, VoteType.UP): Transition(
        VoteOperation.UPDATE, VoteState.VOTED_UP, upvote_delta=1, downvote_delta=-1
    ),
}


def plan_transition(state: VoteState, vote_type: VoteType) -> Transition:
    """Return the transition for casting ``vote_type`` while in ``state``."""
    return _TRANSITIONS[(VoteState(state), VoteType(vote_type))]


@dataclass(frozen=True)
class DealCounters:
    """Locally displayed aggregate counters for a deal.

    heat_score is carried through untouched; it only changes when a fresh
    copy of the deal is fetched.
    """

    upvotes: int = 0
    downvotes: int = 0
    heat_score: int = 0

    def apply(self, transition: Transition) -> "DealCounters":
        return replace(
            self,
            upvotes=self.upvotes + transition.upvote_delta,
            downvotes=self.downvotes + transition.downvote_delta,
        )
