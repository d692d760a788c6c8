"""Deal voting: state machine, vote store and the reconciler that drives them."""

from dealboard.voting.heat import HeatTier, heat_tier
from dealboard.voting.locks import VoteLockRegistry, get_vote_locks
from dealboard.voting.reconciler import (
    AuthContext,
    Notification,
    NotificationLevel,
    OutcomeStatus,
    VoteOutcome,
    VotingReconciler,
)
from dealboard.voting.state import (
    DealCounters,
    Transition,
    VoteOperation,
    VoteState,
    VoteType,
    plan_transition,
)
from dealboard.voting.store import SqlVoteStore, VoteRecord, VoteStore

__all__ = [
    "AuthContext",
    "DealCounters",
    "HeatTier",
    "Notification",
    "NotificationLevel",
    "OutcomeStatus",
    "SqlVoteStore",
    "Transition",
    "VoteLockRegistry",
    "VoteOperation",
    "VoteOutcome",
    "VoteRecord",
    "VoteState",
    "VoteStore",
    "VoteType",
    "VotingReconciler",
    "get_vote_locks",
    "heat_tier",
]
