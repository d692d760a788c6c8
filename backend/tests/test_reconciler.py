"""Tests for the voting reconciler against in-memory vote stores."""

import asyncio
import uuid
from typing import Dict, List, Optional, Tuple

import pytest

from dealboard.core.exceptions import PersistenceError, Unauthenticated
from dealboard.voting import (
    AuthContext,
    DealCounters,
    NotificationLevel,
    OutcomeStatus,
    VoteLockRegistry,
    VoteOperation,
    VoteRecord,
    VoteState,
    VoteStore,
    VoteType,
    VotingReconciler,
)
from dealboard.voting.reconciler import SIGN_IN_MESSAGE, VOTE_FAILED_MESSAGE


class RecordingStore(VoteStore):
    """Dict-backed store that records every call."""

    def __init__(self, delay: float = 0):
        self.rows: Dict[Tuple[uuid.UUID, uuid.UUID], VoteRecord] = {}
        self.aggregates: Dict[uuid.UUID, DealCounters] = {}
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.delay = delay

    async def _pause(self):
        if self.delay:
            await asyncio.sleep(self.delay)

    async def fetch(self, deal_id, user_id):
        self.calls.append(("fetch", None))
        await self._pause()
        return self.rows.get((deal_id, user_id))

    async def fetch_counters(self, deal_id):
        return self.aggregates.get(deal_id)

    def _recount(self, deal_id, old: Optional[VoteRecord], new: Optional[VoteRecord]):
        counters = self.aggregates.get(deal_id)
        if counters is None:
            return
        up, down = counters.upvotes, counters.downvotes
        for record, sign in ((old, -1), (new, 1)):
            if record is None:
                continue
            if record.vote_type is VoteType.UP:
                up += sign
            else:
                down += sign
        self.aggregates[deal_id] = DealCounters(upvotes=up, downvotes=down, heat_score=2 * up - down)

    async def insert(self, record):
        await self._pause()
        key = (record.deal_id, record.user_id)
        if key in self.rows:
            raise PersistenceError("insert", "duplicate key")
        self.calls.append(("insert", record.vote_type.value))
        self.rows[key] = record
        self._recount(record.deal_id, None, record)

    async def upsert(self, record):
        await self._pause()
        self.calls.append(("upsert", record.vote_type.value))
        key = (record.deal_id, record.user_id)
        old = self.rows.get(key)
        self.rows[key] = record
        self._recount(record.deal_id, old, record)

    async def delete(self, deal_id, user_id):
        await self._pause()
        self.calls.append(("delete", None))
        old = self.rows.pop((deal_id, user_id), None)
        self._recount(deal_id, old, None)

    @property
    def writes(self):
        return [call for call in self.calls if call[0] != "fetch"]


class FailingStore(RecordingStore):
    """Reads work, every write fails like a dropped connection."""

    async def insert(self, record):
        raise PersistenceError("insert", "connection reset")

    async def upsert(self, record):
        raise PersistenceError("upsert", "connection reset")

    async def delete(self, deal_id, user_id):
        raise PersistenceError("delete", "connection reset")


class UnreadableStore(RecordingStore):
    async def fetch(self, deal_id, user_id):
        raise PersistenceError("fetch", "timeout")


class UncountableStore(RecordingStore):
    async def fetch_counters(self, deal_id):
        raise PersistenceError("fetch", "timeout")


@pytest.fixture
def deal_id():
    return uuid.uuid4()


@pytest.fixture
def auth():
    return AuthContext(user_id=uuid.uuid4())


def seed(store: RecordingStore, deal_id, auth, vote_type: VoteType):
    store.rows[(deal_id, auth.user_id)] = VoteRecord(
        deal_id=deal_id, user_id=auth.user_id, vote_type=vote_type
    )


class TestCastTransitions:
    async def test_cast_up_from_no_vote_inserts(self, deal_id, auth):
        store = RecordingStore()
        reconciler = VotingReconciler(store, deal_id, DealCounters(upvotes=5, downvotes=2))

        outcome = await reconciler.cast(VoteType.UP, auth)

        assert outcome.status is OutcomeStatus.APPLIED
        assert store.writes == [("insert", "up")]
        assert outcome.operation is VoteOperation.INSERT
        assert outcome.state is VoteState.VOTED_UP
        assert outcome.counters.upvotes == 6
        assert outcome.counters.downvotes == 2

    async def test_cast_up_again_toggles_off(self, deal_id, auth):
        store = RecordingStore()
        seed(store, deal_id, auth, VoteType.UP)
        reconciler = VotingReconciler(store, deal_id, DealCounters(upvotes=6, downvotes=0))

        outcome = await reconciler.cast(VoteType.UP, auth)

        assert store.writes == [("delete", None)]
        assert outcome.state is VoteState.NO_VOTE
        assert outcome.counters.upvotes == 5
        assert store.rows == {}

    async def test_cast_up_from_down_updates(self, deal_id, auth):
        store = RecordingStore()
        seed(store, deal_id, auth, VoteType.DOWN)
        reconciler = VotingReconciler(store, deal_id, DealCounters(upvotes=4, downvotes=3))

        outcome = await reconciler.cast(VoteType.UP, auth)

        assert store.writes == [("upsert", "up")]
        assert outcome.operation is VoteOperation.UPDATE
        assert outcome.state is VoteState.VOTED_UP
        assert outcome.counters.upvotes == 5
        assert outcome.counters.downvotes == 2
        assert store.rows[(deal_id, auth.user_id)].vote_type is VoteType.UP

    async def test_write_failure_rolls_back(self, deal_id, auth):
        store = FailingStore()
        counters = DealCounters(upvotes=5, downvotes=2, heat_score=8)
        reconciler = VotingReconciler(store, deal_id, counters)

        outcome = await reconciler.cast(VoteType.UP, auth)

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.state is VoteState.NO_VOTE
        assert outcome.counters == counters
        assert reconciler.state is VoteState.NO_VOTE
        assert reconciler.counters == counters
        assert outcome.notification.level is NotificationLevel.ERROR
        assert outcome.notification.message == VOTE_FAILED_MESSAGE
        assert outcome.notification.retryable is True
        assert isinstance(outcome.error, PersistenceError)


class TestAuthentication:
    async def test_unauthenticated_cast_does_nothing(self, deal_id):
        store = RecordingStore()
        counters = DealCounters(upvotes=3, downvotes=1)
        reconciler = VotingReconciler(store, deal_id, counters)

        outcome = await reconciler.cast(VoteType.UP, AuthContext.anonymous())

        assert store.calls == []
        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.counters == counters
        assert outcome.state is VoteState.NO_VOTE
        assert outcome.notification.message == SIGN_IN_MESSAGE
        assert isinstance(outcome.error, Unauthenticated)

    async def test_unauthenticated_load_skips_store(self, deal_id):
        store = RecordingStore()
        reconciler = VotingReconciler(store, deal_id, DealCounters())

        state = await reconciler.load(AuthContext.anonymous())

        assert state is VoteState.NO_VOTE
        assert store.calls == []


class TestLoad:
    async def test_load_reads_existing_vote(self, deal_id, auth):
        store = RecordingStore()
        seed(store, deal_id, auth, VoteType.DOWN)
        reconciler = VotingReconciler(store, deal_id, DealCounters())

        assert await reconciler.load(auth) is VoteState.VOTED_DOWN

    async def test_load_failure_propagates(self, deal_id, auth):
        reconciler = VotingReconciler(UnreadableStore(), deal_id, DealCounters())

        with pytest.raises(PersistenceError):
            await reconciler.load(auth)

    async def test_cast_with_failed_read_reports_failure(self, deal_id, auth):
        store = UnreadableStore()
        counters = DealCounters(upvotes=1)
        reconciler = VotingReconciler(store, deal_id, counters)

        outcome = await reconciler.cast(VoteType.DOWN, auth)

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.operation is None
        assert outcome.counters == counters
        assert store.writes == []

    async def test_cast_with_failed_counter_read_reports_failure(self, deal_id, auth):
        store = UncountableStore()
        counters = DealCounters(upvotes=3)
        reconciler = VotingReconciler(store, deal_id, counters)

        outcome = await reconciler.cast(VoteType.UP, auth)

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.counters == counters
        assert store.writes == []

    async def test_cast_builds_on_stored_counters(self, deal_id, auth):
        """A stale snapshot is replaced by the stored aggregate before applying the vote."""
        store = RecordingStore()
        store.aggregates[deal_id] = DealCounters(upvotes=9, downvotes=4, heat_score=14)
        reconciler = VotingReconciler(store, deal_id, DealCounters(upvotes=7, downvotes=4))

        outcome = await reconciler.cast(VoteType.DOWN, auth)

        assert (outcome.counters.upvotes, outcome.counters.downvotes) == (9, 5)
        assert outcome.counters.heat_score == 14


class TestSequences:
    async def test_round_trip_restores_upvotes(self, deal_id, auth):
        store = RecordingStore()
        reconciler = VotingReconciler(store, deal_id, DealCounters(upvotes=10, downvotes=4))

        await reconciler.cast(VoteType.UP, auth)
        outcome = await reconciler.cast(VoteType.UP, auth)

        assert outcome.state is VoteState.NO_VOTE
        assert outcome.counters.upvotes == 10
        assert store.rows == {}

    async def test_state_follows_store_between_casts(self, deal_id, auth):
        """A second reconciler sees the first one's confirmed write."""
        store = RecordingStore()
        first = VotingReconciler(store, deal_id, DealCounters())
        second = VotingReconciler(store, deal_id, DealCounters(upvotes=1))

        await first.cast(VoteType.UP, auth)
        outcome = await second.cast(VoteType.DOWN, auth)

        assert outcome.operation is VoteOperation.UPDATE
        assert store.rows[(deal_id, auth.user_id)].vote_type is VoteType.DOWN

    async def test_mixed_sequence_leaves_one_matching_row(self, deal_id, auth):
        store = RecordingStore()
        reconciler = VotingReconciler(store, deal_id, DealCounters())

        for vote_type in (VoteType.UP, VoteType.DOWN, VoteType.DOWN, VoteType.DOWN, VoteType.UP):
            await reconciler.cast(vote_type, auth)

        assert len(store.rows) == 1
        assert store.rows[(deal_id, auth.user_id)].vote_type is VoteType.UP
        assert reconciler.state is VoteState.VOTED_UP
        assert reconciler.counters.upvotes == 1
        assert reconciler.counters.downvotes == 0


class TestConcurrency:
    async def test_double_click_is_serialized(self, deal_id, auth):
        """Two overlapping clicks act like two sequential ones: on, then off."""
        store = RecordingStore(delay=0.01)
        start = DealCounters(upvotes=5, downvotes=2, heat_score=8)
        store.aggregates[deal_id] = start
        locks = VoteLockRegistry()
        first = VotingReconciler(store, deal_id, start, locks=locks)
        second = VotingReconciler(store, deal_id, start, locks=locks)

        on, off = await asyncio.gather(
            first.cast(VoteType.UP, auth),
            second.cast(VoteType.UP, auth),
        )

        assert [on.status, off.status] == [OutcomeStatus.APPLIED, OutcomeStatus.APPLIED]
        assert store.writes == [("insert", "up"), ("delete", None)]
        assert store.rows == {}
        assert (on.counters.upvotes, on.counters.downvotes) == (6, 2)
        assert off.operation is VoteOperation.DELETE
        assert (off.counters.upvotes, off.counters.downvotes) == (5, 2)

    async def test_different_users_do_not_block_each_other(self, deal_id):
        locks = VoteLockRegistry()
        alice, bob = uuid.uuid4(), uuid.uuid4()

        assert locks.lock_for(deal_id, alice) is not locks.lock_for(deal_id, bob)

    async def test_lock_released_after_use(self, deal_id, auth):
        locks = VoteLockRegistry()
        reconciler = VotingReconciler(RecordingStore(), deal_id, DealCounters(), locks=locks)

        await reconciler.cast(VoteType.UP, auth)

        assert len(locks) == 0
