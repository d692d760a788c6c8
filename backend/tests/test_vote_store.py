"""Tests for the SQL vote store, aggregate recount and VoteService."""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.core.exceptions import NotFoundError, PersistenceError
from dealboard.models import Deal, DealVote, User
from dealboard.models.deal import STATUS_PENDING
from dealboard.services.vote_service import VoteService
from dealboard.voting import (
    AuthContext,
    OutcomeStatus,
    SqlVoteStore,
    VoteRecord,
    VoteState,
    VoteType,
)
from dealboard.voting.aggregate import compute_heat_score, refresh_deal_aggregate


async def _vote_rows(db: AsyncSession, deal_id: uuid.UUID):
    result = await db.execute(select(DealVote).where(DealVote.deal_id == deal_id))
    return list(result.scalars().all())


async def _deal_counts(db: AsyncSession, deal_id: uuid.UUID):
    result = await db.execute(
        select(Deal.upvotes, Deal.downvotes, Deal.heat_score).where(Deal.id == deal_id)
    )
    return tuple(result.one())


class TestSqlVoteStore:
    async def test_fetch_missing_returns_none(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        store = SqlVoteStore(test_db)
        assert await store.fetch(sample_deal.id, sample_user.id) is None

    async def test_insert_then_fetch(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        store = SqlVoteStore(test_db)
        record = VoteRecord(deal_id=sample_deal.id, user_id=sample_user.id, vote_type=VoteType.UP)

        await store.insert(record)

        assert await store.fetch(sample_deal.id, sample_user.id) == record
        assert await _deal_counts(test_db, sample_deal.id) == (1, 0, 2)

    async def test_duplicate_insert_raises_persistence_error(
        self, test_db: AsyncSession, sample_deal: Deal, sample_user: User
    ):
        deal_id = sample_deal.id  # rollback expires the ORM objects
        store = SqlVoteStore(test_db)
        record = VoteRecord(deal_id=deal_id, user_id=sample_user.id, vote_type=VoteType.UP)
        await store.insert(record)

        with pytest.raises(PersistenceError) as exc_info:
            await store.insert(record)

        assert exc_info.value.operation == "insert"
        assert len(await _vote_rows(test_db, deal_id)) == 1

    async def test_upsert_flips_existing_row(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        store = SqlVoteStore(test_db)
        await store.insert(
            VoteRecord(deal_id=sample_deal.id, user_id=sample_user.id, vote_type=VoteType.UP)
        )

        await store.upsert(
            VoteRecord(deal_id=sample_deal.id, user_id=sample_user.id, vote_type=VoteType.DOWN)
        )

        rows = await _vote_rows(test_db, sample_deal.id)
        assert [r.vote_type for r in rows] == ["down"]
        assert await _deal_counts(test_db, sample_deal.id) == (0, 1, -1)

    async def test_delete_removes_row(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        store = SqlVoteStore(test_db)
        await store.insert(
            VoteRecord(deal_id=sample_deal.id, user_id=sample_user.id, vote_type=VoteType.DOWN)
        )

        await store.delete(sample_deal.id, sample_user.id)

        assert await _vote_rows(test_db, sample_deal.id) == []
        assert await _deal_counts(test_db, sample_deal.id) == (0, 0, 0)

    async def test_fetch_counters_reads_stored_aggregate(
        self, test_db: AsyncSession, sample_deal: Deal, sample_user: User
    ):
        store = SqlVoteStore(test_db)
        await store.insert(
            VoteRecord(deal_id=sample_deal.id, user_id=sample_user.id, vote_type=VoteType.UP)
        )

        counters = await store.fetch_counters(sample_deal.id)

        assert (counters.upvotes, counters.downvotes, counters.heat_score) == (1, 0, 2)
        assert await store.fetch_counters(uuid.uuid4()) is None

    async def test_invalid_row_rejected_at_boundary(
        self, test_db: AsyncSession, sample_deal: Deal, sample_user: User
    ):
        test_db.add(DealVote(deal_id=sample_deal.id, user_id=sample_user.id, vote_type="meh"))
        await test_db.commit()

        with pytest.raises(PersistenceError):
            await SqlVoteStore(test_db).fetch(sample_deal.id, sample_user.id)


class TestAggregate:
    def test_compute_heat_score(self):
        assert compute_heat_score(0, 0) == 0
        assert compute_heat_score(10, 3) == 17
        assert compute_heat_score(1, 5) == -3

    async def test_refresh_recounts_all_votes(
        self,
        test_db: AsyncSession,
        sample_deal: Deal,
        sample_user: User,
        other_user: User,
        admin_user: User,
    ):
        test_db.add_all(
            [
                DealVote(deal_id=sample_deal.id, user_id=sample_user.id, vote_type="up"),
                DealVote(deal_id=sample_deal.id, user_id=other_user.id, vote_type="up"),
                DealVote(deal_id=sample_deal.id, user_id=admin_user.id, vote_type="down"),
            ]
        )
        await test_db.flush()

        counters = await refresh_deal_aggregate(test_db, sample_deal.id)
        await test_db.commit()

        assert (counters.upvotes, counters.downvotes, counters.heat_score) == (2, 1, 3)
        assert await _deal_counts(test_db, sample_deal.id) == (2, 1, 3)


class TestVoteService:
    async def test_vote_applies_and_persists(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        service = VoteService(test_db)
        auth = AuthContext(user_id=sample_user.id)

        outcome = await service.vote(sample_deal.id, VoteType.UP, auth)

        assert outcome.status is OutcomeStatus.APPLIED
        assert outcome.counters.upvotes == 1
        assert await service.get_user_vote(sample_deal.id, auth) is VoteState.VOTED_UP
        assert len(await _vote_rows(test_db, sample_deal.id)) == 1

    async def test_vote_twice_clears(self, test_db: AsyncSession, sample_deal: Deal, sample_user: User):
        service = VoteService(test_db)
        auth = AuthContext(user_id=sample_user.id)

        await service.vote(sample_deal.id, VoteType.DOWN, auth)
        outcome = await service.vote(sample_deal.id, VoteType.DOWN, auth)

        assert outcome.state is VoteState.NO_VOTE
        assert outcome.counters.downvotes == 0
        assert await _vote_rows(test_db, sample_deal.id) == []

    async def test_anonymous_vote_writes_nothing(self, test_db: AsyncSession, sample_deal: Deal):
        service = VoteService(test_db)

        outcome = await service.vote(sample_deal.id, VoteType.UP, AuthContext.anonymous())

        assert outcome.status is OutcomeStatus.REJECTED
        count = await test_db.execute(select(func.count(DealVote.id)))
        assert count.scalar() == 0
        assert await _deal_counts(test_db, sample_deal.id) == (0, 0, 0)

    async def test_pending_deal_takes_no_votes(
        self, test_db: AsyncSession, sample_deal: Deal, sample_user: User
    ):
        deal_id = sample_deal.id
        sample_deal.status = STATUS_PENDING
        await test_db.commit()
        service = VoteService(test_db)

        with pytest.raises(NotFoundError):
            await service.vote(deal_id, VoteType.UP, AuthContext(user_id=sample_user.id))

        assert await _vote_rows(test_db, deal_id) == []

    async def test_unknown_deal_raises(self, test_db: AsyncSession, sample_user: User):
        service = VoteService(test_db)

        with pytest.raises(NotFoundError):
            await service.vote(uuid.uuid4(), VoteType.UP, AuthContext(user_id=sample_user.id))
