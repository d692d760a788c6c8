"""Vote store interface and its SQLAlchemy implementation.

The store holds at most one row per (deal, user). Rows cross into the
voting code only as validated ``VoteRecord`` objects.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealboard.core.exceptions import PersistenceError
from dealboard.models.deal import Deal
from dealboard.models.deal_vote import DealVote
from dealboard.voting.aggregate import refresh_deal_aggregate
from dealboard.voting.state import DealCounters, VoteType

logger = structlog.get_logger(__name__)


class VoteRecord(BaseModel):
    """One user's current stance on one deal."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    deal_id: uuid.UUID
    user_id: uuid.UUID
    vote_type: VoteType


class VoteStore(ABC):
    """Single-row operations on the vote table.

    Implementations must raise ``PersistenceError`` for any backend failure.
    """

    @abstractmethod
    async def fetch(self, deal_id: uuid.UUID, user_id: uuid.UUID) -> Optional[VoteRecord]:
        """Return the user's vote on the deal, or None if there is none."""

    @abstractmethod
    async def insert(self, record: VoteRecord) -> None:
        """Create the vote row. Fails if one already exists."""

    @abstractmethod
    async def upsert(self, record: VoteRecord) -> None:
        """Set vote_type on the (deal, user) row, creating it if missing."""

    @abstractmethod
    async def delete(self, deal_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Remove the (deal, user) row if present."""

    async def fetch_counters(self, deal_id: uuid.UUID) -> Optional[DealCounters]:
        """Stored aggregate counters of the deal.

        None means the store does not keep aggregates and the caller's
        snapshot stands.
        """
        return None


class SqlVoteStore(VoteStore):
    """Vote store backed by the ``deal_votes`` table.

    Each write is committed together with a recount of the deal's
    aggregate counters, so a confirmed write is visible to the next reader.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(store="sql_vote_store")

    async def fetch_counters(self, deal_id: uuid.UUID) -> Optional[DealCounters]:
        try:
            result = await self.db.execute(
                select(Deal.upvotes, Deal.downvotes, Deal.heat_score).where(Deal.id == deal_id)
            )
            row = result.one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("counters_fetch_failed", deal_id=str(deal_id), error=str(e))
            raise PersistenceError("fetch", str(e)) from e

        if row is None:
            return None
        return DealCounters(upvotes=row.upvotes, downvotes=row.downvotes, heat_score=row.heat_score)

    async def fetch(self, deal_id: uuid.UUID, user_id: uuid.UUID) -> Optional[VoteRecord]:
        try:
            result = await self.db.execute(
                select(DealVote).where(
                    DealVote.deal_id == deal_id,
                    DealVote.user_id == user_id,
                )
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("vote_fetch_failed", deal_id=str(deal_id), error=str(e))
            raise PersistenceError("fetch", str(e)) from e

        if row is None:
            return None
        try:
            return VoteRecord.model_validate(row)
        except ValidationError as e:
            self.logger.error("vote_row_invalid", deal_id=str(deal_id), vote_type=row.vote_type)
            raise PersistenceError("fetch", f"invalid vote row: {row.vote_type!r}") from e

    async def insert(self, record: VoteRecord) -> None:
        async def _insert() -> None:
            self.db.add(
                DealVote(
                    deal_id=record.deal_id,
                    user_id=record.user_id,
                    vote_type=record.vote_type.value,
                )
            )

        await self._write("insert", record.deal_id, _insert)

    async def upsert(self, record: VoteRecord) -> None:
        async def _upsert() -> None:
            result = await self.db.execute(
                select(DealVote).where(
                    DealVote.deal_id == record.deal_id,
                    DealVote.user_id == record.user_id,
                )
            )
            existing = result.scalar_one_or_none()
            if existing:
                existing.vote_type = record.vote_type.value
            else:
                self.db.add(
                    DealVote(
                        deal_id=record.deal_id,
                        user_id=record.user_id,
                        vote_type=record.vote_type.value,
                    )
                )

        await self._write("upsert", record.deal_id, _upsert)

    async def delete(self, deal_id: uuid.UUID, user_id: uuid.UUID) -> None:
        async def _delete() -> None:
            await self.db.execute(
                delete(DealVote).where(
                    DealVote.deal_id == deal_id,
                    DealVote.user_id == user_id,
                )
            )

        await self._write("delete", deal_id, _delete)

    async def _write(
        self,
        operation: str,
        deal_id: uuid.UUID,
        mutate: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await mutate()
            await self.db.flush()
            await refresh_deal_aggregate(self.db, deal_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.logger.error(
                "vote_write_failed",
                operation=operation,
                deal_id=str(deal_id),
                error=str(e),
            )
            raise PersistenceError(operation, str(e)) from e

        self.logger.debug("vote_write_committed", operation=operation, deal_id=str(deal_id))
