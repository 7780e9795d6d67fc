"""Battle selection and vote tallying."""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from faceoff_arena.domain.photos import (
    BattlePair,
    EmptyPool,
    Photo,
    Vote,
    select_battle_pair,
)

logger = logging.getLogger(__name__)

DEFAULT_POOL_LIMIT = 10


class PhotoRepository(Protocol):
    """Persistence interface for group photos."""

    def list_candidates(self, group_id: UUID, limit: int) -> list[Photo]:
        """Return up to `limit` photos of the group."""

    def list_group_photos(self, group_id: UUID) -> list[Photo]:
        """Return every photo of the group."""


class VoteRepository(Protocol):
    """Persistence interface for the append-only vote log."""

    def create_vote(
        self,
        group_id: UUID,
        voter_id: UUID,
        winner_photo_id: UUID,
        loser_photo_id: UUID,
    ) -> Vote:
        """Append a vote and return the stored record."""

    def list_group_votes(self, group_id: UUID) -> list[Vote]:
        """Return the full vote log of a group."""

    def list_recent_votes(self, limit: int) -> list[Vote]:
        """Return the most recent votes across groups."""


class BattleError(Exception):
    """Base error for battle operations."""


class CandidateFetchError(BattleError):
    """The candidate pool couldn't be fetched."""


class VoteWriteError(BattleError):
    """The vote couldn't be recorded."""


class InvalidVoteError(BattleError):
    """The vote doesn't describe a valid battle outcome."""


class VoteInProgressError(BattleError):
    """A vote for this session is still awaiting confirmation."""


@dataclass
class BattleService:
    """Fetches candidate pools, picks pairs and records votes."""

    photo_repository: PhotoRepository
    vote_repository: VoteRepository
    pool_limit: int = DEFAULT_POOL_LIMIT
    rng: random.Random = field(default_factory=random.Random)

    async def fetch_candidate_pool(self, group_id: UUID) -> list[Photo]:
        """Fetch a fresh candidate pool for the group."""
        try:
            return await asyncio.to_thread(
                self.photo_repository.list_candidates, group_id, self.pool_limit
            )
        except Exception as exc:
            logger.exception(
                "Failed to fetch candidate pool", extra={"group_id": str(group_id)}
            )
            raise CandidateFetchError(str(exc)) from exc

    async def next_battle(self, group_id: UUID) -> BattlePair | EmptyPool:
        """Fetch candidates and select the next pair."""
        pool = await self.fetch_candidate_pool(group_id)
        return select_battle_pair(pool, self.rng)

    async def record_vote(
        self,
        group_id: UUID,
        voter_id: UUID,
        winner_photo_id: UUID,
        loser_photo_id: UUID,
    ) -> Vote:
        """Append a vote; counters follow from the stored record."""
        if winner_photo_id == loser_photo_id:
            raise InvalidVoteError("Winner and loser must be different photos")
        try:
            vote = await asyncio.to_thread(
                self.vote_repository.create_vote,
                group_id,
                voter_id,
                winner_photo_id,
                loser_photo_id,
            )
        except Exception as exc:
            logger.exception(
                "Failed to record vote",
                extra={
                    "group_id": str(group_id),
                    "winner_photo_id": str(winner_photo_id),
                    "loser_photo_id": str(loser_photo_id),
                },
            )
            raise VoteWriteError(str(exc)) from exc
        logger.info(
            "Vote recorded",
            extra={"vote_id": str(vote.id), "group_id": str(group_id)},
        )
        return vote
