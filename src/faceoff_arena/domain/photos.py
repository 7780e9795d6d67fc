"""Domain models and rules for photo battles."""

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Photo:
    """A photo competing in a group's battles."""

    id: UUID
    group_id: UUID
    owner_id: UUID
    image_url: str
    votes_count: int = 0
    wins_count: int = 0
    title: str | None = None
    owner_display_name: str | None = None


@dataclass(frozen=True)
class Vote:
    """An immutable battle outcome."""

    id: UUID
    group_id: UUID
    voter_id: UUID
    winner_photo_id: UUID
    loser_photo_id: UUID
    created_at: datetime | None = None


@dataclass(frozen=True)
class BattlePair:
    """Two distinct photos shown against each other."""

    first: Photo
    second: Photo

    @property
    def photo_ids(self) -> tuple[UUID, UUID]:
        return self.first.id, self.second.id

    def opponent_of(self, photo_id: UUID) -> Photo | None:
        """Return the other photo of the pair, or None if the id isn't in it."""
        if photo_id == self.first.id:
            return self.second
        if photo_id == self.second.id:
            return self.first
        return None


@dataclass(frozen=True)
class EmptyPool:
    """No battle can be formed from the candidate pool."""

    candidates: int


@dataclass(frozen=True)
class Tally:
    """Vote and win counters for a photo."""

    votes_count: int = 0
    wins_count: int = 0


def select_battle_pair(
    pool: Sequence[Photo], rng: random.Random | None = None
) -> BattlePair | EmptyPool:
    """Shuffle the pool and take the first two distinct photos."""
    distinct: list[Photo] = []
    seen: set[UUID] = set()
    for photo in pool:
        if photo.id in seen:
            continue
        seen.add(photo.id)
        distinct.append(photo)
    if len(distinct) < 2:  # noqa: PLR2004
        return EmptyPool(candidates=len(distinct))
    (rng or random.Random()).shuffle(distinct)
    return BattlePair(first=distinct[0], second=distinct[1])


def project_tallies(votes: Iterable[Vote]) -> dict[UUID, Tally]:
    """Rebuild per-photo counters from the vote log."""
    tallies: dict[UUID, Tally] = {}
    for vote in votes:
        winner = tallies.get(vote.winner_photo_id, Tally())
        loser = tallies.get(vote.loser_photo_id, Tally())
        tallies[vote.winner_photo_id] = Tally(
            votes_count=winner.votes_count + 1,
            wins_count=winner.wins_count + 1,
        )
        tallies[vote.loser_photo_id] = Tally(
            votes_count=loser.votes_count + 1,
            wins_count=loser.wins_count,
        )
    return tallies


def win_rate(photo: Photo) -> float:
    """Return the share of battles a photo has won."""
    if photo.votes_count <= 0:
        return 0.0
    return photo.wins_count / photo.votes_count
