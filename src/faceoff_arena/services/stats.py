"""Leaderboard statistics for group photos."""

import logging
from dataclasses import dataclass
from uuid import UUID

from faceoff_arena.domain.photos import Photo, win_rate
from faceoff_arena.services.battles import PhotoRepository
from faceoff_arena.services.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Standing:
    """A photo's position on a group leaderboard."""

    rank: int
    photo: Photo
    win_rate: float


@dataclass
class StatsService:
    """Service for ranking photos by their tallies."""

    repository: PhotoRepository

    def standings(self, group_id: UUID, limit: int = 20) -> list[Standing]:
        """Rank photos by wins, then win rate, then votes."""
        try:
            group_photos = self.repository.list_group_photos(group_id)
        except Exception as exc:
            logger.exception(
                "Failed to load leaderboard", extra={"group_id": str(group_id)}
            )
            raise StorageError("Failed to load leaderboard") from exc
        photos = sorted(
            group_photos,
            key=lambda photo: (photo.wins_count, win_rate(photo), photo.votes_count),
            reverse=True,
        )
        return [
            Standing(rank=index, photo=photo, win_rate=win_rate(photo))
            for index, photo in enumerate(photos[:limit], start=1)
        ]
