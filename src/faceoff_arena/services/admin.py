"""Admin service for reporting."""

import logging
from dataclasses import dataclass
from uuid import UUID

from faceoff_arena.domain.photos import Tally, Vote, project_tallies
from faceoff_arena.services.battles import PhotoRepository, VoteRepository
from faceoff_arena.services.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class AdminService:
    """Service for admin dashboards."""

    photo_repository: PhotoRepository
    vote_repository: VoteRepository

    def list_votes(self, limit: int = 50) -> list[dict[str, object]]:
        """Return the most recent votes."""
        try:
            votes = self.vote_repository.list_recent_votes(limit)
        except Exception as exc:
            logger.exception("Failed to load recent votes")
            raise StorageError("Failed to load votes") from exc
        return [_serialize_vote(vote) for vote in votes]

    def tally_audit(self, group_id: UUID) -> dict[str, object]:
        """Compare stored counters with counters rebuilt from the vote log."""
        try:
            photos = self.photo_repository.list_group_photos(group_id)
            votes = self.vote_repository.list_group_votes(group_id)
        except Exception as exc:
            logger.exception(
                "Failed to load tally audit data", extra={"group_id": str(group_id)}
            )
            raise StorageError("Failed to audit tallies") from exc
        expected = project_tallies(votes)
        mismatches = []
        for photo in photos:
            projected = expected.get(photo.id, Tally())
            stored = Tally(votes_count=photo.votes_count, wins_count=photo.wins_count)
            if stored != projected:
                mismatches.append(
                    {
                        "photo_id": str(photo.id),
                        "stored": _serialize_tally(stored),
                        "expected": _serialize_tally(projected),
                    }
                )
        return {
            "group_id": str(group_id),
            "photos_checked": len(photos),
            "consistent": not mismatches,
            "mismatches": mismatches,
        }


def _serialize_vote(vote: Vote) -> dict[str, object]:
    return {
        "id": str(vote.id),
        "group_id": str(vote.group_id),
        "voter_id": str(vote.voter_id),
        "winner_photo_id": str(vote.winner_photo_id),
        "loser_photo_id": str(vote.loser_photo_id),
        "created_at": vote.created_at.isoformat() if vote.created_at else None,
    }


def _serialize_tally(tally: Tally) -> dict[str, int]:
    return {"votes_count": tally.votes_count, "wins_count": tally.wins_count}
