"""Supabase-backed vote log repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from faceoff_arena.domain.photos import Vote
from faceoff_arena.services.battles import VoteRepository

_VOTE_COLUMNS = "id, group_id, voter_id, winner_photo_id, loser_photo_id, created_at"


@dataclass
class SupabaseVoteRepository(VoteRepository):
    """Supabase implementation for the vote log.

    Photo counters are maintained by the `apply_vote_tally` trigger on the
    `votes` table, so inserting the vote is the only write.
    """

    client: Client

    def create_vote(
        self,
        group_id: UUID,
        voter_id: UUID,
        winner_photo_id: UUID,
        loser_photo_id: UUID,
    ) -> Vote:
        """Insert a vote row and return it."""
        response = (
            self.client.table("votes")
            .insert(
                {
                    "group_id": str(group_id),
                    "voter_id": str(voter_id),
                    "winner_photo_id": str(winner_photo_id),
                    "loser_photo_id": str(loser_photo_id),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record vote")
        return _parse_vote(response.data[0])

    def list_group_votes(self, group_id: UUID) -> list[Vote]:
        """Return the vote log of a group in insertion order."""
        response = (
            self.client.table("votes")
            .select(_VOTE_COLUMNS)
            .eq("group_id", str(group_id))
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_vote(row) for row in response.data or []]

    def list_recent_votes(self, limit: int) -> list[Vote]:
        """Return the most recent votes."""
        response = (
            self.client.table("votes")
            .select(_VOTE_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_vote(row) for row in response.data or []]


def _parse_vote(row: dict[str, object]) -> Vote:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Vote(
        id=UUID(row["id"]),
        group_id=UUID(row["group_id"]),
        voter_id=UUID(row["voter_id"]),
        winner_photo_id=UUID(row["winner_photo_id"]),
        loser_photo_id=UUID(row["loser_photo_id"]),
        created_at=created_at,
    )
