"""Supabase-backed photo repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from faceoff_arena.domain.photos import Photo
from faceoff_arena.services.battles import PhotoRepository

_PHOTO_COLUMNS = (
    "id, group_id, user_id, title, image_url, votes_count, wins_count, "
    "profiles!photos_user_id_fkey(display_name)"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for group photo reads."""

    client: Client

    def list_candidates(self, group_id: UUID, limit: int) -> list[Photo]:
        """Return up to `limit` photos of the group."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("group_id", str(group_id))
            .limit(limit)
            .execute()
        )
        return [_parse_photo(row) for row in response.data or []]

    def list_group_photos(self, group_id: UUID) -> list[Photo]:
        """Return every photo of the group, most wins first."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("group_id", str(group_id))
            .order("wins_count", desc=True)
            .execute()
        )
        return [_parse_photo(row) for row in response.data or []]


def _parse_photo(row: dict[str, object]) -> Photo:
    """Parse a photo row into a domain model."""
    profile = row.get("profiles")
    display_name = profile.get("display_name") if isinstance(profile, dict) else None
    return Photo(
        id=UUID(row["id"]),
        group_id=UUID(row["group_id"]),
        owner_id=UUID(row["user_id"]),
        image_url=str(row.get("image_url") or ""),
        votes_count=int(row.get("votes_count") or 0),
        wins_count=int(row.get("wins_count") or 0),
        title=row.get("title"),
        owner_display_name=display_name,
    )
