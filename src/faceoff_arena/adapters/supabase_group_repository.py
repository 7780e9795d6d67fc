"""Supabase-backed group repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from faceoff_arena.domain.groups import Group
from faceoff_arena.services.groups import GroupRepository

_ACTIVE_STATUS = "active"


@dataclass
class SupabaseGroupRepository(GroupRepository):
    """Supabase implementation for groups and memberships."""

    client: Client

    def list_visible_groups(self, profile_id: UUID) -> list[Group]:
        """Return public groups and groups the profile actively belongs to."""
        response = (
            self.client.table("groups")
            .select(
                "id, name, description, is_public, invite_code, created_at, "
                "group_members(user_id, is_admin, status)"
            )
            .order("created_at", desc=True)
            .execute()
        )
        groups = []
        for row in response.data or []:
            group = _parse_group(row, profile_id)
            if group.is_public or group.is_member:
                groups.append(group)
        return groups

    def create_group(
        self,
        name: str,
        description: str | None,
        is_public: bool,
        created_by: UUID,
    ) -> Group:
        """Create a group row and return it."""
        response = (
            self.client.table("groups")
            .insert(
                {
                    "name": name,
                    "description": description,
                    "is_public": is_public,
                    "created_by": str(created_by),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create group")
        return _parse_group(response.data[0], created_by)

    def add_member(self, group_id: UUID, profile_id: UUID, is_admin: bool) -> None:
        """Add a profile to a group."""
        response = (
            self.client.table("group_members")
            .insert(
                {
                    "group_id": str(group_id),
                    "user_id": str(profile_id),
                    "is_admin": is_admin,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add group member")

    def delete_group(self, group_id: UUID) -> None:
        """Remove a group row."""
        self.client.table("groups").delete().eq("id", str(group_id)).execute()


def _parse_group(row: dict[str, object], profile_id: UUID) -> Group:
    """Parse a group row, resolving membership for the viewing profile."""
    members = [
        member
        for member in row.get("group_members") or []
        if member.get("status", _ACTIVE_STATUS) == _ACTIVE_STATUS
    ]
    membership = next(
        (member for member in members if member.get("user_id") == str(profile_id)),
        None,
    )
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Group(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        description=row.get("description"),
        is_public=bool(row.get("is_public", False)),
        invite_code=row.get("invite_code"),
        created_at=created_at,
        member_count=len(members),
        is_member=membership is not None,
        is_admin=bool(membership and membership.get("is_admin")),
    )
