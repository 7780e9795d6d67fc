"""Group directory and creation."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from faceoff_arena.domain.groups import Group, GroupDirectory
from faceoff_arena.services.errors import StorageError

logger = logging.getLogger(__name__)


class GroupRepository(Protocol):
    """Persistence interface for groups and their members."""

    def list_visible_groups(self, profile_id: UUID) -> list[Group]:
        """Return public groups and groups the profile belongs to."""

    def create_group(
        self,
        name: str,
        description: str | None,
        is_public: bool,
        created_by: UUID,
    ) -> Group:
        """Create a group row and return it."""

    def add_member(self, group_id: UUID, profile_id: UUID, is_admin: bool) -> None:
        """Add a profile to a group."""

    def delete_group(self, group_id: UUID) -> None:
        """Remove a group row."""


class InvalidGroupError(ValueError):
    """Group details failed validation."""


@dataclass
class GroupService:
    """Application service for the group directory."""

    repository: GroupRepository

    def list_groups(self, profile_id: UUID, query: str | None = None) -> GroupDirectory:
        """Return the profile's groups and discoverable public groups."""
        try:
            groups = self.repository.list_visible_groups(profile_id)
        except Exception as exc:
            logger.exception(
                "Failed to load groups", extra={"profile_id": str(profile_id)}
            )
            raise StorageError("Failed to load groups") from exc
        if query:
            groups = [group for group in groups if group.matches(query)]
        return GroupDirectory(
            my_groups=[group for group in groups if group.is_member],
            discover=[
                group for group in groups if group.is_public and not group.is_member
            ],
        )

    def create_group(
        self,
        profile_id: UUID,
        name: str,
        description: str | None = None,
        is_public: bool = True,
    ) -> Group:
        """Create a group with the creator as its admin."""
        cleaned_name = name.strip()
        if not cleaned_name:
            raise InvalidGroupError("Group name is required")
        cleaned_description = (description or "").strip() or None
        try:
            group = self.repository.create_group(
                name=cleaned_name,
                description=cleaned_description,
                is_public=is_public,
                created_by=profile_id,
            )
        except Exception as exc:
            logger.exception(
                "Failed to create group", extra={"profile_id": str(profile_id)}
            )
            raise StorageError("Failed to create group") from exc
        try:
            self.repository.add_member(group.id, profile_id, is_admin=True)
        except Exception as exc:
            logger.exception(
                "Failed to add group creator as admin",
                extra={"group_id": str(group.id), "profile_id": str(profile_id)},
            )
            self._discard_group(group.id)
            raise StorageError("Failed to create group") from exc
        return Group(
            id=group.id,
            name=group.name,
            description=group.description,
            is_public=group.is_public,
            invite_code=group.invite_code,
            created_at=group.created_at,
            member_count=1,
            is_member=True,
            is_admin=True,
        )

    def _discard_group(self, group_id: UUID) -> None:
        # Every stored group has an admin member.
        try:
            self.repository.delete_group(group_id)
        except Exception:
            logger.exception(
                "Failed to remove group without admin",
                extra={"group_id": str(group_id)},
            )
