"""Domain models for groups."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Group:
    """A voting arena as seen by one profile."""

    id: UUID
    name: str
    description: str | None
    is_public: bool
    invite_code: str | None
    created_at: datetime | None
    member_count: int = 0
    is_member: bool = False
    is_admin: bool = False

    def matches(self, query: str) -> bool:
        """Return true when the name or description contains the query."""
        needle = query.lower()
        if needle in self.name.lower():
            return True
        return bool(self.description) and needle in self.description.lower()


@dataclass(frozen=True)
class GroupDirectory:
    """Groups split into the viewer's own and discoverable ones."""

    my_groups: list[Group]
    discover: list[Group]
