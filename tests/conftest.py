"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from faceoff_arena.config import Settings
from faceoff_arena.containers import AppContainer
from faceoff_arena.domain.groups import Group
from faceoff_arena.domain.photos import Photo, Vote
from faceoff_arena.services.admin import AdminService
from faceoff_arena.services.battles import (
    BattleService,
    PhotoRepository,
    VoteRepository,
)
from faceoff_arena.services.groups import GroupRepository, GroupService
from faceoff_arena.services.sessions import BattleSessionRegistry
from faceoff_arena.services.stats import StatsService

GROUP_ID = UUID("00000000-0000-0000-0000-0000000000a1")
VOTER_ID = UUID("00000000-0000-0000-0000-0000000000b1")


def make_photo(group_id: UUID = GROUP_ID, **overrides: object) -> Photo:
    """Build a photo with sensible defaults."""
    photo_id = overrides.pop("id", None) or uuid4()
    values: dict[str, object] = {
        "id": photo_id,
        "group_id": group_id,
        "owner_id": uuid4(),
        "image_url": f"https://cdn.example.com/{photo_id}.jpg",
    }
    values.update(overrides)
    return Photo(**values)


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[UUID, Photo] = field(default_factory=dict)
    error: Exception | None = None
    fetches: list[tuple[UUID, int]] = field(default_factory=list)

    def add(self, *photos: Photo) -> None:
        for photo in photos:
            self.photos[photo.id] = photo

    def list_candidates(self, group_id: UUID, limit: int) -> list[Photo]:
        self.fetches.append((group_id, limit))
        if self.error is not None:
            raise self.error
        return [photo for photo in self.photos.values() if photo.group_id == group_id][
            :limit
        ]

    def list_group_photos(self, group_id: UUID) -> list[Photo]:
        if self.error is not None:
            raise self.error
        return [photo for photo in self.photos.values() if photo.group_id == group_id]


@dataclass
class InMemoryVoteRepository(VoteRepository):
    """In-memory vote log that updates counters like the database trigger."""

    photo_repository: InMemoryPhotoRepository
    votes: list[Vote] = field(default_factory=list)
    error: Exception | None = None

    def create_vote(
        self,
        group_id: UUID,
        voter_id: UUID,
        winner_photo_id: UUID,
        loser_photo_id: UUID,
    ) -> Vote:
        if self.error is not None:
            raise self.error
        vote = Vote(
            id=uuid4(),
            group_id=group_id,
            voter_id=voter_id,
            winner_photo_id=winner_photo_id,
            loser_photo_id=loser_photo_id,
            created_at=datetime.now(tz=UTC),
        )
        photos = self.photo_repository.photos
        winner = photos[winner_photo_id]
        loser = photos[loser_photo_id]
        photos[winner.id] = replace(
            winner,
            votes_count=winner.votes_count + 1,
            wins_count=winner.wins_count + 1,
        )
        photos[loser.id] = replace(loser, votes_count=loser.votes_count + 1)
        self.votes.append(vote)
        return vote

    def list_group_votes(self, group_id: UUID) -> list[Vote]:
        return [vote for vote in self.votes if vote.group_id == group_id]

    def list_recent_votes(self, limit: int) -> list[Vote]:
        return list(reversed(self.votes))[:limit]


@dataclass
class InMemoryGroupRepository(GroupRepository):
    """In-memory group repository for tests."""

    groups: dict[UUID, dict[str, object]] = field(default_factory=dict)
    members: dict[UUID, dict[UUID, bool]] = field(default_factory=dict)
    error: Exception | None = None
    member_error: Exception | None = None

    def add_group(
        self,
        name: str,
        description: str | None = None,
        is_public: bool = True,
        members: dict[UUID, bool] | None = None,
    ) -> UUID:
        group_id = uuid4()
        self.groups[group_id] = {
            "name": name,
            "description": description,
            "is_public": is_public,
            "invite_code": None if is_public else "INVITE42",
        }
        self.members[group_id] = dict(members or {})
        return group_id

    def list_visible_groups(self, profile_id: UUID) -> list[Group]:
        if self.error is not None:
            raise self.error
        groups = []
        for group_id, row in self.groups.items():
            members = self.members.get(group_id, {})
            group = Group(
                id=group_id,
                name=str(row["name"]),
                description=row["description"],
                is_public=bool(row["is_public"]),
                invite_code=row["invite_code"],
                created_at=None,
                member_count=len(members),
                is_member=profile_id in members,
                is_admin=members.get(profile_id, False),
            )
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
        if self.error is not None:
            raise self.error
        group_id = uuid4()
        self.groups[group_id] = {
            "name": name,
            "description": description,
            "is_public": is_public,
            "invite_code": None,
        }
        self.members[group_id] = {}
        return Group(
            id=group_id,
            name=name,
            description=description,
            is_public=is_public,
            invite_code=None,
            created_at=datetime.now(tz=UTC),
        )

    def add_member(self, group_id: UUID, profile_id: UUID, is_admin: bool) -> None:
        if self.member_error is not None:
            raise self.member_error
        self.members[group_id][profile_id] = is_admin

    def delete_group(self, group_id: UUID) -> None:
        self.groups.pop(group_id, None)
        self.members.pop(group_id, None)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        admin_token="admin-token",
        next_battle_delay_seconds=0,
        environment="test",
    )


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def vote_repository(photo_repository: InMemoryPhotoRepository) -> InMemoryVoteRepository:
    return InMemoryVoteRepository(photo_repository)


@pytest.fixture
def group_repository() -> InMemoryGroupRepository:
    return InMemoryGroupRepository()


@pytest.fixture
def container(
    settings: Settings,
    photo_repository: InMemoryPhotoRepository,
    vote_repository: InMemoryVoteRepository,
    group_repository: InMemoryGroupRepository,
) -> AppContainer:
    battle_service = BattleService(
        photo_repository=photo_repository,
        vote_repository=vote_repository,
        pool_limit=settings.candidate_pool_limit,
    )
    session_registry = BattleSessionRegistry(
        battle_service=battle_service,
        next_battle_delay_seconds=settings.next_battle_delay_seconds,
        show_debug=settings.show_debug_errors,
        idle_timeout_seconds=settings.session_idle_timeout_seconds,
    )

    async def close_resources() -> None:
        session_registry.close_all()

    return AppContainer(
        settings=settings,
        battle_service=battle_service,
        session_registry=session_registry,
        group_service=GroupService(group_repository),
        stats_service=StatsService(photo_repository),
        admin_service=AdminService(
            photo_repository=photo_repository,
            vote_repository=vote_repository,
        ),
        close_resources=close_resources,
    )
