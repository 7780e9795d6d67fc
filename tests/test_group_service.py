"""Tests for the group service."""

from uuid import uuid4

import pytest

from faceoff_arena.services.errors import StorageError
from faceoff_arena.services.groups import GroupService, InvalidGroupError
from tests.conftest import InMemoryGroupRepository


def test_list_groups_partitions_membership() -> None:
    repository = InMemoryGroupRepository()
    profile_id = uuid4()
    mine = repository.add_group("Street Shots", members={profile_id: True})
    private_mine = repository.add_group(
        "Family", is_public=False, members={profile_id: False}
    )
    public_other = repository.add_group("Landscapes", members={uuid4(): True})
    repository.add_group("Secret Club", is_public=False, members={uuid4(): True})

    directory = GroupService(repository).list_groups(profile_id)

    assert {group.id for group in directory.my_groups} == {mine, private_mine}
    assert [group.id for group in directory.discover] == [public_other]
    admin_group = next(group for group in directory.my_groups if group.id == mine)
    assert admin_group.is_admin is True


def test_list_groups_search_is_case_insensitive() -> None:
    repository = InMemoryGroupRepository()
    profile_id = uuid4()
    repository.add_group("Sunset Battles", description="Golden hour only")
    repository.add_group("Pets", description="Cats and dogs at SUNSET")
    repository.add_group("Food")

    directory = GroupService(repository).list_groups(profile_id, "sunset")

    assert sorted(group.name for group in directory.discover) == [
        "Pets",
        "Sunset Battles",
    ]


def test_create_group_adds_creator_as_admin() -> None:
    repository = InMemoryGroupRepository()
    profile_id = uuid4()

    group = GroupService(repository).create_group(
        profile_id, "  Night Sky  ", description="   ", is_public=False
    )

    assert group.name == "Night Sky"
    assert group.description is None
    assert group.is_admin is True
    assert group.member_count == 1
    assert repository.members[group.id] == {profile_id: True}


def test_create_group_requires_name() -> None:
    repository = InMemoryGroupRepository()

    with pytest.raises(InvalidGroupError):
        GroupService(repository).create_group(uuid4(), "   ")

    assert repository.groups == {}


def test_list_groups_reports_storage_failure() -> None:
    repository = InMemoryGroupRepository(error=ConnectionError("offline"))

    with pytest.raises(StorageError, match="Failed to load groups"):
        GroupService(repository).list_groups(uuid4())


def test_create_group_reports_storage_failure() -> None:
    repository = InMemoryGroupRepository(error=ConnectionError("offline"))

    with pytest.raises(StorageError, match="Failed to create group"):
        GroupService(repository).create_group(uuid4(), "Pets")


def test_create_group_removes_group_when_admin_is_not_added() -> None:
    repository = InMemoryGroupRepository(member_error=RuntimeError("no row"))

    with pytest.raises(StorageError, match="Failed to create group") as excinfo:
        GroupService(repository).create_group(uuid4(), "Pets")

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert repository.groups == {}
    assert repository.members == {}
