"""Domain models for battle sessions."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from faceoff_arena.domain.photos import BattlePair


class BattleState(StrEnum):
    """States of a viewer's battle session."""

    LOADING = "LOADING"
    BATTLE_READY = "BATTLE_READY"
    VOTING = "VOTING"
    ERROR = "ERROR"
    EMPTY = "EMPTY"


@dataclass(frozen=True)
class Notification:
    """A user-facing message about the last action."""

    title: str
    description: str
    variant: str = "default"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of a battle session."""

    id: UUID
    group_id: UUID
    voter_id: UUID
    state: BattleState
    pair: BattlePair | None
    notification: Notification | None
    can_vote: bool
