"""Battle session state machine."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from faceoff_arena.domain.photos import BattlePair, EmptyPool, Vote
from faceoff_arena.domain.sessions import BattleState, Notification, SessionSnapshot
from faceoff_arena.services.battles import (
    BattleError,
    BattleService,
    CandidateFetchError,
    InvalidVoteError,
    VoteInProgressError,
    VoteWriteError,
)

logger = logging.getLogger(__name__)

DEFAULT_NEXT_BATTLE_DELAY_SECONDS = 1.0
DEFAULT_IDLE_TIMEOUT_SECONDS = 1800.0
_VOTABLE_STATES = {BattleState.BATTLE_READY, BattleState.ERROR}


class SessionClosedError(BattleError):
    """The session was torn down."""


@dataclass
class BattleSession:
    """Owns the current pair and voting state for one viewer of a group."""

    group_id: UUID
    voter_id: UUID
    battle_service: BattleService
    next_battle_delay_seconds: float = DEFAULT_NEXT_BATTLE_DELAY_SECONDS
    show_debug: bool = False
    id: UUID = field(default_factory=uuid4)
    state: BattleState = BattleState.LOADING
    pair: BattlePair | None = None
    notification: Notification | None = None
    closed: bool = False
    _generation: int = field(default=0, repr=False)
    _vote_in_flight: bool = field(default=False, repr=False)
    # Set once the displayed pair has a recorded vote.
    _pair_decided: bool = field(default=False, repr=False)
    _next_round: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def can_vote(self) -> bool:
        """Return true when the vote controls should be enabled."""
        return (
            not self.closed
            and self.pair is not None
            and not self._pair_decided
            and self.state in _VOTABLE_STATES
        )

    def snapshot(self) -> SessionSnapshot:
        """Return the current state as an immutable value."""
        return SessionSnapshot(
            id=self.id,
            group_id=self.group_id,
            voter_id=self.voter_id,
            state=self.state,
            pair=self.pair,
            notification=self.notification,
            can_vote=self.can_vote,
        )

    async def load(self) -> SessionSnapshot:
        """Fetch a fresh pool and show a new pair."""
        self._ensure_open()
        await self._load()
        return self.snapshot()

    async def refresh(self) -> SessionSnapshot:
        """Skip to the next battle at the viewer's request.

        A round already scheduled after a vote is replaced by this one.
        """
        self._ensure_open()
        if self._vote_in_flight:
            raise VoteInProgressError("Wait for the current vote to finish")
        self._cancel_next_round()
        await self._load()
        return self.snapshot()

    async def vote(self, winner_photo_id: UUID) -> Vote | None:
        """Record the viewer's choice for the displayed pair.

        Returns the stored vote, or None when the write failed. Failures keep
        the current pair and re-enable voting so the viewer can retry.
        """
        self._ensure_open()
        if self._vote_in_flight:
            raise VoteInProgressError("A vote is already being recorded")
        if self._pair_decided and self._round_pending():
            raise VoteInProgressError("The next battle is on its way")
        if not self.can_vote or self.pair is None:
            raise InvalidVoteError("No battle is available to vote on")
        loser = self.pair.opponent_of(winner_photo_id)
        if loser is None:
            raise InvalidVoteError("Photo is not part of the current battle")

        self.state = BattleState.VOTING
        self._vote_in_flight = True
        try:
            vote = await self.battle_service.record_vote(
                group_id=self.group_id,
                voter_id=self.voter_id,
                winner_photo_id=winner_photo_id,
                loser_photo_id=loser.id,
            )
        except VoteWriteError as exc:
            if self.closed:
                return None
            self.state = BattleState.ERROR
            self.notification = self._failure("Failed to record vote", exc)
            return None
        finally:
            self._vote_in_flight = False

        if self.closed:
            return vote
        self._pair_decided = True
        self.notification = Notification(
            title="Vote recorded!",
            description="Your battle choice has been saved",
        )
        self._next_round = asyncio.create_task(self._advance())
        return vote

    async def wait_for_next_round(self) -> None:
        """Wait until the round scheduled after a vote has loaded."""
        task = self._next_round
        if task is not None and not task.done():
            await asyncio.shield(task)

    def close(self) -> None:
        """Tear the session down; late results are ignored."""
        self.closed = True
        self._generation += 1
        self._cancel_next_round()

    async def _advance(self) -> None:
        try:
            await asyncio.sleep(self.next_battle_delay_seconds)
            await self._load()
        finally:
            if self._next_round is asyncio.current_task():
                self._next_round = None

    async def _load(self) -> None:
        self._generation += 1
        generation = self._generation
        self.state = BattleState.LOADING
        try:
            result = await self.battle_service.next_battle(self.group_id)
        except CandidateFetchError as exc:
            if self._is_stale(generation):
                return
            if self._pair_decided:
                self.pair = None
                self._pair_decided = False
            self.state = BattleState.ERROR
            self.notification = self._failure("Failed to load photos", exc)
            return
        if self._is_stale(generation):
            return
        self._pair_decided = False
        if isinstance(result, EmptyPool):
            self.pair = None
            self.state = BattleState.EMPTY
            self.notification = Notification(
                title="Not enough photos",
                description="This group needs at least 2 photos to start battles!",
                variant="destructive",
            )
            return
        self.pair = result
        self.state = BattleState.BATTLE_READY
        self.notification = None

    def _round_pending(self) -> bool:
        return self._next_round is not None and not self._next_round.done()

    def _cancel_next_round(self) -> None:
        task, self._next_round = self._next_round, None
        if task is not None and not task.done():
            task.cancel()

    def _is_stale(self, generation: int) -> bool:
        return self.closed or generation != self._generation

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosedError("Battle session is closed")

    def _failure(self, title: str, exc: Exception) -> Notification:
        description = "Please try again."
        if self.show_debug:
            cause = exc.__cause__ or exc
            detail = f"{type(cause).__name__}: {cause}".strip()
            description = f"{description} (debug: {detail})"
        return Notification(title=title, description=description, variant="destructive")


@dataclass
class BattleSessionRegistry:
    """In-process owner of live battle sessions.

    Sessions untouched for `idle_timeout_seconds` are closed and dropped the
    next time the registry is used, so abandoned viewers don't accumulate.
    """

    battle_service: BattleService
    next_battle_delay_seconds: float = DEFAULT_NEXT_BATTLE_DELAY_SECONDS
    show_debug: bool = False
    idle_timeout_seconds: float = DEFAULT_IDLE_TIMEOUT_SECONDS
    clock: Callable[[], float] = time.monotonic
    sessions: dict[UUID, BattleSession] = field(default_factory=dict)
    _last_seen: dict[UUID, float] = field(default_factory=dict, repr=False)

    async def open(self, group_id: UUID, voter_id: UUID) -> BattleSession:
        """Start a session and load its first pair."""
        self.sweep_idle()
        session = BattleSession(
            group_id=group_id,
            voter_id=voter_id,
            battle_service=self.battle_service,
            next_battle_delay_seconds=self.next_battle_delay_seconds,
            show_debug=self.show_debug,
        )
        self.sessions[session.id] = session
        self._last_seen[session.id] = self.clock()
        logger.info(
            "Battle session opened",
            extra={"session_id": str(session.id), "group_id": str(group_id)},
        )
        await session.load()
        return session

    def get(self, session_id: UUID) -> BattleSession | None:
        """Return a live session by id, if present, and mark it active."""
        self.sweep_idle()
        session = self.sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self.clock()
        return session

    def list_sessions(self) -> list[BattleSession]:
        """Return the sessions that are still live."""
        self.sweep_idle()
        return list(self.sessions.values())

    def sweep_idle(self) -> int:
        """Close sessions idle past the timeout; return how many were dropped."""
        cutoff = self.clock() - self.idle_timeout_seconds
        expired = [
            session_id
            for session_id, seen in self._last_seen.items()
            if seen <= cutoff
        ]
        for session_id in expired:
            self.close(session_id)
        if expired:
            logger.info("Expired idle battle sessions", extra={"count": len(expired)})
        return len(expired)

    def close(self, session_id: UUID) -> bool:
        """Close and forget a session. Returns false for unknown ids."""
        self._last_seen.pop(session_id, None)
        session = self.sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        """Close every live session."""
        for session_id in list(self.sessions):
            self.close(session_id)
